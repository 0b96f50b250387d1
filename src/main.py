"""
1) Parse the family records (CSV or GEDCOM) into memory.
2) Assign generations, split the family graph into one tree per root and lay it out.
3) Validate the records for missing references, cycles and unreachable people.
4) Render the layout and write the requested exports.
5) Optionally keep watching the input file and redo all of the above on change.
"""

import argparse
import logging
from dataclasses import fields
from pathlib import Path

from database import export_database
from graph import build_graph, connected_families
from models import LayoutConfig
from plotting import export_dot, plot_layout
from session import Snapshot, TreeSession
from validation import validate_graph, validate_layout, validate_records


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="famlayout", description="Lay out a family tree and render it."
    )
    parser.add_argument("input", type=Path, help="Family CSV or GEDCOM (.ged) file.")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("family_tree.png"),
        help="Image to write (png, svg or pdf; default: family_tree.png).",
    )
    parser.add_argument("--dot", type=Path, help="Also write a Graphviz file with pinned positions.")
    parser.add_argument("--db", type=Path, help="Also write a SQLite database with the layout.")
    parser.add_argument("--focus", type=int, help="Person id to highlight.")
    parser.add_argument("--title", default="My Family Tree", help="Title drawn above the tree.")
    parser.add_argument("--watch", action="store_true", help="Re-render whenever the input changes.")
    parser.add_argument("--interval", type=float, default=1.0, help="Watch poll interval in seconds.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped rows and layout details.")

    # One option per layout constant, e.g. --box-width
    defaults = LayoutConfig()
    for f in fields(LayoutConfig):
        parser.add_argument(
            "--" + f.name.replace("_", "-"),
            type=int,
            default=getattr(defaults, f.name),
            help=f"Layout {f.name.replace('_', ' ')} (default: {getattr(defaults, f.name)}).",
        )
    return parser


def config_from_args(args: argparse.Namespace) -> LayoutConfig:
    return LayoutConfig(**{f.name: getattr(args, f.name) for f in fields(LayoutConfig)})


def report(snapshot: Snapshot):
    store, layout = snapshot.store, snapshot.layout

    print("Building NetworkX graph...")
    G = build_graph(store)
    print(f"  Graph has {G.number_of_nodes()} nodes and {G.number_of_edges()} edges")
    print(f"  {len(connected_families(G))} family groups, {len(layout.roots)} trees laid out")

    print("Validating records...")
    warnings = validate_records(store) + validate_graph(G) + validate_layout(store, layout)
    if warnings:
        print(f"  Found {len(warnings)} validation warnings:")
        for w in warnings[:10]:  # Show first 10 warnings
            print(f"    - {w}")
        if len(warnings) > 10:
            print(f"    ... and {len(warnings) - 10} more")
    else:
        print("  No validation issues found")


def render(snapshot: Snapshot, config: LayoutConfig, args: argparse.Namespace) -> bool:
    """Report on and write out one snapshot. Returns False when there is nothing to draw."""
    store, layout = snapshot.store, snapshot.layout
    print(f"  Found {len(store)} people")
    if not len(store):
        print("No data available: the input is missing, empty or has no valid rows")
        return False

    report(snapshot)

    print(f"Plotting tree to: {args.output} ({layout.width}x{layout.height})")
    plot_layout(store, layout, config, args.output, title=args.title, focus_id=args.focus)

    if args.dot:
        export_dot(store, layout, config, args.dot)

    if args.db:
        print(f"Storing layout in SQLite: {args.db}")
        export_database(args.db, store, layout)

    return True


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = config_from_args(args)

    if not args.input.exists():
        print(f"Input file not found: {args.input}")
        return 1

    session = TreeSession(args.input, config)
    print(f"Parsing family records: {args.input}")
    ok = render(session.reload(), config, args)

    if args.watch:
        print(f"Watching {args.input} for changes (Ctrl+C to stop)...")
        try:
            session.watch(lambda snapshot: render(snapshot, config, args), interval=args.interval)
        except KeyboardInterrupt:
            pass
        print("Done!")
        return 0

    print("Done!")
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
