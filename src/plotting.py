"""Rendering of computed family tree layouts."""

from pathlib import Path

import pydot
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle

from graph import build_graph, build_union_layout_graph
from models import Layout, LayoutConfig
from store import RecordStore

# Colors
COL_BG_CANVAS = "#fafafc"
COL_BOX_DEFAULT = "#ffffff"
COL_BOX_FEMALE = "#fff5f8"
COL_BOX_FOCUS = "#fffcdc"
COL_BOX_BORDER = "#b4b4b4"
COL_TEXT_NAME = "#1e1e1e"
COL_TEXT_ROLE = "#646464"
LINE_CHILD = "#b4b4b4"
LINE_SPOUSE = "#dc5050"

CHILD_DROP = 30  # how far below the spouse line children's connectors start
DPI = 100


def box_color(store: RecordStore, person_id: int, focus_id: int | None = None) -> str:
    if person_id == focus_id:
        return COL_BOX_FOCUS
    person = store.get(person_id)
    if person is not None and person.is_female:
        return COL_BOX_FEMALE
    return COL_BOX_DEFAULT


def orthogonal_line(x1: float, y1: float, x2: float, y2: float) -> tuple[list[float], list[float]]:
    """Down, across, down: the elbow connector from a drop point to a child."""
    mid_y = (y1 + y2) / 2
    return [x1, x1, x2, x2], [y1, mid_y, mid_y, y2]


def visible_families(store: RecordStore, layout: Layout):
    """Yield (family node id, data, visible children) for families whose parents are all visible."""
    H = build_union_layout_graph(build_graph(store))
    for fam_id, data in H.nodes(data=True):
        if data.get("node_type") != "family":
            continue
        if not all(layout.is_visible(s) for s in data["spouses"]):
            continue
        kids = [v for v in H.successors(fam_id) if layout.is_visible(v)]
        yield fam_id, data, kids


def family_anchor(spouses: tuple, layout: Layout, config: LayoutConfig) -> tuple[float, float]:
    """
    Point where a family's child connectors start, before the drop.

    A couple's anchor sits in the gap right of the leftmost partner's box; a
    single parent's anchor is the middle of their box.
    """
    w = config.box_width
    positions = [layout.position(s) for s in spouses]
    y_c = positions[0][1] + config.box_height / 2
    if len(positions) == 2:
        return min(x for x, _ in positions) + w + config.spouse_gap / 2, y_c
    return positions[0][0] + w / 2, y_c


def connector_segments(
    store: RecordStore, layout: Layout, config: LayoutConfig
) -> list[dict]:
    """
    Connector lines between visible people.

    Each segment is a dict with `kind` ("spouse" or "child"), `former` (spouse
    lines only) and `xs`/`ys` point lists in canvas coordinates. Connectors to
    hidden or missing people are never produced.
    """
    segments: list[dict] = []
    w = config.box_width
    h = config.box_height

    for _, data, kids in visible_families(store, layout):
        spouses = data["spouses"]
        drop_x, y_c = family_anchor(spouses, layout, config)

        if len(spouses) == 2:
            (ax, ay), (bx, by) = layout.position(spouses[0]), layout.position(spouses[1])
            xs = [ax + w, bx] if bx > ax else [ax, bx + w]
            segments.append(
                {"kind": "spouse", "former": data["former"], "xs": xs, "ys": [ay + h / 2, by + h / 2]}
            )
            if kids:
                segments.append(
                    {"kind": "child", "former": False, "xs": [drop_x, drop_x], "ys": [y_c, y_c + CHILD_DROP]}
                )

        for kid_id in kids:
            kx, ky = layout.position(kid_id)
            xs, ys = orthogonal_line(drop_x, y_c + CHILD_DROP, kx + w / 2, ky)
            segments.append({"kind": "child", "former": False, "xs": xs, "ys": ys})

    return segments


def _draw_legend(fig: Figure):
    ax = fig.add_axes([0.01, 0.01, 0.2, 0.12])
    ax.set_xlim(0, 360)
    ax.set_ylim(135, 0)
    ax.axis("off")
    ax.add_patch(Rectangle((0, 0), 360, 135, facecolor="white", edgecolor="#c8c8c8"))
    ax.text(20, 25, "Legend", fontsize=9, fontweight="bold", color="#282828", va="center")

    for i, (label, color) in enumerate(
        [("Male", COL_BOX_DEFAULT), ("Female", COL_BOX_FEMALE), ("Myself", COL_BOX_FOCUS)]
    ):
        y = 55 + i * 26
        ax.add_patch(Rectangle((20, y), 20, 16, facecolor=color, edgecolor=COL_BOX_BORDER))
        ax.text(50, y + 8, label, fontsize=7, va="center")

    for i, (label, color, style, width) in enumerate(
        [
            ("Spouse", LINE_SPOUSE, "-", 2),
            ("Ex-Spouse", LINE_SPOUSE, ":", 1),
            ("Child", LINE_CHILD, "-", 2),
        ]
    ):
        y = 63 + i * 26
        ax.plot([150, 175], [y, y], color=color, linestyle=style, linewidth=width)
        ax.text(185, y, label, fontsize=7, va="center")


def draw_layout(
    store: RecordStore,
    layout: Layout,
    config: LayoutConfig,
    title: str = "My Family Tree",
    focus_id: int | None = None,
    legend: bool = True,
) -> Figure:
    """
    Paint a layout onto a matplotlib Figure sized to the layout's canvas.

    Connectors are drawn first, boxes on top. Current spouses get a solid line,
    former spouses a dotted one. Only visible people are drawn.
    """
    fig = Figure(figsize=(layout.width / DPI, layout.height / DPI), dpi=DPI)
    fig.patch.set_facecolor(COL_BG_CANVAS)
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_xlim(0, layout.width)
    ax.set_ylim(layout.height, 0)  # canvas y grows downward
    ax.axis("off")

    ax.text(layout.width / 2, 40, title, fontsize=18, ha="center", va="center", color="#3c3c3c")

    for seg in connector_segments(store, layout, config):
        if seg["kind"] == "spouse":
            style, width = (":", 1) if seg["former"] else ("-", 2)
            ax.plot(seg["xs"], seg["ys"], color=LINE_SPOUSE, linestyle=style, linewidth=width, zorder=1)
        else:
            ax.plot(seg["xs"], seg["ys"], color=LINE_CHILD, linewidth=2, zorder=1)

    w = config.box_width
    h = config.box_height
    for p in store:
        pos = layout.position(p.id)
        if pos is None:
            continue
        x, y = pos
        # Shadow, box, text
        ax.add_patch(Rectangle((x + 4, y + 4), w, h, facecolor="#dcdcdc", edgecolor="none", zorder=2))
        ax.add_patch(
            Rectangle(
                (x, y), w, h, facecolor=box_color(store, p.id, focus_id), edgecolor=COL_BOX_BORDER, zorder=3
            )
        )
        ax.text(x + w / 2, y + 25, p.name, fontsize=10, fontweight="bold", ha="center", va="center",
                color=COL_TEXT_NAME, zorder=4)
        ax.text(x + w / 2, y + 52, p.role, fontsize=8, ha="center", va="center", color=COL_TEXT_ROLE,
                zorder=4)

    if legend:
        _draw_legend(fig)

    return fig


def plot_layout(
    store: RecordStore,
    layout: Layout,
    config: LayoutConfig,
    output_path: Path | None = None,
    **kwargs,
):
    """
    Render the layout to an image file, or display it when no path is given.

    Args:
        store: People to draw
        layout: Result of compute_layout for the same store
        config: Layout constants used to compute `layout`
        output_path: PNG, SVG or PDF path. If None, displays interactively.
    """
    fig = draw_layout(store, layout, config, **kwargs)

    if output_path:
        # Determine format from extension
        ext = output_path.suffix.lower().lstrip(".")
        if ext not in ("png", "svg", "pdf"):
            ext = "png"

        fig.savefig(str(output_path), format=ext, facecolor=fig.get_facecolor())
        print(f"Tree saved to {output_path}")
    else:
        # Save to temporary file and display
        import tempfile

        import matplotlib.image as mpimg
        import matplotlib.pyplot as plt

        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            fig.savefig(f.name, format="png", facecolor=fig.get_facecolor())
            img = mpimg.imread(f.name)
            plt.figure(figsize=(20, 16))
            plt.imshow(img)
            plt.axis("off")
            plt.tight_layout()
            plt.show()


def build_dot(store: RecordStore, layout: Layout, config: LayoutConfig) -> pydot.Dot:
    """
    Build a Graphviz graph with every visible person pinned to its layout position.

    Render with `neato -n` to keep positions. Graphviz y grows upward, so the
    canvas y is negated.
    """
    P = pydot.Dot(graph_type="digraph")
    P.set("layout", "neato")
    P.set("splines", "ortho")
    P.set("bgcolor", COL_BG_CANVAS)

    w = config.box_width
    h = config.box_height

    for p in store:
        pos = layout.position(p.id)
        if pos is None:
            continue
        x, y = pos
        P.add_node(
            pydot.Node(
                str(p.id),
                label=f"{p.name}\n{p.role}",
                shape="box",
                style="filled",
                fillcolor=box_color(store, p.id),
                color=COL_BOX_BORDER,
                fontsize="10",
                width=f"{w / 72:.3f}",
                height=f"{h / 72:.3f}",
                fixedsize="true",
                pos=f"{x + w / 2},{-(y + h / 2)}!",
            )
        )

    for fam_id, data, kids in visible_families(store, layout):
        spouses = data["spouses"]
        if len(spouses) == 1 and not kids:
            continue

        anchor_x, anchor_y = family_anchor(spouses, layout, config)
        P.add_node(
            pydot.Node(
                str(fam_id),
                shape="point",
                width="0.05",
                label="",
                pos=f"{anchor_x},{-(anchor_y + CHILD_DROP)}!",
            )
        )
        for s in spouses:
            P.add_edge(
                pydot.Edge(
                    str(s),
                    str(fam_id),
                    dir="none",
                    color=LINE_SPOUSE if len(spouses) == 2 else LINE_CHILD,
                    style="dotted" if data["former"] else "solid",
                )
            )
        for kid_id in kids:
            P.add_edge(pydot.Edge(str(fam_id), str(kid_id), color=LINE_CHILD))

    return P


def export_dot(store: RecordStore, layout: Layout, config: LayoutConfig, output_path: Path):
    """Write the pinned Graphviz graph. `.dot`/`.gv` write DOT source; other extensions render."""
    P = build_dot(store, layout, config)
    ext = output_path.suffix.lower().lstrip(".")
    fmt = "raw" if ext in ("dot", "gv", "") else ext
    P.write(str(output_path), format=fmt)
    print(f"Graph saved to {output_path}")
