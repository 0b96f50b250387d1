"""Data-quality checks for family tree records and layouts."""

import networkx as nx

from graph import parent_graph
from models import Layout
from store import RecordStore


def validate_graph(G: nx.DiGraph) -> list[str]:
    """
    Validate the family tree graph for:
    - Cycles in parent-child relationships
    - Spouse links listed by only one side

    Returns a list of warning messages.
    """
    warnings: list[str] = []

    # Check for cycles
    try:
        cycle = nx.find_cycle(parent_graph(G), orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass  # No cycle found, which is good

    for u, v, data in G.edges(data=True):
        if data.get("relationship_type") != "SPOUSE_OF":
            continue
        if not G.has_edge(v, u):
            warnings.append(
                f"One-sided marriage: {G.nodes[u].get('person_name')} lists "
                f"{G.nodes[v].get('person_name')} as spouse but not the reverse"
            )

    return warnings


def validate_records(store: RecordStore) -> list[str]:
    """Report parent and spouse ids that do not match anyone in the store."""
    warnings: list[str] = []

    for p in store:
        for label, parent_id in (("father", p.father_id), ("mother", p.mother_id)):
            if parent_id and parent_id not in store:
                warnings.append(f"Missing {label}: {p.name} ({p.id}) refers to unknown id {parent_id}")
        for sid in p.spouses:
            if sid not in store:
                warnings.append(f"Missing spouse: {p.name} ({p.id}) refers to unknown id {sid}")

    return warnings


def validate_layout(store: RecordStore, layout: Layout) -> list[str]:
    """Report people that the layout could not place."""
    warnings: list[str] = []

    for p in store:
        if layout.is_visible(p.id):
            continue
        if p.id in layout.owners:
            warnings.append(f"Hidden: {p.name} ({p.id}) was claimed but not placed")
        else:
            warnings.append(f"Unreachable: {p.name} ({p.id}) is not connected to any root")

    return warnings
