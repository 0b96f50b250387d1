"""NetworkX graph building and operations."""

import itertools

import networkx as nx

from store import RecordStore


def build_graph(store: RecordStore) -> nx.DiGraph:
    """
    Build a NetworkX directed graph from the record store.

    PARENT_OF edges point parent -> child. SPOUSE_OF edges point from each
    person to every spouse they list, with a `former` flag. References to ids
    that are not in the store are left out.
    """
    G = nx.DiGraph()

    # Add nodes (persons)
    # Note: use 'person_name' instead of 'name' to avoid conflict with pydot
    for p in store:
        G.add_node(p.id, person_name=p.name, role=p.role, gender=p.gender)

    # Add edges (relationships)
    for r in store.relationships():
        if r.relationship_type == "SPOUSE_OF":
            G.add_edge(r.person1_id, r.person2_id, relationship_type=r.relationship_type, former=r.former)
        else:
            G.add_edge(r.person1_id, r.person2_id, relationship_type=r.relationship_type)

    return G


def parent_graph(G: nx.DiGraph) -> nx.DiGraph:
    """Subgraph view containing only PARENT_OF edges."""
    parent_edges = [
        (u, v) for u, v, d in G.edges(data=True) if d.get("relationship_type") == "PARENT_OF"
    ]
    H = nx.DiGraph(parent_edges)
    H.add_nodes_from(G.nodes(data=True))
    return H


def connected_families(G: nx.DiGraph) -> list[set[int]]:
    """Groups of people linked by any chain of parent or spouse edges."""
    return [set(c) for c in nx.weakly_connected_components(G)]


def build_union_layout_graph(G: nx.DiGraph) -> nx.DiGraph:
    """
    Build a layout graph using the union-node model.

    Creates "family nodes" (union nodes) that connect spouse pairs to their
    children, so siblings hang from one connector point:
    - spouse pairs get a family node carrying a `former` flag
    - children of both spouses hang from that pair's family node
    - children with one recorded parent, or parents who are not listed as
      spouses, hang from a single-parent family node

    Args:
        G: Graph from build_graph with PARENT_OF and SPOUSE_OF edges

    Returns:
        A new graph with family nodes suitable for connector drawing
    """
    H = nx.DiGraph()

    # Copy person nodes with their attributes
    for n, data in G.nodes(data=True):
        H.add_node(n, node_type="person", **data)

    # Collect spouse pairs (avoid duplicates by sorting); former if either side says so
    spouse_pairs: dict[tuple[int, int], bool] = {}
    for u, v, edata in G.edges(data=True):
        if edata.get("relationship_type") == "SPOUSE_OF":
            a, b = sorted((u, v))
            spouse_pairs[(a, b)] = spouse_pairs.get((a, b), False) or bool(edata.get("former"))

    # Map spouse pair -> family node id
    fam_for_pair: dict[tuple[int, int], str] = {}
    for (a, b), former in spouse_pairs.items():
        fam_id = f"FAM_{a}_{b}"
        fam_for_pair[(a, b)] = fam_id
        H.add_node(fam_id, node_type="family", spouses=(a, b), former=former)
        H.add_edge(a, fam_id, edge_type="spouse_to_family")
        H.add_edge(b, fam_id, edge_type="spouse_to_family")

    # Group parents by child
    parents_by_child: dict[int, list[int]] = {}
    for u, v, edata in G.edges(data=True):
        if edata.get("relationship_type") == "PARENT_OF":
            parents_by_child.setdefault(v, []).append(u)

    for child, parents in parents_by_child.items():
        parents = sorted(set(parents))
        fam_id = None

        if len(parents) >= 2:
            for pair in itertools.combinations(parents, 2):
                if pair in fam_for_pair:
                    fam_id = fam_for_pair[pair]
                    break

        # Otherwise each recorded parent gets a single-parent family node
        if fam_id is None:
            for parent in parents:
                single_id = f"FAM_{parent}"
                if single_id not in H:
                    H.add_node(single_id, node_type="family", spouses=(parent,), former=False)
                    H.add_edge(parent, single_id, edge_type="spouse_to_family")
                H.add_edge(single_id, child, edge_type="family_to_child")
            continue

        H.add_edge(fam_id, child, edge_type="family_to_child")

    return H
