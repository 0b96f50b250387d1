"""Partition people into disjoint clusters, one per canonical root."""

from collections import deque

from store import RecordStore


def is_canonical_root(store: RecordStore, generations: dict[int, int], person_id: int) -> bool:
    """
    A generation-0 person leads a cluster only if no spouse has a smaller id.

    This keeps a married root couple from starting two clusters: the spouse with
    the smaller id leads.
    """
    if generations.get(person_id) != 0:
        return False
    return all(person_id <= sid for sid in store.spouses_of(person_id))


def canonical_roots(store: RecordStore, generations: dict[int, int]) -> list[int]:
    """Canonical roots in store order."""
    return [p.id for p in store if is_canonical_root(store, generations, p.id)]


def claim_cluster(store: RecordStore, root_id: int, visited: set[int], owners: dict[int, int]):
    """Breadth-first claim of every spouse and child reachable from `root_id`."""
    visited.add(root_id)
    owners[root_id] = root_id

    queue = deque([root_id])
    while queue:
        current = queue.popleft()

        for sid in store.spouses_of(current):
            if sid not in visited:
                visited.add(sid)
                owners[sid] = root_id
                queue.append(sid)

        for kid_id in store.family_children(current):
            if kid_id not in visited:
                visited.add(kid_id)
                owners[kid_id] = root_id
                queue.append(kid_id)


def assign_ownership(store: RecordStore, generations: dict[int, int]) -> dict[int, int]:
    """
    Map each reachable person to the root of the cluster that owns it.

    Roots are processed in store order and the first root to reach a person
    keeps it. People no root reaches get no entry and are not drawn.
    """
    owners: dict[int, int] = {}
    visited: set[int] = set()

    for root_id in canonical_roots(store, generations):
        if root_id in visited:
            continue
        claim_cluster(store, root_id, visited, owners)

    return owners


def cluster_members(owners: dict[int, int], root_id: int) -> list[int]:
    return [person_id for person_id, owner in owners.items() if owner == root_id]
