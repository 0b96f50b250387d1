"""Generation (depth) assignment by fixed-point relaxation."""

import logging

from models import Person
from store import RecordStore

logger = logging.getLogger(__name__)


def has_known_parent(store: RecordStore, person: Person) -> bool:
    return person.father_id in store or person.mother_id in store


def _relax(store: RecordStore, generations: dict[int, int]) -> bool:
    """One scan over the unassigned people. Returns True if anything was assigned."""
    changed = False

    for person in store:
        if person.id in generations:
            continue

        parent_gen = -1
        for parent_id in (person.father_id, person.mother_id):
            if parent_id in store and parent_id in generations:
                parent_gen = max(parent_gen, generations[parent_id])

        if parent_gen != -1:
            generations[person.id] = parent_gen + 1
            changed = True
            continue

        # Inherit from the first spouse that already has a generation
        for sid in person.spouses:
            if sid in store and sid in generations:
                generations[person.id] = generations[sid]
                changed = True
                break

        if person.id not in generations and not person.father_id and not person.mother_id and not person.spouses:
            generations[person.id] = 0
            changed = True

    return changed


def _seed_root_couples(store: RecordStore, generations: dict[int, int]) -> bool:
    """
    Put married people with no known ancestry on both sides at generation 0.

    Only used once a scan stalls, so anyone who can inherit a generation from a
    spouse with parents has already done so.
    """
    seeded = False
    for person in store:
        if person.id in generations or has_known_parent(store, person):
            continue
        spouses = [store.get(sid) for sid in store.spouses_of(person.id)]
        if any(has_known_parent(store, s) for s in spouses):
            continue
        generations[person.id] = 0
        seeded = True
    return seeded


def assign_generations(store: RecordStore, max_passes: int = 20) -> dict[int, int]:
    """
    Assign an integer generation to every person in the store.

    Each pass scans the people who have no generation yet, in store order:
    - a person with at least one assigned parent gets max(parent generations) + 1
    - otherwise a person with an assigned spouse copies that spouse's generation
    - otherwise a person with no parents and no spouses becomes a root (0)

    When a pass assigns nothing, married people without known parents (whose
    spouses have none either) become roots and relaxation continues. Passes
    stop when nothing changes or `max_passes` is reached. Hand-edited files may
    list parents after children or contain loops, so this relaxes rather than
    sorting topologically. Anyone still unassigned is forced to 0.

    Returns:
        Mapping of person id to generation for every person in the store
    """
    generations: dict[int, int] = {}

    changed = True
    passes = 0
    while changed and passes < max_passes:
        passes += 1
        changed = _relax(store, generations) or _seed_root_couples(store, generations)

    forced = [p.id for p in store if p.id not in generations]
    if forced:
        logger.debug(
            "Generation relaxation stopped after %d passes; forcing %d people to 0: %s",
            passes,
            len(forced),
            forced,
        )
        for person_id in forced:
            generations[person_id] = 0

    return generations
