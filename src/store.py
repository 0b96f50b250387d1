"""In-memory record store with relationship lookups."""

import logging
from collections.abc import Iterable, Iterator

from models import Person, Relationship

logger = logging.getLogger(__name__)


class RecordStore:
    """Ordered collection of people plus an id index."""

    def __init__(self, persons: Iterable[Person] = ()):
        self.people: list[Person] = []
        self.id_map: dict[int, Person] = {}
        self.load(persons)

    def load(self, persons: Iterable[Person]):
        """Replace all state with `persons`, keeping the first record for a repeated id."""
        people: list[Person] = []
        id_map: dict[int, Person] = {}
        for person in persons:
            if person.id in id_map:
                logger.warning("Duplicate person id %s (%s) skipped", person.id, person.name)
                continue
            people.append(person)
            id_map[person.id] = person

        self.people = people
        self.id_map = id_map

    def __len__(self) -> int:
        return len(self.people)

    def __iter__(self) -> Iterator[Person]:
        return iter(self.people)

    def __contains__(self, person_id: object) -> bool:
        return person_id in self.id_map

    def get(self, person_id: int) -> Person | None:
        return self.id_map.get(person_id)

    def spouses_of(self, person_id: int) -> list[int]:
        """Spouse ids of `person_id` that refer to people in the store, in list order."""
        person = self.get(person_id)
        if person is None:
            return []
        return [sid for sid in person.spouses if sid in self.id_map]

    def children_of(self, person_id: int) -> list[int]:
        """Ids of everyone whose father or mother is `person_id`, in store order."""
        if not person_id:
            return []
        return [p.id for p in self.people if p.father_id == person_id or p.mother_id == person_id]

    def family_children(self, person_id: int) -> list[int]:
        """
        Children of a person and of all their spouses, ordered for drawing.

        Children are grouped by their other parent: kids with a spouse from the
        first half of the spouse list go left (in spouse order), kids with a
        spouse from the second half go right, and kids whose other parent is
        unknown or not a listed spouse sit in the center. Within a group, ids
        ascend.
        """
        person = self.get(person_id)
        if person is None:
            return []

        spouses = self.spouses_of(person_id)
        kids: set[int] = set(self.children_of(person_id))
        for sid in spouses:
            kids.update(self.children_of(sid))

        num_left = len(spouses) // 2
        spouse_index = {sid: i for i, sid in enumerate(spouses)}

        def group_key(kid_id: int) -> int:
            kid = self.id_map[kid_id]
            other_id = kid.mother_id if kid.father_id == person_id else kid.father_id
            if other_id == 0:
                return num_left
            index = spouse_index.get(other_id)
            if index is None:
                return num_left
            # Left spouses sort before the center group, right spouses after it
            return index if index < num_left else index + 1

        return sorted(kids, key=lambda kid_id: (group_key(kid_id), kid_id))

    def relationships(self) -> list[Relationship]:
        """Parent and spouse links between people in the store, one row per direction listed."""
        relationships: list[Relationship] = []
        for p in self.people:
            for parent_id in (p.father_id, p.mother_id):
                if parent_id in self.id_map:
                    relationships.append(Relationship(parent_id, p.id, "PARENT_OF"))
            for sid in self.spouses_of(p.id):
                relationships.append(Relationship(p.id, sid, "SPOUSE_OF", p.is_former_spouse(sid)))
        return relationships

    def is_connected_to(self, person_id: int, others: set[int]) -> bool:
        """True if any parent, spouse or child of `person_id` is in `others`."""
        person = self.get(person_id)
        if person is None:
            return False
        if person.father_id in others or person.mother_id in others:
            return True
        if any(sid in others for sid in person.spouses):
            return True
        return any(kid in others for kid in self.family_children(person_id))
