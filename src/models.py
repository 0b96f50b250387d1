"""Data classes for family tree entities and layout results."""

from dataclasses import dataclass, field


@dataclass
class Person:
    id: int
    name: str
    role: str
    gender: str  # "Male", "Female" or anything else (unspecified)
    father_id: int = 0  # 0 = unknown
    mother_id: int = 0  # 0 = unknown
    spouses: list[int] = field(default_factory=list)  # order sets left/right placement
    former_spouses: set[int] = field(default_factory=set)

    @property
    def is_female(self) -> bool:
        return self.gender == "Female"

    def is_former_spouse(self, spouse_id: int) -> bool:
        return spouse_id in self.former_spouses


@dataclass
class Relationship:
    person1_id: int
    person2_id: int
    relationship_type: str  # PARENT_OF, SPOUSE_OF
    former: bool = False


@dataclass
class LayoutConfig:
    box_width: int = 200
    box_height: int = 75
    generation_gap: int = 150  # vertical distance between generations
    sibling_gap: int = 50  # also used between related trees
    spouse_gap: int = 25
    tree_gap: int = 0  # between unrelated trees
    origin_x: int = 50
    origin_y: int = 50
    margin: int = 100
    max_generation_passes: int = 20


@dataclass(frozen=True)
class Layout:
    """
    Result of one layout pass.

    People missing from `positions` are hidden: either unreachable from any
    canonical root or never placed.
    """

    generations: dict[int, int]
    owners: dict[int, int]
    positions: dict[int, tuple[int, int]]
    roots: list[int]
    width: int = 1000
    height: int = 1000

    def position(self, person_id: int) -> tuple[int, int] | None:
        return self.positions.get(person_id)

    def is_visible(self, person_id: int) -> bool:
        return person_id in self.positions

    def generation(self, person_id: int) -> int:
        return self.generations.get(person_id, -1)
