"""Two-phase tree layout: bottom-up subtree sizing, top-down positioning."""

import logging

from generations import assign_generations
from models import Layout, LayoutConfig
from ownership import assign_ownership, cluster_members, is_canonical_root
from store import RecordStore

logger = logging.getLogger(__name__)


def parents_row_width(num_spouses: int, config: LayoutConfig) -> int:
    """Width of one person plus their spouses side by side."""
    return config.box_width * (1 + num_spouses) + config.spouse_gap * num_spouses


class SubtreeSizer:
    """Computes and caches the (width, center offset) footprint of each subtree."""

    def __init__(self, store: RecordStore, owners: dict[int, int], config: LayoutConfig):
        self.store = store
        self.owners = owners
        self.config = config
        self._metrics: dict[tuple[int, int], tuple[int, int]] = {}

    def is_foreign(self, person_id: int, root_id: int) -> bool:
        owner = self.owners.get(person_id)
        return owner is not None and owner != root_id

    def measure(self, person_id: int, root_id: int) -> tuple[int, int]:
        """
        Footprint of `person_id`'s subtree when laid out under `root_id`.

        People owned by another root take no space here. A person reached again
        through a parent cycle while still being measured counts as zero width.
        """
        if self.is_foreign(person_id, root_id):
            return (0, 0)

        key = (root_id, person_id)
        if key in self._metrics:
            return self._metrics[key]
        # Placeholder until the subtree is measured
        self._metrics[key] = (0, 0)

        parents_w = parents_row_width(len(self.store.spouses_of(person_id)), self.config)

        kids = self.store.family_children(person_id)
        kids_w = sum(self.measure(kid_id, root_id)[0] for kid_id in kids)
        if kids:
            kids_w += (len(kids) - 1) * self.config.sibling_gap

        total_w = max(parents_w, kids_w)
        self._metrics[key] = (total_w, total_w // 2)
        return self._metrics[key]

    def width(self, person_id: int, root_id: int) -> int:
        return self.measure(person_id, root_id)[0]


class Positioner:
    """Assigns absolute coordinates, top-down, within one root's cluster."""

    def __init__(
        self,
        store: RecordStore,
        owners: dict[int, int],
        sizer: SubtreeSizer,
        config: LayoutConfig,
    ):
        self.store = store
        self.owners = owners
        self.sizer = sizer
        self.config = config
        self.positions: dict[int, tuple[int, int]] = {}
        self.placed: set[int] = set()

    def place(self, person_id: int, x: int, y: int, root_id: int):
        if self.sizer.is_foreign(person_id, root_id):
            return
        if person_id in self.placed:
            return
        self.placed.add(person_id)

        spouses = self.store.spouses_of(person_id)
        self.placed.update(spouses)

        cfg = self.config
        _, center_offset = self.sizer.measure(person_id, root_id)
        absolute_center = x + center_offset

        # Parents row: [left spouses] [person] [right spouses]
        num_left = len(spouses) // 2
        row = spouses[:num_left] + [person_id] + spouses[num_left:]
        current_x = absolute_center - parents_row_width(len(spouses), cfg) // 2
        for member_id in row:
            # A spouse already drawn in another row moves to this one
            if member_id in self.positions and member_id != person_id:
                logger.debug(
                    "Moving spouse %s from %s into %s's row", member_id, self.positions[member_id], person_id
                )
            self.positions[member_id] = (current_x, y)
            current_x += cfg.box_width + cfg.spouse_gap

        kids = self.store.family_children(person_id)
        if not kids:
            return

        kids_w = sum(self.sizer.width(kid_id, root_id) for kid_id in kids)
        kids_w += (len(kids) - 1) * cfg.sibling_gap

        child_x = absolute_center - kids_w // 2
        for kid_id in kids:
            self.place(kid_id, child_x, y + cfg.generation_gap, root_id)
            child_x += self.sizer.width(kid_id, root_id) + cfg.sibling_gap


def canvas_extent(positions: dict[int, tuple[int, int]], config: LayoutConfig) -> tuple[int, int]:
    """Bounding box of all placed boxes plus the margin."""
    max_x = 0
    max_y = 0
    for x, y in positions.values():
        max_x = max(max_x, x + config.box_width)
        max_y = max(max_y, y + config.box_height)
    return max_x + config.margin, max_y + config.margin


def compute_layout(store: RecordStore, config: LayoutConfig | None = None) -> Layout:
    """
    Run the full pipeline: generations, ownership, sizing and positioning.

    Clusters are laid out left to right in store order. A cluster that touches
    an already placed person (parent, spouse or child) is separated by the
    sibling gap, an unrelated one by the tree gap.
    """
    config = config or LayoutConfig()

    if not len(store):
        logger.warning("No people loaded; layout is empty")
        return Layout(generations={}, owners={}, positions={}, roots=[])

    generations = assign_generations(store, config.max_generation_passes)
    owners = assign_ownership(store, generations)

    sizer = SubtreeSizer(store, owners, config)
    positioner = Positioner(store, owners, sizer, config)

    current_x = config.origin_x
    current_y = config.origin_y
    roots: list[int] = []

    for person in store:
        root_id = person.id
        if root_id in positioner.placed:
            continue
        if not is_canonical_root(store, generations, root_id):
            continue
        if owners.get(root_id) != root_id:
            continue

        if positioner.placed:
            related = any(
                store.is_connected_to(member_id, positioner.placed)
                for member_id in cluster_members(owners, root_id)
            )
            current_x += config.sibling_gap if related else config.tree_gap

        positioner.place(root_id, current_x, current_y, root_id)
        current_x += sizer.width(root_id, root_id)
        roots.append(root_id)

    width, height = canvas_extent(positioner.positions, config)
    hidden = len(store) - len(positioner.positions)
    logger.debug(
        "Laid out %d clusters, %d people placed, %d hidden, canvas %dx%d",
        len(roots),
        len(positioner.positions),
        hidden,
        width,
        height,
    )

    return Layout(
        generations=generations,
        owners=owners,
        positions=dict(positioner.positions),
        roots=roots,
        width=width,
        height=height,
    )
