"""Reloadable layout snapshot backed by a data file."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from layout import compute_layout
from models import Layout, LayoutConfig
from parsing import load_people
from store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    store: RecordStore
    layout: Layout


def build_snapshot(path: Path, config: LayoutConfig) -> Snapshot:
    """Load `path` into a fresh store and lay it out."""
    store = RecordStore(load_people(path))
    return Snapshot(store=store, layout=compute_layout(store, config))


class TreeSession:
    """
    Holds the current (store, layout) pair for one data file.

    Each reload builds a complete new snapshot before swapping it in, so a
    reader holding `snapshot` always sees one consistent pass.
    """

    def __init__(self, path: Path, config: LayoutConfig | None = None):
        self.path = path
        self.config = config or LayoutConfig()
        self._lock = threading.Lock()
        self._snapshot = Snapshot(
            store=RecordStore(), layout=Layout(generations={}, owners={}, positions={}, roots=[])
        )
        self._mtime_ns: int | None = None

    @property
    def snapshot(self) -> Snapshot:
        with self._lock:
            return self._snapshot

    def reload(self) -> Snapshot:
        """Rebuild from the file unconditionally."""
        mtime_ns = self.path.stat().st_mtime_ns
        snapshot = build_snapshot(self.path, self.config)
        with self._lock:
            self._snapshot = snapshot
            self._mtime_ns = mtime_ns
        logger.info("Reloaded %s: %d people", self.path, len(snapshot.store))
        return snapshot

    def poll(self) -> bool:
        """Reload if the file changed since the last load. Returns True on reload."""
        try:
            mtime_ns = self.path.stat().st_mtime_ns
        except FileNotFoundError:
            logger.debug("%s not found; keeping previous snapshot", self.path)
            return False

        if mtime_ns == self._mtime_ns:
            return False
        try:
            self.reload()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not reload %s, keeping previous snapshot: %s", self.path, e)
            return False
        return True

    def watch(
        self,
        on_change: Callable[[Snapshot], None],
        interval: float = 1.0,
        max_polls: int | None = None,
    ):
        """
        Poll the file every `interval` seconds and call `on_change` after each reload.

        Runs until interrupted, or for `max_polls` polls when given.
        """
        polls = 0
        while max_polls is None or polls < max_polls:
            if self.poll():
                on_change(self.snapshot)
            polls += 1
            if max_polls is None or polls < max_polls:
                time.sleep(interval)
