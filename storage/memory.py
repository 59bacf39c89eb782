"""In-memory persistence adapter."""

import copy
import threading
from typing import Optional

from storage.base import PersistenceAdapter, SnapshotData


class InMemorySnapshotStore(PersistenceAdapter):
    """Keeps the last saved snapshot in process memory.

    Useful for ephemeral sessions and tests. Snapshots are deep-copied on the
    way in and out so callers cannot alias the stored data.

    Attributes:
        save_count: Number of successful saves.
    """

    name = "memory"

    def __init__(self, initial: Optional[SnapshotData] = None) -> None:
        self._data: Optional[SnapshotData] = copy.deepcopy(initial)
        self._lock = threading.Lock()
        self.save_count = 0

    def save(self, snapshot: SnapshotData) -> None:
        with self._lock:
            self._data = copy.deepcopy(snapshot)
            self.save_count += 1

    def load(self) -> Optional[SnapshotData]:
        with self._lock:
            return copy.deepcopy(self._data)

    def reset(self) -> None:
        with self._lock:
            self._data = None
