"""Base class for snapshot persistence adapters."""

from abc import ABC, abstractmethod
from typing import Any, Optional

SnapshotData = dict[str, dict[str, Any]]


class PersistenceAdapter(ABC):
    """Durable storage for a whole node-store snapshot.

    Adapters store the exported node map (``NodeStore.to_dict()``) as-is and
    hand it back unchanged. They know nothing about tree invariants; the
    caller validates loaded data before using it.

    Implementations raise PersistenceFailure when the underlying storage
    fails. They must be safe to call from the persistence worker thread.
    """

    name: str = "adapter"

    @abstractmethod
    def save(self, snapshot: SnapshotData) -> None:
        """Replace the stored snapshot with ``snapshot``.

        Raises:
            PersistenceFailure: If the write fails.
        """

    @abstractmethod
    def load(self) -> Optional[SnapshotData]:
        """Return the stored snapshot, or None if nothing has been saved.

        Raises:
            PersistenceFailure: If the read fails.
        """

    @abstractmethod
    def reset(self) -> None:
        """Discard any stored snapshot.

        Raises:
            PersistenceFailure: If the storage cannot be cleared.
        """

    def close(self) -> None:
        """Release any resources held by the adapter."""
