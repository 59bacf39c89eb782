"""Background replication of committed snapshots to a persistence adapter.

The in-memory snapshot is the source of truth for a running session;
persistence is best-effort replication of it. The worker owns a daemon
thread that writes the most recent submitted snapshot, coalescing bursts
of mutations into a single write. Failures are logged and reported, never
rolled back into memory.
"""

import logging
import threading
from typing import Callable, Optional

from models.exceptions import PersistenceFailure
from storage.base import PersistenceAdapter, SnapshotData

logger = logging.getLogger(__name__)

FailureCallback = Callable[[PersistenceFailure], None]


class PersistenceWorker:
    """Fire-and-forget snapshot writer running on a dedicated thread.

    Responsibilities:
    - Thread management (start, stop)
    - Coalescing pending snapshots (only the latest is written)
    - Error isolation (adapter failures never crash the thread)
    - Failure reporting via ``on_failure`` and ``last_error``

    Attributes:
        adapter: Where snapshots are written.
        on_failure: Optional callback invoked with each PersistenceFailure.
        last_error: Most recent failure, cleared by the next successful save.
        saves_completed: Number of successful writes.
        is_running: Whether the worker thread is active.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        on_failure: Optional[FailureCallback] = None,
    ) -> None:
        self.adapter = adapter
        self.on_failure = on_failure
        self.last_error: Optional[PersistenceFailure] = None
        self.saves_completed = 0
        self.is_running = False

        self._pending: Optional[SnapshotData] = None
        self._busy = False
        self._stopping = False
        self._condition = threading.Condition()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> "PersistenceWorker":
        """Start the worker thread.

        Raises:
            RuntimeError: If the worker is already running.
        """
        if self.is_running:
            raise RuntimeError("Persistence worker is already running")

        self._stopping = False
        self.is_running = True
        self._thread = threading.Thread(
            target=self._run, name=f"persistence-{self.adapter.name}", daemon=True
        )
        self._thread.start()
        logger.info(f"PersistenceWorker started ({self.adapter.name})")
        return self

    def stop(self, timeout: float = 5.0) -> None:
        """Write any pending snapshot, then stop the thread."""
        if not self.is_running:
            return

        with self._condition:
            self._stopping = True
            self._condition.notify_all()
        if self._thread:
            self._thread.join(timeout=timeout)

        self.is_running = False
        self._thread = None
        logger.info(f"PersistenceWorker stopped ({self.adapter.name})")

    def submit(self, snapshot: SnapshotData) -> None:
        """Queue ``snapshot`` for writing, replacing any not-yet-written one.

        Never blocks on I/O. If the worker is not running the snapshot is
        written synchronously so nothing is silently dropped.
        """
        if not self.is_running:
            self._write(snapshot)
            return

        with self._condition:
            self._pending = snapshot
            self._condition.notify_all()

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait until every submitted snapshot has been handled.

        Returns:
            True if the queue drained, False on timeout.
        """
        with self._condition:
            return self._condition.wait_for(
                lambda: self._pending is None and not self._busy, timeout=timeout
            )

    def reset(self, timeout: Optional[float] = None) -> bool:
        """Clear everything the adapter has stored.

        A snapshot still waiting to be written is discarded and an in-flight
        write is allowed to finish first, so no older snapshot lands after
        the reset. Failures are reported like failed saves.

        Returns:
            True if the adapter was reset.
        """
        with self._condition:
            self._pending = None
            self._condition.wait_for(lambda: not self._busy, timeout=timeout)
            try:
                self.adapter.reset()
            except PersistenceFailure as e:
                self._report(e)
                return False
            except Exception as e:
                self._report(PersistenceFailure(f"Unexpected persistence error: {e}", cause=e))
                return False

        self.last_error = None
        logger.info(f"Persisted snapshot cleared ({self.adapter.name})")
        return True

    def _run(self) -> None:
        """Main loop: wait for a snapshot, write it, repeat until stopped."""
        while True:
            with self._condition:
                self._condition.wait_for(lambda: self._pending is not None or self._stopping)
                if self._pending is None and self._stopping:
                    return
                snapshot, self._pending = self._pending, None
                self._busy = True

            try:
                self._write(snapshot)
            finally:
                with self._condition:
                    self._busy = False
                    self._condition.notify_all()

    def _write(self, snapshot: SnapshotData) -> None:
        try:
            self.adapter.save(snapshot)
        except PersistenceFailure as e:
            self._report(e)
            return
        except Exception as e:
            # Adapters should raise PersistenceFailure; wrap anything else
            self._report(PersistenceFailure(f"Unexpected persistence error: {e}", cause=e))
            return

        self.last_error = None
        self.saves_completed += 1

    def _report(self, failure: PersistenceFailure) -> None:
        self.last_error = failure
        logger.error(f"Snapshot persistence failed: {failure}", exc_info=failure.cause)
        if self.on_failure is not None:
            try:
                self.on_failure(failure)
            except Exception as e:
                logger.error(f"Persistence failure callback raised: {e}", exc_info=True)
