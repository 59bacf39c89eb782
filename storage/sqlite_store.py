"""Embedded key-value persistence backed by SQLite.

The whole snapshot is stored as one JSON record under a fixed key, the same
single-record layout a browser key-value store would use.
"""

import json
import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Optional

from models.exceptions import PersistenceFailure
from storage.base import PersistenceAdapter, SnapshotData

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "fileSystem"
TABLE_NAME = "file_system"


class SQLiteSnapshotStore(PersistenceAdapter):
    """Persist snapshots in a local SQLite database file.

    A connection is opened per operation so the store can be used from the
    persistence worker thread and the caller's thread alike.

    Args:
        database_path: Location of the database file (created on demand).
        key: Record key the snapshot is stored under.
    """

    name = "sqlite"

    def __init__(self, database_path: str | Path, key: str = SNAPSHOT_KEY) -> None:
        self.database_path = Path(database_path)
        self.key = key

    def _connect(self) -> sqlite3.Connection:
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.database_path)
        conn.execute(
            f"CREATE TABLE IF NOT EXISTS {TABLE_NAME} (id TEXT PRIMARY KEY, data TEXT NOT NULL)"
        )
        return conn

    def save(self, snapshot: SnapshotData) -> None:
        try:
            payload = json.dumps(snapshot, ensure_ascii=False)
            with closing(self._connect()) as conn, conn:
                conn.execute(
                    f"INSERT OR REPLACE INTO {TABLE_NAME} (id, data) VALUES (?, ?)",
                    (self.key, payload),
                )
        except (sqlite3.Error, OSError, TypeError, ValueError) as e:
            raise PersistenceFailure(
                f"Failed to save snapshot to {self.database_path}", cause=e
            ) from e
        logger.debug(f"Saved snapshot ({len(snapshot)} nodes) to {self.database_path}")

    def load(self) -> Optional[SnapshotData]:
        if not self.database_path.exists():
            return None
        try:
            with closing(self._connect()) as conn:
                row = conn.execute(
                    f"SELECT data FROM {TABLE_NAME} WHERE id = ?", (self.key,)
                ).fetchone()
            if row is None:
                return None
            return json.loads(row[0])
        except (sqlite3.Error, OSError, ValueError) as e:
            raise PersistenceFailure(
                f"Failed to load snapshot from {self.database_path}", cause=e
            ) from e

    def reset(self) -> None:
        """Delete the database file, like dropping a browser database."""
        try:
            self.database_path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceFailure(
                f"Failed to delete database {self.database_path}", cause=e
            ) from e
        logger.info(f"Deleted snapshot database {self.database_path}")
