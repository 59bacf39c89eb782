"""Snapshot persistence: adapters, the background writer and backups."""

from storage.backup import backup_file_name, read_backup, write_backup
from storage.base import PersistenceAdapter, SnapshotData
from storage.memory import InMemorySnapshotStore
from storage.remote import RemoteSnapshotStore
from storage.sqlite_store import SQLiteSnapshotStore
from storage.worker import PersistenceWorker

__all__ = [
    "PersistenceAdapter",
    "SnapshotData",
    "InMemorySnapshotStore",
    "SQLiteSnapshotStore",
    "RemoteSnapshotStore",
    "PersistenceWorker",
    "backup_file_name",
    "read_backup",
    "write_backup",
]
