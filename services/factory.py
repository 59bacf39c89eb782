"""Build sessions, persistence adapters and directory services from settings."""

import logging
from typing import Optional

from client import FileServerClient
from models.file_manager import FileManager
from services.directory import DirectoryService, MockDirectoryService
from services.remote import RemoteDirectoryService
from settings import Settings
from storage.base import PersistenceAdapter
from storage.memory import InMemorySnapshotStore
from storage.remote import RemoteSnapshotStore
from storage.sqlite_store import SQLiteSnapshotStore
from storage.worker import FailureCallback

logger = logging.getLogger(__name__)


def create_client(settings: Settings) -> FileServerClient:
    return FileServerClient(
        base_url=settings.remote_base_url,
        timeout=settings.remote_timeout,
        retry_enabled=settings.remote_retry_enabled,
        max_retries=settings.remote_max_retries,
    )


def create_persistence_adapter(settings: Settings) -> PersistenceAdapter:
    """Return the adapter selected by ``settings.persistence``."""
    if settings.persistence == "memory":
        return InMemorySnapshotStore()
    if settings.persistence == "remote":
        return RemoteSnapshotStore(create_client(settings), settings.remote_snapshot_path)
    return SQLiteSnapshotStore(settings.database_path)


def create_file_manager(
    settings: Settings, on_failure: Optional[FailureCallback] = None
) -> FileManager:
    """Open a persisted FileManager session configured by ``settings``."""
    return FileManager.open(
        create_persistence_adapter(settings),
        root_path=settings.root_path,
        strict_names=settings.strict_names,
        on_failure=on_failure,
    )


def create_directory_service(
    settings: Settings, file_manager: Optional[FileManager] = None
) -> DirectoryService:
    """Return the directory service selected by ``settings.backend``.

    Args:
        settings: Application settings.
        file_manager: Session backing the mock service (opened from
            ``settings`` when omitted).
    """
    if settings.backend == "remote":
        logger.info(f"Using remote file server at {settings.remote_base_url}")
        return RemoteDirectoryService(create_client(settings))
    if file_manager is None:
        file_manager = create_file_manager(settings)
    return MockDirectoryService(file_manager)
