"""Directory services: mock (in-memory), local OS filesystem and remote."""

from services.directory import DirectoryService, MockDirectoryService
from services.factory import (
    create_client,
    create_directory_service,
    create_file_manager,
    create_persistence_adapter,
)
from services.local_fs import LocalDirectoryService
from services.remote import RemoteDirectoryService, translate_client_error

__all__ = [
    "DirectoryService",
    "MockDirectoryService",
    "LocalDirectoryService",
    "RemoteDirectoryService",
    "translate_client_error",
    "create_client",
    "create_directory_service",
    "create_file_manager",
    "create_persistence_adapter",
]
