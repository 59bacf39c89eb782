"""Dependency injection providers for the FastAPI application.

The file server exposes one DirectoryService, created when the app starts.
Tests swap it out with ``app.dependency_overrides``.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends

from services.directory import DirectoryService
from services.local_fs import LocalDirectoryService
from settings import Settings, get_settings

logger = logging.getLogger(__name__)

_directory_service: DirectoryService | None = None


def get_directory_service() -> DirectoryService:
    """Get the shared DirectoryService instance.

    Raises:
        RuntimeError: If the service hasn't been initialized yet.

    Example:
        @router.get("/list")
        def list_directory(service: DirectoryServiceDep):
            return service.list("/")
    """
    if _directory_service is None:
        raise RuntimeError(
            "DirectoryService not initialized. Call initialize_directory_service() first."
        )
    return _directory_service


def initialize_directory_service(settings: Optional[Settings] = None) -> DirectoryService:
    """Create the shared service serving ``settings.server_root``."""
    global _directory_service

    settings = settings or get_settings()
    _directory_service = LocalDirectoryService(settings.server_root)
    logger.info(f"Serving {_directory_service.root} under /api/fs")
    return _directory_service


def shutdown_directory_service() -> None:
    global _directory_service

    if _directory_service is not None:
        _directory_service.close()
    _directory_service = None


DirectoryServiceDep = Annotated[DirectoryService, Depends(get_directory_service)]
