"""File server API client library.

This module provides a typed Python client for the file server REST API
(``/api/fs/*``). It supports both synchronous and asynchronous usage.

Example:
    Synchronous usage::

        from client import FileServerClient

        with FileServerClient(base_url="http://localhost:3001") as client:
            for entry in client.fs.list("/"):
                print(entry.name)

    Asynchronous usage::

        from client import AsyncFileServerClient

        async with AsyncFileServerClient() as client:
            await client.fs.mkdir("/archive/2024")

Exports:
    FileServerClient: Synchronous client.
    AsyncFileServerClient: Asynchronous client.

    Exceptions:
        FileServerClientError: Base exception for all client errors.
        ConnectionError: Failed to connect to the server.
        TimeoutError: Request timed out.
        APIError: Server returned an error response.
        BadRequestError: Malformed request or wrong node kind (HTTP 400).
        ForbiddenError: Path outside the served root (HTTP 403).
        NotFoundError: Path not found (HTTP 404).
        ConflictError: Name conflict (HTTP 409).
        ValidationError: Request validation failed (HTTP 422).
        ServerError: Server-side error (HTTP 5xx).
"""

from client._fs import AsyncFileSystemClient, FileSystemClient
from client.client import AsyncFileServerClient, FileServerClient
from client.exceptions import (
    APIError,
    BadRequestError,
    ConflictError,
    ConnectionError,
    FileServerClientError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    TimeoutError,
    ValidationError,
)
from models.node import DirectoryEntry

__all__ = [
    # Main clients
    "FileServerClient",
    "AsyncFileServerClient",
    # Sub-clients
    "FileSystemClient",
    "AsyncFileSystemClient",
    # Models
    "DirectoryEntry",
    # Exceptions
    "FileServerClientError",
    "ConnectionError",
    "TimeoutError",
    "APIError",
    "BadRequestError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "ServerError",
]
