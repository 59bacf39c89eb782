"""Filesystem sub-client for the file server API.

This module provides FileSystemClient and AsyncFileSystemClient for the
directory endpoints (/api/fs/*).

This is an internal module. Import from `client` instead.
"""

from typing import TYPE_CHECKING, Any

from client._base import AsyncBaseClient, BaseClient
from models.node import DirectoryEntry

if TYPE_CHECKING:
    from client._http import AsyncHTTPClient, HTTPClient


def _parse_listing(data: Any) -> list[DirectoryEntry]:
    return [DirectoryEntry.model_validate(item) for item in data or []]


class FileSystemClient(BaseClient):
    """Synchronous client for the directory endpoints (/api/fs/*).

    Example:
        with FileServerClient() as client:
            for entry in client.fs.list("/"):
                print(entry.name, entry.kind.value)

            client.fs.write("/notes.txt", "remember the milk")
            print(client.fs.read("/notes.txt"))
    """

    _BASE_PATH = "/api/fs"

    def list(self, path: str | None = None) -> list[DirectoryEntry]:
        """List the entries of a directory.

        Args:
            path: Directory to list (default: the server's root).

        Returns:
            Entries in the order the server returned them.

        Raises:
            NotFoundError: If the directory does not exist.
            BadRequestError: If the path is a file.
            ForbiddenError: If the path is outside the served root.
        """
        data = self._get(f"{self._BASE_PATH}/list", params={"path": path})
        return _parse_listing(data)

    def read(self, path: str) -> str:
        """Read a text file.

        Raises:
            NotFoundError: If the file does not exist.
            BadRequestError: If the path is a directory.
            APIError: With status 415 if the file is not UTF-8 text.
        """
        data = self._get(f"{self._BASE_PATH}/read", params={"path": path})
        return data["content"]

    def write(self, path: str, content: str) -> None:
        """Create or overwrite a text file."""
        self._post(f"{self._BASE_PATH}/write", json={"path": path, "content": content})

    def mkdir(self, path: str) -> None:
        """Create a directory and any missing parents."""
        self._post(f"{self._BASE_PATH}/mkdir", json={"path": path})

    def delete(self, path: str) -> None:
        """Delete a file, or a directory with everything inside it."""
        self._delete(f"{self._BASE_PATH}/delete", json={"path": path})


class AsyncFileSystemClient(AsyncBaseClient):
    """Asynchronous client for the directory endpoints (/api/fs/*).

    Example:
        async with AsyncFileServerClient() as client:
            entries = await client.fs.list("/")
    """

    _BASE_PATH = "/api/fs"

    async def list(self, path: str | None = None) -> list[DirectoryEntry]:
        data = await self._get(f"{self._BASE_PATH}/list", params={"path": path})
        return _parse_listing(data)

    async def read(self, path: str) -> str:
        data = await self._get(f"{self._BASE_PATH}/read", params={"path": path})
        return data["content"]

    async def write(self, path: str, content: str) -> None:
        await self._post(f"{self._BASE_PATH}/write", json={"path": path, "content": content})

    async def mkdir(self, path: str) -> None:
        await self._post(f"{self._BASE_PATH}/mkdir", json={"path": path})

    async def delete(self, path: str) -> None:
        await self._delete(f"{self._BASE_PATH}/delete", json={"path": path})
