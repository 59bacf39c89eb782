"""Main file server client classes.

This module provides the main entry points for talking to the file server:
- FileServerClient: Synchronous client for the file server REST API
- AsyncFileServerClient: Asynchronous client for the file server REST API

Both clients expose the directory endpoints through the ``fs`` sub-client.

Example:
    Synchronous usage::

        from client import FileServerClient

        with FileServerClient(base_url="http://localhost:3001") as client:
            client.fs.mkdir("/projects/alpha")
            client.fs.write("/projects/alpha/main.py", "print('hi')")
            entries = client.fs.list("/projects/alpha")

    Asynchronous usage::

        from client import AsyncFileServerClient

        async with AsyncFileServerClient() as client:
            content = await client.fs.read("/projects/alpha/main.py")
"""

from typing import Any

from client._fs import AsyncFileSystemClient, FileSystemClient
from client._http import AsyncHTTPClient, HTTPClient

DEFAULT_BASE_URL = "http://localhost:3001"


class FileServerClient:
    """Synchronous client for the file server REST API.

    Supports the context manager protocol for automatic resource cleanup.

    Attributes:
        base_url: The base URL of the file server.
        timeout: Request timeout in seconds.
        retry_enabled: Whether automatic retry is enabled.
        max_retries: Maximum number of retry attempts.

    Example:
        Manual lifecycle management::

            client = FileServerClient()
            try:
                client.fs.delete("/tmp/scratch")
            finally:
                client.close()
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: Any = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: The base URL of the file server (default: http://localhost:3001).
            timeout: Request timeout in seconds (default: 30.0).
            retry_enabled: Whether to automatically retry on transient failures.
                Retries on connection errors, timeouts, and HTTP 502/503/504
                with exponential backoff (default: False).
            max_retries: Maximum number of retry attempts when retry is enabled
                (default: 3).
            transport: Custom HTTP transport (e.g., MockTransport for testing).
        """
        self._http = HTTPClient(
            base_url=base_url,
            timeout=timeout,
            retry_enabled=retry_enabled,
            max_retries=max_retries,
            transport=transport,
        )
        self._fs: FileSystemClient | None = None

    def __enter__(self) -> "FileServerClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the client and release resources."""
        self._http.close()

    @property
    def base_url(self) -> str:
        return self._http.base_url

    @property
    def timeout(self) -> float:
        return self._http.timeout

    @property
    def retry_enabled(self) -> bool:
        return self._http.retry_enabled

    @property
    def max_retries(self) -> int:
        return self._http.max_retries

    @property
    def fs(self) -> FileSystemClient:
        """Access the directory endpoints (/api/fs/*).

        Provides list, read, write, mkdir and delete.
        """
        if self._fs is None:
            self._fs = FileSystemClient(self._http)
        return self._fs

    def health(self) -> dict[str, Any]:
        """Check server health (GET /health)."""
        return self._http.get("/health")


class AsyncFileServerClient:
    """Asynchronous client for the file server REST API.

    Example:
        async with AsyncFileServerClient(base_url="http://localhost:3001") as client:
            await client.fs.write("/notes.txt", "hello")
            entries = await client.fs.list("/")
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: Any = None,
    ) -> None:
        self._http = AsyncHTTPClient(
            base_url=base_url,
            timeout=timeout,
            retry_enabled=retry_enabled,
            max_retries=max_retries,
            transport=transport,
        )
        self._fs: AsyncFileSystemClient | None = None

    async def __aenter__(self) -> "AsyncFileServerClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._http.close()

    @property
    def base_url(self) -> str:
        return self._http.base_url

    @property
    def fs(self) -> AsyncFileSystemClient:
        """Access the directory endpoints (/api/fs/*)."""
        if self._fs is None:
            self._fs = AsyncFileSystemClient(self._http)
        return self._fs

    async def health(self) -> dict[str, Any]:
        return await self._http.get("/health")
