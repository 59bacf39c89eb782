"""Base classes for the file server sub-clients.

Sub-clients (currently only ``fs``) group the endpoints of one route prefix.
They share the parent client's HTTP transport, so retries, timeouts and
error mapping are configured once on FileServerClient/AsyncFileServerClient.

This is an internal module and should not be imported directly by users.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from client._http import AsyncHTTPClient, HTTPClient


class BaseClient:
    """Base class for synchronous sub-clients.

    Wraps the shared HTTPClient so sub-clients only deal in paths, query
    parameters and JSON bodies. Error responses are already raised as
    ``client.exceptions`` errors by the time these helpers return.

    Attributes:
        _http: The shared HTTP client for making requests.
    """

    def __init__(self, http_client: "HTTPClient") -> None:
        """Initialize the sub-client.

        Args:
            http_client: The HTTP client owned by the parent FileServerClient.
        """
        self._http = http_client

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Send a GET request (used for listing and reading).

        Args:
            path: Endpoint path, e.g. ``/api/fs/list``.
            params: Query parameters such as ``{"path": "/docs"}``.

        Returns:
            The decoded JSON response.
        """
        return self._http.get(path, params=params)

    def _post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a POST request (used for writes and mkdir).

        Args:
            path: Endpoint path.
            json: Request body.
            params: Query parameters.

        Returns:
            The decoded JSON response.
        """
        return self._http.post(path, json=json, params=params)

    def _delete(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a DELETE request.

        The file server takes the target path in the JSON body rather than
        the query string, so ``json`` is forwarded as-is.

        Args:
            path: Endpoint path.
            json: Request body, e.g. ``{"path": "/old.txt"}``.
            params: Query parameters.

        Returns:
            The decoded JSON response.
        """
        return self._http.delete(path, json=json, params=params)


class AsyncBaseClient:
    """Base class for asynchronous sub-clients.

    Mirrors BaseClient method for method; every helper is a coroutine over
    the shared AsyncHTTPClient.

    Attributes:
        _http: The shared async HTTP client for making requests.
    """

    def __init__(self, http_client: "AsyncHTTPClient") -> None:
        """Initialize the async sub-client.

        Args:
            http_client: The async HTTP client owned by the parent
                AsyncFileServerClient.
        """
        self._http = http_client

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Send an async GET request.

        Args:
            path: Endpoint path.
            params: Query parameters.

        Returns:
            The decoded JSON response.
        """
        return await self._http.get(path, params=params)

    async def _post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send an async POST request.

        Args:
            path: Endpoint path.
            json: Request body.
            params: Query parameters.

        Returns:
            The decoded JSON response.
        """
        return await self._http.post(path, json=json, params=params)

    async def _delete(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send an async DELETE request with an optional JSON body.

        Args:
            path: Endpoint path.
            json: Request body.
            params: Query parameters.

        Returns:
            The decoded JSON response.
        """
        return await self._http.delete(path, json=json, params=params)
