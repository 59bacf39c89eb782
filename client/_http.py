"""Internal HTTP handling utilities for the file server client.

This module provides the low-level HTTP communication layer used by the
filesystem sub-client. It handles:
- Making HTTP requests (sync and async)
- Response parsing and error handling
- Retry logic with exponential backoff
- Connection management

This is an internal module and should not be imported directly by users.
"""

import asyncio
import time
from typing import Any, Literal

import httpx

from client.exceptions import (
    APIError,
    BadRequestError,
    ConflictError,
    ConnectionError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    TimeoutError,
    ValidationError,
)


# HTTP methods supported by the client
HttpMethod = Literal["GET", "POST", "DELETE"]

# Status codes that trigger automatic retry (when retry is enabled)
RETRYABLE_STATUS_CODES = {502, 503, 504}

# Default backoff settings for retry logic
DEFAULT_RETRY_BACKOFF_BASE = 0.5  # seconds
DEFAULT_RETRY_BACKOFF_MAX = 30.0  # seconds


def _parse_error_response(response: httpx.Response) -> tuple[str, str | None, Any]:
    """Extract (message, error_type, details) from an error response.

    The file server answers ``{"error", "details", "type"}``; request
    validation failures from FastAPI arrive as ``{"detail": [...]}``. Falls
    back to the raw response text when the body is not JSON.
    """
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        if text:
            return text, None, None
        return f"HTTP {response.status_code} error", None, None

    if isinstance(body, dict):
        if "error" in body:
            return str(body["error"]), body.get("type"), body.get("details")

        detail = body.get("detail")
        if isinstance(detail, str):
            return detail, body.get("type"), body.get("details")
        if isinstance(detail, list):
            messages = [
                f"{err.get('loc', ['unknown'])[-1]}: {err.get('msg', 'invalid')}"
                for err in detail
            ]
            return "; ".join(messages), "validation_error", {"errors": detail}

    return str(body), None, None


def _raise_for_status(response: httpx.Response) -> None:
    """Raise the exception matching an error status code.

    Raises:
        BadRequestError: For HTTP 400 responses.
        ForbiddenError: For HTTP 403 responses.
        NotFoundError: For HTTP 404 responses.
        ConflictError: For HTTP 409 responses.
        ValidationError: For HTTP 422 responses.
        ServerError: For HTTP 5xx responses.
        APIError: For other HTTP 4xx responses.
    """
    if response.is_success:
        return

    message, error_type, details = _parse_error_response(response)
    status_code = response.status_code

    try:
        response_body = response.json()
    except ValueError:
        response_body = response.text

    if status_code == 400:
        raise BadRequestError(
            message=message,
            error_type=error_type,
            details=details,
            response_body=response_body,
        )
    elif status_code == 403:
        raise ForbiddenError(message=message, details=details, response_body=response_body)
    elif status_code == 404:
        path = details.get("path") if isinstance(details, dict) else None
        raise NotFoundError(
            message=message,
            path=path,
            details=details,
            response_body=response_body,
        )
    elif status_code == 409:
        raise ConflictError(message=message, details=details, response_body=response_body)
    elif status_code == 422:
        raise ValidationError(message=message, details=details, response_body=response_body)
    elif status_code >= 500:
        raise ServerError(
            message=message,
            status_code=status_code,
            details=details,
            response_body=response_body,
        )
    else:
        raise APIError(
            message=message,
            status_code=status_code,
            error_type=error_type,
            details=details,
            response_body=response_body,
        )


def _calculate_backoff(attempt: int, base: float = DEFAULT_RETRY_BACKOFF_BASE) -> float:
    """Return the exponential backoff delay (base * 2^attempt), capped."""
    delay = base * (2 ** attempt)
    return min(delay, DEFAULT_RETRY_BACKOFF_MAX)


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    if not params:
        return params
    return {k: v for k, v in params.items() if v is not None}


def _parse_body(response: httpx.Response) -> Any:
    if response.content:
        return response.json()
    return None


class HTTPClient:
    """Synchronous HTTP client for making API requests.

    Wraps httpx.Client with error handling, retry logic, and convenience
    methods for the file server API.

    Attributes:
        base_url: The base URL for all API requests.
        timeout: Request timeout in seconds.
        retry_enabled: Whether to retry on transient failures.
        max_retries: Maximum number of retry attempts.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            base_url: The base URL for all API requests.
            timeout: Request timeout in seconds.
            retry_enabled: Whether to retry on transient failures.
            max_retries: Maximum number of retry attempts.
            transport: Custom transport (e.g., MockTransport for testing).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_enabled = retry_enabled
        self.max_retries = max_retries

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: HttpMethod,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Make an HTTP request and return the parsed JSON response.

        Args:
            method: The HTTP method (GET, POST, etc.).
            path: The URL path (will be appended to base_url).
            params: Query parameters to include in the URL.
            json: JSON body to send with the request (DELETE included).

        Returns:
            The parsed JSON response body, or None for empty responses.

        Raises:
            ConnectionError: If the connection fails.
            TimeoutError: If the request times out.
            APIError: If the server returns an error response.
        """
        url = f"{self.base_url}{path}"
        params = _clean_params(params)

        last_exception: Exception | None = None
        attempts = self.max_retries + 1 if self.retry_enabled else 1

        for attempt in range(attempts):
            try:
                response = self._client.request(
                    method=method,
                    url=path,
                    params=params,
                    json=json,
                )

                if (
                    self.retry_enabled
                    and response.status_code in RETRYABLE_STATUS_CODES
                    and attempt < attempts - 1
                ):
                    time.sleep(_calculate_backoff(attempt))
                    continue

                _raise_for_status(response)
                return _parse_body(response)

            except httpx.ConnectError as e:
                last_exception = ConnectionError(
                    message=f"Failed to connect to {url}",
                    url=url,
                    cause=e,
                )
                if not self.retry_enabled or attempt >= attempts - 1:
                    raise last_exception from e
                time.sleep(_calculate_backoff(attempt))

            except httpx.TimeoutException as e:
                last_exception = TimeoutError(
                    message=f"Request to {url} timed out",
                    timeout=self.timeout,
                    url=url,
                )
                if not self.retry_enabled or attempt >= attempts - 1:
                    raise last_exception from e
                time.sleep(_calculate_backoff(attempt))

        if last_exception:
            raise last_exception
        raise RuntimeError("Unexpected error in request retry loop")

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return self.request("POST", path, params=params, json=json)

    def delete(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make a DELETE request; the file server takes its target in the body."""
        return self.request("DELETE", path, params=params, json=json)


class AsyncHTTPClient:
    """Asynchronous HTTP client for making API requests.

    Wraps httpx.AsyncClient with the same error handling and retry logic
    as HTTPClient.

    Attributes:
        base_url: The base URL for all API requests.
        timeout: Request timeout in seconds.
        retry_enabled: Whether to retry on transient failures.
        max_retries: Maximum number of retry attempts.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_enabled = retry_enabled
        self.max_retries = max_retries

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: HttpMethod,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Make an async HTTP request and return the parsed JSON response.

        Raises:
            ConnectionError: If the connection fails.
            TimeoutError: If the request times out.
            APIError: If the server returns an error response.
        """
        url = f"{self.base_url}{path}"
        params = _clean_params(params)

        last_exception: Exception | None = None
        attempts = self.max_retries + 1 if self.retry_enabled else 1

        for attempt in range(attempts):
            try:
                response = await self._client.request(
                    method=method,
                    url=path,
                    params=params,
                    json=json,
                )

                if (
                    self.retry_enabled
                    and response.status_code in RETRYABLE_STATUS_CODES
                    and attempt < attempts - 1
                ):
                    await asyncio.sleep(_calculate_backoff(attempt))
                    continue

                _raise_for_status(response)
                return _parse_body(response)

            except httpx.ConnectError as e:
                last_exception = ConnectionError(
                    message=f"Failed to connect to {url}",
                    url=url,
                    cause=e,
                )
                if not self.retry_enabled or attempt >= attempts - 1:
                    raise last_exception from e
                await asyncio.sleep(_calculate_backoff(attempt))

            except httpx.TimeoutException as e:
                last_exception = TimeoutError(
                    message=f"Request to {url} timed out",
                    timeout=self.timeout,
                    url=url,
                )
                if not self.retry_enabled or attempt >= attempts - 1:
                    raise last_exception from e
                await asyncio.sleep(_calculate_backoff(attempt))

        if last_exception:
            raise last_exception
        raise RuntimeError("Unexpected error in request retry loop")

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await self.request("POST", path, params=params, json=json)

    async def delete(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await self.request("DELETE", path, params=params, json=json)
