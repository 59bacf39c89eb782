"""Exception hierarchy for the file server client.

The hierarchy lets callers catch a specific failure or a broader category.

Exception Hierarchy:
    FileServerClientError (base)
    ├── ConnectionError - Network/connection failures
    ├── TimeoutError - Request timeout
    └── APIError - Server returned an error response
        ├── BadRequestError (HTTP 400)
        ├── ForbiddenError (HTTP 403)
        ├── NotFoundError (HTTP 404)
        ├── ConflictError (HTTP 409)
        ├── ValidationError (HTTP 422)
        └── ServerError (HTTP 5xx)

Example:
    Catching specific errors::

        try:
            client.fs.read("/notes/todo.txt")
        except NotFoundError:
            content = ""
        except ForbiddenError as e:
            print(f"Outside the served root: {e.message}")

    Catching all client errors::

        try:
            client.fs.mkdir("/projects/new")
        except FileServerClientError as e:
            print(f"Client error: {e}")
"""

from typing import Any


class FileServerClientError(Exception):
    """Base exception for all file server client errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class ConnectionError(FileServerClientError):
    """Failed to connect to the file server.

    Attributes:
        message: Human-readable error description.
        url: The URL that failed to connect.
        cause: The underlying exception that caused the connection failure.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.url = url
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.url:
            return f"{self.message} (url: {self.url})"
        return self.message


class TimeoutError(FileServerClientError):
    """Request timed out.

    Attributes:
        message: Human-readable error description.
        timeout: The timeout value in seconds.
        url: The URL that timed out.
    """

    def __init__(
        self,
        message: str,
        timeout: float | None = None,
        url: str | None = None,
    ) -> None:
        self.timeout = timeout
        self.url = url
        super().__init__(message)

    def __str__(self) -> str:
        extras = []
        if self.timeout is not None:
            extras.append(f"timeout: {self.timeout}s")
        if self.url:
            extras.append(f"url: {self.url}")
        if not extras:
            return self.message
        return f"{self.message} ({', '.join(extras)})"


class APIError(FileServerClientError):
    """Server returned an error response.

    The file server reports failures as ``{"error": message, "details":
    ..., "type": kind}``.

    Attributes:
        message: The ``error`` field of the response.
        status_code: HTTP status code from the server.
        error_type: Error kind from the response body (if available).
        details: The ``details`` field of the response (if available).
        response_body: Raw response body for debugging.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        error_type: str | None = None,
        details: Any = None,
        response_body: Any = None,
    ) -> None:
        self.status_code = status_code
        self.error_type = error_type
        self.details = details
        self.response_body = response_body
        super().__init__(message)

    def __str__(self) -> str:
        if self.error_type:
            return f"[HTTP {self.status_code}] [{self.error_type}] {self.message}"
        return f"[HTTP {self.status_code}] {self.message}"


class BadRequestError(APIError):
    """Malformed request or wrong node kind (HTTP 400).

    Raised for missing parameters, listing a file, reading a directory and
    invalid names.
    """

    def __init__(
        self,
        message: str,
        error_type: str | None = None,
        details: Any = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_type=error_type or "bad_request",
            details=details,
            response_body=response_body,
        )


class ForbiddenError(APIError):
    """Path lies outside the directory the server exposes (HTTP 403)."""

    def __init__(
        self,
        message: str,
        details: Any = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=403,
            error_type="access_denied",
            details=details,
            response_body=response_body,
        )


class NotFoundError(APIError):
    """Path not found (HTTP 404).

    Attributes:
        path: The path that wasn't found (if known).
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: Any = None,
        response_body: Any = None,
    ) -> None:
        self.path = path
        super().__init__(
            message=message,
            status_code=404,
            error_type="not_found",
            details=details,
            response_body=response_body,
        )


class ConflictError(APIError):
    """Name conflict (HTTP 409).

    Example:
        try:
            client.fs.mkdir("/docs")
        except ConflictError:
            # A file called "docs" is in the way
            ...
    """

    def __init__(
        self,
        message: str,
        details: Any = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=409,
            error_type="name_conflict",
            details=details,
            response_body=response_body,
        )


class ValidationError(APIError):
    """Request body validation failed (HTTP 422)."""

    def __init__(
        self,
        message: str,
        details: Any = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=422,
            error_type="validation_error",
            details=details,
            response_body=response_body,
        )


class ServerError(APIError):
    """Server-side error (HTTP 5xx).

    If retry logic is enabled, 502/503/504 responses are retried before
    this is raised.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Any = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_type="server_error",
            details=details,
            response_body=response_body,
        )
