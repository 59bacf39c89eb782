"""Error taxonomy for the file manager core.

Every failure raised by the node store, mutation engine, working set and
directory services derives from FileSystemError. Each subclass carries a
``kind`` discriminator (stable string used in logs and JSON bodies) and the
HTTP status code the API layer maps it to.

Exception Hierarchy:
    FileSystemError (base)
    ├── NotFound - referenced id/path does not exist
    ├── NotADirectory - operation requires a directory
    ├── NotAFile - operation requires a file
    ├── NameConflict - sibling with the same name and kind exists
    ├── InvalidName - name is empty, contains a separator, or is "." / ".."
    ├── InvalidOperation - structurally forbidden (delete root, move into self)
    ├── NotEditable - file has no text content (metadata-only placeholder)
    ├── AccessDenied - path escapes the served root
    ├── UnsupportedContent - file content is not valid UTF-8 text
    ├── InvalidSnapshot - imported data fails structural validation
    └── PersistenceFailure - durable read/write failed
"""

from typing import Any


class FileSystemError(Exception):
    """Base exception for all file manager errors.

    Attributes:
        message: Human-readable error description.
        details: Optional structured context (ids, paths, violations).
    """

    kind: str = "file_system_error"
    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert this error to a JSON-compatible dictionary."""
        result: dict[str, Any] = {"error": self.message, "type": self.kind}
        if self.details:
            result["details"] = self.details
        return result


class NotFound(FileSystemError):
    """Referenced id or path does not exist in the current snapshot."""

    kind = "not_found"
    status_code = 404


class NotADirectory(FileSystemError):
    """Operation requires a directory but the target is a file."""

    kind = "not_a_directory"
    status_code = 400


class NotAFile(FileSystemError):
    """Operation requires a file but the target is a directory."""

    kind = "not_a_file"
    status_code = 400


class NameConflict(FileSystemError):
    """A sibling with the same name (and kind) already exists."""

    kind = "name_conflict"
    status_code = 409


class InvalidName(FileSystemError):
    """Node name is empty, contains a path separator, or is reserved."""

    kind = "invalid_name"
    status_code = 400


class InvalidOperation(FileSystemError):
    """Operation would break the tree structure (e.g. deleting the root)."""

    kind = "invalid_operation"
    status_code = 400


class NotEditable(FileSystemError):
    """File is a metadata-only placeholder without text content."""

    kind = "not_editable"
    status_code = 400


class AccessDenied(FileSystemError):
    """Path resolves outside the root served by a directory service."""

    kind = "access_denied"
    status_code = 403


class UnsupportedContent(FileSystemError):
    """File content cannot be represented as UTF-8 text."""

    kind = "unsupported_content"
    status_code = 415


class InvalidSnapshot(FileSystemError):
    """Imported snapshot data is not a consistent node map.

    Attributes:
        violations: Individual structural problems found in the data.
    """

    kind = "invalid_snapshot"
    status_code = 422

    def __init__(self, message: str, violations: list[str] | None = None) -> None:
        self.violations = violations or []
        super().__init__(
            message, {"violations": self.violations} if self.violations else None
        )


class PersistenceFailure(FileSystemError):
    """Durable write or read of a snapshot failed.

    Raised by persistence adapters. The in-memory snapshot that was being
    persisted stays committed.

    Attributes:
        cause: The underlying exception, if any.
    """

    kind = "persistence_failure"
    status_code = 503

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)
