"""Directory service backed by a remote file server (``/api/fs/*``)."""

from contextlib import contextmanager
from typing import Iterator, Optional

from client import FileServerClient
from client.exceptions import APIError, FileServerClientError
from models.exceptions import (
    AccessDenied,
    FileSystemError,
    InvalidName,
    InvalidOperation,
    NameConflict,
    NotADirectory,
    NotAFile,
    NotEditable,
    NotFound,
    UnsupportedContent,
)
from models.node import DirectoryEntry
from models.paths import ROOT_PATH
from services.directory import DirectoryService

_ERRORS_BY_KIND: dict[str, type[FileSystemError]] = {
    cls.kind: cls
    for cls in (
        NotFound,
        NotADirectory,
        NotAFile,
        NameConflict,
        InvalidName,
        InvalidOperation,
        NotEditable,
        AccessDenied,
        UnsupportedContent,
    )
}

_ERRORS_BY_STATUS: dict[int, type[FileSystemError]] = {
    403: AccessDenied,
    404: NotFound,
    409: NameConflict,
    415: UnsupportedContent,
}


def translate_client_error(error: FileServerClientError) -> FileSystemError:
    """Convert a client exception into the matching core exception.

    The server's ``type`` field is preferred; the status code is the
    fallback. Transport failures become a plain FileSystemError.
    """
    if isinstance(error, APIError):
        details = error.details if isinstance(error.details, dict) else None
        error_class = _ERRORS_BY_KIND.get(error.error_type or "")
        if error_class is None:
            error_class = _ERRORS_BY_STATUS.get(error.status_code)
        if error_class is None and error.status_code == 400:
            error_class = InvalidOperation
        if error_class is not None:
            return error_class(error.message, details)
        return FileSystemError(f"File server error: {error}", details)
    return FileSystemError(f"File server unreachable: {error}")


@contextmanager
def _translated() -> Iterator[None]:
    try:
        yield
    except FileServerClientError as e:
        raise translate_client_error(e) from e


class RemoteDirectoryService(DirectoryService):
    """Directory service that forwards every call to a file server.

    Attributes:
        client: Client used for the ``/api/fs`` endpoints.
    """

    name = "remote"

    def __init__(self, client: FileServerClient, root_path: str = ROOT_PATH) -> None:
        self.client = client
        self.root_path = root_path

    def list(self, path: Optional[str] = None) -> list[DirectoryEntry]:
        with _translated():
            return self.client.fs.list(path if path is not None else self.root_path)

    def read(self, path: str) -> str:
        with _translated():
            return self.client.fs.read(path)

    def write(self, path: str, content: str) -> None:
        with _translated():
            self.client.fs.write(path, content)

    def mkdir(self, path: str) -> None:
        with _translated():
            self.client.fs.mkdir(path)

    def delete(self, path: str) -> None:
        with _translated():
            self.client.fs.delete(path)

    def close(self) -> None:
        self.client.close()
