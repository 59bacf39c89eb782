"""Directory service interface and the in-memory (mock) implementation.

A directory service is the flat, path-addressed view of a filesystem that
the UI browses: list a directory, read and write text files, create and
delete directories. Three implementations exist: the mock service over a
FileManager session, the local OS filesystem, and a remote file server.
"""

from abc import ABC, abstractmethod
from typing import Optional

from models.exceptions import NotAFile, NotEditable, NotFound
from models.file_manager import FileManager
from models.navigation import sort_listing
from models.node import DirectoryEntry, FileSystemNode, NodeKind
from models.paths import ROOT_PATH, normalize_path


class DirectoryService(ABC):
    """Path-addressed filesystem operations.

    Errors are raised as ``models.exceptions.FileSystemError`` subclasses.

    Attributes:
        name: Short identifier used in logs.
        root_path: Path listed when no path is given.
    """

    name: str = "directory"
    root_path: str = ROOT_PATH

    @abstractmethod
    def list(self, path: Optional[str] = None) -> list[DirectoryEntry]:
        """Return the entries of the directory at ``path``.

        Raises:
            NotFound: If nothing exists at ``path``.
            NotADirectory: If ``path`` is a file.
        """

    @abstractmethod
    def read(self, path: str) -> str:
        """Return the text content of the file at ``path``.

        Raises:
            NotFound: If nothing exists at ``path``.
            NotAFile: If ``path`` is a directory.
        """

    @abstractmethod
    def write(self, path: str, content: str) -> None:
        """Create or overwrite the text file at ``path``."""

    @abstractmethod
    def mkdir(self, path: str) -> None:
        """Create the directory at ``path`` and any missing parents."""

    @abstractmethod
    def delete(self, path: str) -> None:
        """Delete the file or directory (recursively) at ``path``."""

    # Quoted: ``list`` is bound to the method above inside the class body
    def list_nodes(self, path: Optional[str] = None) -> "list[FileSystemNode]":
        """List ``path`` as nodes keyed by path, directories first.

        Listings carry no stable ids, so each entry's path is its id and the
        listed directory's path is its parent id.
        """
        directory = normalize_path(path if path is not None else self.root_path)
        entries = self.list(directory)
        return sort_listing([entry.to_node(parent_id=directory) for entry in entries])

    def close(self) -> None:
        """Release any resources held by the service."""


class MockDirectoryService(DirectoryService):
    """Directory service over an in-memory FileManager session.

    Writes go through the session's mutation engine, so they are validated,
    persisted and reflected in the editor working set like any UI edit.
    """

    name = "mock"

    def __init__(self, file_manager: FileManager) -> None:
        self.file_manager = file_manager
        self.root_path = file_manager.root_path

    def _node(self, path: str, kind: Optional[NodeKind] = None) -> FileSystemNode:
        snapshot = self.file_manager.snapshot
        node = (snapshot.find_by_path(path, kind) if kind else None) or snapshot.find_by_path(path)
        if node is None:
            path = normalize_path(path)
            raise NotFound(f"'{path}' not found", {"path": path})
        return node

    def list(self, path: Optional[str] = None) -> list[DirectoryEntry]:
        children = self.file_manager.list_directory(path if path is not None else self.root_path)
        return [DirectoryEntry.from_node(child) for child in children]

    def read(self, path: str) -> str:
        node = self._node(path, NodeKind.FILE)
        if not node.is_file:
            raise NotAFile(f"'{node.path}' is a directory", {"path": node.path})
        if node.content is None:
            raise NotEditable(f"'{node.path}' has no text content", {"path": node.path})
        return node.content

    def write(self, path: str, content: str) -> None:
        self.file_manager.write_file(path, content)

    def mkdir(self, path: str) -> None:
        self.file_manager.make_directories(path)

    def delete(self, path: str) -> None:
        self.file_manager.delete(self._node(path).id)
