"""File manager data models package.

This package contains the core of the virtual filesystem: the node model,
the immutable node store, path helpers and the error taxonomy. The
mutation engine (``models.mutations``), editor working set
(``models.working_set``), navigation (``models.navigation``) and session
(``models.file_manager``) build on these and are imported from their own
modules.
"""

from models.exceptions import (
    AccessDenied,
    FileSystemError,
    InvalidName,
    InvalidOperation,
    InvalidSnapshot,
    NameConflict,
    NotADirectory,
    NotAFile,
    NotEditable,
    NotFound,
    PersistenceFailure,
    UnsupportedContent,
)
from models.node import ROOT_ID, DirectoryEntry, FileSystemNode, NodeKind
from models.store import NodeStore

__all__ = [
    "FileSystemNode",
    "NodeKind",
    "DirectoryEntry",
    "ROOT_ID",
    "NodeStore",
    "FileSystemError",
    "NotFound",
    "NotADirectory",
    "NotAFile",
    "NameConflict",
    "InvalidName",
    "InvalidOperation",
    "NotEditable",
    "AccessDenied",
    "UnsupportedContent",
    "InvalidSnapshot",
    "PersistenceFailure",
]
