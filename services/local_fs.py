"""Directory service over the local OS filesystem.

Paths are virtual: ``/`` is the served root directory and every other path
is relative to it. Resolved paths (after following ``..`` and symlinks)
must stay inside the root.
"""

import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from models.exceptions import (
    AccessDenied,
    FileSystemError,
    InvalidOperation,
    NameConflict,
    NotADirectory,
    NotAFile,
    NotFound,
    UnsupportedContent,
)
from models.node import DirectoryEntry, NodeKind
from models.paths import ROOT_PATH, normalize_path
from services.directory import DirectoryService

logger = logging.getLogger(__name__)


class LocalDirectoryService(DirectoryService):
    """Serve a directory of the local filesystem.

    Attributes:
        root: Absolute OS path of the served directory.
    """

    name = "local"

    def __init__(self, root: str | Path, create: bool = False) -> None:
        self.root = Path(root).expanduser().resolve()
        if not self.root.exists():
            if not create:
                raise NotFound(
                    f"Served root '{self.root}' does not exist", {"root": str(self.root)}
                )
            try:
                self.root.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FileSystemError(f"Cannot create served root: {e}") from e
        if not self.root.is_dir():
            raise NotADirectory(f"Served root '{self.root}' is not a directory")
        self.root_path = ROOT_PATH

    def _resolve(self, path: str) -> Path:
        """Map a virtual path onto the OS, refusing anything outside the root."""
        relative = path.strip().lstrip("/")
        candidate = (self.root / relative).resolve()
        try:
            candidate.relative_to(self.root)
        except ValueError as e:
            raise AccessDenied(f"'{path}' is outside the served directory", {"path": path}) from e
        return candidate

    def _virtual(self, target: Path) -> str:
        if target == self.root:
            return ROOT_PATH
        return normalize_path(target.relative_to(self.root).as_posix())

    def _entry(self, target: Path) -> DirectoryEntry:
        stat = target.stat()
        kind = NodeKind.DIRECTORY if target.is_dir() else NodeKind.FILE
        return DirectoryEntry(
            name=target.name,
            path=self._virtual(target),
            kind=kind,
            size=stat.st_size,
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )

    def list(self, path: Optional[str] = None) -> list[DirectoryEntry]:
        path = path if path is not None else self.root_path
        base = self._resolve(path)
        if not base.exists():
            raise NotFound(f"Directory '{path}' not found", {"path": path})
        if not base.is_dir():
            raise NotADirectory(f"'{path}' is not a directory", {"path": path})

        entries = []
        try:
            children = sorted(base.iterdir())
        except PermissionError as e:
            raise FileSystemError(f"Cannot read directory '{path}': permission denied") from e
        for child in children:
            if not child.resolve().is_relative_to(self.root):
                # symlink leading outside the root
                continue
            try:
                entries.append(self._entry(child))
            except OSError as e:
                logger.warning(f"Skipping {child}: {e}")
        return entries

    def read(self, path: str) -> str:
        target = self._resolve(path)
        if not target.exists():
            raise NotFound(f"File '{path}' not found", {"path": path})
        if not target.is_file():
            raise NotAFile(f"'{path}' is not a file", {"path": path})
        try:
            return target.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise UnsupportedContent(f"'{path}' is not UTF-8 text", {"path": path}) from e
        except OSError as e:
            raise FileSystemError(f"Cannot read '{path}': {e.strerror}", {"path": path}) from e

    def write(self, path: str, content: str) -> None:
        target = self._resolve(path)
        if target == self.root or target.is_dir():
            raise NotAFile(f"'{path}' is a directory", {"path": path})
        if not target.parent.is_dir():
            parent = self._virtual(target.parent)
            raise NotFound(f"Directory '{parent}' not found", {"path": parent})
        try:
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            raise FileSystemError(f"Cannot write '{path}': {e.strerror}", {"path": path}) from e
        logger.info(f"Wrote {self._virtual(target)} ({len(content.encode('utf-8'))} bytes)")

    def mkdir(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except (FileExistsError, NotADirectoryError) as e:
            raise NameConflict(f"A file is in the way of '{path}'", {"path": path}) from e
        except OSError as e:
            raise FileSystemError(f"Cannot create '{path}': {e.strerror}", {"path": path}) from e
        logger.info(f"Created directory {self._virtual(target)}")

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        if target == self.root:
            raise InvalidOperation("The served root cannot be deleted", {"path": path})
        if not target.exists():
            raise NotFound(f"'{path}' not found", {"path": path})
        try:
            if target.is_dir():
                shutil.rmtree(target)
            else:
                target.unlink()
        except OSError as e:
            raise FileSystemError(f"Cannot delete '{path}': {e.strerror}", {"path": path}) from e
        logger.info(f"Deleted {path}")
