"""File manager session: the explicit context tying the core together.

A FileManager owns one MutationEngine (the node store), the editor working
set and the current navigation path. Every mutation goes through the
engine; afterwards the session reconciles the working set and heals
navigation so neither ever refers to nodes that no longer exist.
"""

import logging
import threading
from datetime import datetime
from typing import Any, Optional

from models.exceptions import (
    InvalidSnapshot,
    NotADirectory,
    NotAFile,
    NotEditable,
    NotFound,
    PersistenceFailure,
)
from models.mutations import MutationEngine, MutationResult
from models.navigation import (
    Breadcrumb,
    NavigationResult,
    breadcrumbs,
    nearest_directory,
    resolve,
    sort_listing,
)
from models.node import FileSystemNode, NodeKind
from models.paths import (
    ROOT_PATH,
    SEPARATOR,
    is_within,
    normalize_path,
    parent_path,
    split_path,
)
from models.store import NodeStore
from models.working_set import (
    ChangeContent,
    ClearWorkingSet,
    CloseAll,
    CloseFile,
    CloseOthers,
    FileSaved,
    OpenFile,
    Reconcile,
    WorkingSet,
    WorkingSetEvent,
    reduce,
)
from storage.base import PersistenceAdapter
from storage.worker import FailureCallback, PersistenceWorker

logger = logging.getLogger(__name__)


def load_store(adapter: PersistenceAdapter, strict_names: bool = False) -> NodeStore:
    """Load the persisted snapshot, falling back to the initial dataset.

    Absent data, an unreadable store and an inconsistent snapshot all start
    the session from the initial dataset; the problem is logged.
    """
    try:
        data = adapter.load()
    except PersistenceFailure as e:
        logger.warning(f"Could not load snapshot from {adapter.name}: {e}")
        return NodeStore.initial()

    if data is None:
        logger.info(f"No saved snapshot in {adapter.name}, using the initial dataset")
        return NodeStore.initial()

    try:
        return NodeStore.from_dict(data, strict_names=strict_names)
    except InvalidSnapshot as e:
        logger.warning(f"Ignoring invalid snapshot from {adapter.name}: {e} {e.violations}")
        return NodeStore.initial()


class FileManager:
    """One file manager session.

    Attributes:
        engine: Mutation engine holding the current snapshot.
        root_path: Navigation root that unresolvable paths fall back to.
        current_path: Directory currently being browsed.
    """

    def __init__(self, engine: Optional[MutationEngine] = None, root_path: str = ROOT_PATH) -> None:
        self.engine = engine or MutationEngine()
        self.root_path = normalize_path(root_path)
        self._working_set = WorkingSet()
        self._working_set_lock = threading.Lock()
        self.current_path = self.resolve(self.root_path).path

    @classmethod
    def open(
        cls,
        adapter: PersistenceAdapter,
        root_path: str = ROOT_PATH,
        strict_names: bool = False,
        on_failure: Optional[FailureCallback] = None,
    ) -> "FileManager":
        """Start a session backed by ``adapter``.

        Loads the persisted snapshot and starts a background worker that
        replicates every committed mutation to the adapter.
        """
        store = load_store(adapter, strict_names=strict_names)
        worker = PersistenceWorker(adapter, on_failure=on_failure).start()
        engine = MutationEngine(store, persistence=worker, strict_names=strict_names)
        logger.info(f"Opened file manager session on {adapter.name} ({len(store)} nodes)")
        return cls(engine, root_path=root_path)

    def close(self) -> None:
        """Flush pending persistence and release the adapter."""
        worker = self.engine.persistence
        if worker is not None:
            worker.stop()
            worker.adapter.close()

    def __enter__(self) -> "FileManager":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ===== State =====

    @property
    def snapshot(self) -> NodeStore:
        return self.engine.snapshot

    @property
    def working_set(self) -> WorkingSet:
        return self._working_set

    @property
    def persistence_error(self) -> Optional[PersistenceFailure]:
        """Most recent unrecovered persistence failure, if any."""
        worker = self.engine.persistence
        return worker.last_error if worker is not None else None

    def _dispatch(self, event: WorkingSetEvent) -> WorkingSet:
        with self._working_set_lock:
            self._working_set = reduce(self._working_set, event)
            return self._working_set

    def _after_mutation(self, result: MutationResult) -> MutationResult:
        """Bring the working set and navigation in line with ``result``."""
        snapshot = self.snapshot
        self._dispatch(Reconcile(snapshot=snapshot))
        healed = nearest_directory(snapshot, self.current_path, self.root_path)
        if healed != self.current_path:
            logger.debug(f"Navigation moved from {self.current_path} to {healed}")
            self.current_path = healed
        return result

    def _after_replacement(self, result: MutationResult) -> MutationResult:
        self._dispatch(ClearWorkingSet())
        self.current_path = self.resolve(self.root_path).path
        return result

    # ===== Navigation =====

    def resolve(self, path: Optional[str] = None) -> NavigationResult:
        """Resolve ``path`` (default: the current path) without navigating."""
        return resolve(
            self.snapshot, path if path is not None else self.current_path, self.root_path
        )

    def navigate(self, path: str) -> NavigationResult:
        """Navigate to ``path``, healing to the root if it is not a directory."""
        result = self.resolve(path)
        self.current_path = result.path
        return result

    def navigate_up(self) -> NavigationResult:
        if self.current_path == self.root_path:
            return self.resolve()
        return self.navigate(parent_path(self.current_path))

    def list_directory(self, path: Optional[str] = None) -> list[FileSystemNode]:
        """Return the sorted children of the directory at ``path``.

        Unlike ``navigate`` this does not heal: a bad path is an error.

        Raises:
            NotFound: If nothing exists at ``path``.
            NotADirectory: If ``path`` is a file.
        """
        target = normalize_path(path if path is not None else self.current_path)
        node = self.snapshot.find_by_path(target)
        if node is None:
            raise NotFound(f"Directory '{target}' not found", {"path": target})
        if not node.is_directory:
            raise NotADirectory(f"'{target}' is not a directory", {"path": target})
        return sort_listing(self.snapshot.children(node.id))

    def breadcrumbs(self) -> list[Breadcrumb]:
        root = self.snapshot.root
        if root is None:
            return breadcrumbs(self.current_path)
        return breadcrumbs(self.current_path, root_name=root.name)

    # ===== Editor working set =====

    def open_file(self, file_id: str) -> WorkingSet:
        """Open a file in the editor (or activate it if already open).

        Raises:
            NotFound: If ``file_id`` does not exist.
            NotAFile: If ``file_id`` is a directory.
            NotEditable: If the file has no text content.
        """
        node = self.snapshot.require(file_id)
        if not node.is_file:
            raise NotAFile(f"'{node.path}' is a directory", {"id": file_id})
        if not node.is_editable:
            raise NotEditable(f"'{node.path}' cannot be edited as text", {"id": file_id})
        return self._dispatch(OpenFile.from_node(node))

    def change_content(self, file_id: str, content: str) -> WorkingSet:
        return self._dispatch(ChangeContent(file_id=file_id, content=content))

    def save_file(self, file_id: Optional[str] = None) -> MutationResult:
        """Commit an open file's draft to the store.

        Args:
            file_id: File to save (defaults to the active file).

        Raises:
            NotFound: If the file is not open (or no file is active).
        """
        if file_id is None:
            file_id = self._working_set.active_file_id or ""
        draft = self._working_set.require(file_id).draft
        result = self.engine.save_file(file_id, draft)
        self._dispatch(FileSaved(file_id=file_id, content=draft))
        return self._after_mutation(result)

    def close_file(self, file_id: str) -> WorkingSet:
        return self._dispatch(CloseFile(file_id=file_id))

    def close_all(self) -> WorkingSet:
        return self._dispatch(CloseAll())

    def close_others(self, file_id: str) -> WorkingSet:
        return self._dispatch(CloseOthers(file_id=file_id))

    # ===== Mutations =====

    def create_directory(self, name: str, parent_path: Optional[str] = None) -> MutationResult:
        """Create a directory in ``parent_path`` (default: the current path)."""
        result = self.engine.create_directory(
            parent_path if parent_path is not None else self.current_path, name
        )
        return self._after_mutation(result)

    def import_file(
        self,
        name: str,
        content: str | bytes | None = None,
        parent_path: Optional[str] = None,
        size: Optional[int] = None,
        last_modified: Optional[datetime] = None,
        mime_type: Optional[str] = None,
    ) -> MutationResult:
        """Upload a file into ``parent_path`` (default: the current path)."""
        result = self.engine.import_file(
            parent_path if parent_path is not None else self.current_path,
            name,
            content=content,
            size=size,
            last_modified=last_modified,
            mime_type=mime_type,
        )
        return self._after_mutation(result)

    def move(
        self, node_id: str, new_parent_path: str, new_name: Optional[str] = None
    ) -> MutationResult:
        """Move or rename a node; navigation follows a moved current directory."""
        before = self.snapshot.get(node_id)
        result = self.engine.move(node_id, new_parent_path, new_name)
        if (
            before is not None
            and before.is_directory
            and result.node is not None
            and is_within(self.current_path, before.path)
        ):
            suffix = self.current_path[len(before.path):]
            self.current_path = normalize_path(result.node.path + suffix)
        return self._after_mutation(result)

    def rename(self, node_id: str, new_name: str) -> MutationResult:
        node = self.snapshot.require(node_id)
        return self.move(node_id, parent_path(node.path), new_name)

    def delete(self, node_id: str) -> MutationResult:
        """Delete a node and its subtree.

        Open files inside the subtree are closed (drafts are discarded) and,
        if the current directory was removed, navigation moves to its
        nearest surviving ancestor.
        """
        result = self.engine.delete_subtree(node_id)
        return self._after_mutation(result)

    def delete_path(self, path: str) -> MutationResult:
        return self.delete(self.engine.resolve_path(path).id)

    def import_snapshot(self, data: Any) -> MutationResult:
        """Replace the store with ``data``; clears the editor and navigation."""
        return self._after_replacement(self.engine.import_snapshot(data))

    def reset_to_initial(self) -> MutationResult:
        """Clear persisted data, then replace the store with the initial dataset.

        A failed adapter reset is reported through ``persistence_error``; the
        in-memory reset still happens.
        """
        worker = self.engine.persistence
        if worker is not None:
            worker.reset()
        return self._after_replacement(self.engine.reset_to_initial())

    def export_snapshot(self) -> dict[str, dict[str, Any]]:
        return self.engine.export_snapshot()

    def resolve_path(self, path: str) -> FileSystemNode:
        return self.engine.resolve_path(path)

    # ===== Path-addressed helpers =====

    def write_file(self, path: str, content: str) -> MutationResult:
        """Save ``content`` to the file at ``path``, creating it if needed.

        Raises:
            NotFound: If the parent directory does not exist.
            NotEditable: If the existing file is a metadata-only placeholder.
        """
        parent, name = split_path(path)
        directory = self.snapshot.find_by_path(parent)
        existing = None
        if directory is not None and directory.is_directory:
            existing = self.snapshot.sibling_named(directory.id, name, NodeKind.FILE)
        if existing is None:
            return self.import_file(name, content, parent_path=parent)
        return self._after_mutation(self.engine.save_file(existing.id, content))

    def make_directories(self, path: str) -> FileSystemNode:
        """Create the directory at ``path`` and any missing parents.

        Existing directories along the way are reused.
        """
        current = self.snapshot.require(self.snapshot.root_id or "")
        for segment in filter(None, normalize_path(path).split(SEPARATOR)):
            child = self.snapshot.sibling_named(current.id, segment, NodeKind.DIRECTORY)
            if child is None:
                child = self.create_directory(segment, parent_path=current.path).node
            current = child
        return current
