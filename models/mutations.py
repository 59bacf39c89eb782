"""Mutation engine: the single writer of node-store snapshots.

Every operation follows the same steps:
1. Validate preconditions against the current snapshot (nothing is applied
   if validation fails)
2. Compute the complete next snapshot
3. Publish it as the current snapshot
4. Hand it to the persistence worker without waiting for the write

Reads of ``snapshot`` never block and always return a complete snapshot.
"""

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.exceptions import (
    InvalidOperation,
    NameConflict,
    NotADirectory,
    NotAFile,
    NotEditable,
    NotFound,
)
from models.file_types import decode_text_content, format_bytes, text_size
from models.node import FileSystemNode, NodeKind, create_initial_nodes
from models.paths import join_path, normalize_path, validate_name
from models.store import NodeStore
from storage.worker import PersistenceWorker

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class MutationResult(BaseModel):
    """Outcome of a committed mutation.

    Args:
        operation: Name of the operation that produced this result.
        snapshot: The newly published snapshot.
        node: The created/updated node, if the operation targets one.
        removed_ids: Ids removed from the store by this operation.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    operation: str
    snapshot: NodeStore
    node: Optional[FileSystemNode] = None
    removed_ids: frozenset[str] = Field(default_factory=frozenset)


class MutationEngine:
    """Serializes all node-store mutations over one current snapshot.

    Attributes:
        persistence: Optional worker that replicates committed snapshots.
        strict_names: Reject a file and a directory sharing a name within one
            parent (by default only same-kind clashes are rejected).
    """

    def __init__(
        self,
        store: Optional[NodeStore] = None,
        persistence: Optional[PersistenceWorker] = None,
        strict_names: bool = False,
        clock: Optional[Clock] = None,
        id_factory: Optional[IdFactory] = None,
    ) -> None:
        self._snapshot = store if store is not None else NodeStore.initial()
        self.persistence = persistence
        self.strict_names = strict_names
        self._clock = clock or _utc_now
        self._id_factory = id_factory or _new_id
        self._operation_lock = threading.Lock()

    @property
    def snapshot(self) -> NodeStore:
        """The current published snapshot."""
        return self._snapshot

    # ===== Helpers =====

    def _commit(
        self,
        operation: str,
        next_store: NodeStore,
        node: Optional[FileSystemNode] = None,
        removed_ids: frozenset[str] = frozenset(),
    ) -> MutationResult:
        """Publish ``next_store`` and schedule its persistence. Caller holds the lock."""
        self._snapshot = next_store
        if self.persistence is not None:
            self.persistence.submit(next_store.to_dict())
        return MutationResult(
            operation=operation, snapshot=next_store, node=node, removed_ids=removed_ids
        )

    def _allocate_id(self, store: NodeStore) -> str:
        node_id = self._id_factory()
        while node_id in store:
            node_id = self._id_factory()
        return node_id

    @staticmethod
    def _require_directory(store: NodeStore, path: str) -> FileSystemNode:
        node = store.find_by_path(path)
        if node is None:
            raise NotFound(f"Directory '{path}' not found", {"path": path})
        if not node.is_directory:
            raise NotADirectory(f"'{path}' is not a directory", {"path": path})
        return node

    def _check_conflict(
        self,
        store: NodeStore,
        parent: FileSystemNode,
        name: str,
        kind: NodeKind,
        exclude_id: Optional[str] = None,
    ) -> None:
        existing = store.sibling_named(parent.id, name, None if self.strict_names else kind)
        if existing is not None and existing.id != exclude_id:
            label = "folder" if existing.is_directory else "file"
            raise NameConflict(
                f"A {label} named '{name}' already exists in '{parent.path}'",
                {"parent_path": parent.path, "name": name, "existing_id": existing.id},
            )

    def _add_child(
        self, store: NodeStore, operation: str, parent: FileSystemNode, child: FileSystemNode
    ) -> MutationResult:
        updated_parent = parent.model_copy(
            update={
                "children_ids": (*(parent.children_ids or ()), child.id),
                "last_modified": self._clock(),
            }
        )
        return self._commit(operation, store.with_changes([child, updated_parent]), node=child)

    # ===== Operations =====

    def create_directory(self, parent_path: str, name: str) -> MutationResult:
        """Create an empty directory ``name`` inside ``parent_path``.

        Raises:
            InvalidName: If ``name`` is not a valid leaf name.
            NotFound: If ``parent_path`` does not exist.
            NotADirectory: If ``parent_path`` is a file.
            NameConflict: If the parent already has a directory called ``name``.
        """
        validate_name(name)
        with self._operation_lock:
            store = self._snapshot
            parent = self._require_directory(store, parent_path)
            self._check_conflict(store, parent, name, NodeKind.DIRECTORY)

            directory = FileSystemNode(
                id=self._allocate_id(store),
                name=name,
                kind=NodeKind.DIRECTORY,
                path=join_path(parent.path, name),
                parent_id=parent.id,
                children_ids=(),
                last_modified=self._clock(),
            )
            result = self._add_child(store, "create_directory", parent, directory)

        logger.info(f"Created directory {directory.path} ({directory.id})")
        return result

    def import_file(
        self,
        parent_path: str,
        name: str,
        content: str | bytes | None = None,
        size: Optional[int] = None,
        last_modified: Optional[datetime] = None,
        mime_type: Optional[str] = None,
    ) -> MutationResult:
        """Add an uploaded file to ``parent_path``.

        Text content is stored verbatim. Content that cannot be represented
        as text is dropped and the node becomes a metadata-only placeholder
        (not editable).

        Args:
            parent_path: Directory to upload into.
            name: File name.
            content: Upload payload (text or raw bytes), if any.
            size: Size in bytes; derived from the payload when omitted.
            last_modified: Upload's own modification time (defaults to now).
            mime_type: Declared MIME type, used to decide whether bytes are text.

        Raises:
            InvalidName: If ``name`` is not a valid leaf name.
            NotFound: If ``parent_path`` does not exist.
            NotADirectory: If ``parent_path`` is a file.
            NameConflict: If the parent already has a file called ``name``.
        """
        validate_name(name)
        text = decode_text_content(content, mime_type)
        if size is None:
            if isinstance(content, bytes):
                size = len(content)
            elif text is not None:
                size = text_size(text)
            else:
                size = 0

        with self._operation_lock:
            store = self._snapshot
            parent = self._require_directory(store, parent_path)
            self._check_conflict(store, parent, name, NodeKind.FILE)

            file_node = FileSystemNode(
                id=self._allocate_id(store),
                name=name,
                kind=NodeKind.FILE,
                path=join_path(parent.path, name),
                parent_id=parent.id,
                content=text,
                size=size,
                last_modified=last_modified or self._clock(),
            )
            result = self._add_child(store, "import_file", parent, file_node)

        stored = "text" if text is not None else "metadata only"
        logger.info(f"Imported file {file_node.path} ({format_bytes(size)}, {stored})")
        return result

    def save_file(self, node_id: str, content: str) -> MutationResult:
        """Replace a file's content, recomputing size and stamping it.

        Path and parent are never changed.

        Raises:
            NotFound: If ``node_id`` does not exist.
            NotAFile: If ``node_id`` is a directory.
            NotEditable: If the file is a metadata-only placeholder.
        """
        with self._operation_lock:
            store = self._snapshot
            node = store.require(node_id)
            if not node.is_file:
                raise NotAFile(f"'{node.path}' is not a file", {"id": node_id})
            if node.content is None:
                raise NotEditable(f"'{node.path}' has no editable text content", {"id": node_id})

            updated = node.model_copy(
                update={
                    "content": content,
                    "size": text_size(content),
                    "last_modified": self._clock(),
                }
            )
            result = self._commit("save_file", store.with_changes([updated]), node=updated)

        logger.info(f"Saved file {updated.path} ({format_bytes(updated.size or 0)})")
        return result

    def delete_subtree(self, node_id: str) -> MutationResult:
        """Delete a node and, for directories, every descendant.

        The node is unlinked from its parent, which is stamped.

        Raises:
            NotFound: If ``node_id`` does not exist.
            InvalidOperation: If ``node_id`` is the root.
        """
        with self._operation_lock:
            store = self._snapshot
            node = store.require(node_id)
            if node.parent_id is None:
                raise InvalidOperation("The root directory cannot be deleted", {"id": node_id})

            removed = frozenset(store.iter_subtree(node_id))
            upserts = []
            parent = store.get(node.parent_id)
            if parent is not None:
                upserts.append(
                    parent.model_copy(
                        update={
                            "children_ids": tuple(
                                child_id
                                for child_id in (parent.children_ids or ())
                                if child_id != node_id
                            ),
                            "last_modified": self._clock(),
                        }
                    )
                )
            result = self._commit(
                "delete_subtree",
                store.with_changes(upserts, removals=removed),
                node=node,
                removed_ids=removed,
            )

        logger.info(f"Deleted {node.path} ({len(removed)} node(s) removed)")
        return result

    def move(
        self, node_id: str, new_parent_path: str, new_name: Optional[str] = None
    ) -> MutationResult:
        """Move and/or rename a node, keeping its id.

        The node's path and every descendant path are rewritten. Moving a
        node into itself or one of its descendants is rejected so the tree
        stays acyclic.

        Args:
            node_id: Node to move.
            new_parent_path: Destination directory.
            new_name: New leaf name (defaults to the current name).

        Raises:
            NotFound: If the node or destination does not exist.
            NotADirectory: If the destination is a file.
            InvalidOperation: If the node is the root or the destination lies
                inside the node's own subtree.
            InvalidName: If ``new_name`` is not a valid leaf name.
            NameConflict: If the destination already has a same-kind sibling
                with the target name.
        """
        if new_name is not None:
            validate_name(new_name)

        with self._operation_lock:
            store = self._snapshot
            node = store.require(node_id)
            if node.parent_id is None:
                raise InvalidOperation("The root directory cannot be moved", {"id": node_id})
            new_parent = self._require_directory(store, new_parent_path)
            if store.is_ancestor(node.id, new_parent.id):
                raise InvalidOperation(
                    f"Cannot move '{node.path}' into itself or its descendant '{new_parent.path}'",
                    {"id": node_id, "destination": new_parent.path},
                )
            name = new_name if new_name is not None else node.name
            if new_parent.id == node.parent_id and name == node.name:
                return MutationResult(operation="move", snapshot=store, node=node)
            self._check_conflict(store, new_parent, name, node.kind, exclude_id=node.id)

            now = self._clock()
            moved = node.model_copy(
                update={
                    "parent_id": new_parent.id,
                    "name": name,
                    "path": join_path(new_parent.path, name),
                    "last_modified": now,
                }
            )
            upserts: dict[str, FileSystemNode] = {moved.id: moved}
            for descendant_id in store.iter_subtree(node.id):
                if descendant_id == node.id:
                    continue
                descendant = store.require(descendant_id)
                parent_path = upserts[descendant.parent_id].path
                upserts[descendant_id] = descendant.model_copy(
                    update={"path": join_path(parent_path, descendant.name)}
                )

            old_parent = store.require(node.parent_id)
            if old_parent.id == new_parent.id:
                upserts[old_parent.id] = old_parent.model_copy(update={"last_modified": now})
            else:
                upserts[old_parent.id] = old_parent.model_copy(
                    update={
                        "children_ids": tuple(
                            c for c in (old_parent.children_ids or ()) if c != node.id
                        ),
                        "last_modified": now,
                    }
                )
                upserts[new_parent.id] = new_parent.model_copy(
                    update={
                        "children_ids": (*(new_parent.children_ids or ()), node.id),
                        "last_modified": now,
                    }
                )
            result = self._commit("move", store.with_changes(upserts.values()), node=moved)

        logger.info(f"Moved {node.path} -> {moved.path}")
        return result

    def import_snapshot(self, data: Any) -> MutationResult:
        """Replace the whole store with imported data.

        The data is fully validated before the live snapshot is touched.

        Raises:
            InvalidSnapshot: If ``data`` is not a consistent node map.
        """
        if isinstance(data, NodeStore):
            data = data.to_dict()
        store = NodeStore.from_dict(data, strict_names=self.strict_names)

        with self._operation_lock:
            previous = self._snapshot
            result = self._commit(
                "import_snapshot",
                store,
                removed_ids=frozenset(previous.nodes) - frozenset(store.nodes),
            )

        logger.info(f"Imported snapshot with {len(store)} nodes")
        return result

    def reset_to_initial(self) -> MutationResult:
        """Replace the whole store with the initial dataset."""
        store = NodeStore(create_initial_nodes(self._clock()))
        with self._operation_lock:
            previous = self._snapshot
            result = self._commit(
                "reset_to_initial",
                store,
                removed_ids=frozenset(previous.nodes) - frozenset(store.nodes),
            )

        logger.info("Reset file system to the initial dataset")
        return result

    def export_snapshot(self) -> dict[str, dict[str, Any]]:
        """Return the current snapshot as a JSON-compatible node map."""
        return self._snapshot.to_dict()

    def resolve_path(self, path: str) -> FileSystemNode:
        """Return the node at ``path`` in the current snapshot.

        Raises:
            NotFound: If nothing exists at ``path``.
        """
        node = self._snapshot.find_by_path(path)
        if node is None:
            path = normalize_path(path)
            raise NotFound(f"'{path}' not found", {"path": path})
        return node
