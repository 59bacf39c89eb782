"""Node store: an immutable snapshot of the virtual filesystem.

The tree is an arena: a flat id -> node map with parent/children links held
as ids. A NodeStore is never modified after construction; mutations build a
new store through ``with_changes`` so readers always observe a complete,
consistent snapshot.
"""

from collections import Counter
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional

from pydantic import ValidationError

from models.exceptions import InvalidSnapshot, NotFound
from models.node import FileSystemNode, NodeKind, create_initial_nodes
from models.paths import ROOT_PATH, join_path, normalize_path


class NodeStore:
    """Immutable snapshot of every node, indexed by id and by path.

    Attributes:
        nodes: Read-only id -> node mapping.
        root_id: Id of the unique node without a parent (None if absent).
    """

    def __init__(self, nodes: Mapping[str, FileSystemNode]) -> None:
        self._nodes: dict[str, FileSystemNode] = dict(nodes)
        # A file and a directory may share a path, so each kind has its own index
        self._dir_by_path: dict[str, str] = {}
        self._file_by_path: dict[str, str] = {}
        self.root_id: Optional[str] = None
        for node_id, node in self._nodes.items():
            index = self._dir_by_path if node.is_directory else self._file_by_path
            index.setdefault(node.path, node_id)
            if node.parent_id is None and self.root_id is None:
                self.root_id = node_id

    @classmethod
    def initial(cls) -> "NodeStore":
        """Create a store holding the documented initial dataset."""
        return cls(create_initial_nodes())

    # ===== Queries =====

    @property
    def nodes(self) -> Mapping[str, FileSystemNode]:
        return MappingProxyType(self._nodes)

    @property
    def root(self) -> Optional[FileSystemNode]:
        if self.root_id is None:
            return None
        return self._nodes.get(self.root_id)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[FileSystemNode]:
        return iter(self._nodes.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeStore):
            return NotImplemented
        return self._nodes == other._nodes

    def __repr__(self) -> str:
        return f"NodeStore({len(self._nodes)} nodes, root={self.root_id!r})"

    def get(self, node_id: str) -> Optional[FileSystemNode]:
        return self._nodes.get(node_id)

    def require(self, node_id: str) -> FileSystemNode:
        """Return the node with ``node_id``.

        Raises:
            NotFound: If no such node exists.
        """
        node = self._nodes.get(node_id)
        if node is None:
            raise NotFound(f"Node '{node_id}' not found", {"id": node_id})
        return node

    def children(self, node_id: str) -> list[FileSystemNode]:
        """Return the children of a directory.

        Fails closed: unknown ids, files and empty directories all yield an
        empty list. Dangling child ids are skipped.
        """
        node = self._nodes.get(node_id)
        if node is None or not node.is_directory or not node.children_ids:
            return []
        return [self._nodes[child_id] for child_id in node.children_ids if child_id in self._nodes]

    def find_by_path(self, path: str, kind: Optional[NodeKind] = None) -> Optional[FileSystemNode]:
        """Return the node at ``path`` (after normalization), or None.

        When a file and a directory share the path, the directory is returned
        unless ``kind`` asks for the file.
        """
        path = normalize_path(path)
        if kind is None:
            node_id = self._dir_by_path.get(path) or self._file_by_path.get(path)
        elif kind == NodeKind.DIRECTORY:
            node_id = self._dir_by_path.get(path)
        else:
            node_id = self._file_by_path.get(path)
        if node_id is None:
            return None
        return self._nodes.get(node_id)

    def find_directory(self, path: str) -> Optional[FileSystemNode]:
        return self.find_by_path(path, NodeKind.DIRECTORY)

    def list_in_directory(self, path: str) -> list[FileSystemNode]:
        """Return the children of the directory at ``path``.

        A missing path or a file path yields an empty list; the caller
        decides whether that is an error.
        """
        node = self.find_directory(path)
        if node is None:
            return []
        return self.children(node.id)

    def iter_subtree(self, node_id: str) -> Iterator[str]:
        """Yield ``node_id`` and every descendant id in pre-order."""
        stack = [node_id]
        seen: set[str] = set()
        while stack:
            current = stack.pop()
            if current in seen or current not in self._nodes:
                continue
            seen.add(current)
            yield current
            children = self._nodes[current].children_ids or ()
            stack.extend(reversed(children))

    def is_ancestor(self, ancestor_id: str, node_id: str) -> bool:
        """Return True if ``ancestor_id`` is ``node_id`` or one of its ancestors."""
        current = self._nodes.get(node_id)
        steps = 0
        while current is not None and steps <= len(self._nodes):
            if current.id == ancestor_id:
                return True
            if current.parent_id is None:
                return False
            current = self._nodes.get(current.parent_id)
            steps += 1
        return False

    def sibling_named(
        self, parent_id: str, name: str, kind: Optional[NodeKind] = None
    ) -> Optional[FileSystemNode]:
        """Return the child of ``parent_id`` called ``name`` (optionally of ``kind``)."""
        for child in self.children(parent_id):
            if child.name == name and (kind is None or child.kind == kind):
                return child
        return None

    # ===== Derivation =====

    def with_changes(
        self,
        upserts: Iterable[FileSystemNode] = (),
        removals: Iterable[str] = (),
    ) -> "NodeStore":
        """Return a new store with nodes replaced/added and ids removed.

        This store is left untouched. Nodes are shared between snapshots
        since they are frozen.
        """
        nodes = dict(self._nodes)
        for node_id in removals:
            nodes.pop(node_id, None)
        for node in upserts:
            nodes[node.id] = node
        return NodeStore(nodes)

    # ===== Validation =====

    def validate(self, strict_names: bool = False) -> list[str]:
        """Check the tree invariants and return any violations.

        Checks: a single root, acyclic ancestor chains ending at the root,
        parent/children symmetry, path denormalization, sibling name
        uniqueness (per kind, or across kinds when ``strict_names``) and that
        every referenced id resolves.

        Args:
            strict_names: Also treat a file and directory sharing a name
                within one parent as a violation.

        Returns:
            List of violation messages (empty if the store is consistent).
        """
        errors: list[str] = []

        roots = [node_id for node_id, node in self._nodes.items() if node.parent_id is None]
        if len(roots) != 1:
            errors.append(f"Expected exactly one root node, found {len(roots)}")

        for node_id, node in self._nodes.items():
            if node.id != node_id:
                errors.append(f"Node keyed '{node_id}' has id '{node.id}'")

            if node.parent_id is None:
                if node.path != ROOT_PATH:
                    errors.append(f"Root '{node_id}' has path '{node.path}', expected '/'")
                continue

            parent = self._nodes.get(node.parent_id)
            if parent is None:
                errors.append(f"Node '{node_id}' references missing parent '{node.parent_id}'")
                continue
            if not parent.is_directory:
                errors.append(f"Node '{node_id}' has file '{parent.id}' as parent")
            if node_id not in (parent.children_ids or ()):
                errors.append(f"Parent '{parent.id}' does not list child '{node_id}'")
            expected_path = join_path(parent.path, node.name)
            if node.path != expected_path:
                errors.append(
                    f"Node '{node_id}' has path '{node.path}', expected '{expected_path}'"
                )
            if not self._reaches_root(node_id):
                errors.append(f"Node '{node_id}' is not connected to the root")

        for node_id, node in self._nodes.items():
            if not node.is_directory:
                continue
            children_ids = node.children_ids or ()
            if len(set(children_ids)) != len(children_ids):
                errors.append(f"Directory '{node_id}' lists a child more than once")
            for child_id in children_ids:
                child = self._nodes.get(child_id)
                if child is None:
                    errors.append(f"Directory '{node_id}' references missing child '{child_id}'")
                elif child.parent_id != node_id:
                    errors.append(
                        f"Directory '{node_id}' lists '{child_id}' whose parent is "
                        f"'{child.parent_id}'"
                    )

            keys = [
                child.name if strict_names else (child.name, child.kind)
                for child in self.children(node_id)
            ]
            for key, count in Counter(keys).items():
                if count > 1:
                    name = key if strict_names else key[0]
                    errors.append(f"Directory '{node_id}' has {count} children named '{name}'")

        return errors

    def _reaches_root(self, node_id: str) -> bool:
        current = self._nodes.get(node_id)
        for _ in range(len(self._nodes) + 1):
            if current is None:
                return False
            if current.parent_id is None:
                return current.id == self.root_id
            current = self._nodes.get(current.parent_id)
        return False

    # ===== Serialization =====

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Export the node map as-is in its JSON wire form."""
        return {node_id: node.to_dict() for node_id, node in self._nodes.items()}

    @classmethod
    def from_dict(cls, data: Any, strict_names: bool = False) -> "NodeStore":
        """Build a store from exported data, rejecting inconsistent input.

        Args:
            data: Mapping of id -> node dictionary.
            strict_names: Forwarded to ``validate``.

        Returns:
            A consistent NodeStore.

        Raises:
            InvalidSnapshot: If ``data`` is not a node map or violates the tree
                invariants.
        """
        if not isinstance(data, Mapping) or not data:
            raise InvalidSnapshot("Snapshot must be a non-empty mapping of id to node")

        nodes: dict[str, FileSystemNode] = {}
        violations: list[str] = []
        for node_id, raw in data.items():
            if not isinstance(raw, Mapping):
                violations.append(f"Entry '{node_id}' is not an object")
                continue
            try:
                nodes[str(node_id)] = FileSystemNode.from_dict(dict(raw))
            except ValidationError as e:
                violations.append(f"Entry '{node_id}' is not a valid node: {e.errors()[0]['msg']}")
        if violations:
            raise InvalidSnapshot("Snapshot contains malformed nodes", violations)

        store = cls(nodes)
        violations = store.validate(strict_names=strict_names)
        if violations:
            raise InvalidSnapshot("Snapshot violates tree invariants", violations)
        return store
