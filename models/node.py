"""File system node model and the initial dataset."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.file_types import get_language, text_size
from models.paths import ROOT_PATH, join_path

ROOT_ID = "root"


class NodeKind(str, Enum):
    """Kind of a file system node."""

    FILE = "file"
    DIRECTORY = "directory"


class FileSystemNode(BaseModel):
    """One file or directory record in the tree.

    Nodes are frozen: every mutation produces a replacement node inside a new
    snapshot, so readers holding an older snapshot never see partial edits.
    Field aliases match the JSON wire form (``type``, ``parentId``,
    ``childrenIds``, ``lastModified``).

    Args:
        id: Opaque unique identifier, stable for the node's lifetime.
        name: Leaf display name (no separators).
        kind: Whether this node is a file or a directory.
        path: Canonical absolute path, denormalized from the id graph.
        parent_id: Owning directory's id, None only for the root.
        children_ids: Child ids, present only on directories.
        content: Text content, present only on text-representable files.
        size: Size in bytes (files).
        last_modified: When this node was last touched directly.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1, description="Unique node identifier")
    name: str = Field(description="Leaf display name")
    kind: NodeKind = Field(alias="type", description="File or directory")
    path: str = Field(description="Canonical absolute path")
    parent_id: Optional[str] = Field(
        default=None, alias="parentId", description="Parent directory id"
    )
    children_ids: Optional[tuple[str, ...]] = Field(
        default=None, alias="childrenIds", description="Child ids (directories only)"
    )
    content: Optional[str] = Field(default=None, description="Text content (files only)")
    size: Optional[int] = Field(default=None, ge=0, description="Size in bytes")
    last_modified: datetime = Field(alias="lastModified", description="Last modification")

    @model_validator(mode="after")
    def check_kind_fields(self) -> "FileSystemNode":
        """Directories carry no content; files carry no children."""
        if self.kind == NodeKind.DIRECTORY:
            if self.content is not None:
                raise ValueError(f"Directory '{self.id}' cannot have content")
            if self.children_ids is None:
                object.__setattr__(self, "children_ids", ())
        elif self.children_ids is not None:
            raise ValueError(f"File '{self.id}' cannot have childrenIds")
        return self

    @property
    def is_directory(self) -> bool:
        return self.kind == NodeKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind == NodeKind.FILE

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def is_editable(self) -> bool:
        """True for files whose text content is tracked."""
        return self.is_file and self.content is not None

    @property
    def language(self) -> Optional[str]:
        """Syntax-highlighting language derived from the file extension."""
        if not self.is_file:
            return None
        return get_language(self.name)

    def to_dict(self) -> dict[str, Any]:
        """Convert this node to its JSON wire form.

        Optional fields are omitted when absent; ``parentId`` is always
        present (``None`` for the root).

        Returns:
            JSON-compatible dictionary keyed by wire names.
        """
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.kind.value,
            "path": self.path,
            "parentId": self.parent_id,
        }
        if self.children_ids is not None:
            result["childrenIds"] = list(self.children_ids)
        if self.content is not None:
            result["content"] = self.content
        if self.size is not None:
            result["size"] = self.size
        result["lastModified"] = self.last_modified.isoformat()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FileSystemNode":
        """Create a node from its JSON wire form.

        Raises:
            pydantic.ValidationError: If the data is not a valid node.
        """
        return cls.model_validate(data)


class DirectoryEntry(BaseModel):
    """A flat directory listing entry as returned by a directory service.

    Args:
        name: Leaf name.
        path: Absolute path of the entry.
        kind: File or directory.
        size: Size in bytes.
        last_modified: Modification time.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    path: str
    kind: NodeKind = Field(alias="type")
    size: Optional[int] = None
    last_modified: datetime = Field(alias="lastModified")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "type": self.kind.value,
            "size": self.size,
            "lastModified": self.last_modified.isoformat(),
        }

    def to_node(self, parent_id: Optional[str]) -> FileSystemNode:
        """Convert this entry into a node keyed by its path.

        Listings from a real filesystem have no stable ids, so the path is
        used as the id and the listed directory's path as the parent id.
        """
        return FileSystemNode(
            id=self.path,
            name=self.name,
            kind=self.kind,
            path=self.path,
            parent_id=parent_id,
            children_ids=() if self.kind == NodeKind.DIRECTORY else None,
            size=self.size,
            last_modified=self.last_modified,
        )

    @classmethod
    def from_node(cls, node: FileSystemNode) -> "DirectoryEntry":
        return cls(
            name=node.name,
            path=node.path,
            kind=node.kind,
            size=node.size,
            last_modified=node.last_modified,
        )


def _directory(
    node_id: str, name: str, path: str, parent_id: Optional[str], children: list[str], now: datetime
) -> FileSystemNode:
    return FileSystemNode(
        id=node_id,
        name=name,
        kind=NodeKind.DIRECTORY,
        path=path,
        parent_id=parent_id,
        children_ids=tuple(children),
        last_modified=now,
    )


def _text_file(
    node_id: str, name: str, parent: FileSystemNode, content: str, now: datetime
) -> FileSystemNode:
    return FileSystemNode(
        id=node_id,
        name=name,
        kind=NodeKind.FILE,
        path=join_path(parent.path, name),
        parent_id=parent.id,
        content=content,
        size=text_size(content),
        last_modified=now,
    )


def create_initial_nodes(now: Optional[datetime] = None) -> dict[str, FileSystemNode]:
    """Build the documented initial dataset.

    Root ("My Drive") holds Documents, Pictures and README.md; Documents holds
    Report.txt and Projects/project_alpha.js; Pictures holds the binary
    placeholder vacation.jpg.

    Args:
        now: Timestamp stamped on every node (defaults to current UTC time).

    Returns:
        Mapping of node id to node.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    root = _directory(ROOT_ID, "My Drive", ROOT_PATH, None, ["docs", "pics", "readme"], now)
    docs = _directory("docs", "Documents", "/Documents", ROOT_ID, ["report_txt", "projects_folder"], now)
    projects = _directory(
        "projects_folder", "Projects", "/Documents/Projects", "docs", ["project_alpha_js"], now
    )
    pics = _directory("pics", "Pictures", "/Pictures", ROOT_ID, ["vacation_jpg"], now)
    vacation = FileSystemNode(
        id="vacation_jpg",
        name="vacation.jpg",
        kind=NodeKind.FILE,
        path="/Pictures/vacation.jpg",
        parent_id="pics",
        size=204800,
        last_modified=now,
    )
    nodes = [
        root,
        docs,
        _text_file("report_txt", "Report.txt", docs, "This is a confidential report.", now),
        projects,
        _text_file(
            "project_alpha_js",
            "project_alpha.js",
            projects,
            'console.log("Hello from Project Alpha!");',
            now,
        ),
        pics,
        vacation,
        _text_file(
            "readme",
            "README.md",
            root,
            "# Light File Manager\n\nThis is a simple file manager.",
            now,
        ),
    ]
    return {node.id: node for node in nodes}
