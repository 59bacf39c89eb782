"""Editor working set: open files, the active file and unsaved drafts.

The working set is a frozen value updated by a pure reducer,
``reduce(state, event) -> state``, independent of any rendering framework.
Each open file moves through ``Open(clean) -> Open(dirty) -> Open(clean)``
until it is closed; entries never affect one another.

Drafts live only here. The committed content lives in the node store and
is written through the mutation engine on save; the reducer is told about a
successful save with a FileSaved event.
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict

from models.exceptions import NotFound
from models.file_types import get_language
from models.node import FileSystemNode
from models.store import NodeStore


class OpenFileEntry(BaseModel):
    """One open editor tab.

    Args:
        file_id: Id of the file node.
        name: File name at the time of the last sync with the store.
        path: File path at the time of the last sync with the store.
        committed_content: Content last read from / written to the store.
        draft: Current editor content.
    """

    model_config = ConfigDict(frozen=True)

    file_id: str
    name: str
    path: str
    committed_content: str
    draft: str

    @property
    def is_dirty(self) -> bool:
        return self.draft != self.committed_content

    @property
    def language(self) -> Optional[str]:
        return get_language(self.name)


class WorkingSet(BaseModel):
    """Immutable collection of open files in tab order.

    Args:
        entries: Open files, left-most first.
        active_file_id: Id of the file shown in the editor, if any.
    """

    model_config = ConfigDict(frozen=True)

    entries: tuple[OpenFileEntry, ...] = ()
    active_file_id: Optional[str] = None

    def get(self, file_id: str) -> Optional[OpenFileEntry]:
        for entry in self.entries:
            if entry.file_id == file_id:
                return entry
        return None

    def is_open(self, file_id: str) -> bool:
        return self.get(file_id) is not None

    @property
    def open_file_ids(self) -> list[str]:
        return [entry.file_id for entry in self.entries]

    @property
    def active_entry(self) -> Optional[OpenFileEntry]:
        if self.active_file_id is None:
            return None
        return self.get(self.active_file_id)

    @property
    def dirty_file_ids(self) -> list[str]:
        return [entry.file_id for entry in self.entries if entry.is_dirty]

    def require(self, file_id: str) -> OpenFileEntry:
        entry = self.get(file_id)
        if entry is None:
            raise NotFound(f"File '{file_id}' is not open", {"id": file_id})
        return entry


# ============================================================================
# Events
# ============================================================================


class OpenFile(BaseModel):
    """Open a file (or activate it if already open)."""

    type: Literal["open_file"] = "open_file"
    file_id: str
    name: str
    path: str
    content: str

    @classmethod
    def from_node(cls, node: FileSystemNode) -> "OpenFile":
        return cls(file_id=node.id, name=node.name, path=node.path, content=node.content or "")


class ChangeContent(BaseModel):
    """Editor content changed (keystroke-level)."""

    type: Literal["change_content"] = "change_content"
    file_id: str
    content: str


class FileSaved(BaseModel):
    """The file's draft was committed to the store with ``content``."""

    type: Literal["file_saved"] = "file_saved"
    file_id: str
    content: str


class CloseFile(BaseModel):
    type: Literal["close_file"] = "close_file"
    file_id: str


class CloseAll(BaseModel):
    type: Literal["close_all"] = "close_all"


class CloseOthers(BaseModel):
    """Close every file except ``file_id``, which becomes active."""

    type: Literal["close_others"] = "close_others"
    file_id: str


class Reconcile(BaseModel):
    """Bring the working set in line with a new store snapshot."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    type: Literal["reconcile"] = "reconcile"
    snapshot: NodeStore


class ClearWorkingSet(BaseModel):
    """Drop everything (ids from a replaced snapshot are meaningless)."""

    type: Literal["clear"] = "clear"


WorkingSetEvent = Union[
    OpenFile, ChangeContent, FileSaved, CloseFile, CloseAll, CloseOthers, Reconcile, ClearWorkingSet
]


# ============================================================================
# Reducer
# ============================================================================


def _replace(state: WorkingSet, entry: OpenFileEntry) -> tuple[OpenFileEntry, ...]:
    return tuple(entry if e.file_id == entry.file_id else e for e in state.entries)


def _next_active(
    entries: tuple[OpenFileEntry, ...], active_file_id: Optional[str]
) -> Optional[str]:
    """Keep the active file if it is still open, else fall back to the left-most."""
    if active_file_id is not None and any(e.file_id == active_file_id for e in entries):
        return active_file_id
    return entries[0].file_id if entries else None


def _reconcile(state: WorkingSet, snapshot: NodeStore) -> WorkingSet:
    entries = []
    for entry in state.entries:
        node = snapshot.get(entry.file_id)
        if node is None or not node.is_editable:
            continue
        committed = node.content or ""
        if entry.is_dirty:
            draft = entry.draft
        else:
            draft = committed
        entries.append(
            entry.model_copy(
                update={
                    "name": node.name,
                    "path": node.path,
                    "committed_content": committed,
                    "draft": draft,
                }
            )
        )
    kept = tuple(entries)
    return WorkingSet(entries=kept, active_file_id=_next_active(kept, state.active_file_id))


def reduce(state: WorkingSet, event: WorkingSetEvent) -> WorkingSet:
    """Apply ``event`` to ``state`` and return the new working set.

    Args:
        state: Current working set (not modified).
        event: Event to apply.

    Returns:
        The resulting working set.

    Raises:
        NotFound: If a change, save or close-others event names a file that
            is not open.
        ValueError: If ``event`` is not a working-set event.
    """
    if isinstance(event, OpenFile):
        if state.is_open(event.file_id):
            return state.model_copy(update={"active_file_id": event.file_id})
        entry = OpenFileEntry(
            file_id=event.file_id,
            name=event.name,
            path=event.path,
            committed_content=event.content,
            draft=event.content,
        )
        return WorkingSet(entries=(*state.entries, entry), active_file_id=event.file_id)

    if isinstance(event, ChangeContent):
        entry = state.require(event.file_id)
        return state.model_copy(
            update={"entries": _replace(state, entry.model_copy(update={"draft": event.content}))}
        )

    if isinstance(event, FileSaved):
        entry = state.require(event.file_id)
        saved = entry.model_copy(
            update={"committed_content": event.content, "draft": event.content}
        )
        return state.model_copy(update={"entries": _replace(state, saved)})

    if isinstance(event, CloseFile):
        if not state.is_open(event.file_id):
            return state
        remaining = tuple(e for e in state.entries if e.file_id != event.file_id)
        return WorkingSet(
            entries=remaining, active_file_id=_next_active(remaining, state.active_file_id)
        )

    if isinstance(event, CloseOthers):
        kept = state.require(event.file_id)
        return WorkingSet(entries=(kept,), active_file_id=kept.file_id)

    if isinstance(event, (CloseAll, ClearWorkingSet)):
        return WorkingSet()

    if isinstance(event, Reconcile):
        return _reconcile(state, event.snapshot)

    raise ValueError(f"Unknown working set event: {type(event).__name__}")

