"""Navigation controller: resolves a path to a directory listing.

All functions here are pure over a NodeStore snapshot. Navigation never
points at a missing or non-directory node; unresolvable paths heal to the
configured root.
"""

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict

from models.node import FileSystemNode
from models.paths import ROOT_PATH, SEPARATOR, ancestor_paths, join_path, normalize_path
from models.store import NodeStore

logger = logging.getLogger(__name__)


class NavigationResult(BaseModel):
    """A resolved directory and its sorted listing.

    Args:
        path: Directory path that was actually resolved.
        listing: Children of that directory, directories first.
        healed: True when the requested path was unusable and navigation
            fell back to another directory.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    listing: tuple[FileSystemNode, ...] = ()
    healed: bool = False


class Breadcrumb(BaseModel):
    """One clickable segment of the current path."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str


def sort_listing(nodes: list[FileSystemNode]) -> list[FileSystemNode]:
    """Sort directories before files, then by case-insensitive name."""
    return sorted(nodes, key=lambda node: (not node.is_directory, node.name.casefold(), node.name))


def _directory_at(store: NodeStore, path: str) -> Optional[FileSystemNode]:
    return store.find_directory(path)


def resolve(store: NodeStore, current_path: str, root_path: str = ROOT_PATH) -> NavigationResult:
    """Resolve ``current_path`` to a directory listing.

    Falls back to ``root_path`` when ``current_path`` is missing or is a
    file. If even the root path does not resolve, the store's root node is
    used.

    Args:
        store: Snapshot to resolve against.
        current_path: Requested directory path.
        root_path: Configured navigation root.

    Returns:
        NavigationResult for the directory actually shown.
    """
    requested = normalize_path(current_path)
    directory = _directory_at(store, requested)
    if directory is not None:
        return NavigationResult(
            path=directory.path, listing=tuple(sort_listing(store.children(directory.id)))
        )

    fallback = _directory_at(store, root_path) or store.root
    if fallback is None:
        logger.debug(f"Navigation to {requested} failed: store has no root")
        return NavigationResult(path=normalize_path(root_path), healed=True)

    logger.debug(f"Navigation healed {requested} -> {fallback.path}")
    return NavigationResult(
        path=fallback.path,
        listing=tuple(sort_listing(store.children(fallback.id))),
        healed=True,
    )


def nearest_directory(store: NodeStore, path: str, root_path: str = ROOT_PATH) -> str:
    """Return the closest existing directory at or above ``path``.

    Used after a deletion so navigation lands on the nearest surviving
    ancestor rather than jumping to the root.
    """
    normalized = normalize_path(path)
    for candidate in [normalized, *ancestor_paths(normalized)]:
        if _directory_at(store, candidate) is not None:
            return candidate
    return normalize_path(root_path)


def breadcrumbs(path: str, root_name: str = "My Drive") -> list[Breadcrumb]:
    """Split ``path`` into breadcrumb segments starting at the root."""
    crumbs = [Breadcrumb(name=root_name, path=ROOT_PATH)]
    current = ROOT_PATH
    for segment in filter(None, normalize_path(path).split(SEPARATOR)):
        current = join_path(current, segment)
        crumbs.append(Breadcrumb(name=segment, path=current))
    return crumbs
