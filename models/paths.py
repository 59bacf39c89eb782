"""Path helpers for the virtual filesystem.

Paths are absolute, ``/``-separated strings. The root path is the single
separator; every other path is its parent's path joined with the leaf name.
"""

from models.exceptions import InvalidName

SEPARATOR = "/"
ROOT_PATH = SEPARATOR

_RESERVED_NAMES = {".", ".."}


def normalize_path(path: str) -> str:
    """Return the canonical form of an absolute path.

    Collapses repeated separators, trims a trailing separator and adds a
    leading one when missing. ``""`` normalizes to the root.

    Args:
        path: Path string as supplied by a caller.

    Returns:
        Canonical absolute path.
    """
    parts = [part for part in path.split(SEPARATOR) if part]
    return SEPARATOR + SEPARATOR.join(parts)


def join_path(parent_path: str, name: str) -> str:
    """Join a directory path and a leaf name."""
    if parent_path == ROOT_PATH:
        return f"{SEPARATOR}{name}"
    return f"{parent_path}{SEPARATOR}{name}"


def split_path(path: str) -> tuple[str, str]:
    """Split a path into (parent_path, name).

    The root splits into (``/``, ``""``).
    """
    path = normalize_path(path)
    if path == ROOT_PATH:
        return ROOT_PATH, ""
    parent, _, name = path.rpartition(SEPARATOR)
    return parent or ROOT_PATH, name


def parent_path(path: str) -> str:
    return split_path(path)[0]


def ancestor_paths(path: str) -> list[str]:
    """Return every ancestor of ``path``, nearest first, ending at the root."""
    result = []
    current = normalize_path(path)
    while current != ROOT_PATH:
        current = parent_path(current)
        result.append(current)
    return result


def is_within(path: str, ancestor: str) -> bool:
    """Return True if ``path`` equals ``ancestor`` or lies beneath it."""
    path = normalize_path(path)
    ancestor = normalize_path(ancestor)
    if ancestor == ROOT_PATH:
        return True
    return path == ancestor or path.startswith(ancestor + SEPARATOR)


def validate_name(name: str) -> str:
    """Validate a leaf node name.

    Args:
        name: Proposed node name.

    Returns:
        The name, unchanged.

    Raises:
        InvalidName: If the name is blank, contains a separator, or is
            one of the reserved names ``.`` and ``..``.
    """
    if not name or not name.strip():
        raise InvalidName("Name cannot be empty")
    if SEPARATOR in name:
        raise InvalidName(f"Name '{name}' cannot contain '{SEPARATOR}'")
    if name in _RESERVED_NAMES:
        raise InvalidName(f"Name '{name}' is reserved")
    return name
