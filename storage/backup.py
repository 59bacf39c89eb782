"""JSON backup files: export a snapshot to disk and read it back."""

import json
from datetime import date
from pathlib import Path
from typing import Any, Optional

from models.exceptions import InvalidSnapshot, PersistenceFailure
from storage.base import SnapshotData

BACKUP_PREFIX = "light-file-manager-backup"


def backup_file_name(on: Optional[date] = None) -> str:
    """Return the conventional backup file name, e.g.
    ``light-file-manager-backup-2025-01-15.json``."""
    on = on or date.today()
    return f"{BACKUP_PREFIX}-{on.isoformat()}.json"


def write_backup(snapshot: SnapshotData, path: str | Path) -> Path:
    """Write ``snapshot`` as pretty-printed JSON.

    If ``path`` is a directory, the conventional backup file name is used
    inside it.

    Returns:
        The file that was written.

    Raises:
        PersistenceFailure: If the file cannot be written.
    """
    target = Path(path)
    if target.is_dir():
        target = target / backup_file_name()
    try:
        target.write_text(json.dumps(snapshot, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as e:
        raise PersistenceFailure(f"Failed to write backup {target}", cause=e) from e
    return target


def read_backup(path: str | Path) -> Any:
    """Read a backup file and return the decoded JSON.

    The result is not validated here; pass it to an import operation.

    Raises:
        PersistenceFailure: If the file cannot be read.
        InvalidSnapshot: If the file is not valid JSON.
    """
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as e:
        raise PersistenceFailure(f"Failed to read backup {source}", cause=e) from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidSnapshot(f"Backup {source} is not valid JSON: {e.msg}") from e
