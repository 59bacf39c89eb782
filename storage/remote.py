"""Persistence adapter that keeps the snapshot as a JSON file on a file server."""

import json
import logging
from typing import TYPE_CHECKING, Optional

from client.exceptions import FileServerClientError, NotFoundError
from models.exceptions import PersistenceFailure
from models.paths import normalize_path, parent_path
from storage.base import PersistenceAdapter, SnapshotData

if TYPE_CHECKING:
    from client import FileServerClient

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_PATH = "/.light-file-manager/file-system.json"


class RemoteSnapshotStore(PersistenceAdapter):
    """Store snapshots through the ``/api/fs`` write/read/delete endpoints.

    Args:
        client: Client connected to the file server.
        path: Path of the snapshot file on the server.
    """

    name = "remote"

    def __init__(self, client: "FileServerClient", path: str = DEFAULT_SNAPSHOT_PATH) -> None:
        self.client = client
        self.path = normalize_path(path)

    def save(self, snapshot: SnapshotData) -> None:
        try:
            payload = json.dumps(snapshot, ensure_ascii=False)
            self.client.fs.mkdir(parent_path(self.path))
            self.client.fs.write(self.path, payload)
        except (FileServerClientError, TypeError, ValueError) as e:
            raise PersistenceFailure(
                f"Failed to save snapshot to {self.path}: {e}", cause=e
            ) from e
        logger.debug(f"Saved snapshot ({len(snapshot)} nodes) to remote {self.path}")

    def load(self) -> Optional[SnapshotData]:
        try:
            payload = self.client.fs.read(self.path)
        except NotFoundError:
            return None
        except FileServerClientError as e:
            raise PersistenceFailure(
                f"Failed to load snapshot from {self.path}: {e}", cause=e
            ) from e

        try:
            return json.loads(payload)
        except ValueError as e:
            raise PersistenceFailure(f"Snapshot at {self.path} is not valid JSON", cause=e) from e

    def reset(self) -> None:
        try:
            self.client.fs.delete(self.path)
        except NotFoundError:
            return
        except FileServerClientError as e:
            raise PersistenceFailure(
                f"Failed to delete snapshot {self.path}: {e}", cause=e
            ) from e

    def close(self) -> None:
        self.client.close()
