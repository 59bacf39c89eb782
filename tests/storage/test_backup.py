"""Tests for JSON backup export and import."""

import json
from datetime import date

import pytest

from models.exceptions import InvalidSnapshot, PersistenceFailure
from models.store import NodeStore
from storage.backup import BACKUP_PREFIX, backup_file_name, read_backup, write_backup


class TestBackupFiles:
    def test_file_name(self) -> None:
        assert backup_file_name(date(2025, 1, 15)) == "light-file-manager-backup-2025-01-15.json"

    def test_write_into_directory_uses_conventional_name(self, tmp_path, initial_store) -> None:
        written = write_backup(initial_store.to_dict(), tmp_path)

        assert written.parent == tmp_path
        assert written.name.startswith(BACKUP_PREFIX)
        assert json.loads(written.read_text(encoding="utf-8")) == initial_store.to_dict()

    def test_round_trip(self, tmp_path, initial_store) -> None:
        path = write_backup(initial_store.to_dict(), tmp_path / "backup.json")

        assert NodeStore.from_dict(read_backup(path)) == initial_store

    def test_read_missing_file(self, tmp_path) -> None:
        with pytest.raises(PersistenceFailure):
            read_backup(tmp_path / "missing.json")

    def test_read_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(InvalidSnapshot):
            read_backup(path)

    def test_write_to_missing_directory(self, tmp_path, initial_store) -> None:
        with pytest.raises(PersistenceFailure):
            write_backup(initial_store.to_dict(), tmp_path / "missing" / "backup.json")
