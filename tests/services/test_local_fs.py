"""Tests for LocalDirectoryService over a temporary directory.

Tests cover:
- Listing, reading, writing, creating and deleting with virtual paths
- Confinement to the served root (``..`` and outbound symlinks)
- Error kinds for missing paths and wrong node kinds
"""

import pytest

from models.exceptions import (
    AccessDenied,
    InvalidOperation,
    NameConflict,
    NotADirectory,
    NotAFile,
    NotFound,
    UnsupportedContent,
)
from models.node import NodeKind
from services.local_fs import LocalDirectoryService


# =============================================================================
# Construction
# =============================================================================


class TestConstruction:
    def test_missing_root(self, tmp_path) -> None:
        with pytest.raises(NotFound):
            LocalDirectoryService(tmp_path / "missing")

    def test_create_missing_root(self, tmp_path) -> None:
        service = LocalDirectoryService(tmp_path / "new", create=True)

        assert service.root.is_dir()
        assert service.list("/") == []

    def test_root_must_be_directory(self, served_root) -> None:
        with pytest.raises(NotADirectory):
            LocalDirectoryService(served_root / "notes.txt")


# =============================================================================
# Listing and reading
# =============================================================================


class TestListAndRead:
    def test_list_root(self, local_service) -> None:
        entries = local_service.list("/")

        assert [(e.name, e.path, e.kind) for e in entries] == [
            ("docs", "/docs", NodeKind.DIRECTORY),
            ("notes.txt", "/notes.txt", NodeKind.FILE),
        ]
        assert entries[1].size == 5

    def test_list_defaults_to_root(self, local_service) -> None:
        assert [e.name for e in local_service.list()] == ["docs", "notes.txt"]

    def test_list_subdirectory(self, local_service) -> None:
        assert [e.path for e in local_service.list("/docs")] == ["/docs/guide.md"]

    def test_list_errors(self, local_service) -> None:
        with pytest.raises(NotFound):
            local_service.list("/missing")
        with pytest.raises(NotADirectory):
            local_service.list("/notes.txt")

    def test_list_nodes(self, local_service) -> None:
        nodes = local_service.list_nodes("/")

        assert [node.id for node in nodes] == ["/docs", "/notes.txt"]
        assert all(node.parent_id == "/" for node in nodes)

    def test_read(self, local_service) -> None:
        assert local_service.read("/docs/guide.md") == "# Guide"

    def test_read_errors(self, local_service, served_root) -> None:
        (served_root / "image.bin").write_bytes(b"\xff\xfe\x00\x01")

        with pytest.raises(NotFound):
            local_service.read("/missing.txt")
        with pytest.raises(NotAFile):
            local_service.read("/docs")
        with pytest.raises(UnsupportedContent):
            local_service.read("/image.bin")


# =============================================================================
# Writing, creating, deleting
# =============================================================================


class TestMutations:
    def test_write_new_and_overwrite(self, local_service, served_root) -> None:
        local_service.write("/docs/new.txt", "one")
        local_service.write("/docs/new.txt", "two")

        assert (served_root / "docs" / "new.txt").read_text(encoding="utf-8") == "two"

    def test_write_errors(self, local_service) -> None:
        with pytest.raises(NotAFile):
            local_service.write("/docs", "x")
        with pytest.raises(NotAFile):
            local_service.write("/", "x")
        with pytest.raises(NotFound):
            local_service.write("/missing/new.txt", "x")

    def test_mkdir_recursive_and_idempotent(self, local_service, served_root) -> None:
        local_service.mkdir("/a/b/c")
        local_service.mkdir("/a/b/c")

        assert (served_root / "a" / "b" / "c").is_dir()

    def test_mkdir_over_file(self, local_service) -> None:
        with pytest.raises(NameConflict):
            local_service.mkdir("/notes.txt")

    def test_delete_file(self, local_service, served_root) -> None:
        local_service.delete("/notes.txt")

        assert not (served_root / "notes.txt").exists()

    def test_delete_directory_recursively(self, local_service, served_root) -> None:
        local_service.delete("/docs")

        assert not (served_root / "docs").exists()

    def test_delete_errors(self, local_service) -> None:
        with pytest.raises(InvalidOperation):
            local_service.delete("/")
        with pytest.raises(NotFound):
            local_service.delete("/missing")


# =============================================================================
# Confinement
# =============================================================================


class TestConfinement:
    @pytest.mark.parametrize("path", ["/..", "/../outside.txt", "/docs/../../etc"])
    def test_parent_traversal_denied(self, local_service, path) -> None:
        with pytest.raises(AccessDenied):
            local_service.read(path)

    def test_outbound_symlink_is_hidden(self, local_service, served_root, tmp_path) -> None:
        outside = tmp_path / "outside"
        outside.mkdir()
        (served_root / "escape").symlink_to(outside, target_is_directory=True)

        assert "escape" not in [e.name for e in local_service.list("/")]
        with pytest.raises(AccessDenied):
            local_service.list("/escape")
