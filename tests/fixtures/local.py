"""Fixtures for a real directory served by LocalDirectoryService.

Layout of ``served_root``::

    notes.txt         "hello"
    docs/
        guide.md      "# Guide"
"""

import pytest

from services.local_fs import LocalDirectoryService


@pytest.fixture
def served_root(tmp_path):
    root = tmp_path / "served"
    root.mkdir()
    (root / "notes.txt").write_text("hello", encoding="utf-8")
    (root / "docs").mkdir()
    (root / "docs" / "guide.md").write_text("# Guide", encoding="utf-8")
    return root


@pytest.fixture
def local_service(served_root):
    return LocalDirectoryService(served_root)
