"""Unit tests for NodeStore queries, validation and serialization."""

import json

import pytest

from models.exceptions import InvalidSnapshot, NotFound
from models.node import FileSystemNode, NodeKind, create_initial_nodes
from models.store import NodeStore
from tests.fixtures.core import FIXED_NOW


def _file(node_id: str, name: str, parent_id: str, path: str) -> FileSystemNode:
    return FileSystemNode(
        id=node_id, name=name, kind=NodeKind.FILE, path=path, parent_id=parent_id,
        content="", size=0, last_modified=FIXED_NOW,
    )


def _with_child(nodes: dict, parent_id: str, child: FileSystemNode) -> dict:
    """Add ``child`` to ``nodes`` and list it under ``parent_id``."""
    parent = nodes[parent_id]
    nodes[parent_id] = parent.model_copy(
        update={"children_ids": (*parent.children_ids, child.id)}
    )
    nodes[child.id] = child
    return nodes


# =============================================================================
# Queries
# =============================================================================


class TestQueries:
    def test_root(self, initial_store) -> None:
        assert initial_store.root_id == "root"
        assert initial_store.root.name == "My Drive"
        assert len(initial_store) == 8

    def test_require_missing_raises(self, initial_store) -> None:
        with pytest.raises(NotFound):
            initial_store.require("nope")

    def test_find_by_path_normalizes(self, initial_store) -> None:
        assert initial_store.find_by_path("//Documents/").id == "docs"
        assert initial_store.find_by_path("/Documents/Projects/project_alpha.js").id == (
            "project_alpha_js"
        )
        assert initial_store.find_by_path("/missing") is None

    def test_children_fail_closed(self, initial_store) -> None:
        assert [n.id for n in initial_store.children("docs")] == ["report_txt", "projects_folder"]
        assert initial_store.children("readme") == []
        assert initial_store.children("nope") == []

    def test_list_in_directory(self, initial_store) -> None:
        assert [n.id for n in initial_store.list_in_directory("/Pictures")] == ["vacation_jpg"]
        assert initial_store.list_in_directory("/README.md") == []
        assert initial_store.list_in_directory("/missing") == []

    def test_iter_subtree_pre_order(self, initial_store) -> None:
        assert list(initial_store.iter_subtree("docs")) == [
            "docs",
            "report_txt",
            "projects_folder",
            "project_alpha_js",
        ]

    def test_is_ancestor(self, initial_store) -> None:
        assert initial_store.is_ancestor("docs", "project_alpha_js")
        assert initial_store.is_ancestor("docs", "docs")
        assert not initial_store.is_ancestor("pics", "project_alpha_js")

    @pytest.mark.parametrize("folder_first", [True, False])
    def test_path_shared_by_file_and_folder(self, initial_store, folder_first) -> None:
        folder = FileSystemNode(
            id="readme_dir", name="README.md", kind=NodeKind.DIRECTORY, path="/README.md",
            parent_id="root", children_ids=(), last_modified=FIXED_NOW,
        )
        nodes = dict(initial_store.nodes)
        if folder_first:
            nodes = {"readme_dir": folder, **nodes}
        else:
            nodes["readme_dir"] = folder
        root = nodes["root"]
        nodes["root"] = root.model_copy(
            update={"children_ids": (*root.children_ids, "readme_dir")}
        )
        store = NodeStore(nodes)

        assert store.find_by_path("/README.md").id == "readme_dir"
        assert store.find_directory("/README.md").id == "readme_dir"
        assert store.find_by_path("/README.md", NodeKind.FILE).id == "readme"
        assert store.validate() == []

    def test_find_by_kind_misses(self, initial_store) -> None:
        assert initial_store.find_directory("/README.md") is None
        assert initial_store.find_by_path("/Documents", NodeKind.FILE) is None

    def test_sibling_named(self, initial_store) -> None:
        assert initial_store.sibling_named("root", "Documents").id == "docs"
        assert initial_store.sibling_named("root", "Documents", NodeKind.FILE) is None


class TestWithChanges:
    def test_original_is_untouched(self, initial_store) -> None:
        renamed = initial_store.require("readme").model_copy(update={"name": "READ.md"})
        changed = initial_store.with_changes([renamed], removals=["vacation_jpg"])

        assert changed.require("readme").name == "READ.md"
        assert "vacation_jpg" not in changed
        assert initial_store.require("readme").name == "README.md"
        assert "vacation_jpg" in initial_store


# =============================================================================
# Validation
# =============================================================================


class TestValidate:
    def test_initial_dataset_is_consistent(self, initial_store) -> None:
        assert initial_store.validate() == []
        assert initial_store.validate(strict_names=True) == []

    def test_wrong_path_detected(self) -> None:
        nodes = create_initial_nodes(FIXED_NOW)
        nodes["readme"] = nodes["readme"].model_copy(update={"path": "/elsewhere.md"})

        errors = NodeStore(nodes).validate()
        assert any("expected '/README.md'" in error for error in errors)

    def test_unlisted_child_detected(self) -> None:
        nodes = create_initial_nodes(FIXED_NOW)
        nodes["orphan"] = _file("orphan", "orphan.txt", "root", "/orphan.txt")

        errors = NodeStore(nodes).validate()
        assert any("does not list child 'orphan'" in error for error in errors)

    def test_second_root_detected(self) -> None:
        nodes = create_initial_nodes(FIXED_NOW)
        nodes["root2"] = nodes["root"].model_copy(update={"id": "root2", "children_ids": ()})

        errors = NodeStore(nodes).validate()
        assert any("exactly one root" in error for error in errors)

    def test_cycle_detected(self) -> None:
        nodes = create_initial_nodes(FIXED_NOW)
        nodes["docs"] = nodes["docs"].model_copy(update={"parent_id": "projects_folder"})

        errors = NodeStore(nodes).validate()
        assert any("not connected to the root" in error for error in errors)

    def test_same_kind_duplicate_names_detected(self) -> None:
        nodes = _with_child(
            create_initial_nodes(FIXED_NOW), "root", _file("dup", "README.md", "root", "/README.md")
        )

        errors = NodeStore(nodes).validate()
        assert any("2 children named 'README.md'" in error for error in errors)

    def test_cross_kind_names_only_rejected_when_strict(self) -> None:
        folder = FileSystemNode(
            id="readme_dir", name="README.md", kind=NodeKind.DIRECTORY, path="/README.md",
            parent_id="root", last_modified=FIXED_NOW,
        )
        store = NodeStore(_with_child(create_initial_nodes(FIXED_NOW), "root", folder))

        assert store.validate() == []
        assert store.validate(strict_names=True) != []


# =============================================================================
# Serialization
# =============================================================================


class TestSerialization:
    def test_round_trip_through_json(self, initial_store) -> None:
        data = json.loads(json.dumps(initial_store.to_dict()))
        assert NodeStore.from_dict(data) == initial_store

    def test_exported_keys_are_ids(self, initial_store) -> None:
        data = initial_store.to_dict()
        assert set(data) == set(initial_store.nodes)
        assert data["docs"]["childrenIds"] == ["report_txt", "projects_folder"]

    @pytest.mark.parametrize("data", [None, [], {}, "fileSystem"])
    def test_rejects_non_mappings(self, data) -> None:
        with pytest.raises(InvalidSnapshot):
            NodeStore.from_dict(data)

    def test_rejects_malformed_entries(self, initial_store) -> None:
        data = initial_store.to_dict()
        data["bad"] = {"id": "bad", "name": "bad"}

        with pytest.raises(InvalidSnapshot) as exc_info:
            NodeStore.from_dict(data)
        assert exc_info.value.violations
        assert exc_info.value.to_dict()["type"] == "invalid_snapshot"

    def test_rejects_inconsistent_tree(self, initial_store) -> None:
        data = initial_store.to_dict()
        data["root"]["childrenIds"].remove("readme")

        with pytest.raises(InvalidSnapshot) as exc_info:
            NodeStore.from_dict(data)
        assert any("readme" in violation for violation in exc_info.value.violations)
