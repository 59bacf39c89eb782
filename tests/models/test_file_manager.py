"""Tests for the FileManager session.

The session ties the mutation engine, the editor working set and
navigation together. These tests check the cross-cutting guarantees:
- Open files never refer to deleted nodes
- Navigation never points at a missing directory
- Path-addressed helpers (write_file, make_directories) used by the mock
  directory service
- Opening, persisting and closing a session through an adapter
"""

import pytest

from models.exceptions import (
    NameConflict,
    NotADirectory,
    NotAFile,
    NotEditable,
    NotFound,
    PersistenceFailure,
)
from models.file_manager import FileManager, load_store
from storage.memory import InMemorySnapshotStore


class UnreadableAdapter(InMemorySnapshotStore):
    name = "unreadable"

    def load(self):
        raise PersistenceFailure("database locked")


# =============================================================================
# Navigation
# =============================================================================


class TestNavigation:
    def test_starts_at_root(self, file_manager) -> None:
        assert file_manager.current_path == "/"
        assert [node.name for node in file_manager.resolve().listing] == [
            "Documents",
            "Pictures",
            "README.md",
        ]

    def test_navigate(self, file_manager) -> None:
        result = file_manager.navigate("/Documents/Projects")

        assert file_manager.current_path == "/Documents/Projects"
        assert [node.id for node in result.listing] == ["project_alpha_js"]

    def test_navigate_to_missing_path_heals(self, file_manager) -> None:
        file_manager.navigate("/Documents")
        result = file_manager.navigate("/Nope")

        assert result.healed
        assert file_manager.current_path == "/"

    def test_navigate_up(self, file_manager) -> None:
        file_manager.navigate("/Documents/Projects")

        assert file_manager.navigate_up().path == "/Documents"
        assert file_manager.navigate_up().path == "/"
        assert file_manager.navigate_up().path == "/"

    def test_custom_root_path(self, engine) -> None:
        manager = FileManager(engine, root_path="/Documents")

        assert manager.current_path == "/Documents"
        assert manager.navigate("/Nope").path == "/Documents"

    def test_list_directory_does_not_heal(self, file_manager) -> None:
        with pytest.raises(NotFound):
            file_manager.list_directory("/Nope")
        with pytest.raises(NotADirectory):
            file_manager.list_directory("/README.md")

    def test_breadcrumbs_use_root_name(self, file_manager) -> None:
        file_manager.navigate("/Documents")

        crumbs = file_manager.breadcrumbs()

        assert [crumb.name for crumb in crumbs] == ["My Drive", "Documents"]


# =============================================================================
# Editor working set
# =============================================================================


class TestEditing:
    def test_open_edit_save(self, file_manager) -> None:
        file_manager.open_file("readme")
        file_manager.change_content("readme", "# Changed")
        assert file_manager.working_set.dirty_file_ids == ["readme"]

        result = file_manager.save_file()

        assert result.node.content == "# Changed"
        assert file_manager.snapshot.require("readme").size == 9
        assert file_manager.working_set.dirty_file_ids == []

    def test_open_directory_rejected(self, file_manager) -> None:
        with pytest.raises(NotAFile):
            file_manager.open_file("docs")

    def test_open_placeholder_rejected(self, file_manager) -> None:
        with pytest.raises(NotEditable):
            file_manager.open_file("vacation_jpg")

    def test_open_missing_rejected(self, file_manager) -> None:
        with pytest.raises(NotFound):
            file_manager.open_file("nope")

    def test_save_without_active_file(self, file_manager) -> None:
        with pytest.raises(NotFound):
            file_manager.save_file()

    def test_close_helpers(self, file_manager) -> None:
        file_manager.open_file("readme")
        file_manager.open_file("report_txt")
        file_manager.open_file("project_alpha_js")

        assert file_manager.close_file("project_alpha_js").active_file_id == "readme"
        assert file_manager.close_others("report_txt").open_file_ids == ["report_txt"]
        assert file_manager.close_all().entries == ()


# =============================================================================
# Mutations and their side effects
# =============================================================================


class TestMutations:
    def test_create_in_current_directory(self, file_manager) -> None:
        file_manager.navigate("/Documents")

        assert file_manager.create_directory("Drafts").node.path == "/Documents/Drafts"
        assert file_manager.import_file("todo.txt", "milk").node.path == "/Documents/todo.txt"

    def test_delete_closes_files_in_subtree(self, file_manager) -> None:
        file_manager.open_file("readme")
        file_manager.open_file("report_txt")
        file_manager.change_content("report_txt", "unsaved")

        file_manager.delete("docs")

        assert file_manager.working_set.open_file_ids == ["readme"]
        assert file_manager.working_set.active_file_id == "readme"

    def test_delete_current_directory_heals_to_parent(self, file_manager) -> None:
        file_manager.navigate("/Documents/Projects")

        file_manager.delete("projects_folder")

        assert file_manager.current_path == "/Documents"

    def test_delete_ancestor_heals_to_root(self, file_manager) -> None:
        file_manager.navigate("/Documents/Projects")

        file_manager.delete_path("/Documents")

        assert file_manager.current_path == "/"

    def test_rename_keeps_navigation_and_tabs(self, file_manager) -> None:
        file_manager.navigate("/Documents/Projects")
        file_manager.open_file("report_txt")

        file_manager.rename("docs", "Docs")

        assert file_manager.current_path == "/Docs/Projects"
        assert file_manager.working_set.get("report_txt").path == "/Docs/Report.txt"

    def test_move_unrelated_node_keeps_navigation(self, file_manager) -> None:
        file_manager.navigate("/Documents")

        file_manager.move("vacation_jpg", "/")

        assert file_manager.current_path == "/Documents"

    def test_folder_created_after_same_named_file_is_navigable(self, file_manager) -> None:
        file_manager.import_file("foo", "text", parent_path="/")
        file_manager.create_directory("foo", parent_path="/")

        result = file_manager.navigate("/foo")
        file_manager.create_directory("inner")

        assert not result.healed
        assert file_manager.current_path == "/foo"
        assert [node.name for node in file_manager.list_directory()] == ["inner"]

    def test_moving_file_that_shares_current_path_keeps_navigation(self, file_manager) -> None:
        file_manager.create_directory("foo", parent_path="/")
        moved = file_manager.import_file("foo", "text", parent_path="/").node
        file_manager.navigate("/foo")

        file_manager.move(moved.id, "/Pictures")

        assert file_manager.current_path == "/foo"
        assert file_manager.resolve_path("/Pictures/foo").is_file

    def test_reconciles_against_latest_snapshot(self, file_manager) -> None:
        file_manager.open_file("readme")
        stale = file_manager.create_directory("Music")
        file_manager.engine.delete_subtree("readme")

        file_manager._after_mutation(stale)

        assert file_manager.working_set.get("readme") is None

    def test_import_snapshot_clears_session(self, file_manager, initial_store) -> None:
        file_manager.open_file("readme")
        file_manager.navigate("/Documents")

        file_manager.import_snapshot(initial_store.to_dict())

        assert file_manager.working_set.entries == ()
        assert file_manager.current_path == "/"

    def test_reset_to_initial(self, file_manager) -> None:
        file_manager.delete("docs")
        file_manager.open_file("readme")

        file_manager.reset_to_initial()

        assert file_manager.resolve_path("/Documents").id == "docs"
        assert file_manager.working_set.entries == ()

    def test_export_snapshot(self, file_manager) -> None:
        assert set(file_manager.export_snapshot()) == set(file_manager.snapshot.nodes)


# =============================================================================
# Path-addressed helpers
# =============================================================================


class TestPathHelpers:
    def test_write_existing_file_saves(self, file_manager) -> None:
        result = file_manager.write_file("/README.md", "rewritten")

        assert result.node.id == "readme"
        assert file_manager.snapshot.require("readme").content == "rewritten"

    def test_write_new_file_imports(self, file_manager) -> None:
        result = file_manager.write_file("/Documents/new.txt", "hi")

        assert result.operation == "import_file"
        assert file_manager.resolve_path("/Documents/new.txt").content == "hi"

    def test_write_refreshes_open_clean_tab(self, file_manager) -> None:
        file_manager.open_file("readme")

        file_manager.write_file("/README.md", "from elsewhere")

        assert file_manager.working_set.get("readme").draft == "from elsewhere"

    def test_write_missing_parent(self, file_manager) -> None:
        with pytest.raises(NotFound):
            file_manager.write_file("/Nope/new.txt", "hi")

    def test_write_placeholder(self, file_manager) -> None:
        with pytest.raises(NotEditable):
            file_manager.write_file("/Pictures/vacation.jpg", "x")

    def test_make_directories(self, file_manager) -> None:
        created = file_manager.make_directories("/Documents/a/b")

        assert created.path == "/Documents/a/b"
        assert file_manager.resolve_path("/Documents/a").is_directory
        assert file_manager.snapshot.validate() == []

    def test_make_existing_directories_is_a_no_op(self, file_manager) -> None:
        before = file_manager.snapshot

        assert file_manager.make_directories("/Documents/Projects").id == "projects_folder"
        assert file_manager.snapshot is before

    def test_strict_session_rejects_folder_over_file(self, strict_engine) -> None:
        manager = FileManager(strict_engine)

        with pytest.raises(NameConflict):
            manager.make_directories("/README.md/sub")


# =============================================================================
# Persistence lifecycle
# =============================================================================


class TestSessionLifecycle:
    def test_load_store_falls_back_to_initial(self) -> None:
        assert "docs" in load_store(InMemorySnapshotStore())
        assert "docs" in load_store(InMemorySnapshotStore(initial={"bad": {"id": "bad"}}))
        assert "docs" in load_store(UnreadableAdapter())

    def test_open_persists_and_reloads(self) -> None:
        adapter = InMemorySnapshotStore()

        with FileManager.open(adapter) as manager:
            manager.create_directory("Music")

        with FileManager.open(adapter) as reopened:
            assert reopened.resolve_path("/Music").is_directory

    def test_failures_are_reported_not_rolled_back(self, failing_adapter) -> None:
        failures = []
        manager = FileManager.open(failing_adapter, on_failure=failures.append)

        manager.create_directory("Music")
        manager.engine.persistence.flush(timeout=5)

        assert manager.resolve_path("/Music").is_directory
        assert isinstance(manager.persistence_error, PersistenceFailure)
        assert len(failures) == 1
        manager.close()

    def test_reset_clears_adapter_before_saving_initial_dataset(self) -> None:
        class RecordingAdapter(InMemorySnapshotStore):
            def __init__(self) -> None:
                super().__init__()
                self.calls = []

            def save(self, snapshot) -> None:
                self.calls.append("save")
                super().save(snapshot)

            def reset(self) -> None:
                self.calls.append("reset")
                super().reset()

        adapter = RecordingAdapter()
        with FileManager.open(adapter) as manager:
            manager.create_directory("Music")
            manager.engine.persistence.flush(timeout=5)
            adapter.calls.clear()

            manager.reset_to_initial()
            manager.engine.persistence.flush(timeout=5)

        assert adapter.calls[:2] == ["reset", "save"]
        assert "/Music" not in {node["path"] for node in adapter.load().values()}

    def test_failed_reset_is_reported(self) -> None:
        class StuckAdapter(InMemorySnapshotStore):
            def reset(self) -> None:
                raise PersistenceFailure("database in use")

        failures = []
        manager = FileManager.open(StuckAdapter(), on_failure=failures.append)

        manager.reset_to_initial()

        assert manager.resolve_path("/Documents").id == "docs"
        assert [str(failure) for failure in failures] == ["database in use"]
        manager.close()

    def test_no_persistence(self, engine) -> None:
        manager = FileManager(engine)

        assert manager.persistence_error is None
        manager.close()

    def test_adapter_is_closed(self) -> None:
        class ClosingAdapter(InMemorySnapshotStore):
            closed = False

            def close(self) -> None:
                self.closed = True

        adapter = ClosingAdapter()
        FileManager.open(adapter).close()

        assert adapter.closed
