"""Unit tests for the navigation controller (models/navigation.py)."""

from models.navigation import (
    Breadcrumb,
    breadcrumbs,
    nearest_directory,
    resolve,
    sort_listing,
)


class TestSortListing:
    def test_directories_first_then_case_insensitive(self, engine) -> None:
        engine.create_directory("/", "zeta")
        engine.import_file("/", "alpha.txt", "a")
        store = engine.snapshot

        names = [node.name for node in sort_listing(store.children("root"))]

        assert names == ["Documents", "Pictures", "zeta", "alpha.txt", "README.md"]


class TestResolve:
    def test_existing_directory(self, initial_store) -> None:
        result = resolve(initial_store, "/Documents")

        assert result.path == "/Documents"
        assert not result.healed
        assert [node.name for node in result.listing] == ["Projects", "Report.txt"]

    def test_missing_path_heals_to_root(self, initial_store) -> None:
        result = resolve(initial_store, "/Nope/Deeper")

        assert result.path == "/"
        assert result.healed
        assert [node.name for node in result.listing] == ["Documents", "Pictures", "README.md"]

    def test_file_path_heals_to_root(self, initial_store) -> None:
        result = resolve(initial_store, "/README.md")

        assert result.path == "/"
        assert result.healed

    def test_heals_to_configured_root(self, initial_store) -> None:
        result = resolve(initial_store, "/Nope", root_path="/Documents")

        assert result.path == "/Documents"
        assert result.healed

    def test_missing_configured_root_uses_store_root(self, initial_store) -> None:
        result = resolve(initial_store, "/Nope", root_path="/Gone")

        assert result.path == "/"


class TestNearestDirectory:
    def test_existing_directory_is_kept(self, initial_store) -> None:
        assert nearest_directory(initial_store, "/Documents/Projects") == "/Documents/Projects"

    def test_walks_up_to_surviving_ancestor(self, engine) -> None:
        store = engine.delete_subtree("projects_folder").snapshot

        assert nearest_directory(store, "/Documents/Projects") == "/Documents"

    def test_deep_missing_path(self, initial_store) -> None:
        assert nearest_directory(initial_store, "/Documents/Projects/a/b") == "/Documents/Projects"


class TestBreadcrumbs:
    def test_nested_path(self) -> None:
        assert breadcrumbs("/Documents/Projects") == [
            Breadcrumb(name="My Drive", path="/"),
            Breadcrumb(name="Documents", path="/Documents"),
            Breadcrumb(name="Projects", path="/Documents/Projects"),
        ]

    def test_root(self) -> None:
        assert breadcrumbs("/", root_name="Home") == [Breadcrumb(name="Home", path="/")]
