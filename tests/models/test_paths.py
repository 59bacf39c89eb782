"""Unit tests for the virtual path helpers in models/paths.py."""

import pytest

from models.exceptions import InvalidName
from models.paths import (
    ROOT_PATH,
    ancestor_paths,
    is_within,
    join_path,
    normalize_path,
    parent_path,
    split_path,
    validate_name,
)


class TestNormalizePath:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("", "/"),
            ("/", "/"),
            ("//Documents//Projects/", "/Documents/Projects"),
            ("Documents/Report.txt", "/Documents/Report.txt"),
        ],
    )
    def test_canonical_form(self, raw: str, expected: str) -> None:
        assert normalize_path(raw) == expected


class TestJoinAndSplit:
    def test_join_under_root_has_single_separator(self) -> None:
        assert join_path(ROOT_PATH, "README.md") == "/README.md"

    def test_join_nested(self) -> None:
        assert join_path("/Documents", "Projects") == "/Documents/Projects"

    def test_split_nested(self) -> None:
        assert split_path("/Documents/Report.txt") == ("/Documents", "Report.txt")

    def test_split_top_level(self) -> None:
        assert split_path("/README.md") == ("/", "README.md")

    def test_split_root(self) -> None:
        assert split_path("/") == ("/", "")

    def test_parent_path(self) -> None:
        assert parent_path("/Documents/Projects") == "/Documents"
        assert parent_path("/Documents") == "/"


class TestAncestry:
    def test_ancestors_nearest_first(self) -> None:
        assert ancestor_paths("/a/b/c") == ["/a/b", "/a", "/"]

    def test_root_has_no_ancestors(self) -> None:
        assert ancestor_paths("/") == []

    def test_is_within(self) -> None:
        assert is_within("/Documents/Projects", "/Documents")
        assert is_within("/Documents", "/Documents")
        assert is_within("/anything", "/")

    def test_sibling_with_common_prefix_is_not_within(self) -> None:
        assert not is_within("/Documents2", "/Documents")


class TestValidateName:
    def test_valid_name_is_returned(self) -> None:
        assert validate_name("notes.txt") == "notes.txt"

    @pytest.mark.parametrize("name", ["", "   ", "a/b", ".", ".."])
    def test_invalid_names_rejected(self, name: str) -> None:
        with pytest.raises(InvalidName):
            validate_name(name)
