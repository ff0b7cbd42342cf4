"""
Tests for path set helpers.
"""

import pytest

from gitix.utils import is_ancestor, shortest_prefixes, sort_strings


class TestIsAncestor:
    """Tests for component-wise ancestry."""

    def test_self_is_ancestor(self):
        assert is_ancestor("a/b", "a/b")

    def test_parent_directory(self):
        assert is_ancestor("a", "a/b/c")

    def test_sibling_with_common_prefix(self):
        """Ancestry is per path component, not per character."""
        assert not is_ancestor("a", "ab")
        assert not is_ancestor("a", "a-b/c")

    def test_root_placeholder(self):
        assert is_ancestor(".", "anything/below")


class TestShortestPrefixes:
    """Tests for reducing dirs to trees."""

    def test_empty(self):
        assert shortest_prefixes([]) == []

    def test_nested_dirs_collapse(self):
        assert shortest_prefixes(["a/b", "a", "a/b/c", "d"]) == ["a", "d"]

    def test_common_string_prefix_is_not_ancestry(self):
        assert shortest_prefixes(["a", "ab", "a-b", "a/b"]) == ["a", "a-b", "ab"]

    def test_root_swallows_everything(self):
        assert shortest_prefixes(["-x", ".", "a/b"]) == ["."]

    @pytest.mark.parametrize(
        "dirs",
        [
            ["x/y/z", "x/y", "q", "q/r/s", "qr"],
            ["lib", "lib/util", "cmd/tool", "cmd/tool/sub", "cmdx"],
        ],
    )
    def test_minimal_and_covering(self, dirs):
        trees = shortest_prefixes(dirs)
        for d in dirs:
            assert any(is_ancestor(t, d) for t in trees)
        for t in trees:
            assert not any(other != t and is_ancestor(other, t) for other in trees)


def test_sort_strings_dedupes():
    assert sort_strings(["b", "a", "b"]) == ["a", "b"]
