"""Tests for specnav.query.filters."""

from __future__ import annotations

from typing import Any

import pytest

from specnav.indexer.tree import index_document
from specnav.models import SecurityMode
from specnav.query.filters import filter_tree_by_security_and_methods, prune_tree
from specnav.query.lookup import iter_operations
from specnav.security import PrivacyCache

ALL = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD", "TRACE"]


def _ops(root) -> list[tuple[str, str]]:
    return [(entry.method, entry.path) for _, entry in iter_operations(root)]


@pytest.fixture
def root(petstore_raw: dict[str, Any]):
    return index_document(petstore_raw)


@pytest.fixture
def privacy(petstore_raw: dict[str, Any]):
    cache = PrivacyCache()
    return lambda method, path: cache.is_private(method, path, [petstore_raw])


class TestMethodFilter:
    def test_single_method(self, root) -> None:
        filtered = filter_tree_by_security_and_methods(root, ["POST"])
        assert _ops(filtered) == [("POST", "/pets"), ("POST", "newPet")]

    def test_methods_case_insensitive(self, root) -> None:
        filtered = filter_tree_by_security_and_methods(root, ["delete"])
        assert list(filtered.children) == ["Pet Store", "Admin"]

    def test_no_methods(self, root) -> None:
        assert filter_tree_by_security_and_methods(root, []) is None

    def test_all_methods_keeps_everything(self, root) -> None:
        filtered = filter_tree_by_security_and_methods(root, ALL)
        assert filtered is not root
        assert filtered.operation_count() == root.operation_count()


class TestSecurityFilter:
    def test_private(self, root, privacy) -> None:
        filtered = filter_tree_by_security_and_methods(root, ALL, SecurityMode.PRIVATE, privacy)
        assert ("GET", "/pets") not in _ops(filtered)
        assert ("GET", "/health") not in _ops(filtered)
        assert "Untagged" not in filtered.children
        assert ("POST", "newPet") in _ops(filtered)

    def test_public(self, root, privacy) -> None:
        filtered = filter_tree_by_security_and_methods(root, ALL, "public", privacy)
        assert _ops(filtered) == [("GET", "/pets"), ("GET", "/health")]
        assert list(filtered.children) == ["Pet Store", "Untagged"]
        assert list(filtered.children["Pet Store"].children) == ["Pets"]

    def test_combined_with_methods(self, root, privacy) -> None:
        filtered = filter_tree_by_security_and_methods(root, ["GET"], SecurityMode.PRIVATE, privacy)
        assert _ops(filtered) == [("GET", "/pets/{petId}"), ("GET", "/store/inventory")]

    def test_requires_privacy_check(self, root) -> None:
        with pytest.raises(ValueError, match="privacy check"):
            filter_tree_by_security_and_methods(root, ALL, SecurityMode.PUBLIC)

    def test_invalid_mode(self, root, privacy) -> None:
        with pytest.raises(ValueError):
            filter_tree_by_security_and_methods(root, ALL, "secret", privacy)

    def test_input_not_mutated(self, root, privacy) -> None:
        filter_tree_by_security_and_methods(root, ["GET"], SecurityMode.PUBLIC, privacy)
        assert root.operation_count() == 8
        assert len(root.children["Pet Store"].children["Pets"].operations) == 4


class TestPruneTree:
    def test_keep_nothing(self, root) -> None:
        assert prune_tree(root, lambda entry: False) is None

    def test_entries_are_shared(self, root) -> None:
        pruned = prune_tree(root, lambda entry: entry.path == "/health")
        assert pruned.children["Untagged"].operations[0] is root.children["Untagged"].operations[0]
        assert pruned.children["Untagged"] is not root.children["Untagged"]
        assert pruned.children["Untagged"].full_path == "Untagged"
