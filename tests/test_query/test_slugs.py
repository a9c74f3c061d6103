"""Tests for specnav.query.slugs."""

from __future__ import annotations

import pytest

from specnav.query.slugs import (
    endpoint_path_to_slug,
    slug_to_endpoint_path,
    tag_path_to_slug,
    tag_segment_slug,
)


class TestEndpointSlugs:
    @pytest.mark.parametrize(
        ("path", "slug"),
        [
            ("/users/{id}/posts/{postId}", "users/:id/posts/:postId"),
            ("/pets", "pets"),
            ("/", ""),
            ("/Users/{userId}/Order History", "users/:userId/order-history"),
            ("/files/{name}.json", "files/{name}.json"),
            ("/store/inventory", "store/inventory"),
        ],
    )
    def test_path_to_slug(self, path: str, slug: str) -> None:
        assert endpoint_path_to_slug(path) == slug

    @pytest.mark.parametrize(
        "path",
        ["/users/{id}/posts/{postId}", "/pets/{petId}", "/a-b/c_d/{X_Y}", "/v1/store/inventory"],
    )
    def test_round_trip(self, path: str) -> None:
        assert slug_to_endpoint_path(endpoint_path_to_slug(path)) == path

    def test_round_trip_folds_static_case(self) -> None:
        assert slug_to_endpoint_path(endpoint_path_to_slug("/Users/{Id}")) == "/users/{Id}"

    def test_slug_to_path(self) -> None:
        assert slug_to_endpoint_path("users/:id/posts/:postId") == "/users/{id}/posts/{postId}"
        assert slug_to_endpoint_path("/pets") == "/pets"

    def test_lone_colon_is_literal(self) -> None:
        assert slug_to_endpoint_path("a/:/b") == "/a/:/b"

    def test_empty_braces_are_static(self) -> None:
        assert endpoint_path_to_slug("/a/{}") == "a/{}"


class TestTagSlugs:
    def test_nested_tag(self) -> None:
        assert tag_path_to_slug("Pet Store | Pets") == "pet-store/pets"

    def test_whitespace_variants(self) -> None:
        assert tag_path_to_slug("Pet Store|Pets") == tag_path_to_slug(" Pet Store  |  Pets ")

    def test_blank(self) -> None:
        assert tag_path_to_slug("") == ""

    def test_segment_punctuation(self) -> None:
        assert tag_segment_slug("User & Accounts (v2)") == "user-accounts-v2"
        assert tag_segment_slug("!!!") == "-"
