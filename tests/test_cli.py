"""End-to-end tests for the specnav command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from specnav import __version__
from specnav.app import app, register_commands
from specnav.exit_codes import EXIT_INVALID_USAGE, EXIT_NOT_FOUND, EXIT_SPEC_LOAD_ERROR


@pytest.fixture(autouse=True)
def _commands(isolated_config: Path) -> None:
    register_commands()


@pytest.fixture
def invoke(cli_runner):
    def _invoke(*args: str):
        return cli_runner.invoke(app, [str(a) for a in args])

    return _invoke


class TestRoot:
    def test_version(self, invoke) -> None:
        result = invoke("--version")
        assert result.exit_code == 0
        assert f"specnav {__version__}" in result.stdout

    def test_register_is_idempotent(self) -> None:
        register_commands()
        names = [c.name for c in app.registered_commands]
        assert names.count("tree") == 1


class TestTree:
    def test_plain(self, invoke, petstore_path: Path) -> None:
        result = invoke("--plain", "tree", petstore_path)
        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert "Pet Store (5)" in lines
        assert "  Pets (4)" in lines

    def test_filters(self, invoke, petstore_path: Path) -> None:
        result = invoke(
            "--json", "tree", petstore_path, "--method", "get", "--security", "public"
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert [child["name"] for child in data["children"]] == ["Pet Store", "Untagged"]

    def test_search(self, invoke, petstore_path: Path) -> None:
        result = invoke("--json", "tree", petstore_path, "--search", "inventor")
        data = json.loads(result.stdout)
        store = data["children"][0]["children"]
        assert [node["name"] for node in store] == ["Store"]

    def test_no_match_prints_empty_tree(self, invoke, petstore_path: Path) -> None:
        result = invoke("--json", "tree", petstore_path, "--search", "zebra")
        assert result.exit_code == 0
        assert json.loads(result.stdout)["children"] == []

    def test_several_specs(self, invoke, petstore_path: Path, cyclic_path: Path) -> None:
        result = invoke("--json", "tree", petstore_path, cyclic_path)
        data = json.loads(result.stdout)
        assert [child["name"] for child in data["children"]] == ["Pet Store", "Tree API"]

    def test_private_operation_in_second_spec(self, invoke, tmp_path: Path) -> None:
        first = tmp_path / "a.json"
        second = tmp_path / "b.json"
        first.write_text(
            json.dumps({"openapi": "3.1.0", "info": {"title": "A"}, "paths": {"/pets": {"get": {}}}}),
            encoding="utf-8",
        )
        second.write_text(
            json.dumps(
                {
                    "openapi": "3.1.0",
                    "info": {"title": "B"},
                    "security": [{"key": []}],
                    "paths": {"/pets": {"post": {}}},
                }
            ),
            encoding="utf-8",
        )
        data = json.loads(invoke("--json", "tree", first, second, "--security", "private").stdout)
        assert [child["name"] for child in data["children"]] == ["B"]

    def test_yaml_source(self, invoke, petstore_yaml_path: Path) -> None:
        result = invoke("--json", "tree", petstore_yaml_path)
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert [child["name"] for child in data["children"]] == ["Pet Store"]

    def test_unknown_method(self, invoke, petstore_path: Path) -> None:
        result = invoke("tree", petstore_path, "--method", "fetch")
        assert result.exit_code == EXIT_INVALID_USAGE

    def test_missing_file(self, invoke, tmp_path: Path) -> None:
        result = invoke("tree", tmp_path / "missing.json")
        assert result.exit_code == EXIT_SPEC_LOAD_ERROR

    def test_not_openapi(self, invoke, tmp_path: Path) -> None:
        bogus = tmp_path / "bogus.json"
        bogus.write_text('{"name": "not a spec"}', encoding="utf-8")
        assert invoke("tree", bogus).exit_code == EXIT_SPEC_LOAD_ERROR

    def test_config_defaults(self, invoke, petstore_path: Path, isolated_config: Path) -> None:
        config_file = isolated_config / "config" / "specnav" / "config.json"
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(json.dumps({"explorer": {"methods": ["delete"]}}), encoding="utf-8")
        data = json.loads(invoke("--json", "tree", petstore_path).stdout)
        assert [child["name"] for child in data["children"]] == ["Pet Store", "Admin"]


class TestSearch:
    def test_table(self, invoke, petstore_path: Path) -> None:
        result = invoke("--json", "search", "list", petstore_path)
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == [
            {"Method": "GET", "Path": "/pets", "Summary": "List pets", "Spec": "Pet Store"}
        ]

    def test_no_results(self, invoke, petstore_path: Path) -> None:
        result = invoke("--json", "search", "zebra", petstore_path)
        assert result.exit_code == 0
        assert result.stdout == ""


class TestShow:
    def test_resolved_operation(self, invoke, petstore_path: Path) -> None:
        result = invoke("--json", "show", petstore_path, "get", "/pets/{petId}")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["method"] == "GET"
        assert data["slug"] == "pets/:petId"
        assert data["private"] is True
        assert data["securitySchemes"] == ["oauth"]
        assert data["operation"]["parameters"][0]["name"] == "petId"
        assert data["unresolved"] == []

    def test_slug_path(self, invoke, petstore_path: Path) -> None:
        data = json.loads(invoke("--json", "show", petstore_path, "GET", "pets/:petId").stdout)
        assert data["path"] == "/pets/{petId}"

    def test_public_operation(self, invoke, petstore_path: Path) -> None:
        data = json.loads(invoke("--json", "show", petstore_path, "GET", "/pets").stdout)
        assert data["private"] is False
        assert data["effectiveSecurity"] == []

    def test_raw(self, invoke, petstore_path: Path) -> None:
        data = json.loads(invoke("--json", "show", petstore_path, "GET", "/pets/{petId}", "--raw").stdout)
        assert data["operation"]["parameters"] == [{"$ref": "#/components/parameters/PetId"}]

    def test_markers_listed(self, invoke, cyclic_path: Path) -> None:
        data = json.loads(invoke("--json", "show", cyclic_path, "GET", "/nodes/{id}").stdout)
        kinds = {(m["$ref"], "circular" in m) for m in data["unresolved"]}
        assert ("#/components/schemas/Node", True) in kinds
        assert ("#/components/responses/Missing", False) in kinds

    def test_webhook(self, invoke, petstore_path: Path) -> None:
        data = json.loads(invoke("--json", "show", petstore_path, "POST", "newPet").stdout)
        assert data["path"] == "newPet"
        assert data["private"] is True
        body = data["operation"]["requestBody"]["content"]["application/json"]["schema"]
        assert body["required"] == ["id", "name"]

    def test_missing_operation(self, invoke, petstore_path: Path) -> None:
        assert invoke("show", petstore_path, "PUT", "/pets").exit_code == EXIT_NOT_FOUND


class TestResolve:
    def test_schema(self, invoke, petstore_path: Path) -> None:
        result = invoke("--json", "resolve", petstore_path, "#/components/schemas/Pet")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["properties"]["category"]["type"] == "object"

    def test_not_found(self, invoke, petstore_path: Path) -> None:
        result = invoke("resolve", petstore_path, "#/components/schemas/Nope")
        assert result.exit_code == EXIT_NOT_FOUND

    def test_external(self, invoke, petstore_path: Path) -> None:
        result = invoke("--json", "resolve", petstore_path, "other.yaml#/Pet")
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"$ref": "other.yaml#/Pet", "external": True}


class TestNode:
    def test_by_slug(self, invoke, petstore_path: Path) -> None:
        result = invoke("--json", "node", petstore_path, "--slug", "pet-store/store")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["fullPath"] == "Pet Store | Store"
        assert data["operations"][0]["operationId"] == "getInventory"

    def test_by_path(self, invoke, petstore_path: Path) -> None:
        data = json.loads(invoke("--json", "node", petstore_path, "--path", "Webhooks | Pets").stdout)
        assert data["operations"][0]["webhook"] is True

    def test_requires_exactly_one_selector(self, invoke, petstore_path: Path) -> None:
        assert invoke("node", petstore_path).exit_code == EXIT_INVALID_USAGE
        both = invoke("node", petstore_path, "--slug", "admin", "--path", "Admin")
        assert both.exit_code == EXIT_INVALID_USAGE

    def test_missing(self, invoke, petstore_path: Path) -> None:
        assert invoke("node", petstore_path, "--slug", "nope").exit_code == EXIT_NOT_FOUND


class TestSlug:
    def test_forward(self, invoke) -> None:
        assert invoke("slug", "/users/{id}/posts/{postId}").stdout == "users/:id/posts/:postId\n"

    def test_reverse(self, invoke) -> None:
        assert invoke("slug", "--reverse", "users/:id/posts/:postId").stdout == "/users/{id}/posts/{postId}\n"

    def test_tag(self, invoke) -> None:
        assert invoke("slug", "--tag", "Pet Store | Pets").stdout == "pet-store/pets\n"

    def test_conflicting_flags(self, invoke) -> None:
        assert invoke("slug", "--tag", "--reverse", "x").exit_code == EXIT_INVALID_USAGE


class TestFavorites:
    def test_add_list_remove(self, invoke, petstore_path: Path) -> None:
        added = invoke("favorites", "add", petstore_path, "get", "/pets")
        assert added.exit_code == 0, added.output

        listed = json.loads(invoke("--json", "favorites", "list").stdout)
        assert listed == [
            {
                "Method": "GET",
                "Path": "/pets",
                "Summary": "List pets",
                "Spec": "Pet Store",
                "Source": str(petstore_path),
            }
        ]

        removed = invoke("favorites", "remove", "GET", "/pets", "--source", petstore_path)
        assert removed.exit_code == 0
        assert invoke("--json", "favorites", "list").stdout == ""

    def test_remove_without_source(self, invoke, petstore_path: Path) -> None:
        invoke("favorites", "add", petstore_path, "GET", "/pets")
        removed = invoke("favorites", "remove", "get", "/pets")
        assert removed.exit_code == 0, removed.output
        assert invoke("--json", "favorites", "list").stdout == ""

    def test_add_unknown_operation(self, invoke, petstore_path: Path) -> None:
        assert invoke("favorites", "add", petstore_path, "GET", "/nope").exit_code == EXIT_NOT_FOUND

    def test_remove_missing(self, invoke) -> None:
        assert invoke("favorites", "remove", "GET", "/pets").exit_code == EXIT_NOT_FOUND

    def test_clear(self, invoke, petstore_path: Path) -> None:
        invoke("favorites", "add", petstore_path, "GET", "/pets")
        invoke("favorites", "add", petstore_path, "POST", "/pets")
        result = invoke("favorites", "clear", "--force")
        assert result.exit_code == 0
        assert invoke("--json", "favorites", "list").stdout == ""

    def test_clear_declined(self, cli_runner, petstore_path: Path) -> None:
        cli_runner.invoke(app, ["favorites", "add", str(petstore_path), "GET", "/pets"])
        result = cli_runner.invoke(app, ["favorites", "clear"], input="n\n")
        assert result.exit_code == 0
        listed = cli_runner.invoke(app, ["--json", "favorites", "list"])
        assert len(json.loads(listed.stdout)) == 1
