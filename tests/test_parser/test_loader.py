"""Tests for specnav.parser.loader."""

from __future__ import annotations

import io
import json
import textwrap
from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest

from specnav.exceptions import SpecLoadError
from specnav.exit_codes import EXIT_SPEC_LOAD_ERROR
from specnav.parser.loader import (
    _load_from_file,
    _load_from_stdin,
    _load_from_url,
    _parse_content,
    load_spec,
    validate_document,
)

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"
URL = "https://example.com/openapi.json"


def _response(status_code: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status_code=status_code, request=httpx.Request("GET", URL), **kwargs)


# ---------------------------------------------------------------------------
# load_spec dispatch
# ---------------------------------------------------------------------------


class TestLoadSpec:
    """Test load_spec dispatcher routes to the correct loader."""

    def test_loads_json_file(self) -> None:
        result = load_spec(str(FIXTURES_DIR / "petstore.json"))
        assert result["openapi"] == "3.1.0"
        assert result["info"]["title"] == "Pet Store"

    def test_loads_yaml_file(self, petstore_yaml_path: Path) -> None:
        result = load_spec(str(petstore_yaml_path))
        assert result["info"]["version"] == "2.0.0"
        assert result["paths"]["/pets"]["get"]["tags"] == ["Pet Store | Pets"]

    def test_loads_from_stdin(self) -> None:
        spec_json = json.dumps({"openapi": "3.0.3", "paths": {}})
        with patch("specnav.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO(spec_json)
            result = load_spec("-")
        assert result["openapi"] == "3.0.3"

    def test_loads_from_url(self) -> None:
        spec = {"openapi": "3.0.3", "info": {"title": "URL test"}, "paths": {}}
        with patch("specnav.parser.loader.httpx.get", return_value=_response(json=spec)) as mock_get:
            result = load_spec(URL)
        assert result["info"]["title"] == "URL test"
        mock_get.assert_called_once_with(URL, timeout=30.0, follow_redirects=True)

    def test_url_served_from_cache(self) -> None:
        cache = MagicMock()
        cache.get.return_value = {"openapi": "3.0.0", "paths": {}}
        with patch("specnav.parser.loader.httpx.get") as mock_get:
            result = load_spec(URL, cache=cache)
        assert result == {"openapi": "3.0.0", "paths": {}}
        mock_get.assert_not_called()

    def test_url_stored_in_cache_on_miss(self) -> None:
        cache = MagicMock()
        cache.get.return_value = None
        spec = {"openapi": "3.0.3", "paths": {}}
        with patch("specnav.parser.loader.httpx.get", return_value=_response(json=spec)):
            load_spec(URL, cache=cache)
        cache.set.assert_called_once_with(URL, spec)

    def test_files_bypass_cache(self) -> None:
        cache = MagicMock()
        load_spec(str(FIXTURES_DIR / "petstore.json"), cache=cache)
        cache.get.assert_not_called()


# ---------------------------------------------------------------------------
# Individual loaders
# ---------------------------------------------------------------------------


class TestLoadFromFile:
    """Test loading documents from local files."""

    def test_file_not_found_raises(self) -> None:
        with pytest.raises(SpecLoadError, match="not found") as exc_info:
            _load_from_file("/nonexistent/path/to/spec.json")
        assert exc_info.value.exit_code == EXIT_SPEC_LOAD_ERROR

    def test_empty_file_raises(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.json"
        empty.write_text("  \n", encoding="utf-8")
        with pytest.raises(SpecLoadError, match="empty"):
            _load_from_file(str(empty))

    def test_invalid_json_file_raises(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{invalid json", encoding="utf-8")
        with pytest.raises(SpecLoadError, match="Invalid JSON"):
            _load_from_file(str(bad))

    def test_unknown_extension_detects_yaml(self, tmp_path: Path) -> None:
        spec = tmp_path / "spec.txt"
        spec.write_text("openapi: 3.0.0\npaths: {}\n", encoding="utf-8")
        assert _load_from_file(str(spec))["paths"] == {}


class TestLoadFromStdin:
    """Test loading documents from stdin."""

    def test_reads_yaml(self) -> None:
        content = textwrap.dedent("""\
            openapi: "3.0.0"
            info:
              title: YAML stdin
        """)
        with patch("specnav.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO(content)
            result = _load_from_stdin()
        assert result["info"]["title"] == "YAML stdin"

    def test_empty_stdin_raises(self) -> None:
        with patch("specnav.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO("   \n\t")
            with pytest.raises(SpecLoadError, match="No input"):
                _load_from_stdin()


class TestLoadFromUrl:
    """Test loading documents over HTTP."""

    def test_yaml_content_type(self) -> None:
        response = _response(
            text="openapi: 3.0.0\npaths: {}\n",
            headers={"content-type": "application/yaml"},
        )
        with patch("specnav.parser.loader.httpx.get", return_value=response):
            assert _load_from_url(URL) == {"openapi": "3.0.0", "paths": {}}

    def test_http_error_raises(self) -> None:
        with patch("specnav.parser.loader.httpx.get", return_value=_response(404, text="nope")):
            with pytest.raises(SpecLoadError, match="HTTP 404"):
                _load_from_url(URL)

    def test_connection_error_raises(self) -> None:
        error = httpx.ConnectError("refused", request=httpx.Request("GET", URL))
        with patch("specnav.parser.loader.httpx.get", side_effect=error):
            with pytest.raises(SpecLoadError, match="Failed to fetch"):
                _load_from_url(URL)


# ---------------------------------------------------------------------------
# _parse_content
# ---------------------------------------------------------------------------


class TestParseContent:
    """Test JSON/YAML detection."""

    def test_json_first(self) -> None:
        assert _parse_content('{"a": 1}') == {"a": 1}

    def test_yaml_fallback(self) -> None:
        assert _parse_content("a: 1\nb: [x, y]\n") == {"a": 1, "b": ["x", "y"]}

    def test_non_mapping_raises(self) -> None:
        with pytest.raises(SpecLoadError, match="must be a JSON/YAML object"):
            _parse_content("[1, 2, 3]")

    def test_scalar_yaml_raises(self) -> None:
        with pytest.raises(SpecLoadError, match="must be a JSON/YAML object"):
            _parse_content("just a string", hint="yaml")

    def test_unparseable_raises(self) -> None:
        with pytest.raises(SpecLoadError, match="Failed to parse"):
            _parse_content("{: [unbalanced")


# ---------------------------------------------------------------------------
# validate_document
# ---------------------------------------------------------------------------


class TestValidateDocument:
    """Test the minimal document shape check."""

    def test_returns_version(self, petstore_raw) -> None:
        assert validate_document(petstore_raw) == "3.1.0"

    def test_swagger_marker_accepted_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING", logger="specnav.parser.loader"):
            assert validate_document({"swagger": "2.0", "paths": {}}) == "2.0"
        assert "not 3.x" in caplog.text

    def test_missing_version_raises(self) -> None:
        with pytest.raises(SpecLoadError, match="Missing 'openapi'"):
            validate_document({"paths": {}})

    def test_missing_paths_raises(self) -> None:
        with pytest.raises(SpecLoadError, match="paths"):
            validate_document({"openapi": "3.0.0"})
