# tests/core/test_loader.py
from __future__ import annotations

from pathlib import Path

import pytest

from liveref.core.loader import import_attr, load_yaml_files, substitute_env_vars


class TestImportAttr:
    def test_import_formatter(self):
        from liveref.core.presentation.fields import format_price

        assert import_attr("liveref.core.presentation.fields:format_price") is format_price

    def test_missing_colon(self):
        with pytest.raises(ValueError, match="expected 'module:attr'"):
            import_attr("liveref.core.presentation.fields.format_price")

    def test_missing_module(self):
        with pytest.raises(ImportError):
            import_attr("liveref.nope:thing")

    def test_missing_attr(self):
        with pytest.raises(AttributeError):
            import_attr("liveref.core.presentation.fields:format_nothing")


class TestSubstituteEnvVars:
    def test_env_value_wins(self, monkeypatch):
        monkeypatch.setenv("CATALOG_URL", "http://catalog")
        assert substitute_env_vars("${CATALOG_URL:-http://fallback}") == "http://catalog"

    def test_default_used(self, monkeypatch):
        monkeypatch.delenv("CATALOG_URL", raising=False)
        assert substitute_env_vars("${CATALOG_URL:-http://fallback}/api") == "http://fallback/api"
        assert substitute_env_vars("${CATALOG_URL:-}") == ""

    def test_missing_without_default(self, monkeypatch):
        monkeypatch.delenv("CATALOG_URL", raising=False)
        with pytest.raises(ValueError, match="not set"):
            substitute_env_vars("${CATALOG_URL}")

    def test_nested_structures(self, monkeypatch):
        monkeypatch.setenv("FIELD_NAME", "Rating")
        assert substitute_env_vars({"fields": [{"name": "${FIELD_NAME}"}, 3, None]}) == {
            "fields": [{"name": "Rating"}, 3, None]
        }


class TestLoadYamlFiles:
    def test_sorted_glob(self, tmp_path: Path):
        (tmp_path / "b.yaml").write_text("name: b\n", encoding="utf-8")
        (tmp_path / "a.yaml").write_text("name: a\n", encoding="utf-8")

        result = load_yaml_files([str(tmp_path / "*.yaml")])
        assert result == [{"name": "a"}, {"name": "b"}]

    def test_duplicates_loaded_once(self, tmp_path: Path):
        config = tmp_path / "fields.yaml"
        config.write_text("fields: {}\n", encoding="utf-8")

        assert len(load_yaml_files([str(config), str(tmp_path / "*.yaml")])) == 1

    def test_no_match(self, tmp_path: Path):
        assert load_yaml_files([str(tmp_path / "missing/*.yaml")]) == []

    def test_empty_file(self, tmp_path: Path):
        config = tmp_path / "empty.yaml"
        config.write_text("", encoding="utf-8")
        assert load_yaml_files([str(config)]) == [{}]
