"""
Tests for schema module discovery and model registration.
"""

import logging
from pathlib import Path

import pytest

from schematsgen.core.models import Schema
from schematsgen.core.services.schema_loader import (
    SchemaModuleNotFoundError,
    load_schemas,
    resolve_model_paths,
)


class TestResolveModelPaths:
    def test_glob(self, models_dir: Path):
        paths = resolve_model_paths(["*.py"], models_dir)
        names = [p.name for p in paths]
        assert names == sorted(names)
        assert {"user.py", "owner.py", "settings_model.py"} <= set(names)

    def test_recursive_glob(self, fixtures_dir: Path):
        paths = resolve_model_paths(["**/user.py"], fixtures_dir)
        assert [p.name for p in paths] == ["user.py"]

    def test_duplicates_collapsed(self, models_dir: Path):
        paths = resolve_model_paths(["user.py", "*.py", str(models_dir / "user.py")], models_dir)
        assert [p.name for p in paths].count("user.py") == 1
        assert paths[0].name == "user.py"

    def test_literal_path_kept_when_missing(self, tmp_path: Path):
        paths = resolve_model_paths(["models/missing.py"], tmp_path)
        assert paths == [(tmp_path / "models" / "missing.py").resolve()]

    def test_unmatched_glob_warns(self, tmp_path: Path, caplog):
        with caplog.at_level(logging.WARNING):
            assert resolve_model_paths(["models/*.py"], tmp_path) == []
        assert "No schema modules matched" in caplog.text


class TestLoadSchemas:
    def test_exported_model(self, models_dir: Path):
        schemas = load_schemas([models_dir / "user.py"])
        assert list(schemas) == ["User"]
        assert isinstance(schemas["User"], Schema)

    def test_module_as_model(self, models_dir: Path):
        schemas = load_schemas([models_dir / "settings_model.py"])
        assert list(schemas) == ["Settings"]

    def test_sibling_import(self, models_dir: Path):
        schemas = load_schemas([models_dir / "owner.py"])
        assert list(schemas) == ["Owner"]
        assert len(schemas["Owner"].child_schemas) == 1

    def test_load_order(self, models_dir: Path):
        schemas = load_schemas([models_dir / "settings_model.py", models_dir / "user.py"])
        assert list(schemas) == ["Settings", "User"]

    def test_module_without_models_warns(self, models_dir: Path, caplog):
        with caplog.at_level(logging.WARNING):
            assert load_schemas([models_dir / "shared_schemas.py"]) == {}
        assert "no new exported models were found" in caplog.text

    def test_missing_module(self, tmp_path: Path):
        with pytest.raises(SchemaModuleNotFoundError, match="Could not find a module at path"):
            load_schemas([tmp_path / "nope.py"])

    def test_import_error_propagates(self, models_dir: Path):
        with pytest.raises(ImportError):
            load_schemas([models_dir / "broken.py"])

    def test_sys_path_restored(self, models_dir: Path):
        import sys

        before = list(sys.path)
        load_schemas([models_dir / "user.py"])
        assert sys.path == before
