"""Tests for configuration loading and validation."""

import json

import pytest

from typebridge.codegen.core.config import (
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    canonical_language,
    load_config,
)
from typebridge.codegen.core.diagnostics import DiagnosticKind


class TestCanonicalLanguage:
    @pytest.mark.parametrize(
        "name, expected",
        [("ts", "typescript"), ("Go", "go"), ("golang", "go"), ("kt", "kotlin"), ("cobol", None)],
    )
    def test_aliases(self, name, expected):
        assert canonical_language(name) == expected


class TestLoadConfig:
    def test_defaults(self):
        config = load_config("go")
        assert config.package_name == "main"
        assert config.option("generics") is True
        assert config.native_sum_types is None

    def test_reasonml_indent(self):
        assert load_config("reasonml").indent_size == 2

    def test_overrides(self):
        config = load_config("typescript", {"int64_type": "bigint", "indent_size": 2})
        assert config.option("int64_type") == "bigint"
        assert config.indent_size == 2

    def test_defaults_not_shared(self):
        config = load_config("swift", {"protocols": ["Hashable"]})
        config.custom["protocols"].append("Equatable")
        assert load_config("swift").option("protocols") == []

    def test_unknown_key(self):
        with pytest.raises(ConfigError) as excinfo:
            load_config("go", {"no_such_option": True})
        diagnostic = excinfo.value.diagnostics[0]
        assert diagnostic.kind == DiagnosticKind.INVALID_CONFIGURATION
        assert "no_such_option" in diagnostic.message

    def test_option_of_another_language(self):
        with pytest.raises(ConfigError):
            load_config("go", {"int64_type": "string"})

    def test_invalid_values_are_all_reported(self):
        with pytest.raises(ConfigError) as excinfo:
            load_config("typescript", {"int64_type": "long", "indent_size": 0})
        assert len(excinfo.value.diagnostics) == 2

    def test_unknown_language(self):
        with pytest.raises(ConfigError):
            load_config("cobol")

    def test_module_name(self):
        config = GeneratorConfig(package_name="models", output_module_prefix="com.example")
        assert config.module_name == "com.example.models"


class TestConfigFile:
    def test_sectioned_file(self, tmp_path):
        path = tmp_path / "typebridge.json"
        path.write_text(
            json.dumps(
                {
                    "common": {"package_name": "models"},
                    "ts": {"readonly_fields": True},
                    "go": {"generics": False},
                }
            )
        )
        ts = load_config("typescript", config_file=path)
        assert ts.package_name == "models"
        assert ts.option("readonly_fields") is True
        assert load_config("go", config_file=path).option("generics") is False

    def test_flat_file(self, tmp_path):
        path = tmp_path / "go.json"
        path.write_text(json.dumps({"package_name": "api"}))
        assert load_config("go", config_file=path).package_name == "api"

    def test_overrides_win_over_file(self, tmp_path):
        path = tmp_path / "go.json"
        path.write_text(json.dumps({"package_name": "api"}))
        config = load_config("go", {"package_name": "cli"}, path)
        assert config.package_name == "cli"

    def test_unknown_section(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"common": {}, "cobol": {}}))
        with pytest.raises(ConfigError, match="cobol"):
            load_config("go", config_file=path)

    def test_missing_and_invalid_files(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config("go", config_file=tmp_path / "missing.json")
        broken = tmp_path / "broken.json"
        broken.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config("go", config_file=broken)

    def test_save_round_trip(self, tmp_path):
        manager = ConfigManager()
        config = manager.get_config("python", {"style": "pydantic"})
        path = tmp_path / "saved.json"
        manager.save_config(config, "python", path)
        assert manager.get_config("python", config_file=path).option("style") == "pydantic"
