"""Tests for end-to-end runs."""

import pytest

from typebridge.codegen.core.config import ConfigError
from typebridge.codegen.core.diagnostics import DiagnosticKind
from typebridge.pipeline import prepare_generators, run
from typebridge.rust_parser import SourceFile
from typebridge.utils import SourceLoadError

POINT = "#[typeshare]\npub struct Point { pub x: i32, pub y: i32 }\n"
CONFIG = "#[typeshare]\npub struct Config { pub debug: bool }\n"
NO_HEADER = {"common": {"no_version_header": True}}


def _source(path, text, module="crate"):
    return SourceFile(path, module, text)


class TestPrepareGenerators:
    def test_aliases_are_deduplicated(self):
        generators = prepare_generators(["ts", "typescript", "go"])
        assert list(generators) == ["typescript", "go"]

    def test_unknown_target(self):
        with pytest.raises(ConfigError, match="cobol"):
            prepare_generators(["cobol"])

    def test_no_targets(self):
        with pytest.raises(ConfigError):
            prepare_generators([])

    def test_unknown_section(self):
        with pytest.raises(ConfigError, match="cobol"):
            prepare_generators(["go"], {"cobol": {}})

    def test_invalid_options_collected_across_targets(self):
        with pytest.raises(ConfigError) as excinfo:
            prepare_generators(
                ["go", "ts"], {"go": {"bogus": 1}, "ts": {"int64_type": "long"}}
            )
        assert len(excinfo.value.diagnostics) == 2

    def test_common_and_language_sections(self):
        generators = prepare_generators(
            ["go", "kotlin"],
            {"common": {"package_name": "models"}, "kt": {"package_name": "com.x"}},
        )
        assert generators["go"].config.package_name == "models"
        assert generators["kotlin"].config.package_name == "com.x"


class TestRun:
    def test_generates_every_target(self):
        result = run([_source("src/lib.rs", POINT)], ["ts", "go"], NO_HEADER)
        assert result.success
        assert set(result.targets) == {"typescript", "go"}
        assert result.targets["typescript"].code.startswith("export interface Point {")
        assert result.targets["go"].file_extension == ".go"
        assert result.targets["go"].metadata["definition_count"] == 1

    def test_unknown_config_key_fails_before_reading(self, tmp_path):
        missing = tmp_path / "missing.rs"
        with pytest.raises(ConfigError):
            run([missing], ["go"], {"go": {"unknown": True}})

    def test_missing_source(self, tmp_path):
        with pytest.raises(SourceLoadError):
            run([tmp_path / "missing.rs"], ["go"])

    def test_paths_are_loaded(self, tmp_path):
        path = tmp_path / "point.rs"
        path.write_text(POINT)
        result = run([path], ["python"], NO_HEADER)
        assert result.success
        assert "class Point" in result.targets["python"].code

    def test_duplicate_definition_blocks_every_target(self):
        result = run(
            [_source("src/a.rs", CONFIG), _source("src/b.rs", CONFIG)],
            ["ts", "swift"],
        )
        assert not result.success
        assert result.graph is None
        assert [d.kind for d in result.diagnostics] == [DiagnosticKind.DUPLICATE_DEFINITION]
        assert result.failed_targets == ["typescript", "swift"]
        assert all(t.code == "" for t in result.targets.values())

    def test_malformed_attribute_blocks_generation(self):
        bad = '#[typeshare]\n#[serde(rename_all = "Nope")]\npub struct A { pub v: u8 }\n'
        result = run([_source("src/lib.rs", bad)], ["go"])
        assert not result.success
        assert result.diagnostics[0].kind == DiagnosticKind.MALFORMED_ATTRIBUTE

    def test_targets_fail_independently(self):
        source = _source("src/lib.rs", "#[typeshare]\npub struct Big { pub id: i64 }\n")
        result = run([source], ["reasonml", "kotlin"], NO_HEADER)
        assert not result.success
        assert result.failed_targets == ["reasonml"]
        assert "val id: Long," in result.targets["kotlin"].code
        assert result.targets["reasonml"].diagnostics[0].kind == DiagnosticKind.NOT_REPRESENTABLE

    def test_output_independent_of_source_order(self):
        a = _source("src/a.rs", "#[typeshare]\npub struct A { pub v: u8 }\n", "crate::a")
        b = _source("src/b.rs", "#[typeshare]\npub struct B { pub a: crate::a::A }\n", "crate::b")
        forward = run([a, b], ["ts", "go", "kotlin"], NO_HEADER)
        backward = run([b, a], ["ts", "go", "kotlin"], NO_HEADER, max_workers=1)
        for language in forward.targets:
            assert forward.targets[language].code == backward.targets[language].code

    def test_custom_marker(self):
        source = _source("src/lib.rs", "pub struct Plain { pub v: u8 }\n")
        result = run([source], ["ts"], NO_HEADER, is_marked=lambda item: True)
        assert "export interface Plain" in result.targets["typescript"].code

    def test_type_mapping_admits_external_type(self):
        source = _source("src/lib.rs", "#[typeshare]\npub struct User { pub id: Uuid }\n")
        options = {
            "common": {"no_version_header": True},
            "ts": {"type_mappings": {"Uuid": "string"}},
        }
        result = run([source], ["ts", "go"], options)
        assert result.diagnostics == []
        assert "    id: string;" in result.targets["typescript"].code
        assert result.failed_targets == ["go"]
        diagnostic = result.targets["go"].diagnostics[0]
        assert diagnostic.kind == DiagnosticKind.NOT_REPRESENTABLE
        assert "Uuid" in diagnostic.message

    def test_unmapped_external_type_blocks_every_target(self):
        source = _source("src/lib.rs", "#[typeshare]\npub struct User { pub id: Uuid }\n")
        result = run([source], ["ts", "go"], NO_HEADER)
        assert result.graph is None
        assert [d.kind for d in result.diagnostics] == [DiagnosticKind.UNRESOLVED_TYPE]
