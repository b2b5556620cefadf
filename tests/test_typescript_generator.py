"""Tests for the TypeScript generator."""

import pytest

from typebridge import __version__
from typebridge.codegen.core.config import ConfigError
from typebridge.codegen.core.generator import generate_code
from typebridge.codegen.registry import get_generator


class TestTypeScriptGenerator:
    def test_point_interface(self, generate, point_source):
        result = generate("typescript", point_source)
        assert result.success
        assert result.code == (
            "export interface Point {\n"
            "    x: number;\n"
            "    y: number;\n"
            "}\n"
        )

    def test_version_header(self, graph_of, point_source):
        generator = get_generator("ts")
        code = generate_code(generator, graph_of(point_source)).code
        assert code.startswith(f"// Generated by typebridge {__version__}\n")

    def test_u64_falls_back_with_warning(self, generate):
        result = generate(
            "typescript",
            "#[typeshare]\npub struct Counter { pub hits: u64 }",
        )
        assert result.success
        assert "hits: string;" in result.code
        assert any("u64" in w for w in result.warnings)

    def test_bigint_fallback(self, generate):
        result = generate(
            "typescript",
            "#[typeshare]\npub struct Counter { pub hits: i64 }",
            int64_type="bigint",
        )
        assert "hits: bigint;" in result.code

    def test_optional_and_renamed_fields(self, generate):
        result = generate(
            "typescript",
            """
            #[typeshare]
            #[serde(rename_all = "camelCase")]
            pub struct User {
                pub user_name: String,
                pub nick_name: Option<String>,
                #[serde(rename = "e-mail")]
                pub email: String,
                #[serde(default)]
                pub tags: Vec<String>,
            }
            """,
        )
        assert "    userName: string;" in result.code
        assert "    nickName?: string;" in result.code
        assert '    "e-mail": string;' in result.code
        assert "    tags?: string[];" in result.code

    def test_unit_enum(self, generate):
        result = generate(
            "typescript",
            """
            #[typeshare]
            #[serde(rename_all = "lowercase")]
            pub enum Color { Red, Green }
            """,
        )
        assert result.code == (
            "export enum Color {\n"
            '    Red = "red",\n'
            '    Green = "green",\n'
            "}\n"
        )

    def test_discriminated_union(self, generate, shape_source):
        result = generate("typescript", shape_source)
        assert "/** A shape */\nexport type Shape =\n" in result.code
        assert '    | { type: "Circle", content: number }\n' in result.code
        assert '    | { type: "Square", content: Point }\n' in result.code
        assert '    | { type: "Empty" };' in result.code
        assert result.code.index("export type Shape") < result.code.index(
            "export interface Point"
        )

    def test_generics_and_aliases(self, generate):
        result = generate(
            "typescript",
            """
            #[typeshare]
            pub struct Page<T> { pub items: Vec<T>, pub lookup: HashMap<String, T> }

            #[typeshare]
            pub type Names = Page<String>;

            #[typeshare]
            pub struct UserId(String);
            """,
        )
        assert "export interface Page<T> {" in result.code
        assert "items: T[];" in result.code
        assert "lookup: Record<string, T>;" in result.code
        assert "export type Names = Page<string>;" in result.code
        assert "export type UserId = string;" in result.code

    def test_type_override(self, generate):
        result = generate(
            "typescript",
            """
            #[typeshare]
            pub struct Event {
                #[typeshare(typescript(type = "Date"))]
                pub at: String,
            }
            """,
        )
        assert "at: Date;" in result.code

    def test_readonly_fields(self, generate, point_source):
        result = generate("typescript", point_source, readonly_fields=True)
        assert "    readonly x: number;" in result.code

    def test_native_sum_types_rejected(self):
        with pytest.raises(ConfigError):
            get_generator("typescript", {"native_sum_types": True})


class TestDatesAndConstants:
    def test_datetime_is_a_string(self, generate):
        code = generate(
            "ts", "#[typeshare]\npub struct Event { pub at: DateTime<Utc> }"
        ).code
        assert "    at: string;" in code

    def test_constant(self, generate):
        code = generate(
            "typescript", "/// Page size\n#[typeshare]\npub const MAX_SIZE: u32 = 64;"
        ).code
        assert code == "/** Page size */\nexport const MAX_SIZE: number = 64;\n"

    @pytest.mark.parametrize(
        "int64_type, expected",
        [("string", 'BIG: string = "9";'), ("bigint", "BIG: bigint = 9n;")],
    )
    def test_wide_constant(self, generate, int64_type, expected):
        code = generate(
            "typescript",
            "#[typeshare]\npub const BIG: u64 = 9;",
            int64_type=int64_type,
        ).code
        assert f"export const {expected}" in code
