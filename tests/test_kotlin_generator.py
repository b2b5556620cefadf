"""Tests for the Kotlin generator."""

import pytest

from typebridge.codegen.core.config import ConfigError
from typebridge.codegen.core.diagnostics import DiagnosticKind
from typebridge.codegen.registry import get_generator


class TestKotlinClasses:
    def test_point(self, generate, point_source):
        result = generate("kotlin", point_source)
        assert result.success
        assert result.code == (
            "import kotlinx.serialization.Serializable\n"
            "\n"
            "@Serializable\n"
            "data class Point(\n"
            "    val x: Int,\n"
            "    val y: Int,\n"
            ")\n"
        )

    def test_package_and_serial_names(self, generate):
        code = generate(
            "kt",
            """
            #[typeshare]
            pub struct User {
                pub user_name: String,
                pub nickname: Option<String>,
            }
            """,
            package_name="com.example.models",
        ).code
        assert code.startswith("package com.example.models\n\n")
        assert "import kotlinx.serialization.SerialName\n" in code
        assert '    @SerialName("user_name")\n    val userName: String,' in code
        assert "    val nickname: String? = null," in code

    def test_without_serialization(self, generate, point_source):
        code = generate("kotlin", point_source, serializable=False).code
        assert "import" not in code
        assert code.startswith("data class Point(")

    def test_empty_struct_is_object(self, generate):
        code = generate("kotlin", "#[typeshare]\npub struct Marker {}").code
        assert "object Marker" in code

    def test_unit_enum(self, generate):
        code = generate(
            "kotlin",
            """
            #[typeshare]
            pub enum Color {
                Red,
                #[serde(rename = "green")]
                Green,
            }
            """,
        ).code
        assert "enum class Color {\n    Red,\n" in code
        assert '    @SerialName("green")\n    Green,' in code

    def test_tuples(self, generate):
        code = generate(
            "kotlin", "#[typeshare]\npub struct P { pub v: (u8, String) }"
        ).code
        assert "val v: Pair<UByte, String>," in code

        result = generate(
            "kotlin", "#[typeshare]\npub struct Q { pub v: (u8, u8, u8, u8) }"
        )
        assert not result.success
        assert result.diagnostics[0].kind == DiagnosticKind.NOT_REPRESENTABLE


class TestKotlinSealedClasses:
    def test_sealed_class(self, generate, shape_source):
        code = generate("kotlin", shape_source).code
        assert "/** A shape */\n@Serializable\nsealed class Shape {" in code
        assert (
            '    @Serializable\n    @SerialName("Circle")\n'
            "    data class Circle(val content: Double) : Shape()"
        ) in code
        assert "    object Empty : Shape()" in code
        assert "JsonClassDiscriminator" not in code

    def test_custom_discriminator(self, generate):
        code = generate(
            "kotlin",
            """
            #[typeshare]
            #[serde(tag = "kind", content = "data")]
            pub enum Event<T> { Payload(T), Ping }
            """,
        ).code
        assert "@OptIn(ExperimentalSerializationApi::class)" in code
        assert '@JsonClassDiscriminator("kind")' in code
        assert "import kotlinx.serialization.json.JsonClassDiscriminator" in code
        assert "sealed class Event<out T> {" in code
        assert "data class Payload<T>(val data: T) : Event<T>()" in code
        assert "object Ping : Event<Nothing>()" in code

    def test_emulated_rejected(self):
        with pytest.raises(ConfigError):
            get_generator("kotlin", {"native_sum_types": False})


class TestKotlinDatesAndConstants:
    def test_datetime_imports_instant(self, generate):
        code = generate(
            "kotlin", "#[typeshare]\npub struct Event { pub at: DateTime<Utc> }"
        ).code
        assert "import kotlinx.datetime.Instant\n" in code
        assert "    val at: Instant," in code

    @pytest.mark.parametrize(
        "rust_type, expected",
        [
            ("i32", "const val LIMIT: Int = 64"),
            ("i64", "const val LIMIT: Long = 64L"),
            ("u32", "const val LIMIT: UInt = 64u"),
            ("u64", "const val LIMIT: ULong = 64uL"),
            ("f64", "const val LIMIT: Double = 64.0"),
        ],
    )
    def test_constant_literals(self, generate, rust_type, expected):
        code = generate(
            "kotlin", f"#[typeshare]\npub const LIMIT: {rust_type} = 64;"
        ).code
        assert expected in code
