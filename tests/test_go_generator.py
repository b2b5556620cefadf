"""Tests for the Go generator."""

from typebridge.codegen.core.diagnostics import DiagnosticKind


class TestGoGenerator:
    def test_point_struct(self, generate, point_source):
        result = generate("go", point_source)
        assert result.success
        assert result.code == (
            "package main\n"
            "\n"
            "type Point struct {\n"
            '\tX int32 `json:"x"`\n'
            '\tY int32 `json:"y"`\n'
            "}\n"
        )

    def test_package_name(self, generate, point_source):
        result = generate("golang", point_source, package_name="models")
        assert result.code.startswith("package models\n")

    def test_invalid_package_name_warns(self, generate, point_source):
        result = generate("go", point_source, package_name="My_Models")
        assert result.success
        assert any("Go package name" in w for w in result.warnings)

    def test_optional_fields(self, generate):
        result = generate(
            "go",
            """
            #[typeshare]
            pub struct Profile {
                pub bio: Option<String>,
                pub photos: Option<Vec<String>>,
                #[serde(default)]
                pub score: u32,
            }
            """,
        )
        assert '\tBio *string `json:"bio,omitempty"`' in result.code
        assert '\tPhotos []string `json:"photos,omitempty"`' in result.code
        assert '\tScore uint32 `json:"score,omitempty"`' in result.code

    def test_without_pointers_or_tags(self, generate):
        result = generate(
            "go",
            "#[typeshare]\npub struct Profile { pub bio: Option<String> }",
            use_pointers_for_optional=False,
            json_tags=False,
        )
        assert "\tBio string\n" in result.code

    def test_unit_enum(self, generate):
        result = generate(
            "go",
            """
            #[typeshare]
            pub enum Color {
                Red,
                #[serde(rename = "green")]
                Green,
            }
            """,
        )
        assert "type Color string\n" in result.code
        assert '\tColorRed Color = "Red"\n' in result.code
        assert '\tColorGreen Color = "green"\n' in result.code

    def test_algebraic_enum(self, generate, shape_source):
        result = generate("go", shape_source)
        code = result.code
        assert "// A shape\ntype Shape interface {\n\tisShape()\n}" in code
        assert "type ShapeType string" in code
        assert '\tShapeTypeCircle ShapeType = "Circle"' in code
        assert "type ShapeCircle struct {" in code
        assert '\tType ShapeType `json:"type"`' in code
        assert '\tContent float64 `json:"content"`' in code
        assert "func (ShapeCircle) isShape() {}" in code
        assert "type ShapeEmpty struct {\n\tType ShapeType `json:\"type\"`\n}" in code

    def test_generics(self, generate):
        result = generate(
            "go",
            "#[typeshare]\npub struct Page<T> { pub items: Vec<T> }",
        )
        assert "type Page[T any] struct {" in result.code
        assert '\tItems []T `json:"items"`' in result.code

    def test_generics_disabled(self, generate):
        result = generate(
            "go",
            "#[typeshare]\npub struct Page<T> { pub items: Vec<T> }",
            generics=False,
        )
        assert not result.success
        assert result.diagnostics[0].kind == DiagnosticKind.NOT_REPRESENTABLE

    def test_tuple_not_representable(self, generate):
        result = generate(
            "go",
            """
            #[typeshare]
            pub struct Pair { pub items: (u8, String) }

            #[typeshare]
            pub struct Fine { pub a: u8 }
            """,
        )
        assert not result.success
        assert result.code == ""
        assert len(result.diagnostics) == 1
        diagnostic = result.diagnostics[0]
        assert diagnostic.kind == DiagnosticKind.NOT_REPRESENTABLE
        assert "crate::Pair" in diagnostic.message
        assert "tuple" in diagnostic.message

    def test_type_mappings(self, generate):
        result = generate(
            "go",
            "#[typeshare]\npub struct Event { pub at: String }",
            type_mappings={"String": "time.Time"},
        )
        assert "\tAt time.Time" in result.code

    def test_datetime_imports_time(self, generate):
        code = generate(
            "go", "#[typeshare]\npub struct Event { pub at: DateTime<Utc> }"
        ).code
        assert 'package main\n\nimport "time"\n' in code
        assert '\tAt time.Time `json:"at"`' in code

    def test_constant(self, generate):
        code = generate("go", "#[typeshare]\npub const MAX_SIZE: u32 = 64;").code
        assert "const MaxSize uint32 = 64" in code
        assert "import" not in code
