"""Tests for the Swift generator."""

from typebridge.codegen.core.diagnostics import DiagnosticKind


class TestSwiftStructs:
    def test_point(self, generate, point_source):
        result = generate("swift", point_source)
        assert result.success
        assert result.code == (
            "import Foundation\n"
            "\n"
            "public struct Point: Codable {\n"
            "    public let x: Int32\n"
            "    public let y: Int32\n"
            "\n"
            "    public init(x: Int32, y: Int32) {\n"
            "        self.x = x\n"
            "        self.y = y\n"
            "    }\n"
            "}\n"
        )

    def test_coding_keys_and_optionals(self, generate):
        code = generate(
            "swift",
            """
            #[typeshare]
            pub struct User {
                pub user_name: String,
                pub nickname: Option<String>,
            }
            """,
        ).code
        assert "    public let userName: String\n" in code
        assert "    public let nickname: String?\n" in code
        assert "    enum CodingKeys: String, CodingKey {\n" in code
        assert '        case userName = "user_name"\n' in code
        assert "        case nickname\n" in code
        assert "public init(userName: String, nickname: String? = nil)" in code

    def test_prefix_and_protocols(self, generate, point_source):
        code = generate(
            "swift", point_source, prefix="TB", protocols=["Hashable", "Codable"]
        ).code
        assert "public struct TBPoint: Codable, Hashable {" in code

    def test_builtin_name_is_escaped(self, generate):
        code = generate("swift", "#[typeshare]\npub struct Error { pub code: u16 }").code
        assert "public struct Error_: Codable {" in code

    def test_unit_enum(self, generate):
        code = generate(
            "swift",
            """
            #[typeshare]
            #[serde(rename_all = "snake_case")]
            pub enum Status { InProgress, Done }
            """,
        ).code
        assert "public enum Status: String, Codable {" in code
        assert '    case inProgress = "in_progress"' in code
        assert '    case done = "done"' in code

    def test_tuple_not_representable(self, generate):
        result = generate("swift", "#[typeshare]\npub struct P { pub v: (u8, u8) }")
        assert not result.success
        assert result.diagnostics[0].kind == DiagnosticKind.NOT_REPRESENTABLE


class TestSwiftSumTypes:
    def test_native_enum(self, generate, shape_source):
        code = generate("swift", shape_source).code
        assert "// A shape\npublic enum Shape: Codable {\n" in code
        assert "    case circle(Double)\n" in code
        assert "    case square(Point)\n" in code
        assert "    case empty\n" in code

    def test_emulated_enum(self, generate, shape_source):
        code = generate("swift", shape_source, native_sum_types=False).code
        assert "public protocol Shape: Codable {}" in code
        assert "public enum ShapeType: String, Codable {" in code
        assert '    case circle = "Circle"' in code
        assert (
            "public struct ShapeCircle: Shape {\n"
            "    public let type: ShapeType\n"
            "    public let content: Double\n"
            "\n"
            "    public init(content: Double) {\n"
            "        self.type = .circle\n"
            "        self.content = content\n"
            "    }\n"
            "}"
        ) in code
        assert "    public init() {\n        self.type = .empty\n    }" in code

    def test_generic_struct(self, generate):
        code = generate(
            "swift", "#[typeshare]\npub struct Page<T> { pub items: Vec<T> }"
        ).code
        assert "public struct Page<T: Codable>: Codable {" in code
        assert "    public let items: [T]" in code


class TestSwiftDatesAndConstants:
    def test_datetime_is_date(self, generate):
        code = generate(
            "swift", "#[typeshare]\npub struct Event { pub at: DateTime<Utc> }"
        ).code
        assert "    public let at: Date" in code

    def test_constant(self, generate):
        code = generate("swift", "#[typeshare]\npub const MAX_SIZE: u32 = 64;").code
        assert "public let MAX_SIZE: UInt32 = 64" in code
