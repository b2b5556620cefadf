"""Tests for definition extraction from Rust sources."""

import pytest

from typebridge.codegen.core.diagnostics import DiagnosticKind
from typebridge.codegen.core.ir import (
    DefinitionKind,
    NamedType,
    QualifiedName,
    TupleType,
)
from typebridge.codegen.core.naming import NamingCase
from typebridge.extractor import doc_comment_text, parse_integer_literal


def _by_name(forest):
    return {d.name.name: d for d in forest.definitions}


class TestParticipation:
    def test_only_marked_items(self, forest_of):
        forest = forest_of(
            """
            #[typeshare]
            pub struct Shared { pub a: u8 }

            pub struct Private { pub b: u8 }
            """
        )
        assert [d.name.name for d in forest.definitions] == ["Shared"]

    def test_custom_marker(self, forest_of):
        from typebridge.extractor import extract
        from typebridge.rust_parser import parse_text

        forest = extract(
            parse_text("pub struct Anything { pub a: u8 }"), lambda item: True
        )
        assert forest.definitions[0].name == QualifiedName("crate", "Anything")

    def test_declaration_order_and_module(self, forest_of):
        forest = forest_of(
            """
            #[typeshare]
            pub struct B { pub a: u8 }
            #[typeshare]
            pub struct A { pub a: u8 }
            """,
            path="src/models.rs",
            module="crate::models",
        )
        assert [str(d.name) for d in forest.definitions] == [
            "crate::models::B",
            "crate::models::A",
        ]
        assert forest.source == "src/models.rs"

    def test_inline_module(self, forest_of):
        forest = forest_of(
            """
            mod inner {
                #[typeshare]
                pub struct Nested { pub a: u8 }
            }
            """
        )
        assert forest.definitions[0].name == QualifiedName("crate::inner", "Nested")


class TestStructs:
    def test_fields_in_order(self, forest_of, point_source):
        point = forest_of(point_source).definitions[0]
        assert point.kind == DefinitionKind.STRUCT
        assert [f.name for f in point.fields] == ["x", "y"]
        assert point.fields[0].type == NamedType(("i32",))

    def test_doc_comments(self, forest_of):
        forest = forest_of(
            """
            /// A user.
            /// Second line.
            #[typeshare]
            pub struct User {
                /// The id
                pub id: u32,
                // not a doc comment
                pub name: String,
            }
            """
        )
        user = forest.definitions[0]
        assert user.doc == ("A user.", "Second line.")
        assert user.fields[0].doc == ("The id",)
        assert user.fields[1].doc == ()

    def test_serde_attributes(self, forest_of):
        forest = forest_of(
            """
            #[typeshare]
            #[serde(rename_all = "camelCase", rename = "Account")]
            pub struct User {
                #[serde(rename = "ID")]
                pub id: u32,
                #[serde(skip)]
                pub secret: String,
                #[serde(default)]
                pub tags: Vec<String>,
                #[serde(skip_serializing_if = "Option::is_none")]
                pub nickname: Option<String>,
                #[typeshare(skip)]
                pub internal: u8,
            }
            """
        )
        user = forest.definitions[0]
        assert user.rename == "Account"
        assert user.rename_all == NamingCase.CAMEL_CASE
        assert [f.name for f in user.fields] == ["id", "tags", "nickname"]
        assert user.fields[0].rename == "ID"
        assert user.fields[1].has_default
        assert user.fields[2].has_default

    def test_type_override(self, forest_of):
        forest = forest_of(
            """
            #[typeshare]
            pub struct Event {
                #[typeshare(typescript(type = "Date"), swift(type = "Date"))]
                pub at: String,
            }
            """
        )
        field = forest.definitions[0].fields[0]
        assert field.type_override("typescript") == "Date"
        assert field.type_override("swift") == "Date"
        assert field.type_override("go") is None

    def test_wrappers_are_erased(self, forest_of):
        forest = forest_of(
            """
            #[typeshare]
            pub struct Tree {
                pub children: Vec<Box<Tree>>,
                pub label: Arc<str>,
            }
            """
        )
        children, label = forest.definitions[0].fields
        assert children.type == NamedType(("Vec",), (NamedType(("Tree",)),))
        assert label.type == NamedType(("str",))

    def test_tuple_struct_is_alias(self, forest_of):
        forest = forest_of(
            """
            #[typeshare]
            pub struct UserId(String);

            #[typeshare]
            pub struct Pair(u8, String);
            """
        )
        user_id, pair = forest.definitions
        assert user_id.kind == DefinitionKind.TYPE_ALIAS
        assert user_id.target == NamedType(("String",))
        assert pair.target == TupleType((NamedType(("u8",)), NamedType(("String",))))

    def test_generics(self, forest_of):
        forest = forest_of(
            """
            #[typeshare]
            pub struct Page<T> { pub items: Vec<T> }
            """
        )
        assert forest.definitions[0].generic_parameters == ("T",)


class TestEnums:
    def test_unit_enum(self, forest_of):
        forest = forest_of(
            """
            #[typeshare]
            #[serde(rename_all = "SCREAMING_SNAKE_CASE")]
            pub enum Color {
                Red,
                #[serde(rename = "verde")]
                Green,
                #[serde(skip)]
                Hidden,
            }
            """
        )
        color = forest.definitions[0]
        assert color.kind == DefinitionKind.UNIT_ENUM
        assert [v.name for v in color.variants] == ["Red", "Green"]
        assert color.serialized_variant_name(color.variants[0]) == "RED"
        assert color.serialized_variant_name(color.variants[1]) == "verde"

    def test_algebraic_enum(self, forest_of, shape_source):
        shape = _by_name(forest_of(shape_source))["Shape"]
        assert shape.kind == DefinitionKind.ALGEBRAIC_ENUM
        assert shape.tag == "type"
        assert shape.content == "content"
        assert shape.doc == ("A shape",)
        circle, square, empty = shape.variants
        assert circle.payload == NamedType(("f64",))
        assert square.payload == NamedType(("Point",))
        assert not empty.has_payload

    def test_tag_makes_enum_algebraic(self, forest_of):
        forest = forest_of(
            """
            #[typeshare]
            #[serde(tag = "kind")]
            pub enum Signal { Start, Stop }
            """
        )
        assert forest.definitions[0].kind == DefinitionKind.ALGEBRAIC_ENUM

    def test_struct_variant_is_lifted(self, forest_of):
        forest = forest_of(
            """
            #[typeshare]
            #[serde(tag = "type", content = "content")]
            pub enum Message<T> {
                Text { body: String },
                Data { value: T },
            }
            """
        )
        names = [d.name.name for d in forest.definitions]
        assert names == ["Message", "MessageTextInner", "MessageDataInner"]
        defs = _by_name(forest)
        assert defs["MessageTextInner"].generic_parameters == ()
        assert defs["MessageDataInner"].generic_parameters == ("T",)
        assert defs["Message"].variants[1].payload == NamedType(
            ("MessageDataInner",), (NamedType(("T",)),)
        )
        assert "`Text` variant of `Message`" in defs["MessageTextInner"].doc[0]

    def test_multi_field_tuple_variant(self, forest_of):
        forest = forest_of(
            """
            #[typeshare]
            pub enum Move { Step(i32, i32) }
            """
        )
        payload = forest.definitions[0].variants[0].payload
        assert isinstance(payload, TupleType)
        assert len(payload.elements) == 2


class TestConstants:
    def test_integer_constants(self, forest_of):
        forest = forest_of(
            """
            /// Largest payload
            #[typeshare]
            pub const MAX_SIZE: u32 = 1_024;
            #[typeshare]
            pub const MASK: u8 = 0xFFu8;
            #[typeshare]
            pub const OFFSET: i32 = -(8);
            pub const HIDDEN: u8 = 1;
            """
        )
        constants = _by_name(forest)
        assert list(constants) == ["MAX_SIZE", "MASK", "OFFSET"]
        assert constants["MAX_SIZE"].kind == DefinitionKind.CONST
        assert constants["MAX_SIZE"].value == 1024
        assert constants["MAX_SIZE"].target == NamedType(("u32",))
        assert constants["MAX_SIZE"].doc == ("Largest payload",)
        assert constants["MASK"].value == 255
        assert constants["OFFSET"].value == -8

    def test_unsupported_value(self, forest_of):
        forest = forest_of('#[typeshare]\npub const NAME: &str = "x";')
        assert forest.definitions == []
        assert [d.kind for d in forest.diagnostics] == [DiagnosticKind.UNRESOLVED_TYPE]
        assert "NAME" in forest.diagnostics[0].message

    @pytest.mark.parametrize(
        "text, value",
        [
            ("42", 42),
            ("1_000_000", 1000000),
            ("0x1F", 31),
            ("0o17", 15),
            ("0b1010_1010", 170),
            ("7i64", 7),
            ("255usize", 255),
            ("0xABu8", 171),
            ("1.5", None),
        ],
    )
    def test_parse_integer_literal(self, text, value):
        assert parse_integer_literal(text) == value



class TestImports:
    def test_use_bindings(self, forest_of):
        forest = forest_of(
            """
            use crate::models::{User, Group as Team};
            use super::shared::*;
            """,
            module="crate::api",
        )
        bindings = {b.local_name: b for b in forest.imports}
        assert bindings["User"].path == ("crate", "models", "User")
        assert bindings["Team"].path == ("crate", "models", "Group")
        assert bindings["*"].is_glob

    def test_bindings_carry_their_module(self, forest_of):
        forest = forest_of(
            """
            use crate::shared::Id;
            mod api {
                use crate::models::User;
            }
            """
        )
        modules = {b.local_name: b.module for b in forest.imports}
        assert modules == {"Id": "crate", "User": "crate::api"}


class TestDiagnostics:
    def test_unknown_rename_all(self, forest_of):
        forest = forest_of(
            """
            #[typeshare]
            #[serde(rename_all = "Title Case")]
            pub struct Bad { pub a: u8 }
            """
        )
        kinds = [d.kind for d in forest.diagnostics]
        assert kinds == [DiagnosticKind.MALFORMED_ATTRIBUTE]
        assert forest.diagnostics[0].location is not None

    def test_unsupported_type_syntax(self, forest_of):
        forest = forest_of(
            """
            #[typeshare]
            pub struct Callback { pub f: fn(u8) -> u8 }
            """
        )
        assert [d.kind for d in forest.diagnostics] == [DiagnosticKind.UNRESOLVED_TYPE]


class TestDocCommentText:
    def test_line_doc(self):
        assert doc_comment_text("/// hello\n") == ["hello"]

    def test_plain_comments(self):
        assert doc_comment_text("// hello") is None
        assert doc_comment_text("//// hello") is None

    def test_block_doc(self):
        assert doc_comment_text("/**\n * one\n * two\n */") == ["one", "two"]
