"""
Swift code generator implementation.

Structs become ``Codable`` structs with explicit ``CodingKeys`` when a wire
name differs from the property name. Algebraic enums are native enums with
associated values, or, when ``native_sum_types`` is false, a protocol with
one struct per case carrying the discriminant and payload.
"""

from typing import Any, Dict, List, Optional

from ...core.catalog import ContainerKind, PrimitiveKind, RenderingTable
from ...core.generator import CodeGenerator, SumTypeStrategy
from ...core.ir import Field, TypeDefinition
from ...core.naming import NamingCase, convert_case
from .naming import (
    SWIFT_BUILTIN_TYPES,
    SWIFT_RESERVED_WORDS,
    bare_name,
    create_swift_sanitizer,
    property_name,
)

SWIFT_RENDERING = RenderingTable(
    "swift",
    primitives={
        PrimitiveKind.BOOL: "Bool",
        PrimitiveKind.I8: "Int8",
        PrimitiveKind.I16: "Int16",
        PrimitiveKind.I32: "Int32",
        PrimitiveKind.I64: "Int64",
        PrimitiveKind.U8: "UInt8",
        PrimitiveKind.U16: "UInt16",
        PrimitiveKind.U32: "UInt32",
        PrimitiveKind.U64: "UInt64",
        PrimitiveKind.I54: "Int64",
        PrimitiveKind.U53: "UInt64",
        PrimitiveKind.F32: "Float",
        PrimitiveKind.F64: "Double",
        PrimitiveKind.STRING: "String",
        PrimitiveKind.CHAR: "String",
        PrimitiveKind.DATETIME: "Date",
    },
    containers={
        ContainerKind.OPTION: "{0}?",
        ContainerKind.SEQUENCE: "[{0}]",
        ContainerKind.SET: "Set<{0}>",
        ContainerKind.MAP: "[{0}: {1}]",
    },
)


class SwiftGenerator(CodeGenerator):
    """Code generator for Swift Codable types."""

    supported_sum_strategies = (SumTypeStrategy.NATIVE, SumTypeStrategy.EMULATED)
    reserved_words = frozenset(SWIFT_RESERVED_WORDS)
    builtin_types = frozenset(SWIFT_BUILTIN_TYPES)

    @property
    def language_name(self) -> str:
        return "swift"

    @property
    def file_extension(self) -> str:
        return ".swift"

    def build_rendering_table(self) -> RenderingTable:
        return SWIFT_RENDERING

    def create_sanitizer(self):
        return create_swift_sanitizer()

    @property
    def conformances(self) -> str:
        protocols = ["Codable"]
        for protocol in self.config.option("protocols", []):
            if protocol not in protocols:
                protocols.append(protocol)
        return ", ".join(protocols)

    def get_import_statements(self, graph) -> List[str]:
        return ["import Foundation"]

    # Names

    def type_name(self, definition: TypeDefinition) -> str:
        return self._prefixed(definition.output_name)

    def _prefixed(self, name: str) -> str:
        name = self.config.option("prefix", "") + name
        if name in SWIFT_BUILTIN_TYPES:
            name += "_"
        return self.sanitizer.sanitize_name(name)

    def format_generic_parameters(self, definition: TypeDefinition) -> str:
        if not definition.generic_parameters:
            return ""
        return f"<{', '.join(f'{p}: Codable' for p in definition.generic_parameters)}>"

    def field_type(self, definition: TypeDefinition, field: Field) -> str:
        swift_type = super().field_type(definition, field)
        if field.optional and field.type_override(self.language_name) is None:
            return f"{swift_type}?"
        return swift_type

    # Declarations

    def _property(
        self,
        name: str,
        serialized: str,
        swift_type: str,
        doc: str = "",
        optional: bool = False,
        value: Optional[str] = None,
    ) -> Dict[str, Any]:
        identifier = property_name(self.sanitizer, name)
        return {
            "doc": doc,
            "name": identifier,
            "key": bare_name(identifier),
            "serialized": serialized,
            "type": swift_type,
            "optional": optional,
            "value": value,
        }

    def _render_struct(
        self,
        name: str,
        type_params: str,
        conformances: str,
        properties: List[Dict[str, Any]],
        doc: str = "",
    ) -> str:
        return self.render_template(
            "struct.swift.j2",
            {
                "doc": doc,
                "name": name,
                "type_params": type_params,
                "conformances": conformances,
                "fields": properties,
                "parameters": [p for p in properties if p["value"] is None],
                "coding_keys": any(p["key"] != p["serialized"] for p in properties),
                "indent": self.indent,
            },
        )

    def generate_struct(self, definition: TypeDefinition) -> str:
        properties = [
            self._property(
                f.name,
                definition.serialized_field_name(f),
                self.field_type(definition, f),
                doc=self.format_doc(f.doc, self.indent),
                optional=f.optional,
            )
            for f in definition.fields
        ]
        return self._render_struct(
            self.type_name(definition),
            self.format_generic_parameters(definition),
            self.conformances,
            properties,
            doc=self.format_doc(definition.doc),
        )

    def generate_unit_enum(self, definition: TypeDefinition) -> str:
        cases = [
            {
                "doc": self.format_doc(v.doc, self.indent),
                "name": property_name(self.sanitizer, v.name),
                "value": definition.serialized_variant_name(v),
            }
            for v in definition.variants
        ]
        return self.render_template(
            "enum.swift.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.type_name(definition),
                "conformances": self.conformances,
                "cases": cases,
                "indent": self.indent,
            },
        )

    def generate_alias(self, definition: TypeDefinition) -> str:
        type_params = self.format_generic_arguments(list(definition.generic_parameters))
        return self.render_template(
            "alias.swift.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.type_name(definition),
                "type_params": type_params,
                "target": self.format_type(definition.target),
            },
        )

    def generate_const(self, definition: TypeDefinition) -> str:
        return self.render_template(
            "const.swift.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.sanitizer.sanitize_name(definition.output_name),
                "type": self.format_type(definition.target),
                "value": definition.value,
            },
        )

    def generate_native_enum(self, definition: TypeDefinition) -> str:
        """Enum with associated values, one case per variant."""
        cases = [
            {
                "doc": self.format_doc(v.doc, self.indent),
                "name": property_name(self.sanitizer, v.name),
                "payload_type": self.format_type(v.payload) if v.has_payload else "",
            }
            for v in definition.variants
        ]
        return self.render_template(
            "native_enum.swift.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.type_name(definition),
                "type_params": self.format_generic_parameters(definition),
                "conformances": self.conformances,
                "cases": cases,
                "indent": self.indent,
            },
        )

    def generate_emulated_enum(self, definition: TypeDefinition) -> str:
        """Protocol, discriminant enum and one struct per case."""
        name = self.type_name(definition)
        tag_type = self._prefixed(f"{definition.output_name}Type")
        type_params = self.format_generic_parameters(definition)

        tags = []
        structs = []
        for case in self.emulated_cases(definition):
            tag_case = property_name(self.sanitizer, case.variant.name)
            tags.append({"name": tag_case, "value": case.tag_value})
            properties = [
                self._property(
                    case.tag_key, case.tag_key, tag_type, value=f".{bare_name(tag_case)}"
                )
            ]
            if case.has_payload:
                properties.append(
                    self._property(
                        case.content_key, case.content_key, self.format_type(case.payload)
                    )
                )
            struct_name = self._prefixed(
                definition.output_name
                + convert_case(case.variant.name, NamingCase.PASCAL_CASE)
            )
            structs.append(
                self._render_struct(
                    struct_name,
                    type_params,
                    name,
                    properties,
                    doc=self.format_doc(case.variant.doc),
                )
            )

        return self.render_template(
            "emulated_enum.swift.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": name,
                "conformances": self.conformances,
                "tag_type": tag_type,
                "tags": tags,
                "structs": structs,
                "indent": self.indent,
            },
        )


def create_swift_generator(config=None) -> SwiftGenerator:
    """Create a Swift generator, loading defaults when no config is given."""
    return SwiftGenerator(config)
