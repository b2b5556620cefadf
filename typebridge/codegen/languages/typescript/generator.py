"""
TypeScript code generator implementation.

Structs become interfaces, unit enums string enums, and algebraic enums
discriminated unions keyed on the tag property. 64-bit integers do not fit
``number`` and fall back to ``string`` or ``bigint``.
"""

from typing import List, Tuple

from ...core.catalog import (
    PRECISION_CAVEATS,
    ContainerKind,
    PrimitiveKind,
    RenderingTable,
    TypeRendering,
)
from ...core.generator import CodeGenerator, SumTypeStrategy
from ...core.ir import TypeDefinition
from .naming import (
    TS_BUILTIN_TYPES,
    TS_RESERVED_WORDS,
    create_typescript_sanitizer,
    property_name,
)


def _array_of(arguments: List[str]) -> str:
    element = arguments[0]
    if " " in element:
        return f"({element})[]"
    return f"{element}[]"


def typescript_rendering(int64_type: str = "string") -> RenderingTable:
    """Rendering table; ``int64_type`` is the fallback for 64-bit integers."""
    wide = TypeRendering(
        int64_type, fallback=True, caveat=PRECISION_CAVEATS[PrimitiveKind.I64]
    )
    return RenderingTable(
        "typescript",
        primitives={
            PrimitiveKind.BOOL: "boolean",
            PrimitiveKind.I8: "number",
            PrimitiveKind.I16: "number",
            PrimitiveKind.I32: "number",
            PrimitiveKind.I64: wide,
            PrimitiveKind.U8: "number",
            PrimitiveKind.U16: "number",
            PrimitiveKind.U32: "number",
            PrimitiveKind.U64: wide,
            PrimitiveKind.I54: "number",
            PrimitiveKind.U53: "number",
            PrimitiveKind.F32: "number",
            PrimitiveKind.F64: "number",
            PrimitiveKind.STRING: "string",
            PrimitiveKind.CHAR: "string",
            PrimitiveKind.UNIT: "undefined",
            # serialized as an RFC 3339 string
            PrimitiveKind.DATETIME: "string",
        },
        containers={
            ContainerKind.OPTION: "{0} | undefined",
            ContainerKind.SEQUENCE: _array_of,
            ContainerKind.SET: _array_of,
            ContainerKind.MAP: "Record<{0}, {1}>",
            ContainerKind.TUPLE: "[{items}]",
        },
    )


class TypeScriptGenerator(CodeGenerator):
    """Code generator for TypeScript declarations."""

    aliases = ("ts",)
    supported_sum_strategies = (SumTypeStrategy.EMULATED,)
    reserved_words = frozenset(TS_RESERVED_WORDS)
    builtin_types = frozenset(TS_BUILTIN_TYPES)

    @property
    def language_name(self) -> str:
        return "typescript"

    @property
    def file_extension(self) -> str:
        return ".ts"

    def build_rendering_table(self) -> RenderingTable:
        return typescript_rendering(self.config.option("int64_type", "string"))

    def create_sanitizer(self):
        return create_typescript_sanitizer()

    def format_doc(self, doc: Tuple[str, ...], indent: str = "") -> str:
        """JSDoc comment block."""
        if not doc or not self.config.add_comments:
            return ""
        if len(doc) == 1:
            return f"{indent}/** {doc[0]} */\n"
        lines = [f"{indent}/**"]
        lines.extend(f"{indent} * {line}".rstrip() for line in doc)
        lines.append(f"{indent} */")
        return "\n".join(lines) + "\n"

    def generate_struct(self, definition: TypeDefinition) -> str:
        fields = [
            {
                "doc": self.format_doc(f.doc, self.indent),
                "name": property_name(definition.serialized_field_name(f)),
                "optional": f.may_be_absent,
                "type": self.field_type(definition, f),
            }
            for f in definition.fields
        ]
        return self.render_template(
            "interface.ts.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.type_name(definition),
                "type_params": self.format_generic_parameters(definition),
                "fields": fields,
                "readonly": self.config.option("readonly_fields", False),
                "indent": self.indent,
            },
        )

    def generate_unit_enum(self, definition: TypeDefinition) -> str:
        cases = [
            {
                "doc": self.format_doc(v.doc, self.indent),
                "name": property_name(v.name),
                "value": definition.serialized_variant_name(v),
            }
            for v in definition.variants
        ]
        return self.render_template(
            "enum.ts.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.type_name(definition),
                "cases": cases,
                "indent": self.indent,
            },
        )

    def generate_alias(self, definition: TypeDefinition) -> str:
        return self.render_template(
            "alias.ts.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.type_name(definition),
                "type_params": self.format_generic_parameters(definition),
                "target": self.format_type(definition.target),
            },
        )

    def generate_const(self, definition: TypeDefinition) -> str:
        ts_type = self.format_type(definition.target)
        value = str(definition.value)
        if ts_type == "string":
            value = f'"{value}"'
        elif ts_type == "bigint":
            value += "n"
        return self.render_template(
            "const.ts.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.sanitizer.sanitize_name(definition.output_name),
                "type": ts_type,
                "value": value,
            },
        )

    def generate_emulated_enum(self, definition: TypeDefinition) -> str:
        """One object shape per variant, discriminated by the tag property."""
        cases = [
            {
                "doc": self.format_doc(case.variant.doc, self.indent),
                "tag_key": property_name(case.tag_key),
                "tag_value": case.tag_value,
                "has_payload": case.has_payload,
                "content_key": property_name(case.content_key),
                "payload_type": (
                    self.format_type(case.payload) if case.has_payload else ""
                ),
            }
            for case in self.emulated_cases(definition)
        ]
        return self.render_template(
            "union.ts.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.type_name(definition),
                "type_params": self.format_generic_parameters(definition),
                "cases": cases,
                "indent": self.indent,
            },
        )


def create_typescript_generator(config=None) -> TypeScriptGenerator:
    """Create a TypeScript generator, loading defaults when no config is given."""
    return TypeScriptGenerator(config)
