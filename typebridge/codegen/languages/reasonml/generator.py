"""
ReasonML code generator implementation.

Records, variants and type aliases for BuckleScript JSON bindings. Every
number is a ``float``; 64-bit integers cannot be carried losslessly and are
rejected.
"""

from typing import List, Optional, Tuple

from ...core.catalog import ContainerKind, PrimitiveKind, RenderingTable
from ...core.generator import CodeGenerator, SumTypeStrategy
from ...core.ir import Field, TypeDefinition
from .naming import (
    REASONML_BUILTIN_TYPES,
    REASONML_RESERVED_WORDS,
    constructor_name,
    create_reasonml_sanitizer,
    field_name,
    type_identifier,
    unit_constructor_name,
    value_name,
)

REASONML_RENDERING = RenderingTable(
    "reasonml",
    primitives={
        PrimitiveKind.BOOL: "bool",
        PrimitiveKind.I8: "float",
        PrimitiveKind.I16: "float",
        PrimitiveKind.I32: "float",
        PrimitiveKind.U8: "float",
        PrimitiveKind.U16: "float",
        PrimitiveKind.U32: "float",
        PrimitiveKind.I54: "float",
        PrimitiveKind.U53: "float",
        PrimitiveKind.F32: "float",
        PrimitiveKind.F64: "float",
        PrimitiveKind.STRING: "string",
        PrimitiveKind.CHAR: "string",
        PrimitiveKind.UNIT: "unit",
        PrimitiveKind.DATETIME: "Js.Date.t",
    },
    containers={
        ContainerKind.OPTION: "option({0})",
        ContainerKind.SEQUENCE: "array({0})",
        ContainerKind.SET: "array({0})",
        # JSON object keys are always strings
        ContainerKind.MAP: "Js.Dict.t({1})",
        ContainerKind.TUPLE: "({items})",
    },
)


class ReasonMLGenerator(CodeGenerator):
    """Code generator for ReasonML type declarations."""

    aliases = ("re",)
    supported_sum_strategies = (SumTypeStrategy.NATIVE,)
    reserved_words = frozenset(REASONML_RESERVED_WORDS)
    builtin_types = frozenset(REASONML_BUILTIN_TYPES)

    @property
    def language_name(self) -> str:
        return "reasonml"

    @property
    def file_extension(self) -> str:
        return ".re"

    def build_rendering_table(self) -> RenderingTable:
        return REASONML_RENDERING

    def create_sanitizer(self):
        return create_reasonml_sanitizer()

    def get_header(self) -> Optional[str]:
        if self.config.no_version_header:
            return None
        from .... import __version__

        lines = ["/*", f" * Generated by typebridge {__version__}"]
        if self.config.output_module_prefix:
            lines.append(f" * Module: {self.config.module_name}")
        lines.append(" */")
        return "\n".join(lines)

    def format_doc(self, doc: Tuple[str, ...], indent: str = "") -> str:
        if not doc or not self.config.add_comments:
            return ""
        lines = [line.replace("*/", "* /") for line in doc]
        if len(lines) == 1:
            return f"{indent}/* {lines[0]} */\n"
        body = "\n".join(f"{indent} * {line}".rstrip() for line in lines)
        return f"{indent}/*\n{body}\n{indent} */\n"

    # Names and types

    def type_name(self, definition: TypeDefinition) -> str:
        return type_identifier(self.sanitizer, definition.output_name)

    def generic_name(self, name: str) -> str:
        return "'" + name.lower()

    def format_generic_arguments(self, arguments: List[str]) -> str:
        if not arguments:
            return ""
        return f"({', '.join(arguments)})"

    def field_type(self, definition: TypeDefinition, field: Field) -> str:
        reason_type = super().field_type(definition, field)
        if field.optional and field.type_override(self.language_name, *self.aliases) is None:
            return f"option({reason_type})"
        return reason_type

    # Declarations

    def generate_struct(self, definition: TypeDefinition) -> str:
        fields = [
            {
                "doc": self.format_doc(f.doc, self.indent),
                "name": field_name(definition.serialized_field_name(f)),
                "type": self.field_type(definition, f),
            }
            for f in definition.fields
        ]
        return self.render_template(
            "record.re.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.type_name(definition),
                "type_params": self.format_generic_parameters(definition),
                "fields": fields,
                "indent": self.indent,
            },
        )

    def _render_variants(self, definition: TypeDefinition, with_payloads: bool) -> str:
        cases = [
            {
                "doc": self.format_doc(v.doc, self.indent),
                "name": (
                    constructor_name(self.sanitizer, v.name)
                    if with_payloads
                    else unit_constructor_name(
                        self.sanitizer, definition.serialized_variant_name(v), v.name
                    )
                ),
                "payload": (
                    self.format_type(v.payload)
                    if with_payloads and v.has_payload
                    else ""
                ),
            }
            for v in definition.variants
        ]
        return self.render_template(
            "variant.re.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.type_name(definition),
                "type_params": self.format_generic_parameters(definition),
                "cases": cases,
                "indent": self.indent,
            },
        )

    def generate_unit_enum(self, definition: TypeDefinition) -> str:
        return self._render_variants(definition, with_payloads=False)

    def generate_native_enum(self, definition: TypeDefinition) -> str:
        return self._render_variants(definition, with_payloads=True)

    def generate_const(self, definition: TypeDefinition) -> str:
        reason_type = self.format_type(definition.target)
        value = f"{definition.value}." if reason_type == "float" else str(definition.value)
        return self.render_template(
            "const.re.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": value_name(self.sanitizer, definition.output_name),
                "type": reason_type,
                "value": value,
            },
        )

    def generate_alias(self, definition: TypeDefinition) -> str:
        return self.render_template(
            "alias.re.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.type_name(definition),
                "type_params": self.format_generic_parameters(definition),
                "target": self.format_type(definition.target),
            },
        )


def create_reasonml_generator(config=None) -> ReasonMLGenerator:
    """Create a ReasonML generator, loading defaults when no config is given."""
    return ReasonMLGenerator(config)
