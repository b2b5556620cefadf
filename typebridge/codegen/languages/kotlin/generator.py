"""
Kotlin code generator implementation.

Generates kotlinx.serialization data classes and enum classes. Algebraic
enums are sealed classes whose nested cases are selected by a JSON class
discriminator named after the enum's tag.
"""

from typing import Any, Dict, List, Optional, Set, Tuple

from ...core.catalog import ContainerKind, PrimitiveKind, RenderingTable
from ...core.diagnostics import NotRepresentableError
from ...core.generator import CodeGenerator, SumTypeStrategy
from ...core.ir import Field, GlobalTypeGraph, TypeDefinition
from ...core.naming import NamingCase, convert_case
from .naming import (
    KOTLIN_BUILTIN_TYPES,
    KOTLIN_RESERVED_WORDS,
    class_name,
    create_kotlin_sanitizer,
    property_name,
)

SERIALIZATION = "kotlinx.serialization"
DATETIME_CLASS = "kotlinx.datetime.Instant"

# Literal suffixes a `const val` of the type needs
_LITERAL_SUFFIXES = {
    "Long": "L",
    "UByte": "u",
    "UShort": "u",
    "UInt": "u",
    "ULong": "uL",
    "Float": ".0f",
    "Double": ".0",
}


def _pair_or_triple(arguments: List[str]) -> str:
    if len(arguments) == 2:
        return f"Pair<{', '.join(arguments)}>"
    if len(arguments) == 3:
        return f"Triple<{', '.join(arguments)}>"
    raise NotRepresentableError(
        f"tuples of {len(arguments)} elements have no representation in kotlin"
    )


KOTLIN_RENDERING = RenderingTable(
    "kotlin",
    primitives={
        PrimitiveKind.BOOL: "Boolean",
        PrimitiveKind.I8: "Byte",
        PrimitiveKind.I16: "Short",
        PrimitiveKind.I32: "Int",
        PrimitiveKind.I64: "Long",
        PrimitiveKind.U8: "UByte",
        PrimitiveKind.U16: "UShort",
        PrimitiveKind.U32: "UInt",
        PrimitiveKind.U64: "ULong",
        PrimitiveKind.I54: "Long",
        PrimitiveKind.U53: "ULong",
        PrimitiveKind.F32: "Float",
        PrimitiveKind.F64: "Double",
        PrimitiveKind.STRING: "String",
        PrimitiveKind.CHAR: "Char",
        PrimitiveKind.UNIT: "Unit",
        PrimitiveKind.DATETIME: "Instant",
    },
    containers={
        ContainerKind.OPTION: "{0}?",
        ContainerKind.SEQUENCE: "List<{0}>",
        ContainerKind.SET: "Set<{0}>",
        ContainerKind.MAP: "Map<{0}, {1}>",
        ContainerKind.TUPLE: _pair_or_triple,
    },
)


class KotlinGenerator(CodeGenerator):
    """Code generator for Kotlin with kotlinx.serialization annotations."""

    aliases = ("kt",)
    supported_sum_strategies = (SumTypeStrategy.NATIVE,)
    reserved_words = frozenset(KOTLIN_RESERVED_WORDS)
    builtin_types = frozenset(KOTLIN_BUILTIN_TYPES)

    @property
    def language_name(self) -> str:
        return "kotlin"

    @property
    def file_extension(self) -> str:
        return ".kt"

    def build_rendering_table(self) -> RenderingTable:
        return KOTLIN_RENDERING

    def create_sanitizer(self):
        return create_kotlin_sanitizer()

    @property
    def serializable(self) -> bool:
        return bool(self.config.option("serializable", True))

    def reset(self) -> None:
        self._imports: Set[str] = set()

    def _import(self, *names: str) -> None:
        self._imports.update(names)

    # Preamble

    def get_package_declaration(self) -> Optional[str]:
        if not self.config.module_name:
            return None
        return f"package {self.config.module_name}"

    def get_import_statements(self, graph: GlobalTypeGraph) -> List[str]:
        if not self._imports:
            return []
        return ["\n".join(f"import {name}" for name in sorted(self._imports))]

    def format_doc(self, doc: Tuple[str, ...], indent: str = "") -> str:
        """KDoc comment block."""
        if not doc or not self.config.add_comments:
            return ""
        if len(doc) == 1:
            return f"{indent}/** {doc[0]} */\n"
        lines = [f"{indent}/**"]
        lines.extend(f"{indent} * {line}".rstrip() for line in doc)
        lines.append(f"{indent} */")
        return "\n".join(lines) + "\n"

    # Names and types

    def type_name(self, definition: TypeDefinition) -> str:
        return class_name(self.sanitizer, definition.output_name)

    def format_primitive(self, kind: PrimitiveKind) -> str:
        if kind == PrimitiveKind.DATETIME:
            self._import(DATETIME_CLASS)
        return super().format_primitive(kind)

    def field_type(self, definition: TypeDefinition, field: Field) -> str:
        kotlin_type = super().field_type(definition, field)
        if field.optional and field.type_override(self.language_name, *self.aliases) is None:
            return f"{kotlin_type}?"
        return kotlin_type

    def _annotations(self, serial_name: Optional[str] = None) -> List[str]:
        if not self.serializable:
            return []
        self._import(f"{SERIALIZATION}.Serializable")
        annotations = ["@Serializable"]
        if serial_name is not None:
            annotations.append(self._serial_name(serial_name))
        return annotations

    def _serial_name(self, value: str) -> str:
        self._import(f"{SERIALIZATION}.SerialName")
        escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$")
        return f'@SerialName("{escaped}")'

    def _property(self, name: str, serialized: str, kotlin_type: str, **extra: Any) -> Dict[str, Any]:
        identifier = property_name(self.sanitizer, name)
        serial_name = None
        if self.serializable and identifier.strip("`") != serialized:
            serial_name = self._serial_name(serialized)
        data = {
            "doc": "",
            "name": identifier,
            "type": kotlin_type,
            "serial_name": serial_name,
            "default": None,
        }
        data.update(extra)
        return data

    # Declarations

    def generate_struct(self, definition: TypeDefinition) -> str:
        fields = [
            self._property(
                f.name,
                definition.serialized_field_name(f),
                self.field_type(definition, f),
                doc=self.format_doc(f.doc, self.indent),
                default="null" if f.optional else None,
            )
            for f in definition.fields
        ]
        return self.render_template(
            "data_class.kt.j2",
            {
                "doc": self.format_doc(definition.doc),
                "annotations": self._annotations(),
                "name": self.type_name(definition),
                "type_params": self.format_generic_parameters(definition),
                "is_generic": definition.is_generic,
                "fields": fields,
                "indent": self.indent,
            },
        )

    def generate_unit_enum(self, definition: TypeDefinition) -> str:
        cases = []
        for v in definition.variants:
            serialized = definition.serialized_variant_name(v)
            name = self.sanitizer.sanitize_name(v.name)
            cases.append(
                {
                    "doc": self.format_doc(v.doc, self.indent),
                    "name": name,
                    "serial_name": (
                        self._serial_name(serialized)
                        if self.serializable and name.strip("`") != serialized
                        else None
                    ),
                }
            )
        return self.render_template(
            "enum_class.kt.j2",
            {
                "doc": self.format_doc(definition.doc),
                "annotations": self._annotations(),
                "name": self.type_name(definition),
                "cases": cases,
                "indent": self.indent,
            },
        )

    def generate_alias(self, definition: TypeDefinition) -> str:
        return self.render_template(
            "typealias.kt.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.type_name(definition),
                "type_params": self.format_generic_parameters(definition),
                "target": self.format_type(definition.target),
            },
        )

    def generate_const(self, definition: TypeDefinition) -> str:
        kotlin_type = self.format_type(definition.target)
        value = f"{definition.value}{_LITERAL_SUFFIXES.get(kotlin_type, '')}"
        return self.render_template(
            "const.kt.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.sanitizer.sanitize_name(definition.output_name),
                "type": kotlin_type,
                "value": value,
            },
        )

    def generate_native_enum(self, definition: TypeDefinition) -> str:
        """Sealed class with one nested data class or object per variant."""
        name = self.type_name(definition)
        generics = list(definition.generic_parameters)
        tag_key = definition.tag_key(self.config.default_tag)
        content_key = definition.content_key(self.config.default_content)

        annotations = self._annotations()
        if self.serializable and tag_key != "type":
            self._import(
                f"{SERIALIZATION}.ExperimentalSerializationApi",
                f"{SERIALIZATION}.json.JsonClassDiscriminator",
            )
            annotations = [
                "@OptIn(ExperimentalSerializationApi::class)",
                *annotations,
                f'@JsonClassDiscriminator("{tag_key}")',
            ]

        cases = []
        for v in definition.variants:
            case = {
                "doc": self.format_doc(v.doc, self.indent),
                "annotations": self._annotations(definition.serialized_variant_name(v)),
                "name": class_name(
                    self.sanitizer, convert_case(v.name, NamingCase.PASCAL_CASE)
                ),
                "has_payload": v.has_payload,
            }
            if v.has_payload:
                case["type_params"] = self.format_generic_arguments(generics)
                case["parent"] = name + self.format_generic_arguments(generics)
                case["content"] = self._property(
                    content_key, content_key, self.format_type(v.payload)
                )
            else:
                case["parent"] = name + self.format_generic_arguments(
                    ["Nothing"] * len(generics)
                )
            cases.append(case)

        return self.render_template(
            "sealed_class.kt.j2",
            {
                "doc": self.format_doc(definition.doc),
                "annotations": annotations,
                "name": name,
                "type_params": self.format_generic_arguments(
                    [f"out {p}" for p in generics]
                ),
                "cases": cases,
                "indent": self.indent,
            },
        )


def create_kotlin_generator(config=None) -> KotlinGenerator:
    """Create a Kotlin generator, loading defaults when no config is given."""
    return KotlinGenerator(config)
