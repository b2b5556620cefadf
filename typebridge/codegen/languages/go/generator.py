"""
Go code generator implementation.

Generates Go structs with JSON tags from the resolved type graph. Go has no
sum types: algebraic enums become a marker interface, a discriminant string
type and one struct per variant.
"""

from typing import Any, Dict, List, Optional, Set

from ...core.catalog import (
    ContainerKind,
    PrimitiveKind,
    RenderingTable,
)
from ...core.generator import CodeGenerator, SumTypeStrategy
from ...core.ir import Field, TypeDefinition
from .naming import (
    GO_BUILTIN_TYPES,
    GO_RESERVED_WORDS,
    create_go_sanitizer,
    exported_name,
    validate_go_package_name,
)

GO_RENDERING = RenderingTable(
    "go",
    primitives={
        PrimitiveKind.BOOL: "bool",
        PrimitiveKind.I8: "int8",
        PrimitiveKind.I16: "int16",
        PrimitiveKind.I32: "int32",
        PrimitiveKind.I64: "int64",
        PrimitiveKind.U8: "uint8",
        PrimitiveKind.U16: "uint16",
        PrimitiveKind.U32: "uint32",
        PrimitiveKind.U64: "uint64",
        PrimitiveKind.I54: "int64",
        PrimitiveKind.U53: "uint64",
        PrimitiveKind.F32: "float32",
        PrimitiveKind.F64: "float64",
        PrimitiveKind.STRING: "string",
        PrimitiveKind.CHAR: "string",
        PrimitiveKind.UNIT: "struct{}",
        PrimitiveKind.DATETIME: "time.Time",
    },
    containers={
        ContainerKind.OPTION: "*{0}",
        ContainerKind.SEQUENCE: "[]{0}",
        ContainerKind.SET: "[]{0}",
        ContainerKind.MAP: "map[{0}]{1}",
    },
)


class GoGenerator(CodeGenerator):
    """Code generator for Go structs with JSON tags."""

    aliases = ("golang",)
    supported_sum_strategies = (SumTypeStrategy.EMULATED,)
    reserved_words = frozenset(GO_RESERVED_WORDS)
    builtin_types = frozenset(GO_BUILTIN_TYPES)
    uses_tabs = True

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "go"

    @property
    def file_extension(self) -> str:
        """Return Go file extension."""
        return ".go"

    def build_rendering_table(self) -> RenderingTable:
        return GO_RENDERING

    def create_sanitizer(self):
        return create_go_sanitizer()

    @property
    def generics_enabled(self) -> bool:
        return bool(self.config.option("generics", True))

    @property
    def package_name(self) -> str:
        return self.config.package_name or "main"

    def reset(self) -> None:
        self._imports: Set[str] = set()
        for problem in validate_go_package_name(self.package_name):
            self.add_warning(f"Go package name: {problem}")

    # Preamble

    def get_package_declaration(self) -> Optional[str]:
        """Get Go package declaration."""
        return self.render_template(
            "package.go.j2", {"package_name": self.package_name}
        )

    def get_import_statements(self, graph) -> List[str]:
        if not self._imports:
            return []
        if len(self._imports) == 1:
            return [f'import "{next(iter(self._imports))}"']
        lines = "\n".join(f'{self.indent}"{path}"' for path in sorted(self._imports))
        return [f"import (\n{lines}\n)"]

    # Types

    def format_primitive(self, kind: PrimitiveKind) -> str:
        if kind == PrimitiveKind.DATETIME:
            self._imports.add("time")
        return super().format_primitive(kind)

    def format_generic_arguments(self, arguments: List[str]) -> str:
        if not arguments:
            return ""
        return f"[{', '.join(arguments)}]"

    def format_generic_parameters(self, definition: TypeDefinition) -> str:
        if not definition.generic_parameters:
            return ""
        params = ", ".join(f"{p} any" for p in definition.generic_parameters)
        return f"[{params}]"

    def field_type(self, definition: TypeDefinition, field: Field) -> str:
        go_type = super().field_type(definition, field)
        if field.type_override(self.language_name, *self.aliases) is not None:
            return go_type
        if field.optional and self.config.option("use_pointers_for_optional", True):
            # Slices and maps are already nilable
            if not go_type.startswith(("[]", "map[", "*")):
                return f"*{go_type}"
        return go_type

    def json_tag(self, serialized_name: str, omitempty: bool) -> str:
        """Render a struct tag, or nothing when tags are disabled."""
        if not self.config.option("json_tags", True):
            return ""
        return self.render_template(
            "json_tag.go.j2",
            {"serialized_name": serialized_name, "omitempty": omitempty},
        )

    # Declarations

    def generate_struct(self, definition: TypeDefinition) -> str:
        """Generate a Go struct using templates."""
        fields = [self._field_data(definition, f) for f in definition.fields]
        return self.render_template(
            "struct.go.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.type_name(definition),
                "type_params": self.format_generic_parameters(definition),
                "fields": fields,
                "indent": self.indent,
            },
        )

    def _field_data(self, definition: TypeDefinition, field: Field) -> Dict[str, Any]:
        serialized = definition.serialized_field_name(field)
        return {
            "doc": self.format_doc(field.doc, self.indent),
            "name": exported_name(self.sanitizer, field.name),
            "type": self.field_type(definition, field),
            "tag": self.json_tag(serialized, field.may_be_absent),
        }

    def generate_unit_enum(self, definition: TypeDefinition) -> str:
        name = self.type_name(definition)
        cases = [
            {
                "doc": self.format_doc(v.doc, self.indent),
                "name": name + exported_name(self.sanitizer, v.name),
                "value": definition.serialized_variant_name(v),
            }
            for v in definition.variants
        ]
        return self.render_template(
            "unit_enum.go.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": name,
                "cases": cases,
                "indent": self.indent,
            },
        )

    def generate_alias(self, definition: TypeDefinition) -> str:
        return self.render_template(
            "alias.go.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.type_name(definition),
                "type_params": self.format_generic_parameters(definition),
                "target": self.format_type(definition.target),
            },
        )

    def generate_const(self, definition: TypeDefinition) -> str:
        return self.render_template(
            "const.go.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": exported_name(self.sanitizer, definition.output_name),
                "type": self.format_type(definition.target),
                "value": definition.value,
            },
        )

    def generate_emulated_enum(self, definition: TypeDefinition) -> str:
        """Marker interface, discriminant constants and one struct per case."""
        name = self.type_name(definition)
        tag_type = f"{name}Type"
        cases = []
        for case in self.emulated_cases(definition):
            variant_name = exported_name(self.sanitizer, case.variant.name)
            cases.append(
                {
                    "doc": self.format_doc(case.variant.doc),
                    "struct_name": f"{name}{variant_name}",
                    "tag_const": f"{tag_type}{variant_name}",
                    "tag_value": case.tag_value,
                    "tag_tag": self.json_tag(case.tag_key, False),
                    "has_payload": case.has_payload,
                    "payload_type": (
                        self.format_type(case.payload) if case.has_payload else ""
                    ),
                    "content_tag": self.json_tag(case.content_key, False),
                }
            )

        return self.render_template(
            "algebraic_enum.go.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": name,
                "type_params": self.format_generic_parameters(definition),
                "type_args": self.format_generic_arguments(
                    list(definition.generic_parameters)
                ),
                "marker": "is" + name,
                "tag_type": tag_type,
                "tag_field": exported_name(
                    self.sanitizer, definition.tag_key(self.config.default_tag)
                ),
                "content_field": exported_name(
                    self.sanitizer,
                    definition.content_key(self.config.default_content),
                ),
                "cases": cases,
                "indent": self.indent,
            },
        )


def create_go_generator(config=None) -> GoGenerator:
    """Create a Go generator, loading defaults when no config is given."""
    return GoGenerator(config)
