"""
Python code generator implementation.

Generates Python dataclasses or Pydantic models using templates. Algebraic
enums become one class per variant, each with a ``Literal`` discriminant,
combined into a ``Union`` alias.
"""

from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from ...core.catalog import ContainerKind, PrimitiveKind, RenderingTable
from ...core.generator import CodeGenerator, SumTypeStrategy
from ...core.ir import Container, Field, GlobalTypeGraph, TypeDefinition
from .naming import (
    PYTHON_BUILTIN_TYPES,
    PYTHON_RESERVED_WORDS,
    attribute_name,
    create_python_sanitizer,
    member_name,
)


class PythonStyle(Enum):
    """Python code generation styles."""

    DATACLASS = "dataclass"
    PYDANTIC = "pydantic"


PYTHON_RENDERING = RenderingTable(
    "python",
    primitives={
        PrimitiveKind.BOOL: "bool",
        PrimitiveKind.I8: "int",
        PrimitiveKind.I16: "int",
        PrimitiveKind.I32: "int",
        PrimitiveKind.I64: "int",
        PrimitiveKind.U8: "int",
        PrimitiveKind.U16: "int",
        PrimitiveKind.U32: "int",
        PrimitiveKind.U64: "int",
        PrimitiveKind.I54: "int",
        PrimitiveKind.U53: "int",
        PrimitiveKind.F32: "float",
        PrimitiveKind.F64: "float",
        PrimitiveKind.STRING: "str",
        PrimitiveKind.CHAR: "str",
        PrimitiveKind.UNIT: "None",
        PrimitiveKind.DATETIME: "datetime",
    },
    containers={
        ContainerKind.OPTION: "Optional[{0}]",
        ContainerKind.SEQUENCE: "list[{0}]",
        ContainerKind.SET: "set[{0}]",
        ContainerKind.MAP: "dict[{0}, {1}]",
        ContainerKind.TUPLE: "tuple[{items}]",
    },
)

THIRD_PARTY_MODULES = {"pydantic"}


class PythonGenerator(CodeGenerator):
    """Code generator for Python dataclasses and Pydantic models."""

    aliases = ("py",)
    supported_sum_strategies = (SumTypeStrategy.EMULATED,)
    reserved_words = frozenset(PYTHON_RESERVED_WORDS)
    builtin_types = frozenset(PYTHON_BUILTIN_TYPES)
    line_comment = "#"
    block_separator = "\n\n\n"

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "python"

    @property
    def file_extension(self) -> str:
        """Return Python file extension."""
        return ".py"

    def build_rendering_table(self) -> RenderingTable:
        return PYTHON_RENDERING

    def create_sanitizer(self):
        return create_python_sanitizer()

    @property
    def style(self) -> PythonStyle:
        return PythonStyle(self.config.option("style", "dataclass"))

    def reset(self) -> None:
        self._imports: Dict[str, Set[str]] = {}
        self._type_vars: List[str] = []

    def _import(self, module: str, *names: str) -> None:
        self._imports.setdefault(module, set()).update(names)

    # Preamble

    def get_import_statements(self, graph: GlobalTypeGraph) -> List[str]:
        """Future import, grouped imports and TypeVar declarations."""
        stdlib: List[Tuple[str, List[str]]] = []
        third_party: List[Tuple[str, List[str]]] = []
        for module in sorted(self._imports):
            entry = (module, sorted(self._imports[module]))
            if module in THIRD_PARTY_MODULES:
                third_party.append(entry)
            else:
                stdlib.append(entry)

        statements = ["from __future__ import annotations"]
        if stdlib or third_party:
            statements.append(
                self.render_template(
                    "imports.py.j2", {"stdlib": stdlib, "third_party": third_party}
                )
            )
        if self._type_vars:
            statements.append(
                "\n".join(f'{name} = TypeVar("{name}")' for name in self._type_vars)
            )
        return statements

    # Types

    def format_primitive(self, kind: PrimitiveKind) -> str:
        if kind == PrimitiveKind.DATETIME:
            self._import("datetime", "datetime")
        return super().format_primitive(kind)

    def format_container(self, kind: ContainerKind, arguments: List[str], ref: Container) -> str:
        if kind == ContainerKind.OPTION:
            self._import("typing", "Optional")
        return super().format_container(kind, arguments, ref)

    def format_generic_arguments(self, arguments: List[str]) -> str:
        if not arguments:
            return ""
        return f"[{', '.join(arguments)}]"

    def _generic_base(self, generic_parameters: Tuple[str, ...]) -> Optional[str]:
        if not generic_parameters:
            return None
        self._import("typing", "Generic", "TypeVar")
        for name in generic_parameters:
            if name not in self._type_vars:
                self._type_vars.append(name)
        return f"Generic[{', '.join(generic_parameters)}]"

    # Docs

    def docstring(self, doc: Tuple[str, ...]) -> str:
        """Class docstring, indented for a class body."""
        if not doc or not self.config.add_comments:
            return ""
        lines = [line.replace("\\", "\\\\").replace('"""', '\\"\\"\\"') for line in doc]
        if len(lines) == 1:
            return f'{self.indent}"""{lines[0]}"""'
        body = "\n".join(f"{self.indent}{line}".rstrip() for line in lines)
        return f'{self.indent}"""\n{body}\n{self.indent}"""'

    # Classes

    def _class_header(self, generic_parameters: Tuple[str, ...]) -> Tuple[Optional[str], str]:
        """Decorator and base-class list for the configured style."""
        bases = []
        decorator = None
        if self.style == PythonStyle.PYDANTIC:
            self._import("pydantic", "BaseModel")
            bases.append("BaseModel")
        else:
            self._import("dataclasses", "dataclass")
            options = ["kw_only=True"]
            if self.config.option("dataclass_frozen", False):
                options.append("frozen=True")
            decorator = f"@dataclass({', '.join(options)})"

        generic = self._generic_base(generic_parameters)
        if generic:
            bases.append(generic)
        return decorator, f"({', '.join(bases)})" if bases else ""

    def _config_line(self, needs_aliases: bool) -> str:
        if self.style != PythonStyle.PYDANTIC:
            return ""
        options = []
        if needs_aliases:
            options.append("populate_by_name=True")
        if self.config.option("dataclass_frozen", False):
            options.append("frozen=True")
        if not options:
            return ""
        self._import("pydantic", "ConfigDict")
        return f"model_config = ConfigDict({', '.join(options)})"

    def _field_default(self, serialized: str, attribute: str, default: Optional[str]) -> str:
        """Assignment suffix carrying the default and the wire name."""
        alias = serialized if serialized != attribute else None
        if self.style == PythonStyle.PYDANTIC:
            if alias is None:
                return f" = {default}" if default is not None else ""
            self._import("pydantic", "Field")
            args = [f"alias={_quote(alias)}"]
            if default is not None:
                args.insert(0, f"default={default}")
            return f" = Field({', '.join(args)})"

        if alias is None:
            return f" = {default}" if default is not None else ""
        self._import("dataclasses", "field")
        args = [f"metadata={{\"alias\": {_quote(alias)}}}"]
        if default is not None:
            args.insert(0, f"default={default}")
        return f" = field({', '.join(args)})"

    def _render_class(
        self,
        name: str,
        generic_parameters: Tuple[str, ...],
        doc: Tuple[str, ...],
        fields: List[Dict[str, str]],
        aliased: bool,
    ) -> str:
        decorator, bases = self._class_header(generic_parameters)
        return self.render_template(
            "class.py.j2",
            {
                "decorator": decorator,
                "name": name,
                "bases": bases,
                "docstring": self.docstring(doc),
                "config_line": self._config_line(aliased),
                "fields": fields,
                "indent": self.indent,
            },
        )

    def generate_struct(self, definition: TypeDefinition) -> str:
        """Generate a dataclass or model for a struct."""
        fields = []
        aliased = False
        for f in definition.fields:
            data = self._field_data(definition, f)
            aliased = aliased or data.pop("aliased")
            fields.append(data)
        return self._render_class(
            self.type_name(definition),
            definition.generic_parameters,
            definition.doc,
            fields,
            aliased,
        )

    def _field_data(self, definition: TypeDefinition, field: Field) -> Dict[str, object]:
        attribute = attribute_name(self.sanitizer, field.name)
        serialized = definition.serialized_field_name(field)
        field_type = self.field_type(definition, field)
        if field.optional:
            self._import("typing", "Optional")
            field_type = f"Optional[{field_type}]"
        return {
            "comment": self.format_doc(field.doc, self.indent),
            "name": attribute,
            "type": field_type,
            "default": self._field_default(
                serialized, attribute, "None" if field.optional else None
            ),
            "aliased": serialized != attribute,
        }

    def generate_unit_enum(self, definition: TypeDefinition) -> str:
        self._import("enum", "Enum")
        cases = [
            {
                "comment": self.format_doc(v.doc, self.indent),
                "name": member_name(self.sanitizer, v.name),
                "value": definition.serialized_variant_name(v),
            }
            for v in definition.variants
        ]
        return self.render_template(
            "enum.py.j2",
            {
                "name": self.type_name(definition),
                "docstring": self.docstring(definition.doc),
                "cases": cases,
                "indent": self.indent,
            },
        )

    def generate_alias(self, definition: TypeDefinition) -> str:
        self._import("typing", "TypeAlias")
        return self.render_template(
            "alias.py.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.type_name(definition),
                "target": self.format_type(definition.target),
            },
        )

    def generate_const(self, definition: TypeDefinition) -> str:
        self._import("typing", "Final")
        return self.render_template(
            "const.py.j2",
            {
                "doc": self.format_doc(definition.doc),
                "name": self.sanitizer.sanitize_name(definition.output_name),
                "type": self.format_type(definition.target),
                "value": definition.value,
            },
        )

    def generate_emulated_enum(self, definition: TypeDefinition) -> str:
        """One class per variant with a Literal discriminant, then a Union."""
        name = self.type_name(definition)
        generics = definition.generic_parameters
        type_args = self.format_generic_arguments(list(generics))

        classes = []
        members = []
        for case in self.emulated_cases(definition):
            class_name = self.sanitizer.sanitize_name(
                f"{name}{case.variant.name}", check_builtins=True
            )
            self._import("typing", "Literal")
            tag_attribute = attribute_name(self.sanitizer, case.tag_key)
            content_attribute = attribute_name(self.sanitizer, case.content_key)
            fields = [
                {
                    "comment": "",
                    "name": tag_attribute,
                    "type": f"Literal[{_quote(case.tag_value)}]",
                    "default": self._field_default(
                        case.tag_key, tag_attribute, _quote(case.tag_value)
                    ),
                }
            ]
            if case.has_payload:
                fields.append(
                    {
                        "comment": "",
                        "name": content_attribute,
                        "type": self.format_type(case.payload),
                        "default": self._field_default(
                            case.content_key, content_attribute, None
                        ),
                    }
                )
            aliased = tag_attribute != case.tag_key or (
                case.has_payload and content_attribute != case.content_key
            )
            classes.append(
                self._render_class(class_name, generics, case.variant.doc, fields, aliased)
            )
            members.append(class_name + type_args)

        if members:
            self._import("typing", "Union")
            union = f"Union[{', '.join(members)}]"
        else:
            self._import("typing", "NoReturn")
            union = "NoReturn"

        return self.render_template(
            "union.py.j2",
            {
                "cases": classes,
                "doc": self.format_doc(definition.doc),
                "name": name,
                "union": union,
            },
        )


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def create_python_generator(config=None) -> PythonGenerator:
    """Create a Python generator, loading defaults when no config is given."""
    return PythonGenerator(config)
