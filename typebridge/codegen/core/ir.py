"""
Core type representation for code generation.

Definitions, fields, variants and type references shared by the extractor,
the reconciler and every language generator. Extracted definitions carry
syntactic (unresolved) types; reconciled definitions carry TypeReferences.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .catalog import ContainerKind, PrimitiveKind
from .diagnostics import Diagnostic, SourceLocation
from .naming import NamingCase, convert_case


@dataclass(frozen=True, order=True)
class QualifiedName:
    """Module path plus local name, e.g. ``crate::models::User``."""

    module: str
    name: str

    @classmethod
    def parse(cls, text: str) -> "QualifiedName":
        module, _, name = text.rpartition("::")
        return cls(module, name)

    def __str__(self) -> str:
        return f"{self.module}::{self.name}" if self.module else self.name


# Resolved type references


@dataclass(frozen=True)
class Primitive:
    kind: PrimitiveKind


@dataclass(frozen=True)
class Container:
    kind: ContainerKind
    arguments: Tuple["TypeReference", ...] = ()


@dataclass(frozen=True)
class Defined:
    name: QualifiedName
    arguments: Tuple["TypeReference", ...] = ()


@dataclass(frozen=True)
class GenericParam:
    name: str


@dataclass(frozen=True)
class External:
    """
    A type from outside the graph, spelled through a configured type mapping.

    ``name`` is the name as written in the source; each target looks it up in
    its own ``type_mappings``.
    """

    name: str


TypeReference = Union[Primitive, Container, Defined, GenericParam, External]


# Syntactic (unresolved) types produced by the extractor


@dataclass(frozen=True)
class NamedType:
    """A path type such as ``Vec<T>`` or ``crate::a::B``."""

    path: Tuple[str, ...]
    arguments: Tuple["SyntacticType", ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False)

    @property
    def name(self) -> str:
        return "::".join(self.path)


@dataclass(frozen=True)
class TupleType:
    """A tuple type; the empty tuple is the unit type."""

    elements: Tuple["SyntacticType", ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False)


@dataclass(frozen=True)
class ArrayType:
    """A fixed-length array or slice."""

    element: "SyntacticType"
    location: Optional[SourceLocation] = field(default=None, compare=False)


SyntacticType = Union[NamedType, TupleType, ArrayType]
AnyType = Union[TypeReference, SyntacticType]


class DefinitionKind(Enum):
    """Kinds of type definitions."""

    STRUCT = "struct"
    ALGEBRAIC_ENUM = "algebraic_enum"
    UNIT_ENUM = "unit_enum"
    TYPE_ALIAS = "type_alias"
    CONST = "const"


@dataclass(frozen=True)
class Field:
    """Represents a single field in a struct."""

    name: str
    type: AnyType
    rename: Optional[str] = None
    doc: Tuple[str, ...] = ()
    optional: bool = False  # nullable
    has_default: bool = False
    type_overrides: Tuple[Tuple[str, str], ...] = ()  # (language, type text)
    location: Optional[SourceLocation] = field(default=None, compare=False)

    @property
    def may_be_absent(self) -> bool:
        """Whether a serialized value may omit this field."""
        return self.optional or self.has_default

    @property
    def value_type(self) -> AnyType:
        """The field type with an outer optional container removed."""
        if (
            self.optional
            and isinstance(self.type, Container)
            and self.type.kind == ContainerKind.OPTION
        ):
            return self.type.arguments[0]
        return self.type

    def type_override(self, *languages: str) -> Optional[str]:
        for language, type_text in self.type_overrides:
            if language in languages:
                return type_text
        return None


@dataclass(frozen=True)
class Variant:
    """One case of an enum, optionally carrying a single payload."""

    name: str
    payload: Optional[AnyType] = None
    rename: Optional[str] = None
    doc: Tuple[str, ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False)

    @property
    def has_payload(self) -> bool:
        return self.payload is not None


@dataclass(frozen=True)
class TypeDefinition:
    """A struct, enum, type alias or constant participating in generation."""

    name: QualifiedName
    kind: DefinitionKind
    fields: Tuple[Field, ...] = ()
    variants: Tuple[Variant, ...] = ()
    target: Optional[AnyType] = None
    generic_parameters: Tuple[str, ...] = ()
    doc: Tuple[str, ...] = ()
    rename: Optional[str] = None
    rename_all: Optional[NamingCase] = None
    tag: Optional[str] = None
    content: Optional[str] = None
    value: Optional[int] = None  # constants only
    location: Optional[SourceLocation] = field(default=None, compare=False)

    @property
    def local_name(self) -> str:
        return self.name.name

    @property
    def output_name(self) -> str:
        """The name used for the definition in generated code."""
        return self.rename or self.name.name

    @property
    def is_generic(self) -> bool:
        return bool(self.generic_parameters)

    @property
    def is_enum(self) -> bool:
        return self.kind in (DefinitionKind.ALGEBRAIC_ENUM, DefinitionKind.UNIT_ENUM)

    def serialized_field_name(self, field: Field) -> str:
        """Explicit rename wins over rename_all, which wins over the original."""
        if field.rename is not None:
            return field.rename
        if self.rename_all is not None:
            return convert_case(field.name, self.rename_all)
        return field.name

    def serialized_variant_name(self, variant: Variant) -> str:
        if variant.rename is not None:
            return variant.rename
        if self.rename_all is not None:
            return convert_case(variant.name, self.rename_all)
        return variant.name

    def tag_key(self, default: str = "type") -> str:
        return self.tag or default

    def content_key(self, default: str = "content") -> str:
        return self.content or default

    def type_slots(self) -> Iterator[AnyType]:
        """Every type written in this definition, in declaration order."""
        for f in self.fields:
            yield f.type
        for v in self.variants:
            if v.payload is not None:
                yield v.payload
        if self.target is not None:
            yield self.target


def iter_references(ref: TypeReference) -> Iterator[TypeReference]:
    """Yield a reference and every reference nested inside it."""
    yield ref
    if isinstance(ref, (Container, Defined)):
        for argument in ref.arguments:
            yield from iter_references(argument)


@dataclass(frozen=True)
class ImportBinding:
    """A name made visible by a ``use`` declaration."""

    local_name: str
    path: Tuple[str, ...]
    is_glob: bool = False
    module: str = ""  # enclosing module; empty means the file module
    location: Optional[SourceLocation] = field(default=None, compare=False)


@dataclass(frozen=True)
class LocalForest:
    """Unresolved definitions and imports extracted from one file."""

    source: str
    module: str
    definitions: Tuple[TypeDefinition, ...] = ()
    imports: Tuple[ImportBinding, ...] = ()
    diagnostics: Tuple[Diagnostic, ...] = ()


class GlobalTypeGraph:
    """
    Immutable mapping from qualified name to resolved definition.

    Iteration yields definitions in discovery order.
    """

    def __init__(self, definitions: List[TypeDefinition]):
        self._order: Tuple[QualifiedName, ...] = tuple(d.name for d in definitions)
        self._definitions = MappingProxyType({d.name: d for d in definitions})

    def __getitem__(self, name: QualifiedName) -> TypeDefinition:
        return self._definitions[name]

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[TypeDefinition]:
        return (self._definitions[name] for name in self._order)

    def __len__(self) -> int:
        return len(self._order)

    def get(self, name: QualifiedName) -> Optional[TypeDefinition]:
        return self._definitions.get(name)

    @property
    def names(self) -> Tuple[QualifiedName, ...]:
        return self._order

    @property
    def definitions(self) -> Tuple[TypeDefinition, ...]:
        return tuple(self)

    def output_name(self, name: QualifiedName) -> str:
        return self._definitions[name].output_name

    def references(self) -> Iterator[Tuple[TypeDefinition, TypeReference]]:
        """Yield (definition, reference) for every nested reference in the graph."""
        for definition in self:
            for slot in definition.type_slots():
                for ref in iter_references(slot):
                    yield definition, ref

    def to_dict(self) -> Dict[str, Dict[str, object]]:
        """Summary view keyed by qualified name, in discovery order."""
        return {
            str(d.name): {
                "kind": d.kind.value,
                "generic_parameters": list(d.generic_parameters),
                "fields": [f.name for f in d.fields],
                "variants": [v.name for v in d.variants],
            }
            for d in self
        }
