"""
Primitive and container catalog.

The fixed vocabulary of built-in scalar and container kinds recognised in
source definitions, plus the per-language rendering tables generators use
to spell them. Adding a target means adding one RenderingTable.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

from .diagnostics import NotRepresentableError


class PrimitiveKind(Enum):
    """Built-in scalar kinds, valued by their canonical source spelling."""

    BOOL = "bool"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    I54 = "I54"
    U53 = "U53"
    F32 = "f32"
    F64 = "f64"
    STRING = "String"
    CHAR = "char"
    UNIT = "()"
    DATETIME = "DateTime"

    @property
    def is_integer(self) -> bool:
        return self in _INTEGER_WIDTHS

    @property
    def bit_width(self) -> Optional[int]:
        return _INTEGER_WIDTHS.get(self) or _FLOAT_WIDTHS.get(self)

    @property
    def is_signed(self) -> bool:
        return self in (
            PrimitiveKind.I8,
            PrimitiveKind.I16,
            PrimitiveKind.I32,
            PrimitiveKind.I64,
            PrimitiveKind.I54,
        )

    @property
    def exceeds_double_precision(self) -> bool:
        """True for integers that cannot be held exactly by an IEEE double."""
        return self in (PrimitiveKind.I64, PrimitiveKind.U64)


_INTEGER_WIDTHS = {
    PrimitiveKind.I8: 8,
    PrimitiveKind.I16: 16,
    PrimitiveKind.I32: 32,
    PrimitiveKind.I64: 64,
    PrimitiveKind.U8: 8,
    PrimitiveKind.U16: 16,
    PrimitiveKind.U32: 32,
    PrimitiveKind.U64: 64,
    PrimitiveKind.I54: 54,
    PrimitiveKind.U53: 53,
}

_FLOAT_WIDTHS = {PrimitiveKind.F32: 32, PrimitiveKind.F64: 64}


class ContainerKind(Enum):
    """Built-in container kinds."""

    OPTION = "Option"
    SEQUENCE = "Vec"
    SET = "HashSet"
    MAP = "HashMap"
    TUPLE = "tuple"

    @property
    def arity(self) -> Optional[int]:
        """Number of type arguments, None for variadic tuples."""
        return _CONTAINER_ARITY[self]


_CONTAINER_ARITY = {
    ContainerKind.OPTION: 1,
    ContainerKind.SEQUENCE: 1,
    ContainerKind.SET: 1,
    ContainerKind.MAP: 2,
    ContainerKind.TUPLE: None,
}

# Source spellings recognised as catalog entries
PRIMITIVE_NAMES: Dict[str, PrimitiveKind] = {
    "bool": PrimitiveKind.BOOL,
    "i8": PrimitiveKind.I8,
    "i16": PrimitiveKind.I16,
    "i32": PrimitiveKind.I32,
    "i64": PrimitiveKind.I64,
    "isize": PrimitiveKind.I64,
    "u8": PrimitiveKind.U8,
    "u16": PrimitiveKind.U16,
    "u32": PrimitiveKind.U32,
    "u64": PrimitiveKind.U64,
    "usize": PrimitiveKind.U64,
    "I54": PrimitiveKind.I54,
    "U53": PrimitiveKind.U53,
    "f32": PrimitiveKind.F32,
    "f64": PrimitiveKind.F64,
    "String": PrimitiveKind.STRING,
    "str": PrimitiveKind.STRING,
    "char": PrimitiveKind.CHAR,
    "DateTime": PrimitiveKind.DATETIME,
}

CONTAINER_NAMES: Dict[str, ContainerKind] = {
    "Option": ContainerKind.OPTION,
    "Vec": ContainerKind.SEQUENCE,
    "VecDeque": ContainerKind.SEQUENCE,
    "HashSet": ContainerKind.SET,
    "BTreeSet": ContainerKind.SET,
    "IndexSet": ContainerKind.SET,
    "HashMap": ContainerKind.MAP,
    "BTreeMap": ContainerKind.MAP,
    "IndexMap": ContainerKind.MAP,
}

# Wrappers that serialize exactly like their single type argument
TRANSPARENT_WRAPPERS = frozenset({"Box", "Rc", "Arc", "Cow"})

# Types whose arguments do not change the serialized form (`DateTime<Utc>`)
IGNORED_ARGUMENTS = frozenset({"DateTime"})

PRECISION_CAVEATS: Dict[PrimitiveKind, str] = {
    PrimitiveKind.I64: "64-bit integers exceed 2^53 and lose precision as doubles",
    PrimitiveKind.U64: "64-bit integers exceed 2^53 and lose precision as doubles",
    PrimitiveKind.F32: "single-precision values are widened where no float32 exists",
}

CatalogKind = Union[PrimitiveKind, ContainerKind]


def lookup(name: str) -> Optional[CatalogKind]:
    """Look up a source type name in the catalog."""
    if name in PRIMITIVE_NAMES:
        return PRIMITIVE_NAMES[name]
    return CONTAINER_NAMES.get(name)


def is_catalog_name(name: str) -> bool:
    return lookup(name) is not None


@dataclass(frozen=True)
class TypeRendering:
    """How one primitive kind is spelled in a target language."""

    name: str
    fallback: bool = False  # not the target's native numeric type
    caveat: Optional[str] = None


ContainerRule = Union[str, Callable[[List[str]], str]]


class RenderingTable:
    """
    Per-language rendering rules for catalog kinds.

    Container rules are format strings receiving the rendered arguments
    positionally and as ``items`` (comma-joined), or callables taking the
    list of rendered arguments.
    """

    def __init__(
        self,
        language: str,
        primitives: Dict[PrimitiveKind, Union[str, TypeRendering]],
        containers: Dict[ContainerKind, ContainerRule],
    ):
        self.language = language
        self._primitives = {
            kind: rule if isinstance(rule, TypeRendering) else TypeRendering(rule)
            for kind, rule in primitives.items()
        }
        self._containers = dict(containers)

    def supports(self, kind: CatalogKind) -> bool:
        if isinstance(kind, PrimitiveKind):
            return kind in self._primitives
        return kind in self._containers

    def primitive(self, kind: PrimitiveKind) -> TypeRendering:
        """Get the rendering for a primitive kind."""
        rendering = self._primitives.get(kind)
        if rendering is None:
            raise NotRepresentableError(
                f"{kind.value} has no representation in {self.language}"
            )
        return rendering

    def container(self, kind: ContainerKind, arguments: List[str]) -> str:
        """Render a container kind applied to already-rendered arguments."""
        rule = self._containers.get(kind)
        if rule is None:
            raise NotRepresentableError(
                f"{kind.value} has no representation in {self.language}"
            )
        if callable(rule):
            return rule(arguments)
        return rule.format(*arguments, items=", ".join(arguments))

    def with_overrides(
        self, primitives: Dict[PrimitiveKind, Union[str, TypeRendering]]
    ) -> "RenderingTable":
        """Return a copy with some primitive renderings replaced."""
        merged = dict(self._primitives)
        for kind, rule in primitives.items():
            merged[kind] = rule if isinstance(rule, TypeRendering) else TypeRendering(rule)
        return RenderingTable(self.language, merged, self._containers)
