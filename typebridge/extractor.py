"""
Source extractor.

Walks a parsed Rust file and produces a LocalForest: the definitions marked
for generation, with type references left as syntactic (unresolved) names,
plus the import bindings declared by the file.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from tree_sitter import Node

from .attributes import (
    AttributeSyntaxError,
    Meta,
    attribute_name,
    doc_text,
    find_all,
    meta_from_node,
)
from .codegen.core import catalog
from .codegen.core.diagnostics import Diagnostic, DiagnosticKind, SourceLocation
from .codegen.core.ir import (
    ArrayType,
    DefinitionKind,
    Field,
    ImportBinding,
    LocalForest,
    NamedType,
    QualifiedName,
    SyntacticType,
    TupleType,
    TypeDefinition,
    Variant,
)
from .codegen.core.naming import NamingCase, parse_naming_case
from .logging_config import get_logger
from .rust_parser import ParsedFile

logger = get_logger(__name__)

MARKER_ATTRIBUTE = "typeshare"

# Attributes whose contents we interpret; others are only named
_INTERPRETED = {"serde", MARKER_ATTRIBUTE, "doc"}

_ITEM_KINDS = ("struct_item", "enum_item", "type_item", "const_item")
_COMMENT_KINDS = ("line_comment", "block_comment")


@dataclass
class RustItem:
    """A top-level item with the attributes and doc comments preceding it."""

    node: Node
    kind: str
    name: str
    attributes: List[Meta] = field(default_factory=list)
    doc: List[str] = field(default_factory=list)

    def has_attribute(self, name: str) -> bool:
        return any(a.name == name for a in self.attributes)


MarkerPredicate = Callable[[RustItem], bool]


def has_typeshare_attribute(item: RustItem) -> bool:
    """Default participation marker: the item carries ``#[typeshare]``."""
    return item.has_attribute(MARKER_ATTRIBUTE)


def doc_comment_text(comment: str) -> Optional[List[str]]:
    """
    Return the trimmed lines of an outer doc comment, or None for plain comments.

    Handles ``/// text`` and ``/** text */``.
    """
    comment = comment.rstrip("\r\n")
    if comment.startswith("///") and not comment.startswith("////"):
        return [comment[3:].strip()]
    if comment.startswith("/**") and not comment.startswith("/***") and comment != "/**/":
        body = comment[3:-2] if comment.endswith("*/") else comment[3:]
        lines = []
        for line in body.splitlines():
            line = line.strip()
            if line.startswith("*"):
                line = line[1:].strip()
            lines.append(line)
        while lines and not lines[0]:
            lines.pop(0)
        while lines and not lines[-1]:
            lines.pop()
        return lines
    return None


class _Pending:
    """Attributes and doc comments collected ahead of the next item."""

    def __init__(self):
        self.attributes: List[Meta] = []
        self.doc: List[str] = []

    def clear(self) -> None:
        self.attributes = []
        self.doc = []


class FileExtractor:
    """Extracts one parsed file into a LocalForest."""

    def __init__(self, parsed: ParsedFile, is_marked: Optional[MarkerPredicate] = None):
        self.parsed = parsed
        self.is_marked = is_marked or has_typeshare_attribute
        self.definitions: List[TypeDefinition] = []
        self.imports: List[ImportBinding] = []
        self.diagnostics: List[Diagnostic] = []

    def extract(self) -> LocalForest:
        """Run extraction over the whole file."""
        for error in self.parsed.error_nodes()[:1]:
            logger.debug("Parse error near %s", self.parsed.location(error))
        self._walk_items(self.parsed.root, self.parsed.module)
        logger.debug(
            "Extracted %d definitions and %d imports from %s",
            len(self.definitions),
            len(self.imports),
            self.parsed.path,
        )
        return LocalForest(
            source=self.parsed.path,
            module=self.parsed.module,
            definitions=tuple(self.definitions),
            imports=tuple(self.imports),
            diagnostics=tuple(self.diagnostics),
        )

    # Diagnostics

    def _location(self, node: Node) -> SourceLocation:
        return self.parsed.location(node)

    def _malformed(self, message: str, node: Node) -> None:
        self.diagnostics.append(
            Diagnostic.error(
                DiagnosticKind.MALFORMED_ATTRIBUTE, message, self._location(node)
            )
        )

    # Item walking

    def _collect(self, child: Node, pending: _Pending) -> bool:
        """Record comments and attributes; return True if the node was consumed."""
        if child.type in _COMMENT_KINDS:
            lines = doc_comment_text(self.parsed.text(child))
            if lines is not None:
                pending.doc.extend(lines)
            return True
        if child.type == "attribute_item":
            meta = self._attribute(child)
            if meta is not None:
                text = doc_text(meta)
                if text is not None:
                    pending.doc.extend(line.strip() for line in text.splitlines() or [""])
                else:
                    pending.attributes.append(meta)
            return True
        return False

    def _attribute(self, node: Node) -> Optional[Meta]:
        name = attribute_name(node)
        if name is None:
            return None
        if name not in _INTERPRETED:
            return Meta(name=name)
        try:
            return meta_from_node(node)
        except AttributeSyntaxError as e:
            self._malformed(f"malformed #[{name}] attribute: {e}", node)
            return None

    def _walk_items(self, container: Node, module: str) -> None:
        pending = _Pending()
        for child in container.named_children:
            if self._collect(child, pending):
                continue
            if child.type == "inner_attribute_item":
                continue

            if child.type in _ITEM_KINDS:
                name_node = child.child_by_field_name("name")
                item = RustItem(
                    node=child,
                    kind=child.type,
                    name=self.parsed.text(name_node),
                    attributes=pending.attributes,
                    doc=pending.doc,
                )
                if self.is_marked(item):
                    self._extract_item(item, module)
            elif child.type == "use_declaration":
                self._extract_use(child, module)
            elif child.type == "mod_item":
                body = child.child_by_field_name("body")
                if body is not None:
                    name = self.parsed.text(child.child_by_field_name("name"))
                    self._walk_items(body, f"{module}::{name}")
            pending.clear()

    def _extract_item(self, item: RustItem, module: str) -> None:
        qualified = QualifiedName(module, _strip_raw(item.name))
        logger.debug("Extracting %s %s", item.kind, qualified)
        if item.kind == "struct_item":
            self.definitions.append(self._extract_struct(item, qualified))
        elif item.kind == "enum_item":
            self._extract_enum(item, qualified)
        elif item.kind == "type_item":
            self.definitions.append(self._extract_alias(item, qualified))
        elif item.kind == "const_item":
            constant = self._extract_const(item, qualified)
            if constant is not None:
                self.definitions.append(constant)

    # Container attributes

    def _container_attributes(self, item: RustItem) -> Dict[str, object]:
        result: Dict[str, object] = {}
        for meta in find_all(item.attributes, "serde"):
            if meta.name == "rename_all":
                result["rename_all"] = self._rename_rule(meta, item.node)
            elif meta.name in ("rename", "tag", "content"):
                value = self._string_value(meta, item.node)
                if value is not None:
                    result[meta.name] = value
        return result

    def _rename_rule(self, meta: Meta, node: Node) -> Optional[NamingCase]:
        value = self._string_value(meta, node)
        if value is None:
            return None
        rule = parse_naming_case(value)
        if rule is None:
            self._malformed(f"unknown rename_all value {value!r}", node)
        return rule

    def _string_value(self, meta: Meta, node: Node) -> Optional[str]:
        if meta.has_arguments:
            # rename(serialize = "...", deserialize = "...") uses the serialize form
            inner = meta.find("serialize") or meta.find("deserialize")
            if inner is not None and inner.value_is_string:
                return inner.value
            self._malformed(f"{meta.name} expects a string value", node)
            return None
        if meta.value is None or not meta.value_is_string:
            self._malformed(f"{meta.name} expects a string value", node)
            return None
        return meta.value

    # Structs

    def _extract_struct(self, item: RustItem, qualified: QualifiedName) -> TypeDefinition:
        node = item.node
        attrs = self._container_attributes(item)
        generics = self._generic_parameters(node)
        body = node.child_by_field_name("body")

        common = dict(
            name=qualified,
            generic_parameters=generics,
            doc=tuple(item.doc),
            rename=attrs.get("rename"),
            rename_all=attrs.get("rename_all"),
            location=self._location(node),
        )

        if body is not None and body.type == "ordered_field_declaration_list":
            # Tuple structs serialize as their single field or as an array
            types = [self._syntactic_type(t) for t in body.children_by_field_name("type")]
            types = [t for t in types if t is not None]
            target = types[0] if len(types) == 1 else TupleType(tuple(types), self._location(body))
            return TypeDefinition(kind=DefinitionKind.TYPE_ALIAS, target=target, **common)

        fields = self._fields(body) if body is not None else ()
        return TypeDefinition(kind=DefinitionKind.STRUCT, fields=fields, **common)

    def _fields(self, body: Node) -> Tuple[Field, ...]:
        fields = []
        pending = _Pending()
        for child in body.named_children:
            if self._collect(child, pending):
                continue
            if child.type == "field_declaration":
                extracted = self._field(child, pending)
                if extracted is not None:
                    fields.append(extracted)
            pending.clear()
        return tuple(fields)

    def _field(self, node: Node, pending: _Pending) -> Optional[Field]:
        name = _strip_raw(self.parsed.text(node.child_by_field_name("name")))
        rename = None
        has_default = False
        optional_hint = False
        overrides: List[Tuple[str, str]] = []

        for meta in find_all(pending.attributes, "serde"):
            if meta.name in ("skip", "skip_serializing"):
                return None
            if meta.name == "rename":
                rename = self._string_value(meta, node)
            elif meta.name == "default":
                has_default = True
            elif meta.name == "skip_serializing_if":
                optional_hint = True

        for meta in find_all(pending.attributes, MARKER_ATTRIBUTE):
            if meta.name == "skip":
                return None
            if meta.has_arguments:
                type_meta = meta.find("type")
                if type_meta is None or not type_meta.value_is_string:
                    self._malformed(
                        f"#[typeshare({meta.name}(...))] expects type = \"...\"", node
                    )
                    continue
                overrides.append((meta.name, type_meta.value))

        type_node = node.child_by_field_name("type")
        field_type = self._syntactic_type(type_node)
        if field_type is None:
            return None

        return Field(
            name=name,
            type=field_type,
            rename=rename,
            doc=tuple(pending.doc),
            has_default=has_default or (optional_hint and _is_option(field_type)),
            type_overrides=tuple(overrides),
            location=self._location(node),
        )

    # Enums

    def _extract_enum(self, item: RustItem, qualified: QualifiedName) -> None:
        node = item.node
        attrs = self._container_attributes(item)
        generics = self._generic_parameters(node)
        body = node.child_by_field_name("body")

        variants: List[Variant] = []
        lifted: List[TypeDefinition] = []
        pending = _Pending()
        if body is not None:
            for child in body.named_children:
                if self._collect(child, pending):
                    continue
                if child.type == "enum_variant":
                    variant = self._variant(child, pending, qualified, generics, lifted)
                    if variant is not None:
                        variants.append(variant)
                pending.clear()

        algebraic = (
            any(v.has_payload for v in variants)
            or "tag" in attrs
            or "content" in attrs
        )
        self.definitions.append(
            TypeDefinition(
                name=qualified,
                kind=DefinitionKind.ALGEBRAIC_ENUM if algebraic else DefinitionKind.UNIT_ENUM,
                variants=tuple(variants),
                generic_parameters=generics,
                doc=tuple(item.doc),
                rename=attrs.get("rename"),
                rename_all=attrs.get("rename_all"),
                tag=attrs.get("tag"),
                content=attrs.get("content"),
                location=self._location(node),
            )
        )
        self.definitions.extend(lifted)

    def _variant(
        self,
        node: Node,
        pending: _Pending,
        enum_name: QualifiedName,
        enum_generics: Tuple[str, ...],
        lifted: List[TypeDefinition],
    ) -> Optional[Variant]:
        name = _strip_raw(self.parsed.text(node.child_by_field_name("name")))
        rename = None
        inner_rename_all = None
        for meta in find_all(pending.attributes, "serde"):
            if meta.name in ("skip", "skip_serializing"):
                return None
            if meta.name == "rename":
                rename = self._string_value(meta, node)
            elif meta.name == "rename_all":
                inner_rename_all = self._rename_rule(meta, node)
        for meta in find_all(pending.attributes, MARKER_ATTRIBUTE):
            if meta.name == "skip":
                return None

        payload: Optional[SyntacticType] = None
        body = node.child_by_field_name("body")
        if body is not None and body.type == "ordered_field_declaration_list":
            types = [self._syntactic_type(t) for t in body.children_by_field_name("type")]
            types = [t for t in types if t is not None]
            if len(types) == 1:
                payload = types[0]
            elif types:
                payload = TupleType(tuple(types), self._location(body))
        elif body is not None and body.type == "field_declaration_list":
            payload = self._lift_struct_variant(
                node, body, name, enum_name, enum_generics, inner_rename_all, lifted
            )

        return Variant(
            name=name,
            payload=payload,
            rename=rename,
            doc=tuple(pending.doc),
            location=self._location(node),
        )

    def _lift_struct_variant(
        self,
        node: Node,
        body: Node,
        variant_name: str,
        enum_name: QualifiedName,
        enum_generics: Tuple[str, ...],
        rename_all: Optional[NamingCase],
        lifted: List[TypeDefinition],
    ) -> NamedType:
        """Turn ``Variant { a: T }`` into a separate struct and reference it."""
        fields = self._fields(body)
        used: Set[str] = set()
        for f in fields:
            used.update(_names_in(f.type))
        generics = tuple(g for g in enum_generics if g in used)
        inner = QualifiedName(enum_name.module, f"{enum_name.name}{variant_name}Inner")
        lifted.append(
            TypeDefinition(
                name=inner,
                kind=DefinitionKind.STRUCT,
                fields=fields,
                generic_parameters=generics,
                doc=(f"Generated type representing the fields of the `{variant_name}` variant of `{enum_name.name}`",),
                rename_all=rename_all,
                location=self._location(node),
            )
        )
        location = self._location(body)
        return NamedType(
            (inner.name,),
            tuple(NamedType((g,), (), location) for g in generics),
            location,
        )

    # Aliases

    def _extract_alias(self, item: RustItem, qualified: QualifiedName) -> TypeDefinition:
        node = item.node
        attrs = self._container_attributes(item)
        return TypeDefinition(
            name=qualified,
            kind=DefinitionKind.TYPE_ALIAS,
            target=self._syntactic_type(node.child_by_field_name("type")),
            generic_parameters=self._generic_parameters(node),
            doc=tuple(item.doc),
            rename=attrs.get("rename"),
            location=self._location(node),
        )

    # Constants

    def _extract_const(self, item: RustItem, qualified: QualifiedName) -> Optional[TypeDefinition]:
        """Integer constants only; other initialisers are reported."""
        node = item.node
        value_node = node.child_by_field_name("value")
        value = self._integer_value(value_node) if value_node is not None else None
        if value is None:
            written = self.parsed.text(value_node) if value_node is not None else ""
            self.diagnostics.append(
                Diagnostic.error(
                    DiagnosticKind.UNRESOLVED_TYPE,
                    f"unsupported constant value for {qualified.name}: {written!r}",
                    self._location(node),
                )
            )
            return None
        return TypeDefinition(
            name=qualified,
            kind=DefinitionKind.CONST,
            target=self._syntactic_type(node.child_by_field_name("type")),
            value=value,
            doc=tuple(item.doc),
            location=self._location(node),
        )

    def _integer_value(self, node: Node) -> Optional[int]:
        if node.type == "parenthesized_expression" and node.named_children:
            return self._integer_value(node.named_children[0])
        if node.type == "unary_expression" and self.parsed.text(node).lstrip().startswith("-"):
            operand = node.named_children[-1] if node.named_children else None
            value = self._integer_value(operand) if operand is not None else None
            return -value if value is not None else None
        if node.type == "integer_literal":
            return parse_integer_literal(self.parsed.text(node))
        return None

    # Generics and types

    def _generic_parameters(self, node: Node) -> Tuple[str, ...]:
        parameters = node.child_by_field_name("type_parameters")
        if parameters is None:
            return ()
        names = []
        for child in parameters.named_children:
            if child.type == "type_identifier":
                names.append(self.parsed.text(child))
                continue
            if child.type not in (
                "type_parameter",
                "constrained_type_parameter",
                "optional_type_parameter",
            ):
                continue
            name_node = (
                child.child_by_field_name("name")
                or child.child_by_field_name("left")
            )
            if name_node is None:
                name_node = next(
                    (c for c in child.named_children if c.type == "type_identifier"),
                    None,
                )
            if name_node is not None and name_node.type == "type_identifier":
                names.append(self.parsed.text(name_node))
        return tuple(names)

    def _syntactic_type(self, node: Optional[Node]) -> Optional[SyntacticType]:
        if node is None:
            return None
        location = self._location(node)
        kind = node.type

        if kind in ("primitive_type", "type_identifier"):
            return NamedType((self.parsed.text(node),), (), location)
        if kind == "scoped_type_identifier":
            return NamedType(_split_path(self.parsed.text(node)), (), location)
        if kind == "generic_type":
            base = self._syntactic_type(node.child_by_field_name("type"))
            arguments = []
            argument_list = node.child_by_field_name("type_arguments")
            if argument_list is not None:
                for child in argument_list.named_children:
                    if child.type in ("lifetime", "type_binding", "line_comment", "block_comment"):
                        continue
                    converted = self._syntactic_type(child)
                    if converted is not None:
                        arguments.append(converted)
            if not isinstance(base, NamedType):
                return base
            if base.path[-1] in catalog.TRANSPARENT_WRAPPERS and len(arguments) == 1:
                return arguments[0]
            if base.path[-1] in catalog.IGNORED_ARGUMENTS:
                return NamedType(base.path, (), location)
            return NamedType(base.path, tuple(arguments), location)
        if kind == "reference_type":
            return self._syntactic_type(node.child_by_field_name("type"))
        if kind == "array_type":
            element = self._syntactic_type(node.child_by_field_name("element"))
            return ArrayType(element, location) if element is not None else None
        if kind == "unit_type":
            return TupleType((), location)
        if kind == "tuple_type":
            elements = [
                self._syntactic_type(c)
                for c in node.named_children
                if c.type not in _COMMENT_KINDS
            ]
            return TupleType(tuple(e for e in elements if e is not None), location)

        self.diagnostics.append(
            Diagnostic.error(
                DiagnosticKind.UNRESOLVED_TYPE,
                f"unsupported type syntax {self.parsed.text(node)!r}",
                location,
            )
        )
        return None

    # Imports

    def _extract_use(self, node: Node, module: str) -> None:
        argument = node.child_by_field_name("argument")
        if argument is not None:
            self._use_tree(argument, (), module, self._location(node))

    def _bind(
        self,
        local_name: str,
        path: Tuple[str, ...],
        module: str,
        location: SourceLocation,
        is_glob: bool = False,
    ) -> None:
        self.imports.append(
            ImportBinding(
                local_name=local_name,
                path=path,
                is_glob=is_glob,
                module=module,
                location=location,
            )
        )

    def _use_tree(
        self,
        node: Node,
        prefix: Tuple[str, ...],
        module: str,
        location: SourceLocation,
    ) -> None:
        kind = node.type
        if kind in ("identifier", "scoped_identifier", "crate", "self", "super", "metavariable"):
            path = prefix + _split_path(self.parsed.text(node))
            if path and path[-1] == "self":
                path = path[:-1]
            if path:
                self._bind(path[-1], path, module, location)
        elif kind == "use_as_clause":
            path = prefix + _split_path(self.parsed.text(node.child_by_field_name("path")))
            alias = self.parsed.text(node.child_by_field_name("alias"))
            if alias != "_":
                self._bind(alias, path, module, location)
        elif kind == "scoped_use_list":
            path_node = node.child_by_field_name("path")
            path = prefix + (_split_path(self.parsed.text(path_node)) if path_node else ())
            use_list = node.child_by_field_name("list")
            if use_list is not None:
                self._use_tree(use_list, path, module, location)
        elif kind == "use_list":
            for child in node.named_children:
                self._use_tree(child, prefix, module, location)
        elif kind == "use_wildcard":
            text = self.parsed.text(node)
            path = prefix + _split_path(text.rsplit("*", 1)[0])
            self._bind("*", path, module, location, is_glob=True)


_INTEGER_SUFFIXES = tuple(
    f"{sign}{width}" for sign in "iu" for width in ("128", "size", "64", "32", "16", "8")
)
_RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}


def parse_integer_literal(text: str) -> Optional[int]:
    """Value of a Rust integer literal such as ``1_000``, ``0xFFu8`` or ``7i64``."""
    digits = text.replace("_", "").lower()
    base = _RADIX_PREFIXES.get(digits[:2], 10)
    # `i` and `u` are not hex digits, so suffixes are unambiguous
    for suffix in _INTEGER_SUFFIXES:
        if digits.endswith(suffix):
            digits = digits[: -len(suffix)]
            break
    try:
        return int(digits, base)
    except ValueError:
        return None


def _strip_raw(name: str) -> str:
    return name[2:] if name.startswith("r#") else name


def _split_path(text: str) -> Tuple[str, ...]:
    return tuple(
        _strip_raw(segment.strip())
        for segment in text.replace(" ", "").split("::")
        if segment.strip()
    )


def _is_option(syntactic: SyntacticType) -> bool:
    return isinstance(syntactic, NamedType) and syntactic.path[-1] == "Option"


def _names_in(syntactic: SyntacticType) -> Set[str]:
    """Single-segment names mentioned anywhere in a syntactic type."""
    if isinstance(syntactic, NamedType):
        names = {syntactic.path[0]} if len(syntactic.path) == 1 else set()
        for argument in syntactic.arguments:
            names |= _names_in(argument)
        return names
    if isinstance(syntactic, TupleType):
        names: Set[str] = set()
        for element in syntactic.elements:
            names |= _names_in(element)
        return names
    return _names_in(syntactic.element)


def extract(parsed: ParsedFile, is_marked: Optional[MarkerPredicate] = None) -> LocalForest:
    """
    Extract the marked definitions of a parsed file.

    Args:
        parsed: Parsed source file
        is_marked: Participation predicate (default: ``#[typeshare]`` present)

    Returns:
        LocalForest with unresolved definitions, imports and diagnostics
    """
    return FileExtractor(parsed, is_marked).extract()


def extract_all(
    files: Sequence[ParsedFile], is_marked: Optional[MarkerPredicate] = None
) -> List[LocalForest]:
    return [extract(parsed, is_marked) for parsed in files]
