"""
Cross-file reconciliation.

Merges the local forests of every extracted file into one GlobalTypeGraph:
registers qualified names, resolves syntactic type names to TypeReferences,
validates generic arity and reports everything it finds as diagnostics.
The graph is only produced when no error-severity diagnostic was raised.
"""

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .codegen.core import catalog
from .codegen.core.catalog import ContainerKind, PrimitiveKind
from .codegen.core.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    SourceLocation,
    has_errors,
)
from .codegen.core.ir import (
    AnyType,
    ArrayType,
    Container,
    Defined,
    DefinitionKind,
    External,
    GenericParam,
    GlobalTypeGraph,
    ImportBinding,
    LocalForest,
    NamedType,
    Primitive,
    QualifiedName,
    TupleType,
    TypeDefinition,
    TypeReference,
    iter_references,
)
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ReconciliationResult:
    """Outcome of reconciliation: a graph, or diagnostics explaining why not."""

    graph: Optional[GlobalTypeGraph]
    diagnostics: List[Diagnostic]

    @property
    def success(self) -> bool:
        return self.graph is not None


class _Unresolved(Exception):
    """Internal: a type could not be resolved; carries the diagnostic."""

    def __init__(self, diagnostic: Diagnostic):
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic


def normalize_path(path: Sequence[str], module: str) -> Tuple[str, ...]:
    """
    Make a path absolute against the module it appears in.

    ``self::`` and ``super::`` are relative to ``module``; ``crate::`` paths
    are already absolute. Other paths are returned unchanged.
    """
    segments = list(path)
    if not segments:
        return ()
    if segments[0] == "crate":
        return tuple(segments)
    base = module.split("::")
    if segments[0] not in ("self", "super"):
        return tuple(segments)
    while segments and segments[0] in ("self", "super"):
        if segments.pop(0) == "super" and len(base) > 1:
            base.pop()
    return tuple(base + segments)


class _Scope:
    """Name lookup context for one module: the file's own, or an inline ``mod``."""

    def __init__(self, module: str):
        self.module = module
        self.bindings: Dict[str, Tuple[str, ...]] = {}
        self.globs: List[Tuple[str, ...]] = []

    def add(self, binding: ImportBinding) -> None:
        path = normalize_path(binding.path, self.module)
        if binding.is_glob:
            self.globs.append(path)
        else:
            self.bindings[binding.local_name] = path


def _scopes_of(forest: LocalForest) -> Dict[str, _Scope]:
    """One scope per module declared in the file, keyed by module path."""
    scopes: Dict[str, _Scope] = {forest.module: _Scope(forest.module)}
    for binding in forest.imports:
        module = binding.module or forest.module
        if module not in scopes:
            scopes[module] = _Scope(module)
        scopes[module].add(binding)
    return scopes


class Reconciler:
    """Builds the global type graph from local forests."""

    def __init__(
        self, forests: Iterable[LocalForest], external_types: Iterable[str] = ()
    ):
        # Independent of submission order
        self.forests = sorted(forests, key=lambda f: (f.source, f.module))
        # Names mapped by configuration; accepted when nothing else resolves them
        self.external_types: Set[str] = set(external_types)
        self.diagnostics: List[Diagnostic] = []
        self.symbols: Dict[QualifiedName, TypeDefinition] = {}
        self._scopes: Dict[QualifiedName, _Scope] = {}

    def reconcile(self) -> ReconciliationResult:
        """Run every reconciliation step."""
        ordered = self._register()
        resolved = [self._resolve_definition(d) for d in ordered]
        resolved = [d for d in resolved if d is not None]

        arities = {d.name: len(d.generic_parameters) for d in resolved}
        for definition in resolved:
            self._check_generic_usage(definition)
        self._check_alias_cycles(resolved)

        # Arity is re-checked on the final graph; resolution should already
        # have rejected every mismatch
        for definition in resolved:
            for slot in definition.type_slots():
                self._assert_arity(definition, slot, arities)

        if has_errors(self.diagnostics):
            logger.info(
                "Reconciliation rejected the graph with %d error(s)",
                sum(1 for d in self.diagnostics if d.is_error),
            )
            return ReconciliationResult(None, list(self.diagnostics))

        logger.debug("Reconciled %d definitions", len(resolved))
        return ReconciliationResult(GlobalTypeGraph(resolved), list(self.diagnostics))

    # Step 1: symbol table

    def _register(self) -> List[TypeDefinition]:
        ordered = []
        for forest in self.forests:
            scopes = _scopes_of(forest)
            for definition in forest.definitions:
                existing = self.symbols.get(definition.name)
                if existing is not None:
                    self._error(
                        DiagnosticKind.DUPLICATE_DEFINITION,
                        f"{definition.name} is already defined at {existing.location}",
                        definition.location,
                    )
                    continue
                self.symbols[definition.name] = definition
                module = definition.name.module
                if module not in scopes:
                    scopes[module] = _Scope(module)
                self._scopes[definition.name] = scopes[module]
                ordered.append(definition)
        return ordered

    # Step 2: resolution

    def _resolve_definition(self, definition: TypeDefinition) -> Optional[TypeDefinition]:
        generics = definition.generic_parameters
        if len(set(generics)) != len(generics):
            self._error(
                DiagnosticKind.GENERIC_ARITY_MISMATCH,
                f"{definition.name} declares duplicate generic parameter names",
                definition.location,
            )

        self._check_member_names(definition)
        scope = self._scopes[definition.name]

        fields = []
        for f in definition.fields:
            try:
                resolved = self._resolve(f.type, definition, scope)
            except _Unresolved as e:
                self.diagnostics.append(e.diagnostic)
                continue
            is_option = isinstance(resolved, Container) and resolved.kind == ContainerKind.OPTION
            fields.append(replace(f, type=resolved, optional=f.optional or is_option))

        variants = []
        for v in definition.variants:
            if v.payload is None:
                variants.append(v)
                continue
            try:
                variants.append(replace(v, payload=self._resolve(v.payload, definition, scope)))
            except _Unresolved as e:
                self.diagnostics.append(e.diagnostic)

        target = None
        if definition.target is not None:
            try:
                target = self._resolve(definition.target, definition, scope)
            except _Unresolved as e:
                self.diagnostics.append(e.diagnostic)
        elif definition.kind == DefinitionKind.TYPE_ALIAS:
            return None

        return replace(
            definition, fields=tuple(fields), variants=tuple(variants), target=target
        )

    def _check_member_names(self, definition: TypeDefinition) -> None:
        seen: Set[str] = set()
        serialized: Set[str] = set()
        members = [(f.name, definition.serialized_field_name(f), f.location) for f in definition.fields]
        members += [(v.name, definition.serialized_variant_name(v), v.location) for v in definition.variants]
        for name, wire_name, location in members:
            if name in seen:
                self._error(
                    DiagnosticKind.DUPLICATE_DEFINITION,
                    f"{definition.name} declares {name!r} more than once",
                    location,
                )
            elif wire_name in serialized:
                self._error(
                    DiagnosticKind.DUPLICATE_DEFINITION,
                    f"{definition.name}: {name!r} serializes as {wire_name!r}, "
                    "which is already used",
                    location,
                )
            seen.add(name)
            serialized.add(wire_name)

    def _resolve(
        self, syntactic: AnyType, definition: TypeDefinition, scope: _Scope
    ) -> TypeReference:
        if isinstance(syntactic, TupleType):
            if not syntactic.elements:
                return Primitive(PrimitiveKind.UNIT)
            return Container(
                ContainerKind.TUPLE,
                tuple(self._resolve(e, definition, scope) for e in syntactic.elements),
            )
        if isinstance(syntactic, ArrayType):
            return Container(
                ContainerKind.SEQUENCE,
                (self._resolve(syntactic.element, definition, scope),),
            )
        if not isinstance(syntactic, NamedType):
            # Already resolved
            return syntactic

        try:
            return self._resolve_named(syntactic, definition, scope)
        except _Unresolved:
            external = self._external(syntactic)
            if external is None:
                raise
            return external

    def _external(self, syntactic: NamedType) -> Optional[External]:
        """A configured mapping for the written name, full path or last segment."""
        for key in (syntactic.name, syntactic.path[-1]):
            if key in self.external_types:
                logger.debug("Treating %s as an external type", key)
                return External(key)
        return None

    def _resolve_named(
        self, syntactic: NamedType, definition: TypeDefinition, scope: _Scope
    ) -> TypeReference:
        arguments = tuple(self._resolve(a, definition, scope) for a in syntactic.arguments)
        location = syntactic.location or definition.location
        path = syntactic.path

        if len(path) == 1:
            name = path[0]
            found = catalog.lookup(name)
            if found is not None:
                return self._catalog_reference(found, name, arguments, location)
            if name in definition.generic_parameters:
                if arguments:
                    raise _Unresolved(
                        Diagnostic.error(
                            DiagnosticKind.GENERIC_ARITY_MISMATCH,
                            f"generic parameter {name} cannot take type arguments",
                            location,
                        )
                    )
                return GenericParam(name)
            if name in scope.bindings:
                return self._resolve_path(scope.bindings[name], arguments, scope, location, name)
            local = QualifiedName(scope.module, name)
            if local in self.symbols:
                return self._defined(local, arguments, location)
            for glob in scope.globs:
                candidate = QualifiedName("::".join(glob), name)
                if candidate in self.symbols:
                    return self._defined(candidate, arguments, location)
            raise _Unresolved(
                Diagnostic.error(
                    DiagnosticKind.UNRESOLVED_TYPE,
                    f"cannot resolve type {name} in {definition.name}",
                    location,
                )
            )

        head = path[0]
        if head in scope.bindings:
            path = scope.bindings[head] + path[1:]
        return self._resolve_path(path, arguments, scope, location, "::".join(syntactic.path))

    def _resolve_path(
        self,
        path: Tuple[str, ...],
        arguments: Tuple[TypeReference, ...],
        scope: _Scope,
        location: Optional[SourceLocation],
        written: str,
    ) -> TypeReference:
        absolute = normalize_path(path, scope.module)
        candidates = []
        if absolute[0] == "crate":
            candidates.append(absolute)
        else:
            candidates.append(tuple(scope.module.split("::")) + absolute)
            candidates.append(("crate",) + absolute)
        for candidate in candidates:
            qualified = QualifiedName("::".join(candidate[:-1]), candidate[-1])
            if qualified in self.symbols:
                return self._defined(qualified, arguments, location)

        # Paths into std or other crates that end in a catalog name
        found = catalog.lookup(path[-1])
        if found is not None:
            return self._catalog_reference(found, path[-1], arguments, location)

        raise _Unresolved(
            Diagnostic.error(
                DiagnosticKind.UNRESOLVED_TYPE,
                f"cannot resolve type {written}",
                location,
            )
        )

    def _catalog_reference(
        self,
        found: catalog.CatalogKind,
        name: str,
        arguments: Tuple[TypeReference, ...],
        location: Optional[SourceLocation],
    ) -> TypeReference:
        if isinstance(found, PrimitiveKind):
            if arguments:
                raise _Unresolved(
                    Diagnostic.error(
                        DiagnosticKind.GENERIC_ARITY_MISMATCH,
                        f"primitive {name} cannot take type arguments",
                        location,
                    )
                )
            return Primitive(found)
        if found.arity is not None and len(arguments) != found.arity:
            raise _Unresolved(
                Diagnostic.error(
                    DiagnosticKind.GENERIC_ARITY_MISMATCH,
                    f"{name} expects {found.arity} type argument(s), got {len(arguments)}",
                    location,
                )
            )
        return Container(found, arguments)

    def _defined(
        self,
        name: QualifiedName,
        arguments: Tuple[TypeReference, ...],
        location: Optional[SourceLocation],
    ) -> Defined:
        expected = len(self.symbols[name].generic_parameters)
        if expected != len(arguments):
            raise _Unresolved(
                Diagnostic.error(
                    DiagnosticKind.GENERIC_ARITY_MISMATCH,
                    f"{name} expects {expected} type argument(s), got {len(arguments)}",
                    location,
                )
            )
        return Defined(name, arguments)

    # Step 3: validation

    def _check_generic_usage(self, definition: TypeDefinition) -> None:
        used: Set[str] = set()
        for slot in definition.type_slots():
            for ref in iter_references(slot):
                if isinstance(ref, GenericParam):
                    used.add(ref.name)
        for parameter in definition.generic_parameters:
            if parameter not in used:
                self.diagnostics.append(
                    Diagnostic.warning(
                        DiagnosticKind.GENERIC_ARITY_MISMATCH,
                        f"generic parameter {parameter} of {definition.name} is never used",
                        definition.location,
                    )
                )

    def _check_alias_cycles(self, definitions: List[TypeDefinition]) -> None:
        """Aliases that expand into themselves have no finite form."""
        aliases = {
            d.name: d for d in definitions if d.kind == DefinitionKind.TYPE_ALIAS
        }
        reported: Set[QualifiedName] = set()
        for start in aliases:
            path: List[QualifiedName] = []
            current: Optional[QualifiedName] = start
            while current is not None and current in aliases and current not in path:
                path.append(current)
                target = aliases[current].target
                current = target.name if isinstance(target, Defined) else None
            if current == start and start not in reported:
                reported.update(path)
                cycle = " -> ".join(str(n) for n in path + [start])
                self._error(
                    DiagnosticKind.UNRESOLVED_TYPE,
                    f"type alias cycle: {cycle}",
                    aliases[start].location,
                )

    def _assert_arity(
        self,
        definition: TypeDefinition,
        slot: TypeReference,
        arities: Dict[QualifiedName, int],
    ) -> None:
        for ref in iter_references(slot):
            if isinstance(ref, Defined) and arities.get(ref.name) != len(ref.arguments):
                self._error(
                    DiagnosticKind.GENERIC_ARITY_MISMATCH,
                    f"{definition.name} references {ref.name} with "
                    f"{len(ref.arguments)} type argument(s)",
                    definition.location,
                )

    def _error(
        self, kind: DiagnosticKind, message: str, location: Optional[SourceLocation]
    ) -> None:
        self.diagnostics.append(Diagnostic.error(kind, message, location))


def reconcile(
    forests: Iterable[LocalForest], external_types: Iterable[str] = ()
) -> ReconciliationResult:
    """
    Merge local forests into a global type graph.

    Args:
        forests: Local forests of every input file
        external_types: Type names covered by a configured type mapping

    Returns:
        ReconciliationResult holding the graph (None on error) and diagnostics
    """
    return Reconciler(forests, external_types).reconcile()
