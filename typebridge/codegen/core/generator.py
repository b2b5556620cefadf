"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement: lowering
every definition of a GlobalTypeGraph, in graph order, into declarations of
one target language.
"""

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .catalog import ContainerKind, PrimitiveKind, RenderingTable
from .config import ConfigError, GeneratorConfig, load_config
from .diagnostics import (
    Diagnostic,
    DiagnosticError,
    NotRepresentableError,
)
from .ir import (
    Container,
    Defined,
    DefinitionKind,
    External,
    Field,
    GenericParam,
    GlobalTypeGraph,
    Primitive,
    TypeDefinition,
    TypeReference,
    Variant,
)
from .naming import NameSanitizer, NamingCase
from .templates import TemplateEngine, TemplateError, create_template_engine


class GeneratorError(DiagnosticError):
    """Base exception for code generation errors."""

    pass


class SumTypeStrategy(Enum):
    """How algebraic enums are lowered."""

    NATIVE = "native"  # tagged unions or sealed hierarchies
    EMULATED = "emulated"  # discriminant field plus payload field


@dataclass(frozen=True)
class EmulatedCase:
    """One variant of an algebraic enum in discriminant + payload form."""

    variant: Variant
    tag_key: str
    tag_value: str
    content_key: str
    payload: Optional[TypeReference]

    @property
    def has_payload(self) -> bool:
        return self.payload is not None


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    aliases: Tuple[str, ...] = ()
    supported_sum_strategies: Tuple[SumTypeStrategy, ...] = (SumTypeStrategy.EMULATED,)
    reserved_words: frozenset = frozenset()
    builtin_types: frozenset = frozenset()
    line_comment = "//"
    uses_tabs = False
    block_separator = "\n\n"

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or load_config(self.language_name)
        self._validate_sum_strategy()
        self.table = self.build_rendering_table()
        self.sanitizer = self.create_sanitizer()
        self.graph: Optional[GlobalTypeGraph] = None
        self._warnings: List[str] = []
        self._template_engine = None
        self._setup_templates()
        self.reset()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        template_dir = self.get_template_directory()
        if template_dir:
            self._template_engine = create_template_engine(template_dir)
        else:
            # Fallback to in-memory templates
            self._template_engine = create_template_engine()

    def _validate_sum_strategy(self):
        requested = self.config.native_sum_types
        if requested is None:
            return
        strategy = SumTypeStrategy.NATIVE if requested else SumTypeStrategy.EMULATED
        if strategy not in self.supported_sum_strategies:
            raise ConfigError(
                f"{self.language_name}: native_sum_types={str(requested).lower()} "
                f"is not supported (available: "
                f"{', '.join(s.value for s in self.supported_sum_strategies)})"
            )

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'go', 'python')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.go', '.py')."""
        pass

    @abstractmethod
    def build_rendering_table(self) -> RenderingTable:
        """Return the catalog rendering table for this target."""
        pass

    def create_sanitizer(self) -> NameSanitizer:
        return NameSanitizer(set(self.reserved_words), set(self.builtin_types))

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Defaults to a ``templates`` directory beside the generator module.

        Returns:
            Path to template directory or None
        """
        directory = Path(inspect.getfile(type(self))).parent / "templates"
        return directory if directory.exists() else None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @property
    def sum_strategy(self) -> SumTypeStrategy:
        """Strategy in effect: explicit configuration, else the target's first choice."""
        requested = self.config.native_sum_types
        if requested is None:
            return self.supported_sum_strategies[0]
        return SumTypeStrategy.NATIVE if requested else SumTypeStrategy.EMULATED

    @property
    def generics_enabled(self) -> bool:
        return True

    @property
    def indent(self) -> str:
        return "\t" if self.uses_tabs else " " * self.config.indent_size

    @property
    def warnings(self) -> List[str]:
        return list(self._warnings)

    def add_warning(self, message: str) -> None:
        if message not in self._warnings:
            self._warnings.append(message)

    # Driving

    def generate(self, graph: GlobalTypeGraph) -> str:
        """
        Generate code for every definition of the graph.

        Args:
            graph: Resolved global type graph

        Returns:
            Generated code as a string

        Raises:
            GeneratorError: If any definition is not representable
        """
        self.graph = graph
        self._warnings = []
        self.reset()

        blocks = []
        diagnostics: List[Diagnostic] = []
        for definition in graph:
            try:
                blocks.append(self.generate_definition(definition))
            except NotRepresentableError as e:
                diagnostics.append(
                    e.to_diagnostic(str(definition.name), definition.location)
                )

        if diagnostics:
            raise GeneratorError(
                f"{len(diagnostics)} definition(s) not representable in "
                f"{self.language_name}",
                diagnostics,
            )

        parts = [self.get_header(), self.get_package_declaration()]
        parts.extend(self.get_import_statements(graph))
        preamble = [p for p in parts if p]
        body = self.block_separator.join(block.strip("\n") for block in blocks if block.strip())

        sections = []
        if preamble:
            sections.append(self.join_preamble(preamble))
        if body:
            sections.append(body)
        return self.block_separator.join(sections) + "\n"

    def reset(self) -> None:
        """Clear per-run state before a generation pass."""
        pass

    def join_preamble(self, parts: List[str]) -> str:
        return "\n\n".join(parts)

    def generate_definition(self, definition: TypeDefinition) -> str:
        """Generate code for a single definition."""
        if definition.is_generic and not self.generics_enabled:
            raise NotRepresentableError(
                f"generic definitions are not supported by {self.language_name} "
                "with the current configuration",
                definition.location,
            )

        if definition.kind == DefinitionKind.STRUCT:
            return self.generate_struct(definition)
        if definition.kind == DefinitionKind.UNIT_ENUM:
            return self.generate_unit_enum(definition)
        if definition.kind == DefinitionKind.TYPE_ALIAS:
            return self.generate_alias(definition)
        if definition.kind == DefinitionKind.CONST:
            return self.generate_const(definition)
        if self.sum_strategy == SumTypeStrategy.NATIVE:
            return self.generate_native_enum(definition)
        return self.generate_emulated_enum(definition)

    @abstractmethod
    def generate_struct(self, definition: TypeDefinition) -> str:
        pass

    @abstractmethod
    def generate_unit_enum(self, definition: TypeDefinition) -> str:
        pass

    @abstractmethod
    def generate_alias(self, definition: TypeDefinition) -> str:
        pass

    def generate_const(self, definition: TypeDefinition) -> str:
        raise NotRepresentableError(
            f"{self.language_name} has no constant declarations", definition.location
        )

    def generate_native_enum(self, definition: TypeDefinition) -> str:
        raise NotRepresentableError(
            f"{self.language_name} has no native sum types", definition.location
        )

    def generate_emulated_enum(self, definition: TypeDefinition) -> str:
        raise NotRepresentableError(
            f"{self.language_name} cannot emulate sum types", definition.location
        )

    # Preamble

    def get_header(self) -> Optional[str]:
        """Version header comment, unless disabled."""
        if self.config.no_version_header:
            return None
        from ... import __version__

        lines = [f"{self.line_comment} Generated by typebridge {__version__}"]
        if self.config.output_module_prefix:
            lines.append(f"{self.line_comment} Module: {self.config.module_name}")
        return "\n".join(lines)

    def get_import_statements(self, graph: GlobalTypeGraph) -> List[str]:
        """
        Get any required import statements for the generated code.

        Called after every definition was rendered, so generators can
        import only what was used.
        """
        return []

    def get_package_declaration(self) -> Optional[str]:
        """
        Get package/namespace declaration if needed.

        Returns:
            Package declaration string or None
        """
        return None

    # Types

    def format_type(self, ref: TypeReference) -> str:
        """Render a resolved type reference in the target syntax."""
        if isinstance(ref, Primitive):
            mapped = self.config.type_mappings.get(ref.kind.value)
            if mapped is not None:
                return mapped
            return self.format_primitive(ref.kind)
        if isinstance(ref, Container):
            arguments = [self.format_type(a) for a in ref.arguments]
            return self.format_container(ref.kind, arguments, ref)
        if isinstance(ref, Defined):
            definition = self.graph[ref.name] if self.graph is not None else None
            for key in (str(ref.name), ref.name.name):
                if key in self.config.type_mappings:
                    return self.config.type_mappings[key]
            name = self.type_name(definition) if definition else ref.name.name
            return name + self.format_generic_arguments(
                [self.format_type(a) for a in ref.arguments]
            )
        if isinstance(ref, GenericParam):
            return self.generic_name(ref.name)
        if isinstance(ref, External):
            mapped = self.config.type_mappings.get(ref.name)
            if mapped is None:
                raise NotRepresentableError(
                    f"{ref.name} is an external type with no type mapping for "
                    f"{self.language_name}"
                )
            return mapped
        raise GeneratorError(f"Unexpected type reference: {ref!r}")

    def format_primitive(self, kind: PrimitiveKind) -> str:
        rendering = self.table.primitive(kind)
        if rendering.fallback:
            caveat = f" ({rendering.caveat})" if rendering.caveat else ""
            self.add_warning(
                f"{kind.value} rendered as {rendering.name} in "
                f"{self.language_name}{caveat}"
            )
        return rendering.name

    def format_container(
        self, kind: ContainerKind, arguments: List[str], ref: Container
    ) -> str:
        return self.table.container(kind, arguments)

    def format_generic_arguments(self, arguments: List[str]) -> str:
        if not arguments:
            return ""
        return f"<{', '.join(arguments)}>"

    def format_generic_parameters(self, definition: TypeDefinition) -> str:
        return self.format_generic_arguments(
            [self.generic_name(p) for p in definition.generic_parameters]
        )

    def field_type(self, definition: TypeDefinition, field: Field) -> str:
        """Field type text, honouring per-target overrides."""
        override = field.type_override(self.language_name, *self.aliases)
        if override is not None:
            return override
        return self.format_type(field.value_type)

    # Names

    def type_name(self, definition: TypeDefinition) -> str:
        return self.sanitizer.sanitize_name(
            definition.output_name, NamingCase.ORIGINAL, check_builtins=True
        )

    def generic_name(self, name: str) -> str:
        return name

    def emulated_cases(self, definition: TypeDefinition) -> List[EmulatedCase]:
        """Discriminant/payload shape of every variant, in declaration order."""
        tag_key = definition.tag_key(self.config.default_tag)
        content_key = definition.content_key(self.config.default_content)
        return [
            EmulatedCase(
                variant=variant,
                tag_key=tag_key,
                tag_value=definition.serialized_variant_name(variant),
                content_key=content_key,
                payload=variant.payload,
            )
            for variant in definition.variants
        ]

    # Docs

    def format_doc(self, doc: Tuple[str, ...], indent: str = "") -> str:
        """Render doc lines as comments; empty when comments are disabled."""
        if not doc or not self.config.add_comments:
            return ""
        return "\n".join(
            f"{indent}{self.line_comment} {line}".rstrip() for line in doc
        ) + "\n"

    # Output

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        # Basic cleanup - remove excessive blank lines
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines)

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Args:
            template_name: Template file name
            context: Template variables

        Returns:
            Rendered content
        """
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return self.template_engine.template_exists(template_name)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        code: str,
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
        diagnostics: List[Diagnostic] = None,
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
            diagnostics: Diagnostics raised while generating
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.diagnostics = diagnostics or []
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(
        cls,
        message: str,
        exception: Exception = None,
        diagnostics: List[Diagnostic] = None,
        warnings: List[str] = None,
    ) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="", warnings=warnings, diagnostics=diagnostics)
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, graph: GlobalTypeGraph) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Args:
        generator: Code generator instance
        graph: Resolved global type graph

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        code = generator.generate(graph)
        formatted_code = generator.format_code(code)
    except GeneratorError as e:
        return GenerationResult.error(
            str(e), exception=e, diagnostics=e.diagnostics, warnings=generator.warnings
        )
    except TemplateError as e:
        return GenerationResult.error(
            f"Code generation failed: {e}", exception=e, warnings=generator.warnings
        )

    kinds: Dict[str, int] = {}
    for definition in graph:
        kinds[definition.kind.value] = kinds.get(definition.kind.value, 0) + 1

    metadata = {
        "language": generator.language_name,
        "file_extension": generator.file_extension,
        "definition_count": len(graph),
        "definition_kinds": kinds,
        "sum_strategy": generator.sum_strategy.value,
    }
    return GenerationResult(formatted_code, generator.warnings, metadata)

