"""
Core code generation components.

Provides the type model, diagnostics, configuration and the base generator
shared by all language generators.
"""

from .config import ConfigError, ConfigManager, GeneratorConfig, load_config
from .diagnostics import (
    Diagnostic,
    DiagnosticError,
    DiagnosticKind,
    NotRepresentableError,
    Severity,
    SourceLocation,
    TypebridgeError,
)
from .generator import (
    CodeGenerator,
    GenerationResult,
    GeneratorError,
    SumTypeStrategy,
    generate_code,
)
from .ir import (
    DefinitionKind,
    External,
    Field,
    GlobalTypeGraph,
    LocalForest,
    QualifiedName,
    TypeDefinition,
    Variant,
)
from .naming import NameSanitizer, NamingCase, convert_case
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "SumTypeStrategy",
    "generate_code",
    # Type model
    "DefinitionKind",
    "External",
    "Field",
    "GlobalTypeGraph",
    "LocalForest",
    "QualifiedName",
    "TypeDefinition",
    "Variant",
    # Diagnostics
    "Diagnostic",
    "DiagnosticError",
    "DiagnosticKind",
    "NotRepresentableError",
    "Severity",
    "SourceLocation",
    "TypebridgeError",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    "convert_case",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
