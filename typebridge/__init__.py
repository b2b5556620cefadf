"""
typebridge: share Rust type definitions with other languages.

Reads ``#[typeshare]`` structs, enums and type aliases from Rust sources,
resolves them into one type graph and renders equivalent declarations for
TypeScript, Go, Python, Swift, Kotlin and ReasonML.
"""

__version__ = "0.1.0"

from .codegen.core.config import ConfigError, GeneratorConfig, load_config
from .codegen.core.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    Severity,
    SourceLocation,
    TypebridgeError,
)
from .codegen.registry import get_generator, list_supported_languages
from .pipeline import RunResult, TargetResult, run
from .rust_parser import SourceFile

__all__ = [
    "__version__",
    "ConfigError",
    "Diagnostic",
    "DiagnosticKind",
    "GeneratorConfig",
    "RunResult",
    "Severity",
    "SourceFile",
    "SourceLocation",
    "TargetResult",
    "TypebridgeError",
    "get_generator",
    "list_supported_languages",
    "load_config",
    "run",
]
