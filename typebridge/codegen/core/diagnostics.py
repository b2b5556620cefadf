"""
Diagnostics shared by every stage of a typebridge run.

Extraction, reconciliation, configuration and generation all report
problems as Diagnostic records instead of stopping at the first one.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional


class Severity(Enum):
    """How serious a diagnostic is."""

    ERROR = "error"
    WARNING = "warning"


class DiagnosticKind(Enum):
    """Closed set of diagnostic kinds."""

    MALFORMED_ATTRIBUTE = "MalformedAttribute"
    DUPLICATE_DEFINITION = "DuplicateDefinition"
    UNRESOLVED_TYPE = "UnresolvedType"
    GENERIC_ARITY_MISMATCH = "GenericArityMismatch"
    NOT_REPRESENTABLE = "NotRepresentable"
    INVALID_CONFIGURATION = "InvalidConfiguration"


@dataclass(frozen=True)
class SourceLocation:
    """A position in an input file (1-based line and column)."""

    file: str
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        if self.line is None:
            return self.file
        if self.column is None:
            return f"{self.file}:{self.line}"
        return f"{self.file}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Diagnostic:
    """A single problem report."""

    severity: Severity
    kind: DiagnosticKind
    message: str
    location: Optional[SourceLocation] = None

    @classmethod
    def error(
        cls,
        kind: DiagnosticKind,
        message: str,
        location: Optional[SourceLocation] = None,
    ) -> "Diagnostic":
        return cls(Severity.ERROR, kind, message, location)

    @classmethod
    def warning(
        cls,
        kind: DiagnosticKind,
        message: str,
        location: Optional[SourceLocation] = None,
    ) -> "Diagnostic":
        return cls(Severity.WARNING, kind, message, location)

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def __str__(self) -> str:
        prefix = f"{self.location}: " if self.location else ""
        return f"{prefix}{self.severity.value}[{self.kind.value}]: {self.message}"


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    """Return True if any diagnostic has error severity."""
    return any(d.is_error for d in diagnostics)


def errors_only(diagnostics: Iterable[Diagnostic]) -> List[Diagnostic]:
    return [d for d in diagnostics if d.is_error]


class TypebridgeError(Exception):
    """Base exception for all typebridge errors."""

    pass


class DiagnosticError(TypebridgeError):
    """An exception that carries one or more diagnostics."""

    def __init__(self, message: str, diagnostics: Optional[List[Diagnostic]] = None):
        super().__init__(message)
        self.diagnostics = list(diagnostics or [])


class NotRepresentableError(DiagnosticError):
    """Raised when a construct has no rendering in a target language."""

    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(
            message,
            [Diagnostic.error(DiagnosticKind.NOT_REPRESENTABLE, message, location)],
        )
        self.location = location

    def to_diagnostic(
        self, context: Optional[str] = None, location: Optional[SourceLocation] = None
    ) -> Diagnostic:
        """Build a diagnostic, optionally prefixing the failing definition."""
        message = f"{context}: {self}" if context else str(self)
        return Diagnostic.error(
            DiagnosticKind.NOT_REPRESENTABLE, message, location or self.location
        )
