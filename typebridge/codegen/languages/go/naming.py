"""
Go-specific naming utilities and sanitization.

Handles Go reserved words, predeclared identifiers and exported names.
"""

from typing import List

from ...core.naming import NameSanitizer, NamingCase

# Go reserved words
GO_RESERVED_WORDS = {
    "break",
    "case",
    "chan",
    "const",
    "continue",
    "default",
    "defer",
    "else",
    "fallthrough",
    "for",
    "func",
    "go",
    "goto",
    "if",
    "import",
    "interface",
    "map",
    "package",
    "range",
    "return",
    "select",
    "struct",
    "switch",
    "type",
    "var",
}

# Predeclared types a generated type must not shadow
GO_BUILTIN_TYPES = {
    "any",
    "bool",
    "byte",
    "comparable",
    "error",
    "float32",
    "float64",
    "int",
    "int8",
    "int16",
    "int32",
    "int64",
    "rune",
    "string",
    "uint",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uintptr",
}


def create_go_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Go."""
    return NameSanitizer(GO_RESERVED_WORDS, GO_BUILTIN_TYPES)


def exported_name(sanitizer: NameSanitizer, name: str) -> str:
    """PascalCase a name so the JSON encoder sees it."""
    return sanitizer.sanitize_name(name, NamingCase.PASCAL_CASE)


def validate_go_package_name(name: str) -> List[str]:
    """
    Validate Go package name according to Go naming rules.

    Returns:
        List of validation problems (empty if valid)
    """
    errors = []

    if not name:
        errors.append("Package name cannot be empty")
        return errors

    if not name.isidentifier():
        errors.append(f"'{name}' is not a valid Go identifier")
        return errors

    if name != name.lower():
        errors.append("Package names should be lowercase")

    if "_" in name:
        errors.append("Package names should not contain underscores")

    if name in GO_RESERVED_WORDS:
        errors.append(f"'{name}' is a Go reserved word")

    return errors
