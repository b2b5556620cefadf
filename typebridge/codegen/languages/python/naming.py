"""
Python-specific naming utilities and sanitization.

Handles Python keywords, names that shadow builtins or typing helpers used
by the generated module, and attribute naming.
"""

import keyword

from ...core.naming import NameSanitizer, NamingCase

PYTHON_RESERVED_WORDS = set(keyword.kwlist) | {"match", "case", "_"}

# Names a generated class must not shadow
PYTHON_BUILTIN_TYPES = {
    "bool",
    "bytes",
    "dict",
    "float",
    "frozenset",
    "int",
    "list",
    "object",
    "set",
    "str",
    "tuple",
    "type",
    # imported by generated modules
    "Any",
    "BaseModel",
    "ConfigDict",
    "Enum",
    "Field",
    "Generic",
    "Literal",
    "NoReturn",
    "Optional",
    "TypeAlias",
    "TypeVar",
    "Union",
    "dataclass",
    "field",
}


def create_python_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Python."""
    return NameSanitizer(PYTHON_RESERVED_WORDS, PYTHON_BUILTIN_TYPES)


def attribute_name(sanitizer: NameSanitizer, name: str) -> str:
    """snake_case attribute name, escaped when it is a keyword."""
    return sanitizer.sanitize_name(name, NamingCase.SNAKE_CASE)


def member_name(sanitizer: NameSanitizer, name: str) -> str:
    """SCREAMING_SNAKE enum member name."""
    return sanitizer.sanitize_name(name, NamingCase.SCREAMING_SNAKE)
