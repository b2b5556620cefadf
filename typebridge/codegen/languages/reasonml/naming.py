"""
ReasonML-specific naming utilities.

Type names must start lowercase and variant constructors uppercase; record
fields whose wire name is not a plain identifier are written quoted.
"""

import re

from ...core.naming import NameSanitizer, NamingCase

REASONML_RESERVED_WORDS = {
    "and",
    "as",
    "assert",
    "begin",
    "class",
    "constraint",
    "do",
    "done",
    "downto",
    "else",
    "end",
    "exception",
    "external",
    "false",
    "for",
    "fun",
    "function",
    "functor",
    "if",
    "in",
    "include",
    "inherit",
    "initializer",
    "lazy",
    "let",
    "match",
    "method",
    "module",
    "mutable",
    "new",
    "nonrec",
    "object",
    "of",
    "open",
    "or",
    "private",
    "rec",
    "sig",
    "struct",
    "switch",
    "then",
    "to",
    "true",
    "try",
    "type",
    "val",
    "virtual",
    "when",
    "while",
    "with",
}

# Predefined types a declaration must not shadow
REASONML_BUILTIN_TYPES = {
    "array",
    "bool",
    "char",
    "float",
    "int",
    "list",
    "option",
    "string",
    "unit",
}

_FIELD = re.compile(r"^[a-z_][A-Za-z0-9_']*$")
_CONSTRUCTOR = re.compile(r"^[A-Z][A-Za-z0-9_']*$")


def create_reasonml_sanitizer() -> NameSanitizer:
    return NameSanitizer(REASONML_RESERVED_WORDS, REASONML_BUILTIN_TYPES)


def type_identifier(sanitizer: NameSanitizer, name: str) -> str:
    return sanitizer.sanitize_name(name, NamingCase.CAMEL_CASE, check_builtins=True)


def constructor_name(sanitizer: NameSanitizer, name: str) -> str:
    return sanitizer.sanitize_name(name, NamingCase.PASCAL_CASE)


def unit_constructor_name(sanitizer: NameSanitizer, serialized: str, name: str) -> str:
    """Constructor of a unit variant, spelled as serialized when Reason allows it."""
    if _CONSTRUCTOR.match(serialized):
        return serialized
    return constructor_name(sanitizer, name)


def value_name(sanitizer: NameSanitizer, name: str) -> str:
    """`let` bindings must start with a lowercase letter."""
    return sanitizer.sanitize_name(name, NamingCase.SNAKE_CASE).lower()


def field_name(name: str) -> str:
    """Record label, quoted when it is a keyword or not an identifier."""
    if _FIELD.match(name) and name not in REASONML_RESERVED_WORDS:
        return name
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
