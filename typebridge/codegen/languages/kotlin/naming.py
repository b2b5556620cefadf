"""
Kotlin-specific naming utilities.

Hard keywords are escaped with backticks; type names that shadow the
standard library get a trailing underscore instead.
"""

from ...core.naming import NameSanitizer, NamingCase

# Hard keywords; soft and modifier keywords are valid identifiers
KOTLIN_RESERVED_WORDS = {
    "as",
    "break",
    "class",
    "continue",
    "do",
    "else",
    "false",
    "for",
    "fun",
    "if",
    "in",
    "interface",
    "is",
    "null",
    "object",
    "package",
    "return",
    "super",
    "this",
    "throw",
    "true",
    "try",
    "typealias",
    "typeof",
    "val",
    "var",
    "when",
    "while",
}

KOTLIN_BUILTIN_TYPES = {
    "Any",
    "Boolean",
    "Byte",
    "Char",
    "Double",
    "Float",
    "Int",
    "List",
    "Long",
    "Map",
    "Nothing",
    "Pair",
    "Set",
    "Short",
    "String",
    "Triple",
    "UByte",
    "UInt",
    "ULong",
    "UShort",
    "Unit",
}


def create_kotlin_sanitizer() -> NameSanitizer:
    return NameSanitizer(KOTLIN_RESERVED_WORDS, set(), escape=lambda name: f"`{name}`")


def property_name(sanitizer: NameSanitizer, name: str) -> str:
    return sanitizer.sanitize_name(name, NamingCase.CAMEL_CASE)


def class_name(sanitizer: NameSanitizer, name: str) -> str:
    """Type identifier; standard library names get a trailing underscore."""
    if name in KOTLIN_BUILTIN_TYPES:
        name += "_"
    return sanitizer.sanitize_name(name)
