"""
Swift-specific naming utilities.

Swift escapes keywords with backticks instead of renaming them, so the
sanitizer keeps the original spelling wherever the language allows it.
"""

from ...core.naming import NameSanitizer, NamingCase

SWIFT_RESERVED_WORDS = {
    "associatedtype",
    "as",
    "break",
    "case",
    "catch",
    "class",
    "continue",
    "default",
    "defer",
    "deinit",
    "do",
    "else",
    "enum",
    "extension",
    "fallthrough",
    "false",
    "fileprivate",
    "for",
    "func",
    "guard",
    "if",
    "import",
    "in",
    "init",
    "inout",
    "internal",
    "is",
    "let",
    "nil",
    "open",
    "operator",
    "private",
    "protocol",
    "public",
    "repeat",
    "rethrows",
    "return",
    "self",
    "Self",
    "static",
    "struct",
    "subscript",
    "super",
    "switch",
    "throw",
    "throws",
    "true",
    "try",
    "typealias",
    "var",
    "where",
    "while",
}

# Standard library types a declaration must not shadow
SWIFT_BUILTIN_TYPES = {
    "Any",
    "Array",
    "Bool",
    "Character",
    "Codable",
    "Decoder",
    "Dictionary",
    "Double",
    "Encoder",
    "Error",
    "Float",
    "Int",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Optional",
    "Set",
    "String",
    "Type",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
}


def _backticks(name: str) -> str:
    return f"`{name}`"


def create_swift_sanitizer() -> NameSanitizer:
    """Keywords become backtick-quoted identifiers."""
    return NameSanitizer(SWIFT_RESERVED_WORDS, set(), escape=_backticks)


def property_name(sanitizer: NameSanitizer, name: str) -> str:
    return sanitizer.sanitize_name(name, NamingCase.CAMEL_CASE)


def bare_name(name: str) -> str:
    """Identifier without keyword escaping, for use after a dot."""
    return name.strip("`")
