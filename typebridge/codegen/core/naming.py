"""
Naming utilities for safe code generation.

Handles case conversions between identifier styles, serde rename rules,
and keyword conflicts in the different target languages.
"""

import re
from typing import Callable, Dict, List, Optional, Set
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""

    ORIGINAL = "original"  # as declared
    CAMEL_CASE = "camel"  # userName
    PASCAL_CASE = "pascal"  # UserName
    SNAKE_CASE = "snake"  # user_name
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME
    KEBAB_CASE = "kebab"  # user-name
    SCREAMING_KEBAB = "screaming_kebab"  # USER-NAME
    LOWER_CASE = "lower"  # username
    UPPER_CASE = "upper"  # USERNAME


# serde `rename_all` spellings
SERDE_RENAME_RULES: Dict[str, NamingCase] = {
    "lowercase": NamingCase.LOWER_CASE,
    "UPPERCASE": NamingCase.UPPER_CASE,
    "PascalCase": NamingCase.PASCAL_CASE,
    "camelCase": NamingCase.CAMEL_CASE,
    "snake_case": NamingCase.SNAKE_CASE,
    "SCREAMING_SNAKE_CASE": NamingCase.SCREAMING_SNAKE,
    "kebab-case": NamingCase.KEBAB_CASE,
    "SCREAMING-KEBAB-CASE": NamingCase.SCREAMING_KEBAB,
}

_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")
_WORD = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def parse_naming_case(value: str) -> Optional[NamingCase]:
    """
    Look up a casing style by serde spelling or by enum value.

    Returns:
        The matching NamingCase or None if the value is unknown
    """
    if value in SERDE_RENAME_RULES:
        return SERDE_RENAME_RULES[value]
    try:
        return NamingCase(value)
    except ValueError:
        return None


def split_words(name: str) -> List[str]:
    """Split an identifier on separators, case and digit/letter boundaries."""
    words = []
    for chunk in _SEPARATORS.split(name):
        words.extend(_WORD.findall(chunk))
    return words


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def convert_case(name: str, target_case: NamingCase) -> str:
    """
    Convert an identifier to the requested case style.

    Conversion is deterministic and idempotent: converting an already
    converted identifier to the same style returns it unchanged.
    """
    if target_case == NamingCase.ORIGINAL:
        return name
    if target_case == NamingCase.LOWER_CASE:
        return name.lower()
    if target_case == NamingCase.UPPER_CASE:
        return name.upper()

    words = split_words(name)
    if not words:
        return name

    if target_case == NamingCase.SNAKE_CASE:
        return "_".join(w.lower() for w in words)
    elif target_case == NamingCase.SCREAMING_SNAKE:
        return "_".join(w.upper() for w in words)
    elif target_case == NamingCase.KEBAB_CASE:
        return "-".join(w.lower() for w in words)
    elif target_case == NamingCase.SCREAMING_KEBAB:
        return "-".join(w.upper() for w in words)
    elif target_case == NamingCase.CAMEL_CASE:
        return words[0].lower() + "".join(_capitalize(w) for w in words[1:])
    elif target_case == NamingCase.PASCAL_CASE:
        return "".join(_capitalize(w) for w in words)
    return name


def to_snake_case(name: str) -> str:
    return convert_case(name, NamingCase.SNAKE_CASE)


def to_camel_case(name: str) -> str:
    return convert_case(name, NamingCase.CAMEL_CASE)


def to_pascal_case(name: str) -> str:
    return convert_case(name, NamingCase.PASCAL_CASE)


def to_screaming_snake_case(name: str) -> str:
    return convert_case(name, NamingCase.SCREAMING_SNAKE)


class NameSanitizer:
    """Handles name sanitization and case conversion for one target language."""

    def __init__(
        self,
        reserved_words: Set[str] = None,
        builtin_types: Set[str] = None,
        escape: Callable[[str], str] = None,
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin type names that might conflict
            escape: How to rewrite a conflicting name (default: append "_")
        """
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()
        self.escape = escape or (lambda name: f"{name}_")
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(
        self,
        name: str,
        target_case: NamingCase = NamingCase.ORIGINAL,
        check_builtins: bool = False,
    ) -> str:
        """
        Sanitize a name for safe use in target language.

        Args:
            name: Original name to sanitize
            target_case: Desired case style
            check_builtins: Also escape names that shadow builtin types

        Returns:
            Sanitized name safe for use
        """
        cache_key = f"{name}_{target_case.value}_{check_builtins}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        cleaned = self._clean_basic(name)
        converted = convert_case(cleaned, target_case).replace("-", "_")
        if converted and converted[0].isdigit():
            converted = f"_{converted}"
        final_name = self._resolve_conflicts(converted, check_builtins)

        self._name_cache[cache_key] = final_name
        return final_name

    def _clean_basic(self, name: str) -> str:
        """Basic name cleanup - drop raw identifier prefix and invalid characters."""
        if name.startswith("r#"):
            name = name[2:]
        cleaned = re.sub(r"[^a-zA-Z0-9_-]", "_", name)
        if not cleaned.strip("_-"):
            return "field"
        return cleaned

    def _resolve_conflicts(self, name: str, check_builtins: bool) -> str:
        """Escape names that collide with reserved words."""
        if name in self.reserved_words:
            return self.escape(name)
        if check_builtins and name in self.builtin_types:
            return self.escape(name)
        return name

    def is_reserved(self, name: str) -> bool:
        return name in self.reserved_words
