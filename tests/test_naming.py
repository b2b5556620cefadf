"""Tests for case conversion and name sanitization."""

import pytest

from typebridge.codegen.core.naming import (
    NameSanitizer,
    NamingCase,
    convert_case,
    parse_naming_case,
    split_words,
)


class TestCaseConversion:
    @pytest.mark.parametrize(
        "name, case, expected",
        [
            ("user_name", NamingCase.CAMEL_CASE, "userName"),
            ("user_name", NamingCase.PASCAL_CASE, "UserName"),
            ("UserName", NamingCase.SNAKE_CASE, "user_name"),
            ("UserName", NamingCase.SCREAMING_SNAKE, "USER_NAME"),
            ("UserName", NamingCase.KEBAB_CASE, "user-name"),
            ("UserName", NamingCase.SCREAMING_KEBAB, "USER-NAME"),
            ("UserName", NamingCase.LOWER_CASE, "username"),
            ("user_name", NamingCase.UPPER_CASE, "USER_NAME"),
            ("HTTPServer", NamingCase.SNAKE_CASE, "http_server"),
            ("r#type", NamingCase.ORIGINAL, "r#type"),
        ],
    )
    def test_convert(self, name, case, expected):
        assert convert_case(name, case) == expected

    @pytest.mark.parametrize("case", list(NamingCase))
    def test_idempotent(self, case):
        once = convert_case("someFieldName2", case)
        assert convert_case(once, case) == once

    def test_split_words_digits(self):
        assert split_words("field2Name") == ["field", "2", "Name"]


class TestSerdeRules:
    def test_serde_spellings(self):
        assert parse_naming_case("camelCase") == NamingCase.CAMEL_CASE
        assert parse_naming_case("SCREAMING-KEBAB-CASE") == NamingCase.SCREAMING_KEBAB

    def test_unknown_rule(self):
        assert parse_naming_case("Title Case") is None


class TestNameSanitizer:
    def test_reserved_word_escaped(self):
        sanitizer = NameSanitizer({"type"})
        assert sanitizer.sanitize_name("type") == "type_"

    def test_builtins_only_when_requested(self):
        sanitizer = NameSanitizer(set(), {"String"})
        assert sanitizer.sanitize_name("String") == "String"
        assert sanitizer.sanitize_name("String", check_builtins=True) == "String_"

    def test_custom_escape(self):
        sanitizer = NameSanitizer({"class"}, escape=lambda name: f"`{name}`")
        assert sanitizer.sanitize_name("class") == "`class`"

    def test_raw_identifier_and_leading_digit(self):
        sanitizer = NameSanitizer()
        assert sanitizer.sanitize_name("r#match") == "match"
        assert sanitizer.sanitize_name("2d", NamingCase.ORIGINAL) == "_2d"

    def test_invalid_characters(self):
        sanitizer = NameSanitizer()
        assert sanitizer.sanitize_name("a.b") == "a_b"
        assert sanitizer.sanitize_name("$$") == "field"
