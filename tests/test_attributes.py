"""Tests for attribute meta parsing."""

import pytest

from typebridge.attributes import (
    AttributeSyntaxError,
    doc_text,
    find_all,
    parse_attribute,
)


class TestParseAttribute:
    def test_bare_word(self):
        meta = parse_attribute("#[typeshare]")
        assert meta.name == "typeshare"
        assert not meta.has_arguments

    def test_name_value(self):
        meta = parse_attribute('#[doc = "hello \\"world\\""]')
        assert meta.name == "doc"
        assert meta.value == 'hello "world"'
        assert meta.value_is_string
        assert doc_text(meta) == 'hello "world"'

    def test_nested_arguments(self):
        meta = parse_attribute('serde(rename_all = "camelCase", tag = "kind")')
        assert meta.name == "serde"
        assert meta.find("rename_all").value == "camelCase"
        assert meta.find("tag").value == "kind"
        assert meta.find("content") is None

    def test_deeply_nested(self):
        meta = parse_attribute('#[typeshare(swift(type = "Date"), skip)]')
        swift = meta.find("swift")
        assert swift.has_arguments
        assert swift.find("type").value == "Date"
        assert meta.has_flag("skip")

    def test_raw_string(self):
        meta = parse_attribute('#[serde(rename = r#"a"b"#)]')
        assert meta.find("rename").value == 'a"b'

    def test_path_value_is_not_string(self):
        meta = parse_attribute("#[serde(default = crate::defaults::zero)]")
        argument = meta.find("default")
        assert argument.value == "crate::defaults::zero"
        assert not argument.value_is_string

    def test_escape_sequences(self):
        meta = parse_attribute(r'#[doc = "tab\there \u{1F600} \x41"]')
        assert meta.value == "tab\there \U0001F600 A"

    def test_keyword_argument(self):
        meta = parse_attribute('#[typeshare(serialized_as = "String", type = "Id")]')
        assert [m.name for m in meta.arguments] == ["serialized_as", "type"]
        assert meta.find("type").value == "Id"

    def test_comments_inside_arguments(self):
        meta = parse_attribute('#[serde(/* wire name */ rename = "x")]')
        assert meta.find("rename").value == "x"

    def test_qualified_attribute_name(self):
        meta = parse_attribute("#[serde_with::skip_serializing_none]")
        assert meta.name == "serde_with::skip_serializing_none"

    @pytest.mark.parametrize(
        "text", ['#[serde(rename = )]', '#[serde(rename "x")]', "#[serde(skip]"]
    )
    def test_malformed(self, text):
        with pytest.raises(AttributeSyntaxError):
            parse_attribute(text)


class TestFindAll:
    def test_collects_arguments_of_every_matching_attribute(self):
        attributes = [
            parse_attribute('#[serde(rename = "a")]'),
            parse_attribute("#[derive(Serialize)]"),
            parse_attribute("#[serde(default)]"),
        ]
        assert [m.name for m in find_all(attributes, "serde")] == ["rename", "default"]
