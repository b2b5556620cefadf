"""
Parsing of Rust outer attributes.

Turns the tree-sitter ``attribute`` node of an item such as
``#[serde(rename_all = "camelCase", tag = "kind")]`` into a small tree of
Meta entries. Only the meta-item subset used by serde/typeshare is understood.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from tree_sitter import Node

from .logging_config import get_logger
from .rust_parser import get_parser

logger = get_logger(__name__)


class AttributeSyntaxError(ValueError):
    """Raised for attribute text that is not a well-formed meta item."""

    pass


@dataclass(frozen=True)
class Meta:
    """
    One meta item: ``name``, ``name = value`` or ``name(args, ...)``.

    ``value_is_string`` distinguishes ``rename = "x"`` from ``rename = x``.
    """

    name: str
    value: Optional[str] = None
    value_is_string: bool = False
    arguments: Tuple["Meta", ...] = ()
    has_arguments: bool = False

    def find(self, name: str) -> Optional["Meta"]:
        for argument in self.arguments:
            if argument.name == name:
                return argument
        return None

    def has_flag(self, name: str) -> bool:
        return self.find(name) is not None


Token = Tuple[str, str]

_STRING_KINDS = ("string_literal", "raw_string_literal")
_LITERAL_KINDS = ("integer_literal", "float_literal", "boolean_literal", "char_literal")
_COMMENT_KINDS = ("line_comment", "block_comment")

_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "0": "\0", "\\": "\\", '"': '"', "'": "'"}


def _node_text(node: Node) -> str:
    return node.text.decode("utf-8")


def _escape_value(sequence: str) -> str:
    """Value of one ``escape_sequence`` node."""
    kind = sequence[1:2]
    if kind == "u":
        # \u{1F600}
        return chr(int(sequence[3:-1].replace("_", ""), 16))
    if kind == "x":
        return chr(int(sequence[2:4], 16))
    if kind in ("\n", "\r"):
        # line continuation
        return ""
    return _SIMPLE_ESCAPES.get(kind, sequence)


def string_value(node: Node) -> str:
    """Decoded contents of a ``string_literal`` or ``raw_string_literal`` node."""
    parts = []
    for child in node.named_children:
        if child.type == "string_content":
            parts.append(_node_text(child))
        elif child.type == "escape_sequence":
            parts.append(_escape_value(_node_text(child)))
    return "".join(parts)


def path_text(node: Node) -> str:
    """Text of a path node with whitespace removed (``serde :: rename``)."""
    return "".join(_node_text(node).split())


def _tree_tokens(node: Node) -> Iterator[Token]:
    """Flatten a ``token_tree`` into parser tokens, delimiters included."""
    for child in node.children:
        kind = child.type
        if kind == "token_tree":
            yield from _tree_tokens(child)
        elif kind in _COMMENT_KINDS:
            continue
        elif kind in _STRING_KINDS:
            yield ("string", string_value(child))
        elif kind in _LITERAL_KINDS:
            yield ("literal", _node_text(child))
        else:
            text = _node_text(child)
            # keywords such as `type` are anonymous tokens inside a tree
            yield ("path" if text.isidentifier() else "punct", text)


def _join_paths(tokens: Iterable[Token]) -> List[Token]:
    """Merge ``a`` ``::`` ``b`` into the single path token ``a::b``."""
    joined: List[Token] = []
    for token in tokens:
        if (
            token[0] == "path"
            and len(joined) >= 2
            and joined[-1] == ("punct", "::")
            and joined[-2][0] == "path"
        ):
            joined.pop()
            joined[-1] = ("path", f"{joined[-1][1]}::{token[1]}")
        else:
            joined.append(token)
    return joined


def _value_token(node: Node) -> Token:
    if node.type in _STRING_KINDS:
        return ("string", string_value(node))
    return ("literal", _node_text(node))


class _MetaParser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.position = 0

    def peek(self) -> Optional[Token]:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def take(self) -> Token:
        token = self.peek()
        if token is None:
            raise AttributeSyntaxError("unexpected end of attribute")
        self.position += 1
        return token

    def expect_punct(self, value: str) -> None:
        kind, text = self.take()
        if kind != "punct" or text != value:
            raise AttributeSyntaxError(f"expected {value!r}, found {text!r}")

    def parse_meta(self) -> Meta:
        kind, text = self.take()
        if kind == "string":
            # bare literal inside a list, e.g. #[doc("...")]
            return Meta(name="", value=text, value_is_string=True)
        if kind != "path":
            raise AttributeSyntaxError(f"expected a name, found {text!r}")

        token = self.peek()
        if token == ("punct", "="):
            self.take()
            value_kind, value = self.take()
            if value_kind not in ("string", "path", "literal"):
                raise AttributeSyntaxError(f"expected a value after '{text} ='")
            return Meta(name=text, value=value, value_is_string=value_kind == "string")
        if token == ("punct", "("):
            self.take()
            arguments = self.parse_list()
            self.expect_punct(")")
            return Meta(name=text, arguments=tuple(arguments), has_arguments=True)
        return Meta(name=text)

    def parse_list(self) -> List[Meta]:
        items = []
        while self.peek() not in (None, ("punct", ")")):
            items.append(self.parse_meta())
            if self.peek() == ("punct", ","):
                self.take()
            elif self.peek() not in (None, ("punct", ")")):
                raise AttributeSyntaxError(
                    f"expected ',' or ')', found {self.peek()[1]!r}"
                )
        return items


def attribute_node(node: Node) -> Optional[Node]:
    """The ``attribute`` child of an ``attribute_item``."""
    if node.type == "attribute":
        return node
    return next((c for c in node.named_children if c.type == "attribute"), None)


def attribute_name(node: Node) -> Optional[str]:
    """Path of an attribute item, e.g. ``serde`` or ``serde_with::skip``."""
    attribute = attribute_node(node)
    if attribute is None or not attribute.named_children:
        return None
    return path_text(attribute.named_children[0])


def meta_from_node(node: Node) -> Meta:
    """
    Build the Meta tree of an attribute.

    Args:
        node: An ``attribute_item`` or ``attribute`` syntax node

    Returns:
        The top-level Meta of the attribute

    Raises:
        AttributeSyntaxError: If the attribute is not a well-formed meta item
    """
    attribute = attribute_node(node)
    if attribute is None or node.has_error or not attribute.named_children:
        raise AttributeSyntaxError(f"cannot parse {_node_text(node)!r}")

    tokens: List[Token] = [("path", path_text(attribute.named_children[0]))]
    value = attribute.child_by_field_name("value")
    arguments = attribute.child_by_field_name("arguments")
    if value is not None:
        tokens += [("punct", "="), _value_token(value)]
    elif arguments is not None:
        tokens += _join_paths(_tree_tokens(arguments))

    parser = _MetaParser(tokens)
    meta = parser.parse_meta()
    if parser.peek() is not None:
        raise AttributeSyntaxError(f"unexpected {parser.peek()[1]!r} after attribute")
    return meta


def parse_attribute(text: str) -> Meta:
    """
    Parse the source of a single attribute.

    Args:
        text: Attribute source, with or without the surrounding ``#[...]``

    Returns:
        The top-level Meta of the attribute

    Raises:
        AttributeSyntaxError: If the attribute is not a well-formed meta item
    """
    body = text.strip()
    if not body.startswith("#"):
        body = f"#[{body}]"
    tree = get_parser().parse(f"{body}\nstruct Attributed;\n".encode("utf-8"))
    item = next(
        (c for c in tree.root_node.named_children if c.type == "attribute_item"), None
    )
    if item is None:
        raise AttributeSyntaxError(f"not an attribute: {text!r}")
    return meta_from_node(item)


def find_all(attributes: Iterable[Meta], name: str) -> Iterator[Meta]:
    """Yield the nested arguments of every top-level attribute with the name."""
    for attribute in attributes:
        if attribute.name == name:
            yield from attribute.arguments


def doc_text(meta: Meta) -> Optional[str]:
    """Return the text of a ``#[doc = "..."]`` attribute."""
    if meta.name == "doc" and meta.value_is_string:
        return meta.value
    return None
