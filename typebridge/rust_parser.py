"""
Tree-sitter wrapper for Rust source files.

Parsing is delegated to tree-sitter with the tree-sitter-rust grammar; this
module only loads files, derives module paths and exposes node helpers.
"""

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

import tree_sitter_rust
from tree_sitter import Language, Node, Parser, Tree

from .codegen.core.diagnostics import SourceLocation
from .logging_config import get_logger

logger = get_logger(__name__)

RUST_LANGUAGE = Language(tree_sitter_rust.language())

# Parser objects are not shared between threads
_local = threading.local()


def get_parser() -> Parser:
    """Get or create the Rust parser for the current thread."""
    parser = getattr(_local, "parser", None)
    if parser is None:
        parser = Parser(RUST_LANGUAGE)
        _local.parser = parser
    return parser


def module_path_for(file_path: Union[str, Path], root: Union[str, Path, None] = None) -> str:
    """
    Derive the module path of a Rust file relative to its crate source root.

    ``src/models/user.rs`` relative to ``src`` is ``crate::models::user``;
    ``lib.rs``, ``main.rs`` and ``mod.rs`` name their directory.
    """
    path = Path(file_path)
    if root is not None:
        try:
            path = path.relative_to(Path(root))
        except ValueError:
            logger.debug("%s is outside root %s, using file name only", path, root)
            path = Path(path.name)
    else:
        path = Path(path.name)

    parts = list(path.with_suffix("").parts)
    if parts and parts[-1] in ("lib", "main", "mod"):
        parts = parts[:-1]
    return "::".join(["crate"] + parts)


@dataclass(frozen=True)
class SourceFile:
    """A Rust source file and the module it defines."""

    path: str
    module: str
    text: str

    @classmethod
    def from_path(
        cls,
        file_path: Union[str, Path],
        root: Union[str, Path, None] = None,
        module: Optional[str] = None,
    ) -> "SourceFile":
        path = Path(file_path)
        text = path.read_text(encoding="utf-8")
        return cls(str(path), module or module_path_for(path, root), text)


class ParsedFile:
    """A source file together with its tree-sitter syntax tree."""

    def __init__(self, source: SourceFile, tree: Tree):
        self.source = source
        self.tree = tree
        self._bytes = source.text.encode("utf-8")

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def path(self) -> str:
        return self.source.path

    @property
    def module(self) -> str:
        return self.source.module

    def text(self, node: Optional[Node]) -> str:
        """Get text content of a node."""
        if node is None:
            return ""
        return self._bytes[node.start_byte : node.end_byte].decode("utf-8")

    def location(self, node: Node) -> SourceLocation:
        """Convert a node position to a 1-based source location."""
        row, column = node.start_point
        return SourceLocation(self.source.path, row + 1, column + 1)

    def has_errors(self) -> bool:
        return self.root.has_error

    def error_nodes(self, node: Optional[Node] = None) -> List[Node]:
        """Collect ERROR and missing nodes."""
        node = node or self.root
        if node.type == "ERROR" or node.is_missing:
            return [node]
        errors = []
        for child in node.children:
            if child.has_error or child.is_missing:
                errors.extend(self.error_nodes(child))
        return errors


def parse_source(source: SourceFile) -> ParsedFile:
    """Parse a source file into a syntax tree."""
    tree = get_parser().parse(source.text.encode("utf-8"))
    parsed = ParsedFile(source, tree)
    if parsed.has_errors():
        logger.warning("Syntax errors in %s; extracting what parsed", source.path)
    return parsed


def parse_text(text: str, path: str = "lib.rs", module: str = "crate") -> ParsedFile:
    """Parse Rust text directly."""
    return parse_source(SourceFile(path, module, text))
