"""Shared fixtures for the typebridge test suite."""

import pytest

from typebridge.codegen.core.generator import generate_code
from typebridge.codegen.registry import get_generator
from typebridge.extractor import extract
from typebridge.reconciler import reconcile
from typebridge.rust_parser import SourceFile, parse_source, parse_text


def _source(text, path="src/lib.rs", module="crate"):
    return SourceFile(path, module, text)


@pytest.fixture
def forest_of():
    """Extract one Rust snippet into a LocalForest."""

    def build(text, path="src/lib.rs", module="crate"):
        return extract(parse_text(text, path=path, module=module))

    return build


@pytest.fixture
def reconcile_sources():
    """Reconcile several ``(path, module, text)`` sources."""

    def build(*sources):
        forests = [extract(parse_source(_source(text, path, module))) for path, module, text in sources]
        return reconcile(forests)

    return build


@pytest.fixture
def graph_of():
    """Resolve a single-file crate; fails the test on any error."""

    def build(text):
        result = reconcile([extract(parse_text(text))])
        assert result.success, [str(d) for d in result.diagnostics]
        return result.graph

    return build


@pytest.fixture
def generate(graph_of):
    """Generate code for a snippet; returns the GenerationResult."""

    def build(language, text, **options):
        options.setdefault("no_version_header", True)
        generator = get_generator(language, options)
        return generate_code(generator, graph_of(text))

    return build


@pytest.fixture
def point_source():
    return """
#[typeshare]
pub struct Point {
    pub x: i32,
    pub y: i32,
}
"""


@pytest.fixture
def shape_source():
    return """
/// A shape
#[typeshare]
#[serde(tag = "type", content = "content")]
pub enum Shape {
    Circle(f64),
    Square(Point),
    Empty,
}

#[typeshare]
pub struct Point {
    pub x: i32,
    pub y: i32,
}
"""
