"""Tests for the primitive and container catalog."""

import pytest

from typebridge.codegen.core.catalog import (
    ContainerKind,
    PrimitiveKind,
    RenderingTable,
    TypeRendering,
    lookup,
)
from typebridge.codegen.core.diagnostics import NotRepresentableError


class TestLookup:
    @pytest.mark.parametrize(
        "name, kind",
        [
            ("u8", PrimitiveKind.U8),
            ("usize", PrimitiveKind.U64),
            ("isize", PrimitiveKind.I64),
            ("str", PrimitiveKind.STRING),
            ("I54", PrimitiveKind.I54),
            ("BTreeMap", ContainerKind.MAP),
            ("VecDeque", ContainerKind.SEQUENCE),
            ("IndexSet", ContainerKind.SET),
        ],
    )
    def test_known_names(self, name, kind):
        assert lookup(name) == kind

    def test_unknown_name(self):
        assert lookup("User") is None

    def test_precision(self):
        assert PrimitiveKind.U64.exceeds_double_precision
        assert not PrimitiveKind.U53.exceeds_double_precision
        assert PrimitiveKind.I54.is_signed
        assert PrimitiveKind.I16.bit_width == 16
        assert ContainerKind.MAP.arity == 2
        assert ContainerKind.TUPLE.arity is None


class TestRenderingTable:
    @pytest.fixture
    def table(self):
        return RenderingTable(
            "demo",
            primitives={
                PrimitiveKind.BOOL: "bool",
                PrimitiveKind.U64: TypeRendering("string", fallback=True),
            },
            containers={
                ContainerKind.MAP: "Map<{0}, {1}>",
                ContainerKind.TUPLE: "({items})",
                ContainerKind.SEQUENCE: lambda args: f"{args[0]}[]",
            },
        )

    def test_primitive(self, table):
        assert table.primitive(PrimitiveKind.BOOL).name == "bool"
        assert table.primitive(PrimitiveKind.U64).fallback

    def test_missing_primitive(self, table):
        with pytest.raises(NotRepresentableError):
            table.primitive(PrimitiveKind.CHAR)

    def test_container_rules(self, table):
        assert table.container(ContainerKind.MAP, ["K", "V"]) == "Map<K, V>"
        assert table.container(ContainerKind.TUPLE, ["a", "b", "c"]) == "(a, b, c)"
        assert table.container(ContainerKind.SEQUENCE, ["x"]) == "x[]"

    def test_missing_container(self, table):
        assert not table.supports(ContainerKind.SET)
        with pytest.raises(NotRepresentableError):
            table.container(ContainerKind.SET, ["x"])

    def test_with_overrides(self, table):
        changed = table.with_overrides({PrimitiveKind.U64: "bigint"})
        assert changed.primitive(PrimitiveKind.U64).name == "bigint"
        assert table.primitive(PrimitiveKind.U64).name == "string"
