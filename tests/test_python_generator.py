"""Tests for the Python generator."""


class TestDataclassStyle:
    def test_point(self, generate, point_source):
        result = generate("python", point_source)
        assert result.success
        assert result.code == (
            "from __future__ import annotations\n"
            "\n"
            "from dataclasses import dataclass\n"
            "\n"
            "\n"
            "@dataclass(kw_only=True)\n"
            "class Point:\n"
            "    x: int\n"
            "    y: int\n"
        )

    def test_optional_and_aliased_fields(self, generate):
        result = generate(
            "py",
            """
            #[typeshare]
            #[serde(rename_all = "camelCase")]
            pub struct User {
                pub user_name: String,
                pub nick_name: Option<String>,
            }
            """,
        )
        code = result.code
        assert "from dataclasses import dataclass, field" in code
        assert "from typing import Optional" in code
        assert '    user_name: str = field(metadata={"alias": "userName"})' in code
        assert (
            '    nick_name: Optional[str] = field(default=None, metadata={"alias": "nickName"})'
            in code
        )

    def test_keyword_attribute(self, generate):
        result = generate(
            "python",
            "#[typeshare]\npub struct Route { pub from: String }",
        )
        assert '    from_: str = field(metadata={"alias": "from"})' in result.code

    def test_frozen(self, generate, point_source):
        result = generate("python", point_source, dataclass_frozen=True)
        assert "@dataclass(kw_only=True, frozen=True)" in result.code

    def test_unit_enum(self, generate):
        result = generate(
            "python",
            """
            /// Colors
            #[typeshare]
            pub enum Color { DarkRed, Green }
            """,
        )
        assert "from enum import Enum" in result.code
        assert (
            "class Color(str, Enum):\n"
            '    """Colors"""\n'
            "\n"
            '    DARK_RED = "DarkRed"\n'
            '    GREEN = "Green"\n'
        ) in result.code

    def test_union(self, generate, shape_source):
        code = generate("python", shape_source).code
        assert "class ShapeCircle:" in code
        assert '    type: Literal["Circle"] = "Circle"' in code
        assert "    content: float" in code
        assert "ShapeEmpty" in code
        assert "# A shape\nShape = Union[ShapeCircle, ShapeSquare, ShapeEmpty]" in code
        assert "from typing import Literal, Union" in code

    def test_generics(self, generate):
        code = generate(
            "python",
            "#[typeshare]\npub struct Page<T> { pub items: Vec<T> }",
        ).code
        assert "from typing import Generic, TypeVar" in code
        assert 'T = TypeVar("T")' in code
        assert "class Page(Generic[T]):" in code
        assert "    items: list[T]" in code

    def test_alias(self, generate):
        code = generate(
            "python",
            "#[typeshare]\npub type Lookup = HashMap<String, Vec<u32>>;",
        ).code
        assert 'Lookup: TypeAlias = "dict[str, list[int]]"' in code


class TestPydanticStyle:
    def test_model(self, generate):
        code = generate(
            "python",
            """
            #[typeshare]
            #[serde(rename_all = "camelCase")]
            pub struct User {
                pub user_name: String,
                pub age: Option<u8>,
            }
            """,
            style="pydantic",
        ).code
        assert "from pydantic import BaseModel, ConfigDict, Field" in code
        assert "class User(BaseModel):" in code
        assert "    model_config = ConfigDict(populate_by_name=True)" in code
        assert '    user_name: str = Field(alias="userName")' in code
        assert "    age: Optional[int] = None" in code

    def test_imports_grouped(self, generate, point_source):
        code = generate("python", point_source, style="pydantic").code
        assert code.startswith(
            "from __future__ import annotations\n\nfrom pydantic import BaseModel\n"
        )


class TestDatesAndConstants:
    def test_datetime_import(self, generate):
        code = generate(
            "python", "#[typeshare]\npub struct Event { pub at: DateTime<Utc> }"
        ).code
        assert "from datetime import datetime" in code
        assert "    at: datetime" in code

    def test_constant(self, generate):
        code = generate("python", "#[typeshare]\npub const MAX_SIZE: u32 = 64;").code
        assert "from typing import Final" in code
        assert code.endswith("MAX_SIZE: Final[int] = 64\n")
