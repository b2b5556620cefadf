"""
Go code generator module.

Generates Go structs with JSON tags, string-typed constant enums and
interface-based emulation of algebraic enums.
"""

from .generator import GO_RENDERING, GoGenerator, create_go_generator
from .naming import create_go_sanitizer, validate_go_package_name

__all__ = [
    "GO_RENDERING",
    "GoGenerator",
    "create_go_generator",
    "create_go_sanitizer",
    "validate_go_package_name",
]
