"""
Swift code generator module.

Generates Codable structs, string-backed enums and enums with associated
values.
"""

from .generator import SWIFT_RENDERING, SwiftGenerator, create_swift_generator
from .naming import create_swift_sanitizer

__all__ = [
    "SWIFT_RENDERING",
    "SwiftGenerator",
    "create_swift_generator",
    "create_swift_sanitizer",
]
