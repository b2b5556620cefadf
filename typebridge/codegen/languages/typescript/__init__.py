"""
TypeScript code generator module.

Generates interfaces, string enums, type aliases and discriminated unions.
"""

from .generator import TypeScriptGenerator, create_typescript_generator, typescript_rendering
from .naming import create_typescript_sanitizer, property_name

__all__ = [
    "TypeScriptGenerator",
    "create_typescript_generator",
    "create_typescript_sanitizer",
    "property_name",
    "typescript_rendering",
]
