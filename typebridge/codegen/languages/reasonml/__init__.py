"""
ReasonML code generator module.

Generates records, variants and type aliases.
"""

from .generator import REASONML_RENDERING, ReasonMLGenerator, create_reasonml_generator
from .naming import create_reasonml_sanitizer

__all__ = [
    "REASONML_RENDERING",
    "ReasonMLGenerator",
    "create_reasonml_generator",
    "create_reasonml_sanitizer",
]
