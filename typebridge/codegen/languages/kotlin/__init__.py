"""
Kotlin code generator module.

Generates kotlinx.serialization data classes, enum classes and sealed
class hierarchies.
"""

from .generator import KOTLIN_RENDERING, KotlinGenerator, create_kotlin_generator
from .naming import create_kotlin_sanitizer

__all__ = [
    "KOTLIN_RENDERING",
    "KotlinGenerator",
    "create_kotlin_generator",
    "create_kotlin_sanitizer",
]
