"""
Python code generator module.

Generates Python dataclasses or Pydantic models, string enums and
Literal-discriminated unions.
"""

from .generator import PYTHON_RENDERING, PythonGenerator, PythonStyle, create_python_generator
from .naming import create_python_sanitizer

__all__ = [
    "PYTHON_RENDERING",
    "PythonGenerator",
    "PythonStyle",
    "create_python_generator",
    "create_python_sanitizer",
]
