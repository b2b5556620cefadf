"""
Language-specific code generators.

One generator per supported target language, keyed by canonical target id.
"""

from typing import Dict, Type

from ..core.generator import CodeGenerator
from .go import GoGenerator
from .kotlin import KotlinGenerator
from .python import PythonGenerator
from .reasonml import ReasonMLGenerator
from .swift import SwiftGenerator
from .typescript import TypeScriptGenerator

GENERATORS: Dict[str, Type[CodeGenerator]] = {
    "typescript": TypeScriptGenerator,
    "go": GoGenerator,
    "python": PythonGenerator,
    "swift": SwiftGenerator,
    "kotlin": KotlinGenerator,
    "reasonml": ReasonMLGenerator,
}

__all__ = [
    "GENERATORS",
    "GoGenerator",
    "KotlinGenerator",
    "PythonGenerator",
    "ReasonMLGenerator",
    "SwiftGenerator",
    "TypeScriptGenerator",
]
