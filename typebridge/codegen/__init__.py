"""
Typebridge Code Generation Module

Lowers a resolved type graph into declarations for each target language.
"""

from .core.config import ConfigManager, GeneratorConfig, load_config
from .core.generator import CodeGenerator, GenerationResult, generate_code
from .core.ir import GlobalTypeGraph
from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_registry,
    list_supported_languages,
)


def generate_for_language(graph: GlobalTypeGraph, language="typescript", config=None):
    """
    Generate code for one target from a resolved graph.

    Args:
        graph: Resolved global type graph
        language: Target language name or alias
        config: Generator configuration dict, path or GeneratorConfig

    Returns:
        GenerationResult with generated code
    """
    generator = get_generator(language, config)
    return generate_code(generator, graph)


__all__ = [
    "CodeGenerator",
    "ConfigManager",
    "GenerationResult",
    "GeneratorConfig",
    "GeneratorRegistry",
    "RegistryError",
    "generate_code",
    "generate_for_language",
    "get_generator",
    "get_registry",
    "list_supported_languages",
    "load_config",
]
