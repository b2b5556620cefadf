"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files and explicit
overrides, providing per-language defaults and validation. Every key is
checked eagerly: unknown keys and invalid values raise ConfigError before
any source file is read.
"""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .diagnostics import Diagnostic, DiagnosticError, DiagnosticKind, SourceLocation

# Canonical target ids and their aliases
LANGUAGES: Tuple[str, ...] = ("typescript", "go", "python", "swift", "kotlin", "reasonml")

LANGUAGE_ALIASES: Dict[str, str] = {
    "ts": "typescript",
    "golang": "go",
    "py": "python",
    "kt": "kotlin",
    "re": "reasonml",
}

COMMON_SECTION = "common"


class ConfigError(DiagnosticError):
    """Exception raised for configuration-related errors."""

    def __init__(self, message: str, diagnostics: Optional[List[Diagnostic]] = None):
        if diagnostics is None:
            diagnostics = [
                Diagnostic.error(DiagnosticKind.INVALID_CONFIGURATION, message)
            ]
        super().__init__(message, diagnostics)


def canonical_language(name: str) -> Optional[str]:
    """Map a target id or alias to its canonical id."""
    key = name.strip().lower()
    if key in LANGUAGES:
        return key
    return LANGUAGE_ALIASES.get(key)


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Output settings
    package_name: str = ""
    output_module_prefix: str = ""

    # Sum type lowering
    default_tag: str = "type"
    default_content: str = "content"
    native_sum_types: Optional[bool] = None  # None: the target's preference

    # Type handling
    type_mappings: Dict[str, str] = field(default_factory=dict)

    # Code style settings
    indent_size: int = 4
    add_comments: bool = True
    no_version_header: bool = False

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)

    @property
    def module_name(self) -> str:
        """Package name joined with the output module prefix."""
        parts = [p for p in (self.output_module_prefix, self.package_name) if p]
        return ".".join(parts)

    def option(self, key: str, default: Any = None) -> Any:
        return self.custom.get(key, default)


# Validators return an error message or None


def _is_bool(value: Any) -> Optional[str]:
    return None if isinstance(value, bool) else "expected a boolean"


def _is_str(value: Any) -> Optional[str]:
    return None if isinstance(value, str) else "expected a string"


def _is_identifier(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value:
        return "expected a non-empty string"
    return None


def _is_optional_bool(value: Any) -> Optional[str]:
    return None if value is None or isinstance(value, bool) else "expected a boolean or null"


def _is_positive_int(value: Any) -> Optional[str]:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return "expected a positive integer"
    return None


def _is_str_mapping(value: Any) -> Optional[str]:
    if not isinstance(value, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        return "expected an object of string to string"
    return None


def _is_str_list(value: Any) -> Optional[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        return "expected a list of strings"
    return None


def _one_of(*choices: str) -> Callable[[Any], Optional[str]]:
    def check(value: Any) -> Optional[str]:
        if value not in choices:
            return f"expected one of {', '.join(choices)}"
        return None

    return check


Validator = Callable[[Any], Optional[str]]

COMMON_OPTIONS: Dict[str, Validator] = {
    "package_name": _is_str,
    "output_module_prefix": _is_str,
    "default_tag": _is_identifier,
    "default_content": _is_identifier,
    "native_sum_types": _is_optional_bool,
    "type_mappings": _is_str_mapping,
    "indent_size": _is_positive_int,
    "add_comments": _is_bool,
    "no_version_header": _is_bool,
}

# Language options: key -> (default, validator)
LANGUAGE_OPTIONS: Dict[str, Dict[str, Tuple[Any, Validator]]] = {
    "typescript": {
        "int64_type": ("string", _one_of("string", "bigint")),
        "readonly_fields": (False, _is_bool),
    },
    "go": {
        "generics": (True, _is_bool),
        "use_pointers_for_optional": (True, _is_bool),
        "json_tags": (True, _is_bool),
    },
    "python": {
        "style": ("dataclass", _one_of("dataclass", "pydantic")),
        "dataclass_frozen": (False, _is_bool),
    },
    "swift": {
        "prefix": ("", _is_str),
        "protocols": ([], _is_str_list),
    },
    "kotlin": {
        "serializable": (True, _is_bool),
    },
    "reasonml": {},
}


class ConfigManager:
    """Manages configuration loading, merging and validation."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        for language in LANGUAGES:
            self._configs[language] = {
                "custom": {
                    key: _copy(default)
                    for key, (default, _) in LANGUAGE_OPTIONS[language].items()
                }
            }

        self._configs["go"]["package_name"] = "main"
        self._configs["reasonml"]["indent_size"] = 2

    def get_config(
        self,
        language: str,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language id or alias
            custom_config: Flat overrides of common and language keys
            config_file: Path to JSON configuration file

        Returns:
            Merged, validated configuration for the language

        Raises:
            ConfigError: Unknown language, unknown keys or invalid values
        """
        canonical = canonical_language(language)
        if canonical is None:
            raise ConfigError(f"Unknown target language: {language}")

        merged: Dict[str, Any] = {}
        custom = dict(self._configs[canonical]["custom"])
        for key, value in self._configs[canonical].items():
            if key != "custom":
                merged[key] = value

        layers: List[Tuple[str, Dict[str, Any]]] = []
        if config_file:
            file_config = self._load_config_file(config_file)
            layers.extend(
                (f"{config_file}", layer)
                for layer in self._file_layers(file_config, canonical)
            )
        if custom_config:
            layers.append(("options", custom_config))

        diagnostics: List[Diagnostic] = []
        for origin, layer in layers:
            for key, value in layer.items():
                problem = self._validate_key(canonical, key, value)
                if problem is not None:
                    diagnostics.append(
                        Diagnostic.error(
                            DiagnosticKind.INVALID_CONFIGURATION,
                            f"{canonical}: option {key!r} {problem}",
                            SourceLocation(origin),
                        )
                    )
                    continue
                if key in COMMON_OPTIONS:
                    merged[key] = _copy(value)
                else:
                    custom[key] = _copy(value)

        if diagnostics:
            raise ConfigError(
                "; ".join(d.message for d in diagnostics), diagnostics
            )

        merged["custom"] = custom
        return GeneratorConfig(**merged)

    def _validate_key(self, language: str, key: str, value: Any) -> Optional[str]:
        if key in COMMON_OPTIONS:
            return COMMON_OPTIONS[key](value)
        if key in LANGUAGE_OPTIONS[language]:
            return LANGUAGE_OPTIONS[language][key][1](value)
        return "is not recognized"

    def _file_layers(
        self, file_config: Dict[str, Any], language: str
    ) -> List[Dict[str, Any]]:
        """Split a config file into the layers that apply to one language."""
        sections = {
            key: value
            for key, value in file_config.items()
            if key == COMMON_SECTION or canonical_language(key) is not None
        }
        if not sections:
            # Flat object: every key applies to this language
            return [file_config]

        extra = sorted(set(file_config) - set(sections))
        if extra:
            raise ConfigError(
                f"Unknown configuration section(s): {', '.join(extra)}"
            )

        layers = []
        if COMMON_SECTION in sections:
            layers.append(self._section(sections[COMMON_SECTION], COMMON_SECTION))
        for key, value in sections.items():
            if key != COMMON_SECTION and canonical_language(key) == language:
                layers.append(self._section(value, key))
        return layers

    def _section(self, value: Any, name: str) -> Dict[str, Any]:
        if not isinstance(value, dict):
            raise ConfigError(f"Configuration section {name!r} must be an object")
        return value

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def save_config(
        self, config: GeneratorConfig, language: str, output_path: Union[str, Path]
    ):
        """Save configuration to a sectioned JSON file."""
        path = Path(output_path)
        section = {
            f.name: getattr(config, f.name) for f in fields(config) if f.name != "custom"
        }
        section.update(config.custom)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump({language: section}, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def list_languages(self) -> List[str]:
        """Get list of supported languages."""
        return list(self._configs.keys())

    def language_options(self, language: str) -> Dict[str, Any]:
        """Defaults of the language-specific options."""
        canonical = canonical_language(language)
        if canonical is None:
            raise ConfigError(f"Unknown target language: {language}")
        return dict(self._configs[canonical]["custom"])


def _copy(value: Any) -> Any:
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, list):
        return list(value)
    return value


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str,
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language id or alias
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)


# Example configuration file for reference
EXAMPLE_CONFIG = {
    "common": {"package_name": "models", "add_comments": True},
    "typescript": {"int64_type": "bigint", "readonly_fields": False},
    "go": {"generics": True, "use_pointers_for_optional": True},
    "python": {"style": "pydantic"},
    "kotlin": {"package_name": "com.example.models"},
}
