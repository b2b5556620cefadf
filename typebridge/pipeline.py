"""
End-to-end generation run.

Validates configuration for every requested target, extracts all sources
in parallel, reconciles them into one graph and runs every generator
against it in parallel. The result maps each target to its own outcome.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .codegen.core.config import (
    COMMON_SECTION,
    ConfigError,
    canonical_language,
    load_config,
)
from .codegen.core.diagnostics import Diagnostic, has_errors
from .codegen.core.generator import CodeGenerator, GenerationResult, generate_code
from .codegen.core.ir import GlobalTypeGraph, LocalForest
from .codegen.registry import RegistryError, get_registry
from .extractor import MarkerPredicate, extract
from .logging_config import get_logger
from .reconciler import reconcile
from .rust_parser import SourceFile, parse_source
from .utils import load_source_file

logger = get_logger(__name__)

SourceInput = Union[SourceFile, str, Path]


@dataclass
class TargetResult:
    """Outcome of one target language."""

    language: str
    success: bool
    code: str = ""
    file_extension: str = ""
    warnings: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None

    @classmethod
    def from_generation(
        cls, generator: CodeGenerator, result: GenerationResult
    ) -> "TargetResult":
        return cls(
            language=generator.language_name,
            success=result.success,
            code=result.code,
            file_extension=generator.file_extension,
            warnings=list(result.warnings),
            diagnostics=list(result.diagnostics),
            metadata=dict(result.metadata),
            error_message=result.error_message,
        )


@dataclass
class RunResult:
    """Diagnostics of the shared phases plus one TargetResult per target."""

    targets: Dict[str, TargetResult]
    diagnostics: List[Diagnostic] = field(default_factory=list)
    graph: Optional[GlobalTypeGraph] = None

    @property
    def success(self) -> bool:
        return self.graph is not None and all(t.success for t in self.targets.values())

    @property
    def failed_targets(self) -> List[str]:
        return [name for name, target in self.targets.items() if not target.success]


def _options_for(options: Mapping[str, Any], language: str) -> Dict[str, Any]:
    """Common section merged with the language section."""
    merged = dict(options.get(COMMON_SECTION, {}))
    for key, value in options.items():
        if key != COMMON_SECTION and canonical_language(key) == language:
            merged.update(value)
    return merged


def prepare_generators(
    targets: Sequence[str],
    options: Optional[Mapping[str, Any]] = None,
    config_file: Union[str, Path, None] = None,
) -> Dict[str, CodeGenerator]:
    """
    Create one configured generator per distinct target.

    Args:
        targets: Target ids or aliases
        options: ``{"common": {...}, "<target>": {...}}`` overrides
        config_file: JSON configuration file

    Returns:
        Generators keyed by canonical target id, in request order

    Raises:
        ConfigError: Unknown targets, sections, keys or invalid values
    """
    options = options or {}
    diagnostics: List[Diagnostic] = []

    unknown = [
        key for key in options if key != COMMON_SECTION and canonical_language(key) is None
    ]
    if unknown:
        raise ConfigError(f"Unknown configuration section(s): {', '.join(sorted(unknown))}")
    for key, value in options.items():
        if not isinstance(value, Mapping):
            raise ConfigError(f"Configuration section {key!r} must be a mapping")

    if not targets:
        raise ConfigError("No target language requested")

    registry = get_registry()
    generators: Dict[str, CodeGenerator] = {}
    for target in targets:
        try:
            language = registry.resolve(target)
        except RegistryError as e:
            diagnostics.extend(ConfigError(str(e)).diagnostics)
            continue
        if language in generators:
            continue
        try:
            generators[language] = registry.create_generator(
                language, _build_config(language, options, config_file)
            )
        except ConfigError as e:
            diagnostics.extend(e.diagnostics)

    if diagnostics:
        raise ConfigError("; ".join(d.message for d in diagnostics), diagnostics)
    return generators


def _build_config(language, options, config_file):
    return load_config(language, _options_for(options, language), config_file)


def _load(source: SourceInput) -> SourceFile:
    if isinstance(source, SourceFile):
        return source
    return load_source_file(source)


def _extract_one(source: SourceInput, is_marked: Optional[MarkerPredicate]) -> LocalForest:
    parsed = parse_source(_load(source))
    return extract(parsed, is_marked)


def run(
    sources: Sequence[SourceInput],
    targets: Sequence[str],
    options: Optional[Mapping[str, Any]] = None,
    config_file: Union[str, Path, None] = None,
    max_workers: Optional[int] = None,
    is_marked: Optional[MarkerPredicate] = None,
) -> RunResult:
    """
    Run extraction, reconciliation and generation.

    Args:
        sources: SourceFile objects or paths of Rust files
        targets: Target ids or aliases
        options: ``{"common": {...}, "<target>": {...}}`` overrides
        config_file: JSON configuration file
        max_workers: Thread pool size for extraction and generation
        is_marked: Participation predicate (default: ``#[typeshare]`` present)

    Returns:
        RunResult with shared diagnostics and a per-target result map

    Raises:
        ConfigError: Invalid configuration, before any source is read
        SourceLoadError: A source path cannot be read
    """
    generators = prepare_generators(targets, options, config_file)
    logger.info(
        "Generating %s from %d source(s)", ", ".join(generators), len(sources)
    )

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        forests = list(pool.map(lambda s: _extract_one(s, is_marked), sources))

    diagnostics: List[Diagnostic] = []
    for forest in forests:
        diagnostics.extend(forest.diagnostics)

    # names mapped for any target are accepted; targets without the mapping fail
    external_types = set()
    for generator in generators.values():
        external_types.update(generator.config.type_mappings)
    reconciled = reconcile(forests, external_types)
    diagnostics.extend(reconciled.diagnostics)

    if has_errors(diagnostics) or reconciled.graph is None:
        logger.warning("Input has errors; no target was generated")
        targets_failed = {
            language: TargetResult(
                language=language,
                success=False,
                file_extension=generator.file_extension,
                error_message="Not generated: the input has errors",
            )
            for language, generator in generators.items()
        }
        return RunResult(targets_failed, diagnostics)

    graph = reconciled.graph
    logger.debug("Graph has %d definition(s)", len(graph))

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {
            language: pool.submit(generate_code, generator, graph)
            for language, generator in generators.items()
        }
        results = {
            language: TargetResult.from_generation(generators[language], future.result())
            for language, future in futures.items()
        }

    for language, result in results.items():
        if result.success:
            logger.info("%s: generated %d definition(s)", language, len(graph))
        else:
            logger.warning("%s: %s", language, result.error_message)

    return RunResult(results, diagnostics, graph)
