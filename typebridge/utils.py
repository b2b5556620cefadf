"""Utility functions for locating and loading Rust sources.

This module provides functions for loading source files and discovering
them under directories with proper error handling.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Union

from .codegen.core.diagnostics import TypebridgeError
from .logging_config import get_logger
from .rust_parser import SourceFile

logger = get_logger(__name__)

RUST_SUFFIX = ".rs"


class SourceLoadError(TypebridgeError):
    """Custom exception for source loading errors."""

    pass


def crate_root(directory: Union[str, Path]) -> Path:
    """Module paths are relative to ``src`` when the directory has one."""
    directory = Path(directory)
    src = directory / "src"
    return src if src.is_dir() else directory


def load_source_file(
    file_path: Union[str, Path],
    root: Union[str, Path, None] = None,
    module: Optional[str] = None,
) -> SourceFile:
    """Load a Rust source file.

    Args:
        file_path: Path to the source file.
        root: Crate source root the module path is derived from.
        module: Explicit module path, overriding the derived one.

    Returns:
        SourceFile with its text and module path.

    Raises:
        SourceLoadError: If the file doesn't exist or cannot be read.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to load source from file: {file_path}")

    if not file_path.is_file():
        logger.error(f"File not found: {file_path}")
        raise SourceLoadError(f"File not found: {file_path}")

    if file_path.suffix.lower() != RUST_SUFFIX:
        logger.warning(f"File does not have .rs extension: {file_path}")

    try:
        source = SourceFile.from_path(file_path, root=root, module=module)
    except UnicodeDecodeError as e:
        logger.error(f"File is not valid UTF-8: {file_path}")
        raise SourceLoadError(f"File is not valid UTF-8: {file_path}") from e
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}", exc_info=True)
        raise SourceLoadError(f"Error reading file {file_path}: {e}") from e

    logger.debug(f"Loaded {file_path} as module {source.module}")
    return source


def discover_sources(paths: Iterable[Union[str, Path]]) -> List[SourceFile]:
    """Load every Rust file named by, or found under, the given paths.

    Directories are searched recursively and their files taken in path
    order; a file reached twice is loaded once.

    Args:
        paths: Files and directories.

    Returns:
        Loaded sources.

    Raises:
        SourceLoadError: If a path doesn't exist or a file cannot be read.
    """
    sources: List[SourceFile] = []
    seen = set()

    for path in paths:
        path = Path(path)
        if path.is_dir():
            root = crate_root(path)
            candidates = sorted(path.rglob(f"*{RUST_SUFFIX}"))
            logger.info(f"Found {len(candidates)} Rust file(s) under {path}")
        elif path.exists():
            root = path.parent
            candidates = [path]
        else:
            logger.error(f"Path not found: {path}")
            raise SourceLoadError(f"Path not found: {path}")

        for candidate in candidates:
            key = candidate.resolve()
            if key in seen:
                continue
            seen.add(key)
            sources.append(load_source_file(candidate, root=root))

    return sources
