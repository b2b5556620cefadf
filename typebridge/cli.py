"""
Command-line interface.

Discovers Rust sources, runs the pipeline for each requested target and
writes one output file per target.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .codegen.core.config import COMMON_SECTION, ConfigError
from .codegen.core.diagnostics import Diagnostic, Severity, TypebridgeError
from .codegen.registry import list_all_language_info
from .logging_config import get_logger, setup_logging
from .pipeline import RunResult, TargetResult, prepare_generators, run
from .utils import discover_sources

logger = get_logger(__name__)

DEFAULT_BASENAME = "types"


class CLIHandler:
    """Handle command-line operations for type generation."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self.err_console = Console(stderr=True)

    def run(self, args: argparse.Namespace) -> int:
        """Run the requested operation.

        Returns:
            Exit code (0 for success, 1 for failure).
        """
        if args.list_languages:
            return self._list_languages()

        if not args.paths:
            self.err_console.print("[red]✗[/red] At least one input path is required")
            return 1
        if not args.lang:
            self.err_console.print("[red]✗[/red] --lang is required for code generation")
            return 1
        if args.output and len(args.lang) > 1:
            self.err_console.print(
                "[red]✗[/red] --output takes a single --lang; use --output-dir"
            )
            return 1

        options = {}
        if args.package_name:
            options[COMMON_SECTION] = {"package_name": args.package_name}

        try:
            # Configuration errors surface before any source is read
            prepare_generators(args.lang, options, args.config)
            sources = discover_sources(args.paths)
            result = run(sources, args.lang, options, args.config)
        except ConfigError as e:
            self._print_diagnostics(e.diagnostics)
            self.err_console.print(f"[red]✗ Configuration error:[/red] {e}")
            return 1
        except TypebridgeError as e:
            self.err_console.print(f"[red]✗ Error:[/red] {e}")
            return 1

        self._print_diagnostics(result.diagnostics)
        written = self._write_outputs(result, args)
        self._print_summary(result, written, verbose=args.verbose)
        return 0 if result.success else 1

    def _write_outputs(self, result: RunResult, args: argparse.Namespace) -> List[Path]:
        written = []
        for language, target in result.targets.items():
            if not target.success:
                continue
            path = self._output_path(target, args)
            if path is None:
                self.console.print(
                    target.code,
                    end="",
                    markup=False,
                    highlight=False,
                    emoji=False,
                    soft_wrap=True,
                )
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(target.code, encoding="utf-8")
            logger.info("Wrote %s output to %s", language, path)
            written.append(path)
        return written

    def _output_path(self, target: TargetResult, args: argparse.Namespace) -> Optional[Path]:
        if args.output:
            return Path(args.output)
        if args.output_dir:
            return Path(args.output_dir) / f"{DEFAULT_BASENAME}{target.file_extension}"
        return None

    def _print_diagnostics(self, diagnostics: Sequence[Diagnostic]) -> None:
        if not diagnostics:
            return

        table = Table(title="Diagnostics", box=box.ROUNDED, title_style="bold")
        table.add_column("Severity", no_wrap=True)
        table.add_column("Kind", style="cyan", no_wrap=True)
        table.add_column("Location", style="dim")
        table.add_column("Message")

        for diagnostic in diagnostics:
            style = "red" if diagnostic.severity == Severity.ERROR else "yellow"
            table.add_row(
                f"[{style}]{diagnostic.severity.value}[/{style}]",
                diagnostic.kind.value,
                str(diagnostic.location) if diagnostic.location else "",
                diagnostic.message,
            )
        self.err_console.print(table)

    def _print_summary(self, result: RunResult, written: List[Path], verbose: bool) -> None:
        table = Table(title="Targets", box=box.SIMPLE, header_style="bold cyan")
        table.add_column("Language", style="bold")
        table.add_column("Status")
        table.add_column("Warnings", justify="right")
        table.add_column("Details", style="dim")

        for language, target in result.targets.items():
            status = "[green]✓ ok[/green]" if target.success else "[red]✗ failed[/red]"
            details = target.error_message or ""
            if verbose and target.metadata:
                details = ", ".join(
                    f"{k}={v}" for k, v in target.metadata.items() if k != "language"
                )
            table.add_row(language, status, str(len(target.warnings)), details)
            for diagnostic in target.diagnostics:
                table.add_row("", "", "", f"{diagnostic.location or ''} {diagnostic.message}")
            if verbose:
                for warning in target.warnings:
                    table.add_row("", "", "", f"[yellow]{warning}[/yellow]")

        self.err_console.print(table)
        for path in written:
            self.err_console.print(f"📄 {path}")

    def _list_languages(self) -> int:
        table = Table(
            title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan"
        )
        table.add_column("Language", style="bold green", no_wrap=True)
        table.add_column("Extension", style="cyan")
        table.add_column("Aliases", style="blue")
        table.add_column("Sum types")
        table.add_column("Options", style="dim")

        for name, info in sorted(list_all_language_info().items()):
            table.add_row(
                name,
                info["file_extension"],
                ", ".join(info["aliases"]) or "[dim]none[/dim]",
                ", ".join(info["sum_strategies"]),
                ", ".join(info["options"]) or "[dim]none[/dim]",
            )

        self.console.print(table)
        self.console.print(
            Panel(
                "[bold]Usage:[/bold] typebridge [dim]src/[/dim] --lang [cyan]LANGUAGE[/cyan]"
                " --output-dir [dim]out/[/dim]",
                title="💡 Quick Start",
                border_style="blue",
            )
        )
        return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typebridge",
        description="Generate type declarations in other languages from Rust types",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  typebridge src/ --lang typescript --output types.ts
  typebridge src/ -l go -l swift --output-dir generated/
  typebridge src/ -l kotlin --package-name com.example.models
  typebridge --list-languages
        """.strip(),
    )
    parser.add_argument("paths", nargs="*", help="Rust files or directories to scan")
    parser.add_argument(
        "--lang",
        "-l",
        action="append",
        metavar="LANGUAGE",
        help="Target language (repeatable; see --list-languages)",
    )

    output = parser.add_mutually_exclusive_group()
    output.add_argument("--output", "-o", help="Output file for a single target")
    output.add_argument(
        "--output-dir", "-d", help=f"Directory receiving {DEFAULT_BASENAME}.<ext> per target"
    )

    parser.add_argument("--config", "-c", help="JSON configuration file")
    parser.add_argument("--package-name", help="Package/namespace name for generated code")
    parser.add_argument(
        "--list-languages", action="store_true", help="List supported languages and exit"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Console script entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    return CLIHandler().run(args)
