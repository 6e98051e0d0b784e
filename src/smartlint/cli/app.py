# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the lint, cache, and cleanup commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer

from ..api import lint_files, lint_text
from ..clean import clean_caches
from ..config import Settings, load_settings
from ..engine import AnalysisEngine, default_engine
from ..errors import SmartLintError
from ..logging import configure_logging
from ..models import EngineReport
from ..options import RunOptions, normalize_options
from ..orchestrator import create_session
from ..reporting import batch_summary_table, render_report
from .shared import EXIT_LINT_ERRORS, EXIT_OK, EXIT_TOOL_FAILURE, CLILogger, build_cli_logger

app = typer.Typer(
    name="smartlint",
    help="Incremental ESLint runner with content and result caching.",
    no_args_is_help=True,
    add_completion=False,
)

PatternsArg = Annotated[list[str] | None, typer.Argument(help="Files, directories, or globs to lint.")]
IgnoreOpt = Annotated[
    list[str] | None,
    typer.Option("--ignore", "-i", help="Extra ignore glob (added to the defaults)."),
]
ReporterOpt = Annotated[str | None, typer.Option("--reporter", "-r", help="ESLint formatter name.")]
WarningsOpt = Annotated[bool, typer.Option("--warnings", help="Report warnings as well as errors.")]
NoExitOpt = Annotated[bool, typer.Option("--no-exit", help="Exit 0 even when lint errors remain.")]
RootOpt = Annotated[
    Path,
    typer.Option("--root", file_okay=False, dir_okay=True, help="Project root for discovery and caches."),
]
EmojiOpt = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji in console output.")]
DebugOpt = Annotated[bool, typer.Option("--debug", help="Emit debug logging to stderr.")]


def build_engine(root: Path) -> AnalysisEngine:
    """Return the analysis engine used by CLI commands."""

    return default_engine(cwd=root)


def _overrides(
    *,
    ignore: list[str] | None = None,
    reporter: str | None = None,
    warnings: bool = False,
    no_exit: bool = False,
) -> dict[str, Any]:
    """Return option overrides for flags the user actually passed."""

    return {
        "ignore": ignore or None,
        "reporter": reporter,
        "warnings": True if warnings else None,
        "exit": False if no_exit else None,
    }


def _prepare(
    root: Path,
    overrides: dict[str, Any],
    *,
    debug: bool,
) -> tuple[Settings, RunOptions]:
    configure_logging(debug=debug)
    settings = load_settings(root.resolve(), overrides=overrides)
    return settings, normalize_options(settings.options)


def _emit(report: EngineReport, engine: AnalysisEngine, opts: RunOptions, logger: CLILogger) -> None:
    rendered = render_report(report, engine.get_formatter(opts.reporter), warnings=opts.warnings)
    if rendered.strip():
        logger.echo(rendered.rstrip("\n"))


def _exit_code(error_count: int, opts: RunOptions) -> int:
    return EXIT_LINT_ERRORS if opts.exit and error_count else EXIT_OK


@app.command("lint")
def lint_command(
    patterns: PatternsArg = None,
    ignore: IgnoreOpt = None,
    reporter: ReporterOpt = None,
    warnings: WarningsOpt = False,
    no_exit: NoExitOpt = False,
    root: RootOpt = Path("."),
    fail_fast: Annotated[bool, typer.Option("--fail-fast", help="Stop at the first file that fails.")] = False,
    emoji: EmojiOpt = True,
    debug: DebugOpt = False,
) -> None:
    """Lint and fix files incrementally using the content and memo caches."""

    logger = build_cli_logger(emoji=emoji)
    overrides = _overrides(ignore=ignore, reporter=reporter, warnings=warnings, no_exit=no_exit)
    try:
        settings, opts = _prepare(root, overrides, debug=debug)
        engine = build_engine(settings.root)
        session = create_session(opts, settings=settings, engine=engine, fail_fast=fail_fast)
        report = session.run(patterns or None)
        _emit(report.to_engine_report(), engine, opts, logger)
    except SmartLintError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=EXIT_TOOL_FAILURE) from exc

    for failure in report.failures:
        logger.fail(f"{failure.file_path}: {failure.error_type}: {failure.message}")
    logger.console.print(batch_summary_table(report))
    if report.failures:
        raise typer.Exit(code=EXIT_TOOL_FAILURE)
    if report.ok:
        logger.ok(f"{len(report.results)} file(s) clean")
    raise typer.Exit(code=_exit_code(report.error_count, opts))


@app.command("files")
def files_command(
    patterns: PatternsArg = None,
    ignore: IgnoreOpt = None,
    reporter: ReporterOpt = None,
    warnings: WarningsOpt = False,
    no_exit: NoExitOpt = False,
    root: RootOpt = Path("."),
    emoji: EmojiOpt = True,
    debug: DebugOpt = False,
) -> None:
    """Run the engine directly over files and write its fixes."""

    logger = build_cli_logger(emoji=emoji)
    overrides = _overrides(ignore=ignore, reporter=reporter, warnings=warnings, no_exit=no_exit)
    try:
        settings, opts = _prepare(root, overrides, debug=debug)
        engine = build_engine(settings.root)
        report = lint_files(patterns or None, opts, engine=engine)
        _emit(report, engine, opts, logger)
    except SmartLintError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=EXIT_TOOL_FAILURE) from exc
    raise typer.Exit(code=_exit_code(report.error_count, opts))


@app.command("text")
def text_command(
    filename: Annotated[str | None, typer.Option("--filename", "-f", help="Name used for the stdin source.")] = None,
    reporter: ReporterOpt = None,
    warnings: WarningsOpt = False,
    root: RootOpt = Path("."),
    emoji: EmojiOpt = True,
    debug: DebugOpt = False,
) -> None:
    """Lint source text read from stdin."""

    logger = build_cli_logger(emoji=emoji)
    code = typer.get_text_stream("stdin").read()
    overrides = _overrides(reporter=reporter, warnings=warnings)
    try:
        settings, opts = _prepare(root, overrides, debug=debug)
        engine = build_engine(settings.root)
        report = lint_text(code, filename, opts, engine=engine)
        _emit(report, engine, opts, logger)
    except SmartLintError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=EXIT_TOOL_FAILURE) from exc
    raise typer.Exit(code=_exit_code(report.error_count, opts))


@app.command("clean")
def clean_command(
    root: RootOpt = Path("."),
    dry_run: Annotated[bool, typer.Option("--dry-run", help="List cache locations without deleting.")] = False,
    emoji: EmojiOpt = True,
) -> None:
    """Remove the content cache, the result memo, and the engine cache."""

    logger = build_cli_logger(emoji=emoji)
    try:
        settings = load_settings(root.resolve())
    except SmartLintError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=EXIT_TOOL_FAILURE) from exc
    result = clean_caches(settings, dry_run=dry_run)
    if dry_run:
        logger.echo("DRY RUN")
        for path in result.skipped:
            logger.echo(f"would remove {path}")
    elif result:
        logger.ok(f"removed {len(result.removed)} cache location(s)")
    else:
        logger.info("nothing to clean")
    raise typer.Exit(code=EXIT_OK)


def main() -> None:
    """Console script entry point."""

    app()


__all__ = ["app", "build_engine", "main"]
