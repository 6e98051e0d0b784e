# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Incremental batch linting over the directory, content, and memo caches."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from functools import partial
from pathlib import Path
from typing import Any, Final

from .cache import ContentCache, DirectoryConfigCache, ResultMemoizer, create_memoizer
from .config import Settings, load_settings
from .discovery import FileVisit, discover_files, load_visit
from .engine import AnalysisEngine, Linter, NodePluginRegistry, default_engine
from .engine.eslint import EslintEngine
from .errors import FileIOError, SmartLintError
from .models import AggregateReport, CacheRecord, ConfigEntry, FixResult
from .options import RunOptions, normalize_options
from .plugins import EntryPointPluginRegistry, PluginLoader, PluginRegistry
from .reporting import build_result_summary
from .sources import write_source

LOGGER = logging.getLogger(__name__)

VERIFY_NAMESPACE: Final[str] = "linter.verify_and_fix"


def _verify(linter: Linter, contents: str, config: ConfigEntry) -> FixResult:
    return linter.verify_and_fix(contents, config)


class BatchSession:
    """Own the caches and plugin state for one incremental lint run.

    Files are processed strictly one after another. All mutable state lives on
    the session, so independent sessions can run side by side in one process.
    """

    def __init__(
        self,
        engine: AnalysisEngine,
        options: RunOptions,
        *,
        content_cache: ContentCache,
        memoizer: ResultMemoizer,
        plugin_registry: PluginRegistry,
        root: Path | None = None,
        fail_fast: bool = False,
    ) -> None:
        self.engine = engine
        self.options = options
        self.content_cache = content_cache
        self.memoizer = memoizer
        self.root = (root or Path.cwd()).absolute()
        self.fail_fast = fail_fast
        self.config_cache = DirectoryConfigCache()
        self.plugin_loader = PluginLoader(plugin_registry)
        self.linter = engine.create_linter()
        self._analyze = memoizer.wrap(partial(_verify, self.linter), namespace=VERIFY_NAMESPACE)

    def discover(self, patterns: Sequence[str]) -> list[Path]:
        """Return the files ``patterns`` select after ignore and extension filters."""

        glob_options = self.options.glob_options
        root = Path(glob_options["cwd"]) if "cwd" in glob_options else self.root
        return discover_files(
            patterns,
            exclude=self.options.ignore,
            extensions=self.options.normalized_extensions,
            root=root,
            dot=bool(glob_options.get("dot", False)),
            follow_symlinks=bool(glob_options.get("follow_symlinks", False)),
        )

    def run(self, patterns: Sequence[str] | None = None) -> AggregateReport:
        """Lint, fix, and cache every file selected by ``patterns``.

        Args:
            patterns: Include patterns; defaults to ``options.input``.

        Returns:
            AggregateReport: Per-file results, failures, and running totals.

        Raises:
            SmartLintError: Only when ``fail_fast`` is set and a file fails.
        """

        report = AggregateReport()
        memo_before = self.memoizer.cache_info().hits
        writes_before = self.content_cache.writes
        for path in self.discover(list(patterns) if patterns else self.options.input):
            try:
                self.process_file(path, report)
            except (SmartLintError, OSError) as exc:
                if self.fail_fast:
                    raise
                LOGGER.warning("skipping %s: %s", path, exc)
                report.record_failure(path, exc)
        report.memo_hits = self.memoizer.cache_info().hits - memo_before
        report.cache_writes = self.content_cache.writes - writes_before
        return report

    def resolve_config(self, visit: FileVisit) -> ConfigEntry:
        """Return the directory configuration for ``visit``'s file."""

        return self.config_cache.get_config(visit.path.parent, partial(self._resolve_directory, visit))

    def _resolve_directory(self, visit: FileVisit, _dir_path: Path) -> ConfigEntry:
        if visit.record is not None and visit.record.eslint_config is not None:
            return visit.record.eslint_config
        return self.engine.resolve_config_for_file(visit.path)

    def process_file(self, path: Path, report: AggregateReport) -> None:
        """Run the cached analyse-and-fix pipeline for one file.

        Args:
            path: File to lint.
            report: Aggregate receiving the file's summary and fixed source.

        Raises:
            SmartLintError: If any step fails for this file.
        """

        visit = load_visit(path, self.content_cache)
        config = self.resolve_config(visit)
        if not visit.valid:
            self.plugin_loader.ensure_loaded(config, self.linter)

        result = self._analyze(visit.contents, config)
        summary = build_result_summary(path, result.messages)

        previous = visit.record.report if visit.record is not None else None
        if previous is None or summary.model_dump() != previous.model_dump():
            self.content_cache.put(
                path,
                result.output,
                CacheRecord(contents=visit.contents, output=result.output, report=summary, eslint_config=config),
            )

        try:
            write_source(path, result.output)
        except OSError as exc:
            raise FileIOError(f"Cannot write fixed output to {path}: {exc}", path=path) from exc
        report.add(summary, result.output)


def create_session(
    options: RunOptions,
    *,
    settings: Settings,
    engine: AnalysisEngine | None = None,
    plugin_registry: PluginRegistry | None = None,
    fail_fast: bool = False,
) -> BatchSession:
    """Wire a :class:`BatchSession` from resolved ``settings``.

    Args:
        options: Normalised run options.
        settings: Settings providing the root and cache directories.
        engine: Engine override; defaults to the ESLint adapter.
        plugin_registry: Registry override; ESLint engines use the Node registry,
            other engines load Python plugins from entry points.
        fail_fast: Re-raise the first per-file failure instead of recording it.

    Returns:
        BatchSession: Session ready to :meth:`BatchSession.run`.
    """

    active_engine = engine or default_engine(cwd=settings.root)
    if plugin_registry is None:
        if isinstance(active_engine, EslintEngine):
            plugin_registry = NodePluginRegistry(active_engine)
        else:
            plugin_registry = EntryPointPluginRegistry()
    return BatchSession(
        active_engine,
        options,
        content_cache=ContentCache(settings.content_cache_dir),
        memoizer=create_memoizer(settings.memo_dir if settings.memo_enabled else None),
        plugin_registry=plugin_registry,
        root=settings.root,
        fail_fast=fail_fast,
    )


def smart_lint_files(
    patterns: Sequence[str] | str | None = None,
    options: Mapping[str, Any] | RunOptions | None = None,
    *,
    engine: AnalysisEngine | None = None,
    plugin_registry: PluginRegistry | None = None,
    root: Path | None = None,
    fail_fast: bool = False,
) -> AggregateReport:
    """Lint ``patterns`` incrementally, writing fixes and updating the caches.

    Args:
        patterns: Include patterns; defaults to the normalised ``input`` option.
        options: User options merged by :func:`normalize_options`.
        engine: Engine override; defaults to the ESLint adapter.
        plugin_registry: Plugin registry override.
        root: Project root for discovery and caches; defaults to the cwd.
        fail_fast: Re-raise the first per-file failure.

    Returns:
        AggregateReport: Results for every processed file.
    """

    project_root = (root or Path.cwd()).absolute()
    if isinstance(options, RunOptions):
        settings = load_settings(project_root)
        opts = normalize_options(options)
    else:
        settings = load_settings(project_root, overrides=options)
        opts = normalize_options(settings.options)
    session = create_session(
        opts,
        settings=settings,
        engine=engine,
        plugin_registry=plugin_registry,
        fail_fast=fail_fast,
    )
    selected = [patterns] if isinstance(patterns, str) else patterns
    return session.run(selected)


__all__ = ["BatchSession", "VERIFY_NAMESPACE", "create_session", "smart_lint_files"]
