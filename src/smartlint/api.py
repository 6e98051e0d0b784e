# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Direct pass-throughs to the engine without the caching machinery."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from functools import partial
from typing import Any, Literal

from .engine import AnalysisEngine, default_engine
from .models import EngineReport
from .options import RunOptions, arrayify, normalize_options


def lint_text(
    code: str,
    path: str | None = None,
    options: Mapping[str, Any] | RunOptions | None = None,
    *,
    engine: AnalysisEngine | None = None,
) -> EngineReport:
    """Lint ``code`` as the contents of ``path`` and attach a formatter.

    Args:
        code: Source text to lint.
        path: File name used for parser and config selection.
        options: User options merged by :func:`normalize_options`.
        engine: Engine override; defaults to the ESLint adapter.

    Returns:
        EngineReport: Raw engine report whose ``format`` renders it with the
        configured reporter. Fixed text is available on ``results[0].output``.
    """

    opts = normalize_options(options)
    active = engine or default_engine()
    report = active.execute_on_text(code, path, opts)
    report.format = active.get_formatter(opts.reporter)
    return report


def lint_files(
    patterns: Sequence[str] | str | None = None,
    options: Mapping[str, Any] | RunOptions | None = None,
    *,
    engine: AnalysisEngine | None = None,
) -> EngineReport:
    """Lint files matched by ``patterns`` and write the engine's fixes to disk.

    Args:
        patterns: File patterns; defaults to the normalised ``input`` option.
        options: User options merged by :func:`normalize_options`.
        engine: Engine override; defaults to the ESLint adapter.

    Returns:
        EngineReport: Raw engine report with a ``format`` callable attached.
    """

    opts = normalize_options(options)
    active = engine or default_engine()
    report = active.execute_on_files(arrayify(patterns) or opts.input, opts)
    report.format = active.get_formatter(opts.reporter)
    active.apply_output_fixes(report)
    return report


RunMode = Literal["text", "files"]


def lint(mode: RunMode, *, engine: AnalysisEngine | None = None) -> Callable[..., EngineReport]:
    """Return the simple run mode named ``mode`` bound to ``engine``.

    ``lint("text")`` behaves like :func:`lint_text` and ``lint("files")`` like
    :func:`lint_files`.

    Raises:
        ValueError: If ``mode`` is not ``"text"`` or ``"files"``.
    """

    if mode == "text":
        return partial(lint_text, engine=engine)
    if mode == "files":
        return partial(lint_files, engine=engine)
    raise ValueError(f"Unknown lint mode {mode!r}; expected 'text' or 'files'")


__all__ = ["RunMode", "lint", "lint_files", "lint_text"]
