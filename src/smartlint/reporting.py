# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helpers turning engine messages and reports into summaries and text."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from rich.table import Table

from .constants import SEVERITY_WARNING
from .engine.base import Formatter
from .models import AggregateReport, EngineReport, EngineResult, ResultSummary


def build_result_summary(file_path: Path | str, messages: Iterable[Any]) -> ResultSummary:
    """Return the :class:`ResultSummary` for ``messages`` reported on ``file_path``.

    Severity ``2`` counts as an error and severity ``1`` as a warning; fixable
    counts include only messages that carry an engine fix.
    """

    return ResultSummary.from_messages(file_path, messages)


def without_warnings(report: EngineReport) -> EngineReport:
    """Return a copy of ``report`` with warning messages removed."""

    results: list[EngineResult] = []
    for result in report.results:
        messages = [message for message in result.messages if message.severity != SEVERITY_WARNING]
        results.append(
            result.model_copy(update={"messages": messages, "warning_count": 0, "fixable_warning_count": 0}),
        )
    return EngineReport.from_results(results)


def render_report(report: EngineReport, formatter: Formatter, *, warnings: bool) -> str:
    """Render ``report`` with ``formatter``, dropping warnings unless requested.

    Args:
        report: Raw or converted engine report.
        formatter: Callable returned by the engine's ``get_formatter``.
        warnings: Keep warning messages when ``True``.

    Returns:
        str: Formatter output.
    """

    return formatter(report if warnings else without_warnings(report))


def batch_summary_table(report: AggregateReport) -> Table:
    """Return a Rich table describing batch totals and cache activity."""

    table = Table(title="smartlint", show_header=False, box=None)
    table.add_column("metric", style="bold")
    table.add_column("value", justify="right")
    table.add_row("files", str(len(report.results)))
    table.add_row("errors", str(report.error_count))
    table.add_row("warnings", str(report.warning_count))
    table.add_row("fixable", str(report.fixable_error_count + report.fixable_warning_count))
    table.add_row("memo hits", str(report.memo_hits))
    table.add_row("cache writes", str(report.cache_writes))
    if report.failures:
        table.add_row("failed files", str(len(report.failures)), style="red")
    return table


__all__ = ["batch_summary_table", "build_result_summary", "render_report", "without_warnings"]
