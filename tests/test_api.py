# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the simple run modes."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from conftest import FakeEngine

from smartlint import lint, lint_files, lint_text
from smartlint.constants import DEFAULT_INPUTS
from smartlint.models import EngineReport
from smartlint.options import RunOptions


def test_lint_text_attaches_formatter(fake_engine: FakeEngine) -> None:
    report = lint_text("var a;\ndebugger;\n", "a.js", {"reporter": "compact"}, engine=fake_engine)

    text, path, options = fake_engine.text_runs[0]
    assert (text, path) == ("var a;\ndebugger;\n", "a.js")
    assert options.fix is True
    assert report.error_count == 1
    assert report.results[0].output == "let a;\ndebugger;\n"
    assert report.format is not None
    assert json.loads(report.format(report))["reporter"] == "compact"


def test_lint_text_without_path(fake_engine: FakeEngine) -> None:
    report = lint_text("ok();\n", engine=fake_engine)

    assert fake_engine.text_runs[0][1] is None
    assert report.error_count == 0
    assert report.results[0].output is None


def test_lint_files_applies_fixes(project: Path, fake_engine: FakeEngine) -> None:
    source = project / "src" / "a.js"

    report = lint_files([str(source)], {"warnings": True}, engine=fake_engine)

    assert source.read_text(encoding="utf-8") == "let x = 1;\nconsole.log(x);\n"
    assert fake_engine.applied == [report]
    assert report.warning_count == 1
    assert json.loads(report.format(report))["reporter"] == "codeframe"


def test_lint_files_defaults_to_input_patterns(fake_engine: FakeEngine, monkeypatch: pytest.MonkeyPatch) -> None:
    def execute_on_files(patterns: list[str], options: RunOptions) -> EngineReport:
        fake_engine.file_runs.append((list(patterns), options))
        return EngineReport()

    monkeypatch.setattr(fake_engine, "execute_on_files", execute_on_files)

    report = lint_files(engine=fake_engine)

    assert fake_engine.file_runs[0][0] == list(DEFAULT_INPUTS)
    assert report.results == []


def test_lint_factory_returns_bound_run_modes(project: Path, fake_engine: FakeEngine) -> None:
    text_report = lint("text", engine=fake_engine)("debugger;\n", "x.js")
    files_report = lint("files", engine=fake_engine)([str(project / "src" / "a.js")])

    assert fake_engine.text_runs[0][:2] == ("debugger;\n", "x.js")
    assert text_report.error_count == 1
    assert fake_engine.applied == [files_report]
    assert (project / "src" / "a.js").read_text(encoding="utf-8").startswith("let x")


def test_lint_factory_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError, match="stream"):
        lint("stream")  # type: ignore[arg-type]
