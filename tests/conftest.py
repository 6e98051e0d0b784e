# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures and engine doubles."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

import pytest

from smartlint.models import ConfigEntry, EngineReport, EngineResult, FixResult, LintMessage, ResultSummary
from smartlint.options import RunOptions
from smartlint.sources import read_source, write_source


def fake_fix(contents: str) -> FixResult:
    """Apply the fake rules: ``var`` becomes ``let`` and report leftovers.

    ``console.`` lines give a warning and ``debugger`` lines give an error.
    Running the fix on its own output is a no-op with identical messages.
    """

    output = contents.replace("var ", "let ")
    messages: list[LintMessage] = []
    for number, line in enumerate(output.splitlines(), start=1):
        if "console." in line:
            messages.append(LintMessage(rule_id="no-console", severity=1, message="Unexpected console", line=number))
        if "debugger" in line:
            messages.append(LintMessage(rule_id="no-debugger", severity=2, message="Unexpected debugger", line=number))
    return FixResult(output=output, messages=messages, fixed=output != contents)


class FakeLinter:
    """Linter double counting ``verify_and_fix`` invocations."""

    def __init__(self) -> None:
        self.calls = 0
        self.rules: dict[str, object] = {}

    def define_rule(self, rule_id: str, rule: object) -> None:
        self.rules[rule_id] = rule

    def verify_and_fix(self, contents: str, config: ConfigEntry, *, filename: str | None = None) -> FixResult:
        self.calls += 1
        return fake_fix(contents)


class FakeEngine:
    """Engine double resolving configs from a per-directory table."""

    def __init__(self, plugins_by_dir: dict[str, list[str]] | None = None) -> None:
        self.linter = FakeLinter()
        self.plugins_by_dir = plugins_by_dir or {}
        self.resolve_calls: list[Path] = []
        self.file_runs: list[tuple[list[str], RunOptions]] = []
        self.text_runs: list[tuple[str, str | None, RunOptions]] = []
        self.applied: list[EngineReport] = []

    def resolve_config_for_file(self, path: Path) -> ConfigEntry:
        self.resolve_calls.append(path)
        plugins = self.plugins_by_dir.get(path.parent.name, [])
        return ConfigEntry(plugins=plugins, rules={"no-console": "warn"})

    def _result(self, file_path: str, contents: str) -> EngineResult:
        fixed = fake_fix(contents)
        summary = ResultSummary.from_messages(file_path, fixed.messages)
        return EngineResult(
            **summary.model_dump(),
            output=fixed.output if fixed.fixed else None,
            source=contents,
        )

    def execute_on_files(self, patterns: Sequence[str], options: RunOptions) -> EngineReport:
        self.file_runs.append((list(patterns), options))
        results = [self._result(pattern, read_source(Path(pattern))) for pattern in patterns]
        return EngineReport.from_results(results)

    def execute_on_text(self, text: str, path: str | None, options: RunOptions) -> EngineReport:
        self.text_runs.append((text, path, options))
        return EngineReport.from_results([self._result(path or "<text>", text)])

    def apply_output_fixes(self, report: EngineReport) -> None:
        self.applied.append(report)
        for result in report.results:
            if result.output is not None:
                write_source(Path(result.file_path), result.output)

    def create_linter(self) -> FakeLinter:
        return self.linter

    def get_formatter(self, reporter: str):
        def _format(report: EngineReport) -> str:
            return json.dumps(
                {
                    "reporter": reporter,
                    "files": len(report.results),
                    "errors": report.error_count,
                    "warnings": report.warning_count,
                },
            )

        return _format


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user environment overrides out of every test."""

    monkeypatch.delenv("SMARTLINT_CACHE_DIR", raising=False)
    monkeypatch.delenv("SMARTLINT_NO_MEMO", raising=False)


@pytest.fixture
def fake_engine() -> FakeEngine:
    """Return a fresh :class:`FakeEngine`."""
    return FakeEngine()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a project with one source file needing a fix."""

    src = tmp_path / "src"
    src.mkdir()
    (src / "a.js").write_text("var x = 1;\nconsole.log(x);\n", encoding="utf-8")
    return tmp_path
