# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the incremental batch orchestrator."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import FakeEngine

from smartlint import smart_lint_files
from smartlint.cache import ContentCache
from smartlint.config import load_settings
from smartlint.errors import ModuleLoadError
from smartlint.models import AggregateReport
from smartlint.options import normalize_options
from smartlint.orchestrator import create_session
from smartlint.plugins import StaticPluginRegistry


def _run(engine: FakeEngine, root: Path, **kwargs: object) -> AggregateReport:
    registry = kwargs.pop("plugin_registry", StaticPluginRegistry())
    return smart_lint_files(["src"], {}, engine=engine, plugin_registry=registry, root=root, **kwargs)


def _results(report: AggregateReport) -> list[dict[str, object]]:
    return [item.model_dump() for item in report.results]


def test_first_run_fixes_file_and_writes_cache(project: Path, fake_engine: FakeEngine) -> None:
    report = _run(fake_engine, project)

    source = project / "src" / "a.js"
    assert source.read_text(encoding="utf-8") == "let x = 1;\nconsole.log(x);\n"
    assert report.cache_writes == 1
    assert report.warning_count == 1
    assert report.error_count == 0
    assert report.results[0].file_path == str(source)
    assert report.results[0].source == "let x = 1;\nconsole.log(x);\n"
    assert fake_engine.linter.calls == 1

    record = ContentCache(project / ".cache" / "smartlint" / "files").lookup(source)
    assert record is not None
    assert record.contents == "var x = 1;\nconsole.log(x);\n"
    assert record.output == "let x = 1;\nconsole.log(x);\n"


def test_second_run_is_idempotent(project: Path, fake_engine: FakeEngine) -> None:
    first = _run(fake_engine, project)
    second = _run(FakeEngine(), project)

    assert second.cache_writes == 0
    assert _results(second) == _results(first)
    assert (project / "src" / "a.js").read_text(encoding="utf-8") == "let x = 1;\nconsole.log(x);\n"


def test_memo_serves_repeat_runs_across_sessions(project: Path) -> None:
    engines = [FakeEngine() for _ in range(3)]
    reports = [_run(engine, project) for engine in engines]

    assert [engine.linter.calls for engine in engines] == [1, 1, 0]
    assert reports[2].memo_hits == 1
    assert _results(reports[2]) == _results(reports[0])


def test_prior_record_config_is_reused(project: Path) -> None:
    first_engine, second_engine = FakeEngine(), FakeEngine()

    _run(first_engine, project)
    _run(second_engine, project)

    assert len(first_engine.resolve_calls) == 1
    assert second_engine.resolve_calls == []


def test_edit_invalidates_and_recomputes(project: Path, fake_engine: FakeEngine) -> None:
    _run(fake_engine, project)
    source = project / "src" / "a.js"
    source.write_text("let x = 1;\nconsole.log(x);\ndebugger;\n", encoding="utf-8")

    report = _run(FakeEngine(), project)

    assert report.cache_writes == 1
    assert report.error_count == 1
    record = ContentCache(project / ".cache" / "smartlint" / "files").lookup(source)
    assert record is not None
    assert record.report is not None
    assert record.report.error_count == 1


def test_config_is_resolved_once_per_directory(project: Path, fake_engine: FakeEngine) -> None:
    (project / "src" / "b.js").write_text("b();\n", encoding="utf-8")
    (project / "src" / "c.js").write_text("c();\n", encoding="utf-8")

    report = _run(fake_engine, project)

    assert len(report.results) == 3
    assert len(fake_engine.resolve_calls) == 1


def test_plugins_from_config_are_registered(project: Path) -> None:
    engine = FakeEngine(plugins_by_dir={"src": ["demo"]})
    registry = StaticPluginRegistry({"demo": {"no-var": "rule"}})

    _run(engine, project, plugin_registry=registry)

    assert engine.linter.rules == {"demo/no-var": "rule"}
    assert registry.resolved == ["demo"]


def test_failing_file_is_recorded_and_batch_continues(project: Path) -> None:
    bad_dir = project / "src" / "bad"
    bad_dir.mkdir()
    (bad_dir / "b.js").write_text("var b;\n", encoding="utf-8")
    engine = FakeEngine(plugins_by_dir={"bad": ["ghost"]})

    report = _run(engine, project)

    assert [item.file_path for item in report.results] == [str(project / "src" / "a.js")]
    assert len(report.failures) == 1
    assert report.failures[0].error_type == "ModuleLoadError"
    assert report.failures[0].file_path == str(bad_dir / "b.js")
    assert (bad_dir / "b.js").read_text(encoding="utf-8") == "var b;\n"
    assert not report.ok


def test_fail_fast_reraises(project: Path) -> None:
    engine = FakeEngine(plugins_by_dir={"src": ["ghost"]})

    with pytest.raises(ModuleLoadError):
        _run(engine, project, fail_fast=True)


def test_session_uses_in_memory_memo_when_disabled(project: Path, fake_engine: FakeEngine) -> None:
    settings = load_settings(project, env={"SMARTLINT_NO_MEMO": "1"})
    session = create_session(
        normalize_options(settings.options),
        settings=settings,
        engine=fake_engine,
        plugin_registry=StaticPluginRegistry(),
    )

    session.run(["src"])

    assert not (project / ".cache" / "verify-process").exists()
    assert (project / ".cache" / "smartlint" / "files" / "index").is_dir()


def test_unreadable_file_is_a_failure(project: Path, fake_engine: FakeEngine) -> None:
    (project / "src" / "binary.js").write_bytes(b"\xff\xfe\x00bad")

    report = _run(fake_engine, project)

    assert [failure.error_type for failure in report.failures] == ["FileIOError"]
    assert len(report.results) == 1


def test_crlf_file_is_written_back_unchanged(project: Path, fake_engine: FakeEngine) -> None:
    source = project / "src" / "a.js"
    source.write_bytes(b"let x = 1;\r\nx();\r\n")

    report = _run(fake_engine, project)

    assert source.read_bytes() == b"let x = 1;\r\nx();\r\n"
    assert report.results[0].source == "let x = 1;\r\nx();\r\n"


def test_line_ending_change_invalidates_record(project: Path, fake_engine: FakeEngine) -> None:
    source = project / "src" / "a.js"
    source.write_bytes(b"a();\n")
    _run(fake_engine, project)

    source.write_bytes(b"a();\r\n")
    engine = FakeEngine()
    _run(engine, project)

    assert engine.linter.calls == 1
    assert source.read_bytes() == b"a();\r\n"
