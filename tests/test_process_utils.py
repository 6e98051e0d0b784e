# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for subprocess helpers."""

from __future__ import annotations

import shutil
import sys

import pytest

from smartlint.process_utils import resolve_argv, run_command


def test_absolute_executable_is_kept() -> None:
    assert resolve_argv([sys.executable, "-V"]) == [sys.executable, "-V"]


def test_relative_executable_is_resolved(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(shutil, "which", lambda name: f"/opt/bin/{name}")

    assert resolve_argv(["eslint", "--version"]) == ["/opt/bin/eslint", "--version"]


def test_missing_executable_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(shutil, "which", lambda name: None)

    with pytest.raises(FileNotFoundError, match="eslint"):
        resolve_argv(["eslint"])


def test_empty_command_raises() -> None:
    with pytest.raises(ValueError):
        resolve_argv([])


def test_run_command_captures_text_and_stdin() -> None:
    completed = run_command([sys.executable, "-c", "import sys; print(sys.stdin.read().upper())"], input_text="ok")

    assert completed.returncode == 0
    assert completed.stdout.strip() == "OK"
