# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for layered settings loading."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from smartlint.config import load_settings
from smartlint.errors import ConfigError
from smartlint.options import normalize_options


def _write(path: Path, body: str) -> None:
    path.write_text(dedent(body).lstrip(), encoding="utf-8")


def test_defaults_without_config_files(tmp_path: Path) -> None:
    settings = load_settings(tmp_path, env={})

    assert settings.options == {}
    assert settings.sources == []
    assert settings.cache_dir == tmp_path / ".cache"
    assert settings.content_cache_dir == tmp_path / ".cache" / "smartlint" / "files"
    assert settings.memo_dir == tmp_path / ".cache" / "verify-process"
    assert settings.memo_enabled is True


def test_layers_apply_in_precedence_order(tmp_path: Path) -> None:
    _write(
        tmp_path / "pyproject.toml",
        """
        [project]
        name = "demo"

        [tool.smartlint]
        reporter = "stylish"
        ignore = ["generated/**"]

        [tool.smartlint.globOptions]
        dot = true
        """,
    )
    _write(
        tmp_path / ".smartlint.toml",
        """
        reporter = "json"
        warnings = true

        [globOptions]
        follow_symlinks = true
        """,
    )

    settings = load_settings(tmp_path, overrides={"warnings": False, "reporter": None}, env={})

    assert settings.options == {
        "reporter": "json",
        "ignore": ["generated/**"],
        "warnings": False,
        "globOptions": {"dot": True, "follow_symlinks": True},
    }
    assert settings.sources == [str(tmp_path / "pyproject.toml"), str(tmp_path / ".smartlint.toml"), "cli"]


def test_forced_options_still_win_over_config_files(tmp_path: Path) -> None:
    _write(
        tmp_path / ".smartlint.toml",
        """
        fix = false
        ignore = "legacy/**"
        """,
    )

    opts = normalize_options(load_settings(tmp_path, env={}).options)

    assert opts.fix is True
    assert opts.ignore[-1] == "legacy/**"


def test_pyproject_without_section_is_ignored(tmp_path: Path) -> None:
    _write(tmp_path / "pyproject.toml", '[project]\nname = "demo"\n')

    assert load_settings(tmp_path, env={}).sources == []


def test_environment_overrides(tmp_path: Path) -> None:
    cache_root = tmp_path / "elsewhere"

    settings = load_settings(tmp_path, env={"SMARTLINT_CACHE_DIR": str(cache_root), "SMARTLINT_NO_MEMO": "true"})

    assert settings.cache_dir == cache_root
    assert settings.memo_dir == cache_root / "verify-process"
    assert settings.memo_enabled is False


def test_process_environment_is_used_by_default(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SMARTLINT_NO_MEMO", "1")

    assert load_settings(tmp_path).memo_enabled is False


def test_malformed_toml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".smartlint.toml").write_text("reporter = [", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_settings(tmp_path, env={})
    assert excinfo.value.path == tmp_path / ".smartlint.toml"


def test_non_table_section_raises(tmp_path: Path) -> None:
    _write(tmp_path / "pyproject.toml", '[tool]\nsmartlint = "yes"\n')

    with pytest.raises(ConfigError):
        load_settings(tmp_path, env={})
