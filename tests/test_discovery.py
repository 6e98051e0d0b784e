# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for file discovery and cache visits."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from smartlint.cache import ContentCache
from smartlint.constants import DEFAULT_EXTENSIONS, DEFAULT_IGNORE, DEFAULT_INPUTS
from smartlint import discovery
from smartlint.discovery import compile_include, discover_files, expand_braces, is_excluded, load_visit
from smartlint.errors import FileIOError
from smartlint.models import CacheRecord


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    files = [
        "src/a.js",
        "src/b.ts",
        "src/readme.md",
        "src/node_modules/x.js",
        "src/.hidden/z.js",
        "src/lib.min.js",
        "node_modules/y.js",
        "dist/c.js",
        "tmp/d.js",
        "temp/e.js",
        "test/f.test.js",
    ]
    for name in files:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("// file\n", encoding="utf-8")
    return tmp_path


def _relative(paths: list[Path], root: Path) -> list[str]:
    return [path.relative_to(root).as_posix() for path in paths]


def test_directory_pattern_applies_filters(tree: Path) -> None:
    found = discover_files(["src"], exclude=DEFAULT_IGNORE, extensions=DEFAULT_EXTENSIONS, root=tree)

    assert _relative(found, tree) == ["src/a.js", "src/b.ts"]


def test_glob_pattern_honours_default_ignores(tree: Path) -> None:
    found = discover_files(["**/*.js"], exclude=DEFAULT_IGNORE, extensions=DEFAULT_EXTENSIONS, root=tree)

    assert _relative(found, tree) == ["src/a.js", "test/f.test.js"]


def test_hidden_files_need_dot(tree: Path) -> None:
    found = discover_files(["src"], extensions=["js"], root=tree, dot=True)

    assert "src/.hidden/z.js" in _relative(found, tree)


def test_explicit_file_and_duplicates(tree: Path) -> None:
    found = discover_files(["src/a.js", "src/*.js"], extensions=["js"], root=tree)

    assert _relative(found, tree) == ["src/a.js", "src/lib.min.js"]


def test_brace_expansion() -> None:
    assert expand_braces("{tmp,temp}/**") == ["tmp/**", "temp/**"]
    assert expand_braces("{a,b}/{c,d}") == ["a/c", "a/d", "b/c", "b/d"]
    assert expand_braces("plain") == ["plain"]


def test_is_excluded_matches_globstar_prefix() -> None:
    assert is_excluded("node_modules/pkg/index.js", ["**/node_modules/**", "node_modules/**"])
    assert not is_excluded("src/index.js", ["**/node_modules/**"])


def test_load_visit_reports_cache_state(tmp_path: Path) -> None:
    cache = ContentCache(tmp_path / "cache")
    source = tmp_path / "a.js"
    source.write_text("one", encoding="utf-8")

    first = load_visit(source, cache)
    assert first.missing
    assert not first.valid

    cache.put(source, "one", CacheRecord(contents="one", output="one"))
    second = load_visit(source, cache)
    assert not second.missing
    assert second.valid

    source.write_text("two", encoding="utf-8")
    third = load_visit(source, cache)
    assert not third.missing
    assert not third.valid


def test_load_visit_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileIOError):
        load_visit(tmp_path / "gone.js", ContentCache(tmp_path / "cache"))


def test_load_visit_keeps_line_endings(tmp_path: Path) -> None:
    cache = ContentCache(tmp_path / "cache")
    source = tmp_path / "a.js"
    source.write_bytes(b"a();\n")
    cache.put(source, "a();\n", CacheRecord(contents="a();\n", output="a();\n"))

    source.write_bytes(b"a();\r\n")
    visit = load_visit(source, cache)

    assert visit.contents == "a();\r\n"
    assert not visit.valid


def test_include_globs_stay_within_segments() -> None:
    assert compile_include("*.js").fullmatch("a.js")
    assert not compile_include("*.js").fullmatch("lib/a.js")
    assert compile_include("**/*.js").fullmatch("a.js")
    assert compile_include("**/*.js").fullmatch("lib/deep/a.js")
    assert compile_include("**/src/**").fullmatch("pkg/src/a/b.ts")
    assert not compile_include("**/src/**").fullmatch("pkg/source/a.ts")
    assert compile_include("[!b]*.js").fullmatch("a.js")
    assert not compile_include("[!b]*.js").fullmatch("b.js")


def test_excluded_directories_are_never_entered(tree: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    nested = tree / "node_modules" / "pkg" / "src"
    nested.mkdir(parents=True)
    (nested / "index.js").write_text("// dep\n", encoding="utf-8")
    visited: list[str] = []
    real_walk = os.walk

    def recording_walk(top: Path, *args: object, **kwargs: object):
        for entry in real_walk(top, *args, **kwargs):
            visited.append(Path(entry[0]).relative_to(tree).as_posix())
            yield entry

    monkeypatch.setattr(discovery.os, "walk", recording_walk)

    found = discover_files(list(DEFAULT_INPUTS), exclude=DEFAULT_IGNORE, extensions=DEFAULT_EXTENSIONS, root=tree)

    assert _relative(found, tree) == ["src/a.js", "src/b.ts", "test/f.test.js"]
    assert not [entry for entry in visited if "node_modules" in entry or entry.startswith("dist")]
    assert len(visited) == len(set(visited))
