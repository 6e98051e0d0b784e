# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem traversal feeding files and their cache state to the orchestrator."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Final

from .cache.content import ContentCache
from .errors import FileIOError
from .models import CacheRecord
from .sources import read_source

_BRACE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\{([^{}]*)\}")
_GLOBSTAR: Final[str] = "**"
_GLOBSTAR_PREFIX: Final[str] = "**/"
_GLOB_CHARS: Final[frozenset[str]] = frozenset("*?[")
_MATCH_ALL: Final[re.Pattern[str]] = re.compile(".*", re.DOTALL)


@dataclass(frozen=True, slots=True)
class FileVisit:
    """State handed to the orchestrator for one discovered file.

    Attributes:
        path: Absolute file path.
        contents: Current file contents.
        record: Prior cache record for the path, if any.
    """

    path: Path
    contents: str
    record: CacheRecord | None

    @property
    def missing(self) -> bool:
        """Return ``True`` when the content cache has no record for the file."""

        return self.record is None

    @property
    def valid(self) -> bool:
        """Return ``True`` when the prior record matches the current contents."""

        return ContentCache.is_valid(self.record, self.contents)


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives in ``pattern`` into separate patterns."""

    match = _BRACE_PATTERN.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def _exclude_matchers(patterns: Iterable[str]) -> tuple[str, ...]:
    matchers: list[str] = []
    for pattern in patterns:
        for expanded in expand_braces(pattern):
            matchers.append(expanded)
            if expanded.startswith(_GLOBSTAR_PREFIX):
                matchers.append(expanded.removeprefix(_GLOBSTAR_PREFIX))
    return tuple(matchers)


def is_excluded(relative: str, matchers: Sequence[str]) -> bool:
    """Return whether the POSIX ``relative`` path matches any exclude matcher."""

    return any(fnmatchcase(relative, matcher) for matcher in matchers)


def _relative_to(path: Path, root: Path) -> Path:
    try:
        return path.relative_to(root)
    except ValueError:
        return Path(path.name)


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") and part not in {".", ".."} for part in relative.parts)


def _translate_segment(segment: str) -> str:
    out: list[str] = []
    index = 0
    while index < len(segment):
        char = segment[index]
        if char == "*":
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "[" and (close := segment.find("]", index + 2)) != -1:
            body = segment[index + 1 : close].replace("\\", "\\\\")
            if body.startswith("!"):
                body = f"^{body[1:]}"
            out.append(f"[{body}]")
            index = close
        else:
            out.append(re.escape(char))
        index += 1
    return "".join(out)


def compile_include(pattern: str) -> re.Pattern[str]:
    """Compile a POSIX include glob into a regex over base-relative paths.

    ``*`` and ``?`` stay within one path segment and ``**`` spans any number
    of segments. A match on a directory also selects every file below it.
    """

    segments = pattern.split("/")
    body: list[str] = []
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == _GLOBSTAR:
            body.append(".*" if last else "(?:.*/)?")
        else:
            body.append(_translate_segment(segment) if last else f"{_translate_segment(segment)}/")
    return re.compile(f"(?:{''.join(body)})(?:/.*)?", re.DOTALL)


def _split_static(pattern: str) -> tuple[str, str]:
    segments = pattern.split("/")
    for index, segment in enumerate(segments):
        if any(char in segment for char in _GLOB_CHARS):
            return "/".join(segments[:index]), "/".join(segments[index:])
    return pattern, ""


def _prune(directory: Path, root: Path, matchers: Sequence[str], *, dot: bool) -> bool:
    if not dot and directory.name.startswith("."):
        return True
    relative = f"{_relative_to(directory, root).as_posix()}/"
    # Only a trailing wildcard guarantees every descendant is excluded too.
    return any(matcher.endswith("*") and fnmatchcase(relative, matcher) for matcher in matchers)


@dataclass(slots=True)
class _WalkPlan:
    """Include regexes grouped by the directory they are walked from."""

    walks: dict[Path, list[re.Pattern[str]]] = field(default_factory=dict)
    files: set[Path] = field(default_factory=set)

    def add_literal(self, path: Path) -> None:
        if path.is_file():
            self.files.add(path)
        elif path.is_dir():
            self.walks.setdefault(path, []).append(_MATCH_ALL)

    def add_pattern(self, root: Path, pattern: str) -> None:
        direct = root / pattern
        if direct.exists():
            self.add_literal(direct)
            return
        for expanded in expand_braces(pattern):
            prefix, rest = _split_static(expanded)
            if rest:
                self.walks.setdefault(root / prefix, []).append(compile_include(rest))
            else:
                self.add_literal(root / prefix)


def _walk(
    base: Path,
    root: Path,
    includes: Sequence[re.Pattern[str]],
    matchers: Sequence[str],
    *,
    dot: bool,
    follow_symlinks: bool,
) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(base, followlinks=follow_symlinks):
        current = Path(dirpath)
        dirnames[:] = [name for name in dirnames if not _prune(current / name, root, matchers, dot=dot)]
        for filename in filenames:
            candidate = current / filename
            relative = candidate.relative_to(base).as_posix()
            if any(include.fullmatch(relative) for include in includes):
                yield candidate


def discover_files(
    patterns: Sequence[str],
    *,
    exclude: Sequence[str] = (),
    extensions: Sequence[str] = (),
    root: Path | None = None,
    dot: bool = False,
    follow_symlinks: bool = False,
) -> list[Path]:
    """Return files matched by ``patterns`` minus ``exclude``, in sorted order.

    Patterns sharing a literal leading directory are matched during one walk
    of that directory. Hidden and excluded directories are pruned before
    they are entered.

    Args:
        patterns: Include globs, directories, or file paths relative to ``root``.
        exclude: Exclude globs matched against root-relative POSIX paths.
        extensions: Allowed file extensions without dots; empty allows all.
        root: Directory patterns are resolved against; defaults to the cwd.
        dot: Include files inside hidden directories or named with a dot.
        follow_symlinks: Descend into symlinked directories.

    Returns:
        list[Path]: Unique absolute paths.
    """

    base = (root or Path.cwd()).absolute()
    matchers = _exclude_matchers(exclude)
    allowed = {ext.lstrip(".") for ext in extensions if ext}
    plan = _WalkPlan()
    for pattern in patterns:
        plan.add_pattern(base, pattern)
    candidates = set(plan.files)
    for start, includes in plan.walks.items():
        candidates.update(_walk(start, base, includes, matchers, dot=dot, follow_symlinks=follow_symlinks))

    found: set[Path] = set()
    for path in candidates:
        absolute = path.absolute()
        relative = _relative_to(absolute, base)
        if not dot and _is_hidden(relative):
            continue
        if allowed and absolute.suffix.lstrip(".") not in allowed:
            continue
        if is_excluded(relative.as_posix(), matchers):
            continue
        found.add(absolute)
    return sorted(found)


def load_visit(path: Path, cache: ContentCache) -> FileVisit:
    """Read ``path`` byte for byte and pair it with its prior cache record.

    Raises:
        FileIOError: If the file cannot be read as UTF-8 text.
    """

    try:
        contents = read_source(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileIOError(f"Cannot read {path}: {exc}", path=path) from exc
    return FileVisit(path=path, contents=contents, record=cache.lookup(path))


__all__ = ["FileVisit", "compile_include", "discover_files", "expand_braces", "is_excluded", "load_visit"]
