# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Removal of the content cache, result memo, and engine cache."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from .config import Settings
from .constants import ENGINE_CACHE_LOCATION


@dataclass(slots=True)
class CleanResult:
    """Capture the outcome of a cache cleanup."""

    removed: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.removed or self.skipped)


def cache_targets(settings: Settings) -> list[Path]:
    """Return every cache location smartlint writes for ``settings``."""

    return [
        settings.content_cache_dir,
        settings.memo_dir,
        (settings.root / ENGINE_CACHE_LOCATION).resolve(),
    ]


def clean_caches(settings: Settings, *, dry_run: bool = False) -> CleanResult:
    """Delete existing cache locations, or only list them when ``dry_run``.

    Args:
        settings: Settings providing the root and cache directories.
        dry_run: When ``True`` report the targets without removing them.

    Returns:
        CleanResult: Paths removed, or skipped in dry-run mode.
    """

    result = CleanResult()
    for target in cache_targets(settings):
        if not target.exists():
            continue
        if dry_run:
            result.skipped.append(target)
            continue
        if target.is_dir():
            shutil.rmtree(target)
        else:
            target.unlink()
        result.removed.append(target)
    return result


__all__ = ["CleanResult", "cache_targets", "clean_caches"]
