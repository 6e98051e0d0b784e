# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Provide the caches used by batch linting and their factories."""

from __future__ import annotations

from pathlib import Path

from .content import ContentCache
from .directory import ConfigResolver, DirectoryConfigCache
from .memo import MemoInfo, ResultMemoizer, memo_key
from .providers import CacheProvider, DirectoryCacheProvider, InMemoryCacheProvider


def create_memoizer(directory: Path | None) -> ResultMemoizer:
    """Build a memoizer persisting to ``directory``, or in memory when ``None``.

    Args:
        directory: Memo directory, typically ``.cache/verify-process``.

    Returns:
        ResultMemoizer: Memoizer bound to the selected provider.
    """

    provider: CacheProvider = InMemoryCacheProvider() if directory is None else DirectoryCacheProvider(directory)
    return ResultMemoizer(provider)


__all__ = [
    "CacheProvider",
    "ConfigResolver",
    "ContentCache",
    "DirectoryCacheProvider",
    "DirectoryConfigCache",
    "InMemoryCacheProvider",
    "MemoInfo",
    "ResultMemoizer",
    "create_memoizer",
    "memo_key",
]
