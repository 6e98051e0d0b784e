# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""On-disk memoization of the analyse-and-fix step.

The memo is keyed by the full argument values, the file contents and the
resolved configuration, rather than by file path. Identical inputs seen in
any file or any earlier run are served without calling the engine. This is
separate from the content cache, which tracks what was last written for a
given path.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock
from typing import Final

from pydantic import ValidationError

from ..models import ConfigEntry, FixResult
from .providers import CacheProvider

LOGGER = logging.getLogger(__name__)

_KEY_DELIMITER: Final[str] = "\0"

AnalyzeFn = Callable[[str, ConfigEntry], FixResult]


@dataclass(frozen=True, slots=True)
class MemoInfo:
    """Describe memo usage for a memoizer instance.

    Attributes:
        hits: Calls served from the provider.
        misses: Calls that invoked the wrapped function.
    """

    hits: int
    misses: int


def memo_key(namespace: str, contents: str, config: ConfigEntry) -> str:
    """Return the memo key for ``contents`` analysed under ``config``.

    Args:
        namespace: Identifier of the wrapped function.
        contents: Source text passed to the analysis.
        config: Resolved configuration passed to the analysis.

    Returns:
        str: Hex digest over the namespace and the canonical JSON of both arguments.
    """

    serialized = json.dumps([contents, config.to_payload()], sort_keys=True, separators=(",", ":"))
    hasher = hashlib.sha256()
    hasher.update(namespace.encode("utf-8"))
    hasher.update(_KEY_DELIMITER.encode("utf-8"))
    hasher.update(serialized.encode("utf-8"))
    return hasher.hexdigest()


class ResultMemoizer:
    """Wrap analyse-and-fix callables with a persistent memo."""

    def __init__(self, provider: CacheProvider) -> None:
        self._provider = provider
        self._lock = Lock()
        self._hits = 0
        self._misses = 0

    def wrap(self, func: AnalyzeFn, *, namespace: str | None = None) -> AnalyzeFn:
        """Return a memoized version of ``func``.

        Args:
            func: Pure function mapping ``(contents, config)`` to a :class:`FixResult`.
            namespace: Key prefix; defaults to the function's qualified name.

        Returns:
            AnalyzeFn: Callable with the same signature as ``func``.
        """

        label = namespace or getattr(func, "__qualname__", type(func).__name__)
        return _MemoizedAnalyze(memoizer=self, func=func, namespace=label)

    def lookup(self, key: str) -> FixResult | None:
        """Return the memoized result for ``key`` when a valid entry exists."""

        payload = self._provider.get(key)
        if payload is None:
            return None
        try:
            return FixResult.model_validate(payload)
        except ValidationError:
            LOGGER.debug("discarding unreadable memo entry key=%s", key)
            return None

    def store(self, key: str, result: FixResult) -> None:
        """Persist ``result`` under ``key``."""

        self._provider.set(key, result.model_dump(mode="json", by_alias=True))

    def record(self, *, hit: bool) -> None:
        """Count a memo hit or miss."""

        with self._lock:
            if hit:
                self._hits += 1
            else:
                self._misses += 1

    def cache_info(self) -> MemoInfo:
        """Return hit and miss counters accumulated by this memoizer."""

        with self._lock:
            return MemoInfo(hits=self._hits, misses=self._misses)

    def clear(self) -> None:
        """Drop every memoized entry and reset the counters."""

        self._provider.clear()
        with self._lock:
            self._hits = 0
            self._misses = 0


@dataclass(frozen=True, slots=True)
class _MemoizedAnalyze:
    """Callable returned by :meth:`ResultMemoizer.wrap`."""

    memoizer: ResultMemoizer
    func: AnalyzeFn
    namespace: str

    def __call__(self, contents: str, config: ConfigEntry) -> FixResult:
        key = memo_key(self.namespace, contents, config)
        cached = self.memoizer.lookup(key)
        if cached is not None:
            self.memoizer.record(hit=True)
            LOGGER.debug("memo hit key=%s", key[:12])
            return cached
        result = self.func(contents, config)
        self.memoizer.store(key, result)
        self.memoizer.record(hit=False)
        return result


__all__ = ["AnalyzeFn", "MemoInfo", "ResultMemoizer", "memo_key"]
