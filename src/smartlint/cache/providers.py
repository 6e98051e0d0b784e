# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Key/value cache backends used by the result memoizer."""

from __future__ import annotations

import json
import logging
from abc import abstractmethod
from hashlib import sha256
from pathlib import Path
from threading import RLock
from typing import Any, Protocol, TypeAlias

LOGGER = logging.getLogger(__name__)

JsonValue: TypeAlias = Any


class CacheProvider(Protocol):
    """Define the contract implemented by memo cache backends.

    Values must be JSON-serialisable so directory-backed providers can
    round-trip them. Providers never raise for unreadable entries; a damaged
    entry is reported as a miss.
    """

    @abstractmethod
    def get(self, key: str) -> JsonValue | None:
        """Return the value stored under ``key`` or ``None`` when absent."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: JsonValue) -> None:
        """Store ``value`` under ``key``."""
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Remove every value managed by the provider."""
        raise NotImplementedError


class InMemoryCacheProvider(CacheProvider):
    """Provide an in-process cache backed by a dictionary."""

    def __init__(self) -> None:
        self._store: dict[str, JsonValue] = {}
        self._lock = RLock()

    def get(self, key: str) -> JsonValue | None:
        with self._lock:
            return self._store.get(key)

    def set(self, key: str, value: JsonValue) -> None:
        with self._lock:
            self._store[key] = value

    def clear(self) -> None:
        with self._lock:
            self._store.clear()


class DirectoryCacheProvider(CacheProvider):
    """Persist cached values on disk as JSON payloads."""

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    @property
    def directory(self) -> Path:
        """Return the directory holding the JSON entries."""

        return self._directory

    def get(self, key: str) -> JsonValue | None:
        """Return the cached value for ``key`` when a JSON payload exists."""

        path = self._path_for(key)
        if not path.is_file():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return None

    def set(self, key: str, value: JsonValue) -> None:
        """Persist ``value`` for ``key``; disk errors are logged and ignored."""

        path = self._path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(value), encoding="utf-8")
        except OSError as exc:
            LOGGER.warning("could not persist memo entry path=%s error=%s", path, exc)

    def clear(self) -> None:
        """Remove all cached JSON files managed by the provider."""

        for child in self._directory.glob("*.json"):
            try:
                child.unlink(missing_ok=True)
            except OSError:
                continue

    def _path_for(self, key: str) -> Path:
        digest = sha256(key.encode("utf-8"), usedforsecurity=False).hexdigest()
        return self._directory / f"{digest}.json"


__all__ = ["CacheProvider", "DirectoryCacheProvider", "InMemoryCacheProvider", "JsonValue"]
