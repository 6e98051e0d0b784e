# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Per-directory memo of resolved engine configuration."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from threading import Lock

from ..models import ConfigEntry

LOGGER = logging.getLogger(__name__)

ConfigResolver = Callable[[Path], ConfigEntry]


class DirectoryConfigCache:
    """Map directories to their resolved configuration for one session.

    The first lookup for a directory calls the resolver; later lookups reuse
    the stored entry. Entries are never evicted, since directory-level
    configuration is treated as stable for the lifetime of a batch.
    """

    def __init__(self) -> None:
        self._entries: dict[Path, ConfigEntry] = {}
        self._lock = Lock()
        self.hits = 0
        self.misses = 0

    def get_config(self, dir_path: Path, resolver: ConfigResolver) -> ConfigEntry:
        """Return the configuration for ``dir_path``, resolving it on first use.

        Args:
            dir_path: Directory whose configuration is requested.
            resolver: Callable invoked with ``dir_path`` on the first request.

        Returns:
            ConfigEntry: Stored or freshly resolved configuration.

        Raises:
            ConfigResolutionError: Propagated from ``resolver``; nothing is stored.
        """

        with self._lock:
            cached = self._entries.get(dir_path)
            if cached is not None:
                self.hits += 1
                return cached
            entry = resolver(dir_path)
            self._entries[dir_path] = entry
            self.misses += 1
            LOGGER.debug("resolved config dir=%s plugins=%s", dir_path, entry.plugins)
            return entry

    def __contains__(self, dir_path: object) -> bool:
        with self._lock:
            return dir_path in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["ConfigResolver", "DirectoryConfigCache"]
