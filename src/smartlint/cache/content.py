# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Content-addressed store recording the last lint pass for each file."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import time
from pathlib import Path
from typing import Final, TypedDict

from pydantic import ValidationError

from ..errors import FileIOError
from ..models import CacheRecord
from ..sources import read_source, write_source

LOGGER = logging.getLogger(__name__)

INDEX_DIR: Final[str] = "index"
CONTENT_DIR: Final[str] = "content"
INTEGRITY_PREFIX: Final[str] = "sha256-"


class IndexEntry(TypedDict):
    """Serialized index entry stored for one cache key."""

    key: str
    integrity: str
    size: int
    time: int
    metadata: dict[str, object]


def _digest(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def _cache_key(path: Path | str) -> str:
    return os.fspath(Path(path).absolute())


def _atomic_write(target: Path, data: str) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    scratch = target.with_name(f".{target.name}.{os.getpid()}.tmp")
    write_source(scratch, data)
    os.replace(scratch, target)


class ContentCache:
    """Persist a :class:`CacheRecord` per file path under ``directory``.

    Each record lives in ``index/<sha256(path)>.json``. The fixed output it
    describes is stored once under ``content/<sha256(output)>``, so identical
    outputs share a blob. A record is only trusted while the file on disk
    still holds exactly the contents it was written for.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = directory
        self.writes = 0

    @property
    def directory(self) -> Path:
        """Return the root directory of the store."""

        return self._directory

    def _index_path(self, key: str) -> Path:
        return self._directory / INDEX_DIR / f"{_digest(key)}.json"

    def _content_path(self, integrity: str) -> Path:
        return self._directory / CONTENT_DIR / integrity.removeprefix(INTEGRITY_PREFIX)

    def lookup(self, file_path: Path | str) -> CacheRecord | None:
        """Return the record stored for ``file_path`` or ``None`` when absent.

        Unreadable or malformed index entries are treated as absent.
        """

        key = _cache_key(file_path)
        index_path = self._index_path(key)
        if not index_path.is_file():
            return None
        try:
            entry = json.loads(index_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            LOGGER.debug("ignoring unreadable cache index path=%s", index_path)
            return None
        if not isinstance(entry, dict) or entry.get("key") != key:
            return None
        try:
            return CacheRecord.model_validate(entry.get("metadata") or {})
        except ValidationError:
            LOGGER.debug("ignoring malformed cache record path=%s", index_path)
            return None

    @staticmethod
    def is_valid(record: CacheRecord | None, current_contents: str) -> bool:
        """Return ``True`` when ``record`` was written for exactly ``current_contents``.

        Any byte-level change, whitespace included, invalidates the record.
        """

        return record is not None and record.contents == current_contents

    def put(self, file_path: Path | str, output: str, record: CacheRecord) -> None:
        """Store ``output`` and ``record`` for ``file_path``, replacing any prior record.

        Args:
            file_path: File the record describes.
            output: Fixed file contents stored as a content-addressed blob.
            record: Metadata persisted in the index entry.

        Raises:
            FileIOError: If the store cannot be written.
        """

        key = _cache_key(file_path)
        integrity = f"{INTEGRITY_PREFIX}{_digest(output)}"
        entry = IndexEntry(
            key=key,
            integrity=integrity,
            size=len(output.encode("utf-8")),
            time=int(time.time() * 1000),
            metadata=record.model_dump(mode="json", by_alias=True),
        )
        try:
            content_path = self._content_path(integrity)
            if not content_path.is_file():
                _atomic_write(content_path, output)
            _atomic_write(self._index_path(key), json.dumps(entry))
        except OSError as exc:
            raise FileIOError(f"Cannot write cache entry for {key}: {exc}", path=key) from exc
        self.writes += 1
        LOGGER.debug("cache write path=%s integrity=%s", key, integrity[:19])

    def read_output(self, file_path: Path | str) -> str | None:
        """Return the stored output blob for ``file_path`` when present."""

        record = self.lookup(file_path)
        if record is None:
            return None
        blob = self._content_path(f"{INTEGRITY_PREFIX}{_digest(record.output)}")
        try:
            return read_source(blob)
        except (OSError, UnicodeDecodeError):
            return None

    def remove(self, file_path: Path | str) -> bool:
        """Remove the record for ``file_path``; return whether one existed."""

        index_path = self._index_path(_cache_key(file_path))
        if not index_path.is_file():
            return False
        index_path.unlink(missing_ok=True)
        return True

    def clear(self) -> None:
        """Remove every index entry and blob from the store."""

        for sub_dir in (INDEX_DIR, CONTENT_DIR):
            for child in (self._directory / sub_dir).glob("*"):
                if child.is_file():
                    child.unlink(missing_ok=True)


__all__ = ["ContentCache", "IndexEntry"]
