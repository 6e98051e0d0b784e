# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read and write source files without translating line endings."""

from __future__ import annotations

from pathlib import Path


def read_source(path: Path) -> str:
    """Return the UTF-8 text of ``path`` with ``\\r\\n`` and ``\\r`` left intact.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """

    return path.read_bytes().decode("utf-8")


def write_source(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` byte for byte as UTF-8.

    Raises:
        OSError: If the file cannot be written.
    """

    path.write_bytes(text.encode("utf-8"))


__all__ = ["read_source", "write_source"]
