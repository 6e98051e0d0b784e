# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Incremental ESLint orchestration with content and result caching."""

from __future__ import annotations

from importlib import metadata

from .api import lint, lint_files, lint_text
from .constants import DEFAULT_EXTENSIONS, DEFAULT_IGNORE, DEFAULT_INPUT, DEFAULT_INPUTS
from .options import normalize_options
from .orchestrator import smart_lint_files

__all__ = [
    "DEFAULT_EXTENSIONS",
    "DEFAULT_IGNORE",
    "DEFAULT_INPUT",
    "DEFAULT_INPUTS",
    "__version__",
    "lint",
    "lint_files",
    "lint_text",
    "normalize_options",
    "smart_lint_files",
]

try:
    __version__ = metadata.version("smartlint")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
