# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exceptions raised while configuring and running lint batches."""

from __future__ import annotations

from pathlib import Path


class SmartLintError(RuntimeError):
    """Base class for failures surfaced by smartlint operations."""

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        """Create the error with a ``message`` and the file it concerns.

        Args:
            message: Human-readable description of the failure.
            path: Optional file path the failure is attributed to.
        """

        super().__init__(message)
        self.path = Path(path) if path is not None else None


class ConfigError(SmartLintError):
    """Raised when user options or configuration files are invalid."""


class ConfigResolutionError(SmartLintError):
    """Raised when the engine cannot resolve configuration for a file."""


class ModuleLoadError(SmartLintError):
    """Raised when a plugin module cannot be located or imported."""

    def __init__(self, message: str, *, plugin: str, path: Path | str | None = None) -> None:
        super().__init__(message, path=path)
        self.plugin = plugin


class AnalysisError(SmartLintError):
    """Raised when the analysis engine fails to lint or fix a source."""


class FileIOError(SmartLintError):
    """Raised when a source file or cache entry cannot be read or written."""


__all__ = (
    "AnalysisError",
    "ConfigError",
    "ConfigResolutionError",
    "FileIOError",
    "ModuleLoadError",
    "SmartLintError",
)
