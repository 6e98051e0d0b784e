# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Contracts implemented by analysis engine adapters."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol, TypeAlias, runtime_checkable

from ..models import ConfigEntry, EngineReport, FixResult
from ..options import RunOptions

Formatter: TypeAlias = Callable[[EngineReport], str]


@runtime_checkable
class Linter(Protocol):
    """Define the in-process linter used by the batch orchestrator.

    A linter owns the rules registered by plugins and performs the pure
    analyse-and-fix step. Implementations must return the same
    :class:`FixResult` for the same contents and configuration.
    """

    @abstractmethod
    def define_rule(self, rule_id: str, rule: object) -> None:
        """Register ``rule`` under ``rule_id``; re-registering replaces it.

        Args:
            rule_id: Identifier in ``<plugin>/<rule>`` form.
            rule: Opaque rule object produced by a plugin registry.
        """
        raise NotImplementedError

    @abstractmethod
    def verify_and_fix(
        self,
        contents: str,
        config: ConfigEntry,
        *,
        filename: str | None = None,
    ) -> FixResult:
        """Lint ``contents`` under ``config`` applying every available fix.

        Args:
            contents: Source text to analyse.
            config: Resolved configuration for the file's directory.
            filename: Optional file name used by the engine for parser selection.

        Returns:
            FixResult: Fixed output and the messages remaining after fixing.

        Raises:
            AnalysisError: If the engine fails to analyse the source.
        """
        raise NotImplementedError


@runtime_checkable
class AnalysisEngine(Protocol):
    """Define the operations consumed from the external analysis engine."""

    @abstractmethod
    def resolve_config_for_file(self, path: Path) -> ConfigEntry:
        """Return the configuration the engine would apply to ``path``.

        Raises:
            ConfigResolutionError: If the configuration cannot be resolved.
        """
        raise NotImplementedError

    @abstractmethod
    def execute_on_files(self, patterns: Sequence[str], options: RunOptions) -> EngineReport:
        """Lint the files matched by ``patterns`` and return the raw report.

        Fixes are computed but only written by :meth:`apply_output_fixes`.
        """
        raise NotImplementedError

    @abstractmethod
    def execute_on_text(self, text: str, path: str | None, options: RunOptions) -> EngineReport:
        """Lint ``text`` as if it were the contents of ``path``."""
        raise NotImplementedError

    @abstractmethod
    def apply_output_fixes(self, report: EngineReport) -> None:
        """Write fixed output recorded in ``report`` back to each file."""
        raise NotImplementedError

    @abstractmethod
    def create_linter(self) -> Linter:
        """Return a fresh linter instance with no plugin rules registered."""
        raise NotImplementedError

    @abstractmethod
    def get_formatter(self, reporter: str) -> Formatter:
        """Return a callable rendering an :class:`EngineReport` with ``reporter``."""
        raise NotImplementedError


__all__ = ["AnalysisEngine", "Formatter", "Linter"]
