# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (status output and exit codes)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

import typer
from rich.console import Console

from ..logging import StatusKind, status_text

EXIT_OK: Final[int] = 0
EXIT_LINT_ERRORS: Final[int] = 1
EXIT_TOOL_FAILURE: Final[int] = 2


@dataclass(slots=True)
class CLILogger:
    """Print lint status lines and reports to one Rich console."""

    console: Console
    use_emoji: bool

    def _status(self, kind: StatusKind, message: str) -> None:
        self.console.print(status_text(kind, message, use_emoji=self.use_emoji))

    def fail(self, message: str) -> None:
        """Report a tool failure or a file that could not be processed."""

        self._status("fail", message)

    def ok(self, message: str) -> None:
        """Report a clean run or a completed cleanup."""

        self._status("ok", message)

    def info(self, message: str) -> None:
        self._status("info", message)

    def echo(self, message: str) -> None:
        """Write a rendered report verbatim, bypassing Rich markup."""

        typer.echo(message)


def build_cli_logger(*, emoji: bool) -> CLILogger:
    """Return a :class:`CLILogger` whose console soft-wraps long paths."""

    return CLILogger(console=Console(highlight=False, soft_wrap=True, emoji=emoji), use_emoji=emoji)


__all__ = [
    "CLILogger",
    "EXIT_LINT_ERRORS",
    "EXIT_OK",
    "EXIT_TOOL_FAILURE",
    "build_cli_logger",
]
