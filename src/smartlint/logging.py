# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Logging setup and the status lines printed by the CLI."""

from __future__ import annotations

import logging
from typing import Final, Literal

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

PACKAGE_LOGGER: Final[str] = "smartlint"

StatusKind = Literal["info", "ok", "fail"]

# kind -> (style, emoji prefix)
_STATUS_STYLES: Final[dict[str, tuple[str, str]]] = {
    "info": ("cyan", "ℹ️ "),
    "ok": ("green", "✅ "),
    "fail": ("red", "❌ "),
}


def status_text(kind: StatusKind, message: str, *, use_emoji: bool) -> Text:
    """Return ``message`` styled for ``kind`` with an optional emoji prefix."""

    style, prefix = _STATUS_STYLES[kind]
    return Text(f"{prefix if use_emoji else ''}{message}", style=style)


def configure_logging(*, debug: bool) -> logging.Logger:
    """Attach a Rich handler writing to stderr to the package logger.

    Args:
        debug: When ``True`` emit ``DEBUG`` records, otherwise only warnings
            such as skipped files and unwritable cache entries.

    Returns:
        logging.Logger: The configured ``smartlint`` logger.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        console = Console(stderr=True, highlight=False)
        logger.addHandler(RichHandler(console=console, show_path=False, markup=False))
    logger.propagate = False
    return logger


__all__ = ["PACKAGE_LOGGER", "StatusKind", "configure_logging", "status_text"]
