# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import logging
import shutil

# Bandit: subprocess usage is intentional; the wrapper never enables ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from pathlib import Path

LOGGER = logging.getLogger(__name__)


def resolve_argv(args: Sequence[str]) -> list[str]:
    """Return ``args`` with the executable replaced by its absolute path.

    Raises:
        ValueError: If ``args`` is empty.
        FileNotFoundError: If the executable is not on ``PATH``.
    """

    if not args:
        raise ValueError("cannot run an empty command")
    executable, *rest = args
    if Path(executable).is_absolute():
        return [executable, *rest]
    located = shutil.which(executable)
    if located is None:
        raise FileNotFoundError(f"Executable '{executable}' was not found on PATH")
    return [located, *rest]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    input_text: str | None = None,
    check: bool = False,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Execute ``args`` after resolving the executable on ``PATH``.

    Args:
        args: Command and arguments; the first entry is resolved with :func:`shutil.which`.
        cwd: Working directory for the child process.
        env: Optional environment replacing the inherited one.
        input_text: Text written to the child's stdin.
        check: Raise :class:`subprocess.CalledProcessError` on non-zero exit.
        timeout: Optional timeout in seconds.

    Returns:
        subprocess.CompletedProcess[str]: Completed process with captured text output.

    Raises:
        FileNotFoundError: If the executable cannot be found.
    """

    argv = resolve_argv(args)
    LOGGER.debug("run command=%s cwd=%s", " ".join(argv), cwd)
    return subprocess.run(  # nosec B603
        argv,
        cwd=str(cwd) if cwd is not None else None,
        env=dict(env) if env is not None else None,
        input=input_text,
        check=check,
        capture_output=True,
        text=True,
        timeout=timeout,
    )


__all__ = ["resolve_argv", "run_command"]
