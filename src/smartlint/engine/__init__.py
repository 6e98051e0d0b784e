# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Analysis engine contracts and the ESLint adapter."""

from __future__ import annotations

from .base import AnalysisEngine, Formatter, Linter
from .eslint import EslintEngine, EslintLinter, NodePluginRegistry, default_engine

__all__ = [
    "AnalysisEngine",
    "EslintEngine",
    "EslintLinter",
    "Formatter",
    "Linter",
    "NodePluginRegistry",
    "default_engine",
]
