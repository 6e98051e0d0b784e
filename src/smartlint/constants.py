# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Default globs, extensions, and forced engine settings."""

from __future__ import annotations

from pathlib import Path
from typing import Final

DEFAULT_IGNORE: Final[tuple[str, ...]] = (
    "**/node_modules/**",
    "**/bower_components/**",
    "flow-typed/**",
    "coverage/**",
    "**/*fixture*/**",
    "{tmp,temp}/**",
    "**/*.min.js",
    "**/bundle.js",
    "vendor/**",
    "dist/**",
)

DEFAULT_INPUTS: Final[tuple[str, ...]] = ("**/src/**", "**/*test*/**")
DEFAULT_INPUT: Final[tuple[str, ...]] = DEFAULT_INPUTS
DEFAULT_EXTENSIONS: Final[tuple[str, ...]] = ("js", "jsx", "cjs", "mjs", "ts", "tsx")
DEFAULT_REPORTER: Final[str] = "codeframe"

FORCED_EXTENDS: Final[tuple[str, ...]] = (
    "@tunnckocore/eslint-config",
    "@tunnckocore/eslint-config/mdx",
    "@tunnckocore/eslint-config/jest",
    "@tunnckocore/eslint-config/node",
    "@tunnckocore/eslint-config/promise",
    "@tunnckocore/eslint-config/unicorn",
)
ENGINE_CACHE_LOCATION: Final[str] = "./.eslintcache"

CACHE_ROOT_NAME: Final[str] = ".cache"
MEMO_DIR_NAME: Final[str] = "verify-process"
CONTENT_CACHE_DIR_NAME: Final[str] = "smartlint"
CONTENT_CACHE_SUBDIR: Final[str] = "files"

CACHE_DIR_ENV_VAR: Final[str] = "SMARTLINT_CACHE_DIR"
NO_MEMO_ENV_VAR: Final[str] = "SMARTLINT_NO_MEMO"
ESLINT_BINARY_ENV_VAR: Final[str] = "SMARTLINT_ESLINT"

CONFIG_FILE_NAME: Final[str] = ".smartlint.toml"
PYPROJECT_FILE_NAME: Final[str] = "pyproject.toml"
PYPROJECT_SECTION_KEY: Final[str] = "smartlint"

ESLINT_PLUGIN_PREFIX: Final[str] = "eslint-plugin-"
PYTHON_PLUGIN_PREFIX: Final[str] = "smartlint_plugin_"
PLUGIN_ENTRY_POINT_GROUP: Final[str] = "smartlint.plugins"

SEVERITY_ERROR: Final[int] = 2
SEVERITY_WARNING: Final[int] = 1


def default_cache_root(cwd: Path | None = None) -> Path:
    """Return the directory holding the memo and content caches.

    Args:
        cwd: Working directory the cache lives under; defaults to the process cwd.

    Returns:
        Path: ``<cwd>/.cache``.
    """

    return (cwd or Path.cwd()) / CACHE_ROOT_NAME


__all__ = [
    "CACHE_DIR_ENV_VAR",
    "CONFIG_FILE_NAME",
    "CONTENT_CACHE_DIR_NAME",
    "CONTENT_CACHE_SUBDIR",
    "DEFAULT_EXTENSIONS",
    "DEFAULT_IGNORE",
    "DEFAULT_INPUT",
    "DEFAULT_INPUTS",
    "DEFAULT_REPORTER",
    "ENGINE_CACHE_LOCATION",
    "ESLINT_BINARY_ENV_VAR",
    "ESLINT_PLUGIN_PREFIX",
    "FORCED_EXTENDS",
    "MEMO_DIR_NAME",
    "NO_MEMO_ENV_VAR",
    "PLUGIN_ENTRY_POINT_GROUP",
    "PYPROJECT_FILE_NAME",
    "PYPROJECT_SECTION_KEY",
    "PYTHON_PLUGIN_PREFIX",
    "SEVERITY_ERROR",
    "SEVERITY_WARNING",
    "default_cache_root",
]
