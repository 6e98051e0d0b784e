# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layered project configuration read from TOML files and the environment."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    CACHE_DIR_ENV_VAR,
    CONFIG_FILE_NAME,
    CONTENT_CACHE_DIR_NAME,
    CONTENT_CACHE_SUBDIR,
    MEMO_DIR_NAME,
    NO_MEMO_ENV_VAR,
    PYPROJECT_FILE_NAME,
    PYPROJECT_SECTION_KEY,
    default_cache_root,
)
from .errors import ConfigError

_TOOL_KEY: Final[str] = "tool"
_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


class Settings(BaseModel):
    """Project settings resolved before option normalisation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    root: Path
    options: dict[str, Any] = Field(default_factory=dict)
    cache_dir: Path
    memo_enabled: bool = True
    sources: list[str] = Field(default_factory=list)

    @property
    def content_cache_dir(self) -> Path:
        """Return the directory backing the persistent content cache."""

        return self.cache_dir / CONTENT_CACHE_DIR_NAME / CONTENT_CACHE_SUBDIR

    @property
    def memo_dir(self) -> Path:
        """Return the directory backing the on-disk result memo."""

        return self.cache_dir / MEMO_DIR_NAME


def _read_toml(path: Path) -> dict[str, Any]:
    """Return the parsed TOML document at ``path``.

    Raises:
        ConfigError: If the document cannot be read or parsed.
    """

    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Unable to read configuration at {path}: {exc}", path=path) from exc
    return dict(data)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, MutableMapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(current, value)
        else:
            result[key] = value
    return result


def _pyproject_section(path: Path) -> Mapping[str, Any]:
    tool_section = _read_toml(path).get(_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return {}
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {path} must be a table", path=path)
    return section


def load_settings(
    root: Path,
    *,
    overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """Resolve settings for ``root`` honouring file, environment, and CLI layers.

    Precedence from lowest to highest: ``[tool.smartlint]`` in
    ``pyproject.toml``, ``.smartlint.toml``, then ``overrides``. Forced run
    options are applied later by :func:`smartlint.options.normalize_options`.

    Args:
        root: Project root containing the configuration files.
        overrides: Option values supplied on the command line.
        env: Optional environment mapping used instead of :data:`os.environ`.

    Returns:
        Settings: Merged options plus cache locations.

    Raises:
        ConfigError: If a configuration file is malformed.
    """

    environment = os.environ if env is None else env
    options: dict[str, Any] = {}
    sources: list[str] = []

    pyproject = root / PYPROJECT_FILE_NAME
    if pyproject.is_file():
        section = _pyproject_section(pyproject)
        if section:
            options = _deep_merge(options, section)
            sources.append(str(pyproject))

    local_config = root / CONFIG_FILE_NAME
    if local_config.is_file():
        options = _deep_merge(options, _read_toml(local_config))
        sources.append(str(local_config))

    if overrides:
        options = _deep_merge(options, {key: value for key, value in overrides.items() if value is not None})
        sources.append("cli")

    cache_override = environment.get(CACHE_DIR_ENV_VAR)
    cache_dir = Path(cache_override).expanduser() if cache_override else default_cache_root(root)
    memo_enabled = environment.get(NO_MEMO_ENV_VAR, "").strip().lower() not in _TRUTHY
    return Settings(root=root, options=options, cache_dir=cache_dir, memo_enabled=memo_enabled, sources=sources)


__all__ = ["Settings", "load_settings"]
