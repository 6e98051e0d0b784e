# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Canonical run options and the normaliser shared by every run mode."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    DEFAULT_EXTENSIONS,
    DEFAULT_IGNORE,
    DEFAULT_INPUTS,
    DEFAULT_REPORTER,
    ENGINE_CACHE_LOCATION,
    FORCED_EXTENDS,
)
from .errors import ConfigError

_LIST_FIELDS: Final[tuple[str, ...]] = ("input", "ignore", "extensions")


def arrayify(value: Any) -> list[Any]:
    """Return ``value`` as a list; scalars become one-element lists.

    Args:
        value: ``None``, a scalar, or any non-string sequence.

    Returns:
        list[Any]: ``[]`` for ``None``, the sequence items, or ``[value]``.
    """

    if value is None:
        return []
    if isinstance(value, (str, bytes)):
        return [value]
    if isinstance(value, Sequence):
        return list(value)
    return [value]


class BaseConfig(BaseModel):
    """Base rule-set configuration handed to the engine."""

    model_config = ConfigDict(extra="allow")

    extends: list[str] = Field(default_factory=list)


class RunOptions(BaseModel):
    """Canonical options consumed by the simple and batch run modes."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    exit: bool = True
    warnings: bool = False
    reporter: str = DEFAULT_REPORTER
    input: list[str] = Field(default_factory=lambda: list(DEFAULT_INPUTS))
    ignore: list[str] = Field(default_factory=lambda: list(DEFAULT_IGNORE))
    extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    report_unused_disable_directives: bool = Field(default=True, alias="reportUnusedDisableDirectives")
    fix: bool = False
    cache: bool = False
    cache_location: str = Field(default=ENGINE_CACHE_LOCATION, alias="cacheLocation")
    base_config: BaseConfig = Field(default_factory=BaseConfig, alias="baseConfig")
    use_eslintrc: bool = Field(default=True, alias="useEslintrc")
    glob_options: dict[str, Any] = Field(default_factory=dict, alias="globOptions")

    @field_validator(*_LIST_FIELDS, mode="before")
    @classmethod
    def _arrayify(cls, value: Any) -> list[Any]:
        return arrayify(value)

    @property
    def normalized_extensions(self) -> tuple[str, ...]:
        """Return extensions without leading dots, e.g. ``("js", "ts")``."""

        return tuple(ext.lstrip(".") for ext in self.extensions if ext)


def _forced_options() -> dict[str, Any]:
    return {
        "fix": True,
        "base_config": {"extends": list(FORCED_EXTENDS)},
        "use_eslintrc": False,
        "cache": True,
        "cache_location": ENGINE_CACHE_LOCATION,
    }


def _canonical_keys(options: Mapping[str, Any]) -> dict[str, Any]:
    """Map camelCase aliases in ``options`` onto field names."""

    aliases = {
        field_info.alias: name for name, field_info in RunOptions.model_fields.items() if field_info.alias is not None
    }
    return {aliases.get(key, key): value for key, value in options.items()}


def normalize_options(options: Mapping[str, Any] | RunOptions | None = None) -> RunOptions:
    """Merge defaults, user ``options``, and forced settings into :class:`RunOptions`.

    User options overlay the defaults, then forced options (fixing, caching,
    the base rule set, and disabled config-file discovery) overlay both.
    ``input``, ``ignore``, and ``extensions`` become lists, and user ignore
    entries are appended to the default ignore list instead of replacing it.
    Normalising an already normalised :class:`RunOptions` is a no-op.

    Args:
        options: User-supplied options as a mapping, an existing
            :class:`RunOptions`, or ``None``.

    Returns:
        RunOptions: Canonical options for a run.

    Raises:
        ConfigError: If an option value has an invalid type.
    """

    if isinstance(options, RunOptions):
        user = options.model_dump(exclude_unset=True)
    else:
        user = _canonical_keys(options or {})
    merged: dict[str, Any] = {**user, **_forced_options()}
    extra_ignores = [entry for entry in arrayify(user.get("ignore")) if entry not in DEFAULT_IGNORE]
    merged["ignore"] = list(DEFAULT_IGNORE) + extra_ignores
    try:
        return RunOptions.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid lint options: {exc}") from exc


__all__ = ["BaseConfig", "RunOptions", "arrayify", "normalize_options"]
