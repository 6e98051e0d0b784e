# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Plugin registries and the loader that registers plugin rules on a linter.

Registries turn a plugin name taken from a resolved configuration into a
:class:`RuleSet`. The entry-point registry follows the same
:mod:`importlib.metadata` conventions used for CLI extensions, so third-party
packages can contribute rule sets without modifying smartlint.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from importlib import import_module, metadata
from threading import Lock
from types import ModuleType
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .constants import ESLINT_PLUGIN_PREFIX, PLUGIN_ENTRY_POINT_GROUP, PYTHON_PLUGIN_PREFIX
from .errors import ModuleLoadError
from .models import ConfigEntry

if TYPE_CHECKING:
    from .engine.base import Linter

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Rules exported by a single plugin, keyed by bare rule name."""

    name: str
    rules: Mapping[str, object] = field(default_factory=dict)

    def qualified(self) -> Iterable[tuple[str, object]]:
        """Yield ``(<plugin>/<rule>, rule)`` pairs for registration."""

        for rule_name, rule in self.rules.items():
            yield f"{self.name}/{rule_name}", rule


@runtime_checkable
class PluginRegistry(Protocol):
    """Resolve plugin names to the rule sets they export."""

    @abstractmethod
    def resolve(self, name: str) -> RuleSet:
        """Return the rule set exported by plugin ``name``.

        Raises:
            ModuleLoadError: If the plugin cannot be located or loaded.
        """
        raise NotImplementedError


def plugin_package_name(name: str) -> str:
    """Return the npm package that provides ESLint plugin ``name``.

    Scoped names (``@scope/...``) are used as-is; bare names gain the
    ``eslint-plugin-`` prefix.
    """

    if name.startswith("@") or name.startswith(ESLINT_PLUGIN_PREFIX):
        return name
    return f"{ESLINT_PLUGIN_PREFIX}{name}"


def python_module_name(name: str) -> str:
    """Return the Python module expected to provide plugin ``name``.

    ``@scope/pkg`` maps to ``scope.pkg`` and bare names map to
    ``smartlint_plugin_<name>``; dashes become underscores.
    """

    if name.startswith("@"):
        return name[1:].replace("/", ".").replace("-", "_")
    return f"{PYTHON_PLUGIN_PREFIX}{name.replace('-', '_')}"


class StaticPluginRegistry(PluginRegistry):
    """Serve rule sets from an in-process table."""

    def __init__(self, plugins: Mapping[str, Mapping[str, object]] | None = None) -> None:
        self._plugins = {name: dict(rules) for name, rules in (plugins or {}).items()}
        self.resolved: list[str] = []

    def resolve(self, name: str) -> RuleSet:
        """Return the rule set registered for ``name``."""

        rules = self._plugins.get(name)
        if rules is None:
            raise ModuleLoadError(f"Plugin '{name}' is not registered", plugin=name)
        self.resolved.append(name)
        return RuleSet(name=name, rules=rules)


class EntryPointPluginRegistry(PluginRegistry):
    """Load Python rule sets from entry points or conventionally named modules."""

    def __init__(self, group: str = PLUGIN_ENTRY_POINT_GROUP) -> None:
        self._group = group

    def resolve(self, name: str) -> RuleSet:
        """Return the rule set exported by the plugin module for ``name``.

        Args:
            name: Plugin name as it appears in a configuration's ``plugins`` list.

        Returns:
            RuleSet: Rules found on the module's ``rules`` mapping.

        Raises:
            ModuleLoadError: If the module cannot be imported or exports no rules.
        """

        module = self._load_module(name)
        rules = getattr(module, "rules", None)
        if not isinstance(rules, Mapping):
            raise ModuleLoadError(f"Plugin '{name}' does not export a 'rules' mapping", plugin=name)
        return RuleSet(name=name, rules=dict(rules))

    def _load_module(self, name: str) -> ModuleType | object:
        for entry_point in metadata.entry_points(group=self._group):
            if entry_point.name == name:
                try:
                    return entry_point.load()
                except (ImportError, AttributeError) as exc:
                    raise ModuleLoadError(f"Cannot load plugin '{name}': {exc}", plugin=name) from exc
        module_name = python_module_name(name)
        try:
            return import_module(module_name)
        except ImportError as exc:
            raise ModuleLoadError(f"Cannot import plugin '{name}' from '{module_name}': {exc}", plugin=name) from exc


class PluginLoader:
    """Register plugin rules on a linter at most once per plugin."""

    def __init__(self, registry: PluginRegistry) -> None:
        self._registry = registry
        self._loaded: dict[str, RuleSet] = {}
        self._lock = Lock()

    @property
    def loaded(self) -> tuple[str, ...]:
        """Return the names of plugins registered so far."""

        with self._lock:
            return tuple(self._loaded)

    def ensure_loaded(self, config: ConfigEntry, linter: Linter) -> tuple[str, ...]:
        """Register rules for every plugin in ``config`` not yet loaded.

        Args:
            config: Resolved configuration whose ``plugins`` list is consulted.
            linter: Linter receiving ``<plugin>/<rule>`` definitions.

        Returns:
            tuple[str, ...]: Plugins newly registered by this call.

        Raises:
            ModuleLoadError: If a plugin cannot be resolved.
        """

        registered: list[str] = []
        with self._lock:
            for name in config.plugins:
                if name in self._loaded:
                    continue
                rule_set = self._registry.resolve(name)
                for rule_id, rule in rule_set.qualified():
                    linter.define_rule(rule_id, rule)
                self._loaded[name] = rule_set
                registered.append(name)
                LOGGER.debug("registered plugin=%s rules=%d", name, len(rule_set.rules))
        return tuple(registered)


__all__ = [
    "EntryPointPluginRegistry",
    "PluginLoader",
    "PluginRegistry",
    "RuleSet",
    "StaticPluginRegistry",
    "plugin_package_name",
    "python_module_name",
]
