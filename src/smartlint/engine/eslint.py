# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""ESLint adapter driving the ``eslint`` and ``node`` executables."""

from __future__ import annotations

import json
import logging
import os
import subprocess
import tempfile
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from ..constants import ESLINT_BINARY_ENV_VAR
from ..errors import AnalysisError, ConfigResolutionError, FileIOError, ModuleLoadError
from ..models import ConfigEntry, EngineReport, EngineResult, FixResult, JsonMapping
from ..options import RunOptions
from ..plugins import PluginRegistry, RuleSet, plugin_package_name
from ..process_utils import run_command
from ..sources import write_source
from .base import AnalysisEngine, Formatter, Linter

LOGGER = logging.getLogger(__name__)

_ESLINT_LINT_FAILURE: Final[int] = 1
_JSON_REPORTER: Final[str] = "json"
_DEFAULT_STDIN_FILENAME: Final[str] = "<text>.js"

_FORMATTER_SCRIPT: Final[str] = """
const { ESLint } = require('eslint');
(async () => {
  const chunks = [];
  for await (const chunk of process.stdin) chunks.push(chunk);
  const results = JSON.parse(Buffer.concat(chunks).toString('utf8'));
  const formatter = await new ESLint({ cwd: process.cwd() }).loadFormatter(process.argv[1]);
  process.stdout.write(await formatter.format(results));
})().catch((error) => {
  process.stderr.write(String((error && error.stack) || error));
  process.exit(2);
});
"""

_PLUGIN_RULES_SCRIPT: Final[str] = """
const plugin = require(process.argv[1]);
process.stdout.write(JSON.stringify(Object.keys((plugin && plugin.rules) || {})));
"""


@dataclass(frozen=True, slots=True)
class NodeRuleRef:
    """Reference to a rule exported by an npm plugin package."""

    package: str
    rule: str


@contextmanager
def _temporary_config(payload: Mapping[str, Any]) -> Iterator[Path]:
    """Write ``payload`` to a temporary ESLint config file for one invocation."""

    handle = tempfile.NamedTemporaryFile(  # noqa: SIM115 - removed in the finally block
        mode="w",
        suffix=".json",
        prefix="smartlint-",
        delete=False,
        encoding="utf-8",
    )
    path = Path(handle.name)
    try:
        with handle:
            json.dump(payload, handle)
        yield path
    finally:
        path.unlink(missing_ok=True)


def _parse_results(stdout: str) -> list[EngineResult]:
    """Return engine results parsed from ESLint's ``--format json`` output.

    Raises:
        AnalysisError: If the output is not a JSON array of results.
    """

    try:
        payload = json.loads(stdout or "[]")
    except json.JSONDecodeError as exc:
        raise AnalysisError(f"ESLint produced invalid JSON output: {exc}") from exc
    if not isinstance(payload, list):
        raise AnalysisError("ESLint JSON output must be an array of results")
    try:
        return [EngineResult.model_validate(entry) for entry in payload if isinstance(entry, dict)]
    except ValidationError as exc:
        raise AnalysisError(f"Unexpected ESLint result payload: {exc}") from exc


class EslintEngine(AnalysisEngine):
    """Run ESLint through its CLI, returning structured reports."""

    def __init__(
        self,
        *,
        executable: str = "eslint",
        node: str = "node",
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> None:
        self.executable = executable
        self.node = node
        self.cwd = cwd or Path.cwd()
        self.timeout = timeout

    def _run(self, args: Sequence[str], *, input_text: str | None = None) -> subprocess.CompletedProcess[str]:
        try:
            completed = run_command(args, cwd=self.cwd, input_text=input_text, timeout=self.timeout)
        except FileNotFoundError as exc:
            raise AnalysisError(str(exc)) from exc
        except subprocess.TimeoutExpired as exc:
            raise AnalysisError(f"'{args[0]}' timed out after {exc.timeout}s") from exc
        return completed

    def run_eslint(self, args: Sequence[str], *, input_text: str | None = None) -> list[EngineResult]:
        """Run ESLint with ``args`` and parse its JSON results.

        Exit status 1 only signals lint errors; anything higher is a failure.

        Raises:
            AnalysisError: If ESLint crashes, is missing, or emits invalid JSON.
        """

        completed = self._run([self.executable, *args], input_text=input_text)
        if completed.returncode > _ESLINT_LINT_FAILURE:
            detail = completed.stderr.strip() or completed.stdout.strip()
            raise AnalysisError(f"ESLint exited with status {completed.returncode}: {detail}")
        return _parse_results(completed.stdout)

    def build_options_args(self, options: RunOptions, *, config_path: Path | None = None) -> list[str]:
        """Return ESLint CLI arguments equivalent to ``options``.

        Args:
            options: Normalised run options.
            config_path: Temporary config holding ``options.base_config``.

        Returns:
            list[str]: Arguments placed before the file patterns.
        """

        args = ["--format", _JSON_REPORTER]
        if not options.use_eslintrc:
            args.append("--no-eslintrc")
        if config_path is not None:
            args.extend(["--config", str(config_path)])
        if options.fix:
            args.append("--fix-dry-run")
        if options.cache:
            args.extend(["--cache", "--cache-location", options.cache_location])
        extensions = options.normalized_extensions
        if extensions:
            args.extend(["--ext", ",".join(f".{ext}" for ext in extensions)])
        for pattern in options.ignore:
            args.extend(["--ignore-pattern", pattern])
        if options.report_unused_disable_directives:
            args.append("--report-unused-disable-directives")
        return args

    @staticmethod
    def _base_config_payload(options: RunOptions) -> JsonMapping | None:
        payload = options.base_config.model_dump(mode="json", exclude_none=True)
        if not payload.get("extends") and len(payload) <= 1:
            return None
        return payload

    def resolve_config_for_file(self, path: Path) -> ConfigEntry:
        """Return the configuration ESLint resolves for ``path`` via ``--print-config``."""

        try:
            completed = self._run([self.executable, "--print-config", str(path)])
        except AnalysisError as exc:
            raise ConfigResolutionError(str(exc), path=path) from exc
        if completed.returncode != 0:
            detail = completed.stderr.strip() or completed.stdout.strip()
            raise ConfigResolutionError(f"Cannot resolve ESLint config for {path}: {detail}", path=path)
        try:
            return ConfigEntry.model_validate(json.loads(completed.stdout))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise ConfigResolutionError(f"Invalid ESLint config for {path}: {exc}", path=path) from exc

    def execute_on_files(self, patterns: Sequence[str], options: RunOptions) -> EngineReport:
        """Lint ``patterns`` returning a report that still carries pending fixes."""

        base_config = self._base_config_payload(options)
        if base_config is None:
            args = self.build_options_args(options)
            return EngineReport.from_results(self.run_eslint([*args, *patterns]))
        with _temporary_config(base_config) as config_path:
            args = self.build_options_args(options, config_path=config_path)
            return EngineReport.from_results(self.run_eslint([*args, *patterns]))

    def execute_on_text(self, text: str, path: str | None, options: RunOptions) -> EngineReport:
        """Lint ``text`` read from stdin; ``path`` selects parser and config."""

        text_options = options.model_copy(update={"cache": False})
        stdin_args = ["--stdin", "--stdin-filename", path or _DEFAULT_STDIN_FILENAME]
        base_config = self._base_config_payload(text_options)
        if base_config is None:
            args = self.build_options_args(text_options)
            return EngineReport.from_results(self.run_eslint([*args, *stdin_args], input_text=text))
        with _temporary_config(base_config) as config_path:
            args = self.build_options_args(text_options, config_path=config_path)
            return EngineReport.from_results(self.run_eslint([*args, *stdin_args], input_text=text))

    def apply_output_fixes(self, report: EngineReport) -> None:
        """Write each result's fixed ``output`` to its file.

        Raises:
            FileIOError: If a fixed file cannot be written.
        """

        for result in report.results:
            if result.output is None:
                continue
            target = Path(result.file_path)
            try:
                write_source(target, result.output)
            except OSError as exc:
                raise FileIOError(f"Cannot write fixes to {target}: {exc}", path=target) from exc
            LOGGER.debug("applied fixes path=%s", target)

    def create_linter(self) -> EslintLinter:
        """Return a linter bound to this engine's executables."""

        return EslintLinter(self)

    def get_formatter(self, reporter: str) -> Formatter:
        """Return a formatter for ``reporter``; ``json`` is rendered in-process."""

        if reporter == _JSON_REPORTER:
            return _json_formatter
        return NodeFormatter(engine=self, reporter=reporter)

    def run_node(self, script: str, *args: str, input_text: str | None = None) -> subprocess.CompletedProcess[str]:
        """Execute ``script`` with ``node -e`` from the engine's working directory."""

        return self._run([self.node, "-e", script, *args], input_text=input_text)


def _json_formatter(report: EngineReport) -> str:
    return json.dumps(report.to_payload())


@dataclass(frozen=True, slots=True)
class NodeFormatter:
    """Render reports with a formatter loaded through ESLint's Node API."""

    engine: EslintEngine
    reporter: str

    def __call__(self, report: EngineReport) -> str:
        """Return ``report`` rendered by the ``reporter`` formatter.

        Raises:
            AnalysisError: If the formatter cannot be loaded or fails.
        """

        completed = self.engine.run_node(_FORMATTER_SCRIPT, self.reporter, input_text=json.dumps(report.to_payload()))
        if completed.returncode != 0:
            raise AnalysisError(f"Formatter '{self.reporter}' failed: {completed.stderr.strip()}")
        return completed.stdout


class EslintLinter(Linter):
    """Linter that verifies text with an explicit config through ESLint's stdin mode."""

    def __init__(self, engine: EslintEngine) -> None:
        self._engine = engine
        self._rules: dict[str, object] = {}

    @property
    def rules(self) -> Mapping[str, object]:
        """Return rules registered by plugins."""

        return dict(self._rules)

    def define_rule(self, rule_id: str, rule: object) -> None:
        """Record ``rule_id``; ESLint resolves the rule itself from the plugin package."""

        self._rules[rule_id] = rule

    def verify_and_fix(
        self,
        contents: str,
        config: ConfigEntry,
        *,
        filename: str | None = None,
    ) -> FixResult:
        """Lint ``contents`` under ``config`` with ``--fix-dry-run``.

        Args:
            contents: Source text to analyse.
            config: Resolved configuration written to a temporary config file.
            filename: Name reported to ESLint for parser and override selection.

        Returns:
            FixResult: Fixed output (or the input when nothing changed) and the
            remaining messages.

        Raises:
            AnalysisError: If ESLint fails or returns no result.
        """

        with _temporary_config(config.to_payload()) as config_path:
            args = [
                "--format",
                _JSON_REPORTER,
                "--no-eslintrc",
                "--config",
                str(config_path),
                "--resolve-plugins-relative-to",
                str(self._engine.cwd),
                "--fix-dry-run",
                "--stdin",
                "--stdin-filename",
                filename or _DEFAULT_STDIN_FILENAME,
            ]
            results = self._engine.run_eslint(args, input_text=contents)
        if not results:
            raise AnalysisError(f"ESLint returned no result for {filename or 'stdin'}", path=filename)
        result = results[0]
        fixed = result.output is not None and result.output != contents
        return FixResult(output=result.output if result.output is not None else contents, messages=result.messages, fixed=fixed)


class NodePluginRegistry(PluginRegistry):
    """Resolve ESLint plugin packages by asking ``node`` for their rule names."""

    def __init__(self, engine: EslintEngine) -> None:
        self._engine = engine

    def resolve(self, name: str) -> RuleSet:
        """Return a rule set referencing the rules exported by plugin ``name``.

        Raises:
            ModuleLoadError: If ``node`` cannot require the plugin package.
        """

        package = plugin_package_name(name)
        try:
            completed = self._engine.run_node(_PLUGIN_RULES_SCRIPT, package)
        except AnalysisError as exc:
            raise ModuleLoadError(str(exc), plugin=name) from exc
        if completed.returncode != 0:
            raise ModuleLoadError(f"Cannot load ESLint plugin '{package}': {completed.stderr.strip()}", plugin=name)
        try:
            rule_names = json.loads(completed.stdout or "[]")
        except json.JSONDecodeError as exc:
            raise ModuleLoadError(f"Unexpected rule listing for '{package}': {exc}", plugin=name) from exc
        return RuleSet(name=name, rules={rule: NodeRuleRef(package=package, rule=rule) for rule in rule_names})


def default_engine(cwd: Path | None = None) -> EslintEngine:
    """Return an :class:`EslintEngine`, honouring ``SMARTLINT_ESLINT`` for the binary."""

    return EslintEngine(executable=os.environ.get(ESLINT_BINARY_ENV_VAR, "eslint"), cwd=cwd)


__all__ = [
    "EslintEngine",
    "EslintLinter",
    "NodeFormatter",
    "NodePluginRegistry",
    "NodeRuleRef",
    "default_engine",
]
