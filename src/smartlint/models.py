# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data models shared by the engine adapter, caches, and orchestrator."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from .constants import SEVERITY_ERROR, SEVERITY_WARNING

JsonMapping: TypeAlias = dict[str, Any]


class LintMessage(BaseModel):
    """Represent one diagnostic emitted by the analysis engine.

    Fields the engine adds beyond these (``messageId``, ``nodeType``,
    ``suggestions``) are kept as extras and written back out unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    rule_id: str | None = Field(default=None, alias="ruleId")
    severity: int = SEVERITY_WARNING
    message: str = ""
    line: int | None = None
    column: int | None = None
    end_line: int | None = Field(default=None, alias="endLine")
    end_column: int | None = Field(default=None, alias="endColumn")
    fatal: bool = False
    fix: JsonMapping | None = None

    @property
    def fixable(self) -> bool:
        """Return whether the engine attached an automatic fix."""

        return self.fix is not None


def coerce_messages(raw: Iterable[Any] | None) -> list[LintMessage]:
    """Return validated messages from ``raw``, skipping empty entries.

    Args:
        raw: Engine message payloads or :class:`LintMessage` instances.

    Returns:
        list[LintMessage]: Messages in their original order.
    """

    messages: list[LintMessage] = []
    for item in raw or ():
        if not item:
            continue
        if isinstance(item, LintMessage):
            messages.append(item)
        elif isinstance(item, Mapping):
            messages.append(LintMessage.model_validate(dict(item)))
    return messages


class ConfigEntry(BaseModel):
    """Resolved engine configuration shared by files in one directory."""

    model_config = ConfigDict(extra="allow")

    plugins: list[str] = Field(default_factory=list)
    rules: JsonMapping = Field(default_factory=dict)

    def to_payload(self) -> JsonMapping:
        """Return the configuration in the shape the engine consumes."""

        return self.model_dump(mode="json")


class FixResult(BaseModel):
    """Capture the output of one analyse-and-fix pass."""

    model_config = ConfigDict(frozen=True)

    output: str
    messages: list[LintMessage] = Field(default_factory=list)
    fixed: bool = False


class ResultSummary(BaseModel):
    """Summarise the diagnostics computed for a single file."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    file_path: str = Field(alias="filePath")
    messages: list[LintMessage] = Field(default_factory=list)
    error_count: int = Field(default=0, alias="errorCount")
    warning_count: int = Field(default=0, alias="warningCount")
    fixable_error_count: int = Field(default=0, alias="fixableErrorCount")
    fixable_warning_count: int = Field(default=0, alias="fixableWarningCount")

    @classmethod
    def from_messages(cls, file_path: Path | str, messages: Iterable[Any]) -> ResultSummary:
        """Build a summary counting ``messages`` by severity level.

        Args:
            file_path: File the messages were reported for.
            messages: Raw or validated engine messages.

        Returns:
            ResultSummary: Summary with error, warning, and fixable counts.
        """

        validated = coerce_messages(messages)
        errors = [message for message in validated if message.severity == SEVERITY_ERROR]
        warnings = [message for message in validated if message.severity == SEVERITY_WARNING]
        return cls(
            file_path=str(file_path),
            messages=validated,
            error_count=len(errors),
            warning_count=len(warnings),
            fixable_error_count=sum(1 for message in errors if message.fixable),
            fixable_warning_count=sum(1 for message in warnings if message.fixable),
        )


class CacheRecord(BaseModel):
    """Metadata persisted for a file path in the content cache."""

    model_config = ConfigDict(populate_by_name=True)

    contents: str
    output: str
    report: ResultSummary | None = None
    eslint_config: ConfigEntry | None = Field(default=None, alias="eslintConfig")


class FileResult(ResultSummary):
    """Summary of a processed file together with its fixed source."""

    source: str = ""


class FailedFile(BaseModel):
    """Record a file whose processing raised during a batch."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    file_path: str = Field(alias="filePath")
    error_type: str = Field(alias="errorType")
    message: str


class EngineResult(BaseModel):
    """Per-file entry of a raw engine report."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    file_path: str = Field(alias="filePath")
    messages: list[LintMessage] = Field(default_factory=list)
    error_count: int = Field(default=0, alias="errorCount")
    warning_count: int = Field(default=0, alias="warningCount")
    fixable_error_count: int = Field(default=0, alias="fixableErrorCount")
    fixable_warning_count: int = Field(default=0, alias="fixableWarningCount")
    output: str | None = None
    source: str | None = None


@dataclass(slots=True)
class EngineReport:
    """Raw report produced by the simple run modes."""

    results: list[EngineResult] = field(default_factory=list)
    error_count: int = 0
    warning_count: int = 0
    fixable_error_count: int = 0
    fixable_warning_count: int = 0
    format: Callable[[EngineReport], str] | None = None

    @classmethod
    def from_results(cls, results: Iterable[EngineResult]) -> EngineReport:
        """Return a report whose totals are summed from ``results``."""

        items = list(results)
        return cls(
            results=items,
            error_count=sum(item.error_count for item in items),
            warning_count=sum(item.warning_count for item in items),
            fixable_error_count=sum(item.fixable_error_count for item in items),
            fixable_warning_count=sum(item.fixable_warning_count for item in items),
        )

    def to_payload(self) -> list[JsonMapping]:
        """Return the results in the engine's JSON formatter shape."""

        return [item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in self.results]


@dataclass(slots=True)
class AggregateReport:
    """Accumulate results and totals across a batch run."""

    results: list[FileResult] = field(default_factory=list)
    failures: list[FailedFile] = field(default_factory=list)
    error_count: int = 0
    warning_count: int = 0
    fixable_error_count: int = 0
    fixable_warning_count: int = 0
    cache_writes: int = 0
    memo_hits: int = 0

    def add(self, summary: ResultSummary, source: str) -> FileResult:
        """Append ``summary`` with its fixed ``source`` and update the totals.

        Args:
            summary: Diagnostics summary for the processed file.
            source: Fixed file contents written back to disk.

        Returns:
            FileResult: The entry appended to :attr:`results`.
        """

        entry = FileResult(**summary.model_dump(), source=source)
        self.results.append(entry)
        self.error_count += summary.error_count
        self.warning_count += summary.warning_count
        self.fixable_error_count += summary.fixable_error_count
        self.fixable_warning_count += summary.fixable_warning_count
        return entry

    def record_failure(self, path: Path | str, exc: BaseException) -> FailedFile:
        """Append a failure entry describing ``exc`` raised for ``path``."""

        failure = FailedFile(file_path=str(path), error_type=type(exc).__name__, message=str(exc))
        self.failures.append(failure)
        return failure

    @property
    def ok(self) -> bool:
        """Return ``True`` when no file reported errors or failed."""

        return self.error_count == 0 and not self.failures

    def to_engine_report(self) -> EngineReport:
        """Return the batch results in raw engine report form for formatters."""

        return EngineReport(
            results=[
                EngineResult(
                    file_path=item.file_path,
                    messages=item.messages,
                    error_count=item.error_count,
                    warning_count=item.warning_count,
                    fixable_error_count=item.fixable_error_count,
                    fixable_warning_count=item.fixable_warning_count,
                    source=item.source,
                )
                for item in self.results
            ],
            error_count=self.error_count,
            warning_count=self.warning_count,
            fixable_error_count=self.fixable_error_count,
            fixable_warning_count=self.fixable_warning_count,
        )


__all__ = [
    "AggregateReport",
    "CacheRecord",
    "ConfigEntry",
    "EngineReport",
    "EngineResult",
    "FailedFile",
    "FileResult",
    "FixResult",
    "JsonMapping",
    "LintMessage",
    "ResultSummary",
    "coerce_messages",
]
