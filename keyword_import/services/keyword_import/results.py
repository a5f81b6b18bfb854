"""Import outcome aggregation and summary rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from keyword_import.services.keyword_import.row_parser import (
    ParsedFormat,
    RowError,
    RowWarning,
)

Outcome = Literal["inserted", "updated", "skipped", "error"]


@dataclass(slots=True)
class OutcomeCounters:
    total: int = 0
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0

    def add(self, outcome: Outcome) -> None:
        self.total += 1
        if outcome == "inserted":
            self.inserted += 1
        elif outcome == "updated":
            self.updated += 1
        elif outcome == "skipped":
            self.skipped += 1
        else:
            self.errors += 1

    @property
    def is_balanced(self) -> bool:
        return self.total == self.inserted + self.updated + self.skipped + self.errors


@dataclass(slots=True)
class ErrorDetail:
    keyword: str
    error: str
    row: int | None = None


@dataclass(slots=True)
class ImportResult(OutcomeCounters):
    """Everything that happened to every row of one import call."""

    duplicates: list[str] = field(default_factory=list)
    error_details: list[ErrorDetail] = field(default_factory=list)
    by_locale: dict[str, OutcomeCounters] = field(default_factory=dict)
    warnings: list[RowWarning] = field(default_factory=list)
    format_detected: ParsedFormat = "enhanced"
    duplicates_in_file: int = 0


class ImportResultAggregator:
    """Folds per-row and per-record outcomes into global and per-locale counters.

    Every outcome is recorded exactly once, so `total` always equals the sum
    of the four outcome counters.
    """

    def __init__(self, *, format_detected: ParsedFormat = "enhanced") -> None:
        self._result = ImportResult(format_detected=format_detected)

    def _record(self, outcome: Outcome, locale: str | None) -> None:
        self._result.add(outcome)
        if locale is not None:
            self._result.by_locale.setdefault(locale, OutcomeCounters()).add(outcome)

    def inserted(self, locale: str) -> None:
        self._record("inserted", locale)

    def updated(self, locale: str) -> None:
        self._record("updated", locale)

    def skipped(self, keyword: str, locale: str) -> None:
        self._result.duplicates.append(keyword)
        self._record("skipped", locale)

    def failed(self, keyword: str, error: str, locale: str | None, row: int | None = None) -> None:
        self._result.error_details.append(ErrorDetail(keyword=keyword, error=error, row=row))
        self._record("error", locale)

    def row_errors(self, errors: list[RowError]) -> None:
        for error in errors:
            self.failed(error.keyword or error.value or "", error.message, error.locale, error.row)
            if error.duplicate:
                self._result.duplicates_in_file += 1

    def warnings(self, warnings: list[RowWarning]) -> None:
        self._result.warnings.extend(warnings)

    @property
    def result(self) -> ImportResult:
        return self._result

    def render_summary(self) -> str:
        """Human-readable totals followed by a per-locale breakdown."""
        return render_summary(self._result)


def render_summary(result: ImportResult) -> str:
    headline = (
        f"{result.total} keywords processed: {result.inserted} inserted, "
        f"{result.updated} updated, {result.skipped} skipped, {result.errors} errors"
    )
    if not result.by_locale:
        return headline

    breakdown = "; ".join(
        f"{locale}: {counts.inserted} inserted, {counts.updated} updated, "
        f"{counts.skipped} skipped, {counts.errors} errors"
        for locale, counts in sorted(result.by_locale.items())
    )
    return f"{headline} ({breakdown})"
