"""Unit tests for import result aggregation."""

from __future__ import annotations

from keyword_import.services.keyword_import.results import (
    ImportResultAggregator,
    render_summary,
)
from keyword_import.services.keyword_import.row_parser import RowError, RowWarning


def test_aggregator_keeps_global_and_locale_counters_balanced() -> None:
    aggregator = ImportResultAggregator(format_detected="legacy")
    aggregator.inserted("en")
    aggregator.inserted("ko")
    aggregator.updated("en")
    aggregator.skipped("lasik", "ko")
    aggregator.failed("broken", "boom", "en", row=7)

    result = aggregator.result

    assert (result.total, result.inserted, result.updated, result.skipped, result.errors) == (5, 2, 1, 1, 1)
    assert result.is_balanced
    assert result.by_locale["en"].total == 3
    assert result.by_locale["ko"].skipped == 1
    assert all(counters.is_balanced for counters in result.by_locale.values())
    assert result.duplicates == ["lasik"]
    assert result.error_details[0].row == 7
    assert result.format_detected == "legacy"


def test_row_errors_count_as_errors_and_track_in_file_duplicates() -> None:
    aggregator = ImportResultAggregator()
    aggregator.row_errors(
        [
            RowError(row=2, message="Keyword is empty"),
            RowError(row=3, message="Duplicate keyword in file", keyword="lasik", locale="en", duplicate=True),
        ]
    )
    aggregator.warnings([RowWarning(row=4, message="odd row")])

    result = aggregator.result

    assert result.total == 2
    assert result.errors == 2
    assert result.duplicates_in_file == 1
    assert set(result.by_locale) == {"en"}
    assert result.by_locale["en"].errors == 1
    assert [detail.keyword for detail in result.error_details] == ["", "lasik"]
    assert result.warnings == [RowWarning(row=4, message="odd row")]


def test_render_summary_includes_locale_breakdown() -> None:
    aggregator = ImportResultAggregator()
    aggregator.inserted("ko")
    aggregator.inserted("en")
    aggregator.skipped("lasik", "en")

    assert aggregator.render_summary() == (
        "3 keywords processed: 2 inserted, 0 updated, 1 skipped, 0 errors "
        "(en: 1 inserted, 0 updated, 1 skipped, 0 errors; ko: 1 inserted, 0 updated, 0 skipped, 0 errors)"
    )


def test_render_summary_without_locales() -> None:
    assert render_summary(ImportResultAggregator().result) == (
        "0 keywords processed: 0 inserted, 0 updated, 0 skipped, 0 errors"
    )
