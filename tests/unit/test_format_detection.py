"""Unit tests for import format detection."""

from __future__ import annotations

from keyword_import.services.keyword_import.format_detection import (
    DetectedFormat,
    detect_format,
    is_numeric_cell,
)


def test_detect_format_enhanced_header() -> None:
    detected = detect_format("keyword,language,search_volume,competition,priority,category")

    assert detected == DetectedFormat(format="enhanced", delimiter=",", has_header=True)


def test_detect_format_legacy_data_line() -> None:
    detected = detect_format("a|b|100")

    assert detected.format == "legacy"
    assert detected.delimiter == "|"
    assert detected.has_header is False


def test_detect_format_legacy_header_by_volume_column() -> None:
    assert detect_format("키워드(현지어)|키워드(한국어)|검색량").has_header is True
    assert detect_format("native|localized|volume").has_header is True


def test_detect_format_legacy_search_phrase_with_volume_is_data() -> None:
    assert detect_format("search clinic korea|한국 클리닉 검색|1,200").has_header is False


def test_detect_format_legacy_two_columns_uses_header_vocabulary() -> None:
    assert detect_format("keyword|localized").has_header is True
    assert detect_format("rhinoplasty|코성형").has_header is False


def test_detect_format_defaults_to_headerless_enhanced() -> None:
    assert detect_format("안면윤곽 수술,ko,5000") == DetectedFormat(format="enhanced", delimiter=",")
    assert detect_format("just one keyword") == DetectedFormat(format="enhanced", delimiter=",")


def test_is_numeric_cell_allows_thousands_separators() -> None:
    assert is_numeric_cell("2,400")
    assert not is_numeric_cell("검색량")
    assert not is_numeric_cell("")


def test_detect_format_legacy_decimal_volume_is_data() -> None:
    assert detect_format("rhinoplasty korea cost|코성형 한국 비용|2400.0").has_header is False
    assert is_numeric_cell("2400.0")


def test_detect_format_legacy_header_words_must_fill_a_cell() -> None:
    assert detect_format("plastic surgery research|성형 연구").has_header is False
    assert detect_format("keyword finder app|키워드 검색 앱").has_header is False
    assert detect_format("Keyword|Localized").has_header is True
