"""Delimited-text format detection from the first line of an import."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

ImportFormat = Literal["legacy", "enhanced"]

ENHANCED_HEADER_TOKENS = ("keyword", "language", "competition")
ENHANCED_COLUMNS = ("keyword", "language", "search_volume", "competition", "priority", "category")
LEGACY_COLUMN_COUNT = 3

# Matched against whole cells, never substrings.
LEGACY_HEADER_CELLS = frozenset(
    {
        "키워드",
        "키워드(현지어)",
        "키워드(한국어)",
        "검색량",
        "keyword",
        "keywords",
        "keyword_native",
        "keyword_localized",
        "keyword_ko",
        "native",
        "localized",
        "search_volume",
        "search volume",
        "volume",
    }
)

VOLUME_PATTERN = re.compile(r"^(\d+)(?:\.\d+)?$")


@dataclass(frozen=True, slots=True)
class DetectedFormat:
    """Format, delimiter and header presence detected for one import."""

    format: ImportFormat
    delimiter: str
    has_header: bool = False


def is_numeric_cell(value: str) -> bool:
    return bool(VOLUME_PATTERN.match(value.replace(",", "").strip()))


def _looks_like_legacy_header(line: str) -> bool:
    cells = [part.strip().lower() for part in line.split("|")]
    if len(cells) >= LEGACY_COLUMN_COUNT and is_numeric_cell(cells[2]):
        return False
    return any(cell in LEGACY_HEADER_CELLS for cell in cells)


def detect_format(first_line: str) -> DetectedFormat:
    """Classify the payload from its first non-empty, non-comment line.

    Detection runs once per import and governs every following row.
    """
    lowered = first_line.lower()

    if "," in first_line and any(token in lowered for token in ENHANCED_HEADER_TOKENS):
        return DetectedFormat(format="enhanced", delimiter=",", has_header=True)

    if "|" in first_line:
        return DetectedFormat(
            format="legacy",
            delimiter="|",
            has_header=_looks_like_legacy_header(first_line),
        )

    return DetectedFormat(format="enhanced", delimiter=",", has_header=False)
