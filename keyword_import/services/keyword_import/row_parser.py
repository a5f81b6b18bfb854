"""Row parsing for bulk keyword imports.

Turns delimited text (legacy pipe format or header-driven comma format) or
pre-parsed records into validated `ParsedKeyword`s. A malformed row never
aborts the batch: it is recorded as a `RowError` and parsing continues.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Literal

from keyword_import.schemas.keyword_import import KeywordRecordIn
from keyword_import.services.keyword_import.competition import (
    CompetitionBucket,
    parse_competition,
)
from keyword_import.services.keyword_import.format_detection import (
    ENHANCED_COLUMNS,
    LEGACY_COLUMN_COUNT,
    VOLUME_PATTERN,
    DetectedFormat,
    detect_format,
)
from keyword_import.services.keyword_import.locales import (
    SUPPORTED_LOCALES,
    LocaleTag,
    detect_locale,
)
from keyword_import.services.keyword_import.priority import calculate_priority

logger = logging.getLogger(__name__)

MAX_KEYWORD_LENGTH = 200
DEFAULT_CATEGORY = "general"
DEFAULT_COLUMN_POSITIONS = {name: index for index, name in enumerate(ENHANCED_COLUMNS)}

_LINE_SPLIT = re.compile(r"\r?\n")
_PUNCTUATION_ONLY = re.compile(r"^[\s\-_.,;:!?'\"]+$")
_CANONICAL_LOCALES = {tag.lower(): tag for tag in SUPPORTED_LOCALES}

ParsedFormat = Literal["legacy", "enhanced", "records"]


@dataclass(frozen=True, slots=True)
class ParsedKeyword:
    """A validated keyword row, not yet reconciled against the store."""

    keyword: str
    locale: LocaleTag
    priority: int
    category: str
    search_volume: int | None = None
    competition_score: int | None = None
    competition_bucket: CompetitionBucket | None = None
    keyword_native: str | None = None
    keyword_localized: str | None = None
    row: int = 0

    @property
    def duplicate_key(self) -> tuple[str, str]:
        return (self.locale, normalize_keyword_text(self.keyword))

    def lookup_texts(self) -> list[str]:
        """Normalized primary and native texts used to find stored matches."""
        texts = [normalize_keyword_text(self.keyword)]
        if self.keyword_native:
            native = normalize_keyword_text(self.keyword_native)
            if native not in texts:
                texts.append(native)
        return texts


@dataclass(frozen=True, slots=True)
class RowError:
    """Row-level, non-fatal parse failure."""

    row: int
    message: str
    keyword: str = ""
    column: str | None = None
    value: str | None = None
    locale: LocaleTag | None = None
    duplicate: bool = False


@dataclass(frozen=True, slots=True)
class RowWarning:
    """Row parsed, but its shape does not match the detected format."""

    row: int
    message: str


@dataclass(slots=True)
class ParseStats:
    total_rows: int = 0
    valid_rows: int = 0
    invalid_rows: int = 0
    duplicates_in_file: int = 0
    by_language: dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class ParseResult:
    data: list[ParsedKeyword]
    errors: list[RowError]
    warnings: list[RowWarning]
    stats: ParseStats
    format_detected: ParsedFormat

    @property
    def success(self) -> bool:
        return not self.errors or bool(self.data)


@dataclass(frozen=True, slots=True)
class ParseOptions:
    """Per-call parsing options."""

    locale: LocaleTag | None = None
    default_category: str = DEFAULT_CATEGORY
    delimiter: str | None = None
    skip_header: bool = True
    auto_detect_language: bool = True
    validate_search_volume: bool = False


class RowRejected(Exception):
    """Raised inside row parsing to reject the current row."""

    def __init__(self, error: RowError) -> None:
        self.error = error
        super().__init__(error.message)


def normalize_keyword_text(text: str) -> str:
    return text.strip().lower()


def validate_keyword(keyword: str) -> str | None:
    """Return an error message when the keyword text is unusable."""
    if not keyword or not keyword.strip():
        return "Keyword is empty"
    if len(keyword.strip()) > MAX_KEYWORD_LENGTH:
        return f"Keyword is too long (max {MAX_KEYWORD_LENGTH} characters)"
    if _PUNCTUATION_ONLY.match(keyword):
        return "Keyword contains only punctuation"
    return None


def canonical_locale(raw: str | None) -> LocaleTag | None:
    if not raw:
        return None
    return _CANONICAL_LOCALES.get(raw.strip().lower())


class _KeywordCollector:
    """Accumulates parsed rows, errors and the in-file duplicate set."""

    def __init__(self) -> None:
        self.data: list[ParsedKeyword] = []
        self.errors: list[RowError] = []
        self.warnings: list[RowWarning] = []
        self.seen: set[tuple[str, str]] = set()
        self.duplicates_in_file = 0
        self.by_language: Counter[str] = Counter()

    def reject(self, error: RowError) -> None:
        self.errors.append(error)

    def warn(self, row: int, message: str) -> None:
        logger.warning(
            "Keyword import row inconsistent with detected format",
            extra={"row": row, "detail": message},
        )
        self.warnings.append(RowWarning(row=row, message=message))

    def accept(self, keyword: ParsedKeyword) -> None:
        key = keyword.duplicate_key
        if key in self.seen:
            self.duplicates_in_file += 1
            self.errors.append(
                RowError(
                    row=keyword.row,
                    message="Duplicate keyword in file",
                    keyword=keyword.keyword,
                    column="keyword",
                    value=keyword.keyword,
                    locale=keyword.locale,
                    duplicate=True,
                )
            )
            return
        self.seen.add(key)
        self.by_language[keyword.locale] += 1
        self.data.append(keyword)

    def result(self, total_rows: int, format_detected: ParsedFormat) -> ParseResult:
        return ParseResult(
            data=self.data,
            errors=self.errors,
            warnings=self.warnings,
            stats=ParseStats(
                total_rows=total_rows,
                valid_rows=len(self.data),
                invalid_rows=len(self.errors),
                duplicates_in_file=self.duplicates_in_file,
                by_language=dict(self.by_language),
            ),
            format_detected=format_detected,
        )


def _content_lines(content: str) -> list[tuple[int, str]]:
    """Return (1-based line number, trimmed line), skipping blanks and comments."""
    lines: list[tuple[int, str]] = []
    for number, raw in enumerate(_LINE_SPLIT.split(content), start=1):
        line = raw.strip()
        if line and not line.startswith("#"):
            lines.append((number, line))
    return lines


def _resolve_locale(
    raw: str | None,
    keyword: str,
    row: int,
    options: ParseOptions,
) -> LocaleTag:
    explicit = canonical_locale(raw)
    if explicit is not None:
        return explicit
    # Without detection, an unrecognized explicit code is an error, not a gap.
    if options.locale is not None and (options.auto_detect_language or not (raw and raw.strip())):
        return options.locale
    if options.auto_detect_language:
        return detect_locale(keyword)
    raise RowRejected(
        RowError(
            row=row,
            message=f"Invalid language code (expected one of: {', '.join(SUPPORTED_LOCALES)})",
            keyword=keyword,
            column="language",
            value=raw or "",
        )
    )


def _parse_search_volume(
    raw: int | float | str | None,
    keyword: str,
    row: int,
    options: ParseOptions,
) -> int | None:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        if options.validate_search_volume:
            raise RowRejected(
                RowError(row=row, message="Search volume is required", keyword=keyword, column="search_volume")
            )
        return None

    value: int | None = None
    if isinstance(raw, bool):
        value = None
    elif isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        value = int(raw) if raw.is_integer() else None
    elif isinstance(raw, str):
        match = VOLUME_PATTERN.match(raw.replace(",", "").strip())
        if match:
            value = int(match.group(1))

    if value is None or value < 0:
        if options.validate_search_volume:
            raise RowRejected(
                RowError(
                    row=row,
                    message="Search volume is not a valid number",
                    keyword=keyword,
                    column="search_volume",
                    value=str(raw),
                )
            )
        return None
    return value


def _parse_priority(raw: int | float | str | None) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, float):
        if not raw.is_integer():
            return None
        raw = int(raw)
    if isinstance(raw, str):
        try:
            raw = int(raw.strip())
        except ValueError:
            return None
    return raw if 1 <= raw <= 10 else None


def _require_keyword(keyword: str, row: int, column: str = "keyword") -> str:
    error = validate_keyword(keyword)
    if error:
        raise RowRejected(RowError(row=row, message=error, keyword=keyword, column=column, value=keyword))
    return keyword.strip()


def _build_keyword(
    *,
    keyword: str,
    row: int,
    locale_raw: str | None,
    search_volume_raw: int | float | str | None,
    competition_raw: int | float | str | None,
    priority_raw: int | float | str | None,
    category: str | None,
    options: ParseOptions,
    keyword_native: str | None = None,
    keyword_localized: str | None = None,
) -> ParsedKeyword:
    keyword = _require_keyword(keyword, row)
    locale = _resolve_locale(locale_raw, keyword, row, options)
    search_volume = _parse_search_volume(search_volume_raw, keyword, row, options)

    competition = None
    if competition_raw is not None and competition_raw != "":
        competition = parse_competition(competition_raw)
    competition_score = competition.score if competition else None

    priority = _parse_priority(priority_raw)
    if priority is None:
        priority = calculate_priority(search_volume, competition_score)

    return ParsedKeyword(
        keyword=keyword,
        locale=locale,
        priority=priority,
        category=(category or "").strip() or options.default_category,
        search_volume=search_volume,
        competition_score=competition_score,
        competition_bucket=competition.bucket if competition else None,
        keyword_native=keyword_native,
        keyword_localized=keyword_localized,
        row=row,
    )


def _cell(parts: list[str], column_map: dict[str, int], name: str) -> str:
    index = column_map.get(name, DEFAULT_COLUMN_POSITIONS[name])
    return parts[index] if index < len(parts) else ""


def _parse_enhanced_row(
    parts: list[str],
    row: int,
    column_map: dict[str, int],
    options: ParseOptions,
) -> ParsedKeyword:
    return _build_keyword(
        keyword=_cell(parts, column_map, "keyword"),
        row=row,
        locale_raw=_cell(parts, column_map, "language"),
        search_volume_raw=_cell(parts, column_map, "search_volume"),
        competition_raw=_cell(parts, column_map, "competition"),
        priority_raw=_cell(parts, column_map, "priority"),
        category=_cell(parts, column_map, "category"),
        options=options,
    )


def _parse_legacy_row(
    parts: list[str],
    row: int,
    line: str,
    options: ParseOptions,
) -> ParsedKeyword:
    if len(parts) < 2:
        raise RowRejected(
            RowError(
                row=row,
                message=f"At least 2 columns required (native|localized), got {len(parts)}",
                keyword=line,
                value=line,
            )
        )

    native, localized = parts[0], parts[1]
    volume_raw = parts[2] if len(parts) > 2 else None
    native = _require_keyword(native, row, column="keyword_native")
    if not localized:
        raise RowRejected(
            RowError(row=row, message="Localized keyword is empty", keyword=native, column="keyword_localized")
        )

    # Legacy rows carry no competition; locale falls back to English when
    # neither an option nor detection can supply one.
    locale_raw = None if options.locale or options.auto_detect_language else "en"
    return _build_keyword(
        keyword=native,
        row=row,
        locale_raw=locale_raw,
        search_volume_raw=volume_raw,
        competition_raw=None,
        priority_raw=None,
        category=None,
        options=options,
        keyword_native=native,
        keyword_localized=localized,
    )


def _format_warning(
    detected: DetectedFormat,
    parts: list[str],
    line: str,
    expected_columns: int,
) -> str | None:
    if detected.format == "legacy" and len(parts) > LEGACY_COLUMN_COUNT:
        return f"Row has {len(parts)} columns; legacy format expects at most {LEGACY_COLUMN_COUNT}"
    if detected.format == "enhanced":
        if len(parts) == 1 and "|" in line:
            return "Row looks pipe-delimited but the import was detected as comma-delimited"
        if len(parts) > expected_columns:
            return f"Row has {len(parts)} columns; header defines {expected_columns}"
    return None


def parse_keyword_text(content: str, options: ParseOptions | None = None) -> ParseResult:
    """Parse delimited keyword text, auto-detecting its format."""
    options = options or ParseOptions()
    collector = _KeywordCollector()

    lines = _content_lines(content)
    if not lines:
        collector.reject(RowError(row=0, message="Input is empty"))
        return collector.result(total_rows=0, format_detected="enhanced")

    detected = detect_format(lines[0][1])
    delimiter = options.delimiter or detected.delimiter

    column_map: dict[str, int] = {}
    data_lines = lines
    if options.skip_header and detected.has_header:
        if detected.format == "enhanced":
            headers = [header.strip().lower() for header in lines[0][1].split(delimiter)]
            column_map = {header: index for index, header in enumerate(headers) if header}
        data_lines = lines[1:]

    expected_columns = max(len(column_map), len(ENHANCED_COLUMNS))
    for row, line in data_lines:
        parts = [part.strip() for part in line.split(delimiter)]
        warning = _format_warning(detected, parts, line, expected_columns)
        if warning:
            collector.warn(row, warning)
        try:
            if detected.format == "enhanced":
                keyword = _parse_enhanced_row(parts, row, column_map, options)
            else:
                keyword = _parse_legacy_row(parts, row, line, options)
        except RowRejected as exc:
            collector.reject(exc.error)
            continue
        collector.accept(keyword)

    result = collector.result(total_rows=len(data_lines), format_detected=detected.format)
    logger.info(
        "Keyword text parsed",
        extra={
            "format": detected.format,
            "delimiter": delimiter,
            "total_rows": result.stats.total_rows,
            "valid_rows": result.stats.valid_rows,
            "invalid_rows": result.stats.invalid_rows,
            "duplicates_in_file": result.stats.duplicates_in_file,
        },
    )
    return result


def normalize_keyword_records(
    records: Iterable[KeywordRecordIn],
    options: ParseOptions | None = None,
) -> ParseResult:
    """Validate and score pre-parsed keyword records like parsed rows."""
    options = options or ParseOptions()
    collector = _KeywordCollector()

    total = 0
    for row, record in enumerate(records, start=1):
        total += 1
        primary = record.keyword or record.keyword_native or ""
        try:
            keyword = _build_keyword(
                keyword=primary,
                row=row,
                locale_raw=record.locale,
                search_volume_raw=record.search_volume,
                competition_raw=record.competition,
                priority_raw=record.priority,
                category=record.category,
                options=options,
                keyword_native=record.keyword_native.strip() if record.keyword_native else None,
                keyword_localized=record.keyword_ko.strip() if record.keyword_ko else None,
            )
        except RowRejected as exc:
            collector.reject(exc.error)
            continue
        collector.accept(keyword)

    return collector.result(total_rows=total, format_detected="records")
