"""Import templates, keyword export and plain-text reports."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from keyword_import.services.keyword_import.format_detection import ENHANCED_COLUMNS
from keyword_import.services.keyword_import.row_parser import ParsedKeyword, RowError

ENHANCED_HEADER = ",".join(ENHANCED_COLUMNS)
LEGACY_HEADER = "키워드(현지어)|키워드(한국어)|검색량"
NO_ERRORS_MESSAGE = "No errors."

ENHANCED_EXAMPLES = (
    "안면윤곽 수술,ko,5000,high,,plastic-surgery",
    "Facial Contouring Surgery,en,3000,medium,,plastic-surgery",
    "整形手术,zh-CN,2000,low,,plastic-surgery",
    "美容整形,ja,1500,medium,,plastic-surgery",
    "ศัลยกรรมเกาหลี,th,1000,low,,plastic-surgery",
    "# language: leave blank to auto-detect",
    "# competition: low/medium/high or a number from 1 to 10",
    "# priority: 1-10, leave blank to calculate",
)

LEGACY_EXAMPLES: dict[str, tuple[str, ...]] = {
    "en": (
        "rhinoplasty korea cost|코성형 한국 비용|2400",
        "best plastic surgery korea|한국 최고 성형외과|1800",
    ),
    "ko": (
        "강남 성형외과 추천|강남 성형외과 추천|2000",
        "코성형 잘하는 병원|코성형 잘하는 병원|1500",
    ),
    "zh-CN": (
        "韩国整形价格|한국 성형 가격|2000",
        "首尔医美医院|서울 의료미용 병원|1600",
    ),
    "zh-TW": (
        "韓國整形費用|한국 성형 비용|1500",
        "首爾醫美診所|서울 의료미용 클리닉|1200",
    ),
    "ja": (
        "韓国美容整形|한국 미용성형|1800",
        "韓国クリニック費用|한국 클리닉 비용|1400",
    ),
    "th": (
        "ศัลยกรรมเกาหลี|한국 성형수술|1200",
        "คลินิกเกาหลีราคา|한국 클리닉 가격|900",
    ),
    "mn": (
        "Солонгос гоо сайхан|한국 미용|600",
        "Сөүл эмнэлэг|서울 병원|450",
    ),
    "ru": (
        "пластика в Корее цена|한국 성형 가격|1000",
        "клиника в Сеуле|서울 클리닉|800",
    ),
}


def generate_enhanced_template(include_examples: bool = True) -> str:
    """Comma-delimited template with the full header row."""
    if not include_examples:
        return ENHANCED_HEADER
    return "\n".join((ENHANCED_HEADER, *ENHANCED_EXAMPLES))


def generate_legacy_template(locale: str) -> str:
    """Pipe-delimited template; unknown locales get the English examples."""
    examples = LEGACY_EXAMPLES.get(locale, LEGACY_EXAMPLES["en"])
    return "\n".join((LEGACY_HEADER, *examples))


def export_keywords_csv(keywords: Iterable[ParsedKeyword]) -> str:
    """Export keywords in the enhanced format, re-importable as is.

    The import format has no quoting, so a keyword or category containing a
    comma cannot be represented and raises `ValueError`.
    """
    rows = [ENHANCED_HEADER]
    for keyword in keywords:
        for value in (keyword.keyword, keyword.category):
            if "," in value:
                raise ValueError(f"Cannot export {value!r}: values must not contain ','")
        competition = keyword.competition_bucket or (
            str(keyword.competition_score) if keyword.competition_score is not None else ""
        )
        rows.append(
            ",".join(
                (
                    keyword.keyword,
                    keyword.locale,
                    "" if keyword.search_volume is None else str(keyword.search_volume),
                    competition,
                    str(keyword.priority),
                    keyword.category,
                )
            )
        )
    return "\n".join(rows)


def generate_error_report(errors: Iterable[RowError]) -> str:
    lines = []
    for error in errors:
        parts = [f"Row {error.row}: {error.message}"]
        if error.column:
            parts.append(f"Column: {error.column}")
        if error.value:
            parts.append(f'Value: "{error.value}"')
        lines.append(" | ".join(parts))
    return "\n".join(lines) if lines else NO_ERRORS_MESSAGE


def generate_language_stats(by_language: Mapping[str, int]) -> str:
    """Per-language counts, largest first, with their share of the total."""
    total = sum(by_language.values())
    lines = [f"Total: {total}"]
    for language, count in sorted(by_language.items(), key=lambda item: (-item[1], item[0])):
        share = (count / total * 100) if total else 0.0
        lines.append(f"{language}: {count} ({share:.1f}%)")
    return "\n".join(lines)
