"""Locale tags and script-based locale detection for keyword text."""

from __future__ import annotations

import re
from typing import Literal, get_args

LocaleTag = Literal["ko", "en", "ja", "zh-CN", "zh-TW", "th", "mn", "ru"]

SUPPORTED_LOCALES: tuple[LocaleTag, ...] = get_args(LocaleTag)

_HANGUL = re.compile(r"[\uac00-\ud7af\u1100-\u11ff\u3130-\u318f]")
_KANA = re.compile(r"[\u3040-\u309f\u30a0-\u30ff]")
_THAI = re.compile(r"[\u0e00-\u0e7f]")
_CYRILLIC = re.compile(r"[а-яА-ЯёЁ]")
_MONGOLIAN_CYRILLIC = re.compile(r"[өӨүҮ]")
_MONGOLIAN_SCRIPT = re.compile(r"[\u1800-\u18af]")
_HAN = re.compile(r"[\u4e00-\u9fff\u3400-\u4dbf]")

# Characters whose Simplified form differs, so they only appear in
# Traditional Chinese text.
TRADITIONAL_ONLY_CHARS = frozenset(
    "體醫療學習說話國語時間電話銀機場"
    "韓費診爾門們東這麼與為齒顏膚術價錢"
)


def is_valid_locale(code: str | None) -> bool:
    """Return True when `code` is one of the supported locale tags."""
    return code in SUPPORTED_LOCALES


def detect_locale(text: str) -> LocaleTag:
    """Classify text into a locale tag by script, first match wins.

    Order matters: Japanese text often contains Han characters, and Mongolian
    Cyrillic shares most letters with Russian.
    """
    trimmed = text.strip()

    if _HANGUL.search(trimmed):
        return "ko"
    if _KANA.search(trimmed):
        return "ja"
    if _THAI.search(trimmed):
        return "th"
    has_mongolian_letters = bool(_MONGOLIAN_CYRILLIC.search(trimmed))
    if _CYRILLIC.search(trimmed) and not has_mongolian_letters:
        return "ru"
    if has_mongolian_letters or _MONGOLIAN_SCRIPT.search(trimmed):
        return "mn"
    if _HAN.search(trimmed):
        if any(char in TRADITIONAL_ONLY_CHARS for char in trimmed):
            return "zh-TW"
        return "zh-CN"
    return "en"
