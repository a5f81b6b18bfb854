"""Competition normalization to a 1-10 score and a low/medium/high bucket."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

CompetitionBucket = Literal["low", "medium", "high"]

COMPETITION_TOKENS: dict[str, tuple[int, CompetitionBucket]] = {
    "low": (3, "low"),
    "낮음": (3, "low"),
    "medium": (6, "medium"),
    "mid": (6, "medium"),
    "중간": (6, "medium"),
    "high": (9, "high"),
    "높음": (9, "high"),
}


@dataclass(frozen=True, slots=True)
class CompetitionLevel:
    """Normalized competition estimate."""

    score: int
    bucket: CompetitionBucket


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (matches stored scores)."""
    return math.floor(value + 0.5)


def bucket_for_score(score: float) -> CompetitionBucket:
    if score <= 3:
        return "low"
    if score <= 7:
        return "medium"
    return "high"


def parse_competition(value: str | int | float | None) -> CompetitionLevel | None:
    """Normalize a raw competition value, or return None when unrecognized."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        normalized = value.strip().lower()
        token = COMPETITION_TOKENS.get(normalized)
        if token is not None:
            return CompetitionLevel(score=token[0], bucket=token[1])
        try:
            number = float(normalized)
        except ValueError:
            return None

    if math.isnan(number) or not 1 <= number <= 10:
        return None
    return CompetitionLevel(score=round_half_up(number), bucket=bucket_for_score(number))
