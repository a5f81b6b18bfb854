"""Priority scoring from search volume and competition."""

from __future__ import annotations

from keyword_import.services.keyword_import.competition import round_half_up

NEUTRAL_SCORE = 5
VOLUME_WEIGHT = 0.6
COMPETITION_WEIGHT = 0.4

# (minimum monthly searches, volume sub-score), highest tier first.
VOLUME_TIERS: tuple[tuple[int, int], ...] = (
    (10_000, 10),
    (5_000, 9),
    (2_000, 7),
    (1_000, 5),
    (500, 3),
)
LOWEST_TIER_SCORE = 1


def volume_score(search_volume: int | None) -> int:
    if search_volume is None:
        return NEUTRAL_SCORE
    for minimum, score in VOLUME_TIERS:
        if search_volume >= minimum:
            return score
    return LOWEST_TIER_SCORE


def competition_sub_score(competition_score: int | None) -> int:
    if competition_score is None:
        return NEUTRAL_SCORE
    return 11 - competition_score


def calculate_priority(search_volume: int | None, competition_score: int | None) -> int:
    """Blend volume (60%) and inverted competition (40%) into a 1-10 priority.

    Higher means a better opportunity. A zero volume with no competition is
    treated as "no data" and gets the neutral score, as existing rows do.
    """
    if not search_volume and not competition_score:
        return NEUTRAL_SCORE

    blended = (
        volume_score(search_volume) * VOLUME_WEIGHT
        + competition_sub_score(competition_score) * COMPETITION_WEIGHT
    )
    return max(1, min(10, round_half_up(blended)))
