"""Unit tests for priority scoring."""

from __future__ import annotations

import pytest

from keyword_import.services.keyword_import.priority import (
    calculate_priority,
    competition_sub_score,
    volume_score,
)


def test_calculate_priority_high_volume_high_competition() -> None:
    assert calculate_priority(12000, 9) == 7


def test_calculate_priority_without_data_is_neutral() -> None:
    assert calculate_priority(None, None) == 5
    assert calculate_priority(0, None) == 5


def test_calculate_priority_is_pure() -> None:
    assert calculate_priority(2400, None) == calculate_priority(2400, None) == 6


@pytest.mark.parametrize(
    ("volume", "expected"),
    [(None, 5), (0, 1), (499, 1), (500, 3), (1000, 5), (2000, 7), (5000, 9), (10000, 10)],
)
def test_volume_score_tiers(volume: int | None, expected: int) -> None:
    assert volume_score(volume) == expected


def test_competition_sub_score_inverts_score() -> None:
    assert competition_sub_score(None) == 5
    assert competition_sub_score(1) == 10
    assert competition_sub_score(10) == 1


def test_calculate_priority_stays_within_bounds() -> None:
    assert calculate_priority(100, 10) == 1
    assert calculate_priority(50000, 1) == 10
    for volume in (1, 600, 1500, 3000, 8000, 20000):
        for competition in (None, 1, 5, 10):
            assert 1 <= calculate_priority(volume, competition) <= 10
