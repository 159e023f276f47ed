from __future__ import annotations

from math import isclose

import pytest
from pydantic import ValidationError

from vaultsim.core.schedule import (
    resolve_periodic_amount,
    schedule_warnings,
    to_weekly_amount,
)
from vaultsim.models import IntensityTier, SchedulePeriod


@pytest.mark.parametrize(
    "elapsed, expected",
    [
        (0.0, 100 / 4.33),
        (0.99, 100 / 4.33),
        (1.0, 150 / 4.33),
        (2.5, 200 / 4.33),
        (3.0, 250 / 4.33),
        (40.0, 250 / 4.33),
    ],
)
def test_low_tier_converts_monthly_bands_to_weekly(elapsed, expected):
    assert isclose(resolve_periodic_amount(IntensityTier.LOW, elapsed), expected)


@pytest.mark.parametrize(
    "tier, elapsed, expected",
    [
        (IntensityTier.MEDIUM, 0.0, 50.0),
        (IntensityTier.MEDIUM, 2.99, 50.0),
        (IntensityTier.MEDIUM, 3.0, 100.0),
        (IntensityTier.MEDIUM, 5.99, 100.0),
        (IntensityTier.MEDIUM, 6.0, 200.0),
        (IntensityTier.MEDIUM, 9.99, 200.0),
        (IntensityTier.MEDIUM, 10.0, 250.0),
        (IntensityTier.HIGH, 0.0, 100.0),
        (IntensityTier.HIGH, 3.0, 200.0),
        (IntensityTier.HIGH, 6.0, 300.0),
        (IntensityTier.HIGH, 10.0, 400.0),
        (IntensityTier.HIGH, 25.0, 400.0),
    ],
)
def test_weekly_tier_bands(tier, elapsed, expected):
    assert resolve_periodic_amount(tier, elapsed) == expected


@pytest.mark.parametrize("tier", [IntensityTier.LOW, IntensityTier.MEDIUM, IntensityTier.HIGH])
def test_builtin_tiers_never_decrease_with_age(tier):
    amounts = [resolve_periodic_amount(tier, step / 4) for step in range(0, 61)]

    assert all(amount > 0 for amount in amounts)
    assert all(later >= earlier for earlier, later in zip(amounts, amounts[1:]))


def test_string_tier_matches_enum():
    assert resolve_periodic_amount("high", 7.0) == resolve_periodic_amount(IntensityTier.HIGH, 7.0)


@pytest.mark.parametrize("tier", ["ultra", "", None, 42])
def test_unknown_tier_owes_nothing(tier):
    assert resolve_periodic_amount(tier, 1.0) == 0.0


def custom_schedule() -> list:
    return [
        SchedulePeriod(startYear=1, endYear=3, amount=75),
        SchedulePeriod(startYear=2, endYear=5, amount=120),
        SchedulePeriod(startYear=4, endYear=6, amount=200),
    ]


@pytest.mark.parametrize(
    "elapsed, expected",
    [
        (0.0, 75.0),
        # inside both the first and second windows: first one listed wins
        (2.5, 75.0),
        (3.0, 120.0),
        (4.99, 120.0),
        (5.5, 200.0),
        (6.0, 30.0),
    ],
)
def test_custom_schedule_first_match_wins(elapsed, expected):
    amount = resolve_periodic_amount(IntensityTier.CUSTOM, elapsed, custom_schedule(), 30.0)
    assert amount == expected


def test_custom_without_match_or_default_is_zero():
    assert resolve_periodic_amount(IntensityTier.CUSTOM, 10.0, custom_schedule()) == 0.0
    assert resolve_periodic_amount(IntensityTier.CUSTOM, 0.0) == 0.0


def test_custom_without_schedule_uses_default():
    assert resolve_periodic_amount("custom", 3.0, None, 42.0) == 42.0


def test_schedule_period_rejects_reversed_years():
    with pytest.raises(ValidationError):
        SchedulePeriod(startYear=4, endYear=2, amount=10)

    with pytest.raises(ValidationError):
        SchedulePeriod(startYear=1, endYear=2, amount=0)


def test_to_weekly_amount():
    assert to_weekly_amount(10.0, "daily") == 70.0
    assert isclose(to_weekly_amount(52.0, "monthly"), 12.0)
    assert to_weekly_amount(25.0, "weekly") == 25.0
    assert to_weekly_amount(25.0) == 25.0


def test_schedule_warnings_contiguous_schedule_is_clean():
    periods = [
        SchedulePeriod(startYear=1, endYear=3, amount=75),
        SchedulePeriod(startYear=4, endYear=6, amount=100),
    ]
    assert schedule_warnings(periods) == []


def test_schedule_warnings_reports_overlap_and_gap():
    overlapping = [
        SchedulePeriod(startYear=1, endYear=3, amount=75),
        SchedulePeriod(startYear=3, endYear=5, amount=100),
    ]
    gapped = [
        SchedulePeriod(startYear=1, endYear=2, amount=75),
        SchedulePeriod(startYear=4, endYear=5, amount=100),
    ]
    late_start = [SchedulePeriod(startYear=2, endYear=3, amount=75)]

    assert schedule_warnings(overlapping) == ["custom schedule overlap years 2-3"]
    assert schedule_warnings(gapped) == ["custom schedule gap years 2-3"]
    assert schedule_warnings(late_start) == ["custom schedule gap years 0-1"]
    assert schedule_warnings([]) == []
