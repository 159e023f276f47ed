from __future__ import annotations

from datetime import datetime, timedelta, timezone
from math import isclose

from vaultsim.core.bookkeeping import (
    amount_due,
    credit_deposit,
    credit_member_deposit,
    total_amount_due,
    years_elapsed,
)
from vaultsim.models import Commitment, SchedulePeriod, StrandBalances

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def years_ago(years: float) -> datetime:
    return NOW - timedelta(days=365.25 * years)


def test_years_elapsed_uses_julian_years():
    assert isclose(years_elapsed(years_ago(2), NOW), 2.0)
    assert isclose(years_elapsed(years_ago(0.5), NOW), 0.5)


def test_years_elapsed_never_negative():
    assert years_elapsed(NOW + timedelta(days=3), NOW) == 0.0


def test_years_elapsed_treats_naive_times_as_utc():
    naive_start = datetime(2025, 6, 1, 12, 0)

    assert isclose(years_elapsed(naive_start, NOW), 365 / 365.25)


def test_amount_due_follows_tier_bands():
    medium = Commitment(tier="medium", createdAt=years_ago(4))
    high = Commitment(tier="high", createdAt=years_ago(11))
    low = Commitment(tier="low", createdAt=years_ago(0.5))

    assert amount_due(medium, NOW) == 100.0
    assert amount_due(high, NOW) == 400.0
    assert isclose(amount_due(low, NOW), 100 / 4.33)


def test_amount_due_converts_custom_frequency():
    monthly = Commitment(
        tier="custom",
        createdAt=years_ago(0.1),
        customSchedule=[SchedulePeriod(startYear=1, endYear=2, amount=520)],
        depositFrequency="monthly",
    )
    daily_fallback = Commitment(
        tier="custom",
        createdAt=years_ago(5),
        customSchedule=[SchedulePeriod(startYear=1, endYear=2, amount=520)],
        customAmount=10,
        depositFrequency="daily",
    )

    assert isclose(amount_due(monthly, NOW), 120.0)
    assert isclose(amount_due(daily_fallback, NOW), 70.0)


def test_unknown_tier_is_not_due():
    legacy = Commitment(tier="legacy", createdAt=years_ago(1))

    assert amount_due(legacy, NOW) == 0.0


def test_total_amount_due_sums_commitments():
    commitments = [
        Commitment(tier="medium", createdAt=years_ago(1)),
        Commitment(tier="high", createdAt=years_ago(7)),
        Commitment(tier="legacy", createdAt=years_ago(1)),
    ]

    assert total_amount_due(commitments, NOW) == 350.0
    assert total_amount_due([], NOW) == 0.0


def test_credit_deposit_uses_live_split():
    commitment = Commitment(
        tier="medium",
        createdAt=years_ago(1),
        balances=StrandBalances(strand1=10, strand2=10, strand3=10, total=30),
    )

    balances = credit_deposit(commitment, 100.0)

    assert isclose(balances.strand1, 20.0)
    assert isclose(balances.strand2, 70.0)
    assert isclose(balances.strand3, 40.0)
    assert isclose(balances.total, 130.0)
    # input is left untouched
    assert commitment.balances.total == 30


def test_credit_member_deposit_credits_each_amount_due():
    commitments = [
        Commitment(contractAddress="0xaaa", tier="medium", createdAt=years_ago(1)),
        Commitment(contractAddress="0xbbb", tier="high", createdAt=years_ago(1)),
    ]

    deposited, credits = credit_member_deposit(commitments, NOW)

    assert deposited == 150.0
    (first_amount, first), (second_amount, second) = credits
    assert first_amount == 50.0
    assert second_amount == 100.0
    assert isclose(first.strand1, 5.0)
    assert isclose(first.strand2, 30.0)
    assert isclose(second.strand3, 30.0)
    assert isclose(second.total, 100.0)
