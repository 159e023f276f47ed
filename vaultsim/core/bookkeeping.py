"""Amounts due and deposit crediting for live (non-simulated) commitments."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Sequence, Tuple

from vaultsim.core.rules import CUSTOM_TIER, DAYS_PER_YEAR, LIVE_CREDIT_SPLIT
from vaultsim.core.schedule import resolve_periodic_amount, tier_key, to_weekly_amount
from vaultsim.models import Commitment, StrandBalances

logger = logging.getLogger(__name__)

SECONDS_PER_YEAR = DAYS_PER_YEAR * 24 * 60 * 60


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def years_elapsed(created_at: datetime, now: datetime) -> float:
    """Age of a commitment in years of 365.25 days, never negative."""
    seconds = (_as_utc(now) - _as_utc(created_at)).total_seconds()
    return max(seconds, 0.0) / SECONDS_PER_YEAR


def amount_due(commitment: Commitment, now: datetime) -> float:
    """Weekly amount a commitment expects at ``now``."""
    elapsed = years_elapsed(commitment.createdAt, now)
    if tier_key(commitment.tier) == CUSTOM_TIER:
        raw = resolve_periodic_amount(
            CUSTOM_TIER,
            elapsed,
            commitment.customSchedule,
            commitment.customAmount,
        )
        return to_weekly_amount(raw, commitment.depositFrequency)
    return resolve_periodic_amount(commitment.tier, elapsed)


def total_amount_due(commitments: Sequence[Commitment], now: datetime) -> float:
    return sum(amount_due(commitment, now) for commitment in commitments)


def credit_deposit(commitment: Commitment, amount: float) -> StrandBalances:
    """Balances of ``commitment`` after ``amount`` is credited with the live split."""
    current = commitment.balances
    split = LIVE_CREDIT_SPLIT
    return StrandBalances(
        strand1=current.strand1 + amount * split.strand1 / 100,
        strand2=current.strand2 + amount * split.strand2 / 100,
        strand3=current.strand3 + amount * split.strand3 / 100,
        total=current.total + amount,
    )


def credit_member_deposit(
    commitments: Sequence[Commitment],
    now: datetime,
) -> Tuple[float, List[Tuple[float, StrandBalances]]]:
    """
    Credit one weekly deposit of a member to every commitment they belong to.

    Each commitment receives its own amount due; returns the total deposited and
    one (amount, new balances) pair per commitment, in order.
    """
    deposited = 0.0
    credits: List[Tuple[float, StrandBalances]] = []
    for commitment in commitments:
        due = amount_due(commitment, now)
        deposited += due
        credits.append((due, credit_deposit(commitment, due)))
        logger.info(
            "credited %.2f to commitment %s (%s)",
            due,
            commitment.contractAddress or "<unnamed>",
            tier_key(commitment.tier),
        )
    return deposited, credits
