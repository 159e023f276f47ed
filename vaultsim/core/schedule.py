"""Contribution schedule resolution: what a commitment owes per week at a given age."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from vaultsim.core.rules import (
    CUSTOM_TIER,
    FREQUENCY_TO_WEEKLY,
    MONTHLY_TIERS,
    TIER_BANDS,
    WEEKS_PER_MONTH,
)


def tier_key(tier: Any) -> Optional[str]:
    """Return the rule-table key for an ``IntensityTier`` member or its string value."""
    value = getattr(tier, "value", tier)
    if isinstance(value, str):
        return value
    return None


def resolve_periodic_amount(
    tier: Any,
    elapsed_years: float,
    custom_schedule: Optional[Sequence[Any]] = None,
    custom_default_amount: Optional[float] = None,
) -> float:
    """
    Weekly deposit due for ``tier`` once ``elapsed_years`` have passed since the
    commitment started. ``elapsed_years`` must already be a non-negative number.

    Built-in tiers look up their band in the rule table; the custom tier takes the
    first schedule period whose [startYear - 1, endYear) window contains
    ``elapsed_years`` and otherwise falls back to ``custom_default_amount``.
    An unknown tier owes nothing.
    """
    key = tier_key(tier)
    if key == CUSTOM_TIER:
        return _resolve_custom(elapsed_years, custom_schedule or (), custom_default_amount)

    bands = TIER_BANDS.get(key) if key is not None else None
    if bands is None:
        return 0.0

    amount = bands[-1].amount
    for band in bands:
        if elapsed_years < band.upper_years:
            amount = band.amount
            break

    if key in MONTHLY_TIERS:
        return amount / WEEKS_PER_MONTH
    return amount


def _resolve_custom(
    elapsed_years: float,
    periods: Sequence[Any],
    default_amount: Optional[float],
) -> float:
    for period in periods:
        start = getattr(period, "startYear")
        end = getattr(period, "endYear")
        if start - 1 <= elapsed_years < end:
            return float(getattr(period, "amount"))
    return float(default_amount or 0.0)


def to_weekly_amount(amount: float, frequency: str = "weekly") -> float:
    """Convert an amount stated per day, week or month into a weekly amount."""
    return amount * FREQUENCY_TO_WEEKLY.get(frequency, 1.0)


def schedule_warnings(periods: Sequence[Any], label: str = "custom schedule") -> List[str]:
    """
    Describe overlaps and gaps between custom schedule periods.

    Resolution is unaffected: the first matching period in list order still wins.
    """
    sorted_periods = sorted(periods, key=lambda period: getattr(period, "startYear"))
    warnings: List[str] = []

    previous_end: Optional[int] = 0 if sorted_periods else None
    for period in sorted_periods:
        start = getattr(period, "startYear") - 1
        end = getattr(period, "endYear")

        if previous_end is not None:
            if start < previous_end:
                warnings.append(f"{label} overlap years {start}-{previous_end}")
            elif start > previous_end:
                warnings.append(f"{label} gap years {previous_end}-{start}")

        previous_end = max(previous_end or 0, end)

    return warnings
