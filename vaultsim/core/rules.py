"""Fixed rule table shared by the schedule resolver, the simulator and live bookkeeping.

Nothing in here is configurable at runtime. Tier keys are the string values of
``IntensityTier`` so this module has no imports from the rest of the package.
"""

from __future__ import annotations

from math import inf
from types import MappingProxyType
from typing import Mapping, NamedTuple, Tuple


class Band(NamedTuple):
    """One age band of a tier: applies while elapsed years < ``upper_years``."""

    upper_years: float
    amount: float


class StrandSplit(NamedTuple):
    """Percentages (0-100) of a deposit routed to strands 1, 2 and 3."""

    strand1: float
    strand2: float
    strand3: float


# Cadence
PERIODS_PER_YEAR = 52
WEEKS_PER_MONTH = 4.33
DAYS_PER_YEAR = 365.25

# Tier bands. "low" is stated per month and converted by the resolver.
TIER_BANDS: Mapping[str, Tuple[Band, ...]] = MappingProxyType(
    {
        "low": (Band(1, 100.0), Band(2, 150.0), Band(3, 200.0), Band(inf, 250.0)),
        "medium": (Band(3, 50.0), Band(6, 100.0), Band(10, 200.0), Band(inf, 250.0)),
        "high": (Band(3, 100.0), Band(6, 200.0), Band(10, 300.0), Band(inf, 400.0)),
    }
)
MONTHLY_TIERS = frozenset({"low"})
CUSTOM_TIER = "custom"

# Custom commitments may state their amounts per day or per month.
FREQUENCY_TO_WEEKLY: Mapping[str, float] = MappingProxyType(
    {
        "daily": 7.0,
        "weekly": 1.0,
        "monthly": 12 / PERIODS_PER_YEAR,
    }
)

# Allocation splits
ACCUMULATION_SPLIT = StrandSplit(15.0, 50.0, 25.0)
LIVE_CREDIT_SPLIT = StrandSplit(10.0, 60.0, 30.0)

# Phase 2 mechanics
MIGRATION_PERCENT = 5.0
DCA_PERCENT = 10.0
DCA_CAPS: Mapping[str, float] = MappingProxyType(
    {
        "low": 1_000.0,
        "medium": 5_000.0,
        "high": 10_000.0,
        "custom": 2_000.0,
    }
)

# Phase 2 trigger defaults
PHASE2_TIME_PERCENT = 50.0
PHASE2_VALUE_THRESHOLD = 1_000_000.0

# Overhead, in currency units per period
GAS_FEES: Mapping[str, float] = MappingProxyType(
    {
        "harvestYield": 0.175,
        "executeCycle": 0.315,
        "upkeep": 0.085,
    }
)
GAS_FEE_PER_PERIOD = sum(GAS_FEES.values())
UTILITY_FEE_PER_MEMBER = 1.00
CHARGED_UTILITY_FEE_PER_MEMBER = 1.25

# Market inputs used when the upstream feed is unavailable
FALLBACK_APY = StrandSplit(3.5, 7.5, 12.5)
FALLBACK_REFERENCE_PRICE = 95_000.0


def dca_cap(tier_key: str) -> float:
    """Ceiling of one weekly terminal purchase; unknown tiers use the custom cap."""
    return DCA_CAPS.get(tier_key, DCA_CAPS[CUSTOM_TIER])
