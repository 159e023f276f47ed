"""Weekly compounding projection across the three strands and the terminal store."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from vaultsim.core.rules import (
    ACCUMULATION_SPLIT,
    CHARGED_UTILITY_FEE_PER_MEMBER,
    DCA_PERCENT,
    GAS_FEE_PER_PERIOD,
    MIGRATION_PERCENT,
    PERIODS_PER_YEAR,
    UTILITY_FEE_PER_MEMBER,
    StrandSplit,
    dca_cap,
)
from vaultsim.core.schedule import resolve_periodic_amount, tier_key
from vaultsim.models import (
    PhaseTrigger,
    SimulationParameters,
    SimulationSummary,
    Snapshot,
)

logger = logging.getLogger(__name__)


@dataclass
class PoolState:
    """Running balances of one run. Owned by that run only."""

    strand1: float = 0.0
    strand2: float = 0.0
    strand3: float = 0.0
    terminal: float = 0.0

    @property
    def total(self) -> float:
        return self.strand1 + self.strand2 + self.strand3 + self.terminal


@dataclass
class RunTotals:
    deposits: float = 0.0
    gas_fees: float = 0.0
    utility_fees: float = 0.0
    phase: int = 1


def period_rate(apy_percent: float, periods_per_year: int = PERIODS_PER_YEAR) -> float:
    """
    Per-period compounding rate equivalent to an annual percentage yield.
    Yields at or below -100% wipe the strand out (rate -1).
    """
    base = max(1 + apy_percent / 100, 0.0)
    return base ** (1 / periods_per_year) - 1


def overhead_per_period(participant_count: int, charged_contract: bool = False) -> Tuple[float, float]:
    """Return (gas, utility) cost for one period."""
    per_member = CHARGED_UTILITY_FEE_PER_MEMBER if charged_contract else UTILITY_FEE_PER_MEMBER
    return GAS_FEE_PER_PERIOD, max(participant_count, 1) * per_member


def phase_two_reached(trigger: PhaseTrigger, progress: float, total_value: float) -> bool:
    time_hit = progress * 100 >= trigger.timePercent
    value_hit = total_value >= trigger.valueThreshold
    if trigger.mode == "time":
        return time_hit
    if trigger.mode == "value":
        return value_hit
    return time_hit or value_hit


def seed_pools(state: PoolState, deposit: float, split: StrandSplit = ACCUMULATION_SPLIT) -> None:
    state.strand1 = deposit * split.strand1 / 100
    state.strand2 = deposit * split.strand2 / 100
    state.strand3 = deposit * split.strand3 / 100


def accumulate(
    state: PoolState,
    deposit: float,
    rates: Tuple[float, float, float],
    split: StrandSplit = ACCUMULATION_SPLIT,
) -> None:
    """Phase 1: compound each strand, then add its share of the deposit."""
    r1, r2, r3 = rates
    state.strand1 = state.strand1 * (1 + r1) + deposit * split.strand1 / 100
    state.strand2 = state.strand2 * (1 + r2) + deposit * split.strand2 / 100
    state.strand3 = state.strand3 * (1 + r3) + deposit * split.strand3 / 100


def migrate(
    state: PoolState,
    deposit: float,
    rates: Tuple[float, float, float],
    cap: float,
) -> float:
    """
    Phase 2 step. The whole deposit lands in strand 1, strands 2 and 3 shed a
    fixed share into strand 1, then strand 1 buys into the terminal store.

    Returns the amount moved into the terminal store.
    """
    r1, r2, r3 = rates
    state.strand1 = state.strand1 * (1 + r1) + deposit
    state.strand2 = state.strand2 * (1 + r2)
    state.strand3 = state.strand3 * (1 + r3)

    from_strand2 = state.strand2 * MIGRATION_PERCENT / 100
    from_strand3 = state.strand3 * MIGRATION_PERCENT / 100
    state.strand2 -= from_strand2
    state.strand3 -= from_strand3
    state.strand1 += from_strand2 + from_strand3

    purchase = min(state.strand1 * DCA_PERCENT / 100, cap)
    state.strand1 -= purchase
    state.terminal += purchase
    return purchase


def deduct_overhead(state: PoolState, amount: float) -> float:
    """
    Shrink all four stores by the same fraction so that ``amount`` leaves in total.
    The fraction is capped at 100%; returns the amount actually removed.
    """
    total_before = state.total
    if total_before <= 0:
        return 0.0

    ratio = min(amount / total_before, 1.0)
    state.strand1 -= state.strand1 * ratio
    state.strand2 -= state.strand2 * ratio
    state.strand3 -= state.strand3 * ratio
    state.terminal -= state.terminal * ratio
    return total_before * ratio


def round_half_up(value: float) -> int:
    # NaN and infinities only come from out-of-range inputs
    if not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


def take_snapshot(period: int, state: PoolState, totals: RunTotals) -> Snapshot:
    strand1 = round_half_up(state.strand1)
    strand2 = round_half_up(state.strand2)
    strand3 = round_half_up(state.strand3)
    terminal = round_half_up(state.terminal)
    return Snapshot(
        year=period // PERIODS_PER_YEAR,
        total=strand1 + strand2 + strand3 + terminal,
        strand1=strand1,
        strand2=strand2,
        strand3=strand3,
        terminal=terminal,
        phase=totals.phase,
        initialDeposits=round_half_up(totals.deposits),
        cumulativeGasFees=round_half_up(totals.gas_fees),
        cumulativeUtilityFees=round_half_up(totals.utility_fees),
    )


def liquidate_final(snapshots: Sequence[Snapshot]) -> List[Snapshot]:
    """Convert whatever remains in the strands of the last snapshot into the terminal store."""
    if not snapshots:
        return []

    last = snapshots[-1]
    terminal = last.terminal + last.strand1 + last.strand2 + last.strand3
    liquidated = last.model_copy(
        update={
            "strand1": 0,
            "strand2": 0,
            "strand3": 0,
            "terminal": terminal,
            "total": terminal,
        }
    )
    return [*snapshots[:-1], liquidated]


def project_snapshots(params: SimulationParameters) -> List[Snapshot]:
    """
    Project a commitment week by week over ``params.horizonYears`` and return one
    snapshot per completed year, year 0 included. No final liquidation here.

    Order of operations per week after week 0:
      1) Resolve the deposit for the elapsed age and add it to nominal deposits.
      2) Latch phase 2 once progress or total value reaches the trigger.
      3) Phase 1: split the deposit 15/50/25 and compound each strand.
         Phase 2: compound, migrate strands 2 and 3 into strand 1, buy terminal.
      4) Remove the week's overhead proportionally from all four stores.
    Week 0 only seeds the strands with the first deposit.
    """
    total_periods = params.horizonYears * PERIODS_PER_YEAR
    if not math.isfinite(total_periods) or total_periods < 0:
        logger.debug("nothing to project for horizon %s", params.horizonYears)
        return []

    key = tier_key(params.tier) or ""
    rates = (
        period_rate(params.apyStrand1),
        period_rate(params.apyStrand2),
        period_rate(params.apyStrand3),
    )
    gas_fee, utility_fee = overhead_per_period(params.participantCount, params.chargedContract)
    cap = dca_cap(key)

    state = PoolState()
    totals = RunTotals()
    snapshots: List[Snapshot] = []

    for period in range(math.floor(total_periods) + 1):
        deposit = resolve_periodic_amount(
            params.tier,
            period / PERIODS_PER_YEAR,
            params.customSchedule,
            params.customAmount,
        )
        totals.deposits += deposit

        progress = period / total_periods if total_periods > 0 else 0.0
        if totals.phase == 1 and phase_two_reached(params.phaseTrigger, progress, state.total):
            totals.phase = 2
            logger.debug("phase 2 reached at week %d (total %.2f)", period, state.total)

        if period == 0:
            seed_pools(state, deposit)
        else:
            if totals.phase == 1:
                accumulate(state, deposit, rates)
            else:
                migrate(state, deposit, rates, cap)

            deduct_overhead(state, gas_fee + utility_fee)
            totals.gas_fees += gas_fee
            totals.utility_fees += utility_fee

        if period % PERIODS_PER_YEAR == 0:
            snapshots.append(take_snapshot(period, state, totals))

    logger.debug(
        "simulated %d weeks for tier %s: %d snapshots, final phase %d",
        math.floor(total_periods) + 1,
        key,
        len(snapshots),
        totals.phase,
    )
    return snapshots


def run_simulation(params: SimulationParameters) -> List[Snapshot]:
    """Yearly snapshots of a projection, with the last one liquidated into the terminal store."""
    return liquidate_final(project_snapshots(params))


def summarize(snapshots: Sequence[Snapshot], reference_price: float) -> SimulationSummary:
    """Headline figures of a run, with the terminal value also stated in reference-asset units."""
    if not snapshots:
        return SimulationSummary(
            finalTotal=0,
            terminalValue=0,
            terminalUnits=0.0,
            initialDeposits=0,
            totalFees=0,
        )

    last = snapshots[-1]
    phase2_year: Optional[int] = next(
        (snapshot.year for snapshot in snapshots if snapshot.phase == 2),
        None,
    )
    units = last.terminal / reference_price if reference_price > 0 else 0.0
    return SimulationSummary(
        finalTotal=last.total,
        terminalValue=last.terminal,
        terminalUnits=units,
        phase2Year=phase2_year,
        initialDeposits=last.initialDeposits,
        totalFees=last.cumulativeGasFees + last.cumulativeUtilityFees,
    )
