from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from vaultsim.core.rules import (
    FALLBACK_APY,
    FALLBACK_REFERENCE_PRICE,
    PHASE2_TIME_PERCENT,
    PHASE2_VALUE_THRESHOLD,
)


class IntensityTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CUSTOM = "custom"


DepositFrequency = Literal["daily", "weekly", "monthly"]


class SchedulePeriod(BaseModel):
    """One row of a custom schedule, covering contract years startYear..endYear."""

    model_config = ConfigDict(extra="forbid")

    startYear: int = Field(ge=1)
    endYear: int = Field(ge=1)
    amount: float = Field(gt=0)

    @model_validator(mode="after")
    def ensure_ordered(self) -> "SchedulePeriod":
        if self.endYear < self.startYear:
            raise ValueError("endYear must be greater than or equal to startYear")
        return self


class PhaseTrigger(BaseModel):
    model_config = ConfigDict(extra="forbid")

    mode: Literal["time", "value", "both"] = "both"
    timePercent: float = Field(default=PHASE2_TIME_PERCENT, ge=0, le=100)
    valueThreshold: float = Field(default=PHASE2_VALUE_THRESHOLD, ge=0)


class SimulationParameters(BaseModel):
    """Inputs of one projection run.

    No range checks on horizon or yields here: callers validate before running
    (the HTTP request schema does).
    """

    model_config = ConfigDict(extra="forbid")

    horizonYears: float
    apyStrand1: float = FALLBACK_APY.strand1
    apyStrand2: float = FALLBACK_APY.strand2
    apyStrand3: float = FALLBACK_APY.strand3
    referencePrice: float = FALLBACK_REFERENCE_PRICE
    tier: IntensityTier = IntensityTier.MEDIUM
    customSchedule: List[SchedulePeriod] = Field(default_factory=list)
    customAmount: Optional[float] = Field(default=None, ge=0)
    participantCount: int = 1
    chargedContract: bool = False
    phaseTrigger: PhaseTrigger = Field(default_factory=PhaseTrigger)


class Snapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    year: int
    total: int
    strand1: int
    strand2: int
    strand3: int
    terminal: int
    phase: Literal[1, 2]
    initialDeposits: int
    cumulativeGasFees: int
    cumulativeUtilityFees: int


class SimulationSummary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    finalTotal: int
    terminalValue: int
    terminalUnits: float
    phase2Year: Optional[int] = None
    initialDeposits: int
    totalFees: int


class StrandBalances(BaseModel):
    model_config = ConfigDict(extra="forbid")

    strand1: float = Field(default=0.0, ge=0)
    strand2: float = Field(default=0.0, ge=0)
    strand3: float = Field(default=0.0, ge=0)
    total: float = Field(default=0.0, ge=0)


class Commitment(BaseModel):
    """A live commitment as held by the account layer."""

    model_config = ConfigDict(extra="forbid")

    contractAddress: str = ""
    # unknown tier names are tolerated and resolve to nothing due
    tier: Union[IntensityTier, str]
    createdAt: datetime
    customSchedule: List[SchedulePeriod] = Field(default_factory=list)
    customAmount: Optional[float] = Field(default=None, ge=0)
    depositFrequency: DepositFrequency = "weekly"
    balances: StrandBalances = Field(default_factory=StrandBalances)
