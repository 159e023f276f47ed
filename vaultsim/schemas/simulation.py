"""Data contracts for projection and schedule lookups."""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from vaultsim.core.rules import FALLBACK_APY, FALLBACK_REFERENCE_PRICE
from vaultsim.models import (
    IntensityTier,
    PhaseTrigger,
    SchedulePeriod,
    SimulationParameters,
    SimulationSummary,
    Snapshot,
)


class SimulationRequest(BaseModel):
    """Inputs of a projection run, range-checked before they reach the engine."""

    model_config = ConfigDict(extra="forbid")

    horizonYears: Optional[float] = Field(
        None,
        ge=0,
        le=100,
        description="Years to project; fractional values allowed. Defaults to the service setting.",
    )
    apyStrand1: float = Field(FALLBACK_APY.strand1, ge=0, allow_inf_nan=False, description="Strand 1 APY in percent.")
    apyStrand2: float = Field(FALLBACK_APY.strand2, ge=0, allow_inf_nan=False, description="Strand 2 APY in percent.")
    apyStrand3: float = Field(FALLBACK_APY.strand3, ge=0, allow_inf_nan=False, description="Strand 3 APY in percent.")
    referencePrice: float = Field(
        FALLBACK_REFERENCE_PRICE,
        ge=0,
        allow_inf_nan=False,
        description="Price of one unit of the terminal asset.",
    )
    tier: IntensityTier = IntensityTier.MEDIUM
    customSchedule: List[SchedulePeriod] = Field(default_factory=list)
    customAmount: Optional[float] = Field(None, ge=0, description="Weekly amount when no custom period matches.")
    participantCount: int = Field(1, ge=0, description="Members sharing the utility fee.")
    chargedContract: bool = False
    phaseTrigger: PhaseTrigger = Field(default_factory=PhaseTrigger)

    def to_parameters(self, default_horizon_years: float) -> SimulationParameters:
        data = self.model_dump()
        if data["horizonYears"] is None:
            data["horizonYears"] = default_horizon_years
        return SimulationParameters.model_validate(data)


class SimulationResponse(BaseModel):
    snapshots: List[Snapshot]
    summary: SimulationSummary
    warnings: List[str] = Field(default_factory=list)


class ScheduleAmountRequest(BaseModel):
    """A single point lookup in a tier's schedule."""

    model_config = ConfigDict(extra="forbid")

    # unknown tier names are accepted and owe nothing
    tier: Union[IntensityTier, str]
    elapsedYears: float = Field(..., ge=0, allow_inf_nan=False)
    customSchedule: List[SchedulePeriod] = Field(default_factory=list)
    customAmount: Optional[float] = Field(None, ge=0)


class ScheduleAmountResponse(BaseModel):
    amount: float = Field(..., ge=0)
