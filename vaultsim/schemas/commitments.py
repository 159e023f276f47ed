"""Data contracts for live commitment bookkeeping."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from vaultsim.models import Commitment, StrandBalances


class CommitmentsRequest(BaseModel):
    """A member's commitments, evaluated at ``now`` (server time when omitted)."""

    model_config = ConfigDict(extra="forbid")

    commitments: List[Commitment] = Field(default_factory=list)
    now: Optional[datetime] = None


class CommitmentAmount(BaseModel):
    contractAddress: str
    amount: float = Field(..., ge=0)


class AmountDueResponse(BaseModel):
    amounts: List[CommitmentAmount]
    total: float = Field(..., ge=0)


class CreditedCommitment(BaseModel):
    contractAddress: str
    amount: float = Field(..., ge=0)
    balances: StrandBalances


class CreditResponse(BaseModel):
    deposited: float = Field(..., ge=0)
    commitments: List[CreditedCommitment]
