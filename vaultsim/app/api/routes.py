"""HTTP routes for the Flask API."""

import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict, List

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import BadRequest

from vaultsim.core.bookkeeping import amount_due, credit_member_deposit, total_amount_due
from vaultsim.core.schedule import resolve_periodic_amount, schedule_warnings, tier_key
from vaultsim.core.simulation import run_simulation, summarize
from vaultsim.models import IntensityTier
from vaultsim.schemas.commitments import (
    AmountDueResponse,
    CommitmentAmount,
    CommitmentsRequest,
    CreditedCommitment,
    CreditResponse,
)
from vaultsim.schemas.simulation import (
    ScheduleAmountRequest,
    ScheduleAmountResponse,
    SimulationRequest,
    SimulationResponse,
)

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    detail = exc.errors(include_url=False, include_context=False)
    return jsonify({"detail": detail}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(BadRequest)
def _handle_bad_request(exc: BadRequest):
    return jsonify({"detail": exc.description}), HTTPStatus.BAD_REQUEST


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(force=True, silent=False)
    if not isinstance(payload, dict):
        raise BadRequest("request body must be a JSON object")
    return payload


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    return jsonify({"message": "pong"})


@api_bp.post("/simulation")
def simulation() -> Any:
    """Yearly projection of a commitment, liquidated into the terminal store at the end."""
    payload = SimulationRequest.model_validate(_json_body())
    settings = current_app.config["VAULTSIM_SETTINGS"]
    params = payload.to_parameters(settings.default_horizon_years)

    warnings: List[str] = []
    if params.tier == IntensityTier.CUSTOM:
        warnings = schedule_warnings(params.customSchedule)
        for warning in warnings:
            logger.warning("simulation request: %s", warning)

    snapshots = run_simulation(params)
    response = SimulationResponse(
        snapshots=snapshots,
        summary=summarize(snapshots, params.referencePrice),
        warnings=warnings,
    )
    logger.info(
        "simulation tier=%s horizon=%s years -> final total %d",
        params.tier.value,
        params.horizonYears,
        response.summary.finalTotal,
    )
    return jsonify(response.model_dump())


@api_bp.post("/schedule/amount")
def schedule_amount() -> Any:
    """Weekly amount owed by a tier at a given age."""
    payload = ScheduleAmountRequest.model_validate(_json_body())
    amount = resolve_periodic_amount(
        payload.tier,
        payload.elapsedYears,
        payload.customSchedule,
        payload.customAmount,
    )
    if amount == 0:
        logger.debug("no contribution due for tier %s", tier_key(payload.tier))
    return jsonify(ScheduleAmountResponse(amount=amount).model_dump())


@api_bp.post("/commitments/amount-due")
def commitments_amount_due() -> Any:
    """Amount each commitment expects right now, and the member's total."""
    payload = CommitmentsRequest.model_validate(_json_body())
    now = payload.now or datetime.now(timezone.utc)

    amounts = [
        CommitmentAmount(contractAddress=commitment.contractAddress, amount=amount_due(commitment, now))
        for commitment in payload.commitments
    ]
    response = AmountDueResponse(amounts=amounts, total=total_amount_due(payload.commitments, now))
    return jsonify(response.model_dump())


@api_bp.post("/commitments/credit")
def commitments_credit() -> Any:
    """Credit a member's weekly deposit across their commitments."""
    payload = CommitmentsRequest.model_validate(_json_body())
    now = payload.now or datetime.now(timezone.utc)

    deposited, credits = credit_member_deposit(payload.commitments, now)
    credited = [
        CreditedCommitment(
            contractAddress=commitment.contractAddress,
            amount=amount,
            balances=new_balances,
        )
        for commitment, (amount, new_balances) in zip(payload.commitments, credits)
    ]
    response = CreditResponse(deposited=deposited, commitments=credited)
    return jsonify(response.model_dump())
