"""POST /v1/guidance - financial health evaluation endpoints"""

import time
import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Request

from guidance_engine.api.v1.schemas import GuidanceRequest, GuidanceResponse, NotificationSchema
from guidance_engine.api.dependencies import get_clock, get_request_id
from guidance_engine.domain.engine import RULES, check_financial_health
from guidance_engine.domain.exceptions import InvalidSnapshotError
from guidance_engine.infrastructure.observability.metrics import record_evaluation
from guidance_engine.infrastructure.observability.logging import log_evaluation

router = APIRouter()


@router.post("/guidance", response_model=GuidanceResponse)
def evaluate_guidance(
    request_body: GuidanceRequest,
    request: Request,
    clock: datetime = Depends(get_clock),
):
    """
    Run every guidance rule against the supplied snapshot.

    Ids listed in seen_ids are left out so the caller is not re-alerted
    about conditions it has already shown.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        notifications = check_financial_health(
            request_body.snapshot.to_domain(),
            now=request_body.now or clock,
            seen_ids=request_body.seen_ids,
        )
    except InvalidSnapshotError as e:
        logging.warning(f"Invalid snapshot: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000
    record_evaluation("all", notifications)
    log_evaluation(request_id, "all", notifications, duration_ms)

    return GuidanceResponse(notifications=[NotificationSchema.from_domain(n) for n in notifications])


@router.post("/guidance/rules/{rule}", response_model=GuidanceResponse)
def evaluate_rule(
    rule: str,
    request_body: GuidanceRequest,
    request: Request,
    clock: datetime = Depends(get_clock),
):
    """Run a single guidance rule (cash-runway, payment-risk, budget-burn, goal-delay, community-risk)"""
    if rule not in RULES:
        raise HTTPException(status_code=404, detail=f"Unknown rule: {rule}")

    start_time = time.time()
    request_id = get_request_id(request)

    try:
        notifications = RULES[rule](request_body.snapshot.to_domain(), now=request_body.now or clock)
    except InvalidSnapshotError as e:
        logging.warning(f"Invalid snapshot: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    seen = set(request_body.seen_ids)
    notifications = [n for n in notifications if n.id not in seen]

    duration_ms = (time.time() - start_time) * 1000
    record_evaluation(rule, notifications)
    log_evaluation(request_id, rule, notifications, duration_ms)

    return GuidanceResponse(notifications=[NotificationSchema.from_domain(n) for n in notifications])
