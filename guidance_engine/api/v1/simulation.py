"""POST /v1/simulate - preview the impact of a transaction before saving it"""

import time
import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Request

from guidance_engine.api.v1.schemas import SimulationRequest, SimulationResponse
from guidance_engine.api.dependencies import get_clock, get_request_id
from guidance_engine.domain.simulation import simulate_transaction
from guidance_engine.domain.exceptions import InvalidSnapshotError
from guidance_engine.infrastructure.observability.metrics import record_simulation
from guidance_engine.infrastructure.observability.logging import log_simulation

router = APIRouter()


@router.post("/simulate", response_model=SimulationResponse)
def simulate(
    request_body: SimulationRequest,
    request: Request,
    clock: datetime = Depends(get_clock),
):
    """
    Project balance, runway and budget impact of a proposed transaction.

    Flow:
    1. Apply the transaction to a copy of the snapshot
    2. Recompute balance and runway with the live runway formula
    3. Re-run the guidance rules on the projection; new_risk_ids marks risks the transaction introduces
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        summary = simulate_transaction(
            request_body.snapshot.to_domain(),
            request_body.transaction.to_domain(),
            now=request_body.now or clock,
        )
    except InvalidSnapshotError as e:
        logging.warning(f"Invalid snapshot: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000
    record_simulation(summary)
    log_simulation(request_id, summary, duration_ms)

    return SimulationResponse.from_domain(summary)
