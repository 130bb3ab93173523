"""GET /v1/owners/{owner_id}/projection - Day-by-day cash forecast"""

import time
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from saarathi_engine.api.v1.schemas import ProjectionResponse, projection_response
from saarathi_engine.api.dependencies import get_request_id, get_settings, get_today
from saarathi_engine.config import Settings
from saarathi_engine.infrastructure.database.session import get_db
from saarathi_engine.infrastructure.database.repositories import SnapshotRepository
from saarathi_engine.domain.projection import forecast
from saarathi_engine.domain.exceptions import InvalidArgumentError, NotFoundError
from saarathi_engine.infrastructure.observability.metrics import record_projection
from saarathi_engine.infrastructure.observability.logging import log_projection

router = APIRouter()


@router.get("/owners/{owner_id}/projection", response_model=ProjectionResponse)
def get_projection(
    owner_id: str,
    request: Request,
    horizon_days: Optional[int] = Query(None, le=30, description="Days to project (default from settings)"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    config: Settings = Depends(get_settings),
):
    """
    Project cash forward from today.

    Flow:
    1. Load owner snapshot (cash, trailing transactions, active staff)
    2. Derive daily income/expense averages
    3. Walk forward day by day with salary obligations
    4. Return points plus the first negative/salary day
    """
    start_time = time.time()
    request_id = get_request_id(request)
    horizon = horizon_days if horizon_days is not None else config.projection_horizon_days

    try:
        snapshot = SnapshotRepository(db).ledger_snapshot(owner_id, today, config.history_window_days)
        cash_forecast = forecast(
            snapshot,
            horizon_days=horizon,
            window_days=config.history_window_days,
            policy=config.projection_policy(),
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidArgumentError as e:
        logging.warning(f"Invalid projection input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_projection(cash_forecast.points)
    first = cash_forecast.first_problem_day
    log_projection(request_id, snapshot.owner_id, horizon, first.date.isoformat() if first else None, duration_ms)

    return projection_response(snapshot.owner_id, snapshot.current_cash, cash_forecast)
