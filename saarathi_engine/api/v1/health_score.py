"""GET /v1/owners/{owner_id}/health-score - Weighted business health score"""

import time
import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from saarathi_engine.api.v1.schemas import HealthScoreResponse, health_score_response
from saarathi_engine.api.dependencies import get_request_id, get_today
from saarathi_engine.infrastructure.database.session import get_db
from saarathi_engine.infrastructure.database.repositories import SnapshotRepository
from saarathi_engine.domain.health import score
from saarathi_engine.domain.exceptions import InvalidArgumentError, NotFoundError
from saarathi_engine.infrastructure.observability.metrics import record_health_score
from saarathi_engine.infrastructure.observability.logging import log_health_score

router = APIRouter()


@router.get("/owners/{owner_id}/health-score", response_model=HealthScoreResponse)
def get_health_score(
    owner_id: str,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Score this month against last month.

    Returns:
        0-100 score, status band and the five sub-scores with their metrics
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        snapshot = SnapshotRepository(db).health_snapshot(owner_id, today)
        result = score(snapshot)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidArgumentError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_health_score(result.status)
    log_health_score(request_id, snapshot.owner_id, result.score, result.status, (time.time() - start_time) * 1000)

    return health_score_response(snapshot.owner_id, result)
