"""GET /v1/owners/{owner_id}/report - Combined owner report used by the scheduled brief"""

import logging
from datetime import date, datetime
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from saarathi_engine.api.v1.schemas import (
    ReportResponse,
    health_score_response,
    projection_response,
    receivable_schema,
    salary_alert_schema,
    salary_reminder_schema,
    salary_status_schema,
)
from saarathi_engine.api.dependencies import get_now, get_request_id, get_settings, get_today
from saarathi_engine.config import Settings
from saarathi_engine.infrastructure.database.session import get_db
from saarathi_engine.services.briefs import build_owner_report
from saarathi_engine.domain.exceptions import InvalidArgumentError, NotFoundError

router = APIRouter()


@router.get("/owners/{owner_id}/report", response_model=ReportResponse)
def get_report(
    owner_id: str,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    now: datetime = Depends(get_now),
    config: Settings = Depends(get_settings),
):
    """Projection, health score, salary alert, reminders and collection suggestions in one payload"""
    request_id = get_request_id(request)

    try:
        report = build_owner_report(db, owner_id, today, now, config)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidArgumentError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return ReportResponse(
        owner_id=report.owner_id,
        as_of=report.as_of,
        projection=projection_response(report.owner_id, report.current_cash, report.forecast),
        health=health_score_response(report.owner_id, report.health),
        salary_alert=salary_alert_schema(report.salary_alert),
        salary_reminders=[salary_reminder_schema(m) for m in report.salary_reminders],
        salary_status=[salary_status_schema(s) for s in report.salary_status],
        collections=[receivable_schema(r) for r in report.collections],
        overdue=[receivable_schema(r) for r in report.overdue],
        outstanding_total=report.outstanding_total,
    )
