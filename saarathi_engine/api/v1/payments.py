"""POST /v1/receivables/{receivable_id}/payments - Apply a customer payment"""

import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from saarathi_engine.api.v1.schemas import PaymentRequest, PaymentResponse, receivable_schema
from saarathi_engine.api.dependencies import get_now, get_request_id
from saarathi_engine.infrastructure.database.session import get_db
from saarathi_engine.infrastructure.database.repositories import ReceivableRepository
from saarathi_engine.domain.receivables import record_payment
from saarathi_engine.domain.exceptions import InvalidArgumentError, NotFoundError
from saarathi_engine.infrastructure.observability.metrics import record_payment as record_payment_metric
from saarathi_engine.infrastructure.observability.logging import log_payment

router = APIRouter()


@router.post("/receivables/{receivable_id}/payments", response_model=PaymentResponse)
def create_payment(
    receivable_id: str,
    request_body: PaymentRequest,
    request: Request,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    Apply a payment against a receivable.

    Flow:
    1. Load the receivable (404 if unknown)
    2. Apply the payment; a settled receivable is left unchanged
    3. On full payment record days-to-pay and reliability on the customer
    4. Persist and return the updated receivable
    """
    request_id = get_request_id(request)

    try:
        repo = ReceivableRepository(db)
        outcome = record_payment(repo.get_receivable(receivable_id), request_body.amount, now)
        if outcome.applied:
            repo.save_payment(outcome)
        db.commit()

    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    except InvalidArgumentError as e:
        db.rollback()
        logging.warning(f"Invalid payment: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_payment_metric(outcome.receivable.status, outcome.applied)
    log_payment(request_id, receivable_id, request_body.amount, outcome.receivable.status, outcome.applied)

    return PaymentResponse(
        receivable=receivable_schema(outcome.receivable),
        applied=outcome.applied,
        days_to_pay=outcome.days_to_pay,
        reliability_score=outcome.reliability_score,
    )
