"""GET /v1/owners/{owner_id}/ledger - Windowed ledger aggregate and this month's P&L"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from saarathi_engine.api.v1.schemas import CategoryAmount, LedgerResponse, ProfitAndLossSchema
from saarathi_engine.api.dependencies import get_settings, get_today
from saarathi_engine.config import Settings
from saarathi_engine.infrastructure.database.session import get_db
from saarathi_engine.infrastructure.database.repositories import SnapshotRepository
from saarathi_engine.domain.ledger import aggregate, profit_and_loss
from saarathi_engine.domain.exceptions import InvalidArgumentError, NotFoundError

router = APIRouter()


@router.get("/owners/{owner_id}/ledger", response_model=LedgerResponse)
def get_ledger(
    owner_id: str,
    window_days: Optional[int] = Query(None, description="Trailing window in days (default from settings)"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    config: Settings = Depends(get_settings),
):
    """
    Retrieve income/expense sums, daily averages and category buckets.

    The P&L covers the current calendar month regardless of the window.
    """
    window = window_days if window_days is not None else config.history_window_days
    # Snapshot must reach back to the start of the month for the P&L
    lookback = max(window, today.day)

    try:
        snapshot = SnapshotRepository(db).ledger_snapshot(owner_id, today, lookback)
        totals = aggregate(snapshot.transactions, window, today)
        pnl = profit_and_loss(snapshot.transactions, today.year, today.month)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidArgumentError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return LedgerResponse(
        owner_id=snapshot.owner_id,
        as_of=today,
        window_days=window,
        total_income=totals.total_income,
        total_expense=totals.total_expense,
        daily_income_avg=round(totals.daily_income_avg, 2),
        daily_expense_avg=round(totals.daily_expense_avg, 2),
        expense_by_category=totals.expense_by_category,
        this_month=ProfitAndLossSchema(
            year=pnl.totals.year,
            month=pnl.totals.month,
            income=pnl.totals.income,
            expense=pnl.totals.expense,
            profit=pnl.totals.profit,
            margin_percent=pnl.margin_percent,
            expense_by_category=[
                CategoryAmount(category=category, amount=amount) for category, amount in pnl.expense_by_category
            ],
        ),
    )
