"""Owner report assembly and the scheduled batch run across all owners"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from saarathi_engine.config import Settings, settings as default_settings
from saarathi_engine.domain import health, projection
from saarathi_engine.domain.models import (
    CashForecast,
    HealthScoreResult,
    Receivable,
    SalaryAlert,
    SalaryStatus,
    StaffObligation,
)
from saarathi_engine.domain.obligations import salary_alert, salary_reminder, salary_status
from saarathi_engine.domain.receivables import collection_priority, outstanding_total, overdue_receivables
from saarathi_engine.infrastructure.database.repositories import SnapshotRepository
from saarathi_engine.infrastructure.observability.metrics import (
    brief_failure_counter,
    record_health_score,
    record_projection,
)

TOP_COLLECTIONS = 3


@dataclass
class OwnerReport:
    """Everything the scheduled brief needs for one owner"""

    owner_id: str
    as_of: date
    current_cash: int
    forecast: CashForecast
    health: HealthScoreResult
    salary_alert: Optional[SalaryAlert]
    salary_reminders: List[StaffObligation]
    salary_status: List[SalaryStatus]
    collections: List[Receivable]
    overdue: List[Receivable]
    outstanding_total: int


@dataclass
class BatchResult:
    reports: Dict[str, OwnerReport] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)


def build_owner_report(
    db: Session,
    owner_id: str,
    today: date,
    now: Optional[datetime] = None,
    config: Settings = default_settings,
) -> OwnerReport:
    """
    Build one owner's report.

    Flow:
    1. Load the ledger snapshot and project cash forward
    2. Load the health snapshot and score it
    3. Check upcoming salaries against current cash, remind on exact paydays
    4. Rank open receivables for collection
    """
    now = now or datetime.now(timezone.utc)
    repo = SnapshotRepository(db)

    ledger = repo.ledger_snapshot(owner_id, today, config.history_window_days)
    cash_forecast = projection.forecast(
        ledger,
        horizon_days=config.projection_horizon_days,
        window_days=config.history_window_days,
        policy=config.projection_policy(),
    )
    record_projection(cash_forecast.points)

    health_snapshot = repo.health_snapshot(owner_id, today)
    health_result = health.score(health_snapshot)
    record_health_score(health_result.status)

    open_items = repo.open_receivables(owner_id)

    return OwnerReport(
        owner_id=ledger.owner_id,
        as_of=today,
        current_cash=ledger.current_cash,
        forecast=cash_forecast,
        health=health_result,
        salary_alert=salary_alert(
            ledger.staff, ledger.current_cash, today, config.salary_alert_lookahead_days
        ),
        salary_reminders=salary_reminder(ledger.staff, today, config.salary_reminder_days),
        # Health snapshot reaches back to last month, so it covers this month's payouts
        salary_status=salary_status(ledger.staff, health_snapshot.transactions, today),
        collections=collection_priority(open_items)[:TOP_COLLECTIONS],
        overdue=overdue_receivables(open_items, now, config.overdue_receivable_days),
        outstanding_total=outstanding_total(open_items),
    )


def run_briefs(
    session_factory: Callable[[], Session],
    today: date,
    now: Optional[datetime] = None,
    config: Settings = default_settings,
) -> BatchResult:
    """
    Build reports for every active owner.

    Each owner gets its own session; a failure is logged and counted and the
    run moves on to the next owner.
    """
    result = BatchResult()

    db = session_factory()
    try:
        owner_ids = SnapshotRepository(db).list_active_owner_ids()
    finally:
        db.close()

    for owner_id in owner_ids:
        db = session_factory()
        try:
            result.reports[owner_id] = build_owner_report(db, owner_id, today, now, config)
        except Exception as e:
            brief_failure_counter.inc()
            result.failed[owner_id] = str(e)
            logging.error(f"Brief failed for owner: {e}", extra={"owner_id": owner_id, "step": "brief"})
        finally:
            db.close()

    logging.info(
        "Brief run completed",
        extra={"step": "brief_run_complete", "owners": len(owner_ids), "failed": len(result.failed)},
    )
    return result
