"""Data access layer - builds frozen domain snapshots and persists payment results"""

import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional
from sqlalchemy.orm import Session
from saarathi_engine.infrastructure.database.models import (
    Customer,
    LedgerTransaction,
    Owner,
    ReceivableRow,
    Staff,
)
from saarathi_engine.domain.exceptions import NotFoundError
from saarathi_engine.domain.models import (
    OPEN_STATUSES,
    PAID,
    OwnerHealthSnapshot,
    OwnerLedgerSnapshot,
    Receivable,
    StaffObligation,
    TransactionRecord,
)
from saarathi_engine.domain.receivables import PaymentOutcome
from saarathi_engine.utils.date_utils import ensure_utc, start_of_previous_month


def parse_id(value: str, entity: str) -> uuid.UUID:
    """Unknown and malformed ids are both reported as not found"""
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFoundError(f"{entity} {value} not found")


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def to_transaction_record(row: LedgerTransaction) -> TransactionRecord:
    return TransactionRecord(
        kind=row.kind,
        amount=row.amount,
        occurred_at=ensure_utc(row.created_at),
        category=row.category,
        staff_ref=str(row.staff_id) if row.staff_id else None,
        customer_ref=str(row.customer_id) if row.customer_id else None,
    )


def to_staff_obligation(row: Staff) -> StaffObligation:
    return StaffObligation(
        staff_id=str(row.id),
        salary_amount=row.salary_amount,
        salary_type=row.salary_type,
        payment_day=row.payment_day,
        advance_balance=row.advance_balance,
        name=row.name,
        is_active=row.is_active,
    )


def to_receivable(row: ReceivableRow) -> Receivable:
    return Receivable(
        receivable_id=str(row.id),
        amount=row.amount,
        amount_paid=row.amount_paid,
        status=row.status,
        created_at=ensure_utc(row.created_at),
        paid_at=ensure_utc(row.paid_at) if row.paid_at else None,
        customer_id=str(row.customer_id) if row.customer_id else None,
    )


class SnapshotRepository:
    """Read-only snapshots of one owner's ledger for the pure core"""

    def __init__(self, db: Session):
        self.db = db

    def get_owner(self, owner_id: str) -> Owner:
        owner = self.db.get(Owner, parse_id(owner_id, "Owner"))
        if owner is None:
            raise NotFoundError(f"Owner {owner_id} not found")
        return owner

    def list_active_owner_ids(self) -> List[str]:
        rows = self.db.query(Owner.id).filter(Owner.is_active.is_(True)).order_by(Owner.created_at).all()
        return [str(row.id) for row in rows]

    def _transactions_since(self, owner: Owner, since: date) -> List[TransactionRecord]:
        rows = (
            self.db.query(LedgerTransaction)
            .filter(LedgerTransaction.owner_id == owner.id)
            .filter(LedgerTransaction.created_at >= start_of_day(since))
            .order_by(LedgerTransaction.created_at)
            .all()
        )
        return [to_transaction_record(row) for row in rows]

    def _active_staff(self, owner: Owner) -> List[StaffObligation]:
        rows = (
            self.db.query(Staff)
            .filter(Staff.owner_id == owner.id, Staff.is_active.is_(True))
            .order_by(Staff.created_at)
            .all()
        )
        return [to_staff_obligation(row) for row in rows]

    def ledger_snapshot(self, owner_id: str, as_of: date, window_days: int) -> OwnerLedgerSnapshot:
        """Transactions in the trailing window plus active staff"""
        owner = self.get_owner(owner_id)
        return OwnerLedgerSnapshot(
            owner_id=str(owner.id),
            current_cash=owner.current_cash,
            as_of=as_of,
            transactions=self._transactions_since(owner, as_of - timedelta(days=window_days)),
            staff=self._active_staff(owner),
        )

    def health_snapshot(self, owner_id: str, as_of: date) -> OwnerHealthSnapshot:
        """This month and last month's transactions plus every paid receivable"""
        owner = self.get_owner(owner_id)
        paid_rows = (
            self.db.query(ReceivableRow)
            .filter(ReceivableRow.owner_id == owner.id, ReceivableRow.status == PAID)
            .all()
        )
        return OwnerHealthSnapshot(
            owner_id=str(owner.id),
            current_cash=owner.current_cash,
            as_of=as_of,
            transactions=self._transactions_since(owner, start_of_previous_month(as_of)),
            paid_receivables=[to_receivable(row) for row in paid_rows],
        )

    def open_receivables(self, owner_id: str) -> List[Receivable]:
        owner = self.get_owner(owner_id)
        rows = (
            self.db.query(ReceivableRow)
            .filter(ReceivableRow.owner_id == owner.id, ReceivableRow.status.in_(sorted(OPEN_STATUSES)))
            .order_by(ReceivableRow.created_at)
            .all()
        )
        return [to_receivable(row) for row in rows]


class ReceivableRepository:
    """Repository for receivables and the customer metrics derived from them"""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, receivable_id: str) -> ReceivableRow:
        row = self.db.get(ReceivableRow, parse_id(receivable_id, "Receivable"))
        if row is None:
            raise NotFoundError(f"Receivable {receivable_id} not found")
        return row

    def get_receivable(self, receivable_id: str) -> Receivable:
        return to_receivable(self._get_row(receivable_id))

    def save_payment(self, outcome: PaymentOutcome) -> Optional[Customer]:
        """Persist the updated receivable; record reliability on the customer when it closed"""
        row = self._get_row(outcome.receivable.receivable_id)
        row.amount_paid = outcome.receivable.amount_paid
        row.status = outcome.receivable.status
        row.paid_at = outcome.receivable.paid_at

        customer = row.customer
        if customer is not None and outcome.reliability_score is not None:
            customer.avg_days_to_pay = outcome.days_to_pay
            customer.reliability_score = outcome.reliability_score

        self.db.flush()
        return customer
