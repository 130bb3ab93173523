"""Receivable tracking - partial payments, collection priority and payer reliability"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from saarathi_engine.domain.exceptions import InvalidArgumentError
from saarathi_engine.domain.models import OPEN_STATUSES, PAID, PARTIAL, Receivable
from saarathi_engine.utils.date_utils import whole_days_between


@dataclass
class PaymentOutcome:
    """Updated receivable plus the reliability metrics recorded on full payment"""

    receivable: Receivable
    applied: bool
    days_to_pay: Optional[int] = None
    reliability_score: Optional[int] = None

    @property
    def fully_paid(self) -> bool:
        return self.receivable.status == PAID


def clamp_overpayment(amount: int, new_amount_paid: int) -> int:
    """
    Overpayment policy: cumulative paid never exceeds the original amount.

    Excess is discarded rather than carried forward as customer credit.
    """
    return min(new_amount_paid, amount)


def apply_payment(receivable: Receivable, payment: int, now: Optional[datetime] = None) -> Receivable:
    """
    Apply a payment and return the updated receivable.

    - remaining <= 0: status paid, paid_at stamped, amount_paid clamped to amount
    - otherwise: status partial
    - already paid: returned unchanged
    """
    if payment <= 0:
        raise InvalidArgumentError(f"Payment must be positive, got {payment}")
    if receivable.status == PAID:
        return receivable

    now = now or datetime.now(timezone.utc)
    new_amount_paid = receivable.amount_paid + payment
    remaining = receivable.amount - new_amount_paid

    if remaining <= 0:
        return replace(
            receivable,
            status=PAID,
            paid_at=now,
            amount_paid=clamp_overpayment(receivable.amount, new_amount_paid),
        )

    return replace(receivable, status=PARTIAL, amount_paid=new_amount_paid)


def reliability_score(days_to_pay: int) -> int:
    """Three buckets: within a week 80, within two weeks 60, slower 40"""
    if days_to_pay < 0:
        raise InvalidArgumentError(f"days_to_pay must be non-negative, got {days_to_pay}")
    if days_to_pay <= 7:
        return 80
    elif days_to_pay <= 14:
        return 60
    else:
        return 40


def record_payment(receivable: Receivable, payment: int, now: Optional[datetime] = None) -> PaymentOutcome:
    """apply_payment plus days-to-pay and reliability when the receivable closes"""
    if receivable.status == PAID:
        return PaymentOutcome(receivable=receivable, applied=False)

    updated = apply_payment(receivable, payment, now)
    if updated.status != PAID:
        return PaymentOutcome(receivable=updated, applied=True)

    days_to_pay = max(0, whole_days_between(receivable.created_at, updated.paid_at))
    return PaymentOutcome(
        receivable=updated,
        applied=True,
        days_to_pay=days_to_pay,
        reliability_score=reliability_score(days_to_pay),
    )


def open_receivables(receivables: Iterable[Receivable]) -> List[Receivable]:
    return [r for r in receivables if r.status in OPEN_STATUSES]


def collection_priority(receivables: Iterable[Receivable]) -> List[Receivable]:
    """Open receivables, largest remaining balance first (oldest first on ties)"""
    return sorted(open_receivables(receivables), key=lambda r: (-r.remaining, r.created_at))


def overdue_receivables(receivables: Iterable[Receivable], now: datetime, overdue_days: int = 14) -> List[Receivable]:
    """Open receivables created more than overdue_days ago, oldest first"""
    cutoff = now - timedelta(days=overdue_days)
    overdue = [r for r in open_receivables(receivables) if r.created_at < cutoff]
    return sorted(overdue, key=lambda r: r.created_at)


def outstanding_total(receivables: Iterable[Receivable]) -> int:
    return sum(r.remaining for r in open_receivables(receivables))
