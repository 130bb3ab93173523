"""Unit tests for receivable tracking and payer reliability"""

import pytest
from datetime import datetime, timedelta, timezone
from saarathi_engine.domain.models import Receivable
from saarathi_engine.domain.receivables import (
    apply_payment,
    clamp_overpayment,
    collection_priority,
    outstanding_total,
    overdue_receivables,
    record_payment,
    reliability_score,
)
from saarathi_engine.domain.exceptions import InvalidArgumentError

NOW = datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)


def receivable(amount: int, amount_paid: int = 0, status: str = "pending", age_days: int = 0, rid: str = "r1") -> Receivable:
    return Receivable(
        receivable_id=rid,
        amount=amount,
        amount_paid=amount_paid,
        status=status,
        created_at=NOW - timedelta(days=age_days),
    )


def test_partial_payment():
    updated = apply_payment(receivable(8000), 3000, NOW)

    assert updated.status == "partial"
    assert updated.amount_paid == 3000
    assert updated.remaining == 5000
    assert updated.paid_at is None


def test_exact_payment_closes_receivable():
    updated = apply_payment(receivable(8000, 3000, "partial"), 5000, NOW)

    assert updated.status == "paid"
    assert updated.amount_paid == 8000
    assert updated.paid_at == NOW


def test_overpayment_is_clamped_to_amount():
    """8000 owed, 3000 paid, 6000 more arrives: remaining -1000 -> paid at 8000"""
    original = receivable(8000, 3000, "partial")

    updated = apply_payment(original, 6000, NOW)

    assert updated.status == "paid"
    assert updated.amount_paid == 8000
    assert updated.remaining == 0
    assert original.amount_paid == 3000  # input left untouched


def test_clamp_overpayment_policy():
    assert clamp_overpayment(8000, 9000) == 8000
    assert clamp_overpayment(8000, 7999) == 7999


def test_paid_receivable_is_terminal():
    paid = apply_payment(receivable(8000), 8000, NOW)

    again = apply_payment(paid, 5000, NOW + timedelta(days=1))

    assert again == paid
    assert again.amount_paid == 8000
    assert again.paid_at == NOW


@pytest.mark.parametrize("payment", [0, -100])
def test_non_positive_payment_rejected(payment):
    with pytest.raises(InvalidArgumentError):
        apply_payment(receivable(8000), payment, NOW)


@pytest.mark.parametrize(
    "days_to_pay, expected",
    [(0, 80), (7, 80), (8, 60), (14, 60), (15, 40), (90, 40)],
)
def test_reliability_bucket_boundaries(days_to_pay, expected):
    assert reliability_score(days_to_pay) == expected


def test_reliability_rejects_negative_days():
    with pytest.raises(InvalidArgumentError):
        reliability_score(-1)


def test_record_payment_scores_reliability_on_close():
    outcome = record_payment(receivable(5000, age_days=10), 5000, NOW)

    assert outcome.applied is True
    assert outcome.fully_paid is True
    assert outcome.days_to_pay == 10
    assert outcome.reliability_score == 60


def test_record_payment_partial_has_no_reliability():
    outcome = record_payment(receivable(5000, age_days=3), 1000, NOW)

    assert outcome.applied is True
    assert outcome.fully_paid is False
    assert outcome.reliability_score is None


def test_record_payment_on_paid_is_not_applied():
    paid = receivable(5000, 5000, "paid", age_days=3)

    outcome = record_payment(paid, 1000, NOW)

    assert outcome.applied is False
    assert outcome.receivable is paid


def test_collection_priority_orders_by_remaining():
    items = [
        receivable(5000, rid="small"),
        receivable(20000, 15000, "partial", rid="mostly_paid"),
        receivable(12000, rid="large"),
        receivable(9000, 9000, "paid", rid="done"),
    ]

    ordered = collection_priority(items)

    assert [r.receivable_id for r in ordered] == ["large", "small", "mostly_paid"]
    assert outstanding_total(items) == 12000 + 5000 + 5000


def test_overdue_receivables():
    items = [
        receivable(5000, age_days=20, rid="old"),
        receivable(5000, age_days=30, rid="older"),
        receivable(5000, age_days=3, rid="fresh"),
        receivable(5000, 5000, "paid", age_days=40, rid="settled"),
    ]

    overdue = overdue_receivables(items, NOW, overdue_days=14)

    assert [r.receivable_id for r in overdue] == ["older", "old"]


def test_overdue_boundary_is_strictly_older_than_cutoff():
    on_cutoff = Receivable(
        receivable_id="on_cutoff", amount=5000, created_at=NOW - timedelta(days=14)
    )
    past_cutoff = Receivable(
        receivable_id="past_cutoff", amount=5000, created_at=NOW - timedelta(days=14, seconds=1)
    )

    overdue = overdue_receivables([on_cutoff, past_cutoff], NOW, overdue_days=14)

    assert [r.receivable_id for r in overdue] == ["past_cutoff"]


def test_outstanding_total_counts_only_what_is_left():
    items = [
        receivable(8000, 3000, "partial", rid="partial"),
        receivable(2000, rid="pending"),
        receivable(4000, 4000, "paid", rid="settled"),
    ]

    assert outstanding_total(items) == 5000 + 2000
    assert outstanding_total([]) == 0
