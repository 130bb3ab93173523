"""Obligation scheduling - which salaries fall due on a given date, and how soon"""

from datetime import date
from typing import Iterable, List, Optional

from saarathi_engine.domain.exceptions import InvalidArgumentError
from saarathi_engine.domain.models import (
    MONTHLY,
    SALARY,
    SALARY_TYPES,
    ObligationsDue,
    SalaryAlert,
    SalaryStatus,
    StaffDue,
    StaffObligation,
    TransactionRecord,
)
from saarathi_engine.utils.date_utils import days_in_month, effective_payment_day, next_month

DEFAULT_PAYMENT_DAY = 1


def validate_staff(staff: StaffObligation) -> None:
    if staff.salary_type not in SALARY_TYPES:
        raise InvalidArgumentError(f"Unknown salary type: {staff.salary_type!r}")
    if staff.salary_amount < 0:
        raise InvalidArgumentError(f"Salary must be non-negative, got {staff.salary_amount}")
    if staff.advance_balance < 0:
        raise InvalidArgumentError(f"Advance balance must be non-negative, got {staff.advance_balance}")
    if staff.payment_day is not None and not 1 <= staff.payment_day <= 31:
        raise InvalidArgumentError(f"Payment day must be within 1..31, got {staff.payment_day}")


def payment_day_of(staff: StaffObligation) -> int:
    return staff.payment_day or DEFAULT_PAYMENT_DAY


def net_salary(staff: StaffObligation) -> int:
    """Salary after advance deduction; negative when the advance exceeds the salary"""
    return staff.salary_amount - staff.advance_balance


def amount_due(staff: StaffObligation) -> int:
    """Cash actually leaving on payday, floored at zero"""
    return max(0, net_salary(staff))


def is_payday(staff: StaffObligation, day: date) -> bool:
    """Monthly staff are paid on their payment day, or the month's last day when it is shorter"""
    if staff.salary_type != MONTHLY:
        return False
    return day.day == effective_payment_day(payment_day_of(staff), day.year, day.month)


def obligations_due(staff: Iterable[StaffObligation], day: date) -> ObligationsDue:
    """
    Salary obligations that fall on one calendar date.

    Only active monthly staff are scheduled. Daily and weekly wages are already
    part of the historical expense average, so they never appear here.
    """
    per_staff: List[StaffDue] = []
    for member in staff:
        validate_staff(member)
        if not member.is_active or not is_payday(member, day):
            continue
        per_staff.append(StaffDue(staff_id=member.staff_id, amount_due=amount_due(member)))

    return ObligationsDue(
        date=day,
        total_due=sum(item.amount_due for item in per_staff),
        per_staff=per_staff,
    )


def days_until(payment_day: int, today: date) -> int:
    """
    Calendar days from today until the next payment day.

    Uses the real length of the current month, so a payment on the 1st seen
    from Feb 27 is 2 days away in a common year.
    """
    if not 1 <= payment_day <= 31:
        raise InvalidArgumentError(f"Payment day must be within 1..31, got {payment_day}")

    this_month_day = effective_payment_day(payment_day, today.year, today.month)
    if this_month_day >= today.day:
        return this_month_day - today.day

    year, month = next_month(today.year, today.month)
    remaining_this_month = days_in_month(today.year, today.month) - today.day
    return remaining_this_month + effective_payment_day(payment_day, year, month)


def paid_this_month(staff_id: str, transactions: Iterable[TransactionRecord], today: date) -> bool:
    return any(
        txn.kind == SALARY
        and txn.staff_ref == staff_id
        and txn.occurred_at.year == today.year
        and txn.occurred_at.month == today.month
        for txn in transactions
    )


def salary_status(
    staff: Iterable[StaffObligation],
    transactions: List[TransactionRecord],
    today: date,
) -> List[SalaryStatus]:
    """Per staff member: settled this month, and what is still pending (advance deducted, not floored)"""
    statuses = []
    for member in staff:
        validate_staff(member)
        if not member.is_active:
            continue

        if member.salary_type != MONTHLY:
            # Daily/weekly staff are reported at their rate only
            statuses.append(
                SalaryStatus(
                    staff_id=member.staff_id,
                    salary_type=member.salary_type,
                    paid_this_month=False,
                    amount_pending=member.salary_amount,
                )
            )
            continue

        paid = paid_this_month(member.staff_id, transactions, today)
        statuses.append(
            SalaryStatus(
                staff_id=member.staff_id,
                salary_type=member.salary_type,
                paid_this_month=paid,
                amount_pending=0 if paid else net_salary(member),
            )
        )
    return statuses


def salary_alert(
    staff: Iterable[StaffObligation],
    current_cash: int,
    today: date,
    lookahead_days: int = 5,
) -> Optional[SalaryAlert]:
    """
    Monthly salaries due within the lookahead window, checked against current cash.

    Returns None when nothing is due in the window.
    """
    if lookahead_days < 0:
        raise InvalidArgumentError(f"lookahead_days must be non-negative, got {lookahead_days}")

    upcoming = []
    for member in staff:
        validate_staff(member)
        if not member.is_active or member.salary_type != MONTHLY:
            continue
        days_left = days_until(payment_day_of(member), today)
        if days_left <= lookahead_days:
            upcoming.append((member, days_left))

    if not upcoming:
        return None

    total_due = sum(amount_due(member) for member, _ in upcoming)
    return SalaryAlert(
        days_until=min(days_left for _, days_left in upcoming),
        total_due=total_due,
        current_cash=current_cash,
        shortfall=max(0, total_due - current_cash),
        staff_ids=[member.staff_id for member, _ in upcoming],
    )


def salary_reminder(staff: Iterable[StaffObligation], today: date, days_ahead: int = 3) -> List[StaffObligation]:
    """Monthly staff whose payday is exactly days_ahead away"""
    return [
        member
        for member in staff
        if member.is_active
        and member.salary_type == MONTHLY
        and days_until(payment_day_of(member), today) == days_ahead
    ]
