"""Ledger aggregation - reduce transactions into windowed sums, daily rates and category buckets"""

from datetime import date, timedelta
from typing import Dict, Iterable, List

from saarathi_engine.domain.exceptions import InvalidArgumentError
from saarathi_engine.domain.models import (
    DEFAULT_CATEGORY,
    INCOME,
    OUTGOING_KINDS,
    TRANSACTION_KINDS,
    LedgerAggregate,
    MonthTotals,
    ProfitAndLoss,
    TransactionRecord,
)
from saarathi_engine.utils.date_utils import generate_date_range


def validate_transaction(txn: TransactionRecord) -> None:
    if txn.kind not in TRANSACTION_KINDS:
        raise InvalidArgumentError(f"Unknown transaction kind: {txn.kind!r}")
    if txn.amount < 0:
        raise InvalidArgumentError(f"Transaction amount must be non-negative, got {txn.amount}")


def aggregate(
    transactions: Iterable[TransactionRecord],
    window_days: int,
    as_of: date,
) -> LedgerAggregate:
    """
    Sum income and outgoings over the trailing window ending at as_of.

    Requirements:
    - Only transactions on or after as_of - window_days are counted
    - Daily averages use the fixed window length as divisor, so idle days count
    - Outgoings are expense + salary + advance; income is income only
    - Expenses without a category land in the "other" bucket
    """
    if window_days <= 0:
        raise InvalidArgumentError(f"window_days must be positive, got {window_days}")

    window_start = as_of - timedelta(days=window_days)

    income_by_day: Dict[date, int] = {day: 0 for day in generate_date_range(window_start, as_of)}
    expense_by_day: Dict[date, int] = dict(income_by_day)
    expense_by_category: Dict[str, int] = {}
    total_income = 0
    total_expense = 0

    for txn in transactions:
        validate_transaction(txn)
        day = txn.occurred_at.date()
        if day < window_start:
            continue

        if txn.kind == INCOME:
            total_income += txn.amount
            income_by_day[day] = income_by_day.get(day, 0) + txn.amount
        elif txn.kind in OUTGOING_KINDS:
            total_expense += txn.amount
            expense_by_day[day] = expense_by_day.get(day, 0) + txn.amount
            category = txn.category or DEFAULT_CATEGORY
            expense_by_category[category] = expense_by_category.get(category, 0) + txn.amount

    return LedgerAggregate(
        as_of=as_of,
        window_days=window_days,
        total_income=total_income,
        total_expense=total_expense,
        daily_income_avg=total_income / window_days,
        daily_expense_avg=total_expense / window_days,
        income_by_day=income_by_day,
        expense_by_day=expense_by_day,
        expense_by_category=expense_by_category,
    )


def month_totals(transactions: Iterable[TransactionRecord], year: int, month: int) -> MonthTotals:
    """Income and outgoings (every non-income kind) booked in one calendar month"""
    income = 0
    expense = 0
    for txn in transactions:
        validate_transaction(txn)
        if txn.occurred_at.year != year or txn.occurred_at.month != month:
            continue
        if txn.kind == INCOME:
            income += txn.amount
        else:
            expense += txn.amount
    return MonthTotals(year=year, month=month, income=income, expense=expense)


def margin_percent(income: int, expense: int) -> float:
    """Profit as a percentage of income; 0 when there is no income"""
    if income <= 0:
        return 0.0
    return (income - expense) / income * 100


def profit_and_loss(transactions: List[TransactionRecord], year: int, month: int) -> ProfitAndLoss:
    totals = month_totals(transactions, year, month)

    by_category: Dict[str, int] = {}
    for txn in transactions:
        if txn.occurred_at.year != year or txn.occurred_at.month != month:
            continue
        if txn.kind in OUTGOING_KINDS:
            category = txn.category or DEFAULT_CATEGORY
            by_category[category] = by_category.get(category, 0) + txn.amount

    # Largest spend first, ties by name for stable output
    ordered = sorted(by_category.items(), key=lambda item: (-item[1], item[0]))

    return ProfitAndLoss(
        totals=totals,
        margin_percent=round_half_up(margin_percent(totals.income, totals.expense)),
        expense_by_category=ordered,
    )


def round_half_up(value: float) -> int:
    """Round to nearest integer with .5 going up (matches currency display rounding)"""
    return int(value // 1 + (1 if value % 1 >= 0.5 else 0))
