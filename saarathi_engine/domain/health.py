"""Business health score - five weighted sub-scores combined into one 0-100 number"""

from datetime import date
from typing import Iterable

from saarathi_engine.domain.ledger import margin_percent, month_totals, round_half_up
from saarathi_engine.domain.models import (
    PAID,
    HealthComponent,
    HealthScoreResult,
    OwnerHealthSnapshot,
    Receivable,
)
from saarathi_engine.utils.date_utils import previous_month, whole_days_between

WEIGHTS = {
    "cash_runway": 0.25,
    "profit_margin": 0.25,
    "collection_speed": 0.15,
    "expense_control": 0.15,
    "growth_trend": 0.20,
}

FALLBACK_RUNWAY_DAYS = 30
FALLBACK_COLLECTION_DAYS = 15
UNPAID_COLLECTION_DAYS = 30  # paid receivable with no recorded paid_at

# Score bands (lower bound inclusive)
EXCELLENT = "excellent"
GOOD = "good"
CAUTION = "caution"
CRITICAL = "critical"


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def cash_runway_score(current_cash: int, daily_expense: float) -> HealthComponent:
    """30 days of runway scores ~100; no spend yet falls back to 30 days"""
    if daily_expense > 0:
        runway_days = int(current_cash // daily_expense)
    else:
        runway_days = FALLBACK_RUNWAY_DAYS
    raw = clamp(runway_days * 3.33)
    return HealthComponent(score=round_half_up(raw), value=runway_days, raw=raw)


def profit_margin_score(income: int, expense: int) -> HealthComponent:
    """40% margin scores 100; no income scores 0"""
    margin = margin_percent(income, expense)
    raw = clamp(margin * 2.5)
    return HealthComponent(score=round_half_up(raw), value=round_half_up(margin), raw=raw)


def average_collection_days(paid_receivables: Iterable[Receivable]) -> float:
    days = []
    for receivable in paid_receivables:
        if receivable.status != PAID:
            continue
        if receivable.paid_at is None:
            days.append(UNPAID_COLLECTION_DAYS)
        else:
            days.append(whole_days_between(receivable.created_at, receivable.paid_at))
    if not days:
        return FALLBACK_COLLECTION_DAYS
    return sum(days) / len(days)


def collection_speed_score(paid_receivables: Iterable[Receivable]) -> HealthComponent:
    """Same-day collection scores 100, 30 days scores 0"""
    avg_days = average_collection_days(paid_receivables)
    raw = clamp(100 - avg_days * 3.33)
    return HealthComponent(score=round_half_up(raw), value=round_half_up(avg_days), raw=raw)


def expense_control_score(this_month_expense: int, last_month_expense: int) -> HealthComponent:
    """Flat spend scores 100, doubled spend scores 0; value is the change in percent"""
    ratio = this_month_expense / last_month_expense if last_month_expense > 0 else 1.0
    raw = clamp(100 - (ratio - 1) * 100)
    return HealthComponent(score=round_half_up(raw), value=round_half_up((ratio - 1) * 100), raw=raw)


def growth_trend_score(this_month_income: int, last_month_income: int) -> HealthComponent:
    """Centered on 50: flat income is neutral, +25% scores 100"""
    if last_month_income > 0:
        growth = (this_month_income - last_month_income) / last_month_income * 100
    else:
        growth = 0.0
    raw = clamp(50 + growth * 2)
    return HealthComponent(score=round_half_up(raw), value=round_half_up(growth), raw=raw)


def determine_status(score: int) -> str:
    if score >= 80:
        return EXCELLENT
    elif score >= 60:
        return GOOD
    elif score >= 40:
        return CAUTION
    else:
        return CRITICAL


def combine(
    cash_runway: HealthComponent,
    profit_margin: HealthComponent,
    collection_speed: HealthComponent,
    expense_control: HealthComponent,
    growth_trend: HealthComponent,
) -> HealthScoreResult:
    weighted = (
        cash_runway.raw * WEIGHTS["cash_runway"]
        + profit_margin.raw * WEIGHTS["profit_margin"]
        + collection_speed.raw * WEIGHTS["collection_speed"]
        + expense_control.raw * WEIGHTS["expense_control"]
        + growth_trend.raw * WEIGHTS["growth_trend"]
    )
    # Weight the unrounded components; only the total is rounded
    score = int(clamp(round_half_up(weighted)))

    return HealthScoreResult(
        score=score,
        status=determine_status(score),
        cash_runway=cash_runway,
        profit_margin=profit_margin,
        collection_speed=collection_speed,
        expense_control=expense_control,
        growth_trend=growth_trend,
    )


def score(snapshot: OwnerHealthSnapshot) -> HealthScoreResult:
    """
    Main entry point: score an owner's month-to-date health.

    Compares the snapshot's calendar month with the previous one. Daily expense
    for the runway is this month's outgoings spread over the days elapsed so far.
    """
    as_of: date = snapshot.as_of
    last_year, last_month = previous_month(as_of.year, as_of.month)

    this_month = month_totals(snapshot.transactions, as_of.year, as_of.month)
    previous = month_totals(snapshot.transactions, last_year, last_month)

    daily_expense = this_month.expense / max(as_of.day, 1)

    return combine(
        cash_runway=cash_runway_score(snapshot.current_cash, daily_expense),
        profit_margin=profit_margin_score(this_month.income, this_month.expense),
        collection_speed=collection_speed_score(snapshot.paid_receivables),
        expense_control=expense_control_score(this_month.expense, previous.expense),
        growth_trend=growth_trend_score(this_month.income, previous.income),
    )
