"""Cash projection engine - day-by-day forecast with risk flags and decaying confidence"""

from datetime import date, timedelta
from typing import List, Optional, Sequence

from saarathi_engine.domain.exceptions import InvalidArgumentError
from saarathi_engine.domain.ledger import aggregate, round_half_up
from saarathi_engine.domain.models import (
    FLAG_LOW_CASH,
    FLAG_NEGATIVE,
    FLAG_SALARY_DUE,
    HIGH,
    LOW,
    MEDIUM,
    PROBLEM_FLAGS,
    CashForecast,
    OwnerLedgerSnapshot,
    ProjectionPoint,
    ProjectionPolicy,
    StaffObligation,
)
from saarathi_engine.domain.obligations import obligations_due

DEFAULT_POLICY = ProjectionPolicy()

SATURDAY = 5
SUNDAY = 6


def weekend_multiplier(day: date, policy: ProjectionPolicy = DEFAULT_POLICY) -> float:
    """Income boost for Saturday/Sunday order volume"""
    if day.weekday() in (SATURDAY, SUNDAY):
        return policy.weekend_income_multiplier
    return 1.0


def confidence_for(index: int) -> str:
    """high for days 0-2, medium for 3-6, low beyond"""
    if index <= 2:
        return HIGH
    if index <= 6:
        return MEDIUM
    return LOW


def project(
    current_cash: int,
    daily_income_avg: float,
    daily_expense_avg: float,
    staff: Sequence[StaffObligation],
    horizon_days: int,
    start_date: date,
    policy: ProjectionPolicy = DEFAULT_POLICY,
) -> List[ProjectionPoint]:
    """
    Walk forward from current cash one day at a time.

    Each day:
    - expected_in = daily income average, boosted on weekends
    - expected_out = daily expense average + monthly salaries falling on that date
    - running cash carries over from the previous day

    Flags, first match wins:
    1. negative   - running cash below zero (shortfall = how far below)
    2. salary_due - salary paid that day (shortfall = salary not covered by the balance)
    3. low_cash   - less than low_cash_buffer_days of expenses left
    """
    if horizon_days <= 0:
        raise InvalidArgumentError(f"horizon_days must be positive, got {horizon_days}")
    if daily_income_avg < 0 or daily_expense_avg < 0:
        raise InvalidArgumentError("Daily averages must be non-negative")

    # Whole currency units so projected_cash[i] == projected_cash[i-1] + in - out exactly
    daily_out = round_half_up(daily_expense_avg)
    low_cash_threshold = daily_out * policy.low_cash_buffer_days
    running_cash = current_cash
    points: List[ProjectionPoint] = []

    for i in range(horizon_days):
        day = start_date + timedelta(days=i)
        salaries_due = obligations_due(staff, day).total_due

        expected_in = round_half_up(daily_income_avg * weekend_multiplier(day, policy))
        expected_out = daily_out + salaries_due
        running_cash = running_cash + expected_in - expected_out

        flags = ()
        shortfall = 0
        if running_cash < 0:
            flags = (FLAG_NEGATIVE,)
            shortfall = -running_cash
        elif salaries_due > 0:
            flags = (FLAG_SALARY_DUE,)
            shortfall = max(0, salaries_due - running_cash)
        elif running_cash < low_cash_threshold:
            flags = (FLAG_LOW_CASH,)

        points.append(
            ProjectionPoint(
                date=day,
                projected_cash=running_cash,
                expected_in=expected_in,
                expected_out=expected_out,
                salaries_due=salaries_due,
                confidence=confidence_for(i),
                flags=flags,
                shortfall=shortfall,
            )
        )

    return points


def first_problem_day(points: Sequence[ProjectionPoint]) -> Optional[ProjectionPoint]:
    """Earliest day flagged negative or salary_due; low_cash alone is not a problem"""
    for point in points:
        if PROBLEM_FLAGS.intersection(point.flags):
            return point
    return None


def forecast(
    snapshot: OwnerLedgerSnapshot,
    horizon_days: int = 7,
    window_days: int = 30,
    policy: ProjectionPolicy = DEFAULT_POLICY,
) -> CashForecast:
    """
    Main entry point: derive historical rates from the snapshot and project forward.

    The walk starts on the snapshot's as_of date.
    """
    rates = aggregate(snapshot.transactions, window_days, snapshot.as_of)
    points = project(
        current_cash=snapshot.current_cash,
        daily_income_avg=rates.daily_income_avg,
        daily_expense_avg=rates.daily_expense_avg,
        staff=snapshot.staff,
        horizon_days=horizon_days,
        start_date=snapshot.as_of,
        policy=policy,
    )
    return CashForecast(aggregate=rates, points=points, first_problem_day=first_problem_day(points))
