"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import List, Tuple


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def previous_month(year: int, month: int) -> Tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> Tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def start_of_previous_month(day: date) -> date:
    year, month = previous_month(day.year, day.month)
    return date(year, month, 1)


def effective_payment_day(payment_day: int, year: int, month: int) -> int:
    """Payment day for a given month; days past month end fall on the last day"""
    return min(payment_day, days_in_month(year, month))


def whole_days_between(start: datetime, end: datetime) -> int:
    """Elapsed whole days between two timestamps (floored)"""
    return (end - start) // timedelta(days=1)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps coming back from the store"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
