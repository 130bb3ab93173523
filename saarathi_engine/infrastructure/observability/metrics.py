"""Prometheus metrics for monitoring forecasts, health scores, and collections"""

from typing import Sequence

from prometheus_client import Counter, Histogram

from saarathi_engine.domain.models import ProjectionPoint

# Projection metrics
projection_counter = Counter(
    "saarathi_projection_total",
    "Total cash projections generated",
)

problem_day_counter = Counter(
    "saarathi_projection_flagged_days_total",
    "Forecast days carrying a risk flag",
    ["flag"],  # negative | salary_due | low_cash
)

# Health metrics
health_score_counter = Counter(
    "saarathi_health_score_total",
    "Health scores computed by status",
    ["status"],  # excellent | good | caution | critical
)

# Collection metrics
payment_counter = Counter(
    "saarathi_payment_total",
    "Payments applied to receivables",
    ["outcome"],  # partial | paid | ignored
)

# Batch metrics
brief_failure_counter = Counter(
    "saarathi_brief_failures_total",
    "Owners skipped by the scheduled brief run after an error",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_projection(points: Sequence[ProjectionPoint]) -> None:
    """Count the run and every flagged day by flag"""
    projection_counter.inc()
    for point in points:
        for flag in point.flags:
            problem_day_counter.labels(flag=flag).inc()


def record_health_score(status: str) -> None:
    health_score_counter.labels(status=status).inc()


def record_payment(status: str, applied: bool) -> None:
    payment_counter.labels(outcome=status if applied else "ignored").inc()
