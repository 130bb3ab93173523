"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Dict, List, Optional

from saarathi_engine.domain.models import (
    CashForecast,
    HealthScoreResult,
    ProjectionPoint,
    Receivable,
    SalaryAlert,
    SalaryStatus,
    StaffObligation,
)
from saarathi_engine.domain.obligations import amount_due, payment_day_of


class ProjectionPointSchema(BaseModel):
    """One forecast day"""

    date: date
    projected_cash: int
    expected_in: int
    expected_out: int
    salaries_due: int
    confidence: str
    flags: List[str]
    shortfall: int


class ProjectionResponse(BaseModel):
    """Response for GET /v1/owners/{owner_id}/projection"""

    owner_id: str
    current_cash: int
    daily_income_avg: float
    daily_expense_avg: float
    points: List[ProjectionPointSchema]
    first_problem_day: Optional[ProjectionPointSchema] = None


class HealthComponentSchema(BaseModel):
    score: int
    value: int


class HealthScoreResponse(BaseModel):
    """Response for GET /v1/owners/{owner_id}/health-score"""

    owner_id: str
    score: int
    status: str
    components: Dict[str, HealthComponentSchema]


class CategoryAmount(BaseModel):
    category: str
    amount: int


class ProfitAndLossSchema(BaseModel):
    year: int
    month: int
    income: int
    expense: int
    profit: int
    margin_percent: int
    expense_by_category: List[CategoryAmount]


class LedgerResponse(BaseModel):
    """Response for GET /v1/owners/{owner_id}/ledger"""

    owner_id: str
    as_of: date
    window_days: int
    total_income: int
    total_expense: int
    daily_income_avg: float
    daily_expense_avg: float
    expense_by_category: Dict[str, int]
    this_month: ProfitAndLossSchema


class SalaryAlertSchema(BaseModel):
    days_until: int
    total_due: int
    current_cash: int
    shortfall: int
    covered: bool
    staff_ids: List[str]


class SalaryStatusSchema(BaseModel):
    staff_id: str
    salary_type: str
    paid_this_month: bool
    amount_pending: int


class SalaryReminderSchema(BaseModel):
    """Monthly staff member whose payday is a fixed number of days away"""

    staff_id: str
    name: str
    payment_day: int
    amount_due: int


class ReceivableSchema(BaseModel):
    receivable_id: str
    customer_id: Optional[str] = None
    amount: int
    amount_paid: int
    remaining: int
    status: str
    created_at: datetime
    paid_at: Optional[datetime] = None


class ReportResponse(BaseModel):
    """Response for GET /v1/owners/{owner_id}/report"""

    owner_id: str
    as_of: date
    projection: ProjectionResponse
    health: HealthScoreResponse
    salary_alert: Optional[SalaryAlertSchema] = None
    salary_reminders: List[SalaryReminderSchema]
    salary_status: List[SalaryStatusSchema]
    collections: List[ReceivableSchema]
    overdue: List[ReceivableSchema]
    outstanding_total: int


class PaymentRequest(BaseModel):
    """Request body for POST /v1/receivables/{receivable_id}/payments"""

    amount: int = Field(..., gt=0, description="Payment amount in currency units")


class PaymentResponse(BaseModel):
    """Response for POST /v1/receivables/{receivable_id}/payments"""

    receivable: ReceivableSchema
    applied: bool
    days_to_pay: Optional[int] = None
    reliability_score: Optional[int] = None


def projection_point_schema(point: ProjectionPoint) -> ProjectionPointSchema:
    return ProjectionPointSchema(
        date=point.date,
        projected_cash=point.projected_cash,
        expected_in=point.expected_in,
        expected_out=point.expected_out,
        salaries_due=point.salaries_due,
        confidence=point.confidence,
        flags=list(point.flags),
        shortfall=point.shortfall,
    )


def projection_response(owner_id: str, current_cash: int, forecast: CashForecast) -> ProjectionResponse:
    first = forecast.first_problem_day
    return ProjectionResponse(
        owner_id=owner_id,
        current_cash=current_cash,
        daily_income_avg=round(forecast.aggregate.daily_income_avg, 2),
        daily_expense_avg=round(forecast.aggregate.daily_expense_avg, 2),
        points=[projection_point_schema(p) for p in forecast.points],
        first_problem_day=projection_point_schema(first) if first else None,
    )


def health_score_response(owner_id: str, result: HealthScoreResult) -> HealthScoreResponse:
    components = {
        "cash_runway": result.cash_runway,
        "profit_margin": result.profit_margin,
        "collection_speed": result.collection_speed,
        "expense_control": result.expense_control,
        "growth_trend": result.growth_trend,
    }
    return HealthScoreResponse(
        owner_id=owner_id,
        score=result.score,
        status=result.status,
        components={
            name: HealthComponentSchema(score=c.score, value=c.value) for name, c in components.items()
        },
    )


def receivable_schema(receivable: Receivable) -> ReceivableSchema:
    return ReceivableSchema(
        receivable_id=receivable.receivable_id,
        customer_id=receivable.customer_id,
        amount=receivable.amount,
        amount_paid=receivable.amount_paid,
        remaining=receivable.remaining,
        status=receivable.status,
        created_at=receivable.created_at,
        paid_at=receivable.paid_at,
    )


def salary_alert_schema(alert: Optional[SalaryAlert]) -> Optional[SalaryAlertSchema]:
    if alert is None:
        return None
    return SalaryAlertSchema(
        days_until=alert.days_until,
        total_due=alert.total_due,
        current_cash=alert.current_cash,
        shortfall=alert.shortfall,
        covered=alert.covered,
        staff_ids=alert.staff_ids,
    )


def salary_status_schema(status: SalaryStatus) -> SalaryStatusSchema:
    return SalaryStatusSchema(
        staff_id=status.staff_id,
        salary_type=status.salary_type,
        paid_this_month=status.paid_this_month,
        amount_pending=status.amount_pending,
    )


def salary_reminder_schema(member: StaffObligation) -> SalaryReminderSchema:
    return SalaryReminderSchema(
        staff_id=member.staff_id,
        name=member.name,
        payment_day=payment_day_of(member),
        amount_due=amount_due(member),
    )
