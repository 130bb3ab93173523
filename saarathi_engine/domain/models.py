"""Domain models - pure Python dataclasses representing ledger entities and derived results"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

# Transaction kinds
INCOME = "income"
EXPENSE = "expense"
SALARY = "salary"
ADVANCE = "advance"
TRANSACTION_KINDS = frozenset({INCOME, EXPENSE, SALARY, ADVANCE})
OUTGOING_KINDS = frozenset({EXPENSE, SALARY, ADVANCE})

DEFAULT_CATEGORY = "other"

# Salary types
MONTHLY = "monthly"
DAILY = "daily"
WEEKLY = "weekly"
SALARY_TYPES = frozenset({MONTHLY, DAILY, WEEKLY})

# Receivable statuses
PENDING = "pending"
PARTIAL = "partial"
PAID = "paid"
OPEN_STATUSES = frozenset({PENDING, PARTIAL})

# Projection flags
FLAG_NEGATIVE = "negative"
FLAG_SALARY_DUE = "salary_due"
FLAG_LOW_CASH = "low_cash"
PROBLEM_FLAGS = frozenset({FLAG_NEGATIVE, FLAG_SALARY_DUE})

# Forecast confidence
HIGH = "high"
MEDIUM = "medium"
LOW = "low"


@dataclass(frozen=True)
class TransactionRecord:
    """Append-only ledger entry"""

    kind: str  # income | expense | salary | advance
    amount: int
    occurred_at: datetime
    category: Optional[str] = None
    staff_ref: Optional[str] = None
    customer_ref: Optional[str] = None


@dataclass(frozen=True)
class StaffObligation:
    """One employee's pay terms"""

    staff_id: str
    salary_amount: int
    salary_type: str  # monthly | daily | weekly
    payment_day: Optional[int] = None  # 1-31, monthly only
    advance_balance: int = 0
    name: str = ""
    is_active: bool = True


@dataclass(frozen=True)
class Receivable:
    """Money owed by a customer, tracked until fully collected"""

    receivable_id: str
    amount: int
    created_at: datetime
    amount_paid: int = 0
    status: str = PENDING  # pending | partial | paid
    paid_at: Optional[datetime] = None
    customer_id: Optional[str] = None

    @property
    def remaining(self) -> int:
        return self.amount - self.amount_paid


@dataclass
class LedgerAggregate:
    """Windowed sums and daily rates derived from transactions"""

    as_of: date
    window_days: int
    total_income: int
    total_expense: int
    daily_income_avg: float
    daily_expense_avg: float
    income_by_day: Dict[date, int]
    expense_by_day: Dict[date, int]
    expense_by_category: Dict[str, int]


@dataclass
class MonthTotals:
    """Income and outgoing totals for one calendar month"""

    year: int
    month: int
    income: int
    expense: int

    @property
    def profit(self) -> int:
        return self.income - self.expense


@dataclass
class ProfitAndLoss:
    """Month P&L with expenses broken down by category"""

    totals: MonthTotals
    margin_percent: int
    expense_by_category: List[Tuple[str, int]]


@dataclass
class StaffDue:
    staff_id: str
    amount_due: int


@dataclass
class ObligationsDue:
    """Salary obligations falling on one calendar date"""

    date: date
    total_due: int
    per_staff: List[StaffDue] = field(default_factory=list)


@dataclass
class SalaryStatus:
    """Whether a staff member's salary is settled for the current month"""

    staff_id: str
    salary_type: str
    paid_this_month: bool
    amount_pending: int  # salary minus advance, may be negative


@dataclass
class SalaryAlert:
    """Upcoming monthly salaries checked against current cash"""

    days_until: int
    total_due: int
    current_cash: int
    shortfall: int
    staff_ids: List[str] = field(default_factory=list)

    @property
    def covered(self) -> bool:
        return self.shortfall == 0


@dataclass(frozen=True)
class ProjectionPolicy:
    """Tunable constants for the cash projection walk"""

    weekend_income_multiplier: float = 1.3
    low_cash_buffer_days: int = 3


@dataclass
class ProjectionPoint:
    """One forecast day"""

    date: date
    projected_cash: int
    expected_in: int
    expected_out: int
    salaries_due: int
    confidence: str  # high | medium | low
    flags: Tuple[str, ...] = ()
    shortfall: int = 0


@dataclass
class CashForecast:
    """Projection run together with the historical rates that fed it"""

    aggregate: LedgerAggregate
    points: List[ProjectionPoint]
    first_problem_day: Optional[ProjectionPoint]


@dataclass
class HealthComponent:
    """Normalized sub-score plus the literal metric behind it"""

    score: int
    value: int  # days, percent, or ratio delta depending on component
    raw: float  # clamped score before rounding; the weighted total uses this


@dataclass
class HealthScoreResult:
    """Weighted 0-100 business health score"""

    score: int
    status: str  # excellent | good | caution | critical
    cash_runway: HealthComponent
    profit_margin: HealthComponent
    collection_speed: HealthComponent
    expense_control: HealthComponent
    growth_trend: HealthComponent


@dataclass
class OwnerLedgerSnapshot:
    """Inputs for aggregation and projection"""

    owner_id: str
    current_cash: int
    as_of: date
    transactions: List[TransactionRecord]
    staff: List[StaffObligation]


@dataclass
class OwnerHealthSnapshot:
    """Inputs for the health score"""

    owner_id: str
    current_cash: int
    as_of: date
    transactions: List[TransactionRecord]
    paid_receivables: List[Receivable]
