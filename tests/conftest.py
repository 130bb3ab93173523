"""Pytest fixtures for testing"""

import os

# Point settings at SQLite before the app modules build their engine
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from saarathi_engine.api.main import create_app
from saarathi_engine.api.dependencies import get_now
from saarathi_engine.infrastructure.database.models import (
    Base,
    Customer,
    LedgerTransaction,
    Owner,
    ReceivableRow,
    Staff,
)
from saarathi_engine.infrastructure.database.session import get_db
from saarathi_engine.domain.models import TransactionRecord


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Thursday, mid-month
FIXED_NOW = datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and a pinned clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: FIXED_NOW
    return TestClient(app)


@pytest.fixture
def owner(db: Session) -> Owner:
    """Tea stall owner with one monthly staff member and a month of trading"""
    db_owner = Owner(name="Ramesh", business_name="Ramesh Tea Stall", current_cash=28500)
    db.add(db_owner)
    db.flush()

    staff = Staff(
        owner_id=db_owner.id,
        name="Suresh",
        salary_amount=10000,
        salary_type="monthly",
        payment_day=18,
        advance_balance=2000,
    )
    helper = Staff(owner_id=db_owner.id, name="Raju", salary_amount=400, salary_type="daily")
    db.add_all([staff, helper])

    # 30 days of sales and supplies ending yesterday
    for day in range(1, 31):
        occurred = FIXED_NOW - timedelta(days=day)
        db.add(LedgerTransaction(owner_id=db_owner.id, kind="income", amount=4500, created_at=occurred))
        db.add(
            LedgerTransaction(
                owner_id=db_owner.id, kind="expense", amount=1200, category="supplies", created_at=occurred
            )
        )

    db.commit()
    return db_owner


@pytest.fixture
def make_receivable(db: Session, owner: Owner) -> Callable[..., ReceivableRow]:
    """Factory for receivables owed to the sample owner"""

    def _make(amount: int, amount_paid: int = 0, status: str = "pending", age_days: int = 0, name: str = "Kumar"):
        customer = Customer(owner_id=owner.id, name=name)
        db.add(customer)
        db.flush()
        row = ReceivableRow(
            owner_id=owner.id,
            customer_id=customer.id,
            amount=amount,
            amount_paid=amount_paid,
            status=status,
            created_at=FIXED_NOW - timedelta(days=age_days),
        )
        db.add(row)
        db.commit()
        return row

    return _make


@pytest.fixture
def sample_transactions() -> list[TransactionRecord]:
    """Two weeks of daily sales with weekly rent and a salary payout"""
    base = datetime(2026, 10, 1, 10, 0, tzinfo=timezone.utc)
    transactions = []

    for day in range(14):
        transactions.append(
            TransactionRecord(kind="income", amount=3000, occurred_at=base + timedelta(days=day))
        )

    for week in range(2):
        transactions.append(
            TransactionRecord(
                kind="expense",
                amount=7000,
                category="rent",
                occurred_at=base + timedelta(days=week * 7),
            )
        )

    transactions.append(
        TransactionRecord(kind="salary", amount=8000, staff_ref="s1", occurred_at=base + timedelta(days=4))
    )
    transactions.append(TransactionRecord(kind="expense", amount=500, occurred_at=base + timedelta(days=9)))

    return transactions


@pytest.fixture
def as_of() -> date:
    return date(2026, 10, 14)


@pytest.fixture
def session_factory() -> Callable[[], Session]:
    return TestingSessionLocal
