"""SQLAlchemy ORM models for owners and their ledger"""

import uuid
from sqlalchemy import Column, String, BigInteger, Boolean, DateTime, Integer, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Owner(Base):
    """Business account; tenant boundary for everything below"""

    __tablename__ = "owner"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    business_name = Column(Text, nullable=True)
    current_cash = Column(BigInteger, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    staff = relationship("Staff", back_populates="owner", cascade="all, delete-orphan")
    customers = relationship("Customer", back_populates="owner", cascade="all, delete-orphan")
    receivables = relationship("ReceivableRow", back_populates="owner", cascade="all, delete-orphan")
    transactions = relationship("LedgerTransaction", back_populates="owner", cascade="all, delete-orphan")


class Staff(Base):
    """Employee pay terms; deactivated rather than deleted"""

    __tablename__ = "staff"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("owner.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    salary_amount = Column(BigInteger, nullable=False)
    salary_type = Column(String(16), nullable=False, default="monthly")
    payment_day = Column(Integer, nullable=True)
    advance_balance = Column(BigInteger, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    owner = relationship("Owner", back_populates="staff")


class Customer(Base):
    """Payer with collection history"""

    __tablename__ = "customer"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("owner.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    avg_days_to_pay = Column(Integer, nullable=True)
    reliability_score = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    owner = relationship("Owner", back_populates="customers")
    receivables = relationship("ReceivableRow", back_populates="customer")


class ReceivableRow(Base):
    """Money owed by a customer"""

    __tablename__ = "receivable"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("owner.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customer.id"), nullable=True)
    amount = Column(BigInteger, nullable=False)
    amount_paid = Column(BigInteger, nullable=False, default=0)
    status = Column(String(16), nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    paid_at = Column(DateTime(timezone=True), nullable=True)

    owner = relationship("Owner", back_populates="receivables")
    customer = relationship("Customer", back_populates="receivables")


class LedgerTransaction(Base):
    """Append-only ledger entry"""

    __tablename__ = "ledger_transaction"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("owner.id", ondelete="CASCADE"), nullable=False, index=True)
    kind = Column(String(16), nullable=False)  # income | expense | salary | advance
    amount = Column(BigInteger, nullable=False)
    category = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    staff_id = Column(UUID(as_uuid=True), ForeignKey("staff.id"), nullable=True)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customer.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)

    owner = relationship("Owner", back_populates="transactions")
