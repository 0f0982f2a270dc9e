"""
Transaction database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import (
    Column, String, Boolean, DateTime, Date, Numeric, Enum, ForeignKey, Index, CheckConstraint,
)
from sqlalchemy.orm import relationship
import enum
from app.database import Base
from app.models.currency import Currency


class TransactionType(str, enum.Enum):
    """Transaction type enumeration."""
    income = "income"
    expense = "expense"


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    type = Column(Enum(TransactionType), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)  # Always positive, sign comes from type
    currency = Column(Enum(Currency), nullable=False)
    category = Column(String(30), nullable=False)  # Free text label
    description = Column(String(100), nullable=True)
    date = Column(Date, nullable=False, index=True)
    bank_account_id = Column(String(36), ForeignKey("bank_accounts.id"), nullable=True)
    credit_card_id = Column(String(36), ForeignKey("credit_cards.id"), nullable=True)
    is_card_payment = Column(Boolean, default=False, nullable=False)
    target_card_id = Column(String(36), ForeignKey("credit_cards.id"), nullable=True)
    recurring_transaction_id = Column(String(36), ForeignKey("recurring_transactions.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    bank_account = relationship("BankAccount", back_populates="transactions")
    credit_card = relationship("CreditCard", foreign_keys=[credit_card_id])
    target_card = relationship("CreditCard", foreign_keys=[target_card_id])
    recurring_transaction = relationship("RecurringTransaction", back_populates="transactions")

    # Indexes for common queries
    __table_args__ = (
        Index("idx_transaction_user_date", "user_id", "date"),
        Index("idx_transaction_recurring", "recurring_transaction_id"),
        CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),
        CheckConstraint(
            "bank_account_id IS NULL OR credit_card_id IS NULL",
            name="ck_transaction_single_source",
        ),
    )
