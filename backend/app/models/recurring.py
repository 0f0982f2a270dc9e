"""
Recurring transaction database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Date, Numeric, Enum, ForeignKey, Index
from sqlalchemy.orm import relationship
import enum
from app.database import Base
from app.models.currency import Currency
from app.models.transaction import TransactionType


class Frequency(str, enum.Enum):
    """Recurring frequency enumeration."""
    daily = "daily"
    weekly = "weekly"
    biweekly = "biweekly"
    monthly = "monthly"
    yearly = "yearly"


class RecurringTransaction(Base):
    """Template that the generator materializes into transactions on schedule."""

    __tablename__ = "recurring_transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    type = Column(Enum(TransactionType), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    currency = Column(Enum(Currency), nullable=False)
    category = Column(String(30), nullable=False)
    description = Column(String(100), nullable=True)
    bank_account_id = Column(String(36), ForeignKey("bank_accounts.id"), nullable=True)
    credit_card_id = Column(String(36), ForeignKey("credit_cards.id"), nullable=True)
    is_card_payment = Column(Boolean, default=False, nullable=False)
    target_card_id = Column(String(36), ForeignKey("credit_cards.id"), nullable=True)
    frequency = Column(Enum(Frequency), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)  # Inclusive
    next_due_date = Column(Date, nullable=False, index=True)
    last_generated_date = Column(Date, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="recurring_transaction")

    __table_args__ = (
        Index("idx_recurring_user_due", "user_id", "is_active", "next_due_date"),
    )
