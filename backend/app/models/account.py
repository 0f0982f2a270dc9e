"""
Bank account database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Enum, Numeric, Index
from sqlalchemy.orm import relationship
import enum
from app.database import Base
from app.models.currency import Currency


class AccountType(str, enum.Enum):
    """Account type enumeration."""
    savings = "savings"
    checking = "checking"


class BankAccount(Base):
    """Bank account holding a single balance in one currency."""

    __tablename__ = "bank_accounts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    bank_name = Column(String(50), nullable=False)
    account_type = Column(Enum(AccountType), nullable=False)
    currency = Column(Enum(Currency), nullable=False)
    # Only changed through ledger deltas after creation
    balance = Column(Numeric(14, 2), default=0, nullable=False)
    color = Column(String(7), nullable=True)  # Hex color
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="bank_account")

    __table_args__ = (
        Index("idx_bank_account_user_active", "user_id", "is_active"),
    )
