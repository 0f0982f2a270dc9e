"""
Credit card database models.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Enum, Integer, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.currency import Currency


class CreditCard(Base):
    """Credit card with one balance row per currency used on it."""

    __tablename__ = "credit_cards"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    bank_name = Column(String(50), nullable=False)
    cut_off_day = Column(Integer, nullable=False)
    payment_due_day = Column(Integer, nullable=False)
    color = Column(String(7), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    balances = relationship(
        "CreditCardBalance",
        back_populates="credit_card",
        cascade="all, delete-orphan",
        order_by="CreditCardBalance.currency",
    )

    def balance_for(self, currency: Currency):
        """Return the balance row for a currency, or None if never used."""
        for row in self.balances:
            if row.currency == currency:
                return row
        return None


class CreditCardBalance(Base):
    """Outstanding debt and credit limit of a card in one currency."""

    __tablename__ = "credit_card_balances"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    credit_card_id = Column(String(36), ForeignKey("credit_cards.id"), nullable=False)
    currency = Column(Enum(Currency), nullable=False)
    credit_limit = Column(Numeric(14, 2), default=0, nullable=False)  # 0 means unset
    balance = Column(Numeric(14, 2), default=0, nullable=False)

    credit_card = relationship("CreditCard", back_populates="balances")

    __table_args__ = (
        UniqueConstraint("credit_card_id", "currency", name="uq_card_balance_currency"),
    )
