"""Pydantic schemas for recurring transactions."""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal

from app.models.currency import Currency
from app.models.recurring import Frequency
from app.models.transaction import TransactionType


class RecurringTransactionBase(BaseModel):
    type: TransactionType
    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    currency: Currency
    category: str = Field(..., min_length=1, max_length=30)
    description: Optional[str] = Field(None, max_length=100)
    bank_account_id: Optional[str] = None
    credit_card_id: Optional[str] = None
    is_card_payment: bool = False
    target_card_id: Optional[str] = None
    frequency: Frequency
    start_date: date
    end_date: Optional[date] = None  # Inclusive


class RecurringTransactionCreate(RecurringTransactionBase):
    pass


class RecurringTransactionUpdate(RecurringTransactionBase):
    """Full replacement of the template; schedule progress is kept."""
    pass


class RecurringTransactionResponse(RecurringTransactionBase):
    id: str
    next_due_date: date
    last_generated_date: Optional[date] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    # Computed fields added by API
    transaction_count: Optional[int] = None

    class Config:
        from_attributes = True


class GenerateResponse(BaseModel):
    """Result of generating pending recurring transactions."""
    success: bool = True
    generated: int
    message: str
    failed: List[str] = []
