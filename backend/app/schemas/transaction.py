"""
Transaction schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from app.models.currency import Currency
from app.models.transaction import TransactionType


class TransactionBase(BaseModel):
    type: TransactionType
    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    currency: Currency
    category: str = Field(..., min_length=1, max_length=30)
    description: Optional[str] = Field(None, max_length=100)
    date: date
    bank_account_id: Optional[str] = None
    credit_card_id: Optional[str] = None
    is_card_payment: bool = False
    target_card_id: Optional[str] = None


class TransactionCreate(TransactionBase):
    pass


class TransactionUpdate(TransactionBase):
    """Full replacement of a transaction's financial fields."""
    pass


class TransactionResponse(BaseModel):
    id: str
    type: TransactionType
    amount: Decimal
    currency: Currency
    category: str
    description: Optional[str]
    date: date
    bank_account_id: Optional[str]
    credit_card_id: Optional[str]
    is_card_payment: bool
    target_card_id: Optional[str]
    recurring_transaction_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TransactionListResponse(BaseModel):
    items: list[TransactionResponse]
    total: int
    page: int
    pages: int
