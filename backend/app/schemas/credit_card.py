"""
Credit card Pydantic schemas.
"""

from pydantic import BaseModel, Field, computed_field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from app.models.currency import Currency
from app.schemas.account import HEX_COLOR


class CardBalanceCreate(BaseModel):
    """Opening debt and limit for one currency."""
    currency: Currency
    credit_limit: Decimal = Field(..., ge=0, max_digits=14, decimal_places=2)
    balance: Decimal = Field(Decimal("0"), ge=0, max_digits=14, decimal_places=2)


class CreditLimitUpdate(BaseModel):
    currency: Currency
    credit_limit: Decimal = Field(..., ge=0, max_digits=14, decimal_places=2)


class CardBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    bank_name: str = Field(..., min_length=2, max_length=50)
    cut_off_day: int = Field(..., ge=1, le=31)
    payment_due_day: int = Field(..., ge=1, le=31)
    color: Optional[str] = Field(None, pattern=HEX_COLOR)


class CardCreate(CardBase):
    balances: List[CardBalanceCreate] = Field(..., min_length=1)


class CardUpdate(BaseModel):
    """Descriptive fields and credit limits. Balances are not editable."""
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    bank_name: Optional[str] = Field(None, min_length=2, max_length=50)
    cut_off_day: Optional[int] = Field(None, ge=1, le=31)
    payment_due_day: Optional[int] = Field(None, ge=1, le=31)
    color: Optional[str] = Field(None, pattern=HEX_COLOR)
    credit_limits: Optional[List[CreditLimitUpdate]] = None


class CardBalanceResponse(BaseModel):
    currency: Currency
    credit_limit: Decimal
    balance: Decimal

    @computed_field
    @property
    def credit_limit_set(self) -> bool:
        # Rows created on first use carry a zero limit meaning "unknown"
        return self.credit_limit > 0

    class Config:
        from_attributes = True


class CardResponse(CardBase):
    id: str
    is_active: bool
    created_at: datetime
    balances: List[CardBalanceResponse] = []

    class Config:
        from_attributes = True
