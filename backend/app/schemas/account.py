"""
Bank account Pydantic schemas for API validation.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Optional
from app.models.account import AccountType
from app.models.currency import Currency

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class AccountBase(BaseModel):
    """Base account schema."""
    name: str = Field(..., min_length=2, max_length=50)
    bank_name: str = Field(..., min_length=2, max_length=50)
    account_type: AccountType
    currency: Currency
    color: Optional[str] = Field(None, pattern=HEX_COLOR)


class AccountCreate(AccountBase):
    """Schema for creating an account with its opening balance."""
    balance: Decimal = Field(Decimal("0"), ge=0, max_digits=14, decimal_places=2)


class AccountUpdate(BaseModel):
    """Schema for updating an account. The balance is not editable."""
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    bank_name: Optional[str] = Field(None, min_length=2, max_length=50)
    account_type: Optional[AccountType] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR)


class AccountResponse(AccountBase):
    """Schema for account response."""
    id: str
    balance: Decimal
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class AccountList(BaseModel):
    """Schema for listing accounts."""
    items: list[AccountResponse]
    total: int
