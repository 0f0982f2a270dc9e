"""
Pydantic schemas package.
"""

from app.schemas.account import (
    AccountBase,
    AccountCreate,
    AccountUpdate,
    AccountResponse,
    AccountList,
)
from app.schemas.credit_card import (
    CardBalanceCreate,
    CreditLimitUpdate,
    CardCreate,
    CardUpdate,
    CardBalanceResponse,
    CardResponse,
)
from app.schemas.transaction import (
    TransactionBase,
    TransactionCreate,
    TransactionUpdate,
    TransactionResponse,
    TransactionListResponse,
)
from app.schemas.recurring import (
    RecurringTransactionBase,
    RecurringTransactionCreate,
    RecurringTransactionUpdate,
    RecurringTransactionResponse,
    GenerateResponse,
)

__all__ = [
    "AccountBase",
    "AccountCreate",
    "AccountUpdate",
    "AccountResponse",
    "AccountList",
    "CardBalanceCreate",
    "CreditLimitUpdate",
    "CardCreate",
    "CardUpdate",
    "CardBalanceResponse",
    "CardResponse",
    "TransactionBase",
    "TransactionCreate",
    "TransactionUpdate",
    "TransactionResponse",
    "TransactionListResponse",
    "RecurringTransactionBase",
    "RecurringTransactionCreate",
    "RecurringTransactionUpdate",
    "RecurringTransactionResponse",
    "GenerateResponse",
]
