"""
Database models package.
"""

from app.models.currency import Currency
from app.models.account import BankAccount, AccountType
from app.models.credit_card import CreditCard, CreditCardBalance
from app.models.transaction import Transaction, TransactionType
from app.models.recurring import RecurringTransaction, Frequency

__all__ = [
    "Currency",
    "BankAccount",
    "AccountType",
    "CreditCard",
    "CreditCardBalance",
    "Transaction",
    "TransactionType",
    "RecurringTransaction",
    "Frequency",
]
