"""
Transaction mutation service.

Creates, updates and deletes transactions together with their ledger
effects. Each operation is a single database transaction: the row change
and every balance delta are committed together or not at all.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ValidationError
from app.models.account import BankAccount
from app.models.credit_card import CreditCard
from app.models.transaction import Transaction, TransactionType
from app.services.ledger_service import (
    apply_effects,
    atomic,
    resolve_effects,
    reverse_effects,
)

logger = logging.getLogger(__name__)

FINANCIAL_FIELDS = (
    "type",
    "amount",
    "currency",
    "category",
    "description",
    "bank_account_id",
    "credit_card_id",
    "is_card_payment",
    "target_card_id",
)


def financial_fields(data) -> Dict[str, Any]:
    """Copy the fields shared by transactions and recurring templates."""
    return {name: getattr(data, name) for name in FINANCIAL_FIELDS}


def validate_sources(data) -> None:
    """
    Check the source/target combination of a transaction or template.

    A transaction uses at most one of bank account or credit card. A card
    payment moves money from a bank account to a target card, and a target
    card only makes sense on a card payment.
    """
    if data.bank_account_id and data.credit_card_id:
        raise ValidationError(
            "Specify either a bank account or a credit card, not both",
            field="credit_card_id",
        )

    if data.is_card_payment:
        if not data.bank_account_id:
            raise ValidationError("A card payment requires a source bank account", field="bank_account_id")
        if not data.target_card_id:
            raise ValidationError("A card payment requires a target card", field="target_card_id")
    elif data.target_card_id:
        raise ValidationError("A target card is only allowed on card payments", field="target_card_id")


def get_owned_account(
    db: Session,
    user_id: str,
    account_id: str,
    include_inactive: bool = False
) -> BankAccount:
    query = db.query(BankAccount).filter(
        BankAccount.id == account_id,
        BankAccount.user_id == user_id
    )
    if not include_inactive:
        query = query.filter(BankAccount.is_active == True)

    account = query.first()
    if not account:
        raise NotFoundError("Bank account not found")
    return account


def get_owned_card(
    db: Session,
    user_id: str,
    card_id: str,
    label: str = "Credit card",
    include_inactive: bool = False
) -> CreditCard:
    query = db.query(CreditCard).filter(
        CreditCard.id == card_id,
        CreditCard.user_id == user_id
    )
    if not include_inactive:
        query = query.filter(CreditCard.is_active == True)

    card = query.first()
    if not card:
        raise NotFoundError(f"{label} not found")
    return card


def verify_references(db: Session, user_id: str, data, existing=None) -> None:
    """
    Make sure every account and card the entry points to belongs to the user.

    New references must be active. When `existing` is given, the accounts and
    cards it already points to are accepted even if they were deactivated since.
    """
    kept_accounts = set()
    kept_cards = set()
    if existing is not None:
        kept_accounts = {existing.bank_account_id} - {None}
        kept_cards = {existing.credit_card_id, existing.target_card_id} - {None}

    if data.bank_account_id:
        get_owned_account(
            db, user_id, data.bank_account_id,
            include_inactive=data.bank_account_id in kept_accounts
        )
    if data.credit_card_id:
        get_owned_card(
            db, user_id, data.credit_card_id,
            include_inactive=data.credit_card_id in kept_cards
        )
    if data.target_card_id:
        get_owned_card(
            db, user_id, data.target_card_id, label="Target card",
            include_inactive=data.target_card_id in kept_cards
        )


def record_transaction(
    db: Session,
    user_id: str,
    entry,
    occurred_on: date,
    recurring_transaction_id: Optional[str] = None,
) -> Transaction:
    """
    Add a transaction row and apply its ledger effects without committing.

    Callers own the surrounding atomic unit.
    """
    transaction = Transaction(
        user_id=user_id,
        date=occurred_on,
        recurring_transaction_id=recurring_transaction_id,
        **financial_fields(entry),
    )
    db.add(transaction)
    apply_effects(db, resolve_effects(transaction))
    return transaction


def get_transaction(db: Session, user_id: str, transaction_id: str) -> Transaction:
    transaction = db.query(Transaction).filter(
        Transaction.id == transaction_id,
        Transaction.user_id == user_id
    ).first()
    if not transaction:
        raise NotFoundError("Transaction not found")
    return transaction


def list_transactions(
    db: Session,
    user_id: str,
    page: int = 1,
    per_page: int = 20,
    type: Optional[TransactionType] = None,
    category: Optional[str] = None,
    bank_account_id: Optional[str] = None,
    credit_card_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None
) -> Tuple[List[Transaction], int]:
    """Get one page of a user's transactions, newest first, with the total count."""
    query = db.query(Transaction).filter(Transaction.user_id == user_id)

    if type:
        query = query.filter(Transaction.type == type)
    if category:
        query = query.filter(Transaction.category == category)
    if bank_account_id:
        query = query.filter(Transaction.bank_account_id == bank_account_id)
    if credit_card_id:
        query = query.filter(Transaction.credit_card_id == credit_card_id)
    if start_date:
        query = query.filter(Transaction.date >= start_date)
    if end_date:
        query = query.filter(Transaction.date <= end_date)
    if search:
        query = query.filter(Transaction.description.ilike(f"%{search}%"))

    total = query.count()

    query = query.order_by(Transaction.date.desc(), Transaction.created_at.desc())
    items = query.offset((page - 1) * per_page).limit(per_page).all()
    return items, total


def create_transaction(db: Session, user_id: str, data) -> Transaction:
    """Validate, insert and apply ledger effects as one unit."""
    with atomic(db, "create transaction"):
        validate_sources(data)
        verify_references(db, user_id, data)
        transaction = record_transaction(db, user_id, data, data.date)

    db.refresh(transaction)
    logger.info("Created transaction %s for user %s", transaction.id, user_id)
    return transaction


def update_transaction(db: Session, user_id: str, transaction_id: str, data) -> Transaction:
    """
    Replace a transaction's fields and move its ledger effects accordingly.

    The reversal is computed from the stored values before anything is
    written, then the new values are applied.
    """
    transaction = get_transaction(db, user_id, transaction_id)

    with atomic(db, f"update transaction {transaction_id}"):
        validate_sources(data)
        verify_references(db, user_id, data, existing=transaction)

        previous_effects = resolve_effects(transaction)
        apply_effects(db, reverse_effects(previous_effects))

        for field, value in financial_fields(data).items():
            setattr(transaction, field, value)
        transaction.date = data.date

        apply_effects(db, resolve_effects(transaction))

    db.refresh(transaction)
    logger.info("Updated transaction %s", transaction_id)
    return transaction


def delete_transaction(db: Session, user_id: str, transaction_id: str) -> None:
    """Reverse the ledger effects of a transaction and remove it."""
    transaction = get_transaction(db, user_id, transaction_id)

    with atomic(db, f"delete transaction {transaction_id}"):
        apply_effects(db, reverse_effects(resolve_effects(transaction)))
        db.delete(transaction)

    logger.info("Deleted transaction %s", transaction_id)
