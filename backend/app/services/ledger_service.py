"""
Ledger effect resolution.

Every transaction maps to a small set of signed balance deltas, one per
aggregate it touches (a bank account balance or a per-currency credit card
balance). Balances only ever move through these deltas, which keeps each
balance equal to its opening value plus the sum of the applied effects.
"""

import enum
import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Iterator, List, Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import ConsistencyError
from app.models.account import BankAccount
from app.models.credit_card import CreditCardBalance
from app.models.currency import Currency
from app.models.transaction import TransactionType

logger = logging.getLogger(__name__)


class EffectTarget(str, enum.Enum):
    """Kind of aggregate a ledger effect lands on."""
    account = "account"
    card = "card"


@dataclass(frozen=True)
class LedgerEffect:
    """A signed delta on exactly one balance."""
    target: EffectTarget
    target_id: str
    delta: Decimal
    currency: Optional[Currency] = None  # Only for card balances

    def reversed(self) -> "LedgerEffect":
        return LedgerEffect(
            target=self.target,
            target_id=self.target_id,
            delta=-self.delta,
            currency=self.currency,
        )


def resolve_effects(entry) -> List[LedgerEffect]:
    """
    Compute the balance deltas implied by a transaction.

    `entry` is anything carrying the financial fields of a transaction:
    a Transaction row, a RecurringTransaction template or a request schema.

    - bank account: income adds, expense subtracts
    - credit card: expense grows the debt, income (a payment) shrinks it
    - card payment: the target card's debt also shrinks by the amount
    """
    amount = Decimal(entry.amount)
    kind = TransactionType(entry.type)
    currency = Currency(entry.currency)
    effects = []

    if entry.bank_account_id:
        delta = amount if kind == TransactionType.income else -amount
        effects.append(LedgerEffect(EffectTarget.account, entry.bank_account_id, delta))

    if entry.credit_card_id:
        delta = amount if kind == TransactionType.expense else -amount
        effects.append(LedgerEffect(EffectTarget.card, entry.credit_card_id, delta, currency))

    if entry.is_card_payment and entry.target_card_id:
        effects.append(LedgerEffect(EffectTarget.card, entry.target_card_id, -amount, currency))

    return effects


def reverse_effects(effects: Iterable[LedgerEffect]) -> List[LedgerEffect]:
    """Flip every delta so applying the result undoes the original effects."""
    return [effect.reversed() for effect in effects]


def _insert_for(db: Session):
    if db.get_bind().dialect.name == "postgresql":
        return postgresql.insert
    return sqlite.insert


def ensure_card_balance(db: Session, credit_card_id: str, currency: Currency) -> None:
    """
    Create the (card, currency) balance row if it does not exist yet.

    New rows start with a zero balance and a zero credit limit, which callers
    display as "limit not set". Concurrent callers race on the unique
    constraint; the loser's insert is a no-op.
    """
    insert = _insert_for(db)
    stmt = insert(CreditCardBalance).values(
        id=str(uuid.uuid4()),
        credit_card_id=credit_card_id,
        currency=Currency(currency),
        credit_limit=Decimal("0"),
        balance=Decimal("0"),
    ).on_conflict_do_nothing(index_elements=["credit_card_id", "currency"])
    db.execute(stmt)


def _apply_effect(db: Session, effect: LedgerEffect) -> None:
    if effect.target == EffectTarget.account:
        updated = db.query(BankAccount).filter(
            BankAccount.id == effect.target_id
        ).update(
            {BankAccount.balance: BankAccount.balance + effect.delta},
            synchronize_session=False
        )
    else:
        ensure_card_balance(db, effect.target_id, effect.currency)
        updated = db.query(CreditCardBalance).filter(
            CreditCardBalance.credit_card_id == effect.target_id,
            CreditCardBalance.currency == effect.currency,
        ).update(
            {CreditCardBalance.balance: CreditCardBalance.balance + effect.delta},
            synchronize_session=False
        )

    if updated != 1:
        raise ConsistencyError(f"Balance for {effect.target.value} {effect.target_id} is missing")


def apply_effects(db: Session, effects: Iterable[LedgerEffect]) -> None:
    """
    Apply deltas as in-database increments.

    Runs inside the caller's database transaction and never commits, so the
    caller decides the atomic unit.
    """
    for effect in effects:
        logger.debug(
            "Applying %s to %s %s %s",
            effect.delta, effect.target.value, effect.target_id,
            effect.currency.value if effect.currency else "",
        )
        _apply_effect(db, effect)


@contextmanager
def atomic(db: Session, action: str) -> Iterator[None]:
    """
    Run a block as one all-or-nothing database transaction.

    Commits when the block finishes. Any error rolls back everything the
    block wrote; persistence errors surface as ConsistencyError.
    """
    try:
        yield
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Aborted %s", action)
        raise ConsistencyError("The operation could not be completed, please try again") from e
    except Exception:
        db.rollback()
        raise
