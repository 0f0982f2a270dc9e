"""Service for recurring transaction management and generation."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import NotFoundError, ValidationError
from app.models.recurring import RecurringTransaction
from app.models.transaction import Transaction
from app.services.ledger_service import atomic
from app.services.schedule import ScheduleState
from app.services.transaction_service import (
    financial_fields,
    record_transaction,
    validate_sources,
    verify_references,
)

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of one generation run for a user."""
    generated: int = 0
    processed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def _validate_window(data) -> None:
    if data.end_date is not None and data.end_date < data.start_date:
        raise ValidationError("End date must be on or after the start date", field="end_date")


def get_recurring(db: Session, user_id: str, recurring_id: str) -> RecurringTransaction:
    recurring = db.query(RecurringTransaction).filter(
        RecurringTransaction.id == recurring_id,
        RecurringTransaction.user_id == user_id
    ).first()
    if not recurring:
        raise NotFoundError("Recurring transaction not found")
    return recurring


def list_recurring(
    db: Session,
    user_id: str,
    is_active: Optional[bool] = None
) -> List[RecurringTransaction]:
    """Get a user's recurring transactions ordered by next due date."""
    query = db.query(RecurringTransaction).filter(RecurringTransaction.user_id == user_id)

    if is_active is not None:
        query = query.filter(RecurringTransaction.is_active == is_active)

    return query.order_by(RecurringTransaction.next_due_date, RecurringTransaction.id).all()


def get_recurring_transaction_count(db: Session, recurring_id: str) -> int:
    """Get count of transactions generated from a recurring definition."""
    return db.query(Transaction).filter(
        Transaction.recurring_transaction_id == recurring_id
    ).count()


def create_recurring(db: Session, user_id: str, data) -> RecurringTransaction:
    """Create a definition whose first occurrence is its start date."""
    with atomic(db, "create recurring transaction"):
        validate_sources(data)
        _validate_window(data)
        verify_references(db, user_id, data)

        recurring = RecurringTransaction(
            user_id=user_id,
            frequency=data.frequency,
            start_date=data.start_date,
            end_date=data.end_date,
            next_due_date=data.start_date,
            last_generated_date=None,
            is_active=True,
            **financial_fields(data),
        )
        db.add(recurring)

    db.refresh(recurring)
    logger.info("Created recurring transaction %s (%s)", recurring.id, recurring.frequency.value)
    return recurring


def update_recurring(db: Session, user_id: str, recurring_id: str, data) -> RecurringTransaction:
    """
    Replace a definition's template and schedule fields.

    Generation progress is kept; the next due date is re-derived from it so
    a frequency or start date change cannot leave a stale due date behind.
    """
    recurring = get_recurring(db, user_id, recurring_id)

    with atomic(db, f"update recurring transaction {recurring_id}"):
        validate_sources(data)
        _validate_window(data)
        verify_references(db, user_id, data, existing=recurring)

        for name, value in financial_fields(data).items():
            setattr(recurring, name, value)
        recurring.frequency = data.frequency
        recurring.start_date = data.start_date
        recurring.end_date = data.end_date

        state = ScheduleState.of(recurring)
        recurring.next_due_date = state.next_due
        if state.exhausted:
            recurring.is_active = False

    db.refresh(recurring)
    return recurring


def delete_recurring(db: Session, user_id: str, recurring_id: str) -> None:
    """Delete a definition. Generated transactions are unlinked, not deleted."""
    recurring = get_recurring(db, user_id, recurring_id)

    with atomic(db, f"delete recurring transaction {recurring_id}"):
        db.query(Transaction).filter(
            Transaction.recurring_transaction_id == recurring_id
        ).update(
            {Transaction.recurring_transaction_id: None},
            synchronize_session=False
        )
        db.delete(recurring)


def toggle_recurring_active(db: Session, user_id: str, recurring_id: str) -> RecurringTransaction:
    """
    Pause or resume a definition.

    A definition that ran past its end date stays inactive for good.
    """
    recurring = get_recurring(db, user_id, recurring_id)

    if not recurring.is_active and ScheduleState.of(recurring).exhausted:
        raise ValidationError(
            "This recurring transaction has passed its end date and cannot be resumed",
            field="end_date",
        )

    with atomic(db, f"toggle recurring transaction {recurring_id}"):
        recurring.is_active = not recurring.is_active

    db.refresh(recurring)
    return recurring


def get_upcoming_recurring(
    db: Session,
    user_id: str,
    days: Optional[int] = None,
    limit: Optional[int] = None,
    today: Optional[date] = None
) -> List[RecurringTransaction]:
    """Active definitions due within the next `days` days, soonest first."""
    today = today or date.today()
    days = settings.upcoming_days if days is None else days
    limit = settings.upcoming_limit if limit is None else limit

    return db.query(RecurringTransaction).filter(
        RecurringTransaction.user_id == user_id,
        RecurringTransaction.is_active == True,
        RecurringTransaction.next_due_date >= today,
        RecurringTransaction.next_due_date <= today + timedelta(days=days)
    ).order_by(RecurringTransaction.next_due_date).limit(limit).all()


def generate_for_definition(db: Session, recurring: RecurringTransaction, today: date) -> int:
    """
    Materialize every due occurrence of one definition as a single unit.

    The schedule is advanced with a compare-and-swap on the state the due
    dates were computed from. If another run advanced it first, the swap
    matches no row and nothing is materialized.
    """
    with atomic(db, f"generate recurring transaction {recurring.id}"):
        state = ScheduleState.of(recurring)
        due = state.due_dates(today)
        if not due:
            return 0

        advanced = state.generated_through(due.last)

        if recurring.last_generated_date is None:
            same_progress = RecurringTransaction.last_generated_date.is_(None)
        else:
            same_progress = RecurringTransaction.last_generated_date == recurring.last_generated_date

        swapped = db.query(RecurringTransaction).filter(
            RecurringTransaction.id == recurring.id,
            RecurringTransaction.is_active == True,
            RecurringTransaction.next_due_date == recurring.next_due_date,
            same_progress
        ).update(
            {
                RecurringTransaction.last_generated_date: due.last,
                RecurringTransaction.next_due_date: advanced.next_due,
                RecurringTransaction.is_active: not advanced.exhausted,
                RecurringTransaction.updated_at: datetime.utcnow(),
            },
            synchronize_session=False
        )
        if swapped != 1:
            logger.info("Recurring transaction %s already advanced, skipping", recurring.id)
            return 0

        for occurrence in due.dates:
            record_transaction(
                db,
                recurring.user_id,
                recurring,
                occurrence,
                recurring_transaction_id=recurring.id,
            )

        if advanced.exhausted:
            logger.info("Recurring transaction %s reached its end date, deactivating", recurring.id)

    logger.info(
        "Generated %d occurrence(s) of recurring transaction %s through %s",
        len(due), recurring.id, due.last.isoformat(),
    )
    return len(due)


def generate_pending_transactions(
    db: Session,
    user_id: str,
    as_of: Optional[date] = None
) -> GenerationResult:
    """
    Generate all pending recurring transactions for a user.

    Safe to call on every dashboard load: definitions with nothing newly due
    are left untouched. A failing definition is rolled back on its own and
    reported; the others still run.
    """
    today = as_of or date.today()

    pending = db.query(RecurringTransaction).filter(
        RecurringTransaction.user_id == user_id,
        RecurringTransaction.is_active == True,
        RecurringTransaction.next_due_date <= today
    ).order_by(RecurringTransaction.next_due_date, RecurringTransaction.id).all()

    result = GenerationResult()
    for recurring in pending:
        recurring_id = recurring.id
        try:
            created = generate_for_definition(db, recurring, today)
        except Exception:
            # atomic() already rolled this definition back
            logger.exception("Generation failed for recurring transaction %s", recurring_id)
            result.failed.append(recurring_id)
            continue

        if created:
            result.generated += created
            result.processed.append(recurring_id)

    if result.generated or result.failed:
        logger.info(
            "Generated %d recurring transaction(s) for user %s (%d definition(s) failed)",
            result.generated, user_id, len(result.failed),
        )
    return result
