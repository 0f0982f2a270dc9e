"""API endpoints for recurring transaction management."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.dependencies import get_db, get_current_user_id
from app.models.recurring import RecurringTransaction
from app.schemas.recurring import (
    RecurringTransactionResponse,
    RecurringTransactionUpdate,
    RecurringTransactionCreate,
    GenerateResponse,
)
from app.services import recurring_service

router = APIRouter(prefix="/recurring", tags=["recurring"])


def _to_response(db: Session, recurring: RecurringTransaction) -> RecurringTransactionResponse:
    response = RecurringTransactionResponse.model_validate(recurring)
    response.transaction_count = recurring_service.get_recurring_transaction_count(db, recurring.id)
    return response


@router.get("", response_model=List[RecurringTransactionResponse])
def get_recurring_transactions(
    is_active: Optional[bool] = Query(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get recurring transactions, soonest due first."""
    items = recurring_service.list_recurring(db, user_id, is_active)
    return [_to_response(db, recurring) for recurring in items]


@router.get("/upcoming", response_model=List[RecurringTransactionResponse])
def get_upcoming_recurring(
    days: Optional[int] = Query(None, ge=1, le=366),
    limit: Optional[int] = Query(None, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get active recurring transactions due in the next few days."""
    items = recurring_service.get_upcoming_recurring(db, user_id, days=days, limit=limit)
    return [RecurringTransactionResponse.model_validate(recurring) for recurring in items]


@router.post("/generate", response_model=GenerateResponse)
def generate_pending(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Materialize every recurring occurrence that is due.
    Called on dashboard load and by the explicit "generate pending" action.
    """
    result = recurring_service.generate_pending_transactions(db, user_id)

    if result.generated:
        plural = "s" if result.generated != 1 else ""
        message = f"Generated {result.generated} transaction{plural}"
    else:
        message = "No pending transactions to generate"

    return GenerateResponse(
        success=not result.failed,
        generated=result.generated,
        message=message,
        failed=result.failed,
    )


@router.get("/{recurring_id}", response_model=RecurringTransactionResponse)
def get_recurring_transaction(
    recurring_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get a single recurring transaction."""
    recurring = recurring_service.get_recurring(db, user_id, recurring_id)
    return _to_response(db, recurring)


@router.post("", response_model=RecurringTransactionResponse, status_code=201)
def create_recurring_transaction(
    data: RecurringTransactionCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create a recurring transaction."""
    recurring = recurring_service.create_recurring(db, user_id, data)

    response = RecurringTransactionResponse.model_validate(recurring)
    response.transaction_count = 0
    return response


@router.put("/{recurring_id}", response_model=RecurringTransactionResponse)
def update_recurring_transaction(
    recurring_id: str,
    data: RecurringTransactionUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Update a recurring transaction."""
    recurring = recurring_service.update_recurring(db, user_id, recurring_id, data)
    return _to_response(db, recurring)


@router.delete("/{recurring_id}")
def delete_recurring_transaction(
    recurring_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Delete a recurring transaction (unlinks generated transactions but keeps them)."""
    recurring_service.delete_recurring(db, user_id, recurring_id)
    return {"success": True}


@router.post("/{recurring_id}/toggle", response_model=RecurringTransactionResponse)
def toggle_recurring_transaction(
    recurring_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Pause or resume a recurring transaction."""
    recurring = recurring_service.toggle_recurring_active(db, user_id, recurring_id)
    return _to_response(db, recurring)
