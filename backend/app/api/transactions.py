"""
Transaction API endpoints.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date

from app.dependencies import get_db, get_current_user_id
from app.models.transaction import TransactionType
from app.schemas.transaction import (
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
    TransactionListResponse
)
from app.services import transaction_service

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    type: Optional[TransactionType] = None,
    category: Optional[str] = None,
    bank_account_id: Optional[str] = None,
    credit_card_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List transactions with filtering and pagination"""
    transactions, total = transaction_service.list_transactions(
        db,
        user_id,
        page=page,
        per_page=per_page,
        type=type,
        category=category,
        bank_account_id=bank_account_id,
        credit_card_id=credit_card_id,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )
    pages = (total + per_page - 1) // per_page

    return TransactionListResponse(
        items=[TransactionResponse.model_validate(t) for t in transactions],
        total=total,
        page=page,
        pages=pages
    )


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    data: TransactionCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Record a transaction and apply it to the account or card balances"""
    transaction = transaction_service.create_transaction(db, user_id, data)
    return TransactionResponse.model_validate(transaction)


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get a single transaction"""
    transaction = transaction_service.get_transaction(db, user_id, transaction_id)
    return TransactionResponse.model_validate(transaction)


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: str,
    data: TransactionUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Replace a transaction, moving its effect between balances as needed"""
    transaction = transaction_service.update_transaction(db, user_id, transaction_id, data)
    return TransactionResponse.model_validate(transaction)


@router.delete("/{transaction_id}")
def delete_transaction(
    transaction_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Delete a transaction after reversing its balance effects"""
    transaction_service.delete_transaction(db, user_id, transaction_id)
    return {"success": True}
