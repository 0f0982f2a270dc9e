"""
Bank account API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.dependencies import get_db, get_current_user_id
from app.models import BankAccount
from app.schemas.account import (
    AccountCreate,
    AccountUpdate,
    AccountResponse,
    AccountList,
)

router = APIRouter(prefix="/accounts", tags=["accounts"])


def _get_owned(db: Session, user_id: str, account_id: str) -> BankAccount:
    account = db.query(BankAccount).filter(
        BankAccount.id == account_id,
        BankAccount.user_id == user_id,
        BankAccount.is_active == True
    ).first()
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    return account


@router.get("", response_model=AccountList)
def list_accounts(
    skip: int = 0,
    limit: int = 100,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List the user's active accounts."""
    query = db.query(BankAccount).filter(
        BankAccount.user_id == user_id,
        BankAccount.is_active == True
    )
    accounts = query.order_by(BankAccount.created_at).offset(skip).limit(limit).all()
    total = query.count()

    return AccountList(
        items=accounts,
        total=total
    )


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    account: AccountCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create a new account with its opening balance."""
    db_account = BankAccount(
        user_id=user_id,
        name=account.name,
        bank_name=account.bank_name,
        account_type=account.account_type,
        currency=account.currency,
        balance=account.balance,
        color=account.color,
    )
    db.add(db_account)
    db.commit()
    db.refresh(db_account)
    return db_account


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get a specific account."""
    return _get_owned(db, user_id, account_id)


@router.patch("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: str,
    account_update: AccountUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Update an account's descriptive fields."""
    account = _get_owned(db, user_id, account_id)

    update_data = account_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(account, field, value)

    db.commit()
    db.refresh(account)
    return account


@router.delete("/{account_id}")
def delete_account(
    account_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Soft delete an account (set is_active to False)."""
    account = _get_owned(db, user_id, account_id)

    # Soft delete keeps history and lets existing transactions be reversed
    account.is_active = False
    db.commit()
    return {"success": True}
