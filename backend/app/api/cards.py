"""
Credit card API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from app.dependencies import get_db, get_current_user_id
from app.models import CreditCard, CreditCardBalance
from app.schemas.credit_card import CardCreate, CardUpdate, CardResponse
from app.services.ledger_service import ensure_card_balance

router = APIRouter(prefix="/cards", tags=["cards"])


def _get_owned(db: Session, user_id: str, card_id: str) -> CreditCard:
    card = db.query(CreditCard).filter(
        CreditCard.id == card_id,
        CreditCard.user_id == user_id,
        CreditCard.is_active == True
    ).first()
    if not card:
        raise HTTPException(status_code=404, detail="Card not found")
    return card


@router.get("", response_model=List[CardResponse])
def list_cards(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List the user's active cards with their per-currency balances."""
    return db.query(CreditCard).filter(
        CreditCard.user_id == user_id,
        CreditCard.is_active == True
    ).order_by(CreditCard.created_at).all()


@router.post("", response_model=CardResponse, status_code=201)
def create_card(
    data: CardCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create a card with its opening balance in each currency."""
    currencies = [b.currency for b in data.balances]
    if len(set(currencies)) != len(currencies):
        raise HTTPException(status_code=422, detail="Each currency may appear only once")

    card = CreditCard(
        user_id=user_id,
        name=data.name,
        bank_name=data.bank_name,
        cut_off_day=data.cut_off_day,
        payment_due_day=data.payment_due_day,
        color=data.color,
        balances=[
            CreditCardBalance(currency=b.currency, credit_limit=b.credit_limit, balance=b.balance)
            for b in data.balances
        ],
    )
    db.add(card)
    db.commit()
    db.refresh(card)
    return card


@router.get("/{card_id}", response_model=CardResponse)
def get_card(
    card_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get a card with its balances."""
    return _get_owned(db, user_id, card_id)


@router.patch("/{card_id}", response_model=CardResponse)
def update_card(
    card_id: str,
    data: CardUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Update descriptive fields and credit limits. Balances are left alone."""
    card = _get_owned(db, user_id, card_id)

    update_data = data.model_dump(exclude_unset=True, exclude={"credit_limits"})
    for field, value in update_data.items():
        setattr(card, field, value)

    for limit in data.credit_limits or []:
        ensure_card_balance(db, card.id, limit.currency)
        db.query(CreditCardBalance).filter(
            CreditCardBalance.credit_card_id == card.id,
            CreditCardBalance.currency == limit.currency
        ).update(
            {CreditCardBalance.credit_limit: limit.credit_limit},
            synchronize_session=False
        )

    db.commit()
    db.refresh(card)
    return card


@router.delete("/{card_id}")
def delete_card(
    card_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Soft delete a card (set is_active to False)."""
    card = _get_owned(db, user_id, card_id)
    card.is_active = False
    db.commit()
    return {"success": True}
