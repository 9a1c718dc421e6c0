from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.db.dependency import get_db
from app.errors import ConflictError
from app.models.bill import Bill
from app.models.card import Card
from app.models.invoice import Invoice
from app.models.transaction import Transaction
from app.models.user import User
from app.schemas.card import CardCreate, CardOut, CardUpdate
from app.services.targets import get_owned, load_account
from app.utils.auth import get_current_user

router = APIRouter()

@router.post("", response_model=CardOut, status_code=status.HTTP_201_CREATED)
def create_card(
    payload: CardCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    load_account(db, payload.account_id, current_user.id)
    card = Card(**payload.model_dump(), user_id=current_user.id)
    db.add(card)
    db.commit()
    db.refresh(card)
    return card

@router.get("", response_model=List[CardOut])
def list_cards(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return db.query(Card).filter(Card.user_id == current_user.id).order_by(Card.name).all()

@router.get("/{card_id}", response_model=CardOut)
def get_card(
    card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, Card, card_id, current_user.id, "Card")

@router.put("/{card_id}", response_model=CardOut)
def update_card(
    card_id: int,
    payload: CardUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # closing_day is fixed once charges have been bucketed with it
    card = get_owned(db, Card, card_id, current_user.id, "Card")
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(card, field, value)
    db.commit()
    db.refresh(card)
    return card

@router.patch("/{card_id}/status", response_model=CardOut)
def toggle_card(
    card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    card = get_owned(db, Card, card_id, current_user.id, "Card")
    card.active = not card.active
    db.commit()
    db.refresh(card)
    return card

@router.delete("/{card_id}")
def delete_card(
    card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    card = get_owned(db, Card, card_id, current_user.id, "Card")
    linked = (
        db.query(Transaction.id).filter(Transaction.card_id == card.id).first()
        or db.query(Invoice.id).filter(Invoice.card_id == card.id).first()
        or db.query(Bill.id).filter(Bill.card_id == card.id).first()
    )
    if linked:
        raise ConflictError("Card has linked transactions, invoices or bills; deactivate it instead")
    db.delete(card)
    db.commit()
    return {"detail": "Deleted successfully"}
