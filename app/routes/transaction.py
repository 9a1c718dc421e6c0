from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from app.schemas.transaction import TransactionCreate, TransactionOut, TransactionUpdate, TransactionListResponse
from app.utils.auth import get_current_user
from app.db.dependency import get_db
from app.models.user import User
from app.models.transaction import Transaction
from app.services import ledger
from app.services.targets import get_owned

router = APIRouter()

@router.post("", response_model=List[TransactionOut], status_code=status.HTTP_201_CREATED)
def create_transaction(
    payload: TransactionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Record income, an expense (optionally in card installments) or a transfer."""
    created = ledger.create_transaction(db, current_user.id, payload)
    db.commit()
    return created

@router.get("", response_model=TransactionListResponse)
def list_transactions(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Transaction).filter(Transaction.user_id == current_user.id)
    total = query.count()
    transactions = (
        query.order_by(Transaction.date.desc(), Transaction.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return {
        "transactions": transactions,
        "has_more": offset + len(transactions) < total,
        "total": total,
    }

@router.get("/{tx_id}", response_model=TransactionOut)
def get_transaction(
    tx_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, Transaction, tx_id, current_user.id, "Transaction")

@router.put("/{tx_id}", response_model=TransactionOut)
def update_transaction(
    tx_id: int,
    payload: TransactionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tx = ledger.update_transaction(db, current_user.id, tx_id, payload)
    db.commit()
    db.refresh(tx)
    return tx

@router.delete("/{tx_id}")
def delete_transaction(
    tx_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ledger.delete_transaction(db, current_user.id, tx_id)
    db.commit()
    return {"detail": "Deleted successfully"}
