from fastapi import APIRouter, Depends, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import List

from app.db.dependency import get_db
from app.errors import ConflictError
from app.models.account import Account
from app.models.bank_statement import BankStatement
from app.models.bill import Bill
from app.models.card import Card
from app.models.transaction import Transaction
from app.models.user import User
from app.schemas.account import AccountCreate, AccountOut, AccountUpdate
from app.services.targets import get_owned
from app.utils.auth import get_current_user

router = APIRouter()

@router.post("", response_model=AccountOut, status_code=status.HTTP_201_CREATED)
def create_account(
    payload: AccountCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # the only place a balance is written directly
    account = Account(
        name=payload.name,
        type=payload.type,
        balance=payload.balance,
        user_id=current_user.id,
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account

@router.get("", response_model=List[AccountOut])
def list_accounts(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return db.query(Account).filter(Account.user_id == current_user.id).order_by(Account.name).all()

@router.get("/{account_id}", response_model=AccountOut)
def get_account(
    account_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, Account, account_id, current_user.id, "Account")

@router.put("/{account_id}", response_model=AccountOut)
def update_account(
    account_id: int,
    payload: AccountUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    account = get_owned(db, Account, account_id, current_user.id, "Account")
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(account, field, value)
    db.commit()
    db.refresh(account)
    return account

@router.patch("/{account_id}/status", response_model=AccountOut)
def toggle_account(
    account_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    account = get_owned(db, Account, account_id, current_user.id, "Account")
    account.active = not account.active
    db.commit()
    db.refresh(account)
    return account

@router.delete("/{account_id}")
def delete_account(
    account_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    account = get_owned(db, Account, account_id, current_user.id, "Account")
    linked = (
        db.query(Transaction.id)
        .filter(or_(Transaction.account_id == account.id, Transaction.target_account_id == account.id))
        .first()
        or db.query(Card.id).filter(Card.account_id == account.id).first()
        or db.query(Bill.id).filter(Bill.account_id == account.id).first()
        or db.query(BankStatement.id).filter(BankStatement.account_id == account.id).first()
    )
    if linked:
        raise ConflictError("Account has linked transactions, cards, bills or statements; deactivate it instead")
    db.delete(account)
    db.commit()
    return {"detail": "Deleted successfully"}
