from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.db.dependency import get_db
from app.errors import ConflictError
from app.models.debt import Debt, DebtPayment
from app.models.enums import DebtStatus
from app.models.user import User
from app.schemas.debt import DebtCreate, DebtOut, DebtPaymentList, DebtPayRequest, DebtPayResult, DebtUpdate
from app.services import payments
from app.services.targets import get_owned
from app.utils.auth import get_current_user

router = APIRouter()

@router.post("", response_model=DebtOut, status_code=status.HTTP_201_CREATED)
def create_debt(
    payload: DebtCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = payload.model_dump()
    if data["outstanding_balance"] is None:
        data["outstanding_balance"] = data["initial_amount"]
    debt = Debt(**data, user_id=current_user.id, status=DebtStatus.ACTIVE)
    db.add(debt)
    db.commit()
    db.refresh(debt)
    return debt

@router.get("", response_model=List[DebtOut])
def list_debts(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return db.query(Debt).filter(Debt.user_id == current_user.id).order_by(Debt.start_date).all()

@router.get("/{debt_id}", response_model=DebtOut)
def get_debt(
    debt_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, Debt, debt_id, current_user.id, "Debt")

@router.put("/{debt_id}", response_model=DebtOut)
def update_debt(
    debt_id: int,
    payload: DebtUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    debt = get_owned(db, Debt, debt_id, current_user.id, "Debt")
    if debt.status != DebtStatus.ACTIVE:
        raise ConflictError(f"Debt is {debt.status.value} and can no longer be changed")
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(debt, field, value)
    db.commit()
    db.refresh(debt)
    return debt

@router.delete("/{debt_id}", response_model=DebtOut)
def cancel_debt(
    debt_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    debt = payments.cancel_debt(db, current_user.id, debt_id)
    db.commit()
    return debt

@router.get("/{debt_id}/payments", response_model=DebtPaymentList)
def list_debt_payments(
    debt_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    get_owned(db, Debt, debt_id, current_user.id, "Debt")
    rows = (
        db.query(DebtPayment)
        .filter(DebtPayment.debt_id == debt_id)
        .order_by(DebtPayment.payment_date)
        .all()
    )
    return {"debt_payments": rows}

@router.post("/pay/{debt_id}", response_model=DebtPayResult)
def pay_debt(
    debt_id: int,
    payload: DebtPayRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    debt, payment = payments.pay_debt(
        db,
        current_user.id,
        debt_id,
        amount_paid=payload.amount_paid,
        date=payload.date,
        category_id=payload.category_id,
        account_id=payload.account_id,
        card_id=payload.card_id,
    )
    db.commit()
    db.refresh(debt)
    message = "Debt paid off" if debt.status == DebtStatus.PAID_OFF else "Partial payment recorded"
    return {"message": message, "debt": debt, "payment": payment}
