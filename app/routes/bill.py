from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import List, Optional

from app.db.dependency import get_db
from app.errors import ConflictError, ValidationError
from app.models.bill import Bill, BillPayment
from app.models.category import Category
from app.models.enums import BillPaymentStatus, CategoryType
from app.models.user import User
from app.schemas.bill import (
    BillCreate,
    BillOut,
    BillPaymentOut,
    BillPayRequest,
    BillPayResult,
    BillUpdate,
    PendingBillPaymentOut,
)
from app.services import payments
from app.services.targets import AccountTarget, find_owned, get_owned, load_account, load_card, resolve_target
from app.utils.auth import get_current_user

router = APIRouter()

def _validate_bill(db: Session, user_id: int, payload) -> None:
    target = resolve_target(payload.account_id, payload.card_id)
    if isinstance(target, AccountTarget):
        load_account(db, target.account_id, user_id)
    else:
        load_card(db, target.card_id, user_id)
    category = find_owned(db, Category, payload.category_id, user_id, "Category")
    if category.type != CategoryType.EXPENSE:
        raise ValidationError("Bills need an expense category")

@router.post("", response_model=BillOut, status_code=status.HTTP_201_CREATED)
def create_bill(
    payload: BillCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _validate_bill(db, current_user.id, payload)
    bill = Bill(**payload.model_dump(), user_id=current_user.id)
    db.add(bill)
    db.flush()
    payments.schedule_first_payment(db, bill)
    db.commit()
    db.refresh(bill)
    return bill

@router.get("", response_model=List[BillOut])
def list_bills(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return db.query(Bill).filter(Bill.user_id == current_user.id).order_by(Bill.description).all()

@router.get("/pending", response_model=List[PendingBillPaymentOut])
def list_pending(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    rows = (
        db.query(BillPayment, Bill.description)
        .join(Bill, BillPayment.bill_id == Bill.id)
        .filter(Bill.user_id == current_user.id, BillPayment.status == BillPaymentStatus.PENDING)
        .order_by(BillPayment.due_date)
        .all()
    )
    return [
        PendingBillPaymentOut(**BillPaymentOut.model_validate(payment).model_dump(), description=description)
        for payment, description in rows
    ]

@router.get("/{bill_id}", response_model=BillOut)
def get_bill(
    bill_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, Bill, bill_id, current_user.id, "Bill")

@router.put("/{bill_id}", response_model=BillOut)
def update_bill(
    bill_id: int,
    payload: BillUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    bill = get_owned(db, Bill, bill_id, current_user.id, "Bill")
    _validate_bill(db, current_user.id, payload)
    for field, value in payload.model_dump().items():
        setattr(bill, field, value)
    db.commit()
    db.refresh(bill)
    return bill

@router.patch("/{bill_id}/status", response_model=BillOut)
def toggle_bill(
    bill_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    bill = get_owned(db, Bill, bill_id, current_user.id, "Bill")
    bill.active = not bill.active
    db.commit()
    db.refresh(bill)
    return bill

@router.delete("/{bill_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bill(
    bill_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    bill = get_owned(db, Bill, bill_id, current_user.id, "Bill")
    if any(p.status == BillPaymentStatus.PAID for p in bill.payments):
        raise ConflictError("Bills with paid history cannot be deleted; deactivate them instead")
    db.delete(bill)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/pay/{payment_id}", response_model=BillPayResult)
def pay_bill(
    payment_id: int,
    payload: Optional[BillPayRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payment_date = payload.payment_date if payload else None
    paid, next_payment = payments.pay_bill(db, current_user.id, payment_id, payment_date)
    db.commit()
    return {"message": "Bill paid successfully", "payment": paid, "next_payment": next_payment}
