from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.db.dependency import get_db
from app.models.card import Card
from app.models.invoice import Invoice
from app.models.user import User
from app.schemas.invoice import InvoiceDetail, InvoiceOut, InvoicePayRequest
from app.services import payments
from app.utils.auth import get_current_user

router = APIRouter()

@router.get("", response_model=List[InvoiceOut])
def list_invoices(
    card_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Invoice).join(Card, Invoice.card_id == Card.id).filter(Card.user_id == current_user.id)
    if card_id is not None:
        query = query.filter(Invoice.card_id == card_id)
    return query.order_by(Invoice.year.desc(), Invoice.month.desc()).all()

@router.get("/{invoice_id}", response_model=InvoiceDetail)
def get_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return payments.get_owned_invoice(db, invoice_id, current_user.id)

@router.post("/pay/{invoice_id}")
def pay_invoice(
    invoice_id: int,
    payload: InvoicePayRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    invoice = payments.pay_invoice(
        db,
        current_user.id,
        invoice_id,
        payment_date=payload.payment_date,
        account_id=payload.account_id,
        category_id=payload.category_id,
    )
    db.commit()
    return {"message": "Invoice paid successfully", "invoice": InvoiceOut.model_validate(invoice)}
