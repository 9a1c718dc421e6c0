from pydantic import BaseModel, ConfigDict
from typing import List
import datetime as dt
from decimal import Decimal

from app.schemas.transaction import TransactionOut

class InvoiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    card_id: int
    month: int
    year: int
    total_amount: Decimal
    is_paid: bool

class InvoiceDetail(InvoiceOut):
    transactions: List[TransactionOut] = []

class InvoicePayRequest(BaseModel):
    payment_date: dt.date
    account_id: int
    category_id: int
