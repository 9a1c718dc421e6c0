from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
import datetime as dt
from decimal import Decimal

from app.models.enums import BillPaymentStatus, Recurrence

class BillBase(BaseModel):
    description: str = Field(min_length=1)
    amount: Decimal = Field(gt=0, decimal_places=2)
    due_day: int = Field(ge=1, le=31)
    recurrence: Recurrence = Recurrence.NONE
    category_id: int
    account_id: Optional[int] = None
    card_id: Optional[int] = None

class BillCreate(BillBase):
    pass

class BillUpdate(BillBase):
    pass

class BillPaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    bill_id: int
    due_date: dt.date
    amount: Decimal
    status: BillPaymentStatus
    payment_date: Optional[dt.date] = None
    transaction_id: Optional[int] = None

class PendingBillPaymentOut(BillPaymentOut):
    description: str

class BillOut(BillBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    active: bool
    payments: List[BillPaymentOut] = []

class BillPayRequest(BaseModel):
    payment_date: Optional[dt.date] = None

class BillPayResult(BaseModel):
    message: str
    payment: BillPaymentOut
    next_payment: Optional[BillPaymentOut] = None
