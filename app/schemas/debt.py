from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
import datetime as dt
from decimal import Decimal

from app.models.enums import DebtStatus, DebtType

class DebtBase(BaseModel):
    description: str = Field(min_length=1)
    creditor: Optional[str] = None
    type: DebtType
    initial_amount: Decimal = Field(gt=0, decimal_places=2)
    interest_rate: Optional[float] = Field(default=None, ge=0)
    minimum_payment: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    payment_due_day: Optional[int] = Field(default=None, ge=1, le=31)
    start_date: dt.date
    estimated_end_date: Optional[dt.date] = None

class DebtCreate(DebtBase):
    outstanding_balance: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)

class DebtUpdate(BaseModel):
    description: Optional[str] = Field(default=None, min_length=1)
    creditor: Optional[str] = None
    type: Optional[DebtType] = None
    interest_rate: Optional[float] = Field(default=None, ge=0)
    minimum_payment: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    payment_due_day: Optional[int] = Field(default=None, ge=1, le=31)
    estimated_end_date: Optional[dt.date] = None

class DebtOut(DebtBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    outstanding_balance: Decimal
    status: DebtStatus

class DebtPayRequest(BaseModel):
    amount_paid: Decimal = Field(gt=0, decimal_places=2)
    date: dt.date
    category_id: int
    account_id: Optional[int] = None
    card_id: Optional[int] = None

class DebtPaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    debt_id: int
    amount: Decimal
    payment_date: dt.date
    transaction_id: Optional[int] = None

class DebtPayResult(BaseModel):
    message: str
    debt: DebtOut
    payment: DebtPaymentOut

class DebtPaymentList(BaseModel):
    debt_payments: List[DebtPaymentOut]
