from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
import datetime as dt
from decimal import Decimal

from app.models.enums import TransactionType

class TransactionBase(BaseModel):
    type: TransactionType
    value: Decimal = Field(gt=0, decimal_places=2)
    date: dt.date
    description: Optional[str] = None
    category_id: Optional[int] = None

class TransactionCreate(TransactionBase):
    account_id: Optional[int] = None
    card_id: Optional[int] = None
    target_account_id: Optional[int] = None
    installments: int = Field(default=1, ge=1, le=120)

class TransactionUpdate(BaseModel):
    type: Optional[TransactionType] = None
    value: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    date: Optional[dt.date] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    account_id: Optional[int] = None
    card_id: Optional[int] = None

class TransactionOut(TransactionBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    account_id: Optional[int] = None
    card_id: Optional[int] = None
    invoice_id: Optional[int] = None
    target_account_id: Optional[int] = None
    created_at: Optional[dt.datetime] = None

class TransactionListResponse(BaseModel):
    transactions: List[TransactionOut]
    has_more: bool
    total: int
