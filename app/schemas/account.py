from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from decimal import Decimal

from app.models.enums import AccountType

class AccountCreate(BaseModel):
    name: str = Field(min_length=1)
    type: AccountType
    balance: Decimal = Field(default=Decimal("0"), decimal_places=2)

class AccountUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[AccountType] = None

class AccountOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: AccountType
    balance: Decimal
    active: bool
