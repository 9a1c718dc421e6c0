from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from decimal import Decimal

class CardCreate(BaseModel):
    name: str = Field(min_length=1)
    credit_limit: Decimal = Field(ge=0, decimal_places=2)
    closing_day: int = Field(ge=1, le=31)
    due_day: int = Field(ge=1, le=31)
    account_id: int

class CardUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    credit_limit: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    due_day: Optional[int] = Field(default=None, ge=1, le=31)

class CardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    credit_limit: Decimal
    closing_day: int
    due_day: int
    account_id: int
    active: bool
