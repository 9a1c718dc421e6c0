from pydantic import BaseModel, ConfigDict, Field
import datetime as dt
from decimal import Decimal

class InvestmentCreate(BaseModel):
    type: str = Field(min_length=1)
    description: str = Field(min_length=1)
    quantity: Decimal = Field(gt=0)
    acquisition_value: Decimal = Field(gt=0, decimal_places=2)
    acquisition_date: dt.date

class InvestmentOut(InvestmentCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
