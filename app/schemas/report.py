from pydantic import BaseModel, ConfigDict, Field
from typing import Any
from datetime import datetime
from decimal import Decimal

class CategoryTotal(BaseModel):
    name: str
    value: Decimal

class MonthlySummaryRow(BaseModel):
    month: int
    income: Decimal
    expenses: Decimal

class AIReportRequest(BaseModel):
    question: str = Field(min_length=1)

class AIReportResponse(BaseModel):
    output: Any

class BankStatementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    account_id: int
    file_name: str
    file_type: str
    import_date: datetime
    row_count: int
