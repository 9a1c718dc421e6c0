from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from app.models.enums import CategoryType

class CategoryCreate(BaseModel):
    description: str = Field(min_length=1)
    type: CategoryType

class CategoryUpdate(BaseModel):
    description: Optional[str] = Field(default=None, min_length=1)
    type: Optional[CategoryType] = None

class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    type: CategoryType
    active: bool
