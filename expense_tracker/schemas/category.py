from typing import Optional
from pydantic import BaseModel, ConfigDict

from expense_tracker.models.category import CategoryType


class CategoryCreate(BaseModel):
    name: str
    type: CategoryType = CategoryType.expense
    color: str = "#6366f1"


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[CategoryType] = None
    color: Optional[str] = None


class CategoryRead(BaseModel):
    id: int
    name: str
    type: CategoryType
    color: str
    is_system: bool
    system_key: Optional[str] = None
    is_global: bool = False

    model_config = ConfigDict(from_attributes=True)
