from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from expense_tracker.models.financial_user import FinancialUserType


class FinancialUserCreate(BaseModel):
    name: str
    type: FinancialUserType = FinancialUserType.friend


class FinancialUserUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[FinancialUserType] = None


class FinancialUserRead(BaseModel):
    id: int
    name: str
    type: FinancialUserType
    created_at: datetime
    transactions_count: int = 0

    model_config = ConfigDict(from_attributes=True)
