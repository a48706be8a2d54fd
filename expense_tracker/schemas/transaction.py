from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import date, datetime

from expense_tracker.models.enums import EntryKind, TransactionKind


class TransactionCreate(BaseModel):
    title: str
    description: Optional[str] = None
    amount: float
    kind: EntryKind
    category_id: Optional[int] = None
    financial_user_id: int
    date: Optional[datetime] = None
    # Only used when kind is loan_given / loan_taken
    due_date: Optional[date] = None


class TransactionUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[float] = None
    kind: Optional[TransactionKind] = None
    category_id: Optional[int] = None
    financial_user_id: Optional[int] = None
    date: Optional[datetime] = None


class TransactionRead(BaseModel):
    id: int
    voucher_id: str
    title: str
    description: Optional[str] = None
    amount: float
    kind: TransactionKind
    category_id: Optional[int] = None
    financial_user_id: Optional[int] = None
    date: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
