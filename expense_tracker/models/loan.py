from sqlmodel import SQLModel, Field
from uuid import UUID
from typing import Optional
from datetime import date, datetime

from expense_tracker.models.enums import LoanDirection, LoanStatus


class Loan(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    account_id: UUID = Field(foreign_key="user.id", index=True)
    # Plain columns, not foreign keys: deleting a transaction never touches its loan
    transaction_id: Optional[int] = Field(default=None, index=True)
    repayment_transaction_id: Optional[int] = Field(default=None, index=True)
    financial_user_id: int = Field(foreign_key="financial_user.id")
    amount: float
    direction: LoanDirection
    status: LoanStatus = Field(default=LoanStatus.pending)
    due_date: Optional[date] = None
    repaid_date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
