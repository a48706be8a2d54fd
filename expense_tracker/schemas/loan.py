from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import date, datetime

from expense_tracker.models.enums import LoanDirection, LoanStatus
from expense_tracker.schemas.transaction import TransactionRead


class LoanCreate(BaseModel):
    title: str
    description: Optional[str] = None
    amount: float
    direction: LoanDirection
    financial_user_id: int
    category_id: Optional[int] = None
    date: Optional[datetime] = None
    due_date: Optional[date] = None


class LoanRead(BaseModel):
    id: int
    transaction_id: Optional[int] = None
    repayment_transaction_id: Optional[int] = None
    financial_user_id: int
    amount: float
    direction: LoanDirection
    status: LoanStatus
    due_date: Optional[date] = None
    repaid_date: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoanWithTransactionRead(BaseModel):
    """A loan state change together with the transaction it produced."""
    loan: LoanRead
    transaction: TransactionRead


class LoanRepay(BaseModel):
    repaid_date: Optional[datetime] = None
