# expense_tracker/schemas/backup.py

from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel

from expense_tracker.schemas.category import CategoryRead
from expense_tracker.schemas.financial_user import FinancialUserRead
from expense_tracker.schemas.goal import GoalRead
from expense_tracker.schemas.loan import LoanRead
from expense_tracker.schemas.settings import AccountSettingsRead
from expense_tracker.schemas.transaction import TransactionRead


class BackupDocument(BaseModel):
    account_id: Optional[UUID] = None
    transactions: Optional[List[TransactionRead]] = None
    financial_users: Optional[List[FinancialUserRead]] = None
    categories: Optional[List[CategoryRead]] = None
    loans: Optional[List[LoanRead]] = None
    goals: Optional[List[GoalRead]] = None
    settings: Optional[AccountSettingsRead] = None
    export_date: Optional[datetime] = None


class ImportResult(BaseModel):
    transactions: int = 0
    financial_users: int = 0
    categories: int = 0
    loans: int = 0
    goals: int = 0
    settings: bool = False
