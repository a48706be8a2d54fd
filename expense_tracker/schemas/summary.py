# expense_tracker/schemas/summary.py

from pydantic import BaseModel
from typing import List, Optional
from datetime import date

from expense_tracker.schemas.transaction import TransactionRead


class PeriodSummary(BaseModel):
    income: float = 0.0
    expense: float = 0.0
    net: float = 0.0
    savings_rate: float = 0.0


class CategoryBreakdown(BaseModel):
    category_id: int
    name: str
    color: Optional[str] = None
    income: float
    expense: float
    net: float
    count: int
    pct_of_total_income: float
    pct_of_total_expense: float


class LoanSummary(BaseModel):
    total_given: float = 0.0
    total_taken: float = 0.0
    net_position: float = 0.0
    pending_count: int = 0
    repaid_count: int = 0


class MonthlyTrendPoint(BaseModel):
    year: int
    month: int
    income: float
    expense: float
    net: float


class DailySpending(BaseModel):
    date: date
    spending: float


class GoalProgress(BaseModel):
    active: int = 0
    completed: int = 0


class DashboardResponse(BaseModel):
    total_balance: float
    monthly_income: float
    monthly_expenses: float
    savings_rate: float
    net_loans: float
    loans: LoanSummary
    goals: GoalProgress
    recent_transactions: List[TransactionRead]
