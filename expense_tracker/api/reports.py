import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from expense_tracker.api.dependencies import get_store
from expense_tracker.domain import balances
from expense_tracker.models.category import Category
from expense_tracker.models.goal import Goal
from expense_tracker.models.loan import Loan
from expense_tracker.models.transaction import Transaction
from expense_tracker.schemas.summary import (
    CategoryBreakdown,
    DailySpending,
    DashboardResponse,
    LoanSummary,
    MonthlyTrendPoint,
    PeriodSummary,
)
from expense_tracker.schemas.transaction import TransactionRead
from expense_tracker.store import RecordStore

router = APIRouter(prefix="/reports", tags=["reports"])
dashboard_router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _period(start_date: Optional[dt.date], end_date: Optional[dt.date]):
    return balances.in_range(start_date, end_date) if start_date or end_date else None


@router.get("/summary", response_model=PeriodSummary)
def get_period_summary(
    store: RecordStore = Depends(get_store),
    start_date: Optional[dt.date] = Query(None),
    end_date: Optional[dt.date] = Query(None),
):
    return balances.period_summary(store.list(Transaction), _period(start_date, end_date))


@router.get("/categories", response_model=List[CategoryBreakdown])
def get_category_breakdown(
    store: RecordStore = Depends(get_store),
    start_date: Optional[dt.date] = Query(None),
    end_date: Optional[dt.date] = Query(None),
    sort_by: str = Query("expense", pattern="^(income|expense|net|count|name)$"),
    descending: bool = Query(True),
):
    transactions = store.list(Transaction)
    predicate = _period(start_date, end_date)
    if predicate:
        transactions = [tx for tx in transactions if predicate(tx)]
    return balances.per_category_breakdown(
        transactions, store.list(Category, include_global=True), sort_key=sort_by, descending=descending
    )


@router.get("/loans", response_model=LoanSummary)
def get_loan_summary(store: RecordStore = Depends(get_store)):
    return balances.loan_summary(store.list(Loan))


@router.get("/monthly-trend", response_model=List[MonthlyTrendPoint])
def get_monthly_trend(
    store: RecordStore = Depends(get_store),
    months: int = Query(12, ge=1, le=60),
):
    return balances.monthly_trend(store.list(Transaction), dt.datetime.utcnow().date(), months=months)


@router.get("/daily-spending", response_model=List[DailySpending])
def get_daily_spending(
    store: RecordStore = Depends(get_store),
    days: int = Query(30, ge=1, le=366),
):
    return balances.daily_spending(store.list(Transaction), dt.datetime.utcnow().date(), days=days)


@dashboard_router.get("", response_model=DashboardResponse)
@dashboard_router.get("/", response_model=DashboardResponse)
def get_dashboard(store: RecordStore = Depends(get_store)):
    today = dt.datetime.utcnow().date()
    transactions = store.list(Transaction, order_by=Transaction.date.desc())
    month = balances.period_summary(transactions, balances.in_month(today.year, today.month))
    loans = balances.loan_summary(store.list(Loan))

    return DashboardResponse(
        total_balance=balances.net_balance(transactions),
        monthly_income=month.income,
        monthly_expenses=month.expense,
        savings_rate=month.savings_rate,
        net_loans=loans.net_position,
        loans=loans,
        goals=balances.goal_progress(store.list(Goal)),
        recent_transactions=[TransactionRead.model_validate(tx) for tx in transactions[:5]],
    )
