"""Balance aggregation over transaction, loan and goal collections.

Every function here is pure: it reads the attributes of the records handed to
it and never touches the database. Input order does not matter. Records are
assumed to have passed validation already (finite, positive amounts).
"""

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional

from expense_tracker.models.enums import LoanDirection, LoanStatus, TransactionKind
from expense_tracker.schemas.summary import (
    CategoryBreakdown,
    DailySpending,
    GoalProgress,
    LoanSummary,
    MonthlyTrendPoint,
    PeriodSummary,
)

Predicate = Callable[[object], bool]

BREAKDOWN_SORT_KEYS = {"income", "expense", "net", "count", "name"}


def _as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def in_range(start: Optional[date] = None, end: Optional[date] = None) -> Predicate:
    """Predicate selecting transactions whose occurrence day lies in [start, end]."""
    def predicate(tx) -> bool:
        day = _as_date(tx.date)
        if start is not None and day < start:
            return False
        if end is not None and day > end:
            return False
        return True
    return predicate


def in_month(year: int, month: int) -> Predicate:
    def predicate(tx) -> bool:
        return tx.date.year == year and tx.date.month == month
    return predicate


def _totals(transactions: Iterable) -> tuple[float, float]:
    income = 0.0
    expense = 0.0
    for tx in transactions:
        if tx.kind == TransactionKind.income:
            income += tx.amount
        elif tx.kind == TransactionKind.expense:
            expense += tx.amount
    return income, expense


def net_balance(transactions: Iterable) -> float:
    income, expense = _totals(transactions)
    return income - expense


def period_summary(transactions: Iterable, predicate: Optional[Predicate] = None) -> PeriodSummary:
    """Income, expense, net and savings rate for the transactions matching `predicate`.

    The savings rate is a fraction of income and is 0 when there is no income.
    """
    selected = transactions if predicate is None else (tx for tx in transactions if predicate(tx))
    income, expense = _totals(selected)
    net = income - expense
    savings_rate = net / income if income > 0 else 0.0
    return PeriodSummary(income=income, expense=expense, net=net, savings_rate=savings_rate)


def per_category_breakdown(
    transactions: Iterable,
    categories: Iterable,
    sort_key: str = "expense",
    descending: bool = True,
) -> List[CategoryBreakdown]:
    """Per-category totals with each category's share of the grand totals.

    Only transactions pointing at one of `categories` are counted, and
    categories without any income or expense are left out.
    """
    if sort_key not in BREAKDOWN_SORT_KEYS:
        raise ValueError(f"Unsupported sort key: {sort_key}")

    by_id = {c.id: c for c in categories}
    stats: Dict[int, dict] = defaultdict(lambda: {"income": 0.0, "expense": 0.0, "count": 0})
    for tx in transactions:
        if tx.category_id not in by_id:
            continue
        entry = stats[tx.category_id]
        entry["count"] += 1
        if tx.kind == TransactionKind.income:
            entry["income"] += tx.amount
        elif tx.kind == TransactionKind.expense:
            entry["expense"] += tx.amount

    total_income = sum(s["income"] for s in stats.values())
    total_expense = sum(s["expense"] for s in stats.values())

    rows = []
    for category_id, s in stats.items():
        if s["income"] <= 0 and s["expense"] <= 0:
            continue
        category = by_id[category_id]
        rows.append(CategoryBreakdown(
            category_id=category_id,
            name=category.name,
            color=getattr(category, "color", None),
            income=s["income"],
            expense=s["expense"],
            net=s["income"] - s["expense"],
            count=s["count"],
            pct_of_total_income=(s["income"] / total_income * 100) if total_income > 0 else 0.0,
            pct_of_total_expense=(s["expense"] / total_expense * 100) if total_expense > 0 else 0.0,
        ))

    rows.sort(key=lambda row: getattr(row, sort_key), reverse=descending)
    return rows


def loan_summary(loans: Iterable) -> LoanSummary:
    """Outstanding position over pending loans; repaid loans are only counted."""
    summary = LoanSummary()
    for loan in loans:
        if loan.status != LoanStatus.pending:
            summary.repaid_count += 1
            continue
        summary.pending_count += 1
        if loan.direction == LoanDirection.given:
            summary.total_given += loan.amount
        elif loan.direction == LoanDirection.taken:
            summary.total_taken += loan.amount
    summary.net_position = summary.total_given - summary.total_taken
    return summary


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def monthly_trend(transactions: Iterable, today: date, months: int = 12) -> List[MonthlyTrendPoint]:
    """Income/expense per calendar month for the `months` months ending with today's month."""
    buckets: Dict[tuple[int, int], list] = defaultdict(lambda: [0.0, 0.0])
    for tx in transactions:
        key = (tx.date.year, tx.date.month)
        if tx.kind == TransactionKind.income:
            buckets[key][0] += tx.amount
        elif tx.kind == TransactionKind.expense:
            buckets[key][1] += tx.amount

    points = []
    for offset in range(months - 1, -1, -1):
        year, month = _shift_month(today.year, today.month, -offset)
        income, expense = buckets.get((year, month), (0.0, 0.0))
        points.append(MonthlyTrendPoint(year=year, month=month, income=income, expense=expense, net=income - expense))
    return points


def daily_spending(transactions: Iterable, today: date, days: int = 30) -> List[DailySpending]:
    spending: Dict[date, float] = defaultdict(float)
    for tx in transactions:
        if tx.kind == TransactionKind.expense:
            spending[_as_date(tx.date)] += tx.amount

    first = today - timedelta(days=days - 1)
    return [
        DailySpending(date=first + timedelta(days=i), spending=spending.get(first + timedelta(days=i), 0.0))
        for i in range(days)
    ]


def goal_progress(goals: Iterable) -> GoalProgress:
    progress = GoalProgress()
    for goal in goals:
        if goal.current_amount >= goal.target_amount:
            progress.completed += 1
        else:
            progress.active += 1
    return progress
