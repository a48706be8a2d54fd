"""Unit tests for balance aggregation"""

import random
from datetime import date, datetime

import pytest

from conftest import make_transaction
from expense_tracker.domain import balances
from expense_tracker.models.category import Category
from expense_tracker.models.enums import LoanDirection, LoanStatus
from expense_tracker.models.goal import Goal
from expense_tracker.models.loan import Loan


def _category(category_id, name):
    return Category(id=category_id, name=name)


@pytest.mark.parametrize("seed", range(25))
def test_net_balance_matches_brute_force(seed):
    """net_balance equals a naive income minus expense sum for random sets"""
    rng = random.Random(seed)
    transactions = [
        make_transaction(rng.choice(["income", "expense"]), round(rng.uniform(0.01, 5000), 2))
        for _ in range(rng.randint(1, 60))
    ]

    income = 0.0
    expense = 0.0
    for tx in transactions:
        if tx.kind.value == "income":
            income += tx.amount
        else:
            expense += tx.amount

    assert balances.net_balance(transactions) == pytest.approx(income - expense)
    rng.shuffle(transactions)
    assert balances.net_balance(transactions) == pytest.approx(income - expense)


def test_period_summary_empty():
    summary = balances.period_summary([])
    assert summary.model_dump() == {"income": 0.0, "expense": 0.0, "net": 0.0, "savings_rate": 0.0}


def test_period_summary_scenario():
    transactions = [
        make_transaction("income", 1000),
        make_transaction("expense", 400),
        make_transaction("expense", 100),
    ]
    summary = balances.period_summary(transactions)

    assert summary.income == 1000
    assert summary.expense == 500
    assert summary.net == 500
    assert summary.savings_rate == pytest.approx(0.5)


def test_period_summary_without_income_has_zero_savings_rate():
    summary = balances.period_summary([make_transaction("expense", 250)])
    assert summary.net == -250
    assert summary.savings_rate == 0


def test_period_summary_with_range_predicate():
    transactions = [
        make_transaction("income", 100, date=datetime(2024, 1, 31, 23, 0)),
        make_transaction("income", 200, date=datetime(2024, 2, 1, 8, 0)),
        make_transaction("expense", 50, date=datetime(2024, 2, 29, 18, 0)),
        make_transaction("expense", 70, date=datetime(2024, 3, 1, 0, 0)),
    ]
    summary = balances.period_summary(transactions, balances.in_range(date(2024, 2, 1), date(2024, 2, 29)))
    assert (summary.income, summary.expense) == (200, 50)

    february = balances.period_summary(transactions, balances.in_month(2024, 2))
    assert february == summary


def test_category_breakdown_percentages_sum_to_100():
    categories = [_category(1, "Salary"), _category(2, "Food"), _category(3, "Rent"), _category(4, "Unused")]
    transactions = [
        make_transaction("income", 3000, category_id=1),
        make_transaction("income", 1000, category_id=2),
        make_transaction("expense", 300, category_id=2),
        make_transaction("expense", 900, category_id=3),
        make_transaction("expense", 33.33, category_id=3),
    ]

    rows = balances.per_category_breakdown(transactions, categories)

    assert {row.category_id for row in rows} == {1, 2, 3}
    income_rows = [row for row in rows if row.income > 0]
    expense_rows = [row for row in rows if row.expense > 0]
    assert sum(row.pct_of_total_income for row in income_rows) == pytest.approx(100)
    assert sum(row.pct_of_total_expense for row in expense_rows) == pytest.approx(100)

    food = next(row for row in rows if row.category_id == 2)
    assert food.count == 2
    assert food.net == 700
    assert food.pct_of_total_income == pytest.approx(25)


def test_category_breakdown_sorted_by_expense_descending():
    categories = [_category(1, "A"), _category(2, "B"), _category(3, "C")]
    transactions = [
        make_transaction("expense", 10, category_id=1),
        make_transaction("expense", 30, category_id=2),
        make_transaction("expense", 20, category_id=3),
    ]
    rows = balances.per_category_breakdown(transactions, categories)
    assert [row.name for row in rows] == ["B", "C", "A"]

    rows = balances.per_category_breakdown(transactions, categories, sort_key="name", descending=False)
    assert [row.name for row in rows] == ["A", "B", "C"]


def test_category_breakdown_ignores_unknown_categories_and_zero_totals():
    transactions = [
        make_transaction("expense", 10, category_id=99),
        make_transaction("income", 10, category_id=None),
    ]
    rows = balances.per_category_breakdown(transactions, [_category(1, "A")])
    assert rows == []


def test_category_breakdown_only_income_gives_zero_expense_share():
    rows = balances.per_category_breakdown([make_transaction("income", 10, category_id=1)], [_category(1, "A")])
    assert rows[0].pct_of_total_income == 100
    assert rows[0].pct_of_total_expense == 0


def test_category_breakdown_rejects_unknown_sort_key():
    with pytest.raises(ValueError):
        balances.per_category_breakdown([], [], sort_key="color")


def test_loan_summary_counts_pending_loans_only():
    loans = [
        Loan(amount=500, direction=LoanDirection.given, status=LoanStatus.pending, financial_user_id=1),
        Loan(amount=200, direction=LoanDirection.taken, status=LoanStatus.pending, financial_user_id=1),
        Loan(amount=1000, direction=LoanDirection.given, status=LoanStatus.repaid, financial_user_id=1),
    ]
    summary = balances.loan_summary(loans)

    assert summary.total_given == 500
    assert summary.total_taken == 200
    assert summary.net_position == 300
    assert summary.pending_count == 2
    assert summary.repaid_count == 1


def test_loan_summary_empty():
    assert balances.loan_summary([]).model_dump() == {
        "total_given": 0.0, "total_taken": 0.0, "net_position": 0.0, "pending_count": 0, "repaid_count": 0,
    }


def test_monthly_trend_spans_year_boundary():
    transactions = [
        make_transaction("income", 100, date=datetime(2023, 12, 5)),
        make_transaction("expense", 40, date=datetime(2024, 2, 10)),
    ]
    points = balances.monthly_trend(transactions, today=date(2024, 2, 20), months=3)

    assert [(p.year, p.month) for p in points] == [(2023, 12), (2024, 1), (2024, 2)]
    assert points[0].income == 100
    assert points[1].net == 0
    assert points[2].net == -40


def test_daily_spending_counts_expenses_per_day():
    transactions = [
        make_transaction("expense", 15, date=datetime(2024, 5, 14, 9)),
        make_transaction("expense", 5, date=datetime(2024, 5, 14, 20)),
        make_transaction("income", 999, date=datetime(2024, 5, 14, 10)),
    ]
    days = balances.daily_spending(transactions, today=date(2024, 5, 15), days=3)

    assert [d.date for d in days] == [date(2024, 5, 13), date(2024, 5, 14), date(2024, 5, 15)]
    assert [d.spending for d in days] == [0, 20, 0]


def test_goal_progress():
    goals = [
        Goal(title="Bike", target_amount=500, current_amount=500, deadline=date(2024, 12, 31)),
        Goal(title="Trip", target_amount=2000, current_amount=150, deadline=date(2025, 6, 1)),
    ]
    progress = balances.goal_progress(goals)
    assert (progress.active, progress.completed) == (1, 1)
