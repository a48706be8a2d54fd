from enum import Enum


class SystemCategoryKey(str, Enum):
    LOAN = "loan"
    LOAN_REPAYMENT = "loan_repayment"


# Seeded for every new account: (name, type, color)
DEFAULT_CATEGORIES = [
    ("Salary", "income", "#22c55e"),
    ("Food", "expense", "#f97316"),
    ("Transport", "expense", "#3b82f6"),
    ("Utilities", "expense", "#eab308"),
]
