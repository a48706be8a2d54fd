from enum import Enum


class TransactionKind(str, Enum):
    income = "income"
    expense = "expense"


class EntryKind(str, Enum):
    """Kinds accepted when recording a transaction; loan tags become income/expense in the ledger."""
    income = "income"
    expense = "expense"
    loan_given = "loan_given"
    loan_taken = "loan_taken"


class LoanDirection(str, Enum):
    given = "given"
    taken = "taken"


class LoanStatus(str, Enum):
    pending = "pending"
    repaid = "repaid"
