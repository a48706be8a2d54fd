"""Loan lifecycle: opening a loan and repaying it.

A loan is always born together with the transaction that moved the money, and
repaying it produces exactly one more transaction flowing the other way:

    direction   originating kind   repayment kind
    given       expense            income
    taken       income             expense

`pending` is the only state a loan can leave, and it can only go to `repaid`.
The functions below build unsaved records; persisting them together is the
caller's job (see `services.ledger`).
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from expense_tracker.domain.exceptions import NotFoundError, StateError, ValidationError
from expense_tracker.domain.validation import require_reference, validate_amount
from expense_tracker.models.enums import EntryKind, LoanDirection, LoanStatus, TransactionKind
from expense_tracker.models.loan import Loan
from expense_tracker.models.transaction import Transaction

ORIGINATING_KIND = {
    LoanDirection.given: TransactionKind.expense,
    LoanDirection.taken: TransactionKind.income,
}

REPAYMENT_KIND = {
    LoanDirection.given: TransactionKind.income,
    LoanDirection.taken: TransactionKind.expense,
}

ENTRY_KIND_DIRECTION = {
    EntryKind.loan_given: LoanDirection.given,
    EntryKind.loan_taken: LoanDirection.taken,
}


def parse_direction(value) -> LoanDirection:
    try:
        return LoanDirection(value)
    except ValueError:
        raise ValidationError(f"Invalid loan direction '{value}'. Expected 'given' or 'taken'")


def open_loan(
    *,
    account_id: UUID,
    direction,
    amount,
    financial_user,
    financial_user_id: Optional[int] = None,
    voucher_id: str,
    title: str,
    description: Optional[str] = None,
    category_id: Optional[int] = None,
    occurred_at: Optional[datetime] = None,
    due_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> tuple[Loan, Transaction]:
    """Build a pending loan and its originating transaction.

    Raises ValidationError for a non-positive amount, an unknown direction or a
    missing financial user; nothing is built in that case.
    """
    loan_direction = parse_direction(direction)
    loan_amount = validate_amount(amount)
    require_reference(financial_user, "financial user", financial_user_id)
    if not title or not title.strip():
        raise ValidationError("title is required")

    now = now or datetime.utcnow()
    transaction = Transaction(
        account_id=account_id,
        voucher_id=voucher_id,
        title=title.strip(),
        description=description,
        amount=loan_amount,
        kind=ORIGINATING_KIND[loan_direction],
        category_id=category_id,
        financial_user_id=financial_user.id,
        date=occurred_at or now,
        created_at=now,
        updated_at=now,
    )
    loan = Loan(
        account_id=account_id,
        financial_user_id=financial_user.id,
        amount=loan_amount,
        direction=loan_direction,
        status=LoanStatus.pending,
        due_date=due_date,
        created_at=now,
    )
    return loan, transaction


def repay_loan(
    loan: Optional[Loan],
    *,
    voucher_id: str,
    original_title: Optional[str] = None,
    category_id: Optional[int] = None,
    repaid_at: Optional[datetime] = None,
    loan_id: Optional[int] = None,
) -> tuple[Loan, Transaction]:
    """Mark a pending loan repaid and build the repayment transaction.

    Repaying twice is a caller bug and raises StateError rather than being
    ignored.
    """
    if loan is None:
        raise NotFoundError(f"Loan not found: {loan_id}")
    if loan.status != LoanStatus.pending:
        raise StateError(f"Loan {loan.id} is already {LoanStatus(loan.status).value}")

    repaid_at = repaid_at or datetime.utcnow()
    direction = LoanDirection(loan.direction)
    label = original_title or f"Loan #{loan.id}"
    transaction = Transaction(
        account_id=loan.account_id,
        voucher_id=voucher_id,
        title=f"Loan Repayment: {label}",
        description=f"Repayment of loan: {label}",
        amount=loan.amount,
        kind=REPAYMENT_KIND[direction],
        category_id=category_id,
        financial_user_id=loan.financial_user_id,
        date=repaid_at,
        created_at=repaid_at,
        updated_at=repaid_at,
    )
    loan.status = LoanStatus.repaid
    loan.repaid_date = repaid_at
    return loan, transaction
