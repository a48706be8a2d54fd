"""Ledger operations: validate with the accounting core, persist through the store.

Each public function here is one user action. Multi-record actions (opening
or repaying a loan) run inside ``RecordStore.atomic()`` so the loan and its
transaction are committed together or not at all.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlmodel import select

from expense_tracker.domain import loans as loan_lifecycle
from expense_tracker.domain.exceptions import StateError, ValidationError
from expense_tracker.domain.validation import (
    ensure_financial_user_deletable,
    require_reference,
    validate_amount,
    validate_transaction,
)
from expense_tracker.models.category import Category
from expense_tracker.models.enums import EntryKind, TransactionKind
from expense_tracker.models.financial_user import FinancialUser
from expense_tracker.models.loan import Loan
from expense_tracker.models.transaction import Transaction
from expense_tracker.schemas.loan import LoanCreate
from expense_tracker.schemas.transaction import TransactionCreate, TransactionUpdate
from expense_tracker.store import RecordStore
from expense_tracker.utils.category_helpers import (
    get_or_create_loan_category,
    get_or_create_loan_repayment_category,
)
from expense_tracker.utils.voucher import next_voucher_id

logger = logging.getLogger(__name__)


def find_category(store: RecordStore, category_id: Optional[int]) -> Optional[Category]:
    return store.find(Category, category_id, include_global=True)


def loan_for_transaction(store: RecordStore, transaction_id: int) -> Optional[Loan]:
    """The loan this transaction originated or repaid, if any."""
    return store.session.exec(
        select(Loan).where(
            Loan.account_id == store.account_id,
            or_(Loan.transaction_id == transaction_id, Loan.repayment_transaction_id == transaction_id),
        )
    ).first()


def record_transaction(store: RecordStore, data: TransactionCreate) -> tuple[Transaction, Optional[Loan]]:
    """Record a transaction; loan_given / loan_taken entries open a loan instead."""
    entry_kind = EntryKind(data.kind)
    if entry_kind in loan_lifecycle.ENTRY_KIND_DIRECTION:
        loan, transaction = create_loan(store, LoanCreate(
            title=data.title,
            description=data.description,
            amount=data.amount,
            direction=loan_lifecycle.ENTRY_KIND_DIRECTION[entry_kind],
            financial_user_id=data.financial_user_id,
            category_id=data.category_id,
            date=data.date,
            due_date=data.due_date,
        ))
        return transaction, loan

    category = find_category(store, data.category_id)
    financial_user = store.find(FinancialUser, data.financial_user_id)
    validate_transaction(
        entry_kind, data.amount, category, financial_user,
        category_id=data.category_id, financial_user_id=data.financial_user_id,
    )
    if not data.title or not data.title.strip():
        raise ValidationError("title is required")

    now = datetime.utcnow()
    with store.atomic():
        transaction = store.create(
            Transaction,
            voucher_id=next_voucher_id(store),
            title=data.title.strip(),
            description=data.description,
            amount=float(data.amount),
            kind=TransactionKind(entry_kind.value),
            category_id=category.id,
            financial_user_id=financial_user.id,
            date=data.date or now,
            created_at=now,
            updated_at=now,
        )
    store.session.refresh(transaction)
    logger.info(
        "Transaction recorded",
        extra={"account_id": str(store.account_id), "transaction_id": transaction.id, "kind": entry_kind.value},
    )
    return transaction, None


def update_transaction(store: RecordStore, transaction_id: int, data: TransactionUpdate) -> Transaction:
    transaction = store.get(Transaction, transaction_id)
    patch = data.model_dump(exclude_unset=True)

    if "title" in patch:
        if not patch["title"] or not patch["title"].strip():
            raise ValidationError("title is required")
        patch["title"] = patch["title"].strip()
    if "amount" in patch:
        patch["amount"] = validate_amount(patch["amount"])
    if "kind" in patch and patch["kind"] is None:
        raise ValidationError("kind cannot be empty")
    if "category_id" in patch:
        require_reference(find_category(store, patch["category_id"]), "category", patch["category_id"])
    if "financial_user_id" in patch:
        require_reference(store.find(FinancialUser, patch["financial_user_id"]), "financial user", patch["financial_user_id"])
    if "date" in patch and patch["date"] is None:
        raise ValidationError("date cannot be empty")

    changes_money = (
        ("amount" in patch and patch["amount"] != transaction.amount)
        or ("kind" in patch and patch["kind"] != transaction.kind)
    )
    if changes_money and loan_for_transaction(store, transaction.id) is not None:
        raise StateError("Amount and kind of a loan transaction cannot be edited")

    patch["updated_at"] = datetime.utcnow()
    with store.atomic():
        store.update(transaction, patch)
    store.session.refresh(transaction)
    return transaction


def delete_transaction(store: RecordStore, transaction_id: int) -> None:
    """Delete one transaction. A loan it belongs to is left as it is."""
    transaction = store.get(Transaction, transaction_id)
    linked = loan_for_transaction(store, transaction.id)
    with store.atomic():
        store.delete(transaction)
    if linked is not None:
        logger.warning(
            "Deleted a loan transaction; loan left unchanged",
            extra={"account_id": str(store.account_id), "transaction_id": transaction_id, "loan_id": linked.id},
        )


def _loan_category_id(store: RecordStore, category_id: Optional[int], default) -> int:
    if category_id is None:
        return default(store).id
    return require_reference(find_category(store, category_id), "category", category_id).id


def create_loan(store: RecordStore, data: LoanCreate) -> tuple[Loan, Transaction]:
    financial_user = store.find(FinancialUser, data.financial_user_id)

    with store.atomic():
        loan, transaction = loan_lifecycle.open_loan(
            account_id=store.account_id,
            direction=data.direction,
            amount=data.amount,
            financial_user=financial_user,
            financial_user_id=data.financial_user_id,
            voucher_id=next_voucher_id(store),
            title=data.title,
            description=data.description,
            category_id=_loan_category_id(store, data.category_id, get_or_create_loan_category),
            occurred_at=data.date,
            due_date=data.due_date,
        )
        store.add(transaction)
        loan.transaction_id = transaction.id
        store.add(loan)

    store.session.refresh(loan)
    store.session.refresh(transaction)
    logger.info(
        "Loan created",
        extra={
            "account_id": str(store.account_id),
            "loan_id": loan.id,
            "transaction_id": transaction.id,
            "direction": loan.direction,
            "amount": loan.amount,
        },
    )
    return loan, transaction


def repay_loan(store: RecordStore, loan_id: int, repaid_at: Optional[datetime] = None) -> tuple[Loan, Transaction]:
    loan = store.find(Loan, loan_id)
    original = store.find(Transaction, loan.transaction_id) if loan is not None else None

    with store.atomic():
        loan, transaction = loan_lifecycle.repay_loan(
            loan,
            loan_id=loan_id,
            voucher_id=next_voucher_id(store),
            original_title=original.title if original else None,
            category_id=get_or_create_loan_repayment_category(store).id,
            repaid_at=repaid_at,
        )
        store.add(transaction)
        loan.repayment_transaction_id = transaction.id
        store.update(loan, {})

    store.session.refresh(loan)
    store.session.refresh(transaction)
    logger.info(
        "Loan repaid",
        extra={"account_id": str(store.account_id), "loan_id": loan.id, "transaction_id": transaction.id},
    )
    return loan, transaction


def delete_loan(store: RecordStore, loan_id: int) -> None:
    """Delete the loan record only; its transactions stay in the ledger."""
    loan = store.get(Loan, loan_id)
    with store.atomic():
        store.delete(loan)
    logger.info("Loan deleted", extra={"account_id": str(store.account_id), "loan_id": loan_id})


def delete_financial_user(store: RecordStore, financial_user_id: int) -> None:
    financial_user = store.get(FinancialUser, financial_user_id)
    ensure_financial_user_deletable(
        financial_user,
        store.list(Transaction, financial_user_id=financial_user.id),
        store.list(Loan, financial_user_id=financial_user.id),
    )
    with store.atomic():
        store.delete(financial_user)
