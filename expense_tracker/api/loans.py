from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from expense_tracker.api.dependencies import get_store
from expense_tracker.models.enums import LoanDirection, LoanStatus
from expense_tracker.models.loan import Loan
from expense_tracker.schemas.loan import LoanCreate, LoanRead, LoanRepay, LoanWithTransactionRead
from expense_tracker.schemas.transaction import TransactionRead
from expense_tracker.services import ledger
from expense_tracker.store import RecordStore

router = APIRouter(prefix="/loans", tags=["loans"])


def _with_transaction(loan: Loan, transaction) -> LoanWithTransactionRead:
    return LoanWithTransactionRead(
        loan=LoanRead.model_validate(loan),
        transaction=TransactionRead.model_validate(transaction),
    )


@router.post("", response_model=LoanWithTransactionRead, status_code=201)
@router.post("/", response_model=LoanWithTransactionRead, status_code=201)
def create_loan(loan_data: LoanCreate, store: RecordStore = Depends(get_store)):
    loan, transaction = ledger.create_loan(store, loan_data)
    return _with_transaction(loan, transaction)


@router.get("", response_model=List[LoanRead])
@router.get("/", response_model=List[LoanRead])
def list_loans(
    store: RecordStore = Depends(get_store),
    status: Optional[LoanStatus] = Query(None),
    direction: Optional[LoanDirection] = Query(None),
):
    """Pending loans first, newest first within each status."""
    filters = {}
    if status:
        filters["status"] = status
    if direction:
        filters["direction"] = direction
    loans = sorted(store.list(Loan, **filters), key=lambda l: l.created_at, reverse=True)
    return sorted(loans, key=lambda l: l.status != LoanStatus.pending)


@router.get("/{loan_id}", response_model=LoanRead)
def get_loan(loan_id: int, store: RecordStore = Depends(get_store)):
    return store.get(Loan, loan_id)


@router.post("/{loan_id}/repay", response_model=LoanWithTransactionRead)
def repay_loan(loan_id: int, payload: Optional[LoanRepay] = None, store: RecordStore = Depends(get_store)):
    loan, transaction = ledger.repay_loan(store, loan_id, payload.repaid_date if payload else None)
    return _with_transaction(loan, transaction)


@router.delete("/{loan_id}")
def delete_loan(loan_id: int, store: RecordStore = Depends(get_store)):
    ledger.delete_loan(store, loan_id)
    return {"message": "Loan deleted"}
