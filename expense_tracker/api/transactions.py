import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from expense_tracker.api.dependencies import get_store
from expense_tracker.domain.balances import in_range
from expense_tracker.models.enums import TransactionKind
from expense_tracker.models.transaction import Transaction
from expense_tracker.schemas.transaction import TransactionCreate, TransactionRead, TransactionUpdate
from expense_tracker.services import ledger
from expense_tracker.store import RecordStore

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post("", response_model=TransactionRead, status_code=201)
@router.post("/", response_model=TransactionRead, status_code=201)
def create_transaction(transaction_data: TransactionCreate, store: RecordStore = Depends(get_store)):
    """
    Record a transaction. loan_given / loan_taken open a loan and return its
    originating transaction (stored as expense / income).
    """
    transaction, _ = ledger.record_transaction(store, transaction_data)
    return transaction


@router.get("", response_model=List[TransactionRead])
@router.get("/", response_model=List[TransactionRead])
def list_transactions(
    store: RecordStore = Depends(get_store),
    start_date: Optional[dt.date] = Query(None),
    end_date: Optional[dt.date] = Query(None),
    kind: Optional[TransactionKind] = Query(None),
    category_id: Optional[int] = Query(None),
    financial_user_id: Optional[int] = Query(None),
):
    filters = {}
    if kind:
        filters["kind"] = kind
    if category_id is not None:
        filters["category_id"] = category_id
    if financial_user_id is not None:
        filters["financial_user_id"] = financial_user_id

    transactions = store.list(Transaction, order_by=Transaction.date.desc(), **filters)
    if start_date or end_date:
        predicate = in_range(start_date, end_date)
        transactions = [tx for tx in transactions if predicate(tx)]
    return transactions


@router.get("/{transaction_id}", response_model=TransactionRead)
def get_transaction(transaction_id: int, store: RecordStore = Depends(get_store)):
    return store.get(Transaction, transaction_id)


@router.put("/{transaction_id}", response_model=TransactionRead)
def update_transaction(
    transaction_id: int,
    transaction_data: TransactionUpdate,
    store: RecordStore = Depends(get_store),
):
    return ledger.update_transaction(store, transaction_id, transaction_data)


@router.delete("/{transaction_id}")
def delete_transaction(transaction_id: int, store: RecordStore = Depends(get_store)):
    ledger.delete_transaction(store, transaction_id)
    return {"message": "Transaction deleted"}
