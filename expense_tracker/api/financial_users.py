from collections import Counter
from typing import List

from fastapi import APIRouter, Depends

from expense_tracker.api.dependencies import get_store
from expense_tracker.domain.exceptions import ValidationError
from expense_tracker.models.financial_user import FinancialUser
from expense_tracker.models.transaction import Transaction
from expense_tracker.schemas.financial_user import FinancialUserCreate, FinancialUserRead, FinancialUserUpdate
from expense_tracker.services import ledger
from expense_tracker.store import RecordStore

router = APIRouter(prefix="/financial-users", tags=["financial_users"])


def _read(financial_user: FinancialUser, transactions_count: int = 0) -> FinancialUserRead:
    data = financial_user.model_dump()
    data["transactions_count"] = transactions_count
    return FinancialUserRead(**data)


def _clean_name(name: str) -> str:
    if not name or not name.strip():
        raise ValidationError("name is required")
    return name.strip()


@router.post("", response_model=FinancialUserRead, status_code=201)
@router.post("/", response_model=FinancialUserRead, status_code=201)
def create_financial_user(data: FinancialUserCreate, store: RecordStore = Depends(get_store)):
    with store.atomic():
        financial_user = store.create(FinancialUser, name=_clean_name(data.name), type=data.type)
    store.session.refresh(financial_user)
    return _read(financial_user)


@router.get("", response_model=List[FinancialUserRead])
@router.get("/", response_model=List[FinancialUserRead])
def list_financial_users(store: RecordStore = Depends(get_store)):
    counts = Counter(tx.financial_user_id for tx in store.list(Transaction))
    return [_read(fu, counts.get(fu.id, 0)) for fu in store.list(FinancialUser, order_by=FinancialUser.name)]


@router.put("/{financial_user_id}", response_model=FinancialUserRead)
def update_financial_user(
    financial_user_id: int,
    data: FinancialUserUpdate,
    store: RecordStore = Depends(get_store),
):
    financial_user = store.get(FinancialUser, financial_user_id)
    patch = data.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in patch:
        patch["name"] = _clean_name(patch["name"])
    with store.atomic():
        store.update(financial_user, patch)
    store.session.refresh(financial_user)
    return _read(financial_user, len(store.list(Transaction, financial_user_id=financial_user.id)))


@router.delete("/{financial_user_id}")
def delete_financial_user(financial_user_id: int, store: RecordStore = Depends(get_store)):
    ledger.delete_financial_user(store, financial_user_id)
    return {"message": "Financial user deleted"}
