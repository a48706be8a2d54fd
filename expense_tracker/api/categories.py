# expense_tracker/api/categories.py

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import func, select

from expense_tracker.api.dependencies import get_store
from expense_tracker.domain.exceptions import StateError
from expense_tracker.domain.validation import ensure_category_name_available
from expense_tracker.models.category import Category, CategoryType
from expense_tracker.models.transaction import Transaction
from expense_tracker.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from expense_tracker.store import RecordStore

router = APIRouter(prefix="/categories", tags=["categories"])


def _read(category: Category) -> CategoryRead:
    return CategoryRead(
        id=category.id,
        name=category.name,
        type=category.type,
        color=category.color,
        is_system=category.is_system,
        system_key=category.system_key,
        is_global=category.account_id is None,
    )


@router.post("", response_model=CategoryRead, status_code=201)
@router.post("/", response_model=CategoryRead, status_code=201)
def create_category(category_data: CategoryCreate, store: RecordStore = Depends(get_store)):
    """
    Create an account category. User-created categories are never system
    categories, and names are unique ignoring case.
    """
    name = ensure_category_name_available(category_data.name, store.list(Category, include_global=True))
    with store.atomic():
        category = store.create(
            Category,
            name=name,
            type=category_data.type,
            color=category_data.color,
            is_system=False,
            system_key=None,
        )
    store.session.refresh(category)
    return _read(category)


@router.get("", response_model=list[CategoryRead])
@router.get("/", response_model=list[CategoryRead])
def list_categories(
    store: RecordStore = Depends(get_store),
    type: Optional[CategoryType] = Query(None),
):
    """Global and account categories, alphabetically."""
    categories = store.list(Category, include_global=True)
    if type:
        categories = [c for c in categories if c.type in (type, CategoryType.both)]
    return [_read(c) for c in sorted(categories, key=lambda c: c.name.casefold())]


@router.put("/{category_id}", response_model=CategoryRead)
def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    store: RecordStore = Depends(get_store),
):
    """
    Update name, type or color of an account category.
    System categories keep their type.
    """
    category = store.get(Category, category_id)
    patch = category_data.model_dump(exclude_unset=True, exclude_none=True)

    if "name" in patch:
        patch["name"] = ensure_category_name_available(
            patch["name"], store.list(Category, include_global=True), exclude_id=category.id
        )
    if category.is_system and "type" in patch and patch["type"] != category.type:
        raise StateError("The type of a system category cannot be changed")

    with store.atomic():
        store.update(category, patch)
    store.session.refresh(category)
    return _read(category)


@router.delete("/{category_id}")
def delete_category(category_id: int, store: RecordStore = Depends(get_store)):
    """
    Delete an account category.
    - System categories cannot be deleted.
    - Categories with transactions cannot be deleted (keeps reports whole).
    """
    category = store.get(Category, category_id)
    if category.is_system:
        raise StateError("System categories cannot be deleted")

    tx_count = store.session.exec(
        select(func.count(Transaction.id)).where(
            Transaction.account_id == store.account_id,
            Transaction.category_id == category_id,
        )
    ).one()
    if tx_count:
        raise StateError(f"Cannot delete category with existing transactions ({tx_count})", count=tx_count)

    with store.atomic():
        store.delete(category)
    return {"message": "Category deleted"}
