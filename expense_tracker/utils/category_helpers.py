from typing import Optional

from expense_tracker.constants.categories import DEFAULT_CATEGORIES, SystemCategoryKey
from expense_tracker.models.category import Category, CategoryType
from expense_tracker.store import RecordStore


def _adopt_by_name_if_exists(
    store: RecordStore,
    name: str,
    key: SystemCategoryKey,
) -> Optional[Category]:
    """
    If the account already has a category with this name (case-insensitive)
    and no system key, adopt it as the system category for `key`.
    A global category with the name is used as it is; global rows are never modified.
    """
    wanted = name.casefold()
    global_match = None
    for existing in store.list(Category, include_global=True, system_key=None):
        if existing.name.casefold() != wanted:
            continue
        if existing.account_id is None:
            global_match = global_match or existing
            continue
        return store.update(existing, {"is_system": True, "system_key": key.value})
    return global_match


def get_or_create_system_category(
    store: RecordStore,
    *,
    key: SystemCategoryKey,
    default_name: str,
    type_: CategoryType,
    color: str = "#64748b",
) -> Category:
    """
    Look up by system_key, then try to adopt by name, otherwise create.
    Idempotent thanks to the (account_id, system_key) unique constraint.
    """
    existing = store.list(Category, include_global=True, system_key=key.value)
    if existing:
        # account rows win over global ones
        return sorted(existing, key=lambda c: c.account_id is None)[0]

    adopted = _adopt_by_name_if_exists(store, default_name, key)
    if adopted:
        return adopted

    return store.create(
        Category,
        name=default_name,
        type=type_,
        color=color,
        is_system=True,
        system_key=key.value,
    )


def get_or_create_loan_category(store: RecordStore) -> Category:
    return get_or_create_system_category(
        store,
        key=SystemCategoryKey.LOAN,
        default_name="Loan",
        type_=CategoryType.both,
        color="#a855f7",
    )


def get_or_create_loan_repayment_category(store: RecordStore) -> Category:
    return get_or_create_system_category(
        store,
        key=SystemCategoryKey.LOAN_REPAYMENT,
        default_name="Loan Repayment",
        type_=CategoryType.both,
        color="#8b5cf6",
    )


def create_base_categories(store: RecordStore) -> None:
    """
    Seed the base categories for a new account.
    Safe to call more than once.
    """
    get_or_create_loan_category(store)
    get_or_create_loan_repayment_category(store)

    taken = {c.name.casefold() for c in store.list(Category, include_global=True)}
    for name, type_, color in DEFAULT_CATEGORIES:
        if name.casefold() not in taken:
            store.create(Category, name=name, type=CategoryType(type_), color=color)
