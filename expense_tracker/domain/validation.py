"""Gate-keeping checks applied before entities reach the record store."""

import math
from typing import Iterable, Optional

from expense_tracker.domain.exceptions import StateError, ValidationError
from expense_tracker.models.enums import EntryKind


def validate_amount(amount, field: str = "amount") -> float:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise ValidationError(f"{field} must be a number")
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError(f"{field} must be a finite number greater than zero")
    return float(amount)


def validate_non_negative(amount, field: str) -> float:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise ValidationError(f"{field} must be a number")
    if not math.isfinite(amount) or amount < 0:
        raise ValidationError(f"{field} must be a finite number greater than or equal to zero")
    return float(amount)


def validate_kind(kind) -> EntryKind:
    try:
        return EntryKind(kind)
    except ValueError:
        allowed = ", ".join(k.value for k in EntryKind)
        raise ValidationError(f"Invalid transaction kind '{kind}'. Expected one of: {allowed}")


def require_reference(entity, label: str, ref_id):
    """Return `entity` or fail when the referenced record was not found in scope."""
    if entity is None:
        raise ValidationError(f"Unknown {label}: {ref_id}")
    return entity


def validate_transaction(kind, amount, category, financial_user, category_id=None, financial_user_id=None) -> EntryKind:
    """Check a transaction payload; `category` and `financial_user` are the looked-up records (or None)."""
    entry_kind = validate_kind(kind)
    validate_amount(amount)
    require_reference(category, "category", category_id)
    require_reference(financial_user, "financial user", financial_user_id)
    return entry_kind


def validate_goal(target_amount, current_amount) -> None:
    validate_non_negative(target_amount, "target_amount")
    validate_non_negative(current_amount, "current_amount")


def ensure_category_name_available(name: str, categories: Iterable, exclude_id: Optional[int] = None) -> str:
    """Category names are unique per account scope, compared case-insensitively."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Category name is required")
    wanted = cleaned.casefold()
    for category in categories:
        if category.id != exclude_id and category.name.strip().casefold() == wanted:
            raise ValidationError(f"Category '{cleaned}' already exists")
    return cleaned


def ensure_financial_user_deletable(financial_user, transactions: Iterable, loans: Iterable = ()) -> None:
    """A financial user stays while any transaction or loan of the account points at it."""
    count = sum(1 for tx in transactions if tx.financial_user_id == financial_user.id)
    count += sum(1 for loan in loans if loan.financial_user_id == financial_user.id)
    if count:
        raise StateError(
            f"Cannot delete financial user with existing transactions or loans ({count})",
            count=count,
        )
