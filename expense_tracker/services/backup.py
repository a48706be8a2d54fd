"""Account data export, import and reset.

Imports merge into the current account: every record gets a fresh id and
references between imported records are remapped. The whole import is one
database transaction.
"""

import logging
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import delete

from expense_tracker.domain.exceptions import ValidationError
from expense_tracker.domain.validation import validate_amount, validate_goal
from expense_tracker.models.account_settings import AccountSettings
from expense_tracker.models.category import Category
from expense_tracker.models.financial_user import FinancialUser
from expense_tracker.models.goal import Goal
from expense_tracker.models.loan import Loan
from expense_tracker.models.transaction import Transaction
from expense_tracker.models.voucher_counter import VoucherCounter
from expense_tracker.schemas.backup import BackupDocument, ImportResult
from expense_tracker.schemas.category import CategoryRead
from expense_tracker.schemas.financial_user import FinancialUserRead
from expense_tracker.schemas.goal import GoalRead
from expense_tracker.schemas.loan import LoanRead
from expense_tracker.schemas.settings import AccountSettingsRead
from expense_tracker.schemas.transaction import TransactionRead
from expense_tracker.store import RecordStore
from expense_tracker.utils.category_helpers import create_base_categories
from expense_tracker.utils.settings_helpers import get_account_settings
from expense_tracker.utils.voucher import reserve_voucher_id

logger = logging.getLogger(__name__)


def export_account(store: RecordStore) -> BackupDocument:
    return BackupDocument(
        account_id=store.account_id,
        transactions=[TransactionRead.model_validate(tx) for tx in store.list(Transaction, order_by=Transaction.date)],
        financial_users=[FinancialUserRead.model_validate(fu) for fu in store.list(FinancialUser)],
        categories=[CategoryRead.model_validate(c) for c in store.list(Category)],
        loans=[LoanRead.model_validate(loan) for loan in store.list(Loan)],
        goals=[GoalRead.model_validate(goal) for goal in store.list(Goal)],
        settings=AccountSettingsRead.model_validate(get_account_settings(store)),
        export_date=datetime.utcnow(),
    )


def _import_categories(store: RecordStore, doc: BackupDocument, result: ImportResult) -> Dict[int, int]:
    mapping: Dict[int, int] = {}
    for item in doc.categories or []:
        match: Optional[Category] = None
        if item.system_key:
            existing = store.list(Category, system_key=item.system_key)
            match = existing[0] if existing else None
        if match is None:
            wanted = item.name.strip().casefold()
            match = next(
                (c for c in store.list(Category, include_global=True) if c.name.strip().casefold() == wanted),
                None,
            )
        if match is None:
            match = store.create(
                Category,
                name=item.name.strip(),
                type=item.type,
                color=item.color,
                is_system=item.is_system,
                system_key=item.system_key,
            )
            result.categories += 1
        mapping[item.id] = match.id
    return mapping


def import_account(store: RecordStore, doc: BackupDocument) -> ImportResult:
    result = ImportResult()
    with store.atomic():
        category_map = _import_categories(store, doc, result)

        user_map: Dict[int, int] = {}
        for item in doc.financial_users or []:
            created = store.create(FinancialUser, name=item.name, type=item.type, created_at=item.created_at)
            user_map[item.id] = created.id
            result.financial_users += 1

        existing_vouchers = {tx.voucher_id: tx.id for tx in store.list(Transaction)}
        tx_map: Dict[int, int] = {}
        for item in doc.transactions or []:
            if item.voucher_id in existing_vouchers:
                tx_map[item.id] = existing_vouchers[item.voucher_id]
                continue
            created = store.create(
                Transaction,
                voucher_id=item.voucher_id,
                title=item.title,
                description=item.description,
                amount=validate_amount(item.amount),
                kind=item.kind,
                category_id=category_map.get(item.category_id),
                financial_user_id=user_map.get(item.financial_user_id),
                date=item.date,
                created_at=item.created_at,
                updated_at=item.updated_at,
            )
            reserve_voucher_id(store, created.voucher_id)
            existing_vouchers[created.voucher_id] = created.id
            tx_map[item.id] = created.id
            result.transactions += 1

        for item in doc.loans or []:
            if item.financial_user_id not in user_map:
                raise ValidationError(f"Loan {item.id} references an unknown financial user: {item.financial_user_id}")
            store.create(
                Loan,
                transaction_id=tx_map.get(item.transaction_id),
                repayment_transaction_id=tx_map.get(item.repayment_transaction_id),
                financial_user_id=user_map[item.financial_user_id],
                amount=validate_amount(item.amount),
                direction=item.direction,
                status=item.status,
                due_date=item.due_date,
                repaid_date=item.repaid_date,
                created_at=item.created_at,
            )
            result.loans += 1

        for item in doc.goals or []:
            validate_goal(item.target_amount, item.current_amount)
            store.create(Goal, **item.model_dump(exclude={"id"}))
            result.goals += 1

        if doc.settings is not None:
            settings = get_account_settings(store)
            for field, value in doc.settings.model_dump().items():
                setattr(settings, field, value)
            store.session.add(settings)
            result.settings = True

    logger.info("Backup imported", extra={"account_id": str(store.account_id), **result.model_dump()})
    return result


def reset_account(store: RecordStore) -> None:
    """Remove every record of the account and re-seed the base categories."""
    with store.atomic():
        for model in (Loan, Transaction, Goal, FinancialUser, Category, VoucherCounter, AccountSettings):
            store.session.execute(delete(model).where(model.account_id == store.account_id))
        create_base_categories(store)
    logger.info("Account data reset", extra={"account_id": str(store.account_id)})
