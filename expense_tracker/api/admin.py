# expense_tracker/api/admin.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session, select

from expense_tracker.core.security import get_current_admin_user
from expense_tracker.database import get_session
from expense_tracker.domain import balances
from expense_tracker.models.transaction import Transaction
from expense_tracker.models.user import User
from expense_tracker.schemas.summary import PeriodSummary
from expense_tracker.schemas.transaction import TransactionRead

router = APIRouter(prefix="/admin", tags=["admin"])


class AccountTransactions(BaseModel):
    account_id: UUID
    email: str
    summary: PeriodSummary
    transactions: List[TransactionRead]


@router.get("/transactions", response_model=List[AccountTransactions])
def list_all_transactions(
    admin_id: UUID = Depends(get_current_admin_user),
    session: Session = Depends(get_session),
):
    """Transactions of every account, grouped per account. Admin role only."""
    result = []
    for user in session.exec(select(User).order_by(User.created_at)).all():
        transactions = session.exec(
            select(Transaction).where(Transaction.account_id == user.id).order_by(Transaction.date.desc())
        ).all()
        result.append(AccountTransactions(
            account_id=user.id,
            email=user.email,
            summary=balances.period_summary(transactions),
            transactions=[TransactionRead.model_validate(tx) for tx in transactions],
        ))
    return result
