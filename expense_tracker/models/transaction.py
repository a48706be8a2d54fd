from uuid import UUID
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from expense_tracker.models.enums import TransactionKind


class Transaction(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("account_id", "voucher_id", name="uq_transaction_account_voucher"),
    )
    id: Optional[int] = Field(default=None, primary_key=True)
    account_id: UUID = Field(foreign_key="user.id", index=True)
    voucher_id: str = Field(index=True)
    title: str
    description: Optional[str] = None
    amount: float
    kind: TransactionKind
    category_id: Optional[int] = Field(default=None, foreign_key="category.id")
    financial_user_id: Optional[int] = Field(default=None, foreign_key="financial_user.id")
    date: datetime = Field(default_factory=datetime.utcnow)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
