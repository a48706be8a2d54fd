from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field
from typing import Optional
from uuid import UUID
from enum import Enum
from datetime import datetime


class CategoryType(str, Enum):
    income = "income"
    expense = "expense"
    both = "both"


class Category(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("account_id", "system_key", name="uq_category_account_system_key"),
    )
    id: Optional[int] = Field(default=None, primary_key=True)
    # NULL account_id marks a global category shared by every account
    account_id: Optional[UUID] = Field(default=None, foreign_key="user.id", index=True)
    name: str
    type: CategoryType = Field(default=CategoryType.expense)
    color: str = Field(default="#6366f1")

    is_system: bool = Field(default=False, index=True)
    system_key: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
