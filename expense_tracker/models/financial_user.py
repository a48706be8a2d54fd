from enum import Enum
from sqlmodel import SQLModel, Field
from uuid import UUID
from typing import Optional
from datetime import datetime


class FinancialUserType(str, Enum):
    office = "Office"
    friend = "Friend"
    family = "Family"
    client = "Client"


class FinancialUser(SQLModel, table=True):
    __tablename__ = "financial_user"

    id: Optional[int] = Field(default=None, primary_key=True)
    account_id: UUID = Field(foreign_key="user.id", index=True)
    name: str
    type: FinancialUserType = Field(default=FinancialUserType.friend)
    created_at: datetime = Field(default_factory=datetime.utcnow)
