from enum import Enum
from sqlmodel import SQLModel, Field
from uuid import UUID
from typing import Optional
from datetime import date, datetime


class GoalStatus(str, Enum):
    active = "active"
    completed = "completed"
    paused = "paused"


class Goal(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    account_id: UUID = Field(foreign_key="user.id", index=True)
    title: str
    target_amount: float
    current_amount: float = 0.0
    deadline: date
    status: GoalStatus = Field(default=GoalStatus.active)
    created_at: datetime = Field(default_factory=datetime.utcnow)
