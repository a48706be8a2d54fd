from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import date, datetime

from expense_tracker.models.goal import GoalStatus


class GoalCreate(BaseModel):
    title: str
    target_amount: float
    current_amount: float = 0.0
    deadline: date
    status: GoalStatus = GoalStatus.active


class GoalUpdate(BaseModel):
    title: Optional[str] = None
    target_amount: Optional[float] = None
    current_amount: Optional[float] = None
    deadline: Optional[date] = None
    status: Optional[GoalStatus] = None


class GoalContribution(BaseModel):
    amount: float


class GoalRead(GoalCreate):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
