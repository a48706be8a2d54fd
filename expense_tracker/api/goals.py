from typing import List

from fastapi import APIRouter, Depends

from expense_tracker.api.dependencies import get_store
from expense_tracker.domain.exceptions import ValidationError
from expense_tracker.domain.validation import validate_amount, validate_goal
from expense_tracker.models.goal import Goal, GoalStatus
from expense_tracker.schemas.goal import GoalContribution, GoalCreate, GoalRead, GoalUpdate
from expense_tracker.store import RecordStore

router = APIRouter(prefix="/goals", tags=["goals"])


@router.post("", response_model=GoalRead, status_code=201)
@router.post("/", response_model=GoalRead, status_code=201)
def create_goal(data: GoalCreate, store: RecordStore = Depends(get_store)):
    validate_goal(data.target_amount, data.current_amount)
    if not data.title.strip():
        raise ValidationError("title is required")
    with store.atomic():
        goal = store.create(Goal, **data.model_dump())
    store.session.refresh(goal)
    return goal


@router.get("", response_model=List[GoalRead])
@router.get("/", response_model=List[GoalRead])
def list_goals(store: RecordStore = Depends(get_store)):
    return store.list(Goal, order_by=Goal.deadline)


@router.put("/{goal_id}", response_model=GoalRead)
def update_goal(goal_id: int, data: GoalUpdate, store: RecordStore = Depends(get_store)):
    goal = store.get(Goal, goal_id)
    patch = data.model_dump(exclude_unset=True, exclude_none=True)
    validate_goal(patch.get("target_amount", goal.target_amount), patch.get("current_amount", goal.current_amount))
    with store.atomic():
        store.update(goal, patch)
    store.session.refresh(goal)
    return goal


@router.post("/{goal_id}/contribute", response_model=GoalRead)
def contribute_to_goal(goal_id: int, data: GoalContribution, store: RecordStore = Depends(get_store)):
    """Add to a goal's progress; reaching the target marks it completed."""
    goal = store.get(Goal, goal_id)
    current = goal.current_amount + validate_amount(data.amount)
    patch = {"current_amount": current}
    if current >= goal.target_amount:
        patch["status"] = GoalStatus.completed
    with store.atomic():
        store.update(goal, patch)
    store.session.refresh(goal)
    return goal


@router.delete("/{goal_id}")
def delete_goal(goal_id: int, store: RecordStore = Depends(get_store)):
    goal = store.get(Goal, goal_id)
    with store.atomic():
        store.delete(goal)
    return {"message": "Goal deleted"}
