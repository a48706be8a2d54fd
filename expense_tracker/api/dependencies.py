"""Dependency injection for FastAPI endpoints"""

from uuid import UUID

from fastapi import Depends
from sqlmodel import Session

from expense_tracker.core.security import get_current_user
from expense_tracker.database import get_session
from expense_tracker.store import RecordStore


def get_store(
    account_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> RecordStore:
    """Record store scoped to the authenticated account"""
    return RecordStore(session, account_id)
