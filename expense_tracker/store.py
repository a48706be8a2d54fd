"""Account-scoped persistence over SQLModel tables.

A RecordStore is bound to one session and one account id; every read and
write goes through that scope, so callers never filter by account by hand.
Global rows (``account_id IS NULL``) are only visible where a model opts in
via ``include_global``.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence, Type, TypeVar
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, select

from expense_tracker.domain.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


class RecordStore:
    def __init__(self, session: Session, account_id: UUID):
        self.session = session
        self.account_id = account_id

    def _scoped(self, model: Type[ModelT], include_global: bool = False):
        if include_global:
            return select(model).where(or_(model.account_id == self.account_id, model.account_id.is_(None)))
        return select(model).where(model.account_id == self.account_id)

    def list(self, model: Type[ModelT], *, include_global: bool = False, order_by=None, **filters: Any) -> Sequence[ModelT]:
        query = self._scoped(model, include_global)
        for field, value in filters.items():
            query = query.where(getattr(model, field) == value)
        if order_by is not None:
            query = query.order_by(order_by)
        return self.session.exec(query).all()

    def find(self, model: Type[ModelT], entity_id: Optional[int], *, include_global: bool = False) -> Optional[ModelT]:
        if entity_id is None:
            return None
        query = self._scoped(model, include_global).where(model.id == entity_id)
        return self.session.exec(query).first()

    def get(self, model: Type[ModelT], entity_id: Optional[int], *, include_global: bool = False) -> ModelT:
        entity = self.find(model, entity_id, include_global=include_global)
        if entity is None:
            raise NotFoundError(f"{model.__name__} not found: {entity_id}")
        return entity

    def add(self, entity: ModelT) -> ModelT:
        """Stage an already-built entity in this scope and flush it to obtain its id."""
        entity.account_id = self.account_id
        self.session.add(entity)
        self._flush()
        return entity

    def create(self, model: Type[ModelT], **fields: Any) -> ModelT:
        return self.add(model(**fields))

    def update(self, entity: ModelT, patch: dict) -> ModelT:
        for field, value in patch.items():
            setattr(entity, field, value)
        self.session.add(entity)
        self._flush()
        return entity

    def delete(self, entity: SQLModel) -> None:
        self.session.delete(entity)
        self._flush()

    def _flush(self) -> None:
        try:
            self.session.flush()
        except IntegrityError as exc:
            self.session.rollback()
            logger.warning("Integrity error on flush", extra={"account_id": str(self.account_id), "error": str(exc.orig)})
            raise ValidationError("Record conflicts with an existing record") from exc

    def commit(self) -> None:
        self.session.commit()

    @contextmanager
    def atomic(self) -> Iterator["RecordStore"]:
        """Commit everything staged inside the block at once, or nothing on error."""
        try:
            yield self
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
