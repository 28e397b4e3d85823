"""SQLAlchemy implementation of TakingRepository (append-only)."""

from __future__ import annotations

from sqlalchemy.orm import Session

from lending.domain.model.taking import TakingRecord
from lending.domain.repository.taking_repository import TakingRepository
from lending.infrastructure.persistence.orm import TakingRow, as_utc, new_id


class SqlTakingRepository(TakingRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, record: TakingRecord) -> None:
        if record.id is None:
            record.id = new_id()
        self._session.add(
            TakingRow(
                id=record.id,
                user_id=record.user_id,
                group_id=record.group_id,
                item_id=record.item_id,
                quantity=record.quantity,
                taken_at=as_utc(record.taken_at),
            )
        )
        self._session.flush()
