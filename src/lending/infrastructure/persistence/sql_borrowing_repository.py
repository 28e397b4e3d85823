"""SQLAlchemy implementation of BorrowingRepository."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from lending.domain.model.borrowing import Borrowing
from lending.domain.model.value_objects import Condition
from lending.domain.repository.borrowing_repository import BorrowingRepository
from lending.infrastructure.persistence.orm import BorrowingRow, as_utc, new_id


class SqlBorrowingRepository(BorrowingRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- BorrowingRepository interface ----------------------------------------

    def get_active_for_update(self, item_id: str, user_id: str) -> Borrowing | None:
        stmt = (
            select(BorrowingRow)
            .where(
                BorrowingRow.item_id == item_id,
                BorrowingRow.user_id == user_id,
                BorrowingRow.returned_at.is_(None),
            )
            .order_by(BorrowingRow.borrowed_at, BorrowingRow.id)
            .limit(1)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        row = self._session.execute(stmt).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def has_active(self, item_id: str) -> bool:
        stmt = (
            select(BorrowingRow.id)
            .where(BorrowingRow.item_id == item_id, BorrowingRow.returned_at.is_(None))
            .limit(1)
        )
        return self._session.execute(stmt).first() is not None

    def list_by_user(self, user_id: str, active: bool | None = None) -> list[Borrowing]:
        stmt = select(BorrowingRow).where(BorrowingRow.user_id == user_id)
        return self._list(self._filter_active(stmt, active))

    def list_all(self, active: bool | None = None) -> list[Borrowing]:
        return self._list(self._filter_active(select(BorrowingRow), active))

    def list_due_by(self, due_by: datetime) -> list[Borrowing]:
        stmt = (
            select(BorrowingRow)
            .where(
                BorrowingRow.returned_at.is_(None),
                BorrowingRow.due_date <= as_utc(due_by),
            )
            .order_by(BorrowingRow.due_date)
        )
        return [self._to_domain(row) for row in self._session.execute(stmt).scalars()]

    def save(self, borrowing: Borrowing) -> None:
        if borrowing.id is None:
            borrowing.id = new_id()
        self._session.merge(self._to_row(borrowing))
        self._session.flush()

    # --- Query helpers --------------------------------------------------------

    @staticmethod
    def _filter_active(stmt, active: bool | None):
        if active is True:
            return stmt.where(BorrowingRow.returned_at.is_(None))
        if active is False:
            return stmt.where(BorrowingRow.returned_at.is_not(None))
        return stmt

    def _list(self, stmt) -> list[Borrowing]:
        stmt = stmt.order_by(BorrowingRow.borrowed_at.desc())
        return [self._to_domain(row) for row in self._session.execute(stmt).scalars()]

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_row(b: Borrowing) -> BorrowingRow:
        return BorrowingRow(
            id=b.id,
            user_id=b.user_id,
            group_id=b.group_id,
            item_id=b.item_id,
            quantity=b.quantity,
            due_date=as_utc(b.due_date),
            borrowed_at=as_utc(b.borrowed_at),
            returned_at=as_utc(b.returned_at),
            before_condition=b.before_condition.value,
            before_condition_url=b.before_condition_url,
            after_condition=b.after_condition.value if b.after_condition else None,
            after_condition_url=b.after_condition_url,
        )

    @staticmethod
    def _to_domain(row: BorrowingRow) -> Borrowing:
        return Borrowing(
            id=row.id,
            user_id=row.user_id,
            group_id=row.group_id,
            item_id=row.item_id,
            quantity=row.quantity,
            due_date=as_utc(row.due_date),
            before_condition=Condition(row.before_condition),
            before_condition_url=row.before_condition_url,
            borrowed_at=as_utc(row.borrowed_at),
            returned_at=as_utc(row.returned_at),
            after_condition=Condition(row.after_condition) if row.after_condition else None,
            after_condition_url=row.after_condition_url,
        )
