"""SQLAlchemy implementation of RequestRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from lending.domain.model.request import ItemRequest, RequestStatus
from lending.domain.repository.request_repository import RequestRepository
from lending.infrastructure.persistence.orm import RequestRow, as_utc, new_id


class SqlRequestRepository(RequestRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, request_id: str) -> ItemRequest | None:
        row = self._session.get(RequestRow, request_id)
        return self._to_domain(row) if row else None

    def get_for_update(self, request_id: str) -> ItemRequest | None:
        stmt = (
            select(RequestRow)
            .where(RequestRow.id == request_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        row = self._session.execute(stmt).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def find_open_approval(self, user_id: str, item_id: str) -> ItemRequest | None:
        stmt = (
            select(RequestRow)
            .where(
                RequestRow.user_id == user_id,
                RequestRow.item_id == item_id,
                RequestRow.status == RequestStatus.APPROVED.value,
                RequestRow.fulfilled_at.is_(None),
            )
            .order_by(RequestRow.reviewed_at.desc())
            .limit(1)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        row = self._session.execute(stmt).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def list_all(self) -> list[ItemRequest]:
        stmt = select(RequestRow).order_by(RequestRow.requested_at.desc())
        return [self._to_domain(row) for row in self._session.execute(stmt).scalars()]

    def list_pending(self) -> list[ItemRequest]:
        stmt = (
            select(RequestRow)
            .where(RequestRow.status == RequestStatus.PENDING.value)
            .order_by(RequestRow.requested_at)
        )
        return [self._to_domain(row) for row in self._session.execute(stmt).scalars()]

    def list_by_user(self, user_id: str) -> list[ItemRequest]:
        stmt = (
            select(RequestRow)
            .where(RequestRow.user_id == user_id)
            .order_by(RequestRow.requested_at.desc())
        )
        return [self._to_domain(row) for row in self._session.execute(stmt).scalars()]

    def save(self, request: ItemRequest) -> None:
        if request.id is None:
            request.id = new_id()
        self._session.merge(
            RequestRow(
                id=request.id,
                user_id=request.user_id,
                group_id=request.group_id,
                item_id=request.item_id,
                quantity=request.quantity,
                status=request.status.value,
                requested_at=as_utc(request.requested_at),
                reviewed_by=request.reviewed_by,
                reviewed_at=as_utc(request.reviewed_at),
                booking_id=request.booking_id,
                fulfilled_at=as_utc(request.fulfilled_at),
            )
        )
        self._session.flush()

    @staticmethod
    def _to_domain(row: RequestRow) -> ItemRequest:
        return ItemRequest(
            id=row.id,
            user_id=row.user_id,
            group_id=row.group_id,
            item_id=row.item_id,
            quantity=row.quantity,
            status=RequestStatus(row.status),
            requested_at=as_utc(row.requested_at),
            reviewed_by=row.reviewed_by,
            reviewed_at=as_utc(row.reviewed_at),
            booking_id=row.booking_id,
            fulfilled_at=as_utc(row.fulfilled_at),
        )
