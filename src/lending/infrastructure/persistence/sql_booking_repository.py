"""SQLAlchemy implementation of BookingRepository."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from lending.domain.model.booking import Booking, BookingStatus
from lending.domain.repository.booking_repository import BookingRepository
from lending.infrastructure.persistence.orm import BookingRow, as_utc, new_id

_LIVE_STATUSES = (
    BookingStatus.PENDING_CONFIRMATION.value,
    BookingStatus.CONFIRMED.value,
)


def _start_of(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


class SqlBookingRepository(BookingRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- BookingRepository interface ------------------------------------------

    def get_by_id(self, booking_id: str) -> Booking | None:
        row = self._session.get(BookingRow, booking_id)
        return self._to_domain(row) if row else None

    def get_for_update(self, booking_id: str) -> Booking | None:
        stmt = (
            select(BookingRow)
            .where(BookingRow.id == booking_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        row = self._session.execute(stmt).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def list_all(
        self,
        status: BookingStatus | None = None,
        group_id: str | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[Booking]:
        stmt = select(BookingRow)
        if status is not None:
            stmt = stmt.where(BookingRow.status == status.value)
        if group_id is not None:
            stmt = stmt.where(BookingRow.group_id == group_id)
        if from_date is not None:
            stmt = stmt.where(BookingRow.pickup_at >= _start_of(from_date))
        if to_date is not None:
            stmt = stmt.where(BookingRow.pickup_at < _start_of(to_date + timedelta(days=1)))
        return self._list(stmt.order_by(BookingRow.pickup_at))

    def list_by_requester(
        self, requester_id: str, status: BookingStatus | None = None
    ) -> list[Booking]:
        stmt = select(BookingRow).where(BookingRow.requester_id == requester_id)
        if status is not None:
            stmt = stmt.where(BookingRow.status == status.value)
        return self._list(stmt.order_by(BookingRow.pickup_at.desc()))

    def list_pending_confirmation(self, group_id: str | None = None) -> list[Booking]:
        stmt = select(BookingRow).where(
            BookingRow.status == BookingStatus.PENDING_CONFIRMATION.value
        )
        if group_id is not None:
            stmt = stmt.where(BookingRow.group_id == group_id)
        return self._list(stmt.order_by(BookingRow.pickup_at))

    def list_expired_for_update(self, created_before: datetime) -> list[Booking]:
        stmt = (
            select(BookingRow)
            .where(
                BookingRow.status == BookingStatus.PENDING_CONFIRMATION.value,
                BookingRow.created_at < as_utc(created_before),
            )
            .order_by(BookingRow.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self._list(stmt)

    def is_availability_in_use(self, availability_id: str) -> bool:
        stmt = (
            select(BookingRow.id)
            .where(
                BookingRow.availability_id == availability_id,
                BookingRow.status.in_(_LIVE_STATUSES),
            )
            .limit(1)
        )
        return self._session.execute(stmt).first() is not None

    def save(self, booking: Booking) -> None:
        if booking.id is None:
            booking.id = new_id()
        self._session.merge(self._to_row(booking))
        self._session.flush()

    # --- Mapping --------------------------------------------------------------

    def _list(self, stmt) -> list[Booking]:
        return [self._to_domain(row) for row in self._session.execute(stmt).scalars()]

    @staticmethod
    def _to_row(b: Booking) -> BookingRow:
        return BookingRow(
            id=b.id,
            requester_id=b.requester_id,
            manager_id=b.manager_id,
            item_id=b.item_id,
            group_id=b.group_id,
            availability_id=b.availability_id,
            pickup_at=as_utc(b.pickup_at),
            pickup_location=b.pickup_location,
            return_at=as_utc(b.return_at),
            return_location=b.return_location,
            status=b.status.value,
            created_at=as_utc(b.created_at),
            confirmed_at=as_utc(b.confirmed_at),
            confirmed_by=b.confirmed_by,
        )

    @staticmethod
    def _to_domain(row: BookingRow) -> Booking:
        return Booking(
            id=row.id,
            requester_id=row.requester_id,
            manager_id=row.manager_id,
            item_id=row.item_id,
            group_id=row.group_id,
            availability_id=row.availability_id,
            pickup_at=as_utc(row.pickup_at),
            pickup_location=row.pickup_location,
            return_at=as_utc(row.return_at),
            return_location=row.return_location,
            status=BookingStatus(row.status),
            created_at=as_utc(row.created_at),
            confirmed_at=as_utc(row.confirmed_at),
            confirmed_by=row.confirmed_by,
        )
