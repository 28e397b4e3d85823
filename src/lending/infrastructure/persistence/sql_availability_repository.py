"""SQLAlchemy implementation of AvailabilityRepository."""

from __future__ import annotations

from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lending.domain.exceptions import ConflictError
from lending.domain.model.availability import Availability, TimeSlot
from lending.domain.repository.availability_repository import AvailabilityRepository
from lending.infrastructure.persistence.orm import AvailabilityRow, TimeSlotRow, new_id


class SqlAvailabilityRepository(AvailabilityRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- Time slots -----------------------------------------------------------

    def get_time_slot(self, time_slot_id: str) -> TimeSlot | None:
        row = self._session.get(TimeSlotRow, time_slot_id)
        if row is None:
            return None
        return TimeSlot(id=row.id, start_time=row.start_time, end_time=row.end_time)

    def list_time_slots(self) -> list[TimeSlot]:
        stmt = select(TimeSlotRow).order_by(TimeSlotRow.start_time)
        return [
            TimeSlot(id=row.id, start_time=row.start_time, end_time=row.end_time)
            for row in self._session.execute(stmt).scalars()
        ]

    def save_time_slot(self, slot: TimeSlot) -> None:
        if slot.id is None:
            slot.id = new_id()
        self._session.merge(
            TimeSlotRow(id=slot.id, start_time=slot.start_time, end_time=slot.end_time)
        )
        self._session.flush()

    # --- Availabilities -------------------------------------------------------

    def get_by_id(self, availability_id: str) -> Availability | None:
        row = self._session.get(AvailabilityRow, availability_id)
        return self._to_domain(row) if row else None

    def get_for_update(self, availability_id: str) -> Availability | None:
        stmt = (
            select(AvailabilityRow)
            .where(AvailabilityRow.id == availability_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        row = self._session.execute(stmt).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def exists(self, user_id: str, time_slot_id: str, on: date) -> bool:
        stmt = (
            select(AvailabilityRow.id)
            .where(
                AvailabilityRow.user_id == user_id,
                AvailabilityRow.time_slot_id == time_slot_id,
                AvailabilityRow.date == on,
            )
            .limit(1)
        )
        return self._session.execute(stmt).first() is not None

    def save(self, availability: Availability) -> None:
        """Persist an availability.

        A concurrent insert of the same (user, slot, date) can slip past the
        caller's ``exists`` check; the unique constraint then surfaces here
        as a ConflictError instead of a failed transaction.
        """
        if availability.id is None:
            availability.id = new_id()
        row = AvailabilityRow(
            id=availability.id,
            user_id=availability.user_id,
            time_slot_id=availability.time_slot_id,
            date=availability.date,
            group_id=availability.group_id,
        )
        try:
            with self._session.begin_nested():
                self._session.merge(row)
        except IntegrityError as exc:
            raise ConflictError(
                "Availability already exists for this time slot and date"
            ) from exc

    def delete(self, availability_id: str) -> None:
        self._session.execute(
            delete(AvailabilityRow).where(AvailabilityRow.id == availability_id)
        )

    @staticmethod
    def _to_domain(row: AvailabilityRow) -> Availability:
        return Availability(
            id=row.id,
            user_id=row.user_id,
            time_slot_id=row.time_slot_id,
            date=row.date,
            group_id=row.group_id,
        )
