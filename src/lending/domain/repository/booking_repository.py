"""Abstract repository for Booking aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime

from lending.domain.model.booking import Booking, BookingStatus


class BookingRepository(ABC):

    @abstractmethod
    def get_by_id(self, booking_id: str) -> Booking | None:
        """Return a booking by its ID, or None."""

    @abstractmethod
    def get_for_update(self, booking_id: str) -> Booking | None:
        """Return and lock a booking, or None."""

    @abstractmethod
    def list_all(
        self,
        status: BookingStatus | None = None,
        group_id: str | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[Booking]:
        """Every booking matching the optional filters, by pickup time."""

    @abstractmethod
    def list_by_requester(
        self, requester_id: str, status: BookingStatus | None = None
    ) -> list[Booking]:
        """A requester's bookings, latest pickup first."""

    @abstractmethod
    def list_pending_confirmation(self, group_id: str | None = None) -> list[Booking]:
        """Bookings awaiting confirmation, by pickup time."""

    @abstractmethod
    def list_expired_for_update(self, created_before: datetime) -> list[Booking]:
        """Lock and return pending bookings created before the cutoff."""

    @abstractmethod
    def is_availability_in_use(self, availability_id: str) -> bool:
        """True if a pending or confirmed booking references the slot."""

    @abstractmethod
    def save(self, booking: Booking) -> None:
        """Persist a new or updated booking (assigns an ID to new ones)."""
