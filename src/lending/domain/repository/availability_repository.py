"""Abstract repository for TimeSlot and Availability records."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from lending.domain.model.availability import Availability, TimeSlot


class AvailabilityRepository(ABC):

    @abstractmethod
    def get_time_slot(self, time_slot_id: str) -> TimeSlot | None:
        """Return a time slot, or None."""

    @abstractmethod
    def list_time_slots(self) -> list[TimeSlot]:
        """Every time slot, by start time."""

    @abstractmethod
    def save_time_slot(self, slot: TimeSlot) -> None:
        """Persist a time slot (assigns an ID to new ones)."""

    @abstractmethod
    def get_by_id(self, availability_id: str) -> Availability | None:
        """Return an availability, or None."""

    @abstractmethod
    def get_for_update(self, availability_id: str) -> Availability | None:
        """Return an availability locked for the current transaction, or None."""

    @abstractmethod
    def exists(self, user_id: str, time_slot_id: str, on: date) -> bool:
        """True if the user already declared this slot on this date."""

    @abstractmethod
    def save(self, availability: Availability) -> None:
        """Persist an availability (assigns an ID to new ones).

        Raises ConflictError if the user already declared this slot on
        this date.
        """

    @abstractmethod
    def delete(self, availability_id: str) -> None:
        """Remove an availability."""
