"""Abstract repository for Borrowing aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from lending.domain.model.borrowing import Borrowing


class BorrowingRepository(ABC):

    @abstractmethod
    def get_active_for_update(self, item_id: str, user_id: str) -> Borrowing | None:
        """Return and lock the user's active borrowing of an item, or None."""

    @abstractmethod
    def has_active(self, item_id: str) -> bool:
        """True if anyone holds an active borrowing of the item."""

    @abstractmethod
    def list_by_user(self, user_id: str, active: bool | None = None) -> list[Borrowing]:
        """Return a user's borrowings; ``active`` filters on return state."""

    @abstractmethod
    def list_all(self, active: bool | None = None) -> list[Borrowing]:
        """Return every borrowing; ``active`` filters on return state."""

    @abstractmethod
    def list_due_by(self, due_by: datetime) -> list[Borrowing]:
        """Return active borrowings due on or before ``due_by``."""

    @abstractmethod
    def save(self, borrowing: Borrowing) -> None:
        """Persist a new or updated borrowing (assigns an ID to new ones)."""
