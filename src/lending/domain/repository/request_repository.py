"""Abstract repository for ItemRequest aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from lending.domain.model.request import ItemRequest


class RequestRepository(ABC):

    @abstractmethod
    def get_by_id(self, request_id: str) -> ItemRequest | None:
        """Return a request by its ID, or None."""

    @abstractmethod
    def get_for_update(self, request_id: str) -> ItemRequest | None:
        """Return and lock a request, or None."""

    @abstractmethod
    def find_open_approval(self, user_id: str, item_id: str) -> ItemRequest | None:
        """Most recently reviewed approved, unfulfilled request of a user
        for an item, or None."""

    @abstractmethod
    def list_all(self) -> list[ItemRequest]:
        """Every request, newest first."""

    @abstractmethod
    def list_pending(self) -> list[ItemRequest]:
        """Pending requests, oldest first."""

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[ItemRequest]:
        """A user's requests, newest first."""

    @abstractmethod
    def save(self, request: ItemRequest) -> None:
        """Persist a new or updated request (assigns an ID to new ones)."""
