"""Abstract repository for Item aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete implementations (SQL, in-memory) live in the
infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from lending.domain.model.item import Item


class ItemRepository(ABC):

    @abstractmethod
    def get_by_id(self, item_id: str) -> Item | None:
        """Return an item by its ID without locking, or None."""

    @abstractmethod
    def get_for_update(self, item_id: str) -> Item | None:
        """Return an item and hold an exclusive lock on it until the
        enclosing transaction ends, or None."""

    @abstractmethod
    def get_many_for_update(self, item_ids: list[str]) -> dict[str, Item]:
        """Lock several items at once, acquiring locks in ID order."""

    @abstractmethod
    def list_all(self) -> list[Item]:
        """Return every item in the catalog."""

    @abstractmethod
    def save(self, item: Item) -> None:
        """Persist a new or updated item (assigns an ID to new items)."""
