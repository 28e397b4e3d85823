"""Abstract repository for CartLine rows."""

from __future__ import annotations

from abc import ABC, abstractmethod

from lending.domain.model.cart import CartLine


class CartRepository(ABC):

    @abstractmethod
    def get(self, group_id: str, user_id: str, item_id: str) -> CartLine | None:
        """Return a single cart line, or None."""

    @abstractmethod
    def list_for(self, user_id: str, group_id: str) -> list[CartLine]:
        """Return a user's cart in one group, oldest line first."""

    @abstractmethod
    def save(self, line: CartLine) -> None:
        """Insert or replace a cart line."""

    @abstractmethod
    def add_quantity(self, line: CartLine) -> CartLine:
        """Insert *line*, or add its quantity to the existing line for the
        same (group, user, item), in one atomic step.

        Returns the stored line.
        """

    @abstractmethod
    def delete(self, group_id: str, user_id: str, item_id: str) -> None:
        """Remove one line (no error if it does not exist)."""

    @abstractmethod
    def clear(self, user_id: str, group_id: str) -> None:
        """Remove every line of a user's cart in one group."""
