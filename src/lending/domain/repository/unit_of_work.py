"""Abstract Unit of Work — one transaction spanning several repositories.

Usage::

    with uow:
        item = uow.items.get_for_update(item_id)
        ...
        uow.commit()

Leaving the ``with`` block without ``commit()`` rolls everything back,
including when an exception escapes.  Row locks taken through
``get_for_update`` are held until commit or rollback.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from lending.domain.repository.availability_repository import AvailabilityRepository
from lending.domain.repository.booking_repository import BookingRepository
from lending.domain.repository.borrowing_repository import BorrowingRepository
from lending.domain.repository.cart_repository import CartRepository
from lending.domain.repository.item_repository import ItemRepository
from lending.domain.repository.request_repository import RequestRepository
from lending.domain.repository.taking_repository import TakingRepository


class UnitOfWork(ABC):

    items: ItemRepository
    cart: CartRepository
    takings: TakingRepository
    borrowings: BorrowingRepository
    requests: RequestRepository
    bookings: BookingRepository
    availability: AvailabilityRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change in this transaction durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes (no-op after a commit)."""
