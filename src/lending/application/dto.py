"""Read models returned by the application handlers.

The CLI only ever sees these, never the aggregates themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from lending.domain.model.booking import Booking
from lending.domain.model.borrowing import Borrowing
from lending.domain.model.item import Item
from lending.domain.model.request import ItemRequest


class CheckoutStatus(Enum):
    """Per-line checkout outcome (not persisted)."""

    COMPLETED = "completed"  # LOW item taken
    BORROWED = "borrowed"  # MEDIUM item borrowed
    PENDING_APPROVAL = "pending_approval"  # HIGH item request created


@dataclass(frozen=True)
class BookingFields:
    """Input: scheduling details supplied when approving a HIGH request."""

    availability_id: str | None = None
    pickup_location: str | None = None
    return_location: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.availability_id and self.pickup_location and self.return_location)


@dataclass(frozen=True)
class ItemDTO:
    id: str
    name: str
    tier: str
    stock: int
    description: str | None = None

    @staticmethod
    def from_domain(item: Item) -> ItemDTO:
        return ItemDTO(
            id=item.id,  # type: ignore[arg-type]
            name=item.name,
            tier=item.tier.value,
            stock=item.stock,
            description=item.description,
        )


@dataclass(frozen=True)
class CartLineDTO:
    group_id: str
    user_id: str
    item_id: str
    item_name: str
    item_tier: str
    quantity: int
    stock: int
    created_at: datetime


@dataclass(frozen=True)
class CheckoutItemResult:
    item_id: str
    item_name: str
    quantity: int
    status: CheckoutStatus
    taking_id: str | None = None
    borrowing_id: str | None = None
    request_id: str | None = None


@dataclass(frozen=True)
class CheckoutError:
    item_id: str
    item_name: str | None
    message: str
    code: str


@dataclass
class CheckoutResult:
    """Output: every cart line lands in exactly one of these lists."""

    low_items_processed: list[CheckoutItemResult] = field(default_factory=list)
    medium_items_borrowed: list[CheckoutItemResult] = field(default_factory=list)
    high_items_requested: list[CheckoutItemResult] = field(default_factory=list)
    errors: list[CheckoutError] = field(default_factory=list)


@dataclass(frozen=True)
class BorrowingDTO:
    id: str
    user_id: str
    group_id: str
    item_id: str
    quantity: int
    due_date: datetime
    borrowed_at: datetime
    returned_at: datetime | None
    before_condition: str
    before_condition_url: str | None
    after_condition: str | None
    after_condition_url: str | None

    @staticmethod
    def from_domain(b: Borrowing) -> BorrowingDTO:
        return BorrowingDTO(
            id=b.id,  # type: ignore[arg-type]
            user_id=b.user_id,
            group_id=b.group_id,
            item_id=b.item_id,
            quantity=b.quantity,
            due_date=b.due_date,
            borrowed_at=b.borrowed_at,
            returned_at=b.returned_at,
            before_condition=b.before_condition.value,
            before_condition_url=b.before_condition_url,
            after_condition=b.after_condition.value if b.after_condition else None,
            after_condition_url=b.after_condition_url,
        )


@dataclass(frozen=True)
class RequestDTO:
    id: str
    user_id: str
    group_id: str
    item_id: str
    quantity: int
    status: str
    requested_at: datetime
    reviewed_by: str | None
    reviewed_at: datetime | None
    booking_id: str | None
    fulfilled_at: datetime | None

    @staticmethod
    def from_domain(r: ItemRequest) -> RequestDTO:
        return RequestDTO(
            id=r.id,  # type: ignore[arg-type]
            user_id=r.user_id,
            group_id=r.group_id,
            item_id=r.item_id,
            quantity=r.quantity,
            status=r.status.value,
            requested_at=r.requested_at,
            reviewed_by=r.reviewed_by,
            reviewed_at=r.reviewed_at,
            booking_id=r.booking_id,
            fulfilled_at=r.fulfilled_at,
        )


@dataclass(frozen=True)
class BookingDTO:
    id: str
    requester_id: str
    manager_id: str | None
    item_id: str
    group_id: str
    availability_id: str
    pickup_at: datetime
    pickup_location: str
    return_at: datetime
    return_location: str
    status: str
    created_at: datetime
    confirmed_at: datetime | None
    confirmed_by: str | None

    @staticmethod
    def from_domain(b: Booking) -> BookingDTO:
        return BookingDTO(
            id=b.id,  # type: ignore[arg-type]
            requester_id=b.requester_id,
            manager_id=b.manager_id,
            item_id=b.item_id,
            group_id=b.group_id,
            availability_id=b.availability_id,
            pickup_at=b.pickup_at,
            pickup_location=b.pickup_location,
            return_at=b.return_at,
            return_location=b.return_location,
            status=b.status.value,
            created_at=b.created_at,
            confirmed_at=b.confirmed_at,
            confirmed_by=b.confirmed_by,
        )
