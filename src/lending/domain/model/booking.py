"""Booking aggregate — the scheduled pickup/return of an approved HIGH item.

State machine::

    PENDING_CONFIRMATION ──confirm──> CONFIRMED
            │                             │
            └────────cancel──> CANCELLED <┘

There is no way out of CANCELLED.  Confirmation is only possible by the
requester, within CONFIRMATION_WINDOW of creation and before pickup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

from lending.domain.exceptions import PermissionDeniedError, ValidationError
from lending.domain.model.availability import Availability, TimeSlot
from lending.domain.model.request import ItemRequest
from lending.domain.model.value_objects import utc_now


class BookingStatus(Enum):
    PENDING_CONFIRMATION = "pending_confirmation"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
LOAN_PERIOD = timedelta(days=7)
CONFIRMATION_WINDOW = timedelta(hours=48)


@dataclass
class Booking:
    """Aggregate root for scheduled HIGH-tier loans.

    Use ``Booking.schedule()`` for new bookings; ``__init__`` is left
    simple so repositories can reconstitute persisted rows.
    """

    id: str | None
    requester_id: str
    manager_id: str | None
    item_id: str
    group_id: str
    availability_id: str
    pickup_at: datetime
    pickup_location: str
    return_at: datetime
    return_location: str
    status: BookingStatus = BookingStatus.PENDING_CONFIRMATION
    created_at: datetime = field(default_factory=utc_now)
    confirmed_at: datetime | None = None
    confirmed_by: str | None = None

    # --- Factory (used for NEW bookings only) -------------------------------

    @staticmethod
    def schedule(
        request: ItemRequest,
        availability: Availability,
        slot: TimeSlot,
        pickup_location: str,
        return_location: str,
        now: datetime | None = None,
    ) -> Booking:
        """Create a booking for an approved request.

        Pickup is the availability date at the slot's start time; return
        is a fixed LOAN_PERIOD later.
        """
        if not pickup_location or not pickup_location.strip():
            raise ValidationError("Pickup location is required")
        if not return_location or not return_location.strip():
            raise ValidationError("Return location is required")

        pickup_at = availability.starts_at(slot)
        return Booking(
            id=None,
            requester_id=request.user_id,
            manager_id=availability.user_id,
            item_id=request.item_id,
            group_id=request.group_id,
            availability_id=availability.id,  # type: ignore[arg-type]
            pickup_at=pickup_at,
            pickup_location=pickup_location.strip(),
            return_at=pickup_at + LOAN_PERIOD,
            return_location=return_location.strip(),
            created_at=now or utc_now(),
        )

    # --- Computed properties ------------------------------------------------

    @property
    def confirmation_deadline(self) -> datetime:
        return self.created_at + CONFIRMATION_WINDOW

    def is_confirmation_expired(self, now: datetime) -> bool:
        return now > self.confirmation_deadline

    # --- State transitions --------------------------------------------------

    def confirm(self, actor_id: str, now: datetime | None = None) -> None:
        """Transition PENDING_CONFIRMATION -> CONFIRMED."""
        now = now or utc_now()
        if actor_id != self.requester_id:
            raise PermissionDeniedError("Only the requester can confirm this booking")
        if self.status is not BookingStatus.PENDING_CONFIRMATION:
            raise ValidationError(
                f"Booking is not in pending_confirmation status "
                f"(current status is {self.status.value})"
            )
        if self.is_confirmation_expired(now):
            raise ValidationError(
                "Confirmation window expired (must confirm within 48 hours)"
            )
        if now > self.pickup_at:
            raise ValidationError("Cannot confirm booking after pickup date has passed")
        self.status = BookingStatus.CONFIRMED
        self.confirmed_at = now
        self.confirmed_by = actor_id

    def cancel(
        self,
        actor_id: str,
        now: datetime | None = None,
        can_manage_all: bool = False,
    ) -> None:
        """Transition to CANCELLED.

        The requester may cancel until pickup; a holder of the global
        booking-management capability may cancel at any time.  Cancelling
        an already cancelled booking is a no-op.
        """
        now = now or utc_now()
        is_requester = actor_id == self.requester_id
        if not can_manage_all and not (is_requester and now < self.pickup_at):
            raise PermissionDeniedError("Insufficient permissions to cancel this booking")
        self.status = BookingStatus.CANCELLED

    def expire(self, now: datetime) -> bool:
        """Cancel an unconfirmed booking whose window has elapsed.

        Returns True if the booking changed state.
        """
        if self.status is not BookingStatus.PENDING_CONFIRMATION:
            return False
        if not self.is_confirmation_expired(now):
            return False
        self.status = BookingStatus.CANCELLED
        return True
