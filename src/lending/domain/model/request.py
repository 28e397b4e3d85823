"""ItemRequest aggregate — a one-shot approval gate for HIGH-tier items."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from lending.domain.exceptions import ValidationError
from lending.domain.model.item import Item, Tier
from lending.domain.model.value_objects import Quantity, utc_now


class RequestStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"

    @staticmethod
    def parse_decision(raw: str | RequestStatus) -> RequestStatus:
        """Parse a reviewer decision; only APPROVED and DENIED are valid."""
        try:
            status = raw if isinstance(raw, RequestStatus) else RequestStatus(
                str(raw).strip().lower()
            )
        except ValueError as exc:
            raise ValidationError(
                f"Invalid review decision {raw!r} (expected approved or denied)"
            ) from exc
        if status is RequestStatus.PENDING:
            raise ValidationError("Review decision must be approved or denied")
        return status


@dataclass
class ItemRequest:
    """Pending -> Approved | Denied, exactly once.

    An approved request is later consumed by a borrow of the same
    quantity, which sets ``fulfilled_at``.
    """

    id: str | None
    user_id: str
    group_id: str
    item_id: str
    quantity: int
    status: RequestStatus = RequestStatus.PENDING
    requested_at: datetime = field(default_factory=utc_now)
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    booking_id: str | None = None
    fulfilled_at: datetime | None = None

    # --- Factory ------------------------------------------------------------

    @staticmethod
    def submit(
        user_id: str,
        group_id: str,
        item: Item,
        quantity: Quantity,
        now: datetime | None = None,
    ) -> ItemRequest:
        """Create a pending request.  No stock check happens here."""
        if item.tier is not Tier.HIGH:
            raise ValidationError(
                "Only high-tier items require approval requests. "
                "Low and medium items can be checked out directly."
            )
        return ItemRequest(
            id=None,
            user_id=user_id,
            group_id=group_id,
            item_id=item.id,  # type: ignore[arg-type]
            quantity=quantity.value,
            requested_at=now or utc_now(),
        )

    # --- State transitions --------------------------------------------------

    @property
    def is_pending(self) -> bool:
        return self.status is RequestStatus.PENDING

    @property
    def is_open_approval(self) -> bool:
        """Approved and not yet consumed by a borrow."""
        return self.status is RequestStatus.APPROVED and self.fulfilled_at is None

    def review(
        self,
        decision: RequestStatus,
        reviewer_id: str,
        now: datetime | None = None,
    ) -> None:
        if not self.is_pending:
            raise ValidationError("Request already reviewed or invalid")
        if decision is RequestStatus.PENDING:
            raise ValidationError("Review decision must be approved or denied")
        self.status = decision
        self.reviewed_by = reviewer_id
        self.reviewed_at = now or utc_now()

    def link_booking(self, booking_id: str) -> None:
        self.booking_id = booking_id

    def mark_fulfilled(self, now: datetime | None = None) -> None:
        if not self.is_open_approval:
            raise ValidationError("Only an approved, unfulfilled request can be fulfilled")
        self.fulfilled_at = now or utc_now()
