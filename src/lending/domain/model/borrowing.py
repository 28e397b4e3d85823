"""Borrowing aggregate — an open or closed loan of a MEDIUM/HIGH item."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from lending.domain.exceptions import ValidationError
from lending.domain.model.value_objects import Condition, Quantity, utc_now


@dataclass
class Borrowing:
    """Lifecycle: active (``returned_at`` is None) -> returned.

    Stock is debited when the borrowing is opened and credited back, by
    the same quantity, when it is closed.  Both happen in the handler's
    transaction, not here.
    """

    id: str | None
    user_id: str
    group_id: str
    item_id: str
    quantity: int
    due_date: datetime
    before_condition: Condition
    before_condition_url: str | None = None
    borrowed_at: datetime = field(default_factory=utc_now)
    returned_at: datetime | None = None
    after_condition: Condition | None = None
    after_condition_url: str | None = None

    @staticmethod
    def open(
        user_id: str,
        group_id: str,
        item_id: str,
        quantity: Quantity,
        due_date: datetime | None,
        before_condition: Condition | str | None,
        before_condition_url: str | None = None,
        now: datetime | None = None,
    ) -> Borrowing:
        if due_date is None:
            raise ValidationError("Due date is required to borrow an item")
        if before_condition is None or before_condition == "":
            raise ValidationError("Before-condition is required to borrow an item")
        return Borrowing(
            id=None,
            user_id=user_id,
            group_id=group_id,
            item_id=item_id,
            quantity=quantity.value,
            due_date=due_date,
            before_condition=Condition.parse(before_condition),
            before_condition_url=before_condition_url,
            borrowed_at=now or utc_now(),
        )

    @property
    def is_active(self) -> bool:
        return self.returned_at is None

    def close(
        self,
        after_condition: Condition | str | None,
        after_condition_url: str | None = None,
        now: datetime | None = None,
    ) -> None:
        """Mark the borrowing returned.  A second return is rejected."""
        if not self.is_active:
            raise ValidationError("Borrowing has already been returned")
        self.after_condition = (
            Condition.parse(after_condition) if after_condition else None
        )
        self.after_condition_url = after_condition_url
        self.returned_at = now or utc_now()
