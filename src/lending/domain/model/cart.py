"""CartLine — a staged (item, quantity) pair for one user in one group."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from lending.domain.exceptions import ValidationError
from lending.domain.model.value_objects import utc_now


@dataclass
class CartLine:
    """Unique per (group_id, user_id, item_id).

    Re-adding the same item increments the quantity instead of creating
    a second line.
    """

    group_id: str
    user_id: str
    item_id: str
    quantity: int
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")

    def add(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")
        self.quantity += quantity

    def change_quantity(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")
        self.quantity = quantity
