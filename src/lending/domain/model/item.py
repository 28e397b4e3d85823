"""Item aggregate — owns the per-item stock count.

Each Item has a Tier that decides which workflow it goes through:
LOW items are taken outright, MEDIUM items are borrowed with a due date,
HIGH items are gated behind an approval request and a booking.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from lending.domain.exceptions import InsufficientStockError, ValidationError


class Tier(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @staticmethod
    def parse(raw: str | Tier) -> Tier:
        if isinstance(raw, Tier):
            return raw
        try:
            return Tier(str(raw).strip().lower())
        except ValueError as exc:
            raise ValidationError(
                f"Invalid tier {raw!r} (expected low, medium or high)"
            ) from exc


@dataclass
class Item:
    """Aggregate root for a lendable resource.

    Invariants:
    - ``stock`` is never negative
    - ``tier`` never changes after creation

    ``stock`` is only mutated through ``debit()`` and ``credit()``, which
    the InventoryLedger calls on a row that is locked for the enclosing
    transaction.
    """

    id: str | None
    name: str
    tier: Tier
    stock: int = 0
    description: str | None = None

    def __post_init__(self) -> None:
        if self.stock < 0:
            raise ValidationError(f"Stock cannot be negative, got {self.stock}")

    # --- Factory ------------------------------------------------------------

    @staticmethod
    def create(
        name: str,
        tier: Tier | str,
        stock: int = 0,
        description: str | None = None,
    ) -> Item:
        if not name or not name.strip():
            raise ValidationError("Item name is required")
        return Item(
            id=None,
            name=name.strip(),
            tier=Tier.parse(tier),
            stock=stock,
            description=description,
        )

    # --- Stock --------------------------------------------------------------

    def has_stock(self, quantity: int) -> bool:
        return self.stock >= quantity

    def ensure_stock(self, quantity: int) -> None:
        """Raise InsufficientStockError unless *quantity* units are on hand."""
        if not self.has_stock(quantity):
            raise InsufficientStockError(
                f"Insufficient stock for {self.name} "
                f"(requested: {quantity}, available: {self.stock})",
                context={
                    "item_name": self.name,
                    "requested": quantity,
                    "available": self.stock,
                },
            )

    def debit(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Debit quantity must be positive")
        self.ensure_stock(quantity)
        self.stock -= quantity

    def credit(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Credit quantity must be positive")
        self.stock += quantity
