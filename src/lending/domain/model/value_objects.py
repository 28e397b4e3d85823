"""Small immutable values shared by the lending aggregates.

Each one validates itself on construction, so an invalid quantity or
condition never reaches an aggregate.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from lending.domain.exceptions import ValidationError


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot take, borrow or request zero
    or negative units.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be greater than 0")

    def __str__(self) -> str:
        return str(self.value)


class Condition(Enum):
    """Physical condition recorded when an item leaves and comes back."""

    UNUSABLE = "unusable"
    DAMAGED = "damaged"
    DECENT = "decent"
    GOOD = "good"
    PRISTINE = "pristine"

    @staticmethod
    def parse(raw: str | Condition) -> Condition:
        if isinstance(raw, Condition):
            return raw
        try:
            return Condition(str(raw).strip().lower())
        except ValueError as exc:
            allowed = ", ".join(c.value for c in Condition)
            raise ValidationError(
                f"Invalid condition {raw!r} (expected one of: {allowed})"
            ) from exc
