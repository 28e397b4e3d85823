"""TakingRecord — append-only audit row for a consumed LOW-tier item."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from lending.domain.model.value_objects import utc_now


@dataclass
class TakingRecord:
    """Never updated or deleted; there is no return for a taking."""

    id: str | None
    user_id: str
    group_id: str
    item_id: str
    quantity: int
    taken_at: datetime = field(default_factory=utc_now)
