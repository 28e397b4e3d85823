"""Application service: Borrow Item use case.

Direct borrowing of MEDIUM and (approved) HIGH items.  LOW items must go
through cart checkout.

For HIGH items three extra rules apply, all checked under the item lock:
- no one else may have the item out (single physical unit),
- the borrower needs an approved, unfulfilled request for this item,
- the borrow quantity must equal the approved quantity.
The matching request is marked fulfilled in the same transaction.
"""

from __future__ import annotations

import logging
from datetime import datetime

from lending.application.access import require_permission
from lending.application.dto import BorrowingDTO
from lending.domain.exceptions import PermissionDeniedError, ValidationError
from lending.domain.model.borrowing import Borrowing
from lending.domain.model.item import Tier
from lending.domain.model.request import ItemRequest
from lending.domain.model.value_objects import Clock, Condition, Quantity, utc_now
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission
from lending.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class BorrowItemHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._authorizer = authorizer
        self._clock = clock

    def handle(
        self,
        actor_id: str | None,
        item_id: str,
        group_id: str,
        quantity: int,
        due_date: datetime | None,
        before_condition: Condition | str | None,
        before_condition_url: str | None = None,
    ) -> BorrowingDTO:
        actor = require_permission(
            self._authorizer, actor_id, Permission.REQUEST_ITEMS, group_id
        )
        qty = Quantity(quantity)

        with self._uow as uow:
            ledger = InventoryLedger(uow.items)
            item = ledger.lock(item_id)

            if item.tier is Tier.LOW:
                raise ValidationError(
                    "Low-tier items cannot be borrowed directly. "
                    "Please add them to a cart and check out."
                )
            item.ensure_stock(qty.value)

            approved: ItemRequest | None = None
            if item.tier is Tier.HIGH:
                if uow.borrowings.has_active(item.id):
                    raise ValidationError("High-tier item is currently borrowed")
                approved = uow.requests.find_open_approval(actor, item.id)
                if approved is None:
                    raise PermissionDeniedError(
                        "High-tier items require an approved request. "
                        "Please submit a request first."
                    )
                if approved.quantity != qty.value:
                    raise ValidationError(
                        "Borrow quantity must match approved request quantity "
                        f"(approved: {approved.quantity}, requested: {qty.value})"
                    )

            now = self._clock()
            borrowing = Borrowing.open(
                user_id=actor,
                group_id=group_id,
                item_id=item.id,
                quantity=qty,
                due_date=due_date,
                before_condition=before_condition,
                before_condition_url=before_condition_url,
                now=now,
            )
            ledger.debit(item, qty.value)
            uow.borrowings.save(borrowing)

            if approved is not None:
                approved.mark_fulfilled(now)
                uow.requests.save(approved)

            uow.commit()

        logger.info(
            "User %s borrowed %d x item %s (borrowing %s)",
            actor, qty.value, item.id, borrowing.id,
        )
        return BorrowingDTO.from_domain(borrowing)
