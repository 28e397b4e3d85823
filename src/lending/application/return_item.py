"""Application service: Return Item use case.

The lookup combines ownership and active status, so "not yours", "not
borrowed" and "already returned" all produce the same error.
"""

from __future__ import annotations

import logging

from lending.application.access import require_permission
from lending.application.dto import BorrowingDTO
from lending.domain.exceptions import PermissionDeniedError
from lending.domain.model.value_objects import Clock, Condition, utc_now
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission
from lending.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class ReturnItemHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._authorizer = authorizer
        self._clock = clock

    def handle(
        self,
        actor_id: str | None,
        item_id: str,
        after_condition: Condition | str | None,
        after_condition_url: str | None = None,
    ) -> BorrowingDTO:
        actor = require_permission(self._authorizer, actor_id, Permission.VIEW_OWN_DATA)

        with self._uow as uow:
            borrowing = uow.borrowings.get_active_for_update(item_id, actor)
            if borrowing is None:
                raise PermissionDeniedError(
                    "Item is not actively borrowed by you, or does not exist"
                )

            borrowing.close(after_condition, after_condition_url, now=self._clock())
            uow.borrowings.save(borrowing)

            ledger = InventoryLedger(uow.items)
            item = ledger.lock(borrowing.item_id)
            ledger.credit(item, borrowing.quantity)

            uow.commit()

        logger.info(
            "User %s returned %d x item %s (borrowing %s)",
            actor, borrowing.quantity, item_id, borrowing.id,
        )
        return BorrowingDTO.from_domain(borrowing)
