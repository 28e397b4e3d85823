"""Application service: Checkout Cart use case.

Routes every cart line by its item's tier:

- LOW    -> debit stock, append a TakingRecord        (COMPLETED)
- MEDIUM -> debit stock, open a Borrowing             (BORROWED)
- HIGH   -> create a pending ItemRequest, no debit    (PENDING_APPROVAL)

All lines and the cart clear share one transaction.  A line that cannot
be processed is recorded as a CheckoutError instead of aborting the
checkout: each line is fully validated against the locked item *before*
anything is written for it, so a failing line never leaves a
half-applied change behind and never poisons the outer transaction.
The cart is cleared exactly once at the end, whatever the per-line
outcomes were.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from lending.application.access import require_permission
from lending.application.dto import (
    CheckoutError,
    CheckoutItemResult,
    CheckoutResult,
    CheckoutStatus,
)
from lending.domain.exceptions import DomainException, ValidationError
from lending.domain.model.borrowing import Borrowing
from lending.domain.model.cart import CartLine
from lending.domain.model.item import Item, Tier
from lending.domain.model.request import ItemRequest
from lending.domain.model.taking import TakingRecord
from lending.domain.model.value_objects import Clock, Condition, Quantity, utc_now
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission
from lending.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class CheckoutCartHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._authorizer = authorizer
        self._clock = clock
        self._processors: dict[Tier, Callable[..., None]] = {
            Tier.LOW: self._take,
            Tier.MEDIUM: self._borrow,
            Tier.HIGH: self._request,
        }

    def handle(
        self,
        actor_id: str | None,
        group_id: str,
        due_date: datetime | None = None,
        before_condition: Condition | str | None = None,
        before_condition_url: str | None = None,
    ) -> CheckoutResult:
        """Check out the actor's cart in *group_id*.

        ``due_date`` and ``before_condition`` are only needed when the
        cart holds MEDIUM items; a MEDIUM line without them becomes a
        line error.
        """
        actor = require_permission(
            self._authorizer, actor_id, Permission.REQUEST_ITEMS, group_id
        )
        borrow_terms = _BorrowTerms(due_date, before_condition, before_condition_url)
        result = CheckoutResult()

        with self._uow as uow:
            lines = uow.cart.list_for(actor, group_id)
            if not lines:
                raise ValidationError("Cart is empty")

            ledger = InventoryLedger(uow.items)
            # All item locks are taken up front, in ID order.
            items = ledger.lock_many([line.item_id for line in lines])

            for line in lines:
                item = items.get(line.item_id)
                try:
                    if item is None:
                        raise ValidationError("Item no longer exists")
                    self._process_line(uow, ledger, item, line, borrow_terms, result)
                except DomainException as exc:
                    logger.warning(
                        "Failed to process %s item in checkout "
                        "(item_id=%s user_id=%s group_id=%s): %s",
                        item.tier.value.upper() if item else "UNKNOWN",
                        line.item_id, actor, group_id, exc,
                    )
                    result.errors.append(
                        CheckoutError(
                            item_id=line.item_id,
                            item_name=item.name if item else None,
                            message=str(exc),
                            code=exc.code,
                        )
                    )

            uow.cart.clear(actor, group_id)
            uow.commit()

        logger.info(
            "Checkout for user %s in group %s: %d taken, %d borrowed, "
            "%d requested, %d failed",
            actor, group_id,
            len(result.low_items_processed),
            len(result.medium_items_borrowed),
            len(result.high_items_requested),
            len(result.errors),
        )
        return result

    # --- Tier dispatch --------------------------------------------------------

    def _process_line(
        self,
        uow: UnitOfWork,
        ledger: InventoryLedger,
        item: Item,
        line: CartLine,
        terms: _BorrowTerms,
        result: CheckoutResult,
    ) -> None:
        self._processors[item.tier](uow, ledger, item, line, terms, result)

    def _take(self, uow, ledger, item, line, terms, result) -> None:
        qty = Quantity(line.quantity)
        item.ensure_stock(qty.value)

        record = TakingRecord(
            id=None,
            user_id=line.user_id,
            group_id=line.group_id,
            item_id=item.id,
            quantity=qty.value,
            taken_at=self._clock(),
        )
        ledger.debit(item, qty.value)
        uow.takings.add(record)

        result.low_items_processed.append(
            CheckoutItemResult(
                item_id=item.id,
                item_name=item.name,
                quantity=qty.value,
                status=CheckoutStatus.COMPLETED,
                taking_id=record.id,
            )
        )

    def _borrow(self, uow, ledger, item, line, terms, result) -> None:
        qty = Quantity(line.quantity)
        item.ensure_stock(qty.value)

        # Build (and validate) the borrowing before touching stock.
        borrowing = Borrowing.open(
            user_id=line.user_id,
            group_id=line.group_id,
            item_id=item.id,
            quantity=qty,
            due_date=terms.due_date,
            before_condition=terms.before_condition,
            before_condition_url=terms.before_condition_url,
            now=self._clock(),
        )
        ledger.debit(item, qty.value)
        uow.borrowings.save(borrowing)

        result.medium_items_borrowed.append(
            CheckoutItemResult(
                item_id=item.id,
                item_name=item.name,
                quantity=qty.value,
                status=CheckoutStatus.BORROWED,
                borrowing_id=borrowing.id,
            )
        )

    def _request(self, uow, ledger, item, line, terms, result) -> None:
        request = ItemRequest.submit(
            user_id=line.user_id,
            group_id=line.group_id,
            item=item,
            quantity=Quantity(line.quantity),
            now=self._clock(),
        )
        uow.requests.save(request)

        result.high_items_requested.append(
            CheckoutItemResult(
                item_id=item.id,
                item_name=item.name,
                quantity=request.quantity,
                status=CheckoutStatus.PENDING_APPROVAL,
                request_id=request.id,
            )
        )


@dataclass(frozen=True)
class _BorrowTerms:
    """Borrowing details shared by every MEDIUM line of one checkout."""

    due_date: datetime | None
    before_condition: Condition | str | None
    before_condition_url: str | None
