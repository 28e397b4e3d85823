"""Application service: Review Request use case.

A pending request is reviewed exactly once.  Approval re-checks stock
against the locked item (it may have moved since submission) and, for
HIGH items, schedules a Booking in the same transaction.  A failed
review leaves the request pending so it can be retried.

Lock order: request, then item, then the chosen availability.
"""

from __future__ import annotations

import logging
from datetime import datetime

from lending.application.access import require_permission
from lending.application.dto import BookingFields, RequestDTO
from lending.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from lending.domain.model.booking import Booking
from lending.domain.model.item import Tier
from lending.domain.model.request import ItemRequest, RequestStatus
from lending.domain.model.value_objects import Clock, utc_now
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission
from lending.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class ReviewRequestHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._authorizer = authorizer
        self._clock = clock

    def handle(
        self,
        actor_id: str | None,
        request_id: str,
        decision: RequestStatus | str,
        booking: BookingFields | None = None,
    ) -> RequestDTO:
        actor = require_permission(self._authorizer, actor_id, Permission.APPROVE_REQUESTS)
        status = RequestStatus.parse_decision(decision)
        now = self._clock()

        with self._uow as uow:
            request = uow.requests.get_for_update(request_id)
            if request is None:
                raise EntityNotFoundError("Request not found")
            if not request.is_pending:
                raise ValidationError("Request already reviewed or invalid")

            if status is RequestStatus.APPROVED:
                self._approve(uow, request, booking or BookingFields(), now)

            request.review(status, actor, now)
            uow.requests.save(request)
            uow.commit()

        logger.info(
            "Request %s %s by %s (booking %s)",
            request.id, status.value, actor, request.booking_id,
        )
        return RequestDTO.from_domain(request)

    def _approve(
        self,
        uow: UnitOfWork,
        request: ItemRequest,
        fields: BookingFields,
        now: datetime,
    ) -> None:
        item = InventoryLedger(uow.items).lock(request.item_id)
        if not item.has_stock(request.quantity):
            raise InsufficientStockError(
                "Insufficient stock to approve this request",
                context={
                    "item_name": item.name,
                    "requested": request.quantity,
                    "available": item.stock,
                },
            )

        if item.tier is not Tier.HIGH:
            return
        if not fields.is_complete:
            raise ValidationError(
                "Booking fields (availability, pickup location, return location) "
                "are required when approving high-tier items"
            )

        availability = uow.availability.get_for_update(fields.availability_id)
        if availability is None:
            raise EntityNotFoundError("Availability not found")
        slot = uow.availability.get_time_slot(availability.time_slot_id)
        if slot is None:
            raise EntityNotFoundError("Time slot not found")

        booking = Booking.schedule(
            request=request,
            availability=availability,
            slot=slot,
            pickup_location=fields.pickup_location,
            return_location=fields.return_location,
            now=now,
        )
        uow.bookings.save(booking)
        request.link_booking(booking.id)
