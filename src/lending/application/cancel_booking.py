"""Application service: Cancel Booking use case."""

from __future__ import annotations

import logging

from lending.application.access import has_permission, require_actor
from lending.application.dto import BookingDTO
from lending.domain.exceptions import EntityNotFoundError
from lending.domain.model.value_objects import Clock, utc_now
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission

logger = logging.getLogger(__name__)


class CancelBookingHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._authorizer = authorizer
        self._clock = clock

    def handle(self, actor_id: str | None, booking_id: str) -> BookingDTO:
        """Cancel a booking.

        The requester may cancel before pickup.  Holders of
        ``manage_all_bookings`` may cancel at any time, including after
        pickup.  Cancelling twice is harmless.
        """
        actor = require_actor(actor_id)
        can_manage_all = has_permission(
            self._authorizer, actor, Permission.MANAGE_ALL_BOOKINGS
        )

        with self._uow as uow:
            booking = uow.bookings.get_for_update(booking_id)
            if booking is None:
                raise EntityNotFoundError("Booking not found")

            booking.cancel(actor, now=self._clock(), can_manage_all=can_manage_all)
            uow.bookings.save(booking)
            uow.commit()

        logger.info("Booking %s cancelled by %s", booking.id, actor)
        return BookingDTO.from_domain(booking)
