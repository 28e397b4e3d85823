"""Application service: Confirm Booking use case."""

from __future__ import annotations

import logging

from lending.application.access import require_actor
from lending.application.dto import BookingDTO
from lending.domain.exceptions import EntityNotFoundError
from lending.domain.model.value_objects import Clock, utc_now
from lending.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class ConfirmBookingHandler:
    """Only the requester may confirm; ownership is checked by the Booking
    itself, so no capability is consulted."""

    def __init__(self, uow: UnitOfWork, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, actor_id: str | None, booking_id: str) -> BookingDTO:
        actor = require_actor(actor_id)

        with self._uow as uow:
            booking = uow.bookings.get_for_update(booking_id)
            if booking is None:
                raise EntityNotFoundError("Booking not found")

            booking.confirm(actor, now=self._clock())
            uow.bookings.save(booking)
            uow.commit()

        logger.info("Booking %s confirmed by %s", booking.id, actor)
        return BookingDTO.from_domain(booking)
