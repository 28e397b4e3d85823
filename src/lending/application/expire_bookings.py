"""Application service: Expire Bookings sweep.

Cancels every booking still awaiting confirmation once its
confirmation window has elapsed.  Meant to be run periodically.
"""

from __future__ import annotations

import logging

from lending.application.access import require_permission
from lending.domain.model.booking import CONFIRMATION_WINDOW
from lending.domain.model.value_objects import Clock, utc_now
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission

logger = logging.getLogger(__name__)


class ExpireBookingsHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._authorizer = authorizer
        self._clock = clock

    def handle(self, actor_id: str | None) -> list[str]:
        actor = require_permission(self._authorizer, actor_id, Permission.MANAGE_ALL_BOOKINGS)
        now = self._clock()
        expired: list[str] = []

        with self._uow as uow:
            for booking in uow.bookings.list_expired_for_update(now - CONFIRMATION_WINDOW):
                if booking.expire(now):
                    uow.bookings.save(booking)
                    expired.append(booking.id)
            uow.commit()

        if expired:
            logger.info("Expired %d unconfirmed booking(s) (run by %s)", len(expired), actor)
        return expired
