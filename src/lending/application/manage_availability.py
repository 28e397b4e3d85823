"""Application services: declaring and withdrawing reviewer availability.

An availability is what a Booking is scheduled against, so it cannot be
withdrawn while a live booking still points at it.
"""

from __future__ import annotations

import logging
from datetime import date

from lending.application.access import has_permission, require_permission
from lending.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from lending.domain.model.availability import Availability
from lending.domain.model.value_objects import Clock, utc_now
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission

logger = logging.getLogger(__name__)


class CreateAvailabilityHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._authorizer = authorizer
        self._clock = clock

    def handle(
        self,
        actor_id: str | None,
        time_slot_id: str,
        on: date,
        group_id: str | None = None,
    ) -> Availability:
        actor = require_permission(self._authorizer, actor_id, Permission.MANAGE_TIME_SLOTS)
        if on < self._clock().date():
            raise ValidationError("Cannot create availability for a past date")

        with self._uow as uow:
            if uow.availability.get_time_slot(time_slot_id) is None:
                raise EntityNotFoundError("Time slot not found")
            if uow.availability.exists(actor, time_slot_id, on):
                raise ConflictError("Availability already exists for this time slot and date")

            availability = Availability(
                id=None,
                user_id=actor,
                time_slot_id=time_slot_id,
                date=on,
                group_id=group_id,
            )
            uow.availability.save(availability)
            uow.commit()

        logger.info(
            "Availability %s declared by %s for %s (slot %s)",
            availability.id, actor, on, time_slot_id,
        )
        return availability


class DeleteAvailabilityHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer) -> None:
        self._uow = uow
        self._authorizer = authorizer

    def handle(self, actor_id: str | None, availability_id: str) -> None:
        actor = require_permission(self._authorizer, actor_id, Permission.MANAGE_TIME_SLOTS)
        can_manage_all = has_permission(
            self._authorizer, actor, Permission.MANAGE_ALL_BOOKINGS
        )

        with self._uow as uow:
            # Locked so an approval cannot book it between the check and the delete.
            availability = uow.availability.get_for_update(availability_id)
            if availability is None:
                raise EntityNotFoundError("Availability not found")
            if availability.user_id != actor and not can_manage_all:
                raise PermissionDeniedError("You can only delete your own availability")
            if uow.bookings.is_availability_in_use(availability_id):
                raise ConflictError("Availability is referenced by an active booking")

            uow.availability.delete(availability_id)
            uow.commit()

        logger.info("Availability %s deleted by %s", availability_id, actor)
