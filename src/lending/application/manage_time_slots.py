"""Application services: time slot catalogue."""

from __future__ import annotations

import logging
from datetime import time

from lending.application.access import require_actor, require_permission
from lending.domain.model.availability import TimeSlot
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission

logger = logging.getLogger(__name__)


class CreateTimeSlotHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer) -> None:
        self._uow = uow
        self._authorizer = authorizer

    def handle(self, actor_id: str | None, start_time: time, end_time: time) -> TimeSlot:
        actor = require_permission(self._authorizer, actor_id, Permission.MANAGE_TIME_SLOTS)
        slot = TimeSlot(id=None, start_time=start_time, end_time=end_time)

        with self._uow as uow:
            uow.availability.save_time_slot(slot)
            uow.commit()

        logger.info("Time slot %s (%s-%s) created by %s", slot.id, start_time, end_time, actor)
        return slot


class ListTimeSlotsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, actor_id: str | None) -> list[TimeSlot]:
        require_actor(actor_id)
        with self._uow as uow:
            return uow.availability.list_time_slots()
