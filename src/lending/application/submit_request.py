"""Application service: Submit Request use case."""

from __future__ import annotations

import logging

from lending.application.access import require_permission
from lending.application.dto import RequestDTO
from lending.domain.exceptions import EntityNotFoundError
from lending.domain.model.request import ItemRequest
from lending.domain.model.value_objects import Clock, Quantity, utc_now
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission

logger = logging.getLogger(__name__)


class SubmitRequestHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._authorizer = authorizer
        self._clock = clock

    def handle(
        self, actor_id: str | None, item_id: str, group_id: str, quantity: int
    ) -> RequestDTO:
        actor = require_permission(
            self._authorizer, actor_id, Permission.REQUEST_ITEMS, group_id
        )

        with self._uow as uow:
            item = uow.items.get_by_id(item_id)
            if item is None:
                raise EntityNotFoundError("Item not found")

            request = ItemRequest.submit(
                user_id=actor,
                group_id=group_id,
                item=item,
                quantity=Quantity(quantity),
                now=self._clock(),
            )
            uow.requests.save(request)
            uow.commit()

        logger.info(
            "User %s requested %d x item %s (request %s)",
            actor, request.quantity, item_id, request.id,
        )
        return RequestDTO.from_domain(request)
