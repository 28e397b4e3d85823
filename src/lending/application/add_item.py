"""Application service: Add Item use case."""

from __future__ import annotations

import logging

from lending.application.access import require_permission
from lending.application.dto import ItemDTO
from lending.domain.model.item import Item, Tier
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission

logger = logging.getLogger(__name__)


class AddItemHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer) -> None:
        self._uow = uow
        self._authorizer = authorizer

    def handle(
        self,
        actor_id: str | None,
        name: str,
        tier: Tier | str,
        stock: int = 0,
        description: str | None = None,
    ) -> ItemDTO:
        """Add a new item to the catalog."""
        require_permission(self._authorizer, actor_id, Permission.MANAGE_ITEMS)
        item = Item.create(name=name, tier=tier, stock=stock, description=description)

        with self._uow as uow:
            uow.items.save(item)
            uow.commit()

        logger.info("Item %s added (tier=%s stock=%d)", item.id, item.tier.value, item.stock)
        return ItemDTO.from_domain(item)
