"""Application service: Show Cart use case (query)."""

from __future__ import annotations

from lending.application.access import require_permission
from lending.application.dto import CartLineDTO
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission


class ShowCartHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer) -> None:
        self._uow = uow
        self._authorizer = authorizer

    def handle(self, actor_id: str | None, group_id: str) -> list[CartLineDTO]:
        actor = require_permission(
            self._authorizer, actor_id, Permission.MANAGE_CART, group_id
        )
        result: list[CartLineDTO] = []
        with self._uow as uow:
            for line in uow.cart.list_for(actor, group_id):
                item = uow.items.get_by_id(line.item_id)
                if item is None:
                    continue
                result.append(
                    CartLineDTO(
                        group_id=line.group_id,
                        user_id=line.user_id,
                        item_id=line.item_id,
                        item_name=item.name,
                        item_tier=item.tier.value,
                        quantity=line.quantity,
                        stock=item.stock,
                        created_at=line.created_at,
                    )
                )
        return result
