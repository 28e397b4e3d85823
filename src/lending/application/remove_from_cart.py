"""Application service: Remove From Cart and Clear Cart use cases."""

from __future__ import annotations

from lending.application.access import require_permission
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission


class RemoveFromCartHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer) -> None:
        self._uow = uow
        self._authorizer = authorizer

    def handle(self, actor_id: str | None, group_id: str, item_id: str) -> None:
        actor = require_permission(
            self._authorizer, actor_id, Permission.MANAGE_CART, group_id
        )
        with self._uow as uow:
            uow.cart.delete(group_id, actor, item_id)
            uow.commit()


class ClearCartHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer) -> None:
        self._uow = uow
        self._authorizer = authorizer

    def handle(self, actor_id: str | None, group_id: str) -> None:
        actor = require_permission(
            self._authorizer, actor_id, Permission.MANAGE_CART, group_id
        )
        with self._uow as uow:
            uow.cart.clear(actor, group_id)
            uow.commit()
