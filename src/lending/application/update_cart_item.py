"""Application service: Update Cart Item Quantity use case."""

from __future__ import annotations

from lending.application.access import require_permission
from lending.application.dto import CartLineDTO
from lending.domain.exceptions import EntityNotFoundError
from lending.domain.model.value_objects import Quantity
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission


class UpdateCartItemHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer) -> None:
        self._uow = uow
        self._authorizer = authorizer

    def handle(
        self, actor_id: str | None, group_id: str, item_id: str, quantity: int
    ) -> CartLineDTO:
        """Replace (not increment) the quantity of a line already in the cart."""
        actor = require_permission(
            self._authorizer, actor_id, Permission.MANAGE_CART, group_id
        )
        qty = Quantity(quantity)

        with self._uow as uow:
            line = uow.cart.get(group_id, actor, item_id)
            if line is None:
                raise EntityNotFoundError("Item not in cart")
            item = uow.items.get_by_id(item_id)
            if item is None:
                raise EntityNotFoundError("Item not found")

            line.change_quantity(qty.value)
            uow.cart.save(line)
            uow.commit()

        return CartLineDTO(
            group_id=line.group_id,
            user_id=line.user_id,
            item_id=line.item_id,
            item_name=item.name,
            item_tier=item.tier.value,
            quantity=line.quantity,
            stock=item.stock,
            created_at=line.created_at,
        )
