"""Application service: Add To Cart use case.

Upsert semantics: adding an item already in the cart increments its
quantity.  The increment is one atomic upsert, so concurrent adds of
the same item land on a single line.  Stock is not checked here, only
at checkout.
"""

from __future__ import annotations

from lending.application.access import require_permission
from lending.application.dto import CartLineDTO
from lending.domain.exceptions import EntityNotFoundError
from lending.domain.model.cart import CartLine
from lending.domain.model.value_objects import Clock, Quantity, utc_now
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission


class AddToCartHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._authorizer = authorizer
        self._clock = clock

    def handle(
        self, actor_id: str | None, group_id: str, item_id: str, quantity: int
    ) -> CartLineDTO:
        actor = require_permission(
            self._authorizer, actor_id, Permission.MANAGE_CART, group_id
        )
        qty = Quantity(quantity)

        with self._uow as uow:
            item = uow.items.get_by_id(item_id)
            if item is None:
                raise EntityNotFoundError("Item not found")

            line = uow.cart.add_quantity(
                CartLine(
                    group_id=group_id,
                    user_id=actor,
                    item_id=item_id,
                    quantity=qty.value,
                    created_at=self._clock(),
                )
            )
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
