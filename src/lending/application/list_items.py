"""Application service: List Items use case (query)."""

from __future__ import annotations

from lending.application.access import require_actor
from lending.application.dto import ItemDTO
from lending.domain.repository.unit_of_work import UnitOfWork


class ListItemsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, actor_id: str | None) -> list[ItemDTO]:
        require_actor(actor_id)
        with self._uow as uow:
            return [ItemDTO.from_domain(item) for item in uow.items.list_all()]
