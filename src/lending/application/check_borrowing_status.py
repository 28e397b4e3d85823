"""Application service: Check Borrowing Status use case (query).

True means nobody currently has the item out.  Stock is not considered;
HIGH-tier clients use this as a pre-flight before requesting.
"""

from __future__ import annotations

from lending.application.access import require_permission
from lending.domain.exceptions import EntityNotFoundError
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission


class CheckBorrowingStatusHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer) -> None:
        self._uow = uow
        self._authorizer = authorizer

    def handle(self, actor_id: str | None, item_id: str, group_id: str | None = None) -> bool:
        require_permission(self._authorizer, actor_id, Permission.REQUEST_ITEMS, group_id)
        with self._uow as uow:
            if uow.items.get_by_id(item_id) is None:
                raise EntityNotFoundError("Item not found")
            return not uow.borrowings.has_active(item_id)
