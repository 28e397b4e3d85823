"""Application service: request listing queries."""

from __future__ import annotations

from enum import Enum

from lending.application.access import require_permission
from lending.application.dto import RequestDTO
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission


class RequestScope(Enum):
    MINE = "mine"
    PENDING = "pending"
    ALL = "all"


class ListRequestsHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer) -> None:
        self._uow = uow
        self._authorizer = authorizer

    def handle(
        self, actor_id: str | None, scope: RequestScope = RequestScope.MINE
    ) -> list[RequestDTO]:
        if scope is RequestScope.MINE:
            actor = require_permission(self._authorizer, actor_id, Permission.VIEW_OWN_DATA)
            with self._uow as uow:
                rows = uow.requests.list_by_user(actor)
        else:
            require_permission(self._authorizer, actor_id, Permission.VIEW_ALL_DATA)
            with self._uow as uow:
                rows = (
                    uow.requests.list_pending()
                    if scope is RequestScope.PENDING
                    else uow.requests.list_all()
                )
        return [RequestDTO.from_domain(r) for r in rows]
