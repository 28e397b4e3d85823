"""Application service: borrowing history queries."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from lending.application.access import require_actor, require_permission
from lending.application.dto import BorrowingDTO
from lending.domain.exceptions import PermissionDeniedError
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission


class BorrowingState(Enum):
    ALL = "all"
    ACTIVE = "active"
    RETURNED = "returned"

    @property
    def active_filter(self) -> bool | None:
        return {
            BorrowingState.ALL: None,
            BorrowingState.ACTIVE: True,
            BorrowingState.RETURNED: False,
        }[self]


class ListBorrowingsHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer) -> None:
        self._uow = uow
        self._authorizer = authorizer

    def handle(
        self,
        actor_id: str | None,
        user_id: str | None = None,
        state: BorrowingState = BorrowingState.ALL,
    ) -> list[BorrowingDTO]:
        """List one user's borrowings, or everyone's when ``user_id`` is None.

        Users can only view their own borrowings; listing everyone's
        requires the view-all-data capability.
        """
        actor = require_actor(actor_id)

        if user_id is None:
            require_permission(self._authorizer, actor, Permission.VIEW_ALL_DATA)
            with self._uow as uow:
                rows = uow.borrowings.list_all(active=state.active_filter)
        else:
            require_permission(self._authorizer, actor, Permission.VIEW_OWN_DATA)
            if user_id != actor:
                raise PermissionDeniedError(
                    "Insufficient permissions to view other users' borrowed items"
                )
            with self._uow as uow:
                rows = uow.borrowings.list_by_user(user_id, active=state.active_filter)

        return [BorrowingDTO.from_domain(b) for b in rows]


class ListDueBorrowingsHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer) -> None:
        self._uow = uow
        self._authorizer = authorizer

    def handle(self, actor_id: str | None, due_by: datetime) -> list[BorrowingDTO]:
        """Active borrowings that are due on or before ``due_by``."""
        require_permission(self._authorizer, actor_id, Permission.VIEW_ALL_DATA)
        with self._uow as uow:
            return [BorrowingDTO.from_domain(b) for b in uow.borrowings.list_due_by(due_by)]
