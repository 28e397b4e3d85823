"""Grant-table binding of the Authorizer port.

A grant row ``(user_id, permission, scope_id)`` with a NULL scope is
global.  A scoped check passes on a global grant or on a grant for that
exact scope; an unscoped check passes only on a global grant.
"""

from __future__ import annotations

import logging

from sqlalchemy import or_, select
from sqlalchemy.orm import sessionmaker

from lending.domain.service.authorizer import Authorizer, Permission
from lending.infrastructure.persistence.orm import PermissionGrantRow

logger = logging.getLogger(__name__)


class GrantTableAuthorizer(Authorizer):

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def check_permission(
        self,
        actor_id: str,
        permission: Permission,
        scope_id: str | None = None,
    ) -> bool:
        scope_clause = PermissionGrantRow.scope_id.is_(None)
        if scope_id is not None:
            scope_clause = or_(scope_clause, PermissionGrantRow.scope_id == scope_id)
        stmt = (
            select(PermissionGrantRow.id)
            .where(
                PermissionGrantRow.user_id == actor_id,
                PermissionGrantRow.permission == permission.value,
                scope_clause,
            )
            .limit(1)
        )
        with self._session_factory() as session:
            return session.execute(stmt).first() is not None

    def grant(
        self,
        user_id: str,
        permission: Permission,
        scope_id: str | None = None,
    ) -> None:
        """Record a grant.  Granting twice is a no-op."""
        with self._session_factory() as session:
            with session.begin():
                if self._exists(session, user_id, permission, scope_id):
                    return
                session.add(
                    PermissionGrantRow(
                        user_id=user_id,
                        permission=permission.value,
                        scope_id=scope_id,
                    )
                )
        logger.info(
            "Granted %s to %s (scope=%s)", permission.value, user_id, scope_id or "global"
        )

    @staticmethod
    def _exists(session, user_id: str, permission: Permission, scope_id: str | None) -> bool:
        scope_clause = (
            PermissionGrantRow.scope_id.is_(None)
            if scope_id is None
            else PermissionGrantRow.scope_id == scope_id
        )
        stmt = select(PermissionGrantRow.id).where(
            PermissionGrantRow.user_id == user_id,
            PermissionGrantRow.permission == permission.value,
            scope_clause,
        )
        return session.execute(stmt).first() is not None
