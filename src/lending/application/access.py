"""Authentication and authorization guards shared by every handler.

Guards run *before* a unit of work is opened so that the (possibly
remote) oracle call never extends how long a row lock is held.
"""

from __future__ import annotations

import logging

from lending.domain.exceptions import (
    DomainException,
    InternalError,
    PermissionDeniedError,
    UnauthenticatedError,
)
from lending.domain.service.authorizer import Authorizer, Permission

logger = logging.getLogger(__name__)


def require_actor(actor_id: str | None) -> str:
    if not actor_id:
        raise UnauthenticatedError("Authentication required")
    return actor_id


def has_permission(
    authorizer: Authorizer,
    actor_id: str,
    permission: Permission,
    scope_id: str | None = None,
) -> bool:
    """Ask the oracle; oracle failures surface as InternalError."""
    try:
        return authorizer.check_permission(actor_id, permission, scope_id)
    except DomainException:
        raise
    except Exception as exc:
        logger.exception(
            "Permission check failed (user_id=%s permission=%s scope=%s)",
            actor_id, permission.value, scope_id,
        )
        raise InternalError("Internal server error") from exc


def require_permission(
    authorizer: Authorizer,
    actor_id: str | None,
    permission: Permission,
    scope_id: str | None = None,
) -> str:
    """Return the authenticated actor, or raise if it lacks the permission."""
    actor = require_actor(actor_id)
    if not has_permission(authorizer, actor, permission, scope_id):
        raise PermissionDeniedError("Insufficient permissions")
    return actor
