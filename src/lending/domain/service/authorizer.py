"""The authorization oracle port.

The engine never inspects role tables itself.  It asks one question,
may *actor* exercise *permission* (optionally within *scope*), and acts
on the answer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum


class Permission(Enum):
    # View permissions
    VIEW_ALL_DATA = "view_all_data"
    VIEW_OWN_DATA = "view_own_data"
    VIEW_GROUP_DATA = "view_group_data"

    # Management permissions
    MANAGE_CART = "manage_cart"
    MANAGE_ITEMS = "manage_items"
    MANAGE_GROUPS = "manage_groups"
    MANAGE_TIME_SLOTS = "manage_time_slots"
    MANAGE_ALL_BOOKINGS = "manage_all_bookings"
    MANAGE_GROUP_BOOKINGS = "manage_group_bookings"

    # Action permissions
    REQUEST_ITEMS = "request_items"
    APPROVE_REQUESTS = "approve_all_requests"


class Authorizer(ABC):

    @abstractmethod
    def check_permission(
        self,
        actor_id: str,
        permission: Permission,
        scope_id: str | None = None,
    ) -> bool:
        """Return True if the actor holds the permission.

        ``scope_id`` is a group ID for group-scoped checks, or None for a
        global check.
        """
