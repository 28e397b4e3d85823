"""Application services: booking listing queries.

Visibility follows the same rule everywhere: holders of
``view_all_data`` see every booking, anyone else sees their own.
Reviewers limited to one group use the pending-confirmation list with
``manage_group_bookings`` scoped to that group.
"""

from __future__ import annotations

from datetime import date

from lending.application.access import has_permission, require_actor
from lending.application.dto import BookingDTO
from lending.domain.exceptions import PermissionDeniedError, ValidationError
from lending.domain.model.booking import BookingStatus
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission


def _parse_status(raw: BookingStatus | str | None) -> BookingStatus | None:
    if raw is None or isinstance(raw, BookingStatus):
        return raw
    try:
        return BookingStatus(raw.strip().lower())
    except ValueError as exc:
        raise ValidationError(f"Invalid booking status {raw!r}") from exc


class ListBookingsHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer) -> None:
        self._uow = uow
        self._authorizer = authorizer

    def handle(
        self,
        actor_id: str | None,
        status: BookingStatus | str | None = None,
        group_id: str | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[BookingDTO]:
        actor = require_actor(actor_id)
        wanted = _parse_status(status)
        if from_date and to_date and from_date > to_date:
            raise ValidationError("from_date must not be after to_date")

        view_all = has_permission(self._authorizer, actor, Permission.VIEW_ALL_DATA)
        with self._uow as uow:
            if view_all:
                rows = uow.bookings.list_all(
                    status=wanted, group_id=group_id,
                    from_date=from_date, to_date=to_date,
                )
            else:
                rows = uow.bookings.list_by_requester(actor, status=wanted)
        return [BookingDTO.from_domain(b) for b in rows]


class ListMyBookingsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self, actor_id: str | None, status: BookingStatus | str | None = None
    ) -> list[BookingDTO]:
        actor = require_actor(actor_id)
        wanted = _parse_status(status)
        with self._uow as uow:
            rows = uow.bookings.list_by_requester(actor, status=wanted)
        return [BookingDTO.from_domain(b) for b in rows]


class ListPendingConfirmationHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer) -> None:
        self._uow = uow
        self._authorizer = authorizer

    def handle(self, actor_id: str | None, group_id: str | None = None) -> list[BookingDTO]:
        actor = require_actor(actor_id)

        if not has_permission(self._authorizer, actor, Permission.MANAGE_ALL_BOOKINGS):
            if group_id is None:
                raise ValidationError("group_id is required for group administrators")
            if not has_permission(
                self._authorizer, actor, Permission.MANAGE_GROUP_BOOKINGS, group_id
            ):
                raise PermissionDeniedError(
                    "Insufficient permissions to view pending confirmations for this group"
                )

        with self._uow as uow:
            rows = uow.bookings.list_pending_confirmation(group_id)
        return [BookingDTO.from_domain(b) for b in rows]
