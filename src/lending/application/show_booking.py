"""Application service: Show Booking use case (query)."""

from __future__ import annotations

from lending.application.access import has_permission, require_actor
from lending.application.dto import BookingDTO
from lending.domain.exceptions import EntityNotFoundError, PermissionDeniedError
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.domain.service.authorizer import Authorizer, Permission


class ShowBookingHandler:

    def __init__(self, uow: UnitOfWork, authorizer: Authorizer) -> None:
        self._uow = uow
        self._authorizer = authorizer

    def handle(self, actor_id: str | None, booking_id: str) -> BookingDTO:
        actor = require_actor(actor_id)

        with self._uow as uow:
            booking = uow.bookings.get_by_id(booking_id)
        if booking is None:
            raise EntityNotFoundError("Booking not found")

        if booking.requester_id != actor and not has_permission(
            self._authorizer, actor, Permission.VIEW_ALL_DATA
        ):
            raise PermissionDeniedError("Insufficient permissions to view this booking")
        return BookingDTO.from_domain(booking)
