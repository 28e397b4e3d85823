"""Integration tests for the booking use cases."""

from datetime import date, datetime, timedelta, timezone

import pytest

from lending.application.cancel_booking import CancelBookingHandler
from lending.application.confirm_booking import ConfirmBookingHandler
from lending.application.expire_bookings import ExpireBookingsHandler
from lending.application.list_bookings import (
    ListBookingsHandler,
    ListMyBookingsHandler,
    ListPendingConfirmationHandler,
)
from lending.application.show_booking import ShowBookingHandler
from lending.domain.exceptions import (
    EntityNotFoundError,
    PermissionDeniedError,
    UnauthenticatedError,
    ValidationError,
)
from lending.domain.model.booking import Booking, BookingStatus
from lending.domain.service.authorizer import Permission
from tests.fakes import NOW, FakeAuthorizer, FakeClock, FakeUnitOfWork

PICKUP = datetime(2025, 7, 10, 14, 0, tzinfo=timezone.utc)


def _setup():
    uow = FakeUnitOfWork()
    auth = FakeAuthorizer()
    clock = FakeClock()
    auth.grant("admin", Permission.MANAGE_ALL_BOOKINGS, Permission.VIEW_ALL_DATA)
    auth.grant("gina", Permission.MANAGE_GROUP_BOOKINGS, scope="g1")
    return uow, auth, clock


def _book(uow, requester="alice", group="g1", pickup=PICKUP, created=NOW):
    booking = Booking(
        id=None,
        requester_id=requester,
        manager_id="rita",
        item_id="camera",
        group_id=group,
        availability_id="avail-1",
        pickup_at=pickup,
        pickup_location="Lab 1",
        return_at=pickup + timedelta(days=7),
        return_location="Lab 1",
        created_at=created,
    )
    uow.bookings.save(booking)
    return booking


class TestConfirmBooking:

    def test_confirm_inside_window(self):
        uow, _, clock = _setup()
        booking = _book(uow)
        clock.advance(hours=47, minutes=59)

        dto = ConfirmBookingHandler(uow, clock).handle("alice", booking.id)

        assert dto.status == "confirmed"
        assert dto.confirmed_by == "alice"
        assert dto.confirmed_at == clock.now
        assert uow.bookings.get_by_id(booking.id).status is BookingStatus.CONFIRMED

    def test_other_actor_denied(self):
        uow, _, clock = _setup()
        booking = _book(uow)
        with pytest.raises(PermissionDeniedError, match="Only the requester"):
            ConfirmBookingHandler(uow, clock).handle("bob", booking.id)

    def test_window_expired(self):
        uow, _, clock = _setup()
        booking = _book(uow)
        clock.advance(hours=49)
        with pytest.raises(ValidationError, match="window expired"):
            ConfirmBookingHandler(uow, clock).handle("alice", booking.id)
        assert uow.bookings.get_by_id(booking.id).status is BookingStatus.PENDING_CONFIRMATION

    def test_unknown_booking(self):
        uow, _, clock = _setup()
        with pytest.raises(EntityNotFoundError, match="Booking not found"):
            ConfirmBookingHandler(uow, clock).handle("alice", "nope")

    def test_anonymous(self):
        uow, _, clock = _setup()
        booking = _book(uow)
        with pytest.raises(UnauthenticatedError):
            ConfirmBookingHandler(uow, clock).handle(None, booking.id)


class TestCancelBooking:

    def test_requester_cancels_before_pickup(self):
        uow, auth, clock = _setup()
        booking = _book(uow)
        dto = CancelBookingHandler(uow, auth, clock).handle("alice", booking.id)
        assert dto.status == "cancelled"

    def test_requester_blocked_after_pickup(self):
        uow, auth, clock = _setup()
        booking = _book(uow, pickup=NOW + timedelta(hours=1))
        clock.advance(hours=2)
        with pytest.raises(PermissionDeniedError):
            CancelBookingHandler(uow, auth, clock).handle("alice", booking.id)

    def test_admin_override_after_pickup(self):
        uow, auth, clock = _setup()
        booking = _book(uow, pickup=NOW + timedelta(hours=1))
        clock.advance(days=3)
        dto = CancelBookingHandler(uow, auth, clock).handle("admin", booking.id)
        assert dto.status == "cancelled"

    def test_cancel_twice_is_harmless(self):
        uow, auth, clock = _setup()
        booking = _book(uow)
        handler = CancelBookingHandler(uow, auth, clock)
        first = handler.handle("alice", booking.id)
        second = handler.handle("alice", booking.id)
        assert first == second

    def test_confirmed_booking_can_be_cancelled(self):
        uow, auth, clock = _setup()
        booking = _book(uow)
        ConfirmBookingHandler(uow, clock).handle("alice", booking.id)
        dto = CancelBookingHandler(uow, auth, clock).handle("alice", booking.id)
        assert dto.status == "cancelled"


class TestShowBooking:

    def test_requester_and_admin_can_view(self):
        uow, auth, _ = _setup()
        booking = _book(uow)
        show = ShowBookingHandler(uow, auth)
        assert show.handle("alice", booking.id).id == booking.id
        assert show.handle("admin", booking.id).id == booking.id

    def test_stranger_denied(self):
        uow, auth, _ = _setup()
        booking = _book(uow)
        with pytest.raises(PermissionDeniedError, match="view this booking"):
            ShowBookingHandler(uow, auth).handle("bob", booking.id)


class TestListBookings:

    def test_visibility(self):
        uow, auth, _ = _setup()
        mine = _book(uow, requester="alice")
        theirs = _book(uow, requester="bob", group="g2")
        listing = ListBookingsHandler(uow, auth)

        assert [b.id for b in listing.handle("alice")] == [mine.id]
        assert {b.id for b in listing.handle("admin")} == {mine.id, theirs.id}
        assert [b.id for b in listing.handle("admin", group_id="g2")] == [theirs.id]

    def test_date_and_status_filters(self):
        uow, auth, _ = _setup()
        early = _book(uow, pickup=datetime(2025, 7, 5, 9, 0, tzinfo=timezone.utc))
        late = _book(uow, pickup=datetime(2025, 7, 20, 9, 0, tzinfo=timezone.utc))
        listing = ListBookingsHandler(uow, auth)

        rows = listing.handle("admin", from_date=date(2025, 7, 10))
        assert [b.id for b in rows] == [late.id]
        rows = listing.handle("admin", to_date=date(2025, 7, 5))
        assert [b.id for b in rows] == [early.id]
        assert listing.handle("admin", status="confirmed") == []

    def test_bad_status(self):
        uow, auth, _ = _setup()
        with pytest.raises(ValidationError, match="Invalid booking status"):
            ListBookingsHandler(uow, auth).handle("admin", status="lost")

    def test_my_bookings(self):
        uow, _, _ = _setup()
        mine = _book(uow, requester="alice")
        _book(uow, requester="bob")
        rows = ListMyBookingsHandler(uow).handle("alice", "pending_confirmation")
        assert [b.id for b in rows] == [mine.id]


class TestListPendingConfirmation:

    def test_global_manager_sees_all(self):
        uow, auth, _ = _setup()
        _book(uow, group="g1")
        _book(uow, group="g2")
        rows = ListPendingConfirmationHandler(uow, auth).handle("admin")
        assert len(rows) == 2

    def test_group_manager_needs_group(self):
        uow, auth, _ = _setup()
        with pytest.raises(ValidationError, match="group_id is required"):
            ListPendingConfirmationHandler(uow, auth).handle("gina")

    def test_group_manager_limited_to_own_group(self):
        uow, auth, _ = _setup()
        in_group = _book(uow, group="g1")
        _book(uow, group="g2")
        handler = ListPendingConfirmationHandler(uow, auth)

        assert [b.id for b in handler.handle("gina", "g1")] == [in_group.id]
        with pytest.raises(PermissionDeniedError):
            handler.handle("gina", "g2")


class TestExpireBookings:

    def test_only_stale_pending_bookings_expire(self):
        uow, auth, clock = _setup()
        stale = _book(uow, created=NOW - timedelta(hours=49))
        fresh = _book(uow, created=NOW - timedelta(hours=2))
        confirmed = _book(uow, created=NOW - timedelta(hours=60))
        stored = uow.bookings.get_by_id(confirmed.id)
        stored.status = BookingStatus.CONFIRMED
        uow.bookings.save(stored)

        expired = ExpireBookingsHandler(uow, auth, clock).handle("admin")

        assert expired == [stale.id]
        assert uow.bookings.get_by_id(stale.id).status is BookingStatus.CANCELLED
        assert uow.bookings.get_by_id(fresh.id).status is BookingStatus.PENDING_CONFIRMATION
        assert uow.bookings.get_by_id(confirmed.id).status is BookingStatus.CONFIRMED

    def test_requires_manage_all_bookings(self):
        uow, auth, clock = _setup()
        with pytest.raises(PermissionDeniedError):
            ExpireBookingsHandler(uow, auth, clock).handle("gina")
