"""Integration tests for the borrowing listing use cases."""

from datetime import timedelta

import pytest

from lending.application.list_borrowings import (
    BorrowingState,
    ListBorrowingsHandler,
    ListDueBorrowingsHandler,
)
from lending.domain.exceptions import PermissionDeniedError
from lending.domain.model.borrowing import Borrowing
from lending.domain.model.value_objects import Quantity
from lending.domain.service.authorizer import Permission
from tests.fakes import NOW, FakeAuthorizer, FakeUnitOfWork


def _setup():
    uow = FakeUnitOfWork()
    auth = FakeAuthorizer()
    auth.grant("alice", Permission.VIEW_OWN_DATA)
    auth.grant("admin", Permission.VIEW_ALL_DATA)

    def borrow(user, due_in_days, returned=False):
        b = Borrowing.open(
            user_id=user, group_id="g1", item_id="drill", quantity=Quantity(1),
            due_date=NOW + timedelta(days=due_in_days), before_condition="good", now=NOW,
        )
        if returned:
            b.close("good", now=NOW)
        uow.borrowings.save(b)
        return b

    return uow, auth, borrow


class TestListBorrowings:

    def test_own_borrowings_by_state(self):
        uow, auth, borrow = _setup()
        active = borrow("alice", 3)
        done = borrow("alice", 3, returned=True)
        borrow("bob", 3)
        listing = ListBorrowingsHandler(uow, auth)

        assert {b.id for b in listing.handle("alice", "alice")} == {active.id, done.id}
        assert [b.id for b in listing.handle("alice", "alice", BorrowingState.ACTIVE)] == [active.id]
        assert [b.id for b in listing.handle("alice", "alice", BorrowingState.RETURNED)] == [done.id]

    def test_cannot_list_other_users(self):
        uow, auth, _ = _setup()
        with pytest.raises(PermissionDeniedError, match="other users"):
            ListBorrowingsHandler(uow, auth).handle("alice", "bob")

    def test_everyone_needs_view_all(self):
        uow, auth, borrow = _setup()
        borrow("alice", 3)
        borrow("bob", 3)
        listing = ListBorrowingsHandler(uow, auth)
        with pytest.raises(PermissionDeniedError):
            listing.handle("alice")
        assert len(listing.handle("admin")) == 2


class TestListDueBorrowings:

    def test_active_due_on_or_before(self):
        uow, auth, borrow = _setup()
        soon = borrow("alice", 1)
        borrow("bob", 10)
        borrow("bob", 1, returned=True)

        rows = ListDueBorrowingsHandler(uow, auth).handle("admin", NOW + timedelta(days=1))
        assert [b.id for b in rows] == [soon.id]
