"""Integration tests for the CheckoutCart use case."""

from datetime import timedelta

import pytest

from lending.application.checkout_cart import CheckoutCartHandler
from lending.application.dto import CheckoutStatus
from lending.domain.exceptions import PermissionDeniedError, ValidationError
from lending.domain.model.cart import CartLine
from lending.domain.model.request import RequestStatus
from lending.domain.service.authorizer import Permission
from tests.fakes import NOW, FakeAuthorizer, FakeClock, FakeUnitOfWork, seed_item


def _setup():
    uow = FakeUnitOfWork()
    auth = FakeAuthorizer()
    auth.grant("alice", Permission.REQUEST_ITEMS, scope="g1")
    handler = CheckoutCartHandler(uow, auth, FakeClock())
    return uow, auth, handler


def _put(uow, item, quantity, user="alice", group="g1"):
    uow.cart.save(CartLine(group_id=group, user_id=user, item_id=item.id, quantity=quantity))


class TestCheckoutLowItems:

    def test_low_item_is_taken(self):
        uow, _, handler = _setup()
        tape = seed_item(uow, "Tape", "low", 5)
        _put(uow, tape, 3)

        result = handler.handle("alice", "g1")

        assert len(result.low_items_processed) == 1
        line = result.low_items_processed[0]
        assert line.status is CheckoutStatus.COMPLETED
        assert line.quantity == 3
        assert uow.items.get_by_id(tape.id).stock == 2
        assert uow.cart.list_for("alice", "g1") == []
        takings = uow.store.takings
        assert [t.id for t in takings] == [line.taking_id]
        assert takings[0].taken_at == NOW

    def test_one_line_short_of_stock(self):
        uow, _, handler = _setup()
        tape = seed_item(uow, "Tape", "low", 5)
        glue = seed_item(uow, "Glue", "low", 1)
        _put(uow, tape, 2)
        _put(uow, glue, 4)

        result = handler.handle("alice", "g1")

        assert [l.item_id for l in result.low_items_processed] == [tape.id]
        assert len(result.errors) == 1
        err = result.errors[0]
        assert err.item_id == glue.id
        assert err.code == "INSUFFICIENT_STOCK"
        assert "Insufficient stock for Glue" in err.message
        assert uow.items.get_by_id(tape.id).stock == 3
        assert uow.items.get_by_id(glue.id).stock == 1
        assert uow.cart.list_for("alice", "g1") == []
        assert uow.commits == 1

    def test_cart_cleared_even_when_every_line_fails(self):
        uow, _, handler = _setup()
        glue = seed_item(uow, "Glue", "low", 0)
        _put(uow, glue, 1)

        result = handler.handle("alice", "g1")

        assert result.low_items_processed == []
        assert len(result.errors) == 1
        assert uow.cart.list_for("alice", "g1") == []


class TestCheckoutMediumItems:

    def test_medium_item_is_borrowed(self):
        uow, _, handler = _setup()
        drill = seed_item(uow, "Drill", "medium", 2)
        _put(uow, drill, 1)
        due = NOW + timedelta(days=7)

        result = handler.handle("alice", "g1", due_date=due, before_condition="good")

        assert len(result.medium_items_borrowed) == 1
        line = result.medium_items_borrowed[0]
        assert line.status is CheckoutStatus.BORROWED
        borrowing = uow.borrowings.list_by_user("alice")[0]
        assert borrowing.id == line.borrowing_id
        assert borrowing.due_date == due
        assert borrowing.is_active
        assert uow.items.get_by_id(drill.id).stock == 1

    def test_medium_without_due_date_is_a_line_error(self):
        uow, _, handler = _setup()
        drill = seed_item(uow, "Drill", "medium", 2)
        tape = seed_item(uow, "Tape", "low", 2)
        _put(uow, drill, 1)
        _put(uow, tape, 1)

        result = handler.handle("alice", "g1", before_condition="good")

        assert len(result.low_items_processed) == 1
        assert result.medium_items_borrowed == []
        assert result.errors[0].code == "VALIDATION_ERROR"
        assert "Due date is required" in result.errors[0].message
        assert uow.items.get_by_id(drill.id).stock == 2
        assert uow.borrowings.list_all() == []


class TestCheckoutHighItems:

    def test_high_item_becomes_pending_request(self):
        uow, _, handler = _setup()
        camera = seed_item(uow, "Camera", "high", 0)
        _put(uow, camera, 1)

        result = handler.handle("alice", "g1")

        assert len(result.high_items_requested) == 1
        line = result.high_items_requested[0]
        assert line.status is CheckoutStatus.PENDING_APPROVAL
        request = uow.requests.get_by_id(line.request_id)
        assert request.status is RequestStatus.PENDING
        # Requested, not taken: no stock check and no debit.
        assert uow.items.get_by_id(camera.id).stock == 0


class TestCheckoutGuards:

    def test_empty_cart(self):
        _, _, handler = _setup()
        with pytest.raises(ValidationError, match="Cart is empty"):
            handler.handle("alice", "g1")

    def test_wrong_group_denied_before_anything_happens(self):
        uow, _, handler = _setup()
        tape = seed_item(uow, "Tape", "low", 5)
        _put(uow, tape, 1, group="g2")
        with pytest.raises(PermissionDeniedError):
            handler.handle("alice", "g2")
        assert len(uow.cart.list_for("alice", "g2")) == 1

    def test_removed_item_is_a_line_error(self):
        uow, _, handler = _setup()
        uow.cart.save(CartLine(group_id="g1", user_id="alice", item_id="gone", quantity=1))

        result = handler.handle("alice", "g1")

        assert result.errors[0].item_id == "gone"
        assert result.errors[0].item_name is None
        assert "no longer exists" in result.errors[0].message


class TestCheckoutMixedCart:

    def test_each_tier_routed_and_handler_reused(self):
        uow, _, handler = _setup()
        tape = seed_item(uow, "Tape", "low", 5)
        drill = seed_item(uow, "Drill", "medium", 2)
        camera = seed_item(uow, "Camera", "high", 1)
        due = NOW + timedelta(days=3)

        for _ in range(2):
            _put(uow, tape, 1)
            _put(uow, drill, 1)
            _put(uow, camera, 1)
            result = handler.handle("alice", "g1", due_date=due, before_condition="good")

            assert [l.item_id for l in result.low_items_processed] == [tape.id]
            assert [l.item_id for l in result.medium_items_borrowed] == [drill.id]
            assert [l.item_id for l in result.high_items_requested] == [camera.id]
            assert result.errors == []

        assert uow.items.get_by_id(tape.id).stock == 3
        assert uow.items.get_by_id(drill.id).stock == 0
        assert uow.items.get_by_id(camera.id).stock == 1
        assert len(uow.requests.list_pending()) == 2
