"""Integration tests for the cart use cases."""

import pytest

from lending.application.add_item import AddItemHandler
from lending.application.add_to_cart import AddToCartHandler
from lending.application.list_items import ListItemsHandler
from lending.application.remove_from_cart import ClearCartHandler, RemoveFromCartHandler
from lending.application.show_cart import ShowCartHandler
from lending.application.update_cart_item import UpdateCartItemHandler
from lending.domain.exceptions import (
    EntityNotFoundError,
    PermissionDeniedError,
    UnauthenticatedError,
    ValidationError,
)
from lending.domain.service.authorizer import Permission
from tests.fakes import FakeAuthorizer, FakeClock, FakeUnitOfWork, seed_item


def _setup():
    uow = FakeUnitOfWork()
    auth = FakeAuthorizer()
    auth.grant("alice", Permission.MANAGE_CART, scope="g1")
    tape = seed_item(uow, "Tape", "low", 10)
    return uow, auth, tape


class TestAddToCart:

    def test_add_creates_line(self):
        uow, auth, tape = _setup()
        line = AddToCartHandler(uow, auth, FakeClock()).handle("alice", "g1", tape.id, 2)
        assert line.quantity == 2
        assert line.item_name == "Tape"
        assert line.stock == 10

    def test_re_adding_increments(self):
        uow, auth, tape = _setup()
        handler = AddToCartHandler(uow, auth, FakeClock())
        handler.handle("alice", "g1", tape.id, 2)
        line = handler.handle("alice", "g1", tape.id, 3)
        assert line.quantity == 5
        assert len(uow.cart.list_for("alice", "g1")) == 1

    def test_no_stock_check_when_adding(self):
        uow, auth, tape = _setup()
        line = AddToCartHandler(uow, auth).handle("alice", "g1", tape.id, 50)
        assert line.quantity == 50

    def test_unknown_item(self):
        uow, auth, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Item not found"):
            AddToCartHandler(uow, auth).handle("alice", "g1", "nope", 1)

    def test_zero_quantity_rejected(self):
        uow, auth, tape = _setup()
        with pytest.raises(ValidationError, match="greater than 0"):
            AddToCartHandler(uow, auth).handle("alice", "g1", tape.id, 0)

    def test_other_group_denied(self):
        uow, auth, tape = _setup()
        with pytest.raises(PermissionDeniedError):
            AddToCartHandler(uow, auth).handle("alice", "g2", tape.id, 1)

    def test_anonymous_rejected(self):
        uow, auth, tape = _setup()
        with pytest.raises(UnauthenticatedError):
            AddToCartHandler(uow, auth).handle(None, "g1", tape.id, 1)


class TestEditCart:

    def test_update_sets_quantity(self):
        uow, auth, tape = _setup()
        AddToCartHandler(uow, auth).handle("alice", "g1", tape.id, 2)
        line = UpdateCartItemHandler(uow, auth).handle("alice", "g1", tape.id, 7)
        assert line.quantity == 7

    def test_update_missing_line(self):
        uow, auth, tape = _setup()
        with pytest.raises(EntityNotFoundError, match="Item not in cart"):
            UpdateCartItemHandler(uow, auth).handle("alice", "g1", tape.id, 7)

    def test_remove_and_clear(self):
        uow, auth, tape = _setup()
        glue = seed_item(uow, "Glue", "low", 3)
        add = AddToCartHandler(uow, auth)
        add.handle("alice", "g1", tape.id, 1)
        add.handle("alice", "g1", glue.id, 1)

        RemoveFromCartHandler(uow, auth).handle("alice", "g1", tape.id)
        assert [l.item_id for l in ShowCartHandler(uow, auth).handle("alice", "g1")] == [glue.id]

        ClearCartHandler(uow, auth).handle("alice", "g1")
        assert ShowCartHandler(uow, auth).handle("alice", "g1") == []

    def test_carts_are_per_user(self):
        uow, auth, tape = _setup()
        auth.grant("bob", Permission.MANAGE_CART, scope="g1")
        AddToCartHandler(uow, auth).handle("alice", "g1", tape.id, 1)
        assert ShowCartHandler(uow, auth).handle("bob", "g1") == []


class TestCatalog:

    def test_add_item_requires_manage_items(self):
        uow, auth, _ = _setup()
        with pytest.raises(PermissionDeniedError):
            AddItemHandler(uow, auth).handle("alice", "Drill", "medium", 1)

    def test_add_and_list(self):
        uow, auth, _ = _setup()
        auth.grant("admin", Permission.MANAGE_ITEMS)
        dto = AddItemHandler(uow, auth).handle("admin", "Drill", "medium", 1, "Cordless")
        assert dto.tier == "medium"
        names = [i.name for i in ListItemsHandler(uow).handle("alice")]
        assert names == ["Drill", "Tape"]
