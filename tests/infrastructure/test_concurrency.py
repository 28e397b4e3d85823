"""Concurrent callers against one SQLite database.

Each worker runs its own unit of work; the stock of a contended item
must end up exactly where serial execution would leave it.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest

from lending.application.add_to_cart import AddToCartHandler
from lending.application.borrow_item import BorrowItemHandler
from lending.application.checkout_cart import CheckoutCartHandler
from lending.application.return_item import ReturnItemHandler
from lending.domain.exceptions import DomainException, InternalError
from lending.domain.model.item import Item
from lending.domain.service.authorizer import Permission
from lending.infrastructure.persistence.sql_authorizer import GrantTableAuthorizer
from lending.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork
from tests.fakes import FakeAuthorizer
from tests.sql_support import sqlite_session_factory

WORKERS = 8
DUE = datetime(2030, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def world(tmp_path):
    engine, factory = sqlite_session_factory(tmp_path, lock_timeout_ms=30000)
    auth = GrantTableAuthorizer(factory)
    for n in range(WORKERS):
        auth.grant(f"user{n}", Permission.REQUEST_ITEMS)
        auth.grant(f"user{n}", Permission.VIEW_OWN_DATA)
        auth.grant(f"user{n}", Permission.MANAGE_CART)
    yield factory, auth
    engine.dispose()


def _add_item(factory, tier, stock):
    with SqlUnitOfWork(factory) as uow:
        item = Item.create(name="Contended", tier=tier, stock=stock)
        uow.items.save(item)
        uow.commit()
    return item.id


def _stock(factory, item_id):
    with SqlUnitOfWork(factory) as uow:
        return uow.items.get_by_id(item_id).stock


def _run_all(fn, n=WORKERS):
    def attempt(i):
        try:
            fn(i)
            return True
        except DomainException:
            return False

    with ThreadPoolExecutor(max_workers=n) as pool:
        return list(pool.map(attempt, range(n)))


class TestConcurrentBorrow:

    def test_stock_never_oversold(self, world):
        factory, auth = world
        item_id = _add_item(factory, "medium", stock=3)

        def borrow(i):
            BorrowItemHandler(SqlUnitOfWork(factory), auth).handle(
                f"user{i}", item_id, "g1", 1, DUE, "good"
            )

        outcomes = _run_all(borrow)

        assert outcomes.count(True) == 3
        assert _stock(factory, item_id) == 0

    def test_borrow_then_return_restores_stock(self, world):
        factory, auth = world
        item_id = _add_item(factory, "medium", stock=WORKERS)

        def borrow_and_return(i):
            BorrowItemHandler(SqlUnitOfWork(factory), auth).handle(
                f"user{i}", item_id, "g1", 1, DUE, "good"
            )
            ReturnItemHandler(SqlUnitOfWork(factory), auth).handle(
                f"user{i}", item_id, "decent"
            )

        outcomes = _run_all(borrow_and_return)

        assert all(outcomes)
        assert _stock(factory, item_id) == WORKERS


class TestConcurrentCheckout:

    def test_checkouts_share_limited_stock(self, world):
        factory, auth = world
        item_id = _add_item(factory, "low", stock=5)
        for i in range(WORKERS):
            AddToCartHandler(SqlUnitOfWork(factory), auth).handle(f"user{i}", "g1", item_id, 2)

        results = []

        def checkout(i):
            results.append(
                CheckoutCartHandler(SqlUnitOfWork(factory), auth).handle(f"user{i}", "g1")
            )

        _run_all(checkout)

        taken = sum(len(r.low_items_processed) for r in results)
        failed = sum(len(r.errors) for r in results)
        assert len(results) == WORKERS
        assert taken == 2
        assert failed == WORKERS - 2
        assert _stock(factory, item_id) == 1
        assert all(e.code == "INSUFFICIENT_STOCK" for r in results for e in r.errors)

    def test_every_cart_is_cleared(self, world):
        factory, auth = world
        item_id = _add_item(factory, "low", stock=1)
        for i in range(WORKERS):
            AddToCartHandler(SqlUnitOfWork(factory), auth).handle(f"user{i}", "g1", item_id, 1)

        _run_all(
            lambda i: CheckoutCartHandler(SqlUnitOfWork(factory), auth).handle(f"user{i}", "g1")
        )

        with SqlUnitOfWork(factory) as uow:
            assert all(uow.cart.list_for(f"user{i}", "g1") == [] for i in range(WORKERS))
        assert _stock(factory, item_id) == 0


class TestConcurrentCartAdds:

    def test_same_item_added_by_many_callers_lands_on_one_line(self, world):
        factory, auth = world
        item_id = _add_item(factory, "low", stock=1)

        outcomes = _run_all(
            lambda i: AddToCartHandler(SqlUnitOfWork(factory), auth).handle("user0", "g1", item_id, 1)
        )

        assert all(outcomes)
        with SqlUnitOfWork(factory) as uow:
            assert [l.quantity for l in uow.cart.list_for("user0", "g1")] == [WORKERS]


class TestLockTimeout:

    def test_timed_out_borrow_rolls_back(self, tmp_path):
        engine, factory = sqlite_session_factory(tmp_path, lock_timeout_ms=200)
        auth = FakeAuthorizer()
        auth.grant("alice", Permission.REQUEST_ITEMS)
        item_id = _add_item(factory, "medium", stock=2)

        blocker = engine.connect()
        blocker.begin()
        try:
            with pytest.raises(InternalError):
                BorrowItemHandler(SqlUnitOfWork(factory), auth).handle(
                    "alice", item_id, "g1", 1, DUE, "good"
                )
        finally:
            blocker.rollback()
            blocker.close()

        assert _stock(factory, item_id) == 2
        with SqlUnitOfWork(factory) as uow:
            assert uow.borrowings.list_all() == []
        engine.dispose()
