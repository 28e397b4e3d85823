"""Unit tests for the Borrowing aggregate."""

from datetime import datetime, timedelta, timezone

import pytest

from lending.domain.exceptions import ValidationError
from lending.domain.model.borrowing import Borrowing
from lending.domain.model.value_objects import Condition, Quantity

NOW = datetime(2025, 7, 1, 9, 0, tzinfo=timezone.utc)


def _open(**overrides):
    kwargs = dict(
        user_id="alice",
        group_id="g1",
        item_id="i1",
        quantity=Quantity(1),
        due_date=NOW + timedelta(days=3),
        before_condition="good",
        now=NOW,
    )
    kwargs.update(overrides)
    return Borrowing.open(**kwargs)


class TestBorrowingOpen:

    def test_open_is_active(self):
        b = _open()
        assert b.is_active
        assert b.before_condition is Condition.GOOD
        assert b.borrowed_at == NOW
        assert b.quantity == 1

    def test_due_date_required(self):
        with pytest.raises(ValidationError, match="Due date is required"):
            _open(due_date=None)

    def test_before_condition_required(self):
        with pytest.raises(ValidationError, match="Before-condition is required"):
            _open(before_condition=None)

    def test_invalid_condition_rejected(self):
        with pytest.raises(ValidationError, match="Invalid condition"):
            _open(before_condition="sparkly")


class TestBorrowingClose:

    def test_close_records_return(self):
        b = _open()
        later = NOW + timedelta(days=1)
        b.close("damaged", "http://img/1", now=later)
        assert not b.is_active
        assert b.returned_at == later
        assert b.after_condition is Condition.DAMAGED
        assert b.after_condition_url == "http://img/1"

    def test_close_without_condition(self):
        b = _open()
        b.close(None, now=NOW)
        assert b.after_condition is None
        assert not b.is_active

    def test_second_close_rejected(self):
        b = _open()
        b.close("good", now=NOW)
        with pytest.raises(ValidationError, match="already been returned"):
            b.close("good", now=NOW)
