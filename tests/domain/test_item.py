"""Unit tests for the Item aggregate."""

import pytest

from lending.domain.exceptions import InsufficientStockError, ValidationError
from lending.domain.model.item import Item, Tier


class TestItemCreate:

    def test_create_parses_tier(self):
        item = Item.create(name="  Projector ", tier="HIGH", stock=2)
        assert item.name == "Projector"
        assert item.tier is Tier.HIGH
        assert item.id is None

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="name is required"):
            Item.create(name="  ", tier="low")

    def test_unknown_tier_rejected(self):
        with pytest.raises(ValidationError, match="Invalid tier"):
            Item.create(name="Chair", tier="gold")

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Item.create(name="Chair", tier="low", stock=-1)


class TestItemStock:

    def test_debit_reduces_stock(self):
        item = Item(id="i1", name="Tape", tier=Tier.LOW, stock=5)
        item.debit(3)
        assert item.stock == 2

    def test_debit_entire_stock(self):
        item = Item(id="i1", name="Tape", tier=Tier.LOW, stock=5)
        item.debit(5)
        assert item.stock == 0

    def test_debit_more_than_stock_rejected(self):
        item = Item(id="i1", name="Tape", tier=Tier.LOW, stock=2)
        with pytest.raises(InsufficientStockError, match="requested: 3, available: 2") as info:
            item.debit(3)
        assert item.stock == 2
        assert info.value.context == {"item_name": "Tape", "requested": 3, "available": 2}
        assert info.value.code == "INSUFFICIENT_STOCK"

    def test_debit_zero_rejected(self):
        item = Item(id="i1", name="Tape", tier=Tier.LOW, stock=2)
        with pytest.raises(ValidationError, match="must be positive"):
            item.debit(0)

    def test_credit_increases_stock(self):
        item = Item(id="i1", name="Drill", tier=Tier.MEDIUM, stock=0)
        item.credit(1)
        assert item.stock == 1

    def test_credit_negative_rejected(self):
        item = Item(id="i1", name="Drill", tier=Tier.MEDIUM, stock=0)
        with pytest.raises(ValidationError, match="must be positive"):
            item.credit(-1)

    def test_has_stock(self):
        item = Item(id="i1", name="Drill", tier=Tier.MEDIUM, stock=1)
        assert item.has_stock(1)
        assert not item.has_stock(2)
