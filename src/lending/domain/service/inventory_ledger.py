"""Domain service: Inventory Ledger.

The only way stock changes.  Callers lock the item row first
(``lock`` / ``lock_many``), check availability against the locked value,
and then ``debit`` or ``credit``.  Two concurrent transactions can
never both read the same stale stock and drive it below zero.
"""

from __future__ import annotations

from lending.domain.exceptions import EntityNotFoundError
from lending.domain.model.item import Item
from lending.domain.repository.item_repository import ItemRepository


class InventoryLedger:

    def __init__(self, item_repo: ItemRepository) -> None:
        self._item_repo = item_repo

    def lock(self, item_id: str) -> Item:
        """Lock an item for the rest of the transaction."""
        item = self._item_repo.get_for_update(item_id)
        if item is None:
            raise EntityNotFoundError("Item not found")
        return item

    def lock_many(self, item_ids: list[str]) -> dict[str, Item]:
        """Lock several items; missing IDs are simply absent from the result."""
        return self._item_repo.get_many_for_update(sorted(set(item_ids)))

    def debit(self, item: Item, quantity: int) -> None:
        """Take *quantity* units out of stock.

        Raises InsufficientStockError if the locked stock is too low.
        """
        item.debit(quantity)
        self._item_repo.save(item)

    def credit(self, item: Item, quantity: int) -> None:
        """Put *quantity* units back into stock."""
        item.credit(quantity)
        self._item_repo.save(item)
