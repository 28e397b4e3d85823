"""SQLAlchemy implementation of ItemRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from lending.domain.model.item import Item, Tier
from lending.domain.repository.item_repository import ItemRepository
from lending.infrastructure.persistence.orm import ItemRow, new_id


class SqlItemRepository(ItemRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- ItemRepository interface ---------------------------------------------

    def get_by_id(self, item_id: str) -> Item | None:
        row = self._session.get(ItemRow, item_id)
        return self._to_domain(row) if row else None

    def get_for_update(self, item_id: str) -> Item | None:
        stmt = (
            select(ItemRow)
            .where(ItemRow.id == item_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        row = self._session.execute(stmt).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def get_many_for_update(self, item_ids: list[str]) -> dict[str, Item]:
        if not item_ids:
            return {}
        stmt = (
            select(ItemRow)
            .where(ItemRow.id.in_(item_ids))
            .order_by(ItemRow.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        rows = self._session.execute(stmt).scalars().all()
        return {row.id: self._to_domain(row) for row in rows}

    def list_all(self) -> list[Item]:
        rows = self._session.execute(select(ItemRow).order_by(ItemRow.name)).scalars()
        return [self._to_domain(row) for row in rows]

    def save(self, item: Item) -> None:
        if item.id is None:
            item.id = new_id()
        self._session.merge(self._to_row(item))
        self._session.flush()

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_row(item: Item) -> ItemRow:
        return ItemRow(
            id=item.id,
            name=item.name,
            description=item.description,
            tier=item.tier.value,
            stock=item.stock,
        )

    @staticmethod
    def _to_domain(row: ItemRow) -> Item:
        return Item(
            id=row.id,
            name=row.name,
            tier=Tier(row.tier),
            stock=row.stock,
            description=row.description,
        )
