"""SQLAlchemy implementation of CartRepository."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from lending.domain.model.cart import CartLine
from lending.domain.repository.cart_repository import CartRepository
from lending.infrastructure.persistence.orm import CartLineRow, as_utc

# Dialects with INSERT ... ON CONFLICT support.
_UPSERT_INSERTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}


class SqlCartRepository(CartRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, group_id: str, user_id: str, item_id: str) -> CartLine | None:
        row = self._session.get(CartLineRow, (group_id, user_id, item_id))
        return self._to_domain(row) if row else None

    def list_for(self, user_id: str, group_id: str) -> list[CartLine]:
        stmt = (
            select(CartLineRow)
            .where(CartLineRow.user_id == user_id, CartLineRow.group_id == group_id)
            .order_by(CartLineRow.created_at, CartLineRow.item_id)
        )
        return [self._to_domain(row) for row in self._session.execute(stmt).scalars()]

    def save(self, line: CartLine) -> None:
        self._session.merge(
            CartLineRow(
                group_id=line.group_id,
                user_id=line.user_id,
                item_id=line.item_id,
                quantity=line.quantity,
                created_at=as_utc(line.created_at),
            )
        )
        self._session.flush()

    def add_quantity(self, line: CartLine) -> CartLine:
        insert = _UPSERT_INSERTS[self._session.get_bind().dialect.name]
        stmt = insert(CartLineRow).values(
            group_id=line.group_id,
            user_id=line.user_id,
            item_id=line.item_id,
            quantity=line.quantity,
            created_at=as_utc(line.created_at),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["group_id", "user_id", "item_id"],
            set_={"quantity": CartLineRow.quantity + stmt.excluded.quantity},
        )
        self._session.execute(stmt)
        row = self._session.get(
            CartLineRow,
            (line.group_id, line.user_id, line.item_id),
            populate_existing=True,
        )
        return self._to_domain(row)

    def delete(self, group_id: str, user_id: str, item_id: str) -> None:
        self._session.execute(
            delete(CartLineRow).where(
                CartLineRow.group_id == group_id,
                CartLineRow.user_id == user_id,
                CartLineRow.item_id == item_id,
            )
        )

    def clear(self, user_id: str, group_id: str) -> None:
        self._session.execute(
            delete(CartLineRow).where(
                CartLineRow.user_id == user_id,
                CartLineRow.group_id == group_id,
            )
        )

    @staticmethod
    def _to_domain(row: CartLineRow) -> CartLine:
        return CartLine(
            group_id=row.group_id,
            user_id=row.user_id,
            item_id=row.item_id,
            quantity=row.quantity,
            created_at=as_utc(row.created_at),
        )
