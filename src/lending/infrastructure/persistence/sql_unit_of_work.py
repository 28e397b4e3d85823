"""SQLAlchemy Unit of Work: one Session, one transaction, every repository."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from lending.domain.exceptions import InternalError
from lending.domain.repository.unit_of_work import UnitOfWork
from lending.infrastructure.persistence.sql_availability_repository import (
    SqlAvailabilityRepository,
)
from lending.infrastructure.persistence.sql_booking_repository import SqlBookingRepository
from lending.infrastructure.persistence.sql_borrowing_repository import (
    SqlBorrowingRepository,
)
from lending.infrastructure.persistence.sql_cart_repository import SqlCartRepository
from lending.infrastructure.persistence.sql_item_repository import SqlItemRepository
from lending.infrastructure.persistence.sql_request_repository import SqlRequestRepository
from lending.infrastructure.persistence.sql_taking_repository import SqlTakingRepository

logger = logging.getLogger(__name__)


class SqlUnitOfWork(UnitOfWork):
    """Opens a fresh Session on ``__enter__`` and closes it on ``__exit__``.

    A ``SQLAlchemyError`` escaping the block (lock timeout, constraint
    violation, lost connection) is logged and re-raised as InternalError
    after the rollback.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> SqlUnitOfWork:
        self._session = self._session_factory()
        self.items = SqlItemRepository(self._session)
        self.cart = SqlCartRepository(self._session)
        self.takings = SqlTakingRepository(self._session)
        self.borrowings = SqlBorrowingRepository(self._session)
        self.requests = SqlRequestRepository(self._session)
        self.bookings = SqlBookingRepository(self._session)
        self.availability = SqlAvailabilityRepository(self._session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            self._session.close()
            self._session = None
        if isinstance(exc, SQLAlchemyError):
            logger.error("Transaction rolled back after a persistence error", exc_info=exc)
            raise InternalError("Internal server error") from exc

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("Unit of work is not active")
        return self._session

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Commit failed")
            raise InternalError("Internal server error") from exc

    def rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()
