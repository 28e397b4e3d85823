"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from lending.infrastructure.config import get_settings
from lending.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
    init_db,
)
from lending.infrastructure.persistence.sql_authorizer import GrantTableAuthorizer
from lending.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork


@lru_cache
def engine() -> Engine:
    return create_db_engine(get_settings())


@lru_cache
def session_factory() -> sessionmaker:
    return create_session_factory(engine())


def unit_of_work() -> SqlUnitOfWork:
    return SqlUnitOfWork(session_factory())


def authorizer() -> GrantTableAuthorizer:
    return GrantTableAuthorizer(session_factory())


def create_schema() -> None:
    init_db(engine())
