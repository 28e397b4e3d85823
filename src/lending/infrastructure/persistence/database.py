"""Engine and session factory.

Row locking differs per backend:

- PostgreSQL honours ``SELECT ... FOR UPDATE``; each transaction sets
  ``lock_timeout`` so a blocked caller fails instead of hanging.
- SQLite ignores ``FOR UPDATE``.  Every transaction is opened with
  ``BEGIN IMMEDIATE`` instead, which takes the database write lock up
  front, so a read inside the transaction can never be stale by the time
  it is acted on.  pysqlite's own transaction handling is switched off
  so that SQLAlchemy controls BEGIN.
"""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from lending.infrastructure.config import Settings

Base = declarative_base()


def create_db_engine(settings: Settings) -> Engine:
    url = settings.database_url
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=settings.sql_echo,
            connect_args={
                "check_same_thread": False,
                "timeout": settings.lock_timeout_ms / 1000,
            },
        )
        _use_immediate_transactions(engine)
        return engine

    engine = create_engine(
        url,
        echo=settings.sql_echo,
        pool_pre_ping=True,
        pool_recycle=300,
    )
    _set_lock_timeout(engine, settings.lock_timeout_ms)
    return engine


def _use_immediate_transactions(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def _set_lock_timeout(engine: Engine, lock_timeout_ms: int) -> None:
    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql(f"SET LOCAL lock_timeout = {int(lock_timeout_ms)}")


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create every table that does not exist yet."""
    from lending.infrastructure.persistence import orm  # noqa: F401  (registers tables)

    Base.metadata.create_all(engine)
