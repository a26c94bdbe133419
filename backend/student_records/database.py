"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine from
`settings.DATABASE_URL` and provides small helpers used by the
application and tests. By default the database is a SQLite file named
`students.db` next to the package.
"""

from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from .config import settings

DB_URL = settings.DATABASE_URL

engine_kwargs = {"echo": settings.SQL_ECHO}
if settings.is_sqlite:
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    # in-memory databases live on a single connection; share it across threads
    if DB_URL in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool
else:
    engine_kwargs["pool_pre_ping"] = True

engine = create_engine(DB_URL, **engine_kwargs)


def create_db_and_tables():
    """Create database tables using SQLModel metadata.

    This function is intended for local development and tests;
    production deployments should rely on a proper migration tool
    (alembic) instead.
    """
    # models must be imported so their tables are registered
    from . import models  # noqa: F401
    SQLModel.metadata.create_all(engine)


def drop_db_and_tables():
    """Drop every table known to SQLModel metadata."""
    SQLModel.metadata.drop_all(engine)


def get_session():
    """Per-request session handed to `StudentRepository`; closed after the response."""
    with Session(engine) as session:
        yield session
