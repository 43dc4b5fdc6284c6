"""
Infrastructure layer: SQLAlchemy engine, session factory and schema setup.
"""
import logging
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from farmarea.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by all tables."""
    pass


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.

    SQLite connections get foreign keys switched on so that ``ON DELETE
    CASCADE`` holds at the database level. An in-memory SQLite URL is bound
    to a single shared connection, otherwise every session would see its own
    empty database.

    Args:
        database_url: SQLAlchemy URL
        echo: Log every SQL statement

    Returns:
        Engine instance
    """
    is_sqlite = database_url.startswith("sqlite")
    kwargs = {}
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool

    db_engine = create_engine(database_url, echo=echo, **kwargs)

    if is_sqlite:
        @event.listens_for(db_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return db_engine


engine = create_db_engine(settings.database_url, echo=settings.database_echo)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db() -> None:
    """Create all tables that do not exist yet."""
    # Register table metadata
    import farmarea.infrastructure.tables  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database schema ready ({engine.url.get_backend_name()})")


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a session closed after the request."""
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
