"""SQLite engine construction and session management."""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from models import Base


def _is_memory_url(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in database_url


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create the SQLite engine.

    File databases use NullPool: fresh connections each time, safe for
    concurrent access from Flask request threads. In-memory databases
    share one connection through StaticPool, otherwise every connection
    would see an empty database.
    """
    poolclass = StaticPool if _is_memory_url(database_url) else NullPool
    return create_engine(
        database_url,
        echo=echo,
        connect_args={"check_same_thread": False},
        poolclass=poolclass,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to ``engine``."""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """Initialize database tables."""
    Base.metadata.create_all(bind=engine)


def health_check(engine: Engine) -> bool:
    """Check that the database answers a trivial query."""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False


def vacuum(engine: Engine) -> None:
    """Rebuild the database file to reclaim free pages."""
    # VACUUM cannot run inside a transaction
    with engine.connect().execution_options(isolation_level="AUTOCOMMIT") as connection:
        connection.execute(text("VACUUM"))
