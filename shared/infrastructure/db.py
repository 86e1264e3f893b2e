"""
Database configuration and session management.
Uses SQLAlchemy 2.0 patterns; repositories borrow sessions created here.
"""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from shared.config.settings import settings


def build_engine(database_url: str | None = None, echo: bool | None = None) -> Engine:
    """
    Create an engine for the given URL (defaults from settings).

    SQLite URLs skip the server pool options, which its pool rejects.
    """
    url = database_url or settings.database_url
    echo = settings.sql_echo if echo is None else echo

    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=echo,
        )

    return create_engine(
        url,
        pool_pre_ping=True,  # Verify connections before using
        pool_recycle=1800,  # Recycle connections after 30 minutes
        echo=echo,
    )


engine = build_engine()

# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency-style generator for database sessions.

    Usage:
        db = next(get_db())
        repo = get_filterable_repository(db, BlogPost)

    The session is closed when the generator is finalized.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Usage:
        with get_db_context() as db:
            repo = get_filterable_repository(db, BlogPost)
            total = repo.count()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def safe_commit(db: Session) -> None:
    """
    Commit with automatic rollback on failure.

    Raises the original exception after rolling back.
    """
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
