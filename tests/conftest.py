"""
Pytest configuration and fixtures for persistence tests.
"""

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from persistence.models import Base
from tests.models import User, BlogPost


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


class QueryCounter:
    """Records SELECT statements sent to the database."""

    def __init__(self):
        self.statements: list[str] = []

    def __call__(self, conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("SELECT"):
            self.statements.append(statement)

    @property
    def count(self) -> int:
        return len(self.statements)

    def reset(self) -> None:
        self.statements.clear()


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seed_users(db_session):
    """Two authors: one active, one inactive."""
    users = [
        User(id=1, name="Ada", is_active=True),
        User(id=2, name="Brian", is_active=False),
    ]
    db_session.add_all(users)
    db_session.commit()
    return users


@pytest.fixture
def seed_posts(db_session, seed_users):
    """Five posts, three of them published."""
    posts = [
        BlogPost(id=1, title="Alpha", published=True, views=10, author_id=1),
        BlogPost(id=2, title="Beta", published=False, views=5, author_id=1),
        BlogPost(id=3, title="Gamma", published=True, views=30, author_id=2),
        BlogPost(id=4, title="Delta", published=True, views=0, author_id=1),
        BlogPost(id=5, title="Epsilon", published=False, views=7, author_id=2),
    ]
    db_session.add_all(posts)
    db_session.commit()
    return posts


@pytest.fixture
def query_counter(db_session, seed_posts):
    """Count SELECTs issued after the seed data is in place."""
    counter = QueryCounter()
    event.listen(engine, "before_cursor_execute", counter)
    try:
        yield counter
    finally:
        event.remove(engine, "before_cursor_execute", counter)
