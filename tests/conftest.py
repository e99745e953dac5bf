"""
pytest Fixtures for Library Catalog API Tests

This file contains shared fixtures used across all test files.

For database tests, every test function gets its own SQLite in-memory
database. Mutations commit and roll back for real, so a fresh database per
test keeps tests isolated without wrapping them in an outer transaction.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"

import asyncio
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from library_api.database import Base, get_db
from library_api.graphql.context import GraphQLContext
from library_api.main import app
from library_api.models import Author, Book, User
from library_api.services.catalog import AuthorStore, BookStore, UserStore
from library_api.services.pubsub import PubSub, get_pubsub
from library_api.services.security import hash_password, issue_token

# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture
def engine():
    """
    Create a SQLite in-memory database engine with all tables.

    StaticPool keeps the single connection alive for the whole test.
    Without it, the in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Create a database session for one test."""
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture
def pubsub() -> PubSub:
    """A fresh pubsub so subscriptions never leak between tests."""
    return PubSub(max_queue_size=10)


@pytest.fixture
def client(db_session: Session, pubsub: PubSub) -> Generator[TestClient, None, None]:
    """
    Create a test client bound to the test database and pubsub.

    We override the get_db and get_pubsub dependencies that the GraphQL
    context getter depends on.
    """

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_pubsub] = lambda: pubsub

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def pooled_client(tmp_path, pubsub: PubSub):
    """
    Create a test client whose sessions share a single pooled connection.

    Every request gets its own session, as in production, from a pool of
    one connection that times out quickly. A request or WebSocket that
    keeps its connection checked out makes the next request fail.

    Yields:
        (client, token) where token logs in a user named "alice"
    """
    pooled_engine = create_engine(
        f"sqlite:///{tmp_path / 'catalog.db'}",
        connect_args={"check_same_thread": False},
        poolclass=QueuePool,
        pool_size=1,
        max_overflow=0,
        pool_timeout=1,
    )
    Base.metadata.create_all(bind=pooled_engine)
    PooledSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=pooled_engine,
    )

    with PooledSessionLocal() as db:
        user = UserStore(db).create("alice", "refactoring", hash_password("secret"))
        db.commit()
        token = issue_token(user)

    def override_get_db():
        db = PooledSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_pubsub] = lambda: pubsub

    with TestClient(app) as test_client:
        yield test_client, token

    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=pooled_engine)
    pooled_engine.dispose()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_author(db_session: Session) -> Author:
    """Create a sample author for testing."""
    author = AuthorStore(db_session).create("Robert Martin")
    db_session.commit()
    return author


@pytest.fixture
def sample_books(db_session: Session, sample_author: Author) -> list[Book]:
    """
    Create books by two authors with overlapping genres.

    Genres in book order: [refactoring], [agile, patterns, design],
    [refactoring, patterns], [classic, crime]
    """
    authors = AuthorStore(db_session)
    fowler = authors.create("Martin Fowler")
    dostoevsky = authors.create("Fyodor Dostoevsky")

    books = BookStore(db_session)
    created = [
        books.create("Clean Code", 2008, sample_author, ["refactoring"]),
        books.create(
            "Agile software development",
            2002,
            sample_author,
            ["agile", "patterns", "design"],
        ),
        books.create("Refactoring, edition 2", 2018, fowler, ["refactoring", "patterns"]),
        books.create("Crime and punishment", 1866, dostoevsky, ["classic", "crime"]),
    ]
    db_session.commit()
    return created


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user whose password is 'secret'."""
    user = UserStore(db_session).create(
        username="alice",
        favorite_genre="refactoring",
        hashed_password=hash_password("secret"),
    )
    db_session.commit()
    return user


@pytest.fixture
def auth_token(sample_user: User) -> str:
    """A valid login token for sample_user."""
    return issue_token(sample_user)


# =============================================================================
# GRAPHQL HELPERS
# =============================================================================


@pytest.fixture
def make_context(db_session: Session, pubsub: PubSub):
    """Build a GraphQL context for executing the schema directly."""

    def _make(user: User | None = None) -> GraphQLContext:
        return GraphQLContext(db=db_session, pubsub=pubsub, user=user)

    return _make


@pytest.fixture
def wait_for_subscribers():
    """Let pending tasks run until `count` subscribers are registered."""

    async def _wait(pubsub: PubSub, topic: str, count: int) -> None:
        for _ in range(100):
            if pubsub.subscriber_count(topic) >= count:
                return
            await asyncio.sleep(0)
        raise AssertionError(f"expected {count} subscribers on {topic}")

    return _wait
