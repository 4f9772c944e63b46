# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from contextlib import contextmanager
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("ACCOUNT_CLEANUP_WORKERS", "1")
os.environ.setdefault("FEED_FANOUT_BATCH_SIZE", "2")
os.environ.setdefault("IDENTITY_WEBHOOK_SECRET", "whsec_dGVzdC13ZWJob29rLXNlY3JldA==")

from campus_hub.core.security import create_access_token
from campus_hub.db.session import Base
from campus_hub.db.session import get_db as app_get_session
from campus_hub.main import app as fastapi_app
from campus_hub.models import Post, User
from campus_hub.services.scheduler import JobScheduler, get_scheduler

TEST_DB_URL = "sqlite://"

_USER_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite needs explicit BEGIN handling for SAVEPOINT to nest correctly.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, _record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    # Commits inside the test release savepoints; the outer transaction is
    # rolled back afterwards.
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(autouse=True)
def scheduler(db_session: Session) -> Iterator[JobScheduler]:
    """Bind the process scheduler to the test session and start from an empty queue."""
    scheduler = get_scheduler()

    @contextmanager
    def _shared_session() -> Iterator[Session]:
        yield db_session

    original_factory = scheduler.session_factory
    scheduler.session_factory = _shared_session
    scheduler.clear()
    try:
        yield scheduler
    finally:
        scheduler.clear()
        scheduler.session_factory = original_factory


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory that persists users with unique subjects."""

    def _make_user(name: str = "Test User", **fields) -> User:
        n = next(_USER_COUNTER)
        user = User(
            external_id=f"user_{n}",
            email=f"user{n}@campus.test",
            name=name,
            username=fields.pop("username", f"user{n}"),
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return a persisted test user."""
    return make_user("Alice Author")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second persisted user."""
    return make_user("Bob Reader")


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    token = create_access_token(test_user.external_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    token = create_access_token(other_user.external_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def test_post(db_session: Session, test_user: User) -> Post:
    """Create a baseline post written by ``test_user``."""
    post = Post(author_id=test_user.id, content="Test post content", reaction_counts={})
    db_session.add(post)
    db_session.commit()
    db_session.refresh(post)
    return post
