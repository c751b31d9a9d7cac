"""Shared fixtures for the vinylshelf test suite."""

from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
from discogs_fixtures import FakeClock
from sqlalchemy.orm import Session, sessionmaker

from vinylshelf.core.data import models  # noqa: F401
from vinylshelf.core.data.database import Base, create_database_engine
from vinylshelf.core.data.repositories.record_repository import RecordRepository
from vinylshelf.core.platform.discogs.api_client import DiscogsApiClient


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Session on a fresh in-memory SQLite database."""
    engine = create_database_engine("sqlite://")
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def record_repo(db_session: Session) -> RecordRepository:
    return RecordRepository(session=db_session)


@pytest.fixture
def api_client() -> DiscogsApiClient:
    """Authenticated client with throttling and backoff sleeps mocked out."""
    client = DiscogsApiClient("TestAgent/1.0", token="secret-token", sleep=MagicMock())
    client.rate_limiter = MagicMock()
    return client
