"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import sessionmaker

from claimflow.core.approval.service import ClaimWorkflowService
from claimflow.db.session import build_engine, init_db
from claimflow.repos.memory import InMemoryClaimRepository
from claimflow.repos.sql import SqlAlchemyClaimRepository


class FixedClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    """Clock fixed at 2024-03-01 09:00."""
    return FixedClock(datetime(2024, 3, 1, 9, 0, 0))


@pytest.fixture
def memory_repo():
    return InMemoryClaimRepository()


@pytest.fixture
def service(memory_repo, clock):
    """Workflow service over an in-memory repository."""
    return ClaimWorkflowService(memory_repo, clock=clock)


@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite database with all tables created."""
    engine = build_engine("sqlite://")
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Session that is rolled back after each test."""
    Session = sessionmaker(bind=db_engine, autoflush=False)
    session = Session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def sql_repo(db_session):
    return SqlAlchemyClaimRepository(db_session)


@pytest.fixture
def sql_service(sql_repo, clock):
    """Workflow service over the SQLite-backed repository."""
    return ClaimWorkflowService(sql_repo, clock=clock)
