"""Shared fixtures: in-memory database, mock Plaid client and API client."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from api.plaid import _get_plaid_client
from api.sync import get_sync_service
from database import Base, get_db
from main import app
from services.sync_service import SyncService
from tests.fixtures import account, category, merchant, tag  # noqa: F401
from tests.fixtures.mocks import MockPlaidClient


@pytest.fixture(name="engine")
def engine_fixture():
    """Fresh in-memory SQLite schema per test; StaticPool keeps one connection."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="db")
def db_fixture(engine):
    with Session(engine, autoflush=False) as session:
        yield session


@pytest.fixture(name="mock_plaid")
def mock_plaid_fixture():
    """MockPlaidClient with no scripted pages. Override in a module for scripted data."""
    return MockPlaidClient()


@pytest.fixture(name="client")
def client_fixture(db, mock_plaid):
    """TestClient wired to ``db`` and ``mock_plaid``.

    The app lifespan (migrations) is not entered.
    """

    def use_test_session():
        yield db

    app.dependency_overrides.update(
        {
            get_db: use_test_session,
            get_sync_service: lambda: SyncService(plaid_client=mock_plaid),
            _get_plaid_client: lambda: mock_plaid,
        }
    )
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
