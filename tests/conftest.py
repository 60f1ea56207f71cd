"""
Test Suite Configuration
"""
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from catalogy.core.config import Settings
from catalogy.database import build_engine, create_db_and_tables
from catalogy.main import create_app
from catalogy.repositories.document_store import SqlDocumentStore
from catalogy.services.analytics_service import AnalyticsService
from catalogy.services.dependencies import build_services

FIXED_NOW = datetime(2026, 10, 18, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings (no .env lookup)"""
    return Settings(
        _env_file=None,
        STORE_BACKEND="sql",
        DATABASE_URL="sqlite://",
        ANALYTICS_RETRY_BACKOFF_SECONDS=0,
    )


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by every session of one test"""
    engine = build_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine) -> SqlDocumentStore:
    return SqlDocumentStore(engine)


@pytest.fixture
def analytics(store) -> AnalyticsService:
    """Analytics service pinned to FIXED_NOW, no backoff sleeps"""
    return AnalyticsService(
        store,
        clock=lambda: FIXED_NOW,
        sleep=lambda seconds: None,
    )


@pytest.fixture
def services(test_settings, store):
    return build_services(test_settings, store=store)


@pytest.fixture
def client(test_settings, services):
    app = create_app(settings=test_settings, services=services)
    with TestClient(app) as c:
        yield c
