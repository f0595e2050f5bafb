"""
Shared fixtures for the KYC proxy tests.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from kyc_proxy.config import Settings, get_settings
from kyc_proxy.main import create_app


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep real credentials and .env files out of every test"""
    for name in ("AIRTABLE_API_TOKEN", "AIRTABLE_API_KEY", "AIRTABLE_BASE_ID", "AIRTABLE_TABLE_ID"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_settings():
    """Settings matching the reference scenario"""
    return Settings(
        AIRTABLE_API_TOKEN="secrettoken",
        AIRTABLE_BASE_ID="BASE123",
        AIRTABLE_TABLE_ID="TBL456",
        _env_file=None,
    )


@pytest.fixture
def mock_upstream_client():
    """Create mock upstream HTTP client"""
    return AsyncMock()


@pytest.fixture
def app(mock_settings, mock_upstream_client):
    """Create test FastAPI application with the upstream client mocked"""
    app = create_app(mock_settings)
    app.state.app_state.upstream_client = mock_upstream_client
    return app


@pytest.fixture
def client(app):
    """Create test client (lifespan not run, so the mock client stays)"""
    return TestClient(app)
