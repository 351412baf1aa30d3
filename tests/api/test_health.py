from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from visual_notes import __version__
from visual_notes.api.deps.dependencies import get_settings_dependency
from visual_notes.api.main import create_app
from visual_notes.boundary.db.connection import get_async_db
from visual_notes.configs import Settings
from visual_notes.configs.model_provider import ModelProviderSettings


@pytest.fixture
def client():
    app = create_app()
    yield TestClient(app)
    app.dependency_overrides.clear()


def _override(client, *, session, api_key):
    async def fake_db():
        yield session

    settings = Settings(model_provider=ModelProviderSettings(api_key=api_key))
    client.app.dependency_overrides[get_async_db] = fake_db
    client.app.dependency_overrides[get_settings_dependency] = lambda: settings


def test_health_check(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": __version__}


def test_ready_when_database_and_provider_available(client):
    _override(client, session=AsyncMock(), api_key="sk-test")

    response = client.get("/api/v1/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready", "database": True, "model_provider": True}


def test_not_ready_without_provider_key(client):
    _override(client, session=AsyncMock(), api_key=None)

    response = client.get("/api/v1/health/ready")

    assert response.status_code == 503
    assert response.json()["model_provider"] is False


def test_not_ready_when_database_unreachable(client):
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
    _override(client, session=session, api_key="sk-test")

    response = client.get("/api/v1/health/ready")

    assert response.status_code == 503
    assert response.json() == {"status": "unavailable", "database": False, "model_provider": True}
