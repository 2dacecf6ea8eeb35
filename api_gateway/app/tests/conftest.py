"""
Shared fixtures for the API gateway tests.

The data service is replaced by an httpx.MockTransport that records every
outbound request and answers through a per-test handler.
"""

from typing import Any, Callable, Dict, List

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api_gateway.app.auth.session import create_session_jwt
from api_gateway.app.config import Settings
from api_gateway.app.main import create_app
from api_gateway.app.proxy.client import DataServiceClient, get_data_service_client

DATA_SERVICE_URL = "http://data-service:8002"
JWT_SECRET = "test-jwt-secret-1234567890123456"


class DataServiceStub:
    """Callable MockTransport handler that records outbound requests."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={})
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


def make_settings(**overrides: Any) -> Settings:
    values: Dict[str, Any] = {
        "DATA_SERVICE_URL": DATA_SERVICE_URL,
        "SESSION_JWT_SECRET": JWT_SECRET,
        "ENVIRONMENT": "production",
    }
    values.update(overrides)
    return Settings(**values)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def mock_settings() -> Settings:
    """Production settings pointing at the stubbed data service"""
    return make_settings()


@pytest.fixture
def data_service() -> DataServiceStub:
    return DataServiceStub()


@pytest.fixture
def data_service_client(data_service, mock_settings) -> DataServiceClient:
    http_client = httpx.AsyncClient(
        base_url=mock_settings.data_service_url_str,
        transport=httpx.MockTransport(data_service),
    )
    return DataServiceClient(http_client)


@pytest.fixture
def app_factory(data_service_client) -> Callable[[Settings], FastAPI]:
    """Build an app for given settings, wired to the stubbed data service"""
    def factory(settings: Settings) -> FastAPI:
        app = create_app(settings)
        app.dependency_overrides[get_data_service_client] = lambda: data_service_client
        return app

    return factory


@pytest.fixture
def app(app_factory, mock_settings) -> FastAPI:
    return app_factory(mock_settings)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def user_claims() -> Dict[str, Any]:
    return {"sub": "user-123", "email": "reader@example.com", "roles": ["user"]}


@pytest.fixture
def admin_claims() -> Dict[str, Any]:
    return {"sub": "admin-1", "email": "admin@example.com", "roles": ["admin"]}


@pytest.fixture
def auth_headers(mock_settings, user_claims) -> Dict[str, str]:
    """Authorization headers for a regular user"""
    token = create_session_jwt(user_claims, mock_settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(mock_settings, admin_claims) -> Dict[str, str]:
    """Authorization headers for an admin"""
    token = create_session_jwt(admin_claims, mock_settings)
    return {"Authorization": f"Bearer {token}"}
