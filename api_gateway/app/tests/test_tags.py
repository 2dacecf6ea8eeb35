"""
Route Tests for /tags
=====================

End-to-end tests through the FastAPI app: guards, forwarding to the data
service, response pass-through and error resolution per environment.

Run tests:
----------
    pytest api_gateway/app/tests/test_tags.py -v
"""

import json
import logging

import httpx
from fastapi import status
from fastapi.testclient import TestClient

from .conftest import make_settings


# ============================================================================
# Authentication Tests
# ============================================================================

def test_list_tags_requires_authentication(client, data_service):
    """Test that GET /tags is rejected without a token"""
    response = client.get("/tags")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"message": "Missing Authorization header"}
    assert data_service.requests == []


def test_list_tags_requires_bearer_token_format(client, data_service):
    """Test that authorization header must be in Bearer format"""
    response = client.get("/tags", headers={"Authorization": "InvalidFormat token123"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert "bearer" in response.json()["message"].lower()
    assert data_service.requests == []


def test_list_tags_rejects_invalid_token(client, data_service):
    response = client.get("/tags", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"message": "Invalid token"}
    assert data_service.requests == []


def test_create_tag_without_admin_never_reaches_data_service(
    client,
    auth_headers,
    data_service
):
    """Test that POST /tags by a non-admin is rejected by the guard"""
    response = client.post("/tags", headers=auth_headers, json={"name": "c"})

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json() == {"message": "Admin privileges required"}
    assert data_service.requests == []


# ============================================================================
# Forwarding Tests
# ============================================================================

def test_list_tags_is_relayed_unchanged(client, auth_headers, data_service):
    """Test GET /tags is forwarded to {base}/tags and the body relayed"""
    data_service.handler = lambda request: httpx.Response(200, json={"tags": ["a", "b"]})

    response = client.get("/tags", headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"tags": ["a", "b"]}

    forwarded = data_service.last_request
    assert forwarded.method == "GET"
    assert forwarded.url == "http://data-service:8002/tags"


def test_query_string_is_forwarded_as_received(client, auth_headers, data_service):
    response = client.get("/tags?limit=10&tag=a&tag=b", headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    assert data_service.last_request.url == "http://data-service:8002/tags?limit=10&tag=a&tag=b"


def test_create_tag_forwards_body_for_admin(client, admin_headers, data_service):
    data_service.handler = lambda request: httpx.Response(201, json={"id": 7, "name": "c"})

    response = client.post("/tags", headers=admin_headers, json={"name": "c"})

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json() == {"id": 7, "name": "c"}

    forwarded = data_service.last_request
    assert forwarded.method == "POST"
    assert json.loads(forwarded.content) == {"name": "c"}


def test_authorization_header_not_forwarded(client, auth_headers, data_service, user_claims):
    """Test that the caller's token is replaced by user identity headers"""
    client.get("/tags", headers={**auth_headers, "X-Request-Id": "req-1"})

    forwarded = data_service.last_request
    assert "authorization" not in forwarded.headers
    assert forwarded.headers["X-User-Id"] == user_claims["sub"]
    assert forwarded.headers["X-User-Email"] == user_claims["email"]
    assert forwarded.headers["X-Request-Id"] == "req-1"


def test_internal_secret_header_sent_when_configured(app_factory, auth_headers, data_service):
    settings = make_settings(DATA_SERVICE_SECRET="internal-secret-value")
    client = TestClient(app_factory(settings))

    client.get("/tags", headers=auth_headers)

    assert data_service.last_request.headers["X-Internal-Secret"] == "internal-secret-value"


def test_backend_error_status_is_relayed(client, auth_headers, data_service):
    """Test that a backend 404 reaches the caller as-is"""
    data_service.handler = lambda request: httpx.Response(404, json={"error": "no such tag"})

    response = client.get("/tags", headers=auth_headers)

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "no such tag"}


def test_empty_backend_body_is_relayed_empty(client, admin_headers, data_service):
    data_service.handler = lambda request: httpx.Response(204)

    response = client.post("/tags", headers=admin_headers, json={"name": "c"})

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert response.content == b""


def test_data_service_called_once_per_request(client, auth_headers, data_service):
    """Test that failures are never retried"""
    data_service.handler = lambda request: httpx.Response(503, json={"error": "down"})

    response = client.get("/tags", headers=auth_headers)

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert len(data_service.requests) == 1


# ============================================================================
# Error Profile Tests
# ============================================================================

def _refuse_connection(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("ECONNREFUSED", request=request)


def test_connection_refused_in_development_includes_reason(
    app_factory,
    auth_headers,
    data_service,
    caplog
):
    data_service.handler = _refuse_connection
    client = TestClient(app_factory(make_settings(ENVIRONMENT="localhost")))

    with caplog.at_level(logging.ERROR):
        response = client.get("/tags", headers=auth_headers)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"message": "Internal Server Error. Reason: ECONNREFUSED"}
    assert any(
        record.levelno == logging.ERROR and "ECONNREFUSED" in record.getMessage()
        for record in caplog.records
    )


def test_connection_refused_in_production_hides_reason(
    client,
    auth_headers,
    data_service,
    caplog
):
    data_service.handler = _refuse_connection

    with caplog.at_level(logging.ERROR):
        response = client.get("/tags", headers=auth_headers)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"message": "Internal Server Error"}

    error_records = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert error_records
    assert "ECONNREFUSED" in error_records[-1].getMessage()
    assert error_records[-1].exc_info is not None


def test_non_json_backend_body_is_internal_error(client, auth_headers, data_service):
    data_service.handler = lambda request: httpx.Response(502, text="<html>Bad Gateway</html>")

    response = client.get("/tags", headers=auth_headers)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"message": "Internal Server Error"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_non_json_backend_body_reason_shown_in_development(app_factory, auth_headers, data_service):
    data_service.handler = lambda request: httpx.Response(200, text="not json")
    client = TestClient(app_factory(make_settings(ENVIRONMENT="localhost")))

    response = client.get("/tags", headers=auth_headers)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"].startswith("Internal Server Error. Reason: ")


# ============================================================================
# System Endpoint Tests
# ============================================================================

def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "ok"
    assert response.json()["environment"] == "production"


def test_tag_routes_document_error_body(client):
    schema = client.get("/openapi.json").json()

    for method in ("get", "post"):
        responses = schema["paths"]["/tags"][method]["responses"]
        for code in ("401", "403", "500"):
            ref = responses[code]["content"]["application/json"]["schema"]["$ref"]
            assert ref == "#/components/schemas/ErrorResponse"
