"""
Tests for serving the API under a route prefix (e.g. /api on hosted deployments).
"""

import pytest
from fastapi.testclient import TestClient

from problem_registry.config.settings import ServiceSettings
from problem_registry.main import create_app


@pytest.fixture
def api_client(registry):
    app = create_app(settings=ServiceSettings(route_prefix="/api"), registry=registry)
    with TestClient(app) as client:
        yield client


def test_prefixed_routes(api_client, pothole_payload):
    assert api_client.post("/api/problems", json=pothole_payload).status_code == 201
    assert api_client.get("/api/problems/1").json()["data"]["title"] == "Pothole"
    assert api_client.get("/api/stats").json()["data"]["total"] == 1
    assert api_client.get("/api/health").json()["message"] == "Server is running"


@pytest.mark.parametrize("path", ["/problems", "/stats", "/health"])
def test_unprefixed_routes_not_found(api_client, path):
    response = api_client.get(path)

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Route not found"}


def test_cors_headers(api_client):
    response = api_client.get("/api/health", headers={"Origin": "https://example.org"})
    assert response.headers["access-control-allow-origin"] in ("*", "https://example.org")
