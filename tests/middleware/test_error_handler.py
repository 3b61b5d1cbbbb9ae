"""
Tests for error rendering: unknown routes, malformed bodies and internal errors.
"""

import logging

import pytest
from fastapi.testclient import TestClient

from problem_registry.config.settings import ServiceSettings
from problem_registry.main import create_app
from problem_registry.middleware.error_handler import ErrorDetail, format_stack_trace
from problem_registry.services.problem_registry import ProblemRegistry


class ExplodingRegistry(ProblemRegistry):
    """Registry whose listing fails unexpectedly."""

    def list_problems(self, status=None, category=None):
        raise RuntimeError("storage exploded")


def client_for(environment: str) -> TestClient:
    app = create_app(
        settings=ServiceSettings(environment=environment),
        registry=ExplodingRegistry(),
    )
    return TestClient(app)


class TestErrorDetail:

    def test_minimal_envelope(self):
        assert ErrorDetail(404, "Route not found").to_dict() == {
            "success": False,
            "message": "Route not found",
        }

    def test_optional_fields(self):
        detail = ErrorDetail(500, "Something went wrong!", error="boom", errors=[{"msg": "x"}])
        assert detail.to_dict() == {
            "success": False,
            "message": "Something went wrong!",
            "error": "boom",
            "errors": [{"msg": "x"}],
        }

    def test_format_stack_trace_skips_blank_lines(self):
        assert format_stack_trace("a\n\n  b\n") == "  │ a\n  │   b"


class TestRouteNotFound:

    @pytest.mark.parametrize("method,path", [
        ("GET", "/nope"),
        ("GET", "/api/problems"),
        ("DELETE", "/problems"),
        ("POST", "/stats"),
        ("GET", "/problems/1/upvote"),
    ])
    def test_unknown_route(self, client, method, path):
        response = client.request(method, path)

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Route not found"}


class TestInvalidBody:

    def test_malformed_json(self, client):
        response = client.post(
            "/problems",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Invalid request body"
        assert body["errors"]

    def test_body_not_an_object(self, client):
        response = client.post("/problems", json=["Pothole", "Main St"])

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request body"
        assert response.json()["errors"][0]["loc"][0] == "body"


class TestInternalErrors:

    def test_development_includes_error(self):
        with client_for("development") as client:
            response = client.get("/problems")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "Something went wrong!",
            "error": "storage exploded",
        }

    def test_production_hides_error(self):
        with client_for("production") as client:
            response = client.get("/problems")

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Something went wrong!"}

    def test_unset_environment_hides_error(self, monkeypatch, tmp_path):
        monkeypatch.delenv("APP_ENV", raising=False)
        monkeypatch.chdir(tmp_path)
        app = create_app(settings=ServiceSettings(), registry=ExplodingRegistry())

        with TestClient(app) as client:
            response = client.get("/problems")

        assert response.status_code == 500
        assert "error" not in response.json()

    def test_error_is_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="problem_registry.middleware.error_handler"):
            with client_for("production") as client:
                client.get("/problems")

        assert "storage exploded" in caplog.text

    def test_server_keeps_serving_after_error(self):
        with client_for("production") as client:
            client.get("/problems")
            assert client.get("/health").status_code == 200
