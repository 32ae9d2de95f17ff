"""Tests for error mapping, the catch-all handler and startup failures."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

import hundred_days.main as main_module
from hundred_days.config import Settings
from hundred_days.database import DocumentStore
from hundred_days.errors import (
    CorsRejectedError,
    DuplicateIdError,
    NotFoundError,
    ValidationError,
    describe_validation_errors,
)
from hundred_days.main import app
from hundred_days.routers.dependencies import get_blog_service


class _BrokenService:
    async def list_posts(self, **params):
        raise RuntimeError("store exploded")


@pytest.fixture
def broken_blog(lenient_client):
    app.dependency_overrides[get_blog_service] = lambda: _BrokenService()
    yield lenient_client
    app.dependency_overrides.pop(get_blog_service, None)


class TestErrorTypes:
    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (ValidationError("bad"), 400),
            (DuplicateIdError("dup"), 400),
            (NotFoundError("gone"), 404),
            (CorsRejectedError("nope"), 403),
        ],
    )
    def test_status_codes(self, error, status):
        assert error.status_code == status

    def test_status_override(self):
        assert ValidationError("x", status_code=422).status_code == 422


class TestDescribeValidationErrors:
    def test_prefers_custom_messages(self):
        entry = {
            "loc": ("body", "title"),
            "msg": "Value error, Title is required",
            "ctx": {"error": ValueError("Title is required")},
        }
        assert describe_validation_errors([entry, dict(entry)]) == "Title is required"

    def test_falls_back_to_location(self):
        errors = [
            {
                "loc": ("query", "page"),
                "msg": "Input should be greater than or equal to 1",
            },
            {"loc": ("body",), "msg": "Field required"},
        ]
        assert describe_validation_errors(errors) == (
            "query.page: Input should be greater than or equal to 1, Field required"
        )


class TestUnhandledErrors:
    def test_unexpected_error_returns_500_envelope(self, broken_blog: TestClient):
        response = broken_blog.get("/api/blog")
        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "store exploded"}

    def test_production_hides_details(self, broken_blog: TestClient, monkeypatch):
        monkeypatch.setattr(main_module.settings, "environment", "production")
        response = broken_blog.get("/api/blog")
        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Server Error"}

    def test_500_keeps_security_and_cors_headers(self, broken_blog: TestClient):
        origin = "http://localhost:5173"
        response = broken_blog.get("/api/blog", headers={"Origin": origin})
        assert response.status_code == 500
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "default-src" in response.headers["Content-Security-Policy"]
        assert response.headers["access-control-allow-origin"] == origin
        assert response.headers.get("X-Request-ID")

    def test_handled_inside_middleware_stack(self, client: TestClient):
        app.dependency_overrides[get_blog_service] = lambda: _BrokenService()
        try:
            response = client.get("/api/blog")
        finally:
            app.dependency_overrides.pop(get_blog_service, None)
        assert response.status_code == 500
        assert response.json()["success"] is False


class TestStartup:
    def test_store_requires_uri(self, monkeypatch):
        monkeypatch.delenv("MONGODB_URI", raising=False)
        monkeypatch.delenv("MONGO_URL", raising=False)
        with pytest.raises(RuntimeError, match="MONGODB_URI is not defined"):
            DocumentStore.from_settings(Settings(_env_file=None))

    def test_unreachable_store_aborts_startup(self, monkeypatch):
        def unreachable(config):
            raise RuntimeError("connection refused")

        monkeypatch.setattr(main_module, "build_store", unreachable)
        with pytest.raises(RuntimeError, match="connection refused"):
            with TestClient(app):
                pass

    def test_run_exits_without_uri(self, monkeypatch):
        monkeypatch.setattr(main_module.settings, "mongodb_uri", None)
        with pytest.raises(SystemExit) as excinfo:
            main_module.run()
        assert excinfo.value.code == 1
