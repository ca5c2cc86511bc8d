"""Unit tests for the request logging middleware."""

from fastapi import FastAPI, Response
from fastapi.testclient import TestClient

from xiq.api.middleware import LoggingConfig, RequestLoggingMiddleware


def make_app(config=None) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware, config=config)

    @app.get("/api/x/profile")
    async def profile():
        return Response(content="{}", headers={"x-cache": "HIT"})

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_should_exclude_health_paths_by_default(self):
        """Test default excluded paths."""
        config = LoggingConfig()

        assert "/health" in config.excluded_paths
        assert "/ready" in config.excluded_paths


class TestRequestLoggingMiddleware:
    """Tests for RequestLoggingMiddleware."""

    def test_should_add_request_id(self):
        """Test request id header on logged paths."""
        response = TestClient(make_app()).get("/api/x/profile")

        assert response.status_code == 200
        assert len(response.headers["X-Request-ID"]) == 8

    def test_should_add_request_id_on_excluded_paths(self):
        """Test request id header on health paths."""
        response = TestClient(make_app()).get("/health")

        assert "X-Request-ID" in response.headers

    def test_should_pass_through_when_disabled(self):
        """Test disabled logging."""
        app = make_app(LoggingConfig(enabled=False))

        response = TestClient(app).get("/api/x/profile")

        assert response.headers["x-cache"] == "HIT"

    def test_should_keep_incoming_request_id(self):
        """Test caller supplied request id is echoed."""
        response = TestClient(make_app()).get(
            "/api/x/profile", headers={"X-Request-ID": "abc123"}
        )

        assert response.headers["X-Request-ID"] == "abc123"
