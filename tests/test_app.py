"""
MarkNotes Backend - Application Wiring Tests
============================================

What:  Health check, request ids, rate limiting, error format for unknown
       routes, and startup configuration validation.
"""

import logging

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from marknotes.config import Settings
from marknotes.main import create_app, lifespan
from marknotes.middleware.rate_limit import RateLimitMiddleware
from marknotes.middleware.request_id import RequestIDMiddleware


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_dependencies(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["grammar"] == "configured"
        assert "uptimeSeconds" in body

    @pytest.mark.asyncio
    async def test_health_degraded_without_grammar_key(self, test_client, monkeypatch):
        monkeypatch.setattr("marknotes.routes.health.grammar_service.api_key", "")

        body = (await test_client.get("/health")).json()

        assert body["status"] == "degraded"
        assert body["grammar"] == "not_configured"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/health")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_value_is_echoed_in_header_and_error_body(self, test_client):
        response = await test_client.get("/notes", headers={"X-Request-ID": "trace-42"})

        assert response.headers["X-Request-ID"] == "trace-42"
        assert response.json()["requestId"] == "trace-42"


class TestErrorFormat:

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_body(self, test_client):
        response = await test_client.get("/no-such-route")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_docs_are_served(self, test_client):
        response = await test_client.get("/api-docs")

        assert response.status_code == 200
        assert "swagger" in response.text.lower()


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_authenticated_request_logs_user_id(self, test_client, auth_headers, owner, caplog):
        caplog.set_level(logging.INFO, logger="marknotes.access")

        response = await test_client.get("/notes", headers=auth_headers)

        assert response.status_code == 200
        records = [r for r in caplog.records if r.name == "marknotes.access"]
        assert len(records) == 1
        assert records[0].user_id == str(owner.id)
        assert f"user={owner.id}" in records[0].getMessage()
        assert records[0].status == 200

    @pytest.mark.asyncio
    async def test_anonymous_request_logs_placeholder_at_warning(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="marknotes.access")

        await test_client.get("/notes")

        records = [r for r in caplog.records if r.name == "marknotes.access"]
        assert records[0].user_id == "-"
        assert records[0].levelno == logging.WARNING

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/health", "/api-docs", "/openapi.json"])
    async def test_health_and_docs_are_not_logged(self, test_client, caplog, path):
        caplog.set_level(logging.INFO, logger="marknotes.access")

        await test_client.get(path)

        assert [r for r in caplog.records if r.name == "marknotes.access"] == []


class TestRateLimit:

    @staticmethod
    def _app(max_requests):
        app = FastAPI()
        app.add_middleware(RateLimitMiddleware, max_requests=max_requests, window_seconds=60)
        app.add_middleware(RequestIDMiddleware)

        @app.get("/ping")
        async def ping():
            return {"ok": True}

        @app.get("/health")
        async def health():
            return {"status": "healthy"}

        return app

    @pytest.mark.asyncio
    async def test_requests_over_limit_get_429(self):
        transport = ASGITransport(app=self._app(max_requests=2))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/ping")).status_code == 200
            assert (await client.get("/ping")).status_code == 200
            blocked = await client.get("/ping")

        assert blocked.status_code == 429
        assert blocked.json()["error"] == "rate_limit_exceeded"
        assert 0 < int(blocked.headers["Retry-After"]) <= 61
        assert blocked.json()["requestId"] == blocked.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_health_is_never_limited(self):
        transport = ASGITransport(app=self._app(max_requests=1))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            statuses = [(await client.get("/health")).status_code for _ in range(5)]

        assert statuses == [200] * 5


class TestStartupConfiguration:

    def test_missing_secrets_are_all_reported(self):
        bad = Settings(_env_file=None, jwt_secret="", grammar_api_key="changeme")

        with pytest.raises(ValueError) as exc_info:
            bad.validate_required_for_production()

        assert "JWT_SECRET" in str(exc_info.value)
        assert "GRAMMAR_API_KEY" in str(exc_info.value)

    def test_configured_secrets_pass(self):
        Settings(
            _env_file=None, jwt_secret="x" * 40, grammar_api_key="real-key"
        ).validate_required_for_production()

    @pytest.mark.parametrize("value", ["verbose", "trace"])
    def test_invalid_log_level_rejected(self, value):
        with pytest.raises(ValueError):
            Settings(_env_file=None, log_level=value)

    def test_cors_origins_list(self):
        s = Settings(_env_file=None, cors_origins="http://a.test, http://b.test,")

        assert s.cors_origins_list == ["http://a.test", "http://b.test"]

    @pytest.mark.asyncio
    async def test_startup_fails_without_secrets(self, monkeypatch):
        monkeypatch.setattr("marknotes.main.setup_logging", lambda: None)
        monkeypatch.setattr(
            "marknotes.main.settings",
            Settings(_env_file=None, jwt_secret="", grammar_api_key=""),
        )

        with pytest.raises(ValueError, match="JWT_SECRET"):
            async with lifespan(create_app()):
                pass

    @pytest.mark.asyncio
    async def test_startup_succeeds_with_secrets(self, monkeypatch):
        monkeypatch.setattr("marknotes.main.setup_logging", lambda: None)

        async with lifespan(create_app()):
            pass
