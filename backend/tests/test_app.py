"""
RecipeBox Backend: Application-Level Tests
============================================

What we test:
    ✅ /health reports database connectivity
    ✅ Every OPTIONS request is answered 200 with an empty body
    ✅ Ordinary responses carry CORS and X-Request-ID headers
    ✅ Startup refuses to run without JWT_SECRET
    ✅ Settings parsing (CORS list, log level)
"""

import pytest

from recipebox.config import Settings
from recipebox.exceptions import ConfigurationError
from recipebox.main import create_app, initialize


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        assert data["version"] == "1.0.0"
        assert data["uptime_seconds"] >= 0


class TestCors:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/recipes", "/api/recipes/1", "/api/auth/login", "/nowhere"])
    async def test_preflight_always_200(self, test_client, path):
        response = await test_client.options(
            path,
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "DELETE",
                "Access-Control-Request-Headers": "Authorization, Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"
        assert "PATCH" in response.headers["access-control-allow-methods"]
        assert "Authorization" in response.headers["access-control-allow-headers"]

    @pytest.mark.asyncio
    async def test_bare_options_is_200(self, test_client):
        response = await test_client.options("/api/stats")
        assert response.status_code == 200
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_simple_request_allows_any_origin(self, test_client):
        response = await test_client.get("/api/stats", headers={"Origin": "http://example.com"})
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"


class TestRequestId:
    @pytest.mark.asyncio
    async def test_generated(self, test_client):
        response = await test_client.get("/api/recipes/999")
        assert len(response.headers["x-request-id"]) == 8

    @pytest.mark.asyncio
    async def test_client_id_echoed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "trace-123"})
        assert response.headers["x-request-id"] == "trace-123"

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_body(self, test_client):
        response = await test_client.get("/api/unknown")
        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}


class TestStartup:
    @pytest.mark.asyncio
    async def test_missing_secret_refuses_to_start(self, tmp_path):
        settings = Settings(
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'nosecret.db'}",
            jwt_secret="",
        )
        app = create_app(settings)
        try:
            with pytest.raises(ConfigurationError):
                await initialize(app)
        finally:
            await app.state.database.dispose()

    @pytest.mark.asyncio
    async def test_seeding_can_be_disabled(self, tmp_path, test_settings):
        settings = test_settings.model_copy(
            update={
                "database_url": f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}",
                "seed_sample_data": False,
            }
        )
        app = create_app(settings)
        try:
            await initialize(app)
            recipes = await _get_json(app, "/api/recipes")
            assert recipes == {"count": 0, "recipes": []}
        finally:
            await app.state.database.dispose()


async def _get_json(app, path):
    from httpx import ASGITransport, AsyncClient

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get(path)
        return response.json()


class TestSettings:
    def test_cors_origins_list(self):
        settings = Settings(cors_origins="http://a.com, http://b.com,", jwt_secret="x")
        assert settings.cors_origins_list == ["http://a.com", "http://b.com"]

    def test_log_level_normalized(self):
        assert Settings(log_level="debug", jwt_secret="x").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            Settings(log_level="chatty", jwt_secret="x")

    def test_validate_required(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(jwt_secret=" ").validate_required()
        assert "JWT_SECRET" in exc_info.value.message
