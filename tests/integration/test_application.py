# tests/integration/test_application.py
import pytest
from fastapi.testclient import TestClient

import main
from infrastructure.storage.document_store import InMemoryDocumentStore
from shared.config import Settings

class TestDispatcherFactory:

    def test_per_request_mode_builds_fresh_engines(self):
        factory = main.build_dispatcher_factory(InMemoryDocumentStore(), "per_request")

        assert factory() is not factory()
        assert factory().engine is not factory().engine

    def test_shared_mode_reuses_engine(self):
        factory = main.build_dispatcher_factory(InMemoryDocumentStore(), "shared")

        assert factory() is factory()

class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ["LOG_LEVEL", "JSON_LOGS", "STORAGE_BACKEND", "ENGINE_MODE", "PORT", "RELOAD"]:
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.storage_backend == "memory"
        assert settings.engine_mode == "per_request"
        assert settings.json_logs is True
        assert settings.port == 8000
        assert settings.reload is False

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("ENGINE_MODE", "SHARED")
        monkeypatch.setenv("JSON_LOGS", "false")
        monkeypatch.setenv("PORT", "9000")

        settings = Settings.from_env()

        assert settings.engine_mode == "shared"
        assert settings.json_logs is False
        assert settings.port == 9000

    def test_rejects_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "redis")

        with pytest.raises(ValueError, match="STORAGE_BACKEND"):
            Settings.from_env()

class TestApplication:

    def test_lifespan_health_and_tools(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        monkeypatch.setenv("ENGINE_MODE", "per_request")

        with TestClient(main.app) as client:
            health = client.get("/health")
            assert health.status_code == 200
            assert health.json()["status"] == "healthy"

            root = client.get("/")
            assert root.json()["endpoints"]["call_tool"] == "POST /call-tool"

            planned = client.post("/call-tool", json={
                "params": {
                    "name": "request_planning",
                    "arguments": {
                        "originalRequest": "Ask",
                        "tasks": [{"title": "A", "description": "a"}]
                    }
                }
            })
            assert planned.json()["requestId"] == "req-1"

            listed = client.post("/call-tool", json={"params": {"name": "list_requests"}})
            assert "| req-1 | Ask | 0 | 1 |" in listed.json()["message"]

    def test_cors_preflight(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "memory")

        with TestClient(main.app) as client:
            response = client.options("/call-tool", headers={
                "Origin": "https://example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type"
            })

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
