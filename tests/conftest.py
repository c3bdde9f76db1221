from __future__ import annotations

import pytest

_OPENROUTER_ENV_VARS = (
    "OPENROUTER_API_KEY",
    "OPENROUTER_API",
    "OPENROUTER_MODEL",
    "OPENROUTER_BASE_URL",
    "OPENROUTER_TIMEOUT_SECONDS",
    "OPENROUTER_SITE_URL",
    "OPENROUTER_HTTP_REFERER",
    "OPENROUTER_APP_NAME",
    "OPENROUTER_X_TITLE",
    "BLUEPRINT_VALIDATE_SCHEMA",
)


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch, tmp_path):
    # Run away from any developer .env and start from a clean environment.
    monkeypatch.chdir(tmp_path)
    for name in _OPENROUTER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    # Settings are cached via @lru_cache; clear so each test sees its own environment.
    from blueprint_api.core.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def api_key(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-test")
    return "sk-or-test"


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from blueprint_api.main import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c
