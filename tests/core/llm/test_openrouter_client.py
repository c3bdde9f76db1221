from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator

import httpx
import pytest

from blueprint_api.core.llm.openrouter_client import (
    MISSING_API_KEY_MESSAGE,
    OpenRouterClient,
    OpenRouterConfig,
    UpstreamRequestSpec,
    build_completion_request,
)
from blueprint_api.core.settings import DEFAULT_OPENROUTER_MODEL, Settings
from blueprint_api.domain.exceptions import (
    ConfigurationError,
    UpstreamUnreachableError,
    UpstreamUnreadableError,
)

SYSTEM_PROMPT = "Return STRICT JSON only."


def _config(**overrides) -> OpenRouterConfig:
    values = {"api_key": "sk-or-test"}
    values.update(overrides)
    return OpenRouterConfig(**values)


def test_request_targets_chat_completions_with_auth_headers() -> None:
    request = build_completion_request(
        config=_config(), system_prompt=SYSTEM_PROMPT, user_prompt="a 2 bedroom house"
    )

    assert request.method == "POST"
    assert str(request.url) == "https://openrouter.ai/api/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-or-test"
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Accept"] == "application/json"
    assert "HTTP-Referer" not in request.headers
    assert "X-Title" not in request.headers


def test_request_body_is_fixed_two_message_payload() -> None:
    request = build_completion_request(
        config=_config(), system_prompt=SYSTEM_PROMPT, user_prompt="a 2 bedroom house"
    )

    assert json.loads(request.content) == {
        "model": DEFAULT_OPENROUTER_MODEL,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": "a 2 bedroom house"},
        ],
        "temperature": 0.2,
    }


def test_attribution_headers_are_sent_when_configured() -> None:
    request = build_completion_request(
        config=_config(referer="https://blueprints.example", title="Blueprints"),
        system_prompt=SYSTEM_PROMPT,
        user_prompt="loft",
    )
    assert request.headers["HTTP-Referer"] == "https://blueprints.example"
    assert request.headers["X-Title"] == "Blueprints"


def test_empty_attribution_values_are_not_sent() -> None:
    request = build_completion_request(
        config=_config(referer="", title=""), system_prompt=SYSTEM_PROMPT, user_prompt="loft"
    )
    assert "HTTP-Referer" not in request.headers
    assert "X-Title" not in request.headers


@pytest.mark.parametrize("api_key", [None, "", "   "])
def test_missing_api_key_is_a_configuration_error(api_key: str | None) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        build_completion_request(
            config=_config(api_key=api_key), system_prompt=SYSTEM_PROMPT, user_prompt="loft"
        )
    assert exc_info.value.message == MISSING_API_KEY_MESSAGE
    assert exc_info.value.status_code == 500


def test_unserializable_prompt_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        build_completion_request(
            config=_config(), system_prompt=SYSTEM_PROMPT, user_prompt=object()  # type: ignore[arg-type]
        )
    assert exc_info.value.message == "Failed to prepare AI request"


def test_request_spec_is_immutable() -> None:
    spec = UpstreamRequestSpec.for_prompt(model="m", system_prompt="s", user_prompt="u")
    with pytest.raises(AttributeError):
        spec.temperature = 1.0  # type: ignore[misc]


def test_config_from_settings_resolves_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENROUTER_API", "fallback-key")
    monkeypatch.setenv("OPENROUTER_X_TITLE", "Blueprints")
    config = OpenRouterConfig.from_settings(Settings())
    assert config.api_key == "fallback-key"
    assert config.model == DEFAULT_OPENROUTER_MODEL
    assert config.title == "Blueprints"
    assert config.referer is None
    assert config.timeout_seconds == 60.0


def test_generate_json_returns_parsed_content() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200, json={"choices": [{"message": {"content": '```json\n{"rooms":[]}\n```'}}]}
        )

    client = OpenRouterClient(config=_config(), transport=httpx.MockTransport(handler))
    result = asyncio.run(client.generate_json(system_prompt=SYSTEM_PROMPT, user_prompt="loft"))

    assert result == {"rooms": []}
    assert len(seen) == 1
    assert seen[0].url.path == "/api/v1/chat/completions"


def test_missing_api_key_never_contacts_upstream() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    client = OpenRouterClient(config=_config(api_key=None), transport=httpx.MockTransport(handler))
    with pytest.raises(ConfigurationError):
        asyncio.run(client.generate_json(system_prompt=SYSTEM_PROMPT, user_prompt="loft"))
    assert seen == []


@pytest.mark.parametrize(
    "exc",
    [httpx.ConnectError("connection refused"), httpx.ReadTimeout("timed out")],
)
def test_transport_failure_is_upstream_unreachable(exc: Exception) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc

    client = OpenRouterClient(config=_config(), transport=httpx.MockTransport(handler))
    with pytest.raises(UpstreamUnreachableError) as exc_info:
        asyncio.run(client.generate_json(system_prompt=SYSTEM_PROMPT, user_prompt="loft"))
    assert exc_info.value.message == "AI request failed"
    assert exc_info.value.status_code == 502


class _BrokenStream(httpx.AsyncByteStream):
    async def __aiter__(self) -> AsyncIterator[bytes]:
        yield b'{"choices": '
        raise httpx.ReadError("connection reset")


def test_body_read_failure_is_upstream_unreadable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=_BrokenStream())

    client = OpenRouterClient(config=_config(), transport=httpx.MockTransport(handler))
    with pytest.raises(UpstreamUnreadableError) as exc_info:
        asyncio.run(client.generate_json(system_prompt=SYSTEM_PROMPT, user_prompt="loft"))
    assert exc_info.value.message == "Failed to read AI response"


def test_request_carries_the_configured_timeout() -> None:
    request = build_completion_request(
        config=_config(timeout_seconds=60.0), system_prompt=SYSTEM_PROMPT, user_prompt="loft"
    )
    assert request.extensions["timeout"]["read"] == 60.0
    assert request.extensions["timeout"]["connect"] == 60.0
