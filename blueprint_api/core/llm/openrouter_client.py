from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import httpx

from blueprint_api.core.llm.normalizer import normalize_completion
from blueprint_api.core.settings import DEFAULT_OPENROUTER_MODEL, Settings
from blueprint_api.domain.exceptions import (
    ConfigurationError,
    UpstreamUnreachableError,
    UpstreamUnreadableError,
)

COMPLETIONS_PATH = "/chat/completions"
COMPLETION_TEMPERATURE = 0.2
MISSING_API_KEY_MESSAGE = "OPENROUTER_API_KEY or OPENROUTER_API is not configured"


@dataclass(frozen=True)
class OpenRouterConfig:
    api_key: str | None
    base_url: str = "https://openrouter.ai/api/v1"
    model: str = DEFAULT_OPENROUTER_MODEL
    timeout_seconds: float = 60.0
    referer: str | None = None
    title: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> OpenRouterConfig:
        return cls(
            api_key=settings.api_key,
            base_url=settings.openrouter_base_url,
            model=settings.model,
            timeout_seconds=float(settings.openrouter_timeout_seconds),
            referer=settings.referer,
            title=settings.title,
        )


@dataclass(frozen=True)
class UpstreamRequestSpec:
    """Chat-completion payload: one system instruction, one user prompt."""

    model: str
    messages: tuple[dict[str, str], ...]
    temperature: float = COMPLETION_TEMPERATURE

    @classmethod
    def for_prompt(cls, *, model: str, system_prompt: str, user_prompt: str) -> UpstreamRequestSpec:
        return cls(
            model=model,
            messages=(
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [dict(m) for m in self.messages],
            "temperature": self.temperature,
        }


def build_headers(config: OpenRouterConfig) -> dict[str, str]:
    headers = {
        "Authorization": f"Bearer {config.api_key}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    # Attribution headers are optional; never send them with empty values.
    if config.referer:
        headers["HTTP-Referer"] = config.referer
    if config.title:
        headers["X-Title"] = config.title
    return headers


def build_completion_request(
    *, config: OpenRouterConfig, system_prompt: str, user_prompt: str
) -> httpx.Request:
    """Build the upstream POST for a single blueprint prompt.

    Raises ConfigurationError when the API key is missing or the request cannot
    be serialized; nothing is sent from here.
    """

    if not config.api_key or not config.api_key.strip():
        raise ConfigurationError(MISSING_API_KEY_MESSAGE)

    spec = UpstreamRequestSpec.for_prompt(
        model=config.model, system_prompt=system_prompt, user_prompt=user_prompt
    )
    try:
        body = json.dumps(spec.to_payload(), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise ConfigurationError("Failed to prepare AI request") from exc

    url = f"{config.base_url.rstrip('/')}{COMPLETIONS_PATH}"
    try:
        return httpx.Request(
            "POST",
            url,
            headers=build_headers(config),
            content=body,
            # Requests sent via AsyncClient.send() only honour a per-request timeout.
            extensions={"timeout": httpx.Timeout(config.timeout_seconds).as_dict()},
        )
    except (httpx.InvalidURL, httpx.UnsupportedProtocol, TypeError, ValueError) as exc:
        raise ConfigurationError("Failed to create AI request") from exc


class OpenRouterClient:
    """
    OpenRouter chat-completion client returning the model's parsed JSON.

    Design notes:
    - No prompt/output logging in this module.
    - One attempt per call, bounded by the configured timeout; no retries.
    - Output is parsed JSON only; schema checks are left to callers.
    """

    def __init__(
        self,
        *,
        config: OpenRouterConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config
        self._transport = transport

    async def generate_json(self, *, system_prompt: str, user_prompt: str) -> Any:
        request = build_completion_request(
            config=self._config, system_prompt=system_prompt, user_prompt=user_prompt
        )

        async with httpx.AsyncClient(
            timeout=self._config.timeout_seconds, transport=self._transport
        ) as client:
            try:
                resp = await client.send(request, stream=True)
            except httpx.HTTPError as exc:
                raise UpstreamUnreachableError("AI request failed") from exc

            try:
                body = await resp.aread()
            except (httpx.HTTPError, httpx.StreamError) as exc:
                raise UpstreamUnreadableError("Failed to read AI response") from exc
            finally:
                await resp.aclose()

        return normalize_completion(status_code=resp.status_code, body=body)
