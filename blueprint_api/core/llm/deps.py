from __future__ import annotations

from fastapi import Request

from blueprint_api.core.llm.openrouter_client import OpenRouterClient, OpenRouterConfig
from blueprint_api.core.settings import get_settings


def get_openrouter_config(request: Request) -> OpenRouterConfig:
    """Return the config resolved at startup, resolving lazily if startup was skipped."""

    config: OpenRouterConfig | None = getattr(request.app.state, "openrouter_config", None)
    if config is None:
        config = OpenRouterConfig.from_settings(get_settings())
        request.app.state.openrouter_config = config
    return config


def get_openrouter_client(request: Request) -> OpenRouterClient:
    """
    Dependency provider for OpenRouterClient.

    A missing API key is not an error here; the client reports it as a
    configuration error once the prompt has been validated.
    """

    return OpenRouterClient(config=get_openrouter_config(request))
