from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OPENROUTER_MODEL = "deepseek/deepseek-chat-v3-0324"


def first_non_empty(*values: str | None) -> str | None:
    """Return the first value that is non-blank after trimming, stripped."""

    for value in values:
        if value is None:
            continue
        stripped = value.strip()
        if stripped:
            return stripped
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = Field(
        default="production",
        validation_alias=AliasChoices("APP_ENV", "app_env"),
        description="Runtime environment: development|production.",
    )

    # OpenRouter credentials and model selection.
    # Each pair is resolved with first-non-empty precedence (see properties below).
    openrouter_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENROUTER_API_KEY", "openrouter_api_key"),
        description="OpenRouter API key (required for /api/blueprint).",
    )
    openrouter_api: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENROUTER_API", "openrouter_api"),
        description="Fallback name for the OpenRouter API key.",
    )
    openrouter_model: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENROUTER_MODEL", "openrouter_model"),
        description=f"Model identifier (default: {DEFAULT_OPENROUTER_MODEL}).",
    )
    openrouter_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        validation_alias=AliasChoices("OPENROUTER_BASE_URL", "openrouter_base_url"),
        description="Base URL for the OpenRouter API (override for proxies/emulators).",
    )
    openrouter_timeout_seconds: float = Field(
        default=60.0,
        ge=1.0,
        validation_alias=AliasChoices(
            "OPENROUTER_TIMEOUT_SECONDS", "openrouter_timeout_seconds"
        ),
        description="Timeout for the upstream completion request (seconds).",
    )

    # Optional attribution headers (HTTP-Referer / X-Title).
    openrouter_site_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENROUTER_SITE_URL", "openrouter_site_url"),
    )
    openrouter_http_referer: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENROUTER_HTTP_REFERER", "openrouter_http_referer"),
    )
    openrouter_app_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENROUTER_APP_NAME", "openrouter_app_name"),
    )
    openrouter_x_title: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENROUTER_X_TITLE", "openrouter_x_title"),
    )

    blueprint_validate_schema: bool = Field(
        default=False,
        validation_alias=AliasChoices("BLUEPRINT_VALIDATE_SCHEMA", "blueprint_validate_schema"),
        description="If true, reject model output that does not match the room schema.",
    )

    # HTTP server / browser access
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:5174",
            "http://127.0.0.1:5174",
        ],
        validation_alias=AliasChoices("CORS_ALLOW_ORIGINS", "cors_allow_origins"),
        description="Origins allowed to call the API from a browser.",
    )
    host: str = Field(default="0.0.0.0", validation_alias=AliasChoices("HOST", "host"))
    port: int = Field(default=5000, ge=1, le=65535, validation_alias=AliasChoices("PORT", "port"))

    @property
    def api_key(self) -> str | None:
        return first_non_empty(self.openrouter_api_key, self.openrouter_api)

    @property
    def model(self) -> str:
        return first_non_empty(self.openrouter_model) or DEFAULT_OPENROUTER_MODEL

    @property
    def referer(self) -> str | None:
        return first_non_empty(self.openrouter_site_url, self.openrouter_http_referer)

    @property
    def title(self) -> str | None:
        return first_non_empty(self.openrouter_app_name, self.openrouter_x_title)

    @property
    def is_development(self) -> bool:
        return str(self.app_env).strip().lower() == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
