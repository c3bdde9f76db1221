from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blueprint_api.api.exception_handlers import register_exception_handlers
from blueprint_api.api.schemas import HealthOut
from blueprint_api.blueprints.router import router as blueprints_router
from blueprint_api.core.llm.openrouter_client import OpenRouterConfig
from blueprint_api.core.logging import setup_logging
from blueprint_api.core.metrics import PrometheusMetricsMiddleware, metrics_router
from blueprint_api.core.middleware.http_logging import HttpLoggingMiddleware
from blueprint_api.core.settings import get_settings

setup_logging()


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Resolve upstream configuration once; requests only read app.state.
        app.state.openrouter_config = OpenRouterConfig.from_settings(get_settings())
        yield

    settings = get_settings()
    app = FastAPI(
        title="Blueprint API",
        description=(
            "Turns free-text building descriptions into room blueprints using an "
            "OpenRouter-hosted model.\n\n"
            "- The room schema is requested from the model; output is only checked for "
            "being valid JSON unless schema validation is enabled.\n"
            "- Logging and metrics never include prompts or model output."
        ),
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "health",
                "description": "Basic uptime check for load balancers and monitoring.",
            },
            {
                "name": "blueprints",
                "description": "Generate blueprints from prompts and render them as SVG.",
            },
        ],
    )

    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(HttpLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Authorization"],
        expose_headers=["Content-Length"],
        allow_credentials=True,
        max_age=12 * 60 * 60,
    )

    register_exception_handlers(app)

    @app.get(
        "/health",
        response_model=HealthOut,
        tags=["health"],
        summary="Health check",
        description=(
            "Lightweight endpoint to verify the API process is running. It does not "
            "contact OpenRouter."
        ),
    )
    async def health() -> HealthOut:
        return HealthOut(status="ok")

    app.include_router(metrics_router)
    app.include_router(blueprints_router)
    return app


app = create_app()
