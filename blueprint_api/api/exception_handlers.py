from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from blueprint_api.domain.exceptions import BlueprintError

logger = logging.getLogger("blueprint_api.errors")

INVALID_REQUEST_MESSAGE = "Invalid request"


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")


def register_exception_handlers(app: FastAPI) -> None:
    """Register application exception handlers."""

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        # IMPORTANT: do not log request bodies; prompts are user content.
        logger.info(
            "Request validation failed",
            extra={
                "request_id": _request_id(request),
                "http_method": request.method,
                "request_path": request.url.path,  # no query string
                "status_code": 400,
                "error": "invalid_request",
            },
        )
        return JSONResponse(status_code=400, content={"error": INVALID_REQUEST_MESSAGE})

    @app.exception_handler(BlueprintError)
    async def handle_blueprint_error(
        request: Request,
        exc: BlueprintError,
    ) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
