from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response

from blueprint_api.api.schemas import ErrorOut
from blueprint_api.blueprints.render import render_blueprint_svg
from blueprint_api.blueprints.schemas import Blueprint, PromptRequest
from blueprint_api.blueprints.service import BlueprintService
from blueprint_api.core.llm.deps import get_openrouter_client
from blueprint_api.core.metrics import blueprint_generations_total
from blueprint_api.core.settings import get_settings
from blueprint_api.domain.exceptions import BlueprintError

router = APIRouter(prefix="/api/blueprint", tags=["blueprints"])
logger = logging.getLogger("blueprint_api.blueprints")

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorOut, "description": "Invalid body or empty prompt."},
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorOut, "description": "Upstream rejected the API key."},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {
        "model": ErrorOut,
        "description": "Missing configuration or unbuildable upstream request.",
    },
    status.HTTP_502_BAD_GATEWAY: {
        "model": ErrorOut,
        "description": "Upstream unreachable, unreadable, or returned unusable output.",
    },
}


@router.post(
    "",
    responses=_ERROR_RESPONSES,
    summary="Generate a blueprint",
    description=(
        "Forward the prompt to the configured OpenRouter model and return its JSON blueprint "
        "(`{\"rooms\": [{name, x, y, width, height}]}`).\n\n"
        "The output shape is requested from the model but only checked for being valid JSON "
        "unless `BLUEPRINT_VALIDATE_SCHEMA` is enabled."
    ),
)
async def generate_blueprint(
    payload: PromptRequest,
    request: Request,
    openrouter_client=Depends(get_openrouter_client),
) -> JSONResponse:
    """
    IMPORTANT: the prompt and the model output are never logged.
    """

    request_id = getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")
    settings = get_settings()
    svc = BlueprintService(
        llm_client=openrouter_client,
        validate_schema=settings.blueprint_validate_schema,
    )

    try:
        result = await svc.generate(prompt=payload.prompt)
    except BlueprintError as exc:
        blueprint_generations_total.labels(outcome=exc.kind.value).inc()
        logger.info(
            "Blueprint generation failed",
            extra={
                "request_id": request_id,
                "error_kind": exc.kind.value,
                "status_code": exc.status_code,
                "success": False,
            },
        )
        raise

    blueprint_generations_total.labels(outcome="success").inc()
    logger.info(
        "Blueprint generated",
        extra={"request_id": request_id, "success": True},
    )
    return JSONResponse(status_code=status.HTTP_200_OK, content=result)


@router.post(
    "/svg",
    response_class=Response,
    responses={
        status.HTTP_200_OK: {"content": {"image/svg+xml": {}}},
        status.HTTP_400_BAD_REQUEST: {"model": ErrorOut},
    },
    summary="Render a blueprint as SVG",
)
async def render_blueprint(payload: Blueprint) -> Response:
    return Response(content=render_blueprint_svg(payload), media_type="image/svg+xml")
