from __future__ import annotations

from typing import Any, Protocol

from pydantic import ValidationError

from blueprint_api.blueprints.prompt import build_blueprint_prompts
from blueprint_api.blueprints.schemas import Blueprint
from blueprint_api.domain.exceptions import ClientInputError, InvalidBlueprintError


class LLMClient(Protocol):
    async def generate_json(self, *, system_prompt: str, user_prompt: str) -> Any: ...


def normalize_prompt(prompt: str | None) -> str:
    """Trim the prompt, rejecting it when nothing is left."""

    cleaned = (prompt or "").strip()
    if not cleaned:
        raise ClientInputError("Prompt is required")
    return cleaned


class BlueprintService:
    def __init__(self, *, llm_client: LLMClient, validate_schema: bool = False):
        self._llm = llm_client
        self._validate_schema = validate_schema

    async def generate(self, *, prompt: str | None) -> Any:
        """
        Turn a free-text prompt into the model's blueprint JSON.

        The prompt is validated before any upstream call. The parsed model output is
        returned verbatim; when schema validation is enabled it must also match
        Blueprint, but the original value (not the re-serialized model) is returned.
        """

        cleaned = normalize_prompt(prompt)
        system_prompt, user_prompt = build_blueprint_prompts(prompt=cleaned)
        result = await self._llm.generate_json(
            system_prompt=system_prompt, user_prompt=user_prompt
        )

        if self._validate_schema:
            try:
                Blueprint.model_validate(result)
            except ValidationError as exc:
                raise InvalidBlueprintError("AI returned an invalid blueprint") from exc

        return result
