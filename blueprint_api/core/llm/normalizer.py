"""Normalization of OpenRouter chat-completion responses.

Turns an upstream (status, body) pair into either the model's parsed JSON value
or a classified BlueprintError. Every step is terminal on failure; nothing is
retried or partially returned.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any

from blueprint_api.domain.exceptions import (
    EmptyModelOutputError,
    InvalidModelJSONError,
    NoCompletionError,
    UpstreamAuthError,
    UpstreamStatusError,
    UpstreamUnparsableError,
)

CODE_FENCE = "```"
GENERIC_FAILURE_MESSAGE = "AI request failed"
AUTH_FAILURE_MESSAGE = "OpenRouter authentication failed. Check OPENROUTER_API_KEY."
_AUTH_STATUS_CODES = frozenset({401, 403})


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON.
    raise ValueError(f"invalid JSON constant: {name}")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {text[:32]}")
    return value


def _parse_bounded_int(text: str) -> int:
    value = int(text)
    # Numbers must fit a double, as every JSON consumer downstream assumes.
    try:
        float(value)
    except OverflowError as exc:
        raise ValueError(f"number out of range: {text[:32]}") from exc
    return value


def _loads_strict(text: str | bytes) -> Any:
    return json.loads(
        text,
        parse_constant=_reject_constant,
        parse_float=_parse_finite_float,
        parse_int=_parse_bounded_int,
    )


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class UpstreamResponseEnvelope:
    """The subset of the chat-completion response we rely on.

    Missing or mistyped fields collapse to empty values instead of failing.
    """

    contents: tuple[str, ...] = field(default_factory=tuple)
    error_message: str | None = None

    @classmethod
    def from_json(cls, data: Any) -> UpstreamResponseEnvelope:
        if not isinstance(data, dict):
            raise UpstreamUnparsableError("AI service returned an unreadable response")

        contents: list[str] = []
        choices = data.get("choices")
        if isinstance(choices, list):
            for choice in choices:
                message = choice.get("message") if isinstance(choice, dict) else None
                content = message.get("content") if isinstance(message, dict) else None
                contents.append(_as_str(content))

        error_message: str | None = None
        error = data.get("error")
        if isinstance(error, dict):
            error_message = _as_str(error.get("message"))

        return cls(contents=tuple(contents), error_message=error_message)

    @classmethod
    def parse(cls, body: bytes | str) -> UpstreamResponseEnvelope:
        try:
            data = json.loads(body)
        except (TypeError, ValueError, RecursionError) as exc:
            raise UpstreamUnparsableError("AI service returned an unreadable response") from exc
        return cls.from_json(data)


def strip_code_fence(content: str) -> str:
    """Remove a ```-fence wrapping the whole content, if unambiguously present.

    Only strips when the first line opens a fence and the last line is exactly the
    closing marker; anything else is returned trimmed but otherwise untouched.
    """

    cleaned = content.strip()
    if cleaned.startswith(CODE_FENCE):
        lines = cleaned.split("\n")
        if (
            len(lines) >= 3
            and lines[0].strip().startswith(CODE_FENCE)
            and lines[-1].strip() == CODE_FENCE
        ):
            cleaned = "\n".join(lines[1:-1])
    return cleaned.strip()


def raise_for_upstream_status(*, status_code: int, envelope: UpstreamResponseEnvelope) -> None:
    if status_code < 400:
        return

    message = GENERIC_FAILURE_MESSAGE
    if envelope.error_message and envelope.error_message.strip():
        message = envelope.error_message

    if status_code in _AUTH_STATUS_CODES:
        # Prefer the upstream explanation; fall back to actionable key guidance.
        if message == GENERIC_FAILURE_MESSAGE:
            message = AUTH_FAILURE_MESSAGE
        raise UpstreamAuthError(message)
    raise UpstreamStatusError(message)


def normalize_completion(*, status_code: int, body: bytes | str) -> Any:
    envelope = UpstreamResponseEnvelope.parse(body)
    raise_for_upstream_status(status_code=status_code, envelope=envelope)

    if not envelope.contents:
        raise NoCompletionError("AI response did not include any choices")

    content = strip_code_fence(envelope.contents[0])
    if not content:
        raise EmptyModelOutputError("AI response content was empty")

    try:
        return _loads_strict(content)
    except (ValueError, RecursionError) as exc:
        raise InvalidModelJSONError("AI returned invalid JSON") from exc
