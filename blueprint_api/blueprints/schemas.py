from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PromptRequest(BaseModel):
    # Missing or null prompts are treated as empty and rejected by the service.
    prompt: str | None = Field(
        default=None,
        description="Free-text description of the building to lay out.",
        examples=["a 2 bedroom house"],
    )


class Room(BaseModel):
    # Coordinates must be real JSON numbers; "10" or true are rejected.
    model_config = ConfigDict(strict=True, extra="allow")

    name: str = Field(description="Room label.", examples=["bedroom"])
    x: float = Field(description="Left edge of the room.", examples=[0])
    y: float = Field(description="Top edge of the room.", examples=[0])
    width: float = Field(ge=0, description="Room width.", examples=[10])
    height: float = Field(ge=0, description="Room height.", examples=[10])


class Blueprint(BaseModel):
    """A set of named rectangular rooms."""

    model_config = ConfigDict(extra="allow")

    rooms: list[Room]
