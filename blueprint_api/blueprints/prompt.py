from __future__ import annotations

# The output schema is enforced only by instructing the model; keep it in sync
# with blueprint_api.blueprints.schemas.Blueprint.
BLUEPRINT_SYSTEM_PROMPT = """
You are an architectural blueprint AI.
Return STRICT JSON only.
Schema:
{
  "rooms": [
    { "name": "string", "x": number, "y": number, "width": number, "height": number }
  ]
}
"""


def build_blueprint_prompts(*, prompt: str) -> tuple[str, str]:
    """Create (system_prompt, user_prompt) for blueprint generation."""

    return BLUEPRINT_SYSTEM_PROMPT, prompt
