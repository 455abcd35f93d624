"""Thin wrapper around the Anthropic Messages API.

Both LLM-backed features (cycle prediction and gift recommendations) send a
single user prompt and expect one JSON object back.  This module owns client
construction and JSON extraction so each feature only builds its prompt and
validates its own payload.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import anthropic

from cyclebloom.config import Settings, get_settings

logger = logging.getLogger("cyclebloom.llm")

_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


class LLMResponseError(ValueError):
    """Raised when the model reply does not contain a usable JSON object."""


def build_client(settings: Settings | None = None) -> anthropic.Anthropic | None:
    """Return an Anthropic client, or None when the LLM path is switched off."""
    s = settings or get_settings()
    if not s.llm_available:
        return None
    return anthropic.Anthropic(api_key=s.anthropic_api_key)


def complete(
    client: anthropic.Anthropic,
    prompt: str,
    *,
    model: str,
    max_tokens: int,
) -> str:
    """Send one prompt and return the text of the first content block.

    Raises:
        anthropic.APIError: On transport or API failures.
        LLMResponseError:   If the reply has no text content.
    """
    response = client.messages.create(
        model=model,
        max_tokens=max_tokens,
        messages=[{"role": "user", "content": prompt}],
    )
    if not response.content:
        raise LLMResponseError("LLM returned an empty response")
    return response.content[0].text.strip()


def parse_json_object(raw_response: str) -> dict[str, Any]:
    """Parse a JSON object out of a model reply.

    Models sometimes wrap the object in prose or a markdown fence, so on a
    direct parse failure the first ``{...}`` span is tried.

    Raises:
        LLMResponseError: If no JSON object can be recovered.
    """
    try:
        payload = json.loads(raw_response)
    except json.JSONDecodeError:
        match = _OBJECT_RE.search(raw_response)
        if not match:
            raise LLMResponseError("LLM response did not contain valid JSON") from None
        try:
            payload = json.loads(match.group())
        except json.JSONDecodeError as exc:
            raise LLMResponseError("LLM returned invalid JSON") from exc

    if not isinstance(payload, dict):
        raise LLMResponseError(f"expected a JSON object, got {type(payload).__name__}")
    return payload
