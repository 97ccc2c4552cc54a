"""Extract a JSON object from free-form model output."""

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

# ```json { ... } ``` - the fenced block wins over any bare object
_FENCED_JSON = re.compile(r"```json\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)


def _first_balanced_object(text: str) -> str | None:
    """Return the first balanced top-level ``{...}`` in text, or None."""
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]

    return None


def find_json_text(text: str) -> str | None:
    """Locate the JSON object substring in a model response."""
    fenced = _FENCED_JSON.search(text)
    if fenced:
        return fenced.group(1)
    return _first_balanced_object(text)


def extract_json(response_text: str | None) -> dict[str, Any] | None:
    """
    Extract a single JSON object from a model response.

    A ```json fenced block takes precedence; otherwise the first balanced
    top-level object is used. Returns None when the text is empty, holds no
    object, or the object does not parse. Never raises.
    """
    if not response_text or not response_text.strip():
        return None

    json_str = find_json_text(response_text)
    if json_str is None:
        logger.warning("Could not find a JSON object in model response")
        return None

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse JSON from model response: {e}")
        return None

    if not isinstance(data, dict):
        return None
    return data
