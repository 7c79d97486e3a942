"""LLM JSON Extraction — pulls one JSON object out of a model reply.

Invariants:
    - Returns a dict or raises MalformedResponseError — never guesses content
    - Accepts bare JSON and JSON wrapped in prose or ```json fences

Design Decisions:
    - Two levels (direct parse, then outermost {...} block): models drift into
      markdown even when told not to
"""

import json
import re

from daily_trivia.core.errors import MalformedResponseError

_OBJECT_BLOCK = re.compile(r"\{[\s\S]*\}")


def response_text(response) -> str:
    """Concatenate the text blocks of an Anthropic Messages response."""
    return "".join(
        getattr(block, "text", "") for block in response.content
        if getattr(block, "type", None) == "text"
    )


def extract_json_object(text: str, service: str) -> dict:
    """Parse the reply as a JSON object, tolerating surrounding prose."""
    text = text.strip()

    # Level 1: direct parse
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None

    # Level 2: outermost {...} block
    if data is None:
        match = _OBJECT_BLOCK.search(text)
        if not match:
            raise MalformedResponseError("No JSON object in reply", service)
        try:
            data = json.loads(match.group())
        except json.JSONDecodeError as e:
            raise MalformedResponseError(f"Invalid JSON: {e.msg}", service)

    if not isinstance(data, dict):
        raise MalformedResponseError("Reply JSON is not an object", service)
    return data
