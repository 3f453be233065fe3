"""Extract a JSON object from free-form model output."""

import json
from typing import Any


class JsonExtractionError(ValueError):
    """Raised when no top-level JSON object can be parsed from the text."""


def _find_object_end(text: str, start: int) -> int | None:
    """Return the index of the brace closing the object opened at ``start``."""
    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def extract_json(text: str) -> dict[str, Any]:
    """
    Return the first top-level ``{...}`` object in ``text``.

    Markdown fences and prose around the object are ignored because only the
    balanced brace span is parsed. Braces inside JSON strings do not count.

    Args:
        text: Raw model output

    Returns:
        Parsed object

    Raises:
        JsonExtractionError: If no balanced object parses as JSON
    """
    if not text:
        raise JsonExtractionError("Empty model output")

    start = text.find("{")
    while start != -1:
        end = _find_object_end(text, start)
        if end is None:
            break
        candidate = text[start : end + 1]
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            # Not JSON (e.g. a brace in prose); try the next opening brace
            start = text.find("{", start + 1)
            continue
        if isinstance(parsed, dict):
            return parsed
        start = text.find("{", end + 1)

    raise JsonExtractionError("No JSON object found in model output")
