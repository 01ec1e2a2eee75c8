"""
Recover a JSON object from free-text model output.

Models do not reliably emit bare JSON: answers arrive wrapped in code fences
or surrounded by commentary. Extraction is permissive about the wrapping and
strict about the final parse.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^```[A-Za-z0-9_+-]*[ \t]*\n?", re.MULTILINE)
_TRAILING_FENCE = re.compile(r"\n?```[ \t]*$", re.MULTILINE)


class JSONExtractionError(ValueError):
    """No JSON object could be recovered; ``text`` holds the offending input."""

    def __init__(self, message: str, text: str):
        self.text = text
        super().__init__(message)


def strip_code_fence(text: str) -> str:
    """Remove one leading and one trailing fenced-code marker, if present."""
    clean = text.strip()
    clean = _LEADING_FENCE.sub("", clean, count=1)
    clean = _TRAILING_FENCE.sub("", clean, count=1)
    return clean.strip()


def extract_json(text: str) -> dict[str, Any]:
    """
    Parse the JSON object embedded in a model response.

    Example:
        >>> extract_json('Sure!\\n```json\\n{"intent": "general_chat"}\\n```\\nHope that helps')
        {'intent': 'general_chat'}

    Raises:
        JSONExtractionError: If no object is found or it does not parse
    """
    clean = strip_code_fence(text or "")

    first_brace = clean.find("{")
    last_brace = clean.rfind("}")
    if first_brace == -1 or last_brace == -1 or last_brace < first_brace:
        raise JSONExtractionError("No valid JSON object found in the model response.", text)

    candidate = clean[first_brace : last_brace + 1]
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.debug("JSON parse failed for extracted text", extra={"candidate": candidate[:500]})
        raise JSONExtractionError(f"Failed to parse extracted JSON: {e}", text) from e

    if not isinstance(parsed, dict):
        raise JSONExtractionError("Extracted JSON is not an object.", text)
    return parsed
