"""Structured-output extraction from completion text."""

import json
import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from procurement_ai.errors import ExtractionError, RecordValidationError

RecordT = TypeVar("RecordT", bound=BaseModel)

_FENCE = "```"

# Language tag after an opening fence (```json, ```JSON), followed by content.
_FENCE_TAG_RE = re.compile(r"[\w+-]+(?=\s|\{|\[)")

# A bare JSON scalar is content, never a tag (```null, ```42).
_JSON_SCALAR_RE = re.compile(r"(?:null|true|false|-?\d[\d.eE+-]*)\Z")


def strip_code_fence(text: str) -> str:
    """Remove an optional triple-backtick fence around *text*.

    Unfenced text is only trimmed, so applying this twice is a no-op.

    Args:
        text: Raw completion text.

    Returns:
        The inner text, trimmed of surrounding whitespace.
    """
    cleaned = text.strip()
    if cleaned.startswith(_FENCE):
        cleaned = cleaned[len(_FENCE) :]
        tag = _FENCE_TAG_RE.match(cleaned)
        if tag and not _JSON_SCALAR_RE.match(tag.group()):
            cleaned = cleaned[tag.end() :]
    if cleaned.endswith(_FENCE):
        cleaned = cleaned[: -len(_FENCE)]
    return cleaned.strip()


def extract_json(text: str) -> Any:
    """Parse a completion that should contain a single JSON value.

    Args:
        text: Completion text, possibly wrapped in a code fence.

    Returns:
        The decoded JSON value.

    Raises:
        ExtractionError: If the unwrapped text is not valid JSON.
    """
    payload = strip_code_fence(text)
    try:
        return json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ExtractionError("Failed to parse AI response as JSON") from exc


def extract_record(text: str, model: type[RecordT]) -> RecordT:
    """Parse *text* as JSON and validate it into *model*.

    Raises:
        ExtractionError: If the text is not valid JSON.
        RecordValidationError: If the JSON does not match *model*.
    """
    data = extract_json(text)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise RecordValidationError(
            f"AI response does not match {model.__name__}",
            errors=exc.errors(include_url=False),
        ) from exc
