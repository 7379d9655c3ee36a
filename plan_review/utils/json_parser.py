import json
import re
from typing import Any, Dict, List, Optional, Union

from plan_review.core.exceptions import ModelResponseParseError
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)

_FENCE_PATTERN = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Remove an optional markdown code fence wrapping the response text.

    Args:
        text: Raw response text

    Returns:
        The fenced payload, or the trimmed input when no fence is present
    """
    cleaned = text.strip()
    match = _FENCE_PATTERN.match(cleaned)
    if match:
        return match.group(1).strip()

    # Unterminated fence from a truncated response
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    return cleaned.strip()


def parse_json_safely(text: str) -> Union[Dict[str, Any], List[Any], None]:
    """Parse JSON from reasoning service text, handling common formatting issues.

    Handles:
    - Markdown code blocks (```json ... ```)
    - Leading/trailing whitespace
    - Prose before or after the JSON value

    Args:
        text: The text containing JSON

    Returns:
        Parsed JSON value or None if parsing fails
    """
    if not text:
        return None

    cleaned_text = strip_code_fences(text)

    try:
        return json.loads(cleaned_text)
    except json.JSONDecodeError as e:
        LOGGER.warning(f"Initial JSON parse failed: {e}, scanning for an embedded value")

    decoder = json.JSONDecoder()
    for match in re.finditer(r"[\{\[]", cleaned_text):
        try:
            value, _ = decoder.raw_decode(cleaned_text, match.start())
            LOGGER.info(f"Parsed embedded JSON value at position {match.start()}")
            return value
        except json.JSONDecodeError:
            continue

    LOGGER.error("Failed to parse JSON from response", extra={"preview": cleaned_text[:200]})
    return None


def decode_json_object(text: Optional[str]) -> Dict[str, Any]:
    """Decode reasoning service output that must be a single JSON object.

    Raises:
        ModelResponseParseError: If the text is empty, not JSON, or not an object
    """
    if not text or not text.strip():
        raise ModelResponseParseError("Empty response from reasoning service")

    parsed = parse_json_safely(text)
    if parsed is None:
        raise ModelResponseParseError("Response is not valid JSON")
    if not isinstance(parsed, dict):
        raise ModelResponseParseError(
            f"Expected a JSON object, got {type(parsed).__name__}"
        )
    return parsed
