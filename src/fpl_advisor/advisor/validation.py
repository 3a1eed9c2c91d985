"""Turn raw completion text into an advice result."""

from __future__ import annotations

import json
import logging

from ..types import Advice, AdviceError, AdviceResult

logger = logging.getLogger(__name__)

INVALID_JSON_MESSAGE = "Failed to parse AI response. The AI did not return valid JSON."
NOT_AN_OBJECT_MESSAGE = "AI response was valid JSON but not a JSON object."


def validate_reply(raw_text: str) -> AdviceResult:
    """Parse ``raw_text`` into :class:`Advice` or :class:`AdviceError`.

    Never raises. The model is trusted for field content; only parseability
    and the top-level object shape are checked. Failures keep the raw text
    so it can be inspected later.
    """
    try:
        data = json.loads(raw_text)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(f"Failed to parse JSON response: {e}")
        logger.error("Raw response: %s", raw_text)
        return AdviceError(error=INVALID_JSON_MESSAGE, raw_response=str(raw_text))

    if not isinstance(data, dict):
        logger.error("AI response JSON was %s, expected object", type(data).__name__)
        return AdviceError(error=NOT_AN_OBJECT_MESSAGE, raw_response=raw_text)

    if "error" in data:
        logger.warning("AI response reported an error: %s", data["error"])
        return AdviceError(error=str(data["error"]), raw_response=raw_text)

    advice = Advice.model_validate(data)
    logger.info("Received and parsed JSON suggestion")
    return advice


__all__ = ["INVALID_JSON_MESSAGE", "NOT_AN_OBJECT_MESSAGE", "validate_reply"]
