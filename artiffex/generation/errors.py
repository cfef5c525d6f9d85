"""
Failure classification for generation-service errors.
Reduces whatever the SDK raised to a GenerationError with a coarse kind and
a message fit to show on the node.
"""

import json
import logging
from typing import Optional

from google.genai import errors as genai_errors

from artiffex.exceptions import FailureKind, GenerationError

logger = logging.getLogger(__name__)

QUOTA_MESSAGE = (
    "API Quota Exceeded. You've made too many requests. Please check your plan and "
    "billing details, or try again later."
)


def _embedded_error_message(text: str) -> Optional[str]:
    """Pull `error.message` out of a JSON payload embedded in an error string."""
    start = text.find("{")
    if start < 0:
        return None
    try:
        payload = json.loads(text[start:])
    except ValueError:
        return None
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        return payload["error"].get("message") or None
    return None


def classify_generation_error(error: BaseException, context: str) -> GenerationError:
    """Map an arbitrary exception from the service into a GenerationError."""
    if isinstance(error, GenerationError):
        return error

    logger.error(f"[GEMINI] Error during {context}: {error}")
    text = str(error)

    if isinstance(error, genai_errors.APIError):
        if error.code == 429 or error.status == "RESOURCE_EXHAUSTED":
            return GenerationError(FailureKind.QUOTA_EXCEEDED, QUOTA_MESSAGE)
        if error.message:
            return GenerationError(FailureKind.SERVICE_ERROR, f"API Error: {error.message}")

    if "RESOURCE_EXHAUSTED" in text or "429" in text:
        return GenerationError(FailureKind.QUOTA_EXCEEDED, QUOTA_MESSAGE)

    message = _embedded_error_message(text)
    if message:
        return GenerationError(FailureKind.SERVICE_ERROR, f"API Error: {message}")

    if text:
        return GenerationError(
            FailureKind.UNKNOWN, f"An error occurred while trying to {context}: {text}"
        )
    return GenerationError(
        FailureKind.UNKNOWN, f"An API error occurred while trying to {context}."
    )
