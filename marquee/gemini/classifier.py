"""
Gemini response classification.

Every backend reply is reduced to exactly one of three outcomes so the
fallback loop only has to branch three ways:

- GeminiSuccess: 2xx with a JSON payload
- GeminiRateLimited: quota / throttling, worth trying the next model
- GeminiHardError: anything else, stops the current pass
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


RATE_LIMIT_STATUS = 429
RESOURCE_EXHAUSTED = "RESOURCE_EXHAUSTED"
_RATE_LIMIT_MARKERS = ("rate limit", "quota")


@dataclass(frozen=True)
class GeminiSuccess:
    payload: Dict[str, Any]
    status_code: int = 200


@dataclass(frozen=True)
class GeminiRateLimited:
    status_code: Optional[int]
    message: str


@dataclass(frozen=True)
class GeminiHardError:
    status_code: Optional[int]
    message: str


GeminiOutcome = Union[GeminiSuccess, GeminiRateLimited, GeminiHardError]


def _error_object(body: Any) -> Dict[str, Any]:
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return body["error"]
    return {}


def extract_error_message(body: Any) -> Optional[str]:
    """
    Return ``body.error.message`` when it is a non-blank string.
    """
    msg = _error_object(body).get("message")
    if isinstance(msg, str) and msg.strip():
        return msg.strip()
    return None


def message_signals_rate_limit(message: Optional[str]) -> bool:
    if not message:
        return False
    lowered = message.lower()
    return any(marker in lowered for marker in _RATE_LIMIT_MARKERS)


def is_rate_limit_error(status_code: Optional[int], body: Any) -> bool:
    """
    Decide whether a failed call was throttled rather than broken.

    Rate limited when any of:
    - HTTP status is 429
    - error.code (or error.status, where Gemini puts the gRPC name) is RESOURCE_EXHAUSTED
    - error.message mentions "rate limit" or "quota", case-insensitively
    """
    if status_code == RATE_LIMIT_STATUS:
        return True

    error = _error_object(body)
    if RESOURCE_EXHAUSTED in (error.get("code"), error.get("status")):
        return True

    return message_signals_rate_limit(extract_error_message(body))


def classify_gemini_response(status_code: Optional[int], body: Any) -> GeminiOutcome:
    if status_code is not None and 200 <= status_code < 300:
        payload = body if isinstance(body, dict) else {}
        return GeminiSuccess(payload=payload, status_code=status_code)

    message = extract_error_message(body) or f"HTTP {status_code}"
    if is_rate_limit_error(status_code, body):
        return GeminiRateLimited(status_code=status_code, message=message)
    return GeminiHardError(status_code=status_code, message=message)


def classify_transport_error(exc: BaseException) -> GeminiOutcome:
    """
    Map a connection/timeout/decoding exception to an outcome. These are
    hard failures unless the exception text itself reports a quota problem.
    """
    message = str(exc) or exc.__class__.__name__
    if message_signals_rate_limit(message):
        return GeminiRateLimited(status_code=None, message=message)
    return GeminiHardError(status_code=None, message=message)


__all__ = [
    "GeminiSuccess",
    "GeminiRateLimited",
    "GeminiHardError",
    "GeminiOutcome",
    "RESOURCE_EXHAUSTED",
    "extract_error_message",
    "is_rate_limit_error",
    "classify_gemini_response",
    "classify_transport_error",
]
