"""
Gemini multi-model fallback router.

Tries Gemini models in priority order and falls back to the next model when
one is rate limited. Any other failure stops the pass and is reported as is.
When every model of a pass was rate limited, the router waits a fixed
cooldown and walks the whole chain exactly once more.

Every invocation is independent: no quota memory is shared between calls,
so concurrent requests may each pay the cooldown.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import httpx

from .classifier import GeminiRateLimited, GeminiSuccess
from .client import call_gemini_model
from .exceptions import RouterConfigurationError
from .models import (
    GeminiRouterResponse,
    GenerationRequest,
    ModelAttempt,
    RouterMetadata,
)
from ..logging_config import logger
from ..settings import settings


# Balanced order: best quality first, most powerful (lowest quota) last.
DEFAULT_MODEL_PRIORITY = (
    "gemini-2.5-flash",
    "gemini-2.5-flash-lite",
    "gemini-2.0-flash",
    "gemini-2.0-flash-lite",
    "gemini-2.5-pro",
)

# Speed-first order for high-frequency callers such as row naming;
# flash-lite carries the largest daily quota.
FLASH_LITE_PRIORITY = (
    "gemini-2.5-flash-lite",
    "gemini-2.5-flash",
    "gemini-2.0-flash-lite",
    "gemini-2.0-flash",
    "gemini-2.5-pro",
)

RATE_LIMIT_COOLDOWN_SECONDS = 7.0
RATE_LIMIT_EXHAUSTED_MESSAGE = (
    "The system is temporarily busy due to rate limits. Please try again soon."
)
MAX_PASSES = 2

RequestLike = Union[GenerationRequest, Mapping[str, Any]]


@dataclass
class _PassResult:
    attempts: List[ModelAttempt] = field(default_factory=list)
    data: Optional[Dict[str, Any]] = None
    chosen_model: Optional[str] = None
    hard_error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.chosen_model is not None


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


async def _cooldown(seconds: float) -> None:
    await asyncio.sleep(seconds)


def _request_body(request: RequestLike) -> Dict[str, Any]:
    if isinstance(request, GenerationRequest):
        return request.to_body()
    if isinstance(request, Mapping):
        return dict(request)
    raise RouterConfigurationError(
        f"request must be a GenerationRequest or a mapping, got {type(request).__name__}"
    )


async def _try_models(
    client: httpx.AsyncClient,
    body: Dict[str, Any],
    api_key: str,
    pass_number: int,
    model_priority: Sequence[str],
) -> _PassResult:
    """
    Run one pass over the chain. Stops at the first success or the first
    non rate-limit failure.
    """
    result = _PassResult()

    for model in model_priority:
        logger.info(
            "gemini_router: pass %d trying %s (config=%s)",
            pass_number,
            model,
            body.get("generationConfig"),
        )
        start = time.perf_counter()
        outcome = await call_gemini_model(client, model, body, api_key)
        duration_ms = _elapsed_ms(start)

        if isinstance(outcome, GeminiSuccess):
            result.attempts.append(
                ModelAttempt(model_name=model, duration_ms=duration_ms, was_rate_limited=False)
            )
            logger.info("gemini_router: success with %s (%dms)", model, duration_ms)
            result.data = outcome.payload
            result.chosen_model = model
            return result

        rate_limited = isinstance(outcome, GeminiRateLimited)
        result.attempts.append(
            ModelAttempt(
                model_name=model,
                duration_ms=duration_ms,
                was_rate_limited=rate_limited,
                error_message=outcome.message,
            )
        )

        if rate_limited:
            logger.warning(
                "gemini_router: rate limit hit on %s (%dms), falling back to next model",
                model,
                duration_ms,
            )
            continue

        logger.error(
            "gemini_router: error on %s (%dms, status=%s): %s",
            model,
            duration_ms,
            outcome.status_code,
            outcome.message,
        )
        result.hard_error = outcome.message
        return result

    logger.warning("gemini_router: all models rate-limited on pass %d", pass_number)
    return result


def _finish(
    started: float,
    attempts: List[ModelAttempt],
    *,
    data: Optional[Dict[str, Any]] = None,
    chosen_model: Optional[str] = None,
    error: Optional[str] = None,
) -> GeminiRouterResponse:
    return GeminiRouterResponse(
        success=chosen_model is not None,
        data=data,
        error=error,
        metadata=RouterMetadata(
            chosen_model=chosen_model,
            total_duration_ms=_elapsed_ms(started),
            attempts=attempts,
        ),
    )


async def _route(
    client: httpx.AsyncClient,
    body: Dict[str, Any],
    api_key: str,
    model_priority: Sequence[str],
) -> GeminiRouterResponse:
    started = time.perf_counter()
    logger.info(
        "gemini_router: starting request with fallback chain (priority_model=%s, models=%d)",
        model_priority[0],
        len(model_priority),
    )

    attempts: List[ModelAttempt] = []
    for pass_number in range(1, MAX_PASSES + 1):
        if pass_number > 1:
            logger.warning(
                "gemini_router: all models rate-limited, waiting %.0f seconds before retry",
                RATE_LIMIT_COOLDOWN_SECONDS,
            )
            await _cooldown(RATE_LIMIT_COOLDOWN_SECONDS)

        result = await _try_models(client, body, api_key, pass_number, model_priority)
        attempts.extend(result.attempts)

        if result.success:
            return _finish(
                started, attempts, data=result.data, chosen_model=result.chosen_model
            )
        if result.hard_error is not None:
            return _finish(started, attempts, error=result.hard_error)

    logger.error("gemini_router: all models still rate-limited after retry")
    return _finish(started, attempts, error=RATE_LIMIT_EXHAUSTED_MESSAGE)


async def route_gemini_request(
    request: RequestLike,
    api_key: str,
    model_priority: Sequence[str] = DEFAULT_MODEL_PRIORITY,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> GeminiRouterResponse:
    """
    Generate content with automatic model fallback.

    Args:
        request: generateContent body, forwarded verbatim to every attempt.
        api_key: Gemini API key, forwarded verbatim.
        model_priority: ordered model ids, defaults to DEFAULT_MODEL_PRIORITY.
        client: optional shared AsyncClient; a short-lived one is opened
            otherwise.

    Returns a GeminiRouterResponse for every backend outcome. Raises
    RouterConfigurationError only for an empty chain or a blank key.
    """
    models = tuple(model_priority)
    if not models:
        raise RouterConfigurationError("model_priority must contain at least one model")
    if not isinstance(api_key, str) or not api_key.strip():
        raise RouterConfigurationError("api_key must be a non-empty string")

    body = _request_body(request)

    if client is not None:
        return await _route(client, body, api_key, models)

    async with httpx.AsyncClient(timeout=settings.upstream_timeout) as owned_client:
        return await _route(owned_client, body, api_key, models)


def extract_gemini_text(data: Any) -> Optional[str]:
    """
    Pull the first candidate's first text part out of a generateContent
    payload. Returns None for any other shape.
    """
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    if isinstance(text, str) and text:
        return text
    return None


__all__ = [
    "DEFAULT_MODEL_PRIORITY",
    "FLASH_LITE_PRIORITY",
    "RATE_LIMIT_COOLDOWN_SECONDS",
    "RATE_LIMIT_EXHAUSTED_MESSAGE",
    "route_gemini_request",
    "extract_gemini_text",
]
