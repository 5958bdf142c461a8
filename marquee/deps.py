from typing import AsyncIterator

import httpx
from fastapi import Request

from .errors import service_unavailable
from .logging_config import logger
from .rate_limiter import InMemoryQuota
from .settings import settings


_naming_quota = InMemoryQuota(
    max_requests=settings.ai_naming_max_requests,
    window_seconds=settings.ai_naming_window_seconds,
)


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """
    Short-lived AsyncClient shared by all model attempts of one request.
    """
    async with httpx.AsyncClient(timeout=settings.upstream_timeout) as client:
        yield client


def get_gemini_api_key() -> str:
    """
    FastAPI dependency returning the configured Gemini key.

    A missing key is a deployment problem, so the feature reports 503
    instead of calling the router.
    """
    key = (settings.gemini_api_key or "").strip()
    if not key:
        logger.error("GEMINI_API_KEY not configured; AI features unavailable")
        raise service_unavailable("AI service unavailable")
    return key


def get_naming_quota() -> InMemoryQuota:
    return _naming_quota


def get_client_key(request: Request) -> str:
    """
    Identify the caller for quota purposes by network address.

    Nothing the client sends in a header is taken as identity. The
    X-Forwarded-For hop is used only when TRUST_FORWARDED_FOR says a
    reverse proxy in front of us sets it.
    """
    if settings.trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return f"ip:{first_hop}"
    host = request.client.host if request.client else "unknown"
    return f"ip:{host}"
