"""
Single-model call against the Gemini generateContent endpoint.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from .classifier import (
    GeminiHardError,
    GeminiOutcome,
    classify_gemini_response,
    classify_transport_error,
)
from ..logging_config import logger
from ..settings import settings


def build_generate_url(model: str, base_url: Optional[str] = None) -> str:
    base = (base_url or settings.gemini_base_url).rstrip("/")
    # Accept "models/gemini-2.5-flash" as well as the bare id.
    if model.startswith("models/"):
        model = model.split("/", 1)[1]
    return f"{base}/models/{model}:generateContent"


async def call_gemini_model(
    client: httpx.AsyncClient,
    model: str,
    body: Dict[str, Any],
    api_key: str,
    *,
    base_url: Optional[str] = None,
) -> GeminiOutcome:
    """
    POST one generateContent request and classify the reply.

    Never raises for upstream trouble: transport errors and undecodable
    bodies come back as outcomes like any HTTP error would.
    """
    url = build_generate_url(model, base_url)
    headers = {
        "Content-Type": "application/json",
        "x-goog-api-key": api_key,
    }

    try:
        resp = await client.post(url, json=body, headers=headers)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        # InvalidURL is not an HTTPError; a malformed model id lands here.
        logger.warning("gemini: transport error calling %s: %s", model, exc)
        return classify_transport_error(exc)

    try:
        data: Any = resp.json()
    except ValueError:
        if resp.is_success:
            return GeminiHardError(
                status_code=resp.status_code,
                message=f"Invalid JSON in Gemini response (HTTP {resp.status_code})",
            )
        # Error pages from proxies are often HTML; classify on status alone.
        data = {}

    return classify_gemini_response(resp.status_code, data)


__all__ = ["build_generate_url", "call_gemini_model"]
