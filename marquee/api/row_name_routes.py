from __future__ import annotations

from typing import List, Literal, Optional

import httpx
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ..deps import (
    get_client_key,
    get_gemini_api_key,
    get_http_client,
    get_naming_quota,
)
from ..errors import too_many_requests
from ..gemini import (
    FLASH_LITE_PRIORITY,
    GenerationRequest,
    RouterMetadata,
    extract_gemini_text,
    route_gemini_request,
)
from ..logging_config import logger
from ..prompts import build_row_name_prompt, clean_row_name, default_row_name
from ..rate_limiter import InMemoryQuota


router = APIRouter(tags=["ai-features"])


class RowNameRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    genres: List[int] = Field(..., min_length=1, description="Catalogue genre ids")
    genre_logic: Literal["AND", "OR"] = Field(..., alias="genreLogic")
    media_type: Literal["movie", "tv", "both"] = Field(..., alias="mediaType")


class RowNameResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    fallback: bool = Field(False, description="True when the name was not AI generated")
    error: Optional[str] = None
    meta: RouterMetadata = Field(..., alias="_meta")


@router.post(
    "/api/generate-row-name",
    response_model=RowNameResponse,
    response_model_exclude_none=True,
)
async def generate_row_name(
    payload: RowNameRequest,
    api_key: str = Depends(get_gemini_api_key),
    client_key: str = Depends(get_client_key),
    quota: InMemoryQuota = Depends(get_naming_quota),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> RowNameResponse:
    """
    Generate a short, witty name for a custom genre row.

    Uses the speed-first model chain. When every model fails the row still
    gets a plain genre-based name so the caller never has to handle an error.
    """
    quota_status = await quota.consume(client_key)
    if not quota_status.allowed:
        logger.info(
            "row_name: quota exhausted for %s (retry in %dms)",
            client_key,
            quota_status.retry_after_ms,
        )
        raise too_many_requests(
            "AI naming limit reached. Please try again later.",
            details={"retryAfterMs": quota_status.retry_after_ms},
        )

    request = GenerationRequest.from_prompt(
        build_row_name_prompt(payload.genres, payload.genre_logic, payload.media_type),
        temperature=0.9,
        # 2.5 models spend part of this budget on thinking tokens.
        max_output_tokens=5000,
    )
    result = await route_gemini_request(
        request, api_key, FLASH_LITE_PRIORITY, client=client
    )

    if not result.success:
        logger.error("row_name: router failed, using default name: %s", result.error)
        return RowNameResponse(
            name=default_row_name(payload.genres),
            fallback=True,
            error=result.error,
            meta=result.metadata,
        )

    return RowNameResponse(
        name=clean_row_name(extract_gemini_text(result.data)),
        meta=result.metadata,
    )


__all__ = ["router", "RowNameRequest", "RowNameResponse"]
