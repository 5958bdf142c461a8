from __future__ import annotations

from typing import List, Optional

import httpx
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..deps import get_gemini_api_key, get_http_client
from ..gemini import (
    GenerationRequest,
    RouterMetadata,
    extract_gemini_text,
    route_gemini_request,
)
from ..logging_config import logger
from ..prompts import (
    DEFAULT_COLOR,
    DEFAULT_EMOJI,
    build_style_prompt,
    parse_style_reply,
    sanitize_titles,
)


router = APIRouter(tags=["ai-features"])


class StyleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Collection name")
    content_titles: List[str] = Field(default_factory=list, alias="contentTitles")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be empty")
        if len(value) > 100:
            raise ValueError("name must be at most 100 characters")
        return value


class StyleResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    emoji: str
    color: str
    reasoning: Optional[str] = None
    fallback: bool = False
    error: Optional[str] = None
    meta: RouterMetadata = Field(..., alias="_meta")


@router.post(
    "/api/emoji-color-picker",
    response_model=StyleResponse,
    response_model_exclude_none=True,
)
async def pick_emoji_and_color(
    payload: StyleRequest,
    api_key: str = Depends(get_gemini_api_key),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> StyleResponse:
    """
    Suggest an emoji and colour for a collection from its name and titles.
    """
    titles = sanitize_titles(payload.content_titles)
    request = GenerationRequest.from_prompt(
        build_style_prompt(payload.name, titles),
        temperature=0.7,
        max_output_tokens=500,
    )

    logger.info("style_picker: sending request to gemini router")
    result = await route_gemini_request(request, api_key, client=client)

    if not result.success:
        logger.error("style_picker: router failed, using defaults: %s", result.error)
        return StyleResponse(
            emoji=DEFAULT_EMOJI,
            color=DEFAULT_COLOR,
            fallback=True,
            error=result.error,
            meta=result.metadata,
        )

    parsed = parse_style_reply(extract_gemini_text(result.data))
    if parsed is None:
        logger.warning("style_picker: unparsable reply from %s", result.metadata.chosen_model)
        return StyleResponse(
            emoji=DEFAULT_EMOJI,
            color=DEFAULT_COLOR,
            fallback=True,
            error="AI reply could not be parsed",
            meta=result.metadata,
        )

    return StyleResponse(**parsed, meta=result.metadata)


__all__ = ["router", "StyleRequest", "StyleResponse"]
