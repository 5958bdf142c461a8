#!/usr/bin/env python
"""Manual smoke test: send one prompt through the Gemini fallback router."""

from __future__ import annotations

import asyncio
import json
from getpass import getpass

from marquee.gemini import (
    DEFAULT_MODEL_PRIORITY,
    FLASH_LITE_PRIORITY,
    GenerationRequest,
    extract_gemini_text,
    route_gemini_request,
)
from marquee.logging_config import setup_logging
from marquee.settings import settings


def _prompt(label: str, *, secret: bool = False, default: str | None = None) -> str:
    suffix = f" [{default}]" if default else ""
    text = (
        getpass(f"{label}{suffix}: ") if secret else input(f"{label}{suffix}: ")
    ).strip()
    if not text and default is not None:
        return default
    if not text:
        raise SystemExit(f"{label} must not be empty")
    return text


async def main() -> None:
    setup_logging()

    api_key = settings.gemini_api_key or _prompt("Gemini API key", secret=True)
    message = _prompt("Prompt", default="Name a cozy movie night row in 3 words.")
    chain_choice = _prompt("Chain (default/fast)", default="default").lower()
    chain = FLASH_LITE_PRIORITY if chain_choice.startswith("f") else DEFAULT_MODEL_PRIORITY

    request = GenerationRequest.from_prompt(message, temperature=0.7, max_output_tokens=1024)
    result = await route_gemini_request(request, api_key, chain)

    print(json.dumps(result.metadata.model_dump(by_alias=True), ensure_ascii=False, indent=2))
    if result.success:
        print(extract_gemini_text(result.data) or "<no text in response>")
    else:
        print(f"Router failed: {result.error}")


if __name__ == "__main__":
    asyncio.run(main())
