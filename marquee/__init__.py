"""
Marquee AI service.

This package contains:
- settings: configuration read from the environment / .env
- logging_config: shared logging setup
- errors: standard HTTP error payloads
- deps: FastAPI dependencies (HTTP client, Gemini key, naming quota)
- rate_limiter: per-user sliding-window quota for AI features
- prompts: prompt builders and reply cleaning for the AI features
- gemini: multi-model Gemini fallback router
- api: feature endpoints that consume the router
- routes: FastAPI app factory
"""
