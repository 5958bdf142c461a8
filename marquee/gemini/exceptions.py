from __future__ import annotations


class RouterConfigurationError(ValueError):
    """
    Raised when route_gemini_request is called with inputs that can never
    succeed (empty model priority, blank API key).

    This signals caller misconfiguration; runtime backend failures are
    reported through GeminiRouterResponse instead.
    """


__all__ = ["RouterConfigurationError"]
