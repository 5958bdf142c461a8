from .classifier import (
    GeminiHardError,
    GeminiRateLimited,
    GeminiSuccess,
    classify_gemini_response,
    is_rate_limit_error,
)
from .exceptions import RouterConfigurationError
from .models import (
    GeminiRouterResponse,
    GenerationConfig,
    GenerationRequest,
    ModelAttempt,
    RouterMetadata,
)
from .router import (
    DEFAULT_MODEL_PRIORITY,
    FLASH_LITE_PRIORITY,
    RATE_LIMIT_COOLDOWN_SECONDS,
    RATE_LIMIT_EXHAUSTED_MESSAGE,
    extract_gemini_text,
    route_gemini_request,
)

__all__ = [
    "DEFAULT_MODEL_PRIORITY",
    "FLASH_LITE_PRIORITY",
    "RATE_LIMIT_COOLDOWN_SECONDS",
    "RATE_LIMIT_EXHAUSTED_MESSAGE",
    "GeminiHardError",
    "GeminiRateLimited",
    "GeminiRouterResponse",
    "GeminiSuccess",
    "GenerationConfig",
    "GenerationRequest",
    "ModelAttempt",
    "RouterConfigurationError",
    "RouterMetadata",
    "classify_gemini_response",
    "extract_gemini_text",
    "is_rate_limit_error",
    "route_gemini_request",
]
