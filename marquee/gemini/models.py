"""
Request/response models for the Gemini fallback router.

Attribute names are snake_case; the JSON form uses the camelCase keys the
frontend already reads from ``_meta`` (``chosenModel``, ``durationMs``, ...).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerationConfig(_CamelModel):
    """
    Generation parameters forwarded as ``generationConfig``.
    Extra keys (topP, stopSequences, ...) are passed through untouched.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    temperature: float = Field(..., description="Sampling temperature")
    max_output_tokens: int = Field(..., description="Upper bound on generated tokens", gt=0)
    response_mime_type: Optional[str] = Field(
        default=None, description="e.g. 'application/json' to force JSON output"
    )


class GenerationRequest(_CamelModel):
    """
    Opaque generateContent body: prompt contents plus generation parameters.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    contents: List[Dict[str, Any]] = Field(..., description="Gemini contents array")
    generation_config: GenerationConfig

    @classmethod
    def from_prompt(
        cls,
        prompt: str,
        *,
        temperature: float,
        max_output_tokens: int,
        response_mime_type: Optional[str] = None,
    ) -> "GenerationRequest":
        return cls(
            contents=[{"parts": [{"text": prompt}]}],
            generation_config=GenerationConfig(
                temperature=temperature,
                max_output_tokens=max_output_tokens,
                response_mime_type=response_mime_type,
            ),
        )

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ModelAttempt(_CamelModel):
    """
    One backend call made by the router. Immutable once recorded.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        protected_namespaces=(),
    )

    model_name: str = Field(..., description="Model identifier that was called")
    duration_ms: int = Field(..., description="Wall-clock duration of the call", ge=0)
    was_rate_limited: bool = Field(..., description="Failure classified as rate limit")
    error_message: Optional[str] = Field(
        default=None, description="Backend error text; absent on success"
    )


class RouterMetadata(_CamelModel):
    chosen_model: Optional[str] = Field(
        default=None, description="Model that produced the result, None on failure"
    )
    total_duration_ms: int = Field(..., description="Duration across all passes", ge=0)
    attempts: List[ModelAttempt] = Field(
        default_factory=list, description="Every attempt, in call order"
    )


class GeminiRouterResponse(_CamelModel):
    success: bool
    data: Optional[Dict[str, Any]] = Field(
        default=None, description="Raw generateContent payload when success"
    )
    error: Optional[str] = Field(default=None, description="Failure message when not success")
    metadata: RouterMetadata


__all__ = [
    "GenerationConfig",
    "GenerationRequest",
    "ModelAttempt",
    "RouterMetadata",
    "GeminiRouterResponse",
]
