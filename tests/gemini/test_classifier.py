import httpx
import pytest

from marquee.gemini.classifier import (
    GeminiHardError,
    GeminiRateLimited,
    GeminiSuccess,
    classify_gemini_response,
    classify_transport_error,
    extract_error_message,
    is_rate_limit_error,
)


@pytest.mark.parametrize(
    "body",
    [
        {},
        None,
        "plain text",
        {"error": {"message": "something unrelated"}},
        {"error": {"code": 429}},
    ],
)
def test_status_429_is_rate_limited_regardless_of_body(body):
    assert is_rate_limit_error(429, body) is True


def test_resource_exhausted_code_is_rate_limited_on_any_status():
    assert is_rate_limit_error(500, {"error": {"code": "RESOURCE_EXHAUSTED"}}) is True


def test_resource_exhausted_status_field_is_rate_limited():
    body = {"error": {"code": 403, "status": "RESOURCE_EXHAUSTED", "message": "x"}}
    assert is_rate_limit_error(403, body) is True


@pytest.mark.parametrize(
    "message",
    [
        "Quota exceeded for quota metric 'Generate Content API requests'",
        "QUOTA EXCEEDED",
        "You hit the Rate Limit for this model",
        "rate limit reached",
    ],
)
def test_quota_or_rate_limit_wording_is_rate_limited(message):
    assert is_rate_limit_error(400, {"error": {"message": message}}) is True


def test_unrelated_server_error_is_not_rate_limited():
    body = {"error": {"code": 500, "message": "Internal error", "status": "INTERNAL"}}
    assert is_rate_limit_error(500, body) is False


def test_ratelimit_without_space_is_not_a_marker():
    assert is_rate_limit_error(400, {"error": {"message": "ratelimit"}}) is False


def test_success_status_yields_payload():
    payload = {"candidates": []}
    outcome = classify_gemini_response(200, payload)
    assert outcome == GeminiSuccess(payload=payload, status_code=200)


def test_hard_error_carries_backend_message():
    outcome = classify_gemini_response(
        400, {"error": {"code": 400, "message": "  Invalid argument  "}}
    )
    assert isinstance(outcome, GeminiHardError)
    assert outcome.status_code == 400
    assert outcome.message == "Invalid argument"


def test_missing_message_falls_back_to_http_status():
    outcome = classify_gemini_response(503, {})
    assert isinstance(outcome, GeminiHardError)
    assert outcome.message == "HTTP 503"

    outcome = classify_gemini_response(429, {})
    assert isinstance(outcome, GeminiRateLimited)
    assert outcome.message == "HTTP 429"


def test_extract_error_message_ignores_non_string_and_blank():
    assert extract_error_message({"error": {"message": 42}}) is None
    assert extract_error_message({"error": {"message": "   "}}) is None
    assert extract_error_message({"error": "flat string"}) is None
    assert extract_error_message(["not", "a", "dict"]) is None


def test_transport_error_is_hard_with_no_status():
    outcome = classify_transport_error(httpx.ReadTimeout("timed out"))
    assert outcome == GeminiHardError(status_code=None, message="timed out")


def test_transport_error_without_text_uses_class_name():
    outcome = classify_transport_error(httpx.ConnectError(""))
    assert isinstance(outcome, GeminiHardError)
    assert outcome.message == "ConnectError"


def test_transport_error_mentioning_quota_is_rate_limited():
    outcome = classify_transport_error(httpx.RemoteProtocolError("quota exceeded upstream"))
    assert isinstance(outcome, GeminiRateLimited)
    assert outcome.status_code is None
