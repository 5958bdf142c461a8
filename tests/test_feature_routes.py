import json
from typing import Dict, Sequence

import pytest
from fastapi.testclient import TestClient

from marquee.deps import get_gemini_api_key, get_http_client, get_naming_quota
from marquee.gemini import FLASH_LITE_PRIORITY, RATE_LIMIT_EXHAUSTED_MESSAGE
from marquee.prompts import DEFAULT_COLOR, DEFAULT_EMOJI
from marquee.rate_limiter import InMemoryQuota
from marquee.routes import create_app
from tests.utils import ScriptedGemini, gemini_error, gemini_ok, gemini_rate_limited


def _make_client(
    backend: ScriptedGemini,
    *,
    api_key: str | None = "test-key",  # pragma: allowlist secret
    quota: InMemoryQuota | None = None,
) -> TestClient:
    app = create_app()
    naming_quota = quota if quota is not None else InMemoryQuota(max_requests=100, window_seconds=3600)

    async def _override_http_client():
        async with backend.client() as client:
            yield client

    app.dependency_overrides[get_http_client] = _override_http_client
    if api_key is not None:
        app.dependency_overrides[get_gemini_api_key] = lambda: api_key
    app.dependency_overrides[get_naming_quota] = lambda: naming_quota
    return TestClient(app)


def _script_all(models: Sequence[str], responses) -> Dict[str, list]:
    return {model: list(responses) for model in models}


def test_health_endpoint():
    client = _make_client(ScriptedGemini({}))
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_row_name_uses_flash_lite_first_and_cleans_reply(cooldown):
    backend = ScriptedGemini({FLASH_LITE_PRIORITY[0]: [gemini_ok('  "**No Skips**"  ')]})
    client = _make_client(backend)

    resp = client.post(
        "/api/generate-row-name",
        json={"genres": [28, 35], "genreLogic": "AND", "mediaType": "movie"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "No Skips"
    assert body["fallback"] is False
    assert "error" not in body
    assert body["_meta"]["chosenModel"] == "gemini-2.5-flash-lite"
    assert backend.calls == ["gemini-2.5-flash-lite"]

    sent = backend.body_of(0)
    assert sent["generationConfig"] == {"temperature": 0.9, "maxOutputTokens": 5000}
    prompt = sent["contents"][0]["parts"][0]["text"]
    assert "Action, Comedy" in prompt


def test_row_name_falls_back_through_chain(cooldown):
    backend = ScriptedGemini(
        {
            "gemini-2.5-flash-lite": [gemini_rate_limited()],
            "gemini-2.5-flash": [gemini_ok("Chef's Kiss")],
        }
    )
    client = _make_client(backend)

    resp = client.post(
        "/api/generate-row-name",
        json={"genres": [35], "genreLogic": "OR", "mediaType": "tv"},
    )

    body = resp.json()
    assert resp.status_code == 200
    assert body["name"] == "Chef's Kiss"
    attempts = body["_meta"]["attempts"]
    assert [a["modelName"] for a in attempts] == ["gemini-2.5-flash-lite", "gemini-2.5-flash"]
    assert attempts[0]["wasRateLimited"] is True


def test_row_name_uses_default_name_when_router_exhausted(cooldown):
    backend = ScriptedGemini(_script_all(FLASH_LITE_PRIORITY, [gemini_rate_limited()]))
    client = _make_client(backend)

    resp = client.post(
        "/api/generate-row-name",
        json={"genres": [27, 53, 18], "genreLogic": "AND", "mediaType": "both"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Horror & Thriller"
    assert body["fallback"] is True
    assert body["error"] == RATE_LIMIT_EXHAUSTED_MESSAGE
    assert "chosenModel" not in body["_meta"]
    assert len(body["_meta"]["attempts"]) == 2 * len(FLASH_LITE_PRIORITY)
    assert cooldown.delays == [7.0]


def test_row_name_hard_error_surfaces_message(cooldown):
    backend = ScriptedGemini({"gemini-2.5-flash-lite": [gemini_error(400, "API key not valid")]})
    client = _make_client(backend)

    resp = client.post(
        "/api/generate-row-name",
        json={"genres": [99], "genreLogic": "OR", "mediaType": "movie"},
    )

    body = resp.json()
    assert body["fallback"] is True
    assert body["name"] == "Documentary"
    assert body["error"] == "API key not valid"
    assert backend.calls == ["gemini-2.5-flash-lite"]


@pytest.mark.parametrize(
    "payload",
    [
        {"genreLogic": "AND", "mediaType": "movie"},
        {"genres": [], "genreLogic": "AND", "mediaType": "movie"},
        {"genres": [28], "genreLogic": "XOR", "mediaType": "movie"},
        {"genres": [28], "genreLogic": "AND", "mediaType": "anime"},
    ],
)
def test_row_name_invalid_body_is_400(payload):
    backend = ScriptedGemini({})
    client = _make_client(backend)

    resp = client.post("/api/generate-row-name", json=payload)

    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["error"] == "bad_request"
    assert detail["code"] == 400
    assert detail["details"]["errors"]
    assert backend.calls == []


def test_row_name_quota_exhausted_is_429(cooldown):
    backend = ScriptedGemini({"gemini-2.5-flash-lite": [gemini_ok("One")]})
    client = _make_client(backend, quota=InMemoryQuota(max_requests=1, window_seconds=60))
    payload = {"genres": [28], "genreLogic": "AND", "mediaType": "movie"}

    assert client.post("/api/generate-row-name", json=payload).status_code == 200
    resp = client.post("/api/generate-row-name", json=payload)

    assert resp.status_code == 429
    detail = resp.json()["detail"]
    assert detail["error"] == "too_many_requests"
    assert detail["details"]["retryAfterMs"] > 0
    assert backend.calls == ["gemini-2.5-flash-lite"]


def test_row_name_quota_ignores_client_supplied_identity(cooldown):
    backend = ScriptedGemini({"gemini-2.5-flash-lite": [gemini_ok("One")]})
    client = _make_client(backend, quota=InMemoryQuota(max_requests=1, window_seconds=60))
    payload = {"genres": [28], "genreLogic": "AND", "mediaType": "movie"}

    codes = [
        client.post(
            "/api/generate-row-name",
            json=payload,
            headers={"X-User-Id": f"u{i}", "X-Forwarded-For": f"10.0.0.{i}"},
        ).status_code
        for i in range(5)
    ]

    assert codes == [200, 429, 429, 429, 429]
    assert backend.calls == ["gemini-2.5-flash-lite"]


def test_row_name_quota_uses_forwarded_for_behind_trusted_proxy(cooldown, monkeypatch):
    import marquee.deps as deps

    monkeypatch.setattr(deps.settings, "trust_forwarded_for", True)
    backend = ScriptedGemini({"gemini-2.5-flash-lite": [gemini_ok("One")]})
    client = _make_client(backend, quota=InMemoryQuota(max_requests=1, window_seconds=60))
    payload = {"genres": [28], "genreLogic": "AND", "mediaType": "movie"}

    def post(forwarded: str) -> int:
        return client.post(
            "/api/generate-row-name", json=payload, headers={"X-Forwarded-For": forwarded}
        ).status_code

    assert post("203.0.113.5, 10.0.0.1") == 200
    assert post("203.0.113.5") == 429
    assert post("198.51.100.7") == 200


def test_missing_api_key_is_503(monkeypatch):
    import marquee.deps as deps

    monkeypatch.setattr(deps.settings, "gemini_api_key", "  ")
    backend = ScriptedGemini({})
    client = _make_client(backend, api_key=None)

    resp = client.post(
        "/api/emoji-color-picker", json={"name": "Spooky Season", "contentTitles": []}
    )

    assert resp.status_code == 503
    assert resp.json()["detail"]["error"] == "service_unavailable"
    assert backend.calls == []


def test_style_picker_returns_parsed_choice(cooldown):
    reply = json.dumps({"emoji": "👻", "color": "#8b5cf6", "reasoning": "Ghostly and moody."})
    backend = ScriptedGemini({"gemini-2.5-flash": [gemini_ok(f"```json\n{reply}\n```")]})
    client = _make_client(backend)

    resp = client.post(
        "/api/emoji-color-picker",
        json={"name": "  Spooky Season ", "contentTitles": ["Hereditary", "  ", "The Others"]},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["emoji"] == "👻"
    assert body["color"] == "#8b5cf6"
    assert body["reasoning"] == "Ghostly and moody."
    assert body["fallback"] is False
    assert body["_meta"]["chosenModel"] == "gemini-2.5-flash"

    sent = backend.body_of(0)
    assert sent["generationConfig"] == {"temperature": 0.7, "maxOutputTokens": 500}
    prompt = sent["contents"][0]["parts"][0]["text"]
    assert '"Spooky Season"' in prompt
    assert "Hereditary, The Others" in prompt


def test_style_picker_unparsable_reply_uses_defaults(cooldown):
    backend = ScriptedGemini({"gemini-2.5-flash": [gemini_ok("I think a ghost would be nice")]})
    client = _make_client(backend)

    resp = client.post("/api/emoji-color-picker", json={"name": "Spooky"})

    body = resp.json()
    assert resp.status_code == 200
    assert body["emoji"] == DEFAULT_EMOJI
    assert body["color"] == DEFAULT_COLOR
    assert body["fallback"] is True
    assert body["error"] == "AI reply could not be parsed"
    assert body["_meta"]["chosenModel"] == "gemini-2.5-flash"


def test_style_picker_router_failure_uses_defaults(cooldown):
    backend = ScriptedGemini({"gemini-2.5-flash": [gemini_error(500, "Internal error")]})
    client = _make_client(backend)

    resp = client.post("/api/emoji-color-picker", json={"name": "Laughs"})

    body = resp.json()
    assert resp.status_code == 200
    assert body["fallback"] is True
    assert body["error"] == "Internal error"
    assert body["emoji"] == DEFAULT_EMOJI


@pytest.mark.parametrize("name", ["", "   ", "x" * 101])
def test_style_picker_rejects_bad_names(name):
    backend = ScriptedGemini({})
    client = _make_client(backend)

    resp = client.post("/api/emoji-color-picker", json={"name": name})

    assert resp.status_code == 400
    assert resp.json()["detail"]["message"].startswith("name:")
    assert backend.calls == []
