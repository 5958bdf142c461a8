from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence, Union

import httpx

ScriptItem = Union[httpx.Response, Exception]


def gemini_ok(text: str = "hello") -> httpx.Response:
    return httpx.Response(
        200,
        json={"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]},
    )


def gemini_rate_limited(message: str = "Resource has been exhausted (e.g. check quota).") -> httpx.Response:
    return httpx.Response(
        429,
        json={"error": {"code": 429, "message": message, "status": "RESOURCE_EXHAUSTED"}},
    )


def gemini_error(status_code: int, message: str) -> httpx.Response:
    return httpx.Response(
        status_code,
        json={"error": {"code": status_code, "message": message, "status": "ERROR"}},
    )


class ScriptedGemini:
    """
    Fake generateContent backend.

    Each model gets a queue of responses (or exceptions to raise). Items are
    consumed in order; the last one repeats. Calls to unscripted models fail
    the test.
    """

    def __init__(self, script: Dict[str, Sequence[ScriptItem]]) -> None:
        self._script: Dict[str, List[ScriptItem]] = {m: list(r) for m, r in script.items()}
        self.calls: List[str] = []
        self.requests: List[httpx.Request] = []

    @staticmethod
    def model_from(request: httpx.Request) -> str:
        # /v1beta/models/<model>:generateContent
        return request.url.path.rsplit("/", 1)[-1].split(":", 1)[0]

    def handler(self, request: httpx.Request) -> httpx.Response:
        model = self.model_from(request)
        self.calls.append(model)
        self.requests.append(request)

        queue = self._script.get(model)
        if not queue:
            raise AssertionError(f"unexpected call to model {model!r}")
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def body_of(self, index: int) -> Dict[str, Any]:
        return json.loads(self.requests[index].content.decode("utf-8"))
