from __future__ import annotations

import json

import httpx
import pytest

from sportsapp.moderation.domain.groq_client import (
    APPROVED,
    GROQ_API_URL,
    SYSTEM_PROMPT,
    GroqClient,
)
from sportsapp.settings import GROQ_API_KEY_PLACEHOLDER


class RecordingTransport:
    def __init__(self, handler) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


def _completion(content) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _client(recorder: RecordingTransport, api_key: str = "gsk_test") -> GroqClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return GroqClient(api_key=api_key, model="llama-3.1-8b-instant", http=http, timeout=1.0)


@pytest.mark.asyncio
@pytest.mark.parametrize("api_key", ["", GROQ_API_KEY_PLACEHOLDER])
async def test_unconfigured_key_skips_network(api_key: str) -> None:
    recorder = RecordingTransport(lambda request: httpx.Response(200, json=_completion("BLOCKED: x")))
    client = _client(recorder, api_key=api_key)
    assert not client.configured
    assert await client.complete("anything") == APPROVED
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_request_shape_and_trimmed_reply() -> None:
    recorder = RecordingTransport(lambda request: httpx.Response(200, json=_completion("  BLOCKED: spam \n")))
    client = _client(recorder)

    reply = await client.complete("check this", max_tokens=64)

    assert reply == "BLOCKED: spam"
    assert len(recorder.requests) == 1
    request = recorder.requests[0]
    assert request.method == "POST"
    assert str(request.url) == GROQ_API_URL
    assert request.headers["Authorization"] == "Bearer gsk_test"
    body = json.loads(request.content)
    assert body == {
        "model": "llama-3.1-8b-instant",
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": "check this"},
        ],
        "max_tokens": 64,
        "temperature": 0.3,
    }


@pytest.mark.asyncio
async def test_default_max_tokens() -> None:
    recorder = RecordingTransport(lambda request: httpx.Response(200, json=_completion("APPROVED")))
    await _client(recorder).complete("check this")
    assert json.loads(recorder.requests[0].content)["max_tokens"] == 150


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 401, 429, 500, 503])
async def test_error_status_fails_open(status_code: int) -> None:
    recorder = RecordingTransport(lambda request: httpx.Response(status_code, json={"error": "nope"}))
    assert await _client(recorder).complete("check this") == APPROVED


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={}),
        httpx.Response(200, json={"choices": []}),
        httpx.Response(200, json={"choices": [{"message": {}}]}),
    ],
)
async def test_malformed_body_fails_open(response: httpx.Response) -> None:
    recorder = RecordingTransport(lambda request: response)
    assert await _client(recorder).complete("check this") == APPROVED


@pytest.mark.asyncio
async def test_null_content_reads_as_approved() -> None:
    recorder = RecordingTransport(lambda request: httpx.Response(200, json=_completion(None)))
    assert await _client(recorder).complete("check this") == APPROVED


@pytest.mark.asyncio
async def test_transport_error_fails_open() -> None:
    def _boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    recorder = RecordingTransport(_boom)
    assert await _client(recorder).complete("check this") == APPROVED
    assert len(recorder.requests) == 1


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open() -> None:
    http = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    client = GroqClient(api_key="gsk_test", http=http)
    await client.aclose()
    assert not http.is_closed
    await http.aclose()


@pytest.mark.asyncio
async def test_closed_injected_client_fails_open() -> None:
    recorder = RecordingTransport(lambda request: httpx.Response(200, json=_completion("BLOCKED: x")))
    http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    await http.aclose()
    client = GroqClient(api_key="gsk_test", http=http)

    assert await client.complete("check this") == APPROVED
    assert recorder.requests == []

