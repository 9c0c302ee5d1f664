"""Unit tests for the completion endpoint client"""

import json
import httpx
import pytest
from budget_notifier.domain.exceptions import (
    CompletionHTTPError,
    CompletionTimeoutError,
    CompletionTransportError,
    MalformedCompletionError,
    RateLimitError,
)
from budget_notifier.infrastructure.clients.completion import CompletionClient


def completion_body(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def make_client(handler, **kwargs) -> CompletionClient:
    return CompletionClient(
        base_url="https://ai.test/v1",
        api_key="test-key",
        model="test-model",
        backoff_base=0,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


async def test_complete_returns_trimmed_content():
    """Test request shape and response parsing"""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=completion_body("  Food \n"))

    client = make_client(handler)
    text = await client.complete([{"role": "user", "content": "hi"}], temperature=0.3, max_tokens=10)

    assert text == "Food"
    request = seen[0]
    assert request.url == "https://ai.test/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer test-key"
    payload = json.loads(request.content)
    assert payload == {
        "model": "test-model",
        "messages": [{"role": "user", "content": "hi"}],
        "temperature": 0.3,
        "max_tokens": 10,
    }


async def test_complete_omits_unset_sampling_parameters():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json=completion_body("ok"))

    await make_client(handler).complete([{"role": "user", "content": "hi"}])

    assert "temperature" not in seen[0]
    assert "max_tokens" not in seen[0]


async def test_null_content_is_empty_string():
    client = make_client(lambda request: httpx.Response(200, json=completion_body(None)))
    assert await client.complete([{"role": "user", "content": "hi"}]) == ""


async def test_rate_limit_retried_then_raised():
    """Test 429 is retried max_retries times before giving up"""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(429, text="<html>Too Many Requests</html>")

    client = make_client(handler, max_retries=2)
    with pytest.raises(RateLimitError):
        await client.complete([{"role": "user", "content": "hi"}])

    assert len(calls) == 3


async def test_server_error_then_success():
    responses = [httpx.Response(503), httpx.Response(200, json=completion_body("Housing"))]

    client = make_client(lambda request: responses.pop(0))

    assert await client.complete([{"role": "user", "content": "hi"}]) == "Housing"
    assert responses == []


async def test_client_error_not_retried():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(401, json={"error": "bad key"})

    with pytest.raises(CompletionHTTPError) as exc_info:
        await make_client(handler).complete([{"role": "user", "content": "hi"}])

    assert exc_info.value.status_code == 401
    assert len(calls) == 1


async def test_timeout_maps_to_completion_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(CompletionTimeoutError):
        await make_client(handler, max_retries=0).complete([{"role": "user", "content": "hi"}])


async def test_connection_error_maps_to_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(CompletionTransportError):
        await make_client(handler, max_retries=1).complete([{"role": "user", "content": "hi"}])


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"choices": []}),
        httpx.Response(200, json={"unexpected": True}),
    ],
)
async def test_malformed_payload(response):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return response

    with pytest.raises(MalformedCompletionError):
        await make_client(handler).complete([{"role": "user", "content": "hi"}])

    assert len(calls) == 1


def test_defaults_from_settings():
    """Test the 5s timeout and 2 retries apply out of the box"""
    client = CompletionClient()
    assert client.timeout == 5.0
    assert client.max_retries == 2
