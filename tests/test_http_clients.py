"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from glowtrack.adapters.openai_chat_client import HttpxChatClient
from glowtrack.errors import ApiError, ConfigError, ParseError

_PAYLOAD: dict[str, object] = {
    "model": "gpt-4o-mini",
    "messages": [{"role": "user", "content": "Analyze"}],
    "max_tokens": 100,
    "temperature": 0.3,
}


def _client(
    handler, api_key: str | None = "secret"
) -> tuple[HttpxChatClient, httpx.AsyncClient]:
    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxChatClient(
        api_key=api_key,
        base_url="https://api.test/v1/",
        http_client=async_client,
    )
    return client, async_client


def test_chat_client_posts_payload_and_returns_content() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"choices": [{"message": {"role": "assistant", "content": "{}"}}]},
        )

    client, _ = _client(handler)

    content = asyncio.run(client.complete(_PAYLOAD))

    assert content == "{}"
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer secret"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content.decode()) == _PAYLOAD


@pytest.mark.parametrize("api_key", [None, "", "   "])
def test_chat_client_requires_api_key(api_key: str | None) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    client, _ = _client(handler, api_key=api_key)

    with pytest.raises(ConfigError):
        asyncio.run(client.complete(_PAYLOAD))
    assert calls == []


def test_chat_client_non_200_raises_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"message": "slow down"}})

    client, _ = _client(handler)

    with pytest.raises(ApiError) as excinfo:
        asyncio.run(client.complete(_PAYLOAD))
    assert excinfo.value.status_code == 429


@pytest.mark.parametrize(
    "body",
    [
        {"choices": []},
        {"choices": [{"message": {}}]},
        {"choices": [{"message": {"content": None}}]},
        {"id": "chatcmpl-1"},
    ],
)
def test_chat_client_missing_content_raises_api_error(body: dict) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    client, _ = _client(handler)

    with pytest.raises(ApiError):
        asyncio.run(client.complete(_PAYLOAD))


def test_chat_client_undecodable_body_raises_parse_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>gateway</html>")

    client, _ = _client(handler)

    with pytest.raises(ParseError):
        asyncio.run(client.complete(_PAYLOAD))


@pytest.mark.parametrize(
    "error_type",
    [
        httpx.ConnectError,
        httpx.ReadTimeout,
        httpx.DecodingError,
        httpx.TooManyRedirects,
    ],
)
def test_chat_client_request_errors_raise_api_error(error_type) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise error_type("request failed", request=request)

    client, _ = _client(handler)

    with pytest.raises(ApiError) as excinfo:
        asyncio.run(client.complete(_PAYLOAD))
    assert excinfo.value.status_code is None


def test_chat_client_close() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    client, async_client = _client(handler)

    asyncio.run(client.close())

    assert async_client.is_closed
