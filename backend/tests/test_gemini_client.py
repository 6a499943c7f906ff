"""Tests for the single-attempt Gemini transport, using httpx.MockTransport."""
import json

import httpx
import pytest

from worksheetgen.errors import ConfigError, RemoteError
from worksheetgen.gemini_client import GeminiClient


def _client(handler, api_key="test-key") -> GeminiClient:
    transport = httpx.MockTransport(handler)
    return GeminiClient(api_key=api_key, model="gemini-test", http_client=httpx.AsyncClient(transport=transport))


def _ok(text="hello"):
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


class TestInvoke:
    @pytest.mark.asyncio
    async def test_posts_prompt_and_generation_config(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["url"] = request.url
            seen["body"] = json.loads(request.content)
            return _ok("worksheet text")

        client = _client(handler)
        assert await client.invoke("make a worksheet") == "worksheet text"
        await client.aclose()

        assert seen["url"].params["key"] == "test-key"
        assert seen["url"].path.endswith("/models/gemini-test:generateContent")
        assert seen["body"]["contents"] == [{"parts": [{"text": "make a worksheet"}]}]
        assert seen["body"]["generationConfig"]["temperature"] == 0.7
        assert seen["body"]["generationConfig"]["maxOutputTokens"] > 0

    @pytest.mark.asyncio
    async def test_missing_key_fails_fast_without_network(self):
        calls = []

        def handler(request):
            calls.append(request)
            return _ok()

        client = _client(handler, api_key="")
        with pytest.raises(ConfigError):
            await client.invoke("prompt")
        assert calls == []
        assert client.configured is False

    @pytest.mark.asyncio
    async def test_http_error_carries_status_and_upstream_message(self):
        client = _client(lambda r: httpx.Response(429, json={"error": {"message": "Quota exceeded"}}))
        with pytest.raises(RemoteError) as info:
            await client.invoke("prompt")
        assert info.value.status_code == 429
        assert "Quota exceeded" in str(info.value)

    @pytest.mark.asyncio
    async def test_http_error_without_json_body(self):
        client = _client(lambda r: httpx.Response(502, text="Bad Gateway"))
        with pytest.raises(RemoteError) as info:
            await client.invoke("prompt")
        assert info.value.status_code == 502

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"candidates": []},
        {"candidates": [{"content": {"parts": []}}]},
        {"promptFeedback": {"blockReason": "SAFETY"}},
    ])
    async def test_unexpected_envelope(self, body):
        client = _client(lambda r: httpx.Response(200, json=body))
        with pytest.raises(RemoteError):
            await client.invoke("prompt")

    @pytest.mark.asyncio
    async def test_network_failure_is_remote_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        client = _client(handler)
        with pytest.raises(RemoteError):
            await client.invoke("prompt")
