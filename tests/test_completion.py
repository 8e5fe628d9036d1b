"""Tests for the completion service client."""

import json

import httpx
import pytest

from bio_forge.core.completion import CompletionClient
from bio_forge.core.errors import CollaboratorFailure


def _client(handler) -> CompletionClient:
    return CompletionClient(
        api_key="sk-test",
        base_url="https://llm.example.com/v1/",
        model="test-model",
        max_tokens=500,
        transport=httpx.MockTransport(handler),
    )


def _ok(text="A biography.", tokens=17):
    return httpx.Response(
        200,
        json={
            "choices": [{"message": {"role": "assistant", "content": text}}],
            "usage": {"total_tokens": tokens},
        },
    )


class TestComplete:
    @pytest.mark.asyncio
    async def test_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["authorization"]
            seen["body"] = json.loads(request.content)
            return _ok()

        completion = await _client(handler).complete("system text", "user text")

        assert completion.text == "A biography."
        assert completion.tokens_used == 17
        assert seen["url"] == "https://llm.example.com/v1/chat/completions"
        assert seen["auth"] == "Bearer sk-test"
        assert seen["body"]["model"] == "test-model"
        assert seen["body"]["max_tokens"] == 500
        assert seen["body"]["messages"] == [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user text"},
        ]

    @pytest.mark.asyncio
    async def test_missing_usage_counts_zero(self):
        def handler(request):
            return httpx.Response(200, json={"choices": [{"message": {"content": "Text"}}]})

        completion = await _client(handler).complete("s", "p")
        assert completion.tokens_used == 0

    @pytest.mark.asyncio
    async def test_http_error(self):
        def handler(request):
            return httpx.Response(500, json={"error": "boom"})

        with pytest.raises(CollaboratorFailure, match="returned 500"):
            await _client(handler).complete("s", "p")

    @pytest.mark.asyncio
    async def test_rate_limited(self):
        def handler(request):
            return httpx.Response(429, json={"error": "slow down"})

        with pytest.raises(CollaboratorFailure, match="429"):
            await _client(handler).complete("s", "p")

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(CollaboratorFailure, match="call failed"):
            await _client(handler).complete("s", "p")

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        def handler(request):
            return httpx.Response(200, json={"choices": []})

        with pytest.raises(CollaboratorFailure, match="malformed"):
            await _client(handler).complete("s", "p")

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>gateway</html>")

        with pytest.raises(CollaboratorFailure):
            await _client(handler).complete("s", "p")

    @pytest.mark.asyncio
    async def test_empty_text(self):
        def handler(request):
            return _ok(text="   ")

        with pytest.raises(CollaboratorFailure, match="no text"):
            await _client(handler).complete("s", "p")

    @pytest.mark.asyncio
    async def test_non_numeric_token_count(self):
        def handler(request):
            return _ok(tokens="n/a")

        with pytest.raises(CollaboratorFailure, match="malformed"):
            await _client(handler).complete("s", "p")

    @pytest.mark.asyncio
    async def test_usage_not_an_object(self):
        def handler(request):
            return httpx.Response(
                200, json={"choices": [{"message": {"content": "Text"}}], "usage": [17]}
            )

        with pytest.raises(CollaboratorFailure, match="malformed"):
            await _client(handler).complete("s", "p")

    @pytest.mark.asyncio
    async def test_content_not_a_string(self):
        def handler(request):
            return _ok(text=["A", "biography"])

        with pytest.raises(CollaboratorFailure, match="malformed"):
            await _client(handler).complete("s", "p")
