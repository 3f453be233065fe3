"""Tests for the nested HTTP client used by reactions and jobs."""

import json

import httpx
import pytest

from agent_hub.core.agent_client import AgentChatClient
from agent_hub.core.errors import AgentCallError


def _client(handler):
    return AgentChatClient("http://agents.internal/", transport=httpx.MockTransport(handler))


class TestChat:
    @pytest.mark.asyncio
    async def test_posts_single_user_message(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"message": "On it.", "toolEvents": []})

        reply = await _client(handler).chat("engineering", "Check the build queue")

        assert reply == "On it."
        assert seen["url"] == "http://agents.internal/v1/agent/chat"
        assert seen["body"] == {
            "department": "engineering",
            "messages": [{"role": "user", "content": "Check the build queue"}],
        }

    @pytest.mark.asyncio
    async def test_error_status_raises_with_status_prefix(self):
        def handler(request):
            return httpx.Response(502, text="Completion endpoint unavailable")

        with pytest.raises(AgentCallError) as exc_info:
            await _client(handler).chat("ceo", "brief")

        assert str(exc_info.value).startswith("HTTP 502: ")
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(AgentCallError, match="connection refused"):
            await _client(handler).chat("ceo", "brief")


class TestReact:
    @pytest.mark.asyncio
    async def test_forwards_event_body(self):
        event = {"type": "deal.closed", "toAgents": ["Engineering AI"], "payload": {}}

        def handler(request):
            assert request.url.path == "/v1/agent/react"
            assert json.loads(request.content) == event
            return httpx.Response(200, json={"reacted": 1, "total": 1, "results": []})

        summary = await _client(handler).react(event)

        assert summary["reacted"] == 1

    @pytest.mark.asyncio
    async def test_bad_request_raises(self):
        def handler(request):
            return httpx.Response(400, json={"detail": "type and toAgents are required"})

        with pytest.raises(AgentCallError, match="HTTP 400"):
            await _client(handler).react({})
