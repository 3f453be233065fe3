"""Tests for the Anthropic completion adapter."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from anthropic import APIConnectionError

from agent_hub.core.errors import UpstreamUnavailable
from agent_hub.core.llm import CompletionClient


def _sdk_response(*blocks, stop_reason="end_turn"):
    return SimpleNamespace(
        stop_reason=stop_reason,
        content=list(blocks),
        model="claude-test",
        usage=SimpleNamespace(input_tokens=12, output_tokens=34),
    )


def _anthropic(response=None, error=None):
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=response, side_effect=error)
    return client


class TestCompletionClient:
    @pytest.mark.asyncio
    async def test_normalizes_blocks(self):
        response = _sdk_response(
            SimpleNamespace(type="text", text="Checking the queue."),
            SimpleNamespace(type="tool_use", id="tu_1", name="search_tickets", input={"status": "BUILDING"}),
            stop_reason="tool_use",
        )
        client = CompletionClient(_anthropic(response), model="claude-test", max_tokens=1024)

        result = await client.create(system="sys", tools=[{"name": "search_tickets"}], messages=[])

        assert result.stop_reason == "tool_use"
        assert result.text_blocks == [{"type": "text", "text": "Checking the queue."}]
        assert result.tool_use_blocks == [
            {"type": "tool_use", "id": "tu_1", "name": "search_tickets", "input": {"status": "BUILDING"}}
        ]
        assert (result.input_tokens, result.output_tokens) == (12, 34)

    @pytest.mark.asyncio
    async def test_tools_omitted_when_empty(self):
        anthropic = _anthropic(_sdk_response(SimpleNamespace(type="text", text="hi")))
        client = CompletionClient(anthropic, model="claude-test", max_tokens=1024)

        await client.create(system="sys", tools=[], messages=[{"role": "user", "content": "hi"}])

        kwargs = anthropic.messages.create.call_args.kwargs
        assert "tools" not in kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["max_tokens"] == 1024
        assert kwargs["system"] == "sys"

    @pytest.mark.asyncio
    async def test_api_error_becomes_upstream_unavailable(self):
        error = APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"))
        client = CompletionClient(_anthropic(error=error), model="claude-test")

        with pytest.raises(UpstreamUnavailable):
            await client.create(system="sys", tools=[], messages=[])
