"""Completion endpoint adapter for the Anthropic Messages API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from anthropic import APIError, AsyncAnthropic

from agent_hub.core.errors import UpstreamUnavailable
from agent_hub.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CompletionResponse:
    """Normalized model response: stop reason plus content blocks as dicts."""

    stop_reason: str | None
    content: list[dict[str, Any]] = field(default_factory=list)
    model: str | None = None
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def text_blocks(self) -> list[dict[str, Any]]:
        return [b for b in self.content if b.get("type") == "text"]

    @property
    def tool_use_blocks(self) -> list[dict[str, Any]]:
        return [b for b in self.content if b.get("type") == "tool_use"]


def _block_to_dict(block: Any) -> dict[str, Any]:
    """Convert an SDK content block into a request-safe dict."""
    if isinstance(block, dict):
        return block
    block_type = getattr(block, "type", None)
    if block_type == "text":
        return {"type": "text", "text": block.text}
    if block_type == "tool_use":
        return {"type": "tool_use", "id": block.id, "name": block.name, "input": block.input}
    # Thinking and other block types are echoed back verbatim
    return block.model_dump(exclude_none=True)


class CompletionClient:
    """Thin async wrapper that issues one completion request per call.

    Failures are not retried here; retry policy belongs to the caller.
    """

    def __init__(self, client: AsyncAnthropic, model: str, max_tokens: int = 4096):
        self._client = client
        self.model = model
        self.max_tokens = max_tokens

    async def create(
        self,
        system: str,
        tools: list[dict[str, Any]],
        messages: list[dict[str, Any]],
    ) -> CompletionResponse:
        """
        Request one completion.

        Args:
            system: System prompt
            tools: Tool declarations (name, description, input_schema)
            messages: Conversation history in Messages API format

        Returns:
            CompletionResponse

        Raises:
            UpstreamUnavailable: If the API call fails
        """
        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system,
            "messages": messages,
        }
        if tools:
            kwargs["tools"] = tools

        try:
            response = await self._client.messages.create(**kwargs)
        except APIError as e:
            logger.error(f"Completion request failed: {e}")
            raise UpstreamUnavailable(f"Completion endpoint unavailable: {e}") from e

        usage = getattr(response, "usage", None)
        return CompletionResponse(
            stop_reason=response.stop_reason,
            content=[_block_to_dict(b) for b in response.content],
            model=getattr(response, "model", None),
            input_tokens=getattr(usage, "input_tokens", 0) or 0,
            output_tokens=getattr(usage, "output_tokens", 0) or 0,
        )
