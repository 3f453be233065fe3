"""HTTP client for the service's own agent endpoints.

Reactions and scheduled jobs reach the conversation loop through
``POST /v1/agent/chat`` rather than an in-process call, so their deadlines are
expressed as request cancellation.
"""

from __future__ import annotations

from typing import Any

import httpx

from agent_hub.core.errors import AgentCallError
from agent_hub.core.logging import get_logger

logger = get_logger(__name__)

CHAT_PATH = "/v1/agent/chat"
REACT_PATH = "/v1/agent/react"


class AgentChatClient:
    """Calls the chat and react endpoints over HTTP."""

    def __init__(self, base_url: str, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        # Deadlines are owned by callers (asyncio.wait_for), not by httpx
        return httpx.AsyncClient(base_url=self.base_url, transport=self._transport, timeout=None)

    async def chat(self, department: str, prompt: str) -> str:
        """
        Run a single-turn conversation with a department agent.

        Args:
            department: Department whose agent should answer
            prompt: User message

        Returns:
            The agent's final text

        Raises:
            AgentCallError: On transport failure or a non-2xx response
        """
        body = {"department": department, "messages": [{"role": "user", "content": prompt}]}

        try:
            async with self._client() as client:
                response = await client.post(CHAT_PATH, json=body)
        except httpx.HTTPError as e:
            raise AgentCallError(f"agent/chat request failed: {e}") from e

        if response.status_code >= 400:
            raise AgentCallError(
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise AgentCallError(f"agent/chat returned invalid JSON: {e}") from e

        message = data.get("message") if isinstance(data, dict) else None
        return message if isinstance(message, str) else str(data)

    async def react(self, event: dict[str, Any]) -> dict[str, Any]:
        """
        Forward a published event to the reaction endpoint.

        Raises:
            AgentCallError: On transport failure or a non-2xx response
        """
        try:
            async with self._client() as client:
                response = await client.post(REACT_PATH, json=event)
        except httpx.HTTPError as e:
            raise AgentCallError(f"agent/react request failed: {e}") from e

        if response.status_code >= 400:
            raise AgentCallError(
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return response.json()
