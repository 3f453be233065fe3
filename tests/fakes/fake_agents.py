"""Fakes for agent loop, event and scheduler tests."""

import asyncio
import copy
from typing import Any, Dict, List
from unittest.mock import MagicMock

from agent_hub.core.errors import AgentCallError
from agent_hub.core.llm import CompletionResponse


def text_response(text: str, stop_reason: str = "end_turn") -> CompletionResponse:
    """Completion with a single text block."""
    return CompletionResponse(stop_reason=stop_reason, content=[{"type": "text", "text": text}])


def tool_use_response(*calls: tuple, text: str | None = None) -> CompletionResponse:
    """Completion requesting tools. Each call is ``(id, name, input)``."""
    content: List[Dict[str, Any]] = []
    if text is not None:
        content.append({"type": "text", "text": text})
    for call_id, name, tool_input in calls:
        content.append({"type": "tool_use", "id": call_id, "name": name, "input": tool_input})
    return CompletionResponse(stop_reason="tool_use", content=content)


class FakeCompletionClient:
    """Returns scripted responses in order and records every request."""

    def __init__(self, responses: List[Any]):
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    async def create(self, system, tools, messages) -> CompletionResponse:
        # The loop keeps appending to ``messages``; snapshot what was sent
        self.calls.append(
            {"system": system, "tools": copy.deepcopy(tools), "messages": copy.deepcopy(messages)}
        )
        if not self._responses:
            raise AssertionError("FakeCompletionClient ran out of scripted responses")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeChatClient:
    """Stands in for AgentChatClient.

    Args:
        replies: department -> reply text (default "ok from <department>")
        errors: department -> exception to raise
        delays: department -> seconds to sleep before replying
    """

    def __init__(self, replies=None, errors=None, delays=None, react_result=None):
        self.replies = replies or {}
        self.errors = errors or {}
        self.delays = delays or {}
        self.react_result = react_result or {"reacted": 0, "total": 0, "results": []}
        self.chat_calls: List[tuple] = []
        self.react_calls: List[Dict[str, Any]] = []
        self.cancelled: List[str] = []

    async def chat(self, department: str, prompt: str) -> str:
        self.chat_calls.append((department, prompt))
        try:
            if department in self.delays:
                await asyncio.sleep(self.delays[department])
        except asyncio.CancelledError:
            self.cancelled.append(department)
            raise
        if department in self.errors:
            raise self.errors[department]
        return self.replies.get(department, f"ok from {department}")

    async def react(self, event: Dict[str, Any]) -> Dict[str, Any]:
        self.react_calls.append(event)
        if isinstance(self.react_result, Exception):
            raise self.react_result
        return self.react_result


def http_error(status: int, text: str = "boom") -> AgentCallError:
    return AgentCallError(f"HTTP {status}: {text}", status_code=status)


def mock_supabase(execute_results=None, execute_error: Exception | None = None):
    """Supabase mock with chained query builder.

    Args:
        execute_results: Optional list of return values for successive
            .execute() calls (uses side_effect). When not provided,
            every .execute() returns ``MagicMock(data=[], count=0)``.
        execute_error: Raise this from every .execute() instead
    """
    sb = MagicMock()
    chain = MagicMock()
    if execute_error is not None:
        chain.execute.side_effect = execute_error
    elif execute_results is not None:
        chain.execute.side_effect = execute_results
    else:
        chain.execute.return_value = MagicMock(data=[], count=0)
    for method in ("eq", "in_", "or_", "gte", "order", "limit", "single", "select", "insert", "update"):
        getattr(chain, method).return_value = chain
    sb.table.return_value = chain
    return sb


def _chain(execute_error: Exception | None = None) -> MagicMock:
    chain = MagicMock()
    if execute_error is not None:
        chain.execute.side_effect = execute_error
    else:
        chain.execute.return_value = MagicMock(data=[{"id": "run-1"}], count=0)
    for method in ("eq", "in_", "or_", "gte", "order", "limit", "single", "select", "insert", "update"):
        getattr(chain, method).return_value = chain
    return chain


def table_recording_supabase(failing_tables=()):
    """Supabase mock with one query chain per table name.

    Returns:
        (supabase, chains) where ``chains[name]`` is that table's chain mock
    """
    chains: Dict[str, MagicMock] = {}

    def table(name: str) -> MagicMock:
        if name not in chains:
            error = RuntimeError(f"relation {name} does not exist") if name in failing_tables else None
            chains[name] = _chain(error)
        return chains[name]

    sb = MagicMock()
    sb.table.side_effect = table
    return sb, chains


def inserted_rows(chains: Dict[str, MagicMock], table: str) -> List[Dict[str, Any]]:
    """Rows passed to ``.insert()`` on a table."""
    chain = chains.get(table)
    if chain is None:
        return []
    return [c.args[0] for c in chain.insert.call_args_list]
