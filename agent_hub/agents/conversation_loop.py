"""Agentic tool-calling conversation loop for department agents.

One run drives a bounded request/response cycle with the completion endpoint:

    AWAITING_MODEL -> (EXECUTING_TOOLS -> AWAITING_MODEL)* -> DONE

Tool invocations requested in one response execute concurrently and their
results are fed back as a single user message keyed by ``tool_use_id``. The
number of completion calls is capped (default 8) independent of any
wall-clock deadline.
"""

from __future__ import annotations

import asyncio
import json
import time
from typing import Any, Protocol

from agent_hub.agents.registry import ToolRegistry
from agent_hub.agents.types import ConversationResult, ToolEvent
from agent_hub.core.background import BackgroundTaskRunner
from agent_hub.core.errors import InvalidInput, ToolNotFound
from agent_hub.core.llm import CompletionResponse
from agent_hub.core.logging import get_logger
from agent_hub.db.agent_logs import log_tool_execution, save_conversation

logger = get_logger(__name__)

MAX_ITERATIONS = 8

_ROLES = {"user", "assistant"}


class CompletionBackend(Protocol):
    async def create(
        self,
        system: str,
        tools: list[dict[str, Any]],
        messages: list[dict[str, Any]],
    ) -> CompletionResponse: ...


def validate_history(history: Any) -> list[dict[str, Any]]:
    """
    Check that a conversation history can start a run.

    Raises:
        InvalidInput: If history is empty, malformed, or does not end with a user turn
    """
    if not isinstance(history, list) or not history:
        raise InvalidInput("messages must be a non-empty list")

    for i, message in enumerate(history):
        if not isinstance(message, dict):
            raise InvalidInput(f"messages[{i}] must be an object")
        if message.get("role") not in _ROLES:
            raise InvalidInput(f"messages[{i}].role must be 'user' or 'assistant'")
        content = message.get("content")
        if not content or not isinstance(content, (str, list)):
            raise InvalidInput(f"messages[{i}].content must be non-empty text or blocks")

    if history[-1]["role"] != "user":
        raise InvalidInput("the last message must have role 'user'")

    return [{"role": m["role"], "content": m["content"]} for m in history]


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    return "\n".join(
        b.get("text", "") for b in content if isinstance(b, dict) and b.get("type") == "text"
    )


class ConversationLoop:
    """Runs one agent turn: model call, tool calls, repeat until done."""

    def __init__(
        self,
        completion: CompletionBackend,
        registry: ToolRegistry,
        supabase: Any,
        background: BackgroundTaskRunner,
        max_iterations: int = MAX_ITERATIONS,
    ):
        self.completion = completion
        self.registry = registry
        self.supabase = supabase
        self.background = background
        self.max_iterations = max_iterations

    async def run(self, department: str, history: list[dict[str, Any]]) -> ConversationResult:
        """
        Run the conversation loop for a department.

        Args:
            department: Department whose system prompt and tools to use
            history: Messages ending with a user turn (not mutated)

        Returns:
            ConversationResult with the final text and tool events

        Raises:
            UnknownDepartment: If the department has no configuration
            InvalidInput: If history is malformed
            UpstreamUnavailable: If the completion endpoint fails
        """
        config = self.registry.get_config(department)
        messages = validate_history(history)
        tool_declarations = self.registry.tool_declarations(department)

        logger.info(
            f"Starting {config.name} turn with {len(messages)} messages, "
            f"{len(tool_declarations)} tools",
            extra={"department": department},
        )

        tool_events: list[ToolEvent] = []
        final_text = ""
        iterations = 0
        done = False

        while iterations < self.max_iterations:
            iterations += 1

            response = await self.completion.create(
                system=config.system_prompt,
                tools=tool_declarations,
                messages=messages,
            )

            tool_use_blocks = response.tool_use_blocks
            text_blocks = response.text_blocks

            logger.debug(
                f"Iteration {iterations}: stop_reason={response.stop_reason}, "
                f"blocks={len(response.content)}, tool_calls={len(tool_use_blocks)}",
                extra={"department": department},
            )

            # Last response with text wins
            if text_blocks:
                final_text = "\n".join(b.get("text", "") for b in text_blocks)

            if response.stop_reason == "end_turn" or not tool_use_blocks:
                done = True
                break

            messages.append({"role": "assistant", "content": response.content})

            tool_results = await asyncio.gather(
                *[self._execute_tool_call(department, block, tool_events) for block in tool_use_blocks]
            )

            messages.append({"role": "user", "content": list(tool_results)})

        if not done:
            logger.warning(
                f"Iteration cap ({self.max_iterations}) reached with tool calls pending",
                extra={"department": department},
            )

        logger.info(
            f"Done after {iterations} iteration(s): {len(tool_events)} tool call(s), "
            f"{len(final_text)} chars",
            extra={"department": department},
        )

        self.background.submit_blocking(
            f"save_conversation:{department}",
            save_conversation,
            self.supabase,
            department,
            _content_text(history[-1]["content"]),
            final_text,
            [e.model_dump(mode="json") for e in tool_events],
        )

        return ConversationResult(
            final_text=final_text,
            tool_events=tool_events,
            iterations=iterations,
            hit_iteration_cap=not done,
        )

    async def _execute_tool_call(
        self,
        department: str,
        block: dict[str, Any],
        tool_events: list[ToolEvent],
    ) -> dict[str, Any]:
        """Execute one tool-use block; never raises."""
        tool_name = block.get("name", "")
        tool_input = block.get("input")
        start = time.monotonic()

        try:
            tool = self.registry.get_tool(department, tool_name)
            params = tool.check_input(tool_input)
            result = await tool.execute(params, self.supabase)
            content = json.dumps(result, default=str)
            is_error = False
        except ToolNotFound as e:
            logger.warning("Unknown tool requested", extra={"department": department, "tool_name": tool_name})
            result = {"error": str(e)}
            content = json.dumps(result)
            is_error = True
        except Exception as e:
            logger.error(f"Tool failed: {e}", extra={"department": department, "tool_name": tool_name})
            result = {"error": str(e)}
            content = json.dumps(result)
            is_error = True

        duration_ms = int((time.monotonic() - start) * 1000)
        tool_events.append(
            ToolEvent(
                tool_name=tool_name,
                tool_input=tool_input,
                tool_result=result,
                duration_ms=duration_ms,
                is_error=is_error,
            )
        )

        self.background.submit_blocking(
            f"tool_log:{tool_name}",
            log_tool_execution,
            self.supabase,
            department,
            tool_name,
            tool_input,
            json.loads(content),
            duration_ms,
            is_error,
        )

        tool_result: dict[str, Any] = {
            "type": "tool_result",
            "tool_use_id": block.get("id"),
            "content": content,
        }
        if is_error:
            tool_result["is_error"] = True
        return tool_result
