"""Types for department agents and their tools."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

from agent_hub.core.errors import ToolInputError

ToolExecutor = Callable[[dict[str, Any], Any], Awaitable[Any]]


@dataclass(frozen=True)
class Tool:
    """A capability exposed to the model for one department."""

    name: str
    description: str
    input_schema: dict[str, Any]
    execute: ToolExecutor

    def declaration(self) -> dict[str, Any]:
        """Tool definition in Messages API format."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }

    def check_input(self, params: Any) -> dict[str, Any]:
        """Validate model-supplied input against the schema's required keys."""
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise ToolInputError(f"{self.name} expects an object input")
        missing = [k for k in self.input_schema.get("required", []) if k not in params]
        if missing:
            raise ToolInputError(f"{self.name} missing required field(s): {', '.join(missing)}")
        return params


@dataclass(frozen=True)
class AgentConfig:
    """System prompt and tool set for one department."""

    department: str
    name: str
    role: str
    system_prompt: str
    tools: tuple[Tool, ...] = ()
    suggested_actions: tuple[str, ...] = field(default_factory=tuple)


class ToolEvent(BaseModel):
    """Record of one tool execution inside a conversation turn."""

    tool_name: str
    tool_input: Any = None
    tool_result: Any = None
    duration_ms: int = 0
    is_error: bool = False


class ConversationResult(BaseModel):
    """Outcome of one ConversationLoop run."""

    final_text: str = ""
    tool_events: list[ToolEvent] = Field(default_factory=list)
    iterations: int = 0
    hit_iteration_cap: bool = False
