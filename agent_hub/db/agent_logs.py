"""Agent conversation and tool execution audit records."""

from datetime import datetime, timezone  # noqa: UP035
from typing import Any

from supabase import Client

from agent_hub.core.logging import get_logger

logger = get_logger(__name__)


def _utc_now_iso() -> str:
    """Get current UTC time as ISO string."""
    return datetime.now(timezone.utc).isoformat()  # noqa: UP017


def save_conversation(
    supabase: Client,
    department: str,
    user_message: str,
    assistant_message: str,
    tool_events: list[dict[str, Any]],
) -> None:
    """
    Persist one completed conversation turn.

    Raises:
        Exception: If database operation fails
    """
    try:
        supabase.table("agent_conversations").insert(
            {
                "department": department,
                "user_message": user_message,
                "assistant_message": assistant_message,
                "tool_events": tool_events,
                "created_at": _utc_now_iso(),
            }
        ).execute()
    except Exception as e:
        logger.error(f"Failed to save conversation: {e}", extra={"department": department})
        raise


def log_tool_execution(
    supabase: Client,
    department: str,
    tool_name: str,
    tool_input: Any,
    tool_output: Any,
    duration_ms: int,
    is_error: bool = False,
) -> None:
    """
    Record one tool execution.

    Raises:
        Exception: If database operation fails
    """
    try:
        supabase.table("agent_tool_logs").insert(
            {
                "department": department,
                "tool_name": tool_name,
                "input": tool_input,
                "output": tool_output,
                "duration_ms": duration_ms,
                "is_error": is_error,
                "created_at": _utc_now_iso(),
            }
        ).execute()
    except Exception as e:
        logger.error(f"Failed to log tool {tool_name}: {e}", extra={"department": department})
        raise
