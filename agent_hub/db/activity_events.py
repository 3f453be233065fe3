"""Activity feed database operations."""

from typing import Any

from supabase import Client

from agent_hub.core.logging import get_logger

logger = get_logger(__name__)


def insert_activity_event(
    supabase: Client,
    event_type: str,
    event_message: str | None,
    agent_name: str | None,
    metadata: dict[str, Any] | None = None,
    ticket_id: str | None = None,
    department: str | None = None,
) -> None:
    """
    Append a row to the shared activity log.

    Args:
        supabase: Supabase client
        event_type: Event type (e.g. "ticket.approved", "agent_reaction.deal.closed")
        event_message: Human-readable message or serialized payload
        agent_name: Agent (or "system") the entry is attributed to
        metadata: Additional structured context
        ticket_id: Related ticket, if any
        department: Department the entry belongs to, if any

    Raises:
        Exception: If database operation fails
    """
    row: dict[str, Any] = {
        "ticket_id": ticket_id,
        "event_type": event_type,
        "event_message": event_message,
        "agent_name": agent_name,
        "metadata": metadata or {},
    }
    if department:
        row["department"] = department

    try:
        supabase.table("activity_events").insert(row).execute()
    except Exception as e:
        logger.error(f"Failed to insert activity event {event_type}: {e}")
        raise


def list_activity_events(
    supabase: Client,
    department: str | None = None,
    limit: int = 20,
) -> list[dict[str, Any]]:
    """
    List recent activity events, newest first.

    Raises:
        Exception: If database operation fails
    """
    query = (
        supabase.table("activity_events")
        .select("*")
        .order("created_at", desc=True)
        .limit(limit)
    )
    if department:
        query = query.eq("department", department)

    response = query.execute()
    return response.data or []
