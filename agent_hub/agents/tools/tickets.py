"""Ticket tools: search, inspect and annotate automation build requests."""

import asyncio
import time
from collections import Counter
from datetime import datetime, timezone  # noqa: UP035
from typing import Any

from supabase import Client

from agent_hub.agents.types import Tool
from agent_hub.core.logging import get_logger
from agent_hub.db.supabase_client import run_query

logger = get_logger(__name__)

TICKET_STATUSES = (
    "SUBMITTED",
    "CONTEXT_PENDING",
    "ANALYZING",
    "QUESTIONS_PENDING",
    "BUILDING",
    "REVIEW_PENDING",
    "APPROVED",
    "DEPLOYED",
    "CLOSED",
)

_SUMMARY_COLUMNS = (
    "id, company_name, contact_name, contact_email, project_name, status, ticket_type, "
    "priority, what_to_build, created_at, updated_at"
)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


async def _search_tickets(params: dict[str, Any], supabase: Client) -> dict[str, Any]:
    start = time.monotonic()
    query = supabase.table("tickets").select(_SUMMARY_COLUMNS)

    if params.get("status"):
        query = query.eq("status", params["status"])
    if params.get("platform"):
        query = query.eq("ticket_type", params["platform"])
    if params.get("query"):
        text = params["query"]
        query = query.or_(
            f"company_name.ilike.%{text}%,project_name.ilike.%{text}%,what_to_build.ilike.%{text}%"
        )

    response = await run_query(query.order("created_at", desc=True).limit(20))
    tickets = response.data or []

    logger.debug(f"search_tickets returned {len(tickets)} results in {_elapsed_ms(start)}ms")
    return {"tickets": tickets, "count": len(tickets)}


async def _get_ticket(params: dict[str, Any], supabase: Client) -> dict[str, Any]:
    ticket_id = params["ticket_id"]

    ticket_resp, assets_resp, artifacts_resp = await asyncio.gather(
        run_query(supabase.table("tickets").select("*").eq("id", ticket_id).single()),
        run_query(supabase.table("ticket_assets").select("*").eq("ticket_id", ticket_id)),
        run_query(supabase.table("ticket_artifacts").select("*").eq("ticket_id", ticket_id)),
    )

    return {
        "ticket": ticket_resp.data,
        "assets": assets_resp.data or [],
        "artifacts": artifacts_resp.data or [],
    }


async def _update_ticket_note(params: dict[str, Any], supabase: Client) -> dict[str, Any]:
    ticket_id = params["ticket_id"]
    await run_query(
        supabase.table("tickets")
        .update(
            {
                "description": params["note"],
                "updated_at": datetime.now(timezone.utc).isoformat(),  # noqa: UP017
            }
        )
        .eq("id", ticket_id)
    )
    logger.info(f"Updated note on ticket {ticket_id}")
    return {"success": True, "ticket_id": ticket_id}


async def _get_ticket_stats(params: dict[str, Any], supabase: Client) -> dict[str, Any]:
    response = await run_query(
        supabase.table("tickets").select("status, ticket_type, priority, created_at")
    )
    tickets = response.data or []

    return {
        "total": len(tickets),
        "byStatus": dict(Counter(t.get("status") for t in tickets)),
        "byPlatform": dict(Counter(t.get("ticket_type") for t in tickets)),
        "byPriority": dict(Counter(t.get("priority") for t in tickets)),
    }


async def _list_recent_tickets(params: dict[str, Any], supabase: Client) -> dict[str, Any]:
    limit = min(int(params.get("limit") or 10), 50)
    response = await run_query(
        supabase.table("tickets")
        .select("id, company_name, project_name, status, ticket_type, priority, created_at, contact_name")
        .order("created_at", desc=True)
        .limit(limit)
    )
    tickets = response.data or []
    return {"tickets": tickets, "count": len(tickets)}


TICKET_TOOLS: tuple[Tool, ...] = (
    Tool(
        name="search_tickets",
        description="Search tickets by query text, status filter, or platform type. Returns matching tickets with key fields.",
        input_schema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Text to search in project name, company name, or what_to_build field",
                },
                "status": {
                    "type": "string",
                    "description": f"Filter by ticket status: {', '.join(TICKET_STATUSES)}",
                },
                "platform": {
                    "type": "string",
                    "description": "Filter by automation platform: n8n, make, or zapier",
                },
            },
        },
        execute=_search_tickets,
    ),
    Tool(
        name="get_ticket",
        description="Get full details for a specific ticket including its assets (uploaded files) and artifacts (AI-generated outputs).",
        input_schema={
            "type": "object",
            "properties": {
                "ticket_id": {"type": "string", "description": "The UUID of the ticket to retrieve"},
            },
            "required": ["ticket_id"],
        },
        execute=_get_ticket,
    ),
    Tool(
        name="update_ticket_note",
        description="Add or update a note/description on a ticket.",
        input_schema={
            "type": "object",
            "properties": {
                "ticket_id": {"type": "string", "description": "The UUID of the ticket to update"},
                "note": {
                    "type": "string",
                    "description": "The note content to save on the ticket description field",
                },
            },
            "required": ["ticket_id", "note"],
        },
        execute=_update_ticket_note,
    ),
    Tool(
        name="get_ticket_stats",
        description="Get aggregate counts of tickets grouped by status, platform, and priority.",
        input_schema={"type": "object", "properties": {}},
        execute=_get_ticket_stats,
    ),
    Tool(
        name="list_recent_tickets",
        description="List the most recent tickets, optionally limited to a certain count.",
        input_schema={
            "type": "object",
            "properties": {
                "limit": {
                    "type": "number",
                    "description": "Number of recent tickets to return (default: 10, max: 50)",
                },
            },
        },
        execute=_list_recent_tickets,
    ),
)
