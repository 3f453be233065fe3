"""Analytics tools: platform metrics, activity feed, department KPIs."""

import asyncio
from datetime import datetime, timedelta, timezone  # noqa: UP035
from typing import Any

from supabase import Client

from agent_hub.agents.types import Tool
from agent_hub.core.logging import get_logger
from agent_hub.db.activity_events import list_activity_events
from agent_hub.db.supabase_client import run_query

logger = get_logger(__name__)

COMPLETED_STATUSES = {"DEPLOYED", "CLOSED"}
IN_PROGRESS_STATUSES = {"ANALYZING", "QUESTIONS_PENDING", "BUILDING", "REVIEW_PENDING"}
ACTIVE_STATUSES = {"ANALYZING", "BUILDING", "REVIEW_PENDING", "APPROVED"}

# Rough pipeline value per ticket used by the executive summary
PIPELINE_VALUE_PER_TICKET = 5000

_TIMEFRAME_DAYS = {"7d": 7, "30d": 30}


def _now() -> datetime:
    return datetime.now(timezone.utc)  # noqa: UP017


def _parse_ts(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)  # noqa: UP017


def _completion_rate(tickets: list[dict[str, Any]]) -> int:
    if not tickets:
        return 0
    completed = sum(1 for t in tickets if t.get("status") in COMPLETED_STATUSES)
    return round(completed / len(tickets) * 100)


async def _get_platform_metrics(params: dict[str, Any], supabase: Client) -> dict[str, Any]:
    timeframe = params.get("timeframe") or "30d"

    query = supabase.table("tickets").select("id, status, ticket_type, priority, created_at, updated_at")
    days = _TIMEFRAME_DAYS.get(timeframe)
    if days:
        query = query.gte("created_at", (_now() - timedelta(days=days)).isoformat())

    response = await run_query(query)
    tickets = response.data or []

    by_platform = {"n8n": 0, "make": 0, "zapier": 0}
    for t in tickets:
        if t.get("ticket_type") in by_platform:
            by_platform[t["ticket_type"]] += 1

    return {
        "timeframe": timeframe,
        "total_tickets": len(tickets),
        "completed": sum(1 for t in tickets if t.get("status") in COMPLETED_STATUSES),
        "in_progress": sum(1 for t in tickets if t.get("status") in IN_PROGRESS_STATUSES),
        "completion_rate_pct": _completion_rate(tickets),
        "by_platform": by_platform,
    }


async def _get_agent_activity(params: dict[str, Any], supabase: Client) -> dict[str, Any]:
    limit = min(int(params.get("limit") or 20), 100)

    try:
        events = await asyncio.to_thread(list_activity_events, supabase, params.get("department"), limit)
    except Exception as e:
        # Activity log is optional in fresh environments
        logger.info(f"get_agent_activity: activity log unavailable: {e}")
        return {"events": [], "note": "Activity log not yet available"}

    return {"events": events, "count": len(events)}


async def _get_template_usage(params: dict[str, Any], supabase: Client) -> dict[str, Any]:
    try:
        response = await run_query(
            supabase.table("templates").select("id, name, category, platform, tags").limit(20)
        )
    except Exception as e:
        logger.info(f"get_template_usage: templates unavailable: {e}")
        return {"templates": [], "note": "Templates not yet available"}

    templates = response.data or []
    return {"templates": templates, "count": len(templates)}


async def _get_department_summary(params: dict[str, Any], supabase: Client) -> dict[str, Any]:
    department = params["department"]
    response = await run_query(
        supabase.table("tickets").select(
            "id, status, ticket_type, priority, created_at, company_name, project_name"
        )
    )
    tickets = response.data or []

    week_ago = _now() - timedelta(days=7)
    this_week = [t for t in tickets if (_parse_ts(t.get("created_at")) or week_ago) > week_ago]

    def count(statuses: set[str]) -> int:
        return sum(1 for t in tickets if t.get("status") in statuses)

    summary: dict[str, Any] = {"department": department, "total_tickets": len(tickets), "this_week": len(this_week)}

    if department == "ceo":
        summary.update(
            pipeline_value_estimate=len(tickets) * PIPELINE_VALUE_PER_TICKET,
            active_projects=count(ACTIVE_STATUSES),
            completion_rate=_completion_rate(tickets),
        )
    elif department == "sales":
        summary.update(
            new_leads=count({"SUBMITTED"}),
            in_proposal=count({"BUILDING", "REVIEW_PENDING"}),
            closed_won=count({"APPROVED", "DEPLOYED"}),
        )
    elif department == "engineering":
        summary.update(
            build_queue=count({"BUILDING"}),
            review_pending=count({"REVIEW_PENDING"}),
            deployed=count({"DEPLOYED"}),
        )
    elif department == "delivery":
        summary.update(
            approved_awaiting_deploy=count({"APPROVED"}),
            deployed=count({"DEPLOYED"}),
            closed=count({"CLOSED"}),
        )

    return summary


ANALYTICS_TOOLS: tuple[Tool, ...] = (
    Tool(
        name="get_platform_metrics",
        description="Get platform-wide metrics including ticket counts, platform mix, and completion rate for a given timeframe.",
        input_schema={
            "type": "object",
            "properties": {
                "timeframe": {
                    "type": "string",
                    "enum": ["7d", "30d", "all"],
                    "description": 'Time window: "7d", "30d", or "all". Default: "30d"',
                },
            },
        },
        execute=_get_platform_metrics,
    ),
    Tool(
        name="get_agent_activity",
        description="Get recent agent activity events from the activity log.",
        input_schema={
            "type": "object",
            "properties": {
                "department": {
                    "type": "string",
                    "description": "Filter by department (ceo, sales, marketing, product, engineering, delivery). Omit for all.",
                },
                "limit": {"type": "number", "description": "Number of events to return (default: 20)"},
            },
        },
        execute=_get_agent_activity,
    ),
    Tool(
        name="get_template_usage",
        description="Get the automation templates in the library with their category and platform.",
        input_schema={"type": "object", "properties": {}},
        execute=_get_template_usage,
    ),
    Tool(
        name="get_department_summary",
        description="Get a department-specific summary of KPIs and relevant ticket data.",
        input_schema={
            "type": "object",
            "properties": {
                "department": {
                    "type": "string",
                    "description": "Department to summarize: ceo, sales, marketing, product, engineering, or delivery",
                },
            },
            "required": ["department"],
        },
        execute=_get_department_summary,
    ),
)
