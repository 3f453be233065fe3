"""Artifact tools: build plans, demos and workflow JSON generated for tickets."""

import asyncio
import json
from datetime import datetime, timezone  # noqa: UP035
from typing import Any

import httpx
from supabase import Client

from agent_hub.agents.types import Tool
from agent_hub.core.config import get_settings
from agent_hub.core.json_extract import JsonExtractionError, extract_json
from agent_hub.core.logging import get_logger
from agent_hub.db.supabase_client import run_query

logger = get_logger(__name__)

TICKET_FILES_BUCKET = "ticket-files"


async def _get_artifacts(params: dict[str, Any], supabase: Client) -> dict[str, Any]:
    response = await run_query(
        supabase.table("ticket_artifacts")
        .select("*")
        .eq("ticket_id", params["ticket_id"])
        .order("created_at", desc=True)
    )
    artifacts = response.data or []
    return {"artifacts": artifacts, "count": len(artifacts)}


async def _trigger_rebuild(params: dict[str, Any], supabase: Client) -> dict[str, Any]:
    ticket_id = params["ticket_id"]

    await run_query(
        supabase.table("tickets")
        .update(
            {
                "status": "BUILDING",
                "updated_at": datetime.now(timezone.utc).isoformat(),  # noqa: UP017
            }
        )
        .eq("id", ticket_id)
    )

    settings = get_settings()
    if not settings.BUILD_SERVICE_URL:
        logger.info(f"Ticket {ticket_id} moved to BUILDING; no build service configured")
        return {
            "success": True,
            "ticket_id": ticket_id,
            "queued": True,
            "note": "Ticket moved to BUILDING; artifacts will regenerate when the build service picks it up",
        }

    async with httpx.AsyncClient(timeout=60) as client:
        response = await client.post(settings.BUILD_SERVICE_URL, json={"ticket_id": ticket_id})

    try:
        result = response.json()
    except ValueError:
        result = {}
    if not isinstance(result, dict):
        result = {}

    if response.status_code >= 400:
        detail = result.get("error") or response.text[:200] or "Unknown error"
        raise RuntimeError(f"Rebuild failed: HTTP {response.status_code}: {detail}")

    logger.info(f"Rebuild triggered for ticket {ticket_id}")
    return {
        "success": True,
        "ticket_id": ticket_id,
        "artifacts_created": len(result.get("artifacts") or []),
        "template_matched": result.get("template_matched"),
    }


async def _get_workflow_json(params: dict[str, Any], supabase: Client) -> dict[str, Any]:
    ticket_id = params["ticket_id"]
    response = await run_query(
        supabase.table("ticket_artifacts")
        .select("*")
        .eq("ticket_id", ticket_id)
        .eq("artifact_type", "workflow_json")
        .order("created_at", desc=True)
        .limit(1)
    )
    artifacts = response.data or []
    if not artifacts:
        return {"workflow": None, "message": "No workflow JSON artifact found for this ticket"}

    artifact = artifacts[0]
    raw = await asyncio.to_thread(
        supabase.storage.from_(TICKET_FILES_BUCKET).download, artifact["file_path"]
    )
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else str(raw)

    try:
        workflow = json.loads(text)
    except json.JSONDecodeError:
        # Generated artifacts sometimes carry fences or prose around the object
        try:
            workflow = extract_json(text)
        except JsonExtractionError:
            workflow = None

    result = {
        "artifact_id": artifact.get("id"),
        "file_name": artifact.get("file_name"),
        "created_at": artifact.get("created_at"),
        "metadata": artifact.get("metadata"),
        "workflow": workflow,
    }
    if workflow is None:
        result["raw"] = text[:2000]
    return result


ARTIFACT_TOOLS: tuple[Tool, ...] = (
    Tool(
        name="get_artifacts",
        description="List all AI-generated artifacts (build plan, solution demo, workflow JSON) for a ticket.",
        input_schema={
            "type": "object",
            "properties": {
                "ticket_id": {"type": "string", "description": "UUID of the ticket to get artifacts for"},
            },
            "required": ["ticket_id"],
        },
        execute=_get_artifacts,
    ),
    Tool(
        name="trigger_rebuild",
        description="Trigger a rebuild (regenerate all AI artifacts) for a ticket. The ticket must be in a state that allows rebuilding.",
        input_schema={
            "type": "object",
            "properties": {
                "ticket_id": {"type": "string", "description": "UUID of the ticket to rebuild"},
            },
            "required": ["ticket_id"],
        },
        execute=_trigger_rebuild,
    ),
    Tool(
        name="get_workflow_json",
        description="Retrieve the workflow JSON content for a ticket (the importable automation file).",
        input_schema={
            "type": "object",
            "properties": {
                "ticket_id": {"type": "string", "description": "UUID of the ticket"},
            },
            "required": ["ticket_id"],
        },
        execute=_get_workflow_json,
    ),
)
