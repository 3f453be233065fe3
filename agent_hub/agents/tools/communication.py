"""Communication tools: email, Slack and calendar.

Slack and calendar integrations are not wired up yet; those tools log the
intent and return a mock confirmation so agents can still complete a task.
"""

import time
from datetime import datetime, timezone  # noqa: UP035
from typing import Any

import httpx
from supabase import Client

from agent_hub.agents.types import Tool
from agent_hub.core.config import get_settings
from agent_hub.core.logging import get_logger
from agent_hub.db.supabase_client import run_query

logger = get_logger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()  # noqa: UP017


def _email_html(body: str) -> str:
    return (
        '<div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">'
        '<div style="background: #1A1A2E; padding: 20px 24px;">'
        '<h2 style="color: white; margin: 0; font-size: 18px;">MANAGE AI</h2></div>'
        f'<div style="padding: 28px 24px; border: 1px solid #E8E8F0;">{body.replace(chr(10), "<br/>")}</div>'
        '<div style="padding: 14px; text-align: center; font-size: 12px; color: #999;">'
        "Sent by ManageAI Platform</div></div>"
    )


async def _send_email(params: dict[str, Any], supabase: Client) -> dict[str, Any]:
    start = time.monotonic()
    to, subject, body = params["to"], params["subject"], params["body"]
    settings = get_settings()
    logger.info(f"send_email to={to} subject={subject!r} body={len(body)} chars")

    if not settings.RESEND_API_KEY:
        return {
            "success": True,
            "message": f'[DEMO MODE] Would send email to {to}: "{subject}"',
            "demo_mode": True,
            "duration_ms": int((time.monotonic() - start) * 1000),
        }

    async with httpx.AsyncClient(timeout=15) as client:
        response = await client.post(
            RESEND_EMAILS_URL,
            headers={"Authorization": f"Bearer {settings.RESEND_API_KEY}"},
            json={"from": settings.EMAIL_FROM, "to": to, "subject": subject, "html": _email_html(body)},
        )

    if response.status_code >= 400:
        logger.error(f"Resend rejected email to {to}: {response.status_code}")
        return {
            "success": False,
            "error": f"Email provider returned {response.status_code}: {response.text[:200]}",
            "duration_ms": int((time.monotonic() - start) * 1000),
        }

    email_id = response.json().get("id")

    try:
        await run_query(
            supabase.table("email_notifications").insert(
                {"to_email": to, "subject": subject, "status": "sent", "sent_at": _now_iso()}
            )
        )
    except Exception as e:
        logger.debug(f"Email notification record failed (non-fatal): {e}")

    return {
        "success": True,
        "message": f"Email sent to {to}",
        "email_id": email_id,
        "duration_ms": int((time.monotonic() - start) * 1000),
    }


async def _send_slack_message(params: dict[str, Any], supabase: Client) -> dict[str, Any]:
    channel, message = params["channel"], params["message"]
    logger.info(f"send_slack_message intent: channel={channel} message={message[:100]!r}")
    return {
        "success": True,
        "ts": f"{time.time():.6f}",
        "channel": channel,
        "sent_at": _now_iso(),
        "note": "Slack message logged (Slack integration not yet configured)",
    }


async def _create_calendar_event(params: dict[str, Any], supabase: Client) -> dict[str, Any]:
    attendees = params.get("attendees") or []
    logger.info(
        f"create_calendar_event intent: title={params['title']!r} date={params['date']} "
        f"attendees={len(attendees)}"
    )
    return {
        "success": True,
        "event_id": f"mock-event-{int(time.time() * 1000)}",
        "title": params["title"],
        "date": params["date"],
        "attendees": attendees,
        "description": params.get("description", ""),
        "created_at": _now_iso(),
        "note": "Calendar event logged (calendar integration not yet configured)",
    }


SEND_EMAIL = Tool(
    name="send_email",
    description="Send an email to the specified recipient with a clear subject line and professional plain-text body. Without a configured email provider the intent is logged instead.",
    input_schema={
        "type": "object",
        "properties": {
            "to": {"type": "string", "description": "Recipient email address"},
            "subject": {"type": "string", "description": "Email subject line"},
            "body": {
                "type": "string",
                "description": "Email body text. Use \\n for line breaks. Write as professional plain text.",
            },
        },
        "required": ["to", "subject", "body"],
    },
    execute=_send_email,
)

SEND_SLACK_MESSAGE = Tool(
    name="send_slack_message",
    description="Send a message to a Slack channel. Currently logs the intent and returns a mock confirmation.",
    input_schema={
        "type": "object",
        "properties": {
            "channel": {
                "type": "string",
                "description": 'Slack channel name (e.g. "#general", "#sales", "@username")',
            },
            "message": {"type": "string", "description": "Message text to send"},
        },
        "required": ["channel", "message"],
    },
    execute=_send_slack_message,
)

CREATE_CALENDAR_EVENT = Tool(
    name="create_calendar_event",
    description="Create a calendar event. Currently logs the intent and returns a mock confirmation.",
    input_schema={
        "type": "object",
        "properties": {
            "title": {"type": "string", "description": "Event title"},
            "date": {"type": "string", "description": "Event date and time in ISO 8601 format"},
            "attendees": {
                "type": "array",
                "items": {"type": "string"},
                "description": "List of attendee email addresses",
            },
            "description": {"type": "string", "description": "Optional event description or agenda"},
        },
        "required": ["title", "date"],
    },
    execute=_create_calendar_event,
)

COMMUNICATION_TOOLS: tuple[Tool, ...] = (SEND_EMAIL, SEND_SLACK_MESSAGE, CREATE_CALENDAR_EVENT)
