"""Event bus: audit every event, fan out urgent/high ones to reactions."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Protocol

from agent_hub.core.background import BackgroundTaskRunner
from agent_hub.core.logging import get_logger
from agent_hub.db.activity_events import insert_activity_event
from agent_hub.events.types import AgentEvent

logger = get_logger(__name__)


class ReactTransport(Protocol):
    async def react(self, event: dict[str, Any]) -> dict[str, Any]: ...


class EventBus:
    """Publishes AgentEvents.

    Normal and low priority events are audit-only. Urgent and high priority
    events are also forwarded to the reaction endpoint in the background; the
    publisher never waits for reactions.
    """

    def __init__(self, supabase: Any, background: BackgroundTaskRunner, react_client: ReactTransport):
        self.supabase = supabase
        self.background = background
        self.react_client = react_client

    async def publish(self, event: AgentEvent) -> None:
        """Publish an event. Never raises; failures are logged only."""
        try:
            event_type = event.type.value
            try:
                await asyncio.to_thread(
                    insert_activity_event,
                    self.supabase,
                    event_type=event_type,
                    event_message=json.dumps(event.payload, default=str),
                    agent_name=event.from_agent,
                    metadata={
                        "toAgents": event.to_agents,
                        "priority": event.priority,
                        "payload": event.payload,
                    },
                    ticket_id=event.ticket_id,
                )
                logger.info(
                    f"{event_type} published from {event.from_agent} -> [{', '.join(event.to_agents)}]",
                    extra={"event_type": event_type},
                )
            except Exception as e:
                logger.error(f"Event audit insert failed: {e}", extra={"event_type": event_type})

            if event.is_reactive:
                self.background.submit(f"react:{event_type}", self._trigger_reactions(event))
        except Exception as e:
            logger.error(f"Unexpected error publishing event: {e}")

    async def _trigger_reactions(self, event: AgentEvent) -> None:
        event_type = event.type.value
        try:
            summary = await self.react_client.react(event.to_wire())
            logger.info(
                f"Reactions for {event_type}: {summary.get('reacted', 0)}/{summary.get('total', 0)}",
                extra={"event_type": event_type},
            )
        except Exception as e:
            logger.error(f"React trigger failed: {e}", extra={"event_type": event_type})
