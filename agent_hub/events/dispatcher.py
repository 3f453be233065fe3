"""Reaction dispatcher: runs every matching handler for an event concurrently."""

from __future__ import annotations

import asyncio
from typing import Any, Protocol

from agent_hub.core.background import BackgroundTaskRunner
from agent_hub.core.logging import get_logger
from agent_hub.db.activity_events import insert_activity_event
from agent_hub.events.handlers import HandlerRegistry, ReactionHandler
from agent_hub.events.types import AgentEvent, DispatchSummary, ReactionOutcome

logger = get_logger(__name__)

REACTION_TIMEOUT_SECONDS = 30.0


class ChatTransport(Protocol):
    async def chat(self, department: str, prompt: str) -> str: ...


class ReactionDispatcher:
    """Fans an event out to the agents named in its recipients."""

    def __init__(
        self,
        handlers: HandlerRegistry,
        chat_client: ChatTransport,
        supabase: Any,
        background: BackgroundTaskRunner,
        timeout: float = REACTION_TIMEOUT_SECONDS,
    ):
        self.handlers = handlers
        self.chat_client = chat_client
        self.supabase = supabase
        self.background = background
        self.timeout = timeout

    async def dispatch(self, event: AgentEvent) -> DispatchSummary:
        """
        Run all handlers matching the event type and recipients.

        A failing or slow handler never affects its siblings; each yields
        exactly one outcome.

        Returns:
            DispatchSummary with one result per matched handler
        """
        event_type = event.type.value
        matched = self.handlers.matching(event)

        if not matched:
            logger.info(
                f"No handlers for {event_type} -> [{', '.join(event.to_agents)}]",
                extra={"event_type": event_type},
            )
            return DispatchSummary()

        logger.info(
            f"Dispatching {event_type} to {len(matched)} agent(s)",
            extra={"event_type": event_type},
        )

        raw = await asyncio.gather(
            *[self._react(handler, event) for handler in matched],
            return_exceptions=True,
        )

        results: list[ReactionOutcome] = []
        for handler, outcome in zip(matched, raw):
            if isinstance(outcome, BaseException):
                # _react handles its own errors; this only guards cancellation
                outcome = ReactionOutcome(
                    agent=handler.agent_name,
                    department=handler.department,
                    success=False,
                    error=str(outcome) or type(outcome).__name__,
                )
            results.append(outcome)

        reacted = sum(1 for r in results if r.success)
        logger.info(
            f"{event_type}: {reacted}/{len(results)} reactions succeeded",
            extra={"event_type": event_type},
        )
        return DispatchSummary(reacted=reacted, total=len(results), results=results)

    async def _react(self, handler: ReactionHandler, event: AgentEvent) -> ReactionOutcome:
        event_type = event.type.value
        prompt = ""

        try:
            prompt = handler.generate_reaction(event)
            response = await asyncio.wait_for(
                self.chat_client.chat(handler.department, prompt), timeout=self.timeout
            )
            outcome = ReactionOutcome(
                agent=handler.agent_name,
                department=handler.department,
                success=True,
                response_preview=response[:200],
            )
            audit_message = response
        except TimeoutError:
            error = f"timeout after {self.timeout:g}s"
            logger.warning(
                f"{handler.agent_name} reaction to {event_type} timed out",
                extra={"department": handler.department, "event_type": event_type},
            )
            outcome = ReactionOutcome(
                agent=handler.agent_name,
                department=handler.department,
                success=False,
                error=error,
                timed_out=True,
            )
            audit_message = error
        except Exception as e:
            logger.error(
                f"{handler.agent_name} reaction to {event_type} failed: {e}",
                extra={"department": handler.department, "event_type": event_type},
            )
            outcome = ReactionOutcome(
                agent=handler.agent_name,
                department=handler.department,
                success=False,
                error=str(e),
            )
            audit_message = str(e)

        self.background.submit_blocking(
            f"reaction_audit:{handler.department}",
            insert_activity_event,
            self.supabase,
            event_type=f"agent_reaction.{event_type}",
            event_message=audit_message[:500],
            agent_name=handler.agent_name,
            metadata={
                "trigger": event_type,
                "fromAgent": event.from_agent,
                "department": handler.department,
                "prompt": prompt[:200],
                "success": outcome.success,
            },
            ticket_id=event.ticket_id,
            department=handler.department,
        )
        return outcome
