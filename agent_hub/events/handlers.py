"""Reaction handler registry.

Maps event types to the agents that should react and how. Each handler names:
    department        -- which agent configuration answers
    agent_name        -- matched against event.toAgents
    generate_reaction -- builds the prompt sent to that agent
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from agent_hub.agents.registry import ToolRegistry
from agent_hub.events.types import AgentEvent, EventType


@dataclass(frozen=True)
class ReactionHandler:
    """Static (event type -> agent) reaction rule."""

    department: str
    agent_name: str
    generate_reaction: Callable[[AgentEvent], str]


def _p(event: AgentEvent, key: str) -> Any:
    value = event.payload.get(key)
    return "unknown" if value is None or value == "" else value


class HandlerRegistry:
    """Immutable table of reaction handlers keyed by event type."""

    def __init__(self, handlers: Mapping[EventType | str, Iterable[ReactionHandler]]):
        self._handlers = MappingProxyType(
            {EventType(k).value: tuple(v) for k, v in handlers.items()}
        )

    def handlers_for(self, event_type: EventType | str) -> tuple[ReactionHandler, ...]:
        key = event_type.value if isinstance(event_type, EventType) else event_type
        return self._handlers.get(key, ())

    def matching(self, event: AgentEvent) -> list[ReactionHandler]:
        """Handlers for the event's type whose agent is a recipient."""
        recipients = set(event.to_agents)
        return [h for h in self.handlers_for(event.type) if h.agent_name in recipients]

    @property
    def event_types(self) -> list[str]:
        return list(self._handlers)

    def check_agents(self, registry: ToolRegistry) -> None:
        """Raise ValueError if a handler names an agent the tool registry does not configure."""
        problems = []
        for event_type, handlers in self._handlers.items():
            for handler in handlers:
                config = registry.find_by_agent_name(handler.agent_name)
                if config is None:
                    problems.append(f"{event_type}: no agent named {handler.agent_name!r}")
                elif config.department != handler.department:
                    problems.append(
                        f"{event_type}: {handler.agent_name!r} belongs to {config.department}, "
                        f"not {handler.department}"
                    )
        if problems:
            raise ValueError("Reaction handlers out of sync with agents: " + "; ".join(problems))


DEFAULT_HANDLERS: dict[EventType, list[ReactionHandler]] = {
    EventType.DEAL_CLOSED: [
        ReactionHandler(
            department="engineering",
            agent_name="Engineering AI",
            generate_reaction=lambda e: (
                f"A new deal just closed: {_p(e, 'dealTitle')} for {_p(e, 'orgName')}. "
                "Check current build capacity and acknowledge the incoming ticket. "
                "Query the current build queue and report how many active builds are in progress."
            ),
        ),
        ReactionHandler(
            department="delivery",
            agent_name="Delivery AI",
            generate_reaction=lambda e: (
                f"New client coming: {_p(e, 'orgName')}. Prepare a delivery readiness check: "
                "what's current team capacity and when can we start their build?"
            ),
        ),
    ],
    EventType.TICKET_DEPLOYED: [
        ReactionHandler(
            department="delivery",
            agent_name="Delivery AI",
            generate_reaction=lambda e: (
                f"Build deployed for {_p(e, 'clientName')} on {_p(e, 'platform')}. "
                f"Begin monitoring phase: note the deployment URL ({_p(e, 'deployUrl')}) and "
                "set a reminder to check in with the client in 3 days."
            ),
        ),
        ReactionHandler(
            department="marketing",
            agent_name="Marketing AI",
            generate_reaction=lambda e: (
                f"New build completed and deployed for {_p(e, 'clientName')}. Draft a case study "
                "outline for this automation project. Keep it to 3 bullet points: the problem, "
                "the solution, and the expected impact."
            ),
        ),
    ],
    EventType.AUTOMATION_ERROR: [
        ReactionHandler(
            department="engineering",
            agent_name="Engineering AI",
            generate_reaction=lambda e: (
                f"URGENT: Deployed automation error detected. Workflow ID: {_p(e, 'workflowId')}. "
                f"Error: {_p(e, 'errorMessage')}. Diagnose the likely cause and suggest a fix."
            ),
        ),
    ],
    EventType.CLIENT_AT_RISK: [
        ReactionHandler(
            department="sales",
            agent_name="Sales AI",
            generate_reaction=lambda e: (
                f"Client {_p(e, 'clientName')} health score dropped to {_p(e, 'healthScore')}. "
                "Review their tickets and recent activity and draft a re-engagement check-in "
                "message for the account owner to send."
            ),
        ),
    ],
    EventType.TICKET_APPROVED: [
        ReactionHandler(
            department="engineering",
            agent_name="Engineering AI",
            generate_reaction=lambda e: (
                f"Ticket approved for {_p(e, 'clientName')} on platform {_p(e, 'platform')}. "
                f"Ticket ID: {_p(e, 'ticketId')}. Acknowledge this in the build queue and "
                "confirm it is ready for deployment."
            ),
        ),
        ReactionHandler(
            department="delivery",
            agent_name="Delivery AI",
            generate_reaction=lambda e: (
                f"Build approved for client {_p(e, 'clientName')} (ticket {_p(e, 'ticketId')}). "
                "Prepare delivery checklist for the upcoming deployment."
            ),
        ),
    ],
}


def build_handler_registry() -> HandlerRegistry:
    """Registry of the platform's default reaction handlers."""
    return HandlerRegistry(DEFAULT_HANDLERS)
