"""Event pipeline schemas."""

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from agent_hub.core.errors import InvalidInput

Priority = Literal["urgent", "high", "normal", "low"]

REACTIVE_PRIORITIES: frozenset[str] = frozenset({"urgent", "high"})


class EventType(str, Enum):
    """Business events agents can react to."""

    DEAL_CLOSED = "deal.closed"
    TICKET_SUBMITTED = "ticket.submitted"
    TICKET_APPROVED = "ticket.approved"
    TICKET_DEPLOYED = "ticket.deployed"
    AUTOMATION_ERROR = "automation.error"
    CLIENT_AT_RISK = "client.at_risk"
    BUILD_COMPLETED = "build.completed"
    BUILD_FAILED = "build.failed"


class AgentEvent(BaseModel):
    """A business occurrence broadcast for potential agent reactions.

    Wire format is camelCase (``fromAgent``, ``toAgents``).
    """

    model_config = ConfigDict(populate_by_name=True)

    type: EventType
    payload: dict[str, Any] = Field(default_factory=dict)
    from_agent: str = Field(default="system", alias="fromAgent")
    to_agents: list[str] = Field(..., alias="toAgents")
    priority: Priority = "normal"

    @property
    def ticket_id(self) -> Optional[str]:
        value = self.payload.get("ticketId")
        return str(value) if value is not None else None

    @property
    def is_reactive(self) -> bool:
        return self.priority in REACTIVE_PRIORITIES

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ReactionOutcome(BaseModel):
    """Result of one reaction handler."""

    agent: str
    department: str
    success: bool
    error: Optional[str] = None
    timed_out: bool = Field(default=False, serialization_alias="timedOut")
    response_preview: Optional[str] = Field(default=None, serialization_alias="responsePreview")


class DispatchSummary(BaseModel):
    """Aggregate of all reactions to one event."""

    reacted: int = 0
    total: int = 0
    results: list[ReactionOutcome] = Field(default_factory=list)


def parse_agent_event(data: Any) -> AgentEvent:
    """
    Validate raw JSON into an AgentEvent.

    Raises:
        InvalidInput: If type or toAgents are missing or malformed
    """
    if not isinstance(data, dict):
        raise InvalidInput("event must be a JSON object")
    if not data.get("type") or not isinstance(data.get("toAgents"), list):
        raise InvalidInput("type and toAgents are required")

    try:
        return AgentEvent.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise InvalidInput(f"invalid event fields: {fields}") from e
