"""Department agent endpoints: chat, reactions and event publishing."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field, ValidationError

from agent_hub.agents.types import ToolEvent
from agent_hub.api.deps import AgentServices, get_services
from agent_hub.core.errors import InvalidInput, UpstreamUnavailable
from agent_hub.core.logging import get_logger
from agent_hub.events.types import DispatchSummary, parse_agent_event

logger = get_logger(__name__)

router = APIRouter()


class ChatRequest(BaseModel):
    """Request to run one agent turn."""

    department: str = Field(..., min_length=1)
    messages: list[dict[str, Any]] = Field(..., min_length=1)


class ChatResponse(BaseModel):
    """Final agent text plus the tools it executed."""

    message: str
    tool_events: list[ToolEvent] = Field(default_factory=list, serialization_alias="toolEvents")


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        raise HTTPException(status_code=400, detail="Invalid JSON body") from e


@router.post("/chat", response_model=ChatResponse)
async def chat(request: Request, services: AgentServices = Depends(get_services)) -> ChatResponse:
    """
    Run the tool-calling conversation loop for a department agent.

    Raises:
        HTTPException 400: If the body is malformed or the department is unknown
        HTTPException 502: If the completion endpoint fails
        HTTPException 500: On unexpected errors
    """
    body = await _read_json(request)

    try:
        chat_request = ChatRequest.model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail="department and messages are required") from e

    try:
        result = await services.loop.run(chat_request.department, chat_request.messages)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except UpstreamUnavailable as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    except Exception as e:
        logger.exception(f"Agent chat failed for {chat_request.department}")
        raise HTTPException(status_code=500, detail="Agent chat failed") from e

    return ChatResponse(message=result.final_text, tool_events=result.tool_events)


@router.post("/react", response_model=DispatchSummary)
async def react(request: Request, services: AgentServices = Depends(get_services)) -> DispatchSummary:
    """
    Dispatch an event to every matching reaction handler.

    Always 200 once the event parses; per-agent failures are in ``results``.

    Raises:
        HTTPException 400: If the event is malformed
    """
    body = await _read_json(request)

    try:
        event = parse_agent_event(body)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return await services.dispatcher.dispatch(event)


@router.post("/events", status_code=202)
async def publish_event(request: Request, services: AgentServices = Depends(get_services)) -> dict:
    """Publish an event to the activity feed (and reactions for urgent/high)."""
    body = await _read_json(request)

    try:
        event = parse_agent_event(body)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    await services.bus.publish(event)
    return {"published": True}


@router.get("/departments")
async def list_departments(services: AgentServices = Depends(get_services)) -> dict:
    """Agent roster: name, role, tools and suggested actions per department."""
    departments = []
    for department in services.registry.departments:
        config = services.registry.get_config(department)
        departments.append(
            {
                "department": config.department,
                "name": config.name,
                "role": config.role,
                "tools": [t.name for t in config.tools],
                "suggestedActions": list(config.suggested_actions),
            }
        )
    return {"departments": departments}
