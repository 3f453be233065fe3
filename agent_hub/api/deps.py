"""Service container built once per process and injected into routes."""

from dataclasses import dataclass
from typing import Any

from anthropic import AsyncAnthropic
from fastapi import Request

from agent_hub.agents.configs import build_tool_registry
from agent_hub.agents.conversation_loop import ConversationLoop
from agent_hub.agents.registry import ToolRegistry
from agent_hub.core.agent_client import AgentChatClient
from agent_hub.core.background import BackgroundTaskRunner
from agent_hub.core.config import Settings
from agent_hub.core.llm import CompletionClient
from agent_hub.core.logging import get_logger
from agent_hub.db.supabase_client import get_supabase
from agent_hub.events.bus import EventBus
from agent_hub.events.dispatcher import ReactionDispatcher
from agent_hub.events.handlers import build_handler_registry
from agent_hub.scheduler.runner import ScheduledJobRunner

logger = get_logger(__name__)


@dataclass
class AgentServices:
    """Everything the routes need, constructed at startup."""

    settings: Settings
    supabase: Any
    background: BackgroundTaskRunner
    registry: ToolRegistry
    loop: ConversationLoop
    bus: EventBus
    dispatcher: ReactionDispatcher
    runner: ScheduledJobRunner


def build_services(settings: Settings) -> AgentServices:
    """Construct clients, registries and components from settings."""
    supabase = get_supabase()
    background = BackgroundTaskRunner(failure_alert_threshold=settings.AUDIT_FAILURE_ALERT_THRESHOLD)
    registry = build_tool_registry()
    handlers = build_handler_registry()
    handlers.check_agents(registry)

    completion = CompletionClient(
        AsyncAnthropic(api_key=settings.ANTHROPIC_API_KEY),
        model=settings.AGENT_MODEL,
        max_tokens=settings.AGENT_MAX_TOKENS,
    )
    chat_client = AgentChatClient(settings.APP_URL)

    services = AgentServices(
        settings=settings,
        supabase=supabase,
        background=background,
        registry=registry,
        loop=ConversationLoop(
            completion,
            registry,
            supabase,
            background,
            max_iterations=settings.AGENT_MAX_ITERATIONS,
        ),
        bus=EventBus(supabase, background, chat_client),
        dispatcher=ReactionDispatcher(
            handlers,
            chat_client,
            supabase,
            background,
            timeout=settings.REACTION_TIMEOUT_SECONDS,
        ),
        runner=ScheduledJobRunner(
            chat_client,
            supabase,
            timeout=settings.JOB_TIMEOUT_SECONDS,
            output_max_chars=settings.JOB_OUTPUT_MAX_CHARS,
        ),
    )

    logger.info(
        f"Services ready: {len(registry.departments)} departments, model={settings.AGENT_MODEL}"
    )
    return services


def get_services(request: Request) -> AgentServices:
    """FastAPI dependency returning the process-wide services."""
    return request.app.state.services
