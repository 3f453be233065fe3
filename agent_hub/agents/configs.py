"""Department agent roster."""

from agent_hub.agents.prompts import (
    CEO_SYSTEM_PROMPT,
    DELIVERY_SYSTEM_PROMPT,
    ENGINEERING_SYSTEM_PROMPT,
    MARKETING_SYSTEM_PROMPT,
    PRODUCT_SYSTEM_PROMPT,
    SALES_SYSTEM_PROMPT,
)
from agent_hub.agents.registry import ToolRegistry
from agent_hub.agents.tools.analytics import ANALYTICS_TOOLS
from agent_hub.agents.tools.artifacts import ARTIFACT_TOOLS
from agent_hub.agents.tools.communication import (
    CREATE_CALENDAR_EVENT,
    SEND_EMAIL,
    SEND_SLACK_MESSAGE,
)
from agent_hub.agents.tools.tickets import TICKET_TOOLS
from agent_hub.agents.types import AgentConfig

AGENT_CONFIGS: tuple[AgentConfig, ...] = (
    AgentConfig(
        department="ceo",
        name="Executive AI",
        role="Chief of Staff",
        system_prompt=CEO_SYSTEM_PROMPT,
        tools=(*ANALYTICS_TOOLS, *TICKET_TOOLS, SEND_EMAIL, SEND_SLACK_MESSAGE),
        suggested_actions=("Daily brief", "Pipeline overview", "Team performance", "Revenue forecast"),
    ),
    AgentConfig(
        department="sales",
        name="Sales AI",
        role="Sales Intelligence Agent",
        system_prompt=SALES_SYSTEM_PROMPT,
        tools=(*TICKET_TOOLS, *ANALYTICS_TOOLS, SEND_EMAIL, CREATE_CALENDAR_EVENT),
        suggested_actions=("Qualify a lead", "Draft proposal", "Pipeline status", "Follow-ups due"),
    ),
    AgentConfig(
        department="marketing",
        name="Marketing AI",
        role="Content & Campaign Intelligence",
        system_prompt=MARKETING_SYSTEM_PROMPT,
        tools=(*ANALYTICS_TOOLS, *TICKET_TOOLS, SEND_EMAIL, SEND_SLACK_MESSAGE),
        suggested_actions=("Content ideas", "Write case study", "Campaign metrics", "Social post draft"),
    ),
    AgentConfig(
        department="product",
        name="Product AI",
        role="Product Intelligence Agent",
        system_prompt=PRODUCT_SYSTEM_PROMPT,
        tools=(*TICKET_TOOLS, *ANALYTICS_TOOLS, SEND_SLACK_MESSAGE),
        suggested_actions=("Feature requests", "Customer feedback", "Platform health", "Draft PRD"),
    ),
    AgentConfig(
        department="engineering",
        name="Engineering AI",
        role="Build & Deploy Intelligence",
        system_prompt=ENGINEERING_SYSTEM_PROMPT,
        tools=(*TICKET_TOOLS, *ARTIFACT_TOOLS, *ANALYTICS_TOOLS),
        suggested_actions=("Build queue", "Review workflow", "Deploy status", "Optimization suggestions"),
    ),
    AgentConfig(
        department="delivery",
        name="Delivery AI",
        role="Client Delivery & Success",
        system_prompt=DELIVERY_SYSTEM_PROMPT,
        tools=(
            *TICKET_TOOLS,
            *ANALYTICS_TOOLS,
            SEND_EMAIL,
            SEND_SLACK_MESSAGE,
            CREATE_CALENDAR_EVENT,
        ),
        suggested_actions=("Delivery checklist", "Client health", "Upcoming deploys", "Check-in email"),
    ),
)


def build_tool_registry() -> ToolRegistry:
    """Registry of every department agent."""
    return ToolRegistry(AGENT_CONFIGS)
