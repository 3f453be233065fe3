"""API router for v1 endpoints."""

from fastapi import APIRouter

from agent_hub.api import agent, scheduler

router = APIRouter()

# Department agents: chat, reactions, events
router.include_router(agent.router, prefix="/agent", tags=["agent"])

# Scheduled jobs
router.include_router(scheduler.router, prefix="/scheduler", tags=["scheduler"])
