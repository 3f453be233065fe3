"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from agent_hub.api import router as api_router
from agent_hub.api.deps import AgentServices, build_services, get_services
from agent_hub.core.config import get_settings
from agent_hub.core.logging import get_logger

logger = get_logger(__name__)

SHUTDOWN_DRAIN_SECONDS = 10.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.services = build_services(get_settings())
    yield
    background = app.state.services.background
    if background.pending:
        logger.info(f"Draining {background.pending} background task(s)")
    await background.drain(timeout=SHUTDOWN_DRAIN_SECONDS)


app = FastAPI(
    title="Agent Hub",
    description="Department AI agents with tool calling, event reactions and scheduled jobs",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check(services: AgentServices = Depends(get_services)) -> JSONResponse:
    """Health check endpoint, including background task failure counters."""
    stats = services.background.stats
    degraded = stats.consecutive_failures >= services.background.failure_alert_threshold
    return JSONResponse(
        content={
            "status": "degraded" if degraded else "ok",
            "background": {**asdict(stats), "pending": services.background.pending},
        },
        status_code=200,
    )


# Include v1 API router
app.include_router(api_router, prefix="/v1", tags=["v1"])
