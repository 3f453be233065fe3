"""Scheduled job endpoints: manual runs, cron triggers and the job table."""

import secrets
from datetime import datetime, timezone  # noqa: UP035

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from pydantic import BaseModel, Field, ValidationError

from agent_hub.api.deps import AgentServices, get_services
from agent_hub.core.logging import get_logger
from agent_hub.scheduler.runner import JobResult

logger = get_logger(__name__)

router = APIRouter()

_LOCAL_HOSTS = ("localhost", "127.0.0.1")


class RunJobRequest(BaseModel):
    job: str = Field(..., min_length=1)


class RunScheduleRequest(BaseModel):
    schedule: str = Field(..., min_length=1)


def _job_response(result: JobResult) -> dict:
    return {
        "status": "ok" if result.success else "error",
        "jobName": result.job_name,
        "success": result.success,
        "duration": result.duration,
        "output": result.output,
        "ran": datetime.now(timezone.utc).isoformat(),  # noqa: UP017
    }


def _is_cron_authorized(cron_secret: str | None, authorization: str | None, host: str) -> bool:
    """Bearer CRON_SECRET when configured, otherwise localhost callers only."""
    if not cron_secret:
        return host.startswith(_LOCAL_HOSTS)
    return secrets.compare_digest(authorization or "", f"Bearer {cron_secret}")


async def _parse(request: Request, model: type[BaseModel], detail: str) -> BaseModel:
    try:
        body = await request.json()
    except ValueError as e:
        raise HTTPException(status_code=400, detail="Invalid JSON body") from e
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=detail) from e


@router.post("")
async def run_job(request: Request, services: AgentServices = Depends(get_services)) -> dict:
    """
    Run a scheduled job now ("Run Now").

    Unknown and disabled jobs are reported in-band with ``success: false``.
    """
    body = await _parse(request, RunJobRequest, "Missing job parameter")
    result = await services.runner.run_job_by_name(body.job)
    return _job_response(result)


@router.get("")
async def cron_trigger(
    request: Request,
    job: str | None = Query(None, description="Scheduled job name"),
    authorization: str | None = Header(None),
    services: AgentServices = Depends(get_services),
) -> dict:
    """
    Cron entry point.

    Raises:
        HTTPException 401: If the caller is not authorized
        HTTPException 400: If ``job`` is missing
    """
    host = request.headers.get("host", "")
    if not _is_cron_authorized(services.settings.CRON_SECRET, authorization, host):
        logger.warning(f"Rejected unauthorized cron trigger from host {host!r}")
        raise HTTPException(status_code=401, detail="Unauthorized")

    if not job:
        raise HTTPException(status_code=400, detail="Missing ?job= parameter")

    result = await services.runner.run_job_by_name(job)
    return _job_response(result)


@router.post("/schedule")
async def run_schedule(request: Request, services: AgentServices = Depends(get_services)) -> dict:
    """Run every enabled job whose cron expression matches ``schedule``."""
    body = await _parse(request, RunScheduleRequest, "Missing schedule parameter")
    results = await services.runner.run_all_jobs_for_schedule(body.schedule)
    return {
        "schedule": body.schedule,
        "total": len(results),
        "succeeded": sum(1 for r in results if r.success),
        "results": [_job_response(r) for r in results],
    }


@router.get("/jobs")
async def list_jobs(services: AgentServices = Depends(get_services)) -> dict:
    """The scheduled job table."""
    return {"jobs": [j.to_dict() for j in services.runner.jobs]}
