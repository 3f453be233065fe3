"""Scheduled job runner.

Each job is a single-turn conversation with its department agent, executed
over the chat endpoint under a hard deadline. Run bookkeeping
(``scheduled_job_runs`` and the activity feed) is best-effort: a missing
table or a failed write never changes the job result.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Protocol

from pydantic import BaseModel

from agent_hub.core.logging import get_logger, log_with_context
from agent_hub.db.activity_events import insert_activity_event
from agent_hub.db.job_runs import create_job_run, finish_job_run
from agent_hub.scheduler.jobs import (
    SCHEDULED_JOBS,
    ScheduledJob,
    get_job_by_name,
    get_jobs_by_schedule,
)

logger = get_logger(__name__)

JOB_TIMEOUT_SECONDS = 60.0
JOB_OUTPUT_MAX_CHARS = 2000
ACTIVITY_OUTPUT_MAX_CHARS = 1000


class ChatTransport(Protocol):
    async def chat(self, department: str, prompt: str) -> str: ...


class JobResult(BaseModel):
    """Outcome of one job execution."""

    success: bool
    output: str
    duration: int  # milliseconds
    job_name: str


class ScheduledJobRunner:
    """Executes scheduled jobs against department agents."""

    def __init__(
        self,
        chat_client: ChatTransport,
        supabase: Any,
        jobs: tuple[ScheduledJob, ...] = SCHEDULED_JOBS,
        timeout: float = JOB_TIMEOUT_SECONDS,
        output_max_chars: int = JOB_OUTPUT_MAX_CHARS,
    ):
        self.chat_client = chat_client
        self.supabase = supabase
        self.jobs = tuple(jobs)
        self.timeout = timeout
        self.output_max_chars = output_max_chars

    async def execute_job(self, job: ScheduledJob) -> JobResult:
        """
        Run one job and record it.

        Never raises; failures are reported in the returned JobResult.
        """
        start = time.monotonic()
        logger.info(f"Running job {job.name}", extra={"job_name": job.name, "department": job.department})

        run_id: str | None = None
        try:
            run_id = await asyncio.to_thread(create_job_run, self.supabase, job.name, job.department)
        except Exception as e:
            # Table may not exist yet; the job still runs
            logger.warning(f"Could not record job start: {e}", extra={"job_name": job.name})

        success = False
        try:
            reply = await asyncio.wait_for(
                self.chat_client.chat(job.department, job.task), timeout=self.timeout
            )
            output = reply[: self.output_max_chars]
            success = True
        except TimeoutError:
            output = f"Timed out after {self.timeout:g} seconds"
        except Exception as e:
            output = str(e) or type(e).__name__

        duration = int((time.monotonic() - start) * 1000)

        if success:
            log_with_context(
                logger,
                logging.INFO,
                f"Job {job.name} completed in {duration}ms",
                job_name=job.name,
                department=job.department,
                output_chars=len(output),
            )
        else:
            logger.error(f"Job {job.name} failed: {output}", extra={"job_name": job.name})

        await self._record(job, run_id, success, output, duration)

        return JobResult(success=success, output=output, duration=duration, job_name=job.name)

    async def run_job_by_name(self, name: str) -> JobResult:
        """Run a job by name; unknown and disabled jobs are reported, not raised."""
        job = get_job_by_name(name, self.jobs)
        if job is None:
            logger.warning(f'Job "{name}" not found', extra={"job_name": name})
            return JobResult(success=False, output=f'Job "{name}" not found', duration=0, job_name=name)
        if not job.enabled:
            return JobResult(success=False, output=f'Job "{name}" is disabled', duration=0, job_name=name)
        return await self.execute_job(job)

    async def run_all_jobs_for_schedule(self, cron_expression: str) -> list[JobResult]:
        """Run every enabled job on a cron expression concurrently."""
        jobs = get_jobs_by_schedule(cron_expression, self.jobs)
        logger.info(f"Schedule '{cron_expression}' matched {len(jobs)} job(s)")
        if not jobs:
            return []
        return list(await asyncio.gather(*[self.execute_job(j) for j in jobs]))

    async def _record(
        self, job: ScheduledJob, run_id: str | None, success: bool, output: str, duration: int
    ) -> None:
        if run_id:
            try:
                await asyncio.to_thread(
                    finish_job_run, self.supabase, run_id, success, output[: self.output_max_chars]
                )
            except Exception as e:
                logger.warning(f"Could not record job result: {e}", extra={"job_name": job.name})

        try:
            await asyncio.to_thread(
                insert_activity_event,
                self.supabase,
                event_type="scheduled_job_run",
                event_message=output[:ACTIVITY_OUTPUT_MAX_CHARS],
                agent_name=job.agent_name,
                metadata={"job_name": job.name, "success": success, "duration_ms": duration},
                department=job.department,
            )
        except Exception as e:
            logger.warning(f"Could not log job activity: {e}", extra={"job_name": job.name})
