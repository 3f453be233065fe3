"""Scheduled job run lifecycle database operations."""

from datetime import datetime, timezone  # noqa: UP035
from typing import Any

from supabase import Client

from agent_hub.core.logging import get_logger

logger = get_logger(__name__)


def _utc_now_iso() -> str:
    """Get current UTC time as ISO string."""
    return datetime.now(timezone.utc).isoformat()  # noqa: UP017


def create_job_run(supabase: Client, job_name: str, department: str) -> str | None:
    """
    Create a job run record in ``running`` status.

    Args:
        supabase: Supabase client
        job_name: Scheduled job name
        department: Department the job runs against

    Returns:
        Run ID, or None if the insert returned no row

    Raises:
        Exception: If database operation fails
    """
    try:
        response = (
            supabase.table("scheduled_job_runs")
            .insert(
                {
                    "job_name": job_name,
                    "department": department,
                    "status": "running",
                    "started_at": _utc_now_iso(),
                }
            )
            .execute()
        )
    except Exception as e:
        logger.error(f"Failed to create job run: {e}", extra={"job_name": job_name})
        raise

    if not response.data:
        return None

    run_id = response.data[0].get("id")
    logger.info(f"Created job run {run_id}", extra={"job_name": job_name})
    return run_id


def finish_job_run(supabase: Client, run_id: str, success: bool, output: str) -> None:
    """
    Mark a job run as completed or failed.

    Args:
        supabase: Supabase client
        run_id: Run ID returned by create_job_run
        success: Whether the job succeeded
        output: Job output (already truncated) or failure diagnostic

    Raises:
        Exception: If database operation fails
    """
    update: dict[str, Any] = {
        "status": "completed" if success else "failed",
        "completed_at": _utc_now_iso(),
        "output": output,
        "error": None if success else output,
    }

    try:
        supabase.table("scheduled_job_runs").update(update).eq("id", run_id).execute()
        logger.info(f"Finished job run {run_id}: {update['status']}")
    except Exception as e:
        logger.error(f"Failed to finish job run {run_id}: {e}")
        raise
