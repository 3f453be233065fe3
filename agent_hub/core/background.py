"""Fire-and-forget task execution with an error boundary.

Audit writes, conversation persistence and high-priority event dispatch must
never block or fail the request that triggered them. They are submitted here
as detached asyncio tasks; every failure is caught and logged, and counted so
that a persistently broken audit store is visible on /health.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import Any

from agent_hub.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class BackgroundStats:
    """Counters exposed on the health endpoint."""

    submitted: int = 0
    succeeded: int = 0
    failed: int = 0
    consecutive_failures: int = 0
    last_error: str | None = None


class BackgroundTaskRunner:
    """Runs detached coroutines and swallows (but records) their failures."""

    def __init__(self, failure_alert_threshold: int = 5):
        self.failure_alert_threshold = failure_alert_threshold
        self.stats = BackgroundStats()
        # Strong references so pending tasks are not garbage collected
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, label: str, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        """
        Schedule a coroutine without awaiting it.

        Args:
            label: Short name used in logs (e.g. "tool_log:search_tickets")
            coro: Coroutine to run

        Returns:
            The created task (callers normally ignore it)
        """
        self.stats.submitted += 1
        task = asyncio.create_task(self._guard(label, coro), name=label)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def submit_blocking(
        self, label: str, func: Callable[..., Any], *args: Any, **kwargs: Any
    ) -> asyncio.Task:
        """Schedule a blocking call (e.g. a Supabase insert) on a worker thread."""
        return self.submit(label, asyncio.to_thread(func, *args, **kwargs))

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for all pending tasks (shutdown and tests)."""
        if not self._tasks:
            return
        pending = list(self._tasks)
        done, still_pending = await asyncio.wait(pending, timeout=timeout)
        if still_pending:
            logger.warning(f"{len(still_pending)} background task(s) still running after drain")

    async def _guard(self, label: str, coro: Coroutine[Any, Any, Any]) -> None:
        try:
            await coro
        except asyncio.CancelledError:
            logger.debug(f"Background task {label} cancelled")
            raise
        except Exception as e:
            self.stats.failed += 1
            self.stats.consecutive_failures += 1
            self.stats.last_error = f"{label}: {e}"
            logger.error(f"Background task {label} failed (non-fatal): {e}")
            if self.stats.consecutive_failures == self.failure_alert_threshold:
                logger.warning(
                    f"{self.stats.consecutive_failures} consecutive background failures, "
                    f"audit store may be unavailable",
                    extra={"extra_data": {"last_error": self.stats.last_error}},
                )
        else:
            self.stats.succeeded += 1
            self.stats.consecutive_failures = 0
