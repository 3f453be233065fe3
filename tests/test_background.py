"""Tests for the fire-and-forget task runner."""

import asyncio
import logging

import pytest

from agent_hub.core.background import BackgroundTaskRunner


async def _ok():
    return "ok"


async def _fail(message="insert failed"):
    raise RuntimeError(message)


class TestBackgroundTaskRunner:
    @pytest.mark.asyncio
    async def test_success_counted(self):
        runner = BackgroundTaskRunner()
        runner.submit("ok", _ok())
        await runner.drain()

        assert runner.stats.submitted == 1
        assert runner.stats.succeeded == 1
        assert runner.pending == 0

    @pytest.mark.asyncio
    async def test_failure_swallowed_and_recorded(self):
        runner = BackgroundTaskRunner()
        task = runner.submit("audit:x", _fail())
        await runner.drain()

        assert task.exception() is None
        assert runner.stats.failed == 1
        assert runner.stats.last_error == "audit:x: insert failed"

    @pytest.mark.asyncio
    async def test_success_resets_consecutive_failures(self):
        runner = BackgroundTaskRunner()
        runner.submit("a", _fail())
        runner.submit("b", _fail())
        await runner.drain()
        assert runner.stats.consecutive_failures == 2

        runner.submit("c", _ok())
        await runner.drain()
        assert runner.stats.consecutive_failures == 0
        assert runner.stats.failed == 2

    @pytest.mark.asyncio
    async def test_threshold_logs_warning(self, caplog):
        runner = BackgroundTaskRunner(failure_alert_threshold=3)
        logger = logging.getLogger("agent_hub.core.background")
        logger.propagate = True

        with caplog.at_level(logging.WARNING, logger="agent_hub.core.background"):
            for i in range(3):
                runner.submit(f"audit:{i}", _fail())
            await runner.drain()

        assert any("3 consecutive background failures" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_submit_blocking_runs_in_thread(self):
        runner = BackgroundTaskRunner()
        seen = []

        runner.submit_blocking("sync", seen.append, "written")
        await runner.drain()

        assert seen == ["written"]

    @pytest.mark.asyncio
    async def test_drain_with_timeout_leaves_slow_tasks(self):
        runner = BackgroundTaskRunner()
        runner.submit("slow", asyncio.sleep(5))

        await runner.drain(timeout=0.01)

        assert runner.pending == 1
        for task in list(runner._tasks):
            task.cancel()
        await asyncio.sleep(0)
