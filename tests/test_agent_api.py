"""Tests for the agent and scheduler HTTP endpoints.

Covers the routes via FastAPI TestClient with fake completion/chat clients and
a mocked Supabase client injected through the app lifespan.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from agent_hub.agents.configs import build_tool_registry
from agent_hub.agents.conversation_loop import ConversationLoop
from agent_hub.api.deps import AgentServices
from agent_hub.core.background import BackgroundTaskRunner
from agent_hub.core.config import Settings
from agent_hub.core.errors import UpstreamUnavailable
from agent_hub.events.bus import EventBus
from agent_hub.events.dispatcher import ReactionDispatcher
from agent_hub.events.handlers import build_handler_registry
from agent_hub.main import app
from agent_hub.scheduler.runner import ScheduledJobRunner
from tests.fakes.fake_agents import (
    FakeChatClient,
    FakeCompletionClient,
    http_error,
    mock_supabase,
    text_response,
    tool_use_response,
)

APPROVED_EVENT = {
    "type": "ticket.approved",
    "payload": {"ticketId": "t-1", "clientName": "Acme", "platform": "make"},
    "fromAgent": "system",
    "toAgents": ["Engineering AI", "Delivery AI"],
    "priority": "high",
}


def _services(responses=(), chat_client=None, cron_secret=None, supabase=None):
    settings = Settings(
        SUPABASE_URL="https://test.supabase.co",
        SUPABASE_SERVICE_ROLE_KEY="test-key",
        ANTHROPIC_API_KEY="test-anthropic-key",
        CRON_SECRET=cron_secret,
    )
    supabase = supabase or mock_supabase()
    background = BackgroundTaskRunner()
    registry = build_tool_registry()
    chat_client = chat_client or FakeChatClient()
    completion = FakeCompletionClient(list(responses))

    services = AgentServices(
        settings=settings,
        supabase=supabase,
        background=background,
        registry=registry,
        loop=ConversationLoop(completion, registry, supabase, background),
        bus=EventBus(supabase, background, chat_client),
        dispatcher=ReactionDispatcher(build_handler_registry(), chat_client, supabase, background),
        runner=ScheduledJobRunner(chat_client, supabase),
    )
    return services, completion, chat_client


@pytest.fixture
def make_client():
    """Factory yielding a TestClient whose lifespan installs the given services."""
    clients = []

    def _make(services):
        patcher = patch("agent_hub.main.build_services", return_value=services)
        patcher.start()
        client = TestClient(app)
        client.__enter__()
        clients.append((client, patcher))
        return client

    yield _make

    for client, patcher in clients:
        client.__exit__(None, None, None)
        patcher.stop()


# ──────────────────────────────────────────────────────────────────────
# POST /v1/agent/chat
# ──────────────────────────────────────────────────────────────────────


class TestChat:
    def test_answer_without_tools(self, make_client):
        services, completion, _ = _services([text_response("Three deals need follow-up.")])
        client = make_client(services)

        resp = client.post(
            "/v1/agent/chat",
            json={"department": "sales", "messages": [{"role": "user", "content": "Pipeline status?"}]},
        )

        assert resp.status_code == 200
        assert resp.json() == {"message": "Three deals need follow-up.", "toolEvents": []}
        assert len(completion.calls) == 1

    def test_tool_events_returned(self, make_client):
        supabase = mock_supabase()
        supabase.table.return_value.execute.return_value = MagicMock(
            data=[{"status": "BUILDING", "ticket_type": "n8n", "priority": "high"}]
        )
        services, _, _ = _services(
            [
                tool_use_response(("tu_1", "get_ticket_stats", {})),
                text_response("One ticket is building."),
            ],
            supabase=supabase,
        )
        client = make_client(services)

        resp = client.post(
            "/v1/agent/chat",
            json={"department": "engineering", "messages": [{"role": "user", "content": "Queue?"}]},
        )

        body = resp.json()
        assert resp.status_code == 200
        assert body["message"] == "One ticket is building."
        (event,) = body["toolEvents"]
        assert event["tool_name"] == "get_ticket_stats"
        assert event["tool_result"]["byStatus"] == {"BUILDING": 1}
        assert event["is_error"] is False

    def test_unknown_department_is_400(self, make_client):
        services, completion, _ = _services([text_response("unused")])
        client = make_client(services)

        resp = client.post(
            "/v1/agent/chat",
            json={"department": "legal", "messages": [{"role": "user", "content": "hi"}]},
        )

        assert resp.status_code == 400
        assert resp.json()["detail"] == "Unknown department: legal"
        assert completion.calls == []

    @pytest.mark.parametrize(
        "body",
        [
            {"messages": [{"role": "user", "content": "hi"}]},
            {"department": "sales"},
            {"department": "sales", "messages": []},
            {"department": "sales", "messages": [{"role": "assistant", "content": "hi"}]},
        ],
    )
    def test_malformed_body_is_400(self, make_client, body):
        services, _, _ = _services()
        client = make_client(services)

        resp = client.post("/v1/agent/chat", json=body)

        assert resp.status_code == 400

    def test_invalid_json_is_400(self, make_client):
        services, _, _ = _services()
        client = make_client(services)

        resp = client.post(
            "/v1/agent/chat", content=b"{not json", headers={"content-type": "application/json"}
        )

        assert resp.status_code == 400

    def test_upstream_failure_is_502(self, make_client):
        services, _, _ = _services([UpstreamUnavailable("rate limited")])
        client = make_client(services)

        resp = client.post(
            "/v1/agent/chat",
            json={"department": "ceo", "messages": [{"role": "user", "content": "brief"}]},
        )

        assert resp.status_code == 502


# ──────────────────────────────────────────────────────────────────────
# POST /v1/agent/react, /v1/agent/events, GET /v1/agent/departments
# ──────────────────────────────────────────────────────────────────────


class TestReact:
    def test_dispatches_to_matching_agents(self, make_client):
        services, _, chat_client = _services(
            chat_client=FakeChatClient(errors={"delivery": http_error(500, "down")})
        )
        client = make_client(services)

        resp = client.post("/v1/agent/react", json=APPROVED_EVENT)

        body = resp.json()
        assert resp.status_code == 200
        assert body["reacted"] == 1
        assert body["total"] == 2
        by_agent = {r["agent"]: r for r in body["results"]}
        assert by_agent["Engineering AI"]["responsePreview"] == "ok from engineering"
        assert by_agent["Delivery AI"]["error"] == "HTTP 500: down"
        assert by_agent["Delivery AI"]["timedOut"] is False

    def test_no_matching_handlers_is_200(self, make_client):
        services, _, chat_client = _services()
        client = make_client(services)

        resp = client.post("/v1/agent/react", json={"type": "build.completed", "toAgents": ["Sales AI"]})

        assert resp.status_code == 200
        assert resp.json() == {"reacted": 0, "total": 0, "results": []}
        assert chat_client.chat_calls == []

    def test_malformed_event_is_400(self, make_client):
        services, _, _ = _services()
        client = make_client(services)

        resp = client.post("/v1/agent/react", json={"type": "deal.closed"})

        assert resp.status_code == 400
        assert "toAgents" in resp.json()["detail"]


class TestEvents:
    def test_publish_accepted(self, make_client):
        services, _, _ = _services()
        client = make_client(services)

        resp = client.post("/v1/agent/events", json={**APPROVED_EVENT, "priority": "normal"})

        assert resp.status_code == 202
        assert resp.json() == {"published": True}
        services.supabase.table.assert_any_call("activity_events")

    def test_publish_malformed_is_400(self, make_client):
        services, _, _ = _services()
        client = make_client(services)

        resp = client.post("/v1/agent/events", json={"toAgents": []})

        assert resp.status_code == 400


class TestDepartments:
    def test_roster(self, make_client):
        services, _, _ = _services()
        client = make_client(services)

        resp = client.get("/v1/agent/departments")

        departments = {d["department"]: d for d in resp.json()["departments"]}
        assert set(departments) == {"ceo", "sales", "marketing", "product", "engineering", "delivery"}
        assert departments["engineering"]["name"] == "Engineering AI"
        assert "trigger_rebuild" in departments["engineering"]["tools"]
        assert departments["ceo"]["suggestedActions"]


# ──────────────────────────────────────────────────────────────────────
# /v1/scheduler
# ──────────────────────────────────────────────────────────────────────


class TestScheduler:
    def test_run_now(self, make_client):
        services, _, chat_client = _services(chat_client=FakeChatClient(replies={"ceo": "Brief ready."}))
        client = make_client(services)

        resp = client.post("/v1/scheduler", json={"job": "ceo-morning-brief"})

        body = resp.json()
        assert resp.status_code == 200
        assert body["status"] == "ok"
        assert body["jobName"] == "ceo-morning-brief"
        assert body["success"] is True
        assert body["output"] == "Brief ready."
        assert "ran" in body and "duration" in body
        assert chat_client.chat_calls[0][0] == "ceo"

    def test_unknown_job_reported_in_band(self, make_client):
        services, _, _ = _services()
        client = make_client(services)

        resp = client.post("/v1/scheduler", json={"job": "ghost"})

        assert resp.status_code == 200
        assert resp.json()["status"] == "error"
        assert resp.json()["output"] == 'Job "ghost" not found'

    def test_missing_job_is_400(self, make_client):
        services, _, _ = _services()
        client = make_client(services)

        assert client.post("/v1/scheduler", json={}).status_code == 400

    def test_cron_requires_secret_when_configured(self, make_client):
        services, _, _ = _services(cron_secret="s3cret")
        client = make_client(services)

        denied = client.get("/v1/scheduler", params={"job": "build-queue-check"})
        wrong = client.get(
            "/v1/scheduler",
            params={"job": "build-queue-check"},
            headers={"Authorization": "Bearer nope"},
        )
        allowed = client.get(
            "/v1/scheduler",
            params={"job": "build-queue-check"},
            headers={"Authorization": "Bearer s3cret"},
        )

        assert denied.status_code == 401
        assert wrong.status_code == 401
        assert allowed.status_code == 200
        assert allowed.json()["jobName"] == "build-queue-check"

    def test_cron_without_secret_allows_localhost_only(self, make_client):
        services, _, _ = _services()
        client = make_client(services)

        remote = client.get("/v1/scheduler", params={"job": "build-queue-check"})
        local = client.get(
            "/v1/scheduler", params={"job": "build-queue-check"}, headers={"host": "localhost:8000"}
        )

        assert remote.status_code == 401
        assert local.status_code == 200

    def test_cron_missing_job_is_400(self, make_client):
        services, _, _ = _services(cron_secret="s3cret")
        client = make_client(services)

        resp = client.get("/v1/scheduler", headers={"Authorization": "Bearer s3cret"})

        assert resp.status_code == 400

    def test_run_schedule(self, make_client):
        services, _, chat_client = _services()
        client = make_client(services)

        resp = client.post("/v1/scheduler/schedule", json={"schedule": "0 9 * * 1-5"})

        body = resp.json()
        assert body["total"] == 2
        assert body["succeeded"] == 2
        assert {r["jobName"] for r in body["results"]} == {"build-queue-check", "delivery-health-check"}

    def test_job_table(self, make_client):
        services, _, _ = _services()
        client = make_client(services)

        jobs = client.get("/v1/scheduler/jobs").json()["jobs"]

        assert len(jobs) == 7
        assert {"name", "schedule", "department", "agentName", "task", "enabled"} <= set(jobs[0])


class TestHealth:
    def test_reports_background_counters(self, make_client):
        services, _, _ = _services()
        services.background.stats.failed = 2
        client = make_client(services)

        body = client.get("/health").json()

        assert body["status"] == "ok"
        assert body["background"]["failed"] == 2
        assert body["background"]["pending"] == 0

    def test_degraded_after_consecutive_failures(self, make_client):
        services, _, _ = _services()
        services.background.stats.consecutive_failures = services.background.failure_alert_threshold
        client = make_client(services)

        assert client.get("/health").json()["status"] == "degraded"
