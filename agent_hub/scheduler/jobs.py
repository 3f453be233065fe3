"""Recurring department agent jobs."""

from dataclasses import dataclass
from textwrap import dedent


@dataclass(frozen=True)
class ScheduledJob:
    """A cron-triggered task sent to a department agent."""

    name: str
    schedule: str  # cron expression
    department: str
    agent_name: str
    task: str
    enabled: bool = True

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "schedule": self.schedule,
            "department": self.department,
            "agentName": self.agent_name,
            "task": self.task,
            "enabled": self.enabled,
        }


SCHEDULED_JOBS: tuple[ScheduledJob, ...] = (
    ScheduledJob(
        name="ceo-morning-brief",
        schedule="0 7 * * 1-5",  # 7am weekdays
        department="ceo",
        agent_name="Executive AI",
        task=dedent(
            """\
            Generate the daily executive brief. Include:
            1. Pipeline summary: total open deals, total value, deals moved yesterday
            2. Build queue: tickets in BUILDING status, any overdue (>5 days)
            3. Deployment health: any failed deploys in last 24h
            4. Client alerts: any clients needing attention
            5. Team capacity: open tickets per person
            Format as a clean summary the CEO can read in 2 minutes.
            Post to Slack #leadership channel.
            Save to activity_events with event_type='morning_brief'."""
        ),
    ),
    ScheduledJob(
        name="sales-pipeline-review",
        schedule="0 8 * * 1-5",  # 8am weekdays
        department="sales",
        agent_name="Sales AI",
        task=dedent(
            """\
            Run daily pipeline review.
            1. Find all deals with no activity in 7+ days and draft a follow-up note for each
            2. Find deals where expected close date has passed and flag them for the sales lead
            3. Find deals with $0 value and list them for the sales lead to update
            4. Identify the top 3 deals most likely to close this week
            Post summary to Slack #sales.
            Save findings to activity_events."""
        ),
    ),
    ScheduledJob(
        name="build-queue-check",
        schedule="0 9 * * 1-5",  # 9am weekdays
        department="engineering",
        agent_name="Engineering AI",
        task=dedent(
            """\
            Check the build queue.
            1. List all tickets in BUILDING status with age > 3 days and flag them as at-risk
            2. List tickets in SUBMITTED status not yet analyzed and trigger analysis if stuck
            3. List tickets in REVIEW_PENDING for > 2 days and nudge the reviewer
            4. Summarize: X builds in progress, Y at risk, Z waiting review
            Post to Slack #builds.
            Save to activity_events."""
        ),
    ),
    ScheduledJob(
        name="delivery-health-check",
        schedule="0 9 * * 1-5",  # 9am weekdays
        department="delivery",
        agent_name="Delivery AI",
        task=dedent(
            """\
            Run client health check.
            1. Check all deployments from last 30 days for errors or failures
            2. List clients with no ticket activity in 30+ days (potential churn risk)
            3. List clients with builds completing this week and schedule a delivery review
            4. Flag any client with 2+ failed deployments
            Post health summary to Slack #delivery.
            Save to activity_events with event_type='health_check'."""
        ),
    ),
    ScheduledJob(
        name="weekly-ceo-report",
        schedule="0 8 * * 1",  # 8am every Monday
        department="ceo",
        agent_name="Executive AI",
        task=dedent(
            """\
            Generate the weekly company report.
            1. Deals: new deals added, deals closed, pipeline value change WoW
            2. Builds: tickets created, completed, deployed last week
            3. Revenue signals: total deployment value, retainer clients active
            4. Team: busiest team members, capacity for new work
            5. Wins: notable completions from last week
            6. Risks: stalled deals, overdue builds, unhappy clients
            Email the report to the CEO.
            Post summary to #leadership."""
        ),
    ),
    ScheduledJob(
        name="monthly-client-reports",
        schedule="0 9 1 * *",  # 9am on the 1st of every month
        department="delivery",
        agent_name="Delivery AI",
        task=dedent(
            """\
            Generate monthly performance reports for all active clients.
            For each client with at least one deployed automation:
            1. Pull deployment records and any available run data
            2. Generate a performance summary: automations active, estimated tasks saved
            3. Calculate estimated hours saved (assume 2min per automated task)
            4. Draft the client email with the report attached
            5. Save report to client_reports table with status='pending_review'
            Alert the delivery lead in Slack #delivery: "X monthly reports ready for review".
            Reports are reviewed and approved before sending."""
        ),
    ),
    ScheduledJob(
        name="marketing-content-pipeline",
        schedule="0 10 * * 1",  # 10am every Monday
        department="marketing",
        agent_name="Marketing AI",
        task=dedent(
            """\
            Weekly content generation.
            1. Find all tickets that moved to CLOSED status last week
            2. For each completed build: draft a case study outline (company type, problem, solution, automation built, expected ROI)
            3. Draft 3 LinkedIn posts for the week based on completed builds
            4. Draft 1 longer-form blog post idea with outline
            5. Save all drafts to activity_events with event_type='content_draft'
            Post to Slack #marketing: 'X content pieces ready for review'"""
        ),
    ),
)


def get_job_by_name(name: str, jobs: tuple[ScheduledJob, ...] = SCHEDULED_JOBS) -> ScheduledJob | None:
    """Look up a job by name (enabled or not)."""
    return next((j for j in jobs if j.name == name), None)


def get_jobs_by_schedule(
    cron_expression: str, jobs: tuple[ScheduledJob, ...] = SCHEDULED_JOBS
) -> list[ScheduledJob]:
    """Enabled jobs whose schedule is exactly ``cron_expression``."""
    return [j for j in jobs if j.enabled and j.schedule == cron_expression]
