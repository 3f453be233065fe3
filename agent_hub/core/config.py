"""Configuration management for Agent Hub."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    # Environment variables should be set directly
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")

    # Anthropic configuration (required)
    ANTHROPIC_API_KEY: str = Field(..., description="Anthropic API key")

    # Environment
    AGENT_HUB_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")
    LOG_LEVEL: str | None = Field(
        default=None, description="Override log level (DEBUG, INFO, ...); defaults by environment"
    )

    # Base URL this service is reachable on (react -> chat, scheduler -> chat hops)
    APP_URL: str = Field(default="http://localhost:8000", description="Public base URL of this service")

    # Conversation loop
    AGENT_MODEL: str = Field(default="claude-sonnet-4-6", description="Model for department agents")
    AGENT_MAX_TOKENS: int = Field(default=4096, description="Max output tokens per completion")
    AGENT_MAX_ITERATIONS: int = Field(
        default=8, description="Max completion calls per conversation turn"
    )

    # Reactions and scheduled jobs
    REACTION_TIMEOUT_SECONDS: float = Field(
        default=30.0, description="Hard timeout for one agent reaction"
    )
    JOB_TIMEOUT_SECONDS: float = Field(default=60.0, description="Hard timeout for one scheduled job")
    JOB_OUTPUT_MAX_CHARS: int = Field(
        default=2000, description="Max characters of job output kept on the run record"
    )
    CRON_SECRET: str | None = Field(default=None, description="Bearer secret for cron triggers")

    # Side channels
    AUDIT_FAILURE_ALERT_THRESHOLD: int = Field(
        default=5, description="Consecutive background failures before a warning is logged"
    )

    # Tool collaborators
    RESEND_API_KEY: str | None = Field(default=None, description="Resend API key for send_email")
    EMAIL_FROM: str = Field(
        default="Manage AI <noreply@manageai.app>", description="Sender for agent emails"
    )
    BUILD_SERVICE_URL: str | None = Field(
        default=None, description="Endpoint that regenerates build artifacts for a ticket"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
