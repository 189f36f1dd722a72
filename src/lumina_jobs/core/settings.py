"""Worker settings loaded from environment.

All values come from environment variables (or ``env/.env.dev`` locally).
Collaborator credentials are optional so the worker can boot without them;
jobs that need a missing credential fail fast with a ConfigurationError.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Worker settings loaded from environment.

    Attributes:
        redis_url: Redis connection URL for task queue, results and push fan-out.
        database_url: PostgreSQL connection URL (same database as the web app).
        job_result_ttl: Time-to-live for job results in seconds.
        worker_concurrency: Maximum concurrent async tasks per worker.
        log_level: Logging verbosity level.
        reminder_check_cron: Cron expression for the reminder window scan.
        recording_sync_cron: Cron expression for the recording reconciliation.
        recording_sync_batch_size: Maximum ended classes inspected per sync run.
        daily_api_key: Daily.co REST API key.
        daily_api_url: Daily.co REST API base URL.
        daily_domain: Daily.co subdomain used for fallback room URLs.
        room_expiry_hours: Hours after the scheduled start a provisioned room expires.
        email_api_key: Transactional email API key.
        email_api_url: Transactional email API endpoint.
        email_from: Sender address for outgoing email.
        email_sender_name: Display name for outgoing email.
        llm_api_key: LLM gateway API key (summaries are skipped without it).
        llm_api_url: OpenAI-compatible chat completions endpoint.
        llm_model: Model requested from the gateway.
        http_timeout_seconds: Timeout applied to every outbound HTTP call.
        app_url: Public web app URL used for deep links in notifications.
    """

    # Required - no defaults (must be set in env)
    redis_url: str
    database_url: str

    # Worker
    job_result_ttl: int = 86400  # 24 hours
    worker_concurrency: int = 10
    log_level: str = "INFO"

    # Schedules
    reminder_check_cron: str = "*/2 * * * *"
    recording_sync_cron: str = "*/15 * * * *"
    recording_sync_batch_size: int = 50

    # Video provider
    daily_api_key: str | None = None
    daily_api_url: str = "https://api.daily.co/v1"
    daily_domain: str = "lumina-app"
    room_expiry_hours: int = 4

    # Email
    email_api_key: str | None = None
    email_api_url: str = "https://api.resend.com/emails"
    email_from: str = "onboarding@resend.dev"
    email_sender_name: str = "LMV Academy"

    # LLM gateway
    llm_api_key: str | None = None
    llm_api_url: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    llm_model: str = "google/gemini-2.5-flash"

    http_timeout_seconds: float = 15.0
    app_url: str = "https://lmvacademy.app"

    model_config = SettingsConfigDict(
        env_file="env/.env.dev",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()  # type: ignore[call-arg]


class _SettingsProxy:
    """Proxy that lazily loads settings on first access."""

    def __getattr__(self, name: str) -> object:
        return getattr(get_settings(), name)


settings = _SettingsProxy()
