"""Exception hierarchy for lumina-jobs.

Configuration errors are fatal for a job invocation. Validation errors skip
the affected class. Collaborator errors are transient: the scheduler's next
tick retries them.
"""


class LuminaJobsError(Exception):
    """Base class for all worker errors."""


class ConfigurationError(LuminaJobsError):
    """A required collaborator is missing credentials or endpoints."""


class NotificationConfigurationError(ConfigurationError):
    """Notification delivery is not configured."""


class VideoProviderConfigurationError(ConfigurationError):
    """Video provider API key is not configured."""


class InvalidRecurrenceRule(LuminaJobsError):
    """Recurrence day or time cannot be evaluated."""


class LiveClassNotFound(LuminaJobsError):
    """Referenced live class does not exist."""

    def __init__(self, class_id: object) -> None:
        super().__init__(f"Live class not found: {class_id}")
        self.class_id = class_id


class CollaboratorError(LuminaJobsError):
    """An external collaborator call failed (retry on next tick)."""


class DailyAPIError(CollaboratorError):
    """Daily.co REST API call failed.

    Attributes:
        status_code: HTTP status, or None for transport failures.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmailDeliveryError(CollaboratorError):
    """Email provider rejected or failed a send."""


class PushDeliveryError(CollaboratorError):
    """Push event could not be published."""


class LLMError(CollaboratorError):
    """LLM gateway call failed."""
