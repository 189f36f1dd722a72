"""Transactional email sender.

Posts rendered HTML to a Resend-compatible HTTP API.
"""

import httpx

from lumina_jobs.core.errors import EmailDeliveryError, NotificationConfigurationError
from lumina_jobs.core.logging import get_logger

logger = get_logger(__name__)


class EmailSender:
    """Send one email per call.

    Example:
        sender = EmailSender(api_key, "https://api.resend.com/emails", "no-reply@lmv.app")
        await sender.send("student@example.com", "Class starting soon", html)
    """

    def __init__(
        self,
        api_key: str | None,
        api_url: str,
        from_email: str,
        sender_name: str = "LMV Academy",
        timeout: float = 15.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._from = f"{sender_name} <{from_email}>"
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def send(self, to: str, subject: str, html: str) -> None:
        """Send ``html`` to ``to``.

        Raises:
            NotificationConfigurationError: No API key configured.
            EmailDeliveryError: Transport failure or provider rejection.
        """
        if not self._api_key:
            raise NotificationConfigurationError("EMAIL_API_KEY is not configured")

        try:
            response = await self._http.post(
                self._api_url,
                headers={"Authorization": f"Bearer {self._api_key}"},
                json={
                    "from": self._from,
                    "to": [to],
                    "subject": subject,
                    "html": html,
                },
            )
        except httpx.HTTPError as e:
            raise EmailDeliveryError(f"Email to {to} failed: {e}") from e

        if response.is_error:
            raise EmailDeliveryError(
                f"Email to {to} rejected with {response.status_code}: "
                f"{response.text[:200]}"
            )

        logger.debug("email_sent", to=to, subject=subject)

    async def close(self) -> None:
        if self._owns_client:
            await self._http.aclose()
