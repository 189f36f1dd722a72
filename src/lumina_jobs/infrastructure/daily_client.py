"""Daily.co REST client.

Covers the room and recording endpoints the scheduling jobs use. Every
request carries a bounded timeout; transport errors and non-2xx responses
surface as DailyAPIError so callers can treat them as "retry next tick".

Reference:
    - https://docs.daily.co/reference/rest-api
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

import httpx

from lumina_jobs.core.errors import DailyAPIError, VideoProviderConfigurationError
from lumina_jobs.core.logging import get_logger
from lumina_jobs.infrastructure.repositories.class_content import TranscriptSegment

logger = get_logger(__name__)

FINISHED_STATUSES = frozenset({"finished", "completed"})

DEFAULT_ROOM_PROPERTIES: dict[str, Any] = {
    "enable_chat": True,
    "enable_screenshare": True,
    "enable_transcription_storage": True,
    "start_video_off": False,
    "start_audio_off": False,
    "eject_at_room_exp": True,
    "enable_prejoin_ui": True,
    "enable_network_ui": True,
    "enable_knocking": False,
    "lang": "en",
}


@dataclass(frozen=True)
class Room:
    """A provisioned video room."""

    name: str
    url: str


@dataclass(frozen=True)
class Recording:
    """A cloud recording as reported by Daily.

    Attributes:
        id: Recording identifier.
        status: Provider status ("finished", "in-progress", ...).
        download_link: Download URL, when the provider includes one.
        duration: Length in seconds.
        room_name: Room the recording belongs to.
    """

    id: str
    status: str
    download_link: str | None = None
    duration: int = 0
    room_name: str | None = None

    @property
    def is_finished(self) -> bool:
        return self.status.lower() in FINISHED_STATUSES

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Recording":
        return cls(
            id=str(data.get("id") or data.get("recording_id") or ""),
            status=str(data.get("status") or ""),
            download_link=data.get("download_link") or None,
            duration=int(data.get("duration") or 0),
            room_name=data.get("room_name"),
        )


class DailyClient:
    """Async Daily.co API client.

    Example:
        daily = DailyClient(api_key, "https://api.daily.co/v1", "lumina-app")
        room = await daily.create_room("lumina-1700000000000", expires_at)
        recordings = await daily.list_recordings(room.name)
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str,
        domain: str,
        timeout: float = 15.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Daily API key; None leaves the client unconfigured.
            base_url: REST API base URL.
            domain: Daily subdomain, used to build fallback room URLs.
            timeout: Per-request timeout in seconds.
            http_client: Optional pre-built client (tests inject a MockTransport).
        """
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self.domain = domain
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def room_url(self, room_name: str) -> str:
        """Public URL of ``room_name`` on this account's subdomain."""
        return f"https://{self.domain}.daily.co/{room_name}"

    async def create_room(
        self,
        name: str,
        expires_at: datetime,
        properties: dict[str, Any] | None = None,
    ) -> Room:
        """Create a private room that expires at ``expires_at``."""
        body = {
            "name": name,
            "privacy": "private",
            "properties": {
                **DEFAULT_ROOM_PROPERTIES,
                **(properties or {}),
                "exp": int(expires_at.timestamp()),
            },
        }
        data = await self._request("POST", "/rooms", json=body)
        room_name = data.get("name") or name
        return Room(name=room_name, url=data.get("url") or self.room_url(room_name))

    async def list_recordings(self, room_name: str) -> list[Recording]:
        """Recordings for ``room_name``; an unknown room yields an empty list."""
        try:
            data = await self._request(
                "GET", "/recordings", params={"room_name": room_name}
            )
        except DailyAPIError as e:
            if e.status_code == 404:
                return []
            raise
        return [Recording.from_api(item) for item in data.get("data") or []]

    async def get_recording(self, recording_id: str) -> Recording:
        """Fetch one recording, resolving its download link if missing."""
        data = await self._request("GET", f"/recordings/{recording_id}")
        recording = Recording.from_api(data)
        if recording.download_link or not recording.is_finished:
            return recording

        access = await self._request("GET", f"/recordings/{recording_id}/access-link")
        return Recording.from_api({**data, "download_link": access.get("download_link")})

    async def get_transcript(self, recording_id: str) -> list[TranscriptSegment]:
        """Transcript segments; empty if the transcript is not available."""
        try:
            data = await self._request("GET", f"/recordings/{recording_id}/transcript")
        except DailyAPIError as e:
            if e.status_code == 404:
                return []
            raise

        return [
            TranscriptSegment(
                content=str(segment.get("text") or ""),
                timestamp_ms=int(float(segment.get("start") or 0) * 1000),
                speaker_name=segment.get("speaker") or "Unknown",
            )
            for segment in data.get("segments") or []
            if segment.get("text")
        ]

    async def close(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        if not self._api_key:
            raise VideoProviderConfigurationError("DAILY_API_KEY is not configured")

        url = f"{self._base_url}{path}"
        try:
            response = await self._http.request(
                method,
                url,
                headers={"Authorization": f"Bearer {self._api_key}"},
                **kwargs,
            )
        except httpx.HTTPError as e:
            raise DailyAPIError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            logger.warning(
                "daily_api_error",
                method=method,
                path=path,
                status_code=response.status_code,
                body=response.text[:300],
            )
            raise DailyAPIError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )

        data: dict[str, Any] = response.json()
        return data
