"""Push notification publisher.

Jobs never talk to browser push endpoints directly. They publish a push
event on the user's Redis pub/sub channel; the web app's push gateway,
which holds the VAPID keys and the ``push_subscriptions`` rows, delivers
it to every subscribed device.
"""

import json
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from redis.asyncio import Redis
from redis.exceptions import RedisError
from uuid_extensions import uuid7  # provided by uuid7 package

from lumina_jobs.core.errors import PushDeliveryError
from lumina_jobs.core.logging import get_logger

logger = get_logger(__name__)


class PushPublisher:
    """Publish push events to the gateway's per-user channels.

    Attributes:
        CHANNEL_PREFIX: Redis channel prefix (must match the gateway's subscription).

    Example:
        publisher = PushPublisher(redis_client)
        await publisher.send(user_id, {"title": "...", "body": "...", "data": {...}})
    """

    CHANNEL_PREFIX = "push"
    """Redis channel prefix - must match the push gateway's subscription."""

    def __init__(self, redis_client: Redis) -> None:  # type: ignore[type-arg]
        self._redis = redis_client

    def channel_for(self, user_id: UUID) -> str:
        return f"{self.CHANNEL_PREFIX}:user:{user_id}"

    async def send(self, user_id: UUID, payload: dict[str, Any]) -> int:
        """Publish ``payload`` for ``user_id``.

        Args:
            user_id: Target user.
            payload: ``{title, body, icon, data}`` push content.

        Returns:
            Number of gateway subscribers that received the event.

        Raises:
            PushDeliveryError: Redis rejected or failed the publish.
        """
        event = {
            "event_id": str(uuid7()),
            "user_id": str(user_id),
            "payload": payload,
            "occurred_at": datetime.now(UTC).isoformat(),
        }

        try:
            receivers: int = await self._redis.publish(
                self.channel_for(user_id), json.dumps(event)
            )
        except RedisError as e:
            raise PushDeliveryError(f"Push publish for {user_id} failed: {e}") from e

        if not receivers:
            logger.warning("push_gateway_not_listening", user_id=str(user_id))
        return receivers

    async def close(self) -> None:
        """Close the Redis connection (worker shutdown)."""
        await self._redis.aclose()
