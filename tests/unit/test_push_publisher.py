"""Unit tests for the push publisher."""

import json
from unittest.mock import AsyncMock
from uuid import UUID

import pytest
from redis.exceptions import RedisError

from lumina_jobs.core.errors import PushDeliveryError
from lumina_jobs.infrastructure.push_publisher import PushPublisher

USER_ID = UUID("01234567-89ab-cdef-0123-456789abcdef")
PAYLOAD = {"title": "Class Starting Soon!", "body": "Torts starts in 5 minutes", "data": {}}


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Create a mock Redis client."""
    redis = AsyncMock()
    redis.publish = AsyncMock(return_value=1)
    return redis


@pytest.fixture
def publisher(mock_redis: AsyncMock) -> PushPublisher:
    """Create a push publisher with mock Redis."""
    return PushPublisher(mock_redis)


class TestPushPublisher:
    """Tests for PushPublisher class."""

    @pytest.mark.unit
    async def test_send_uses_user_channel(
        self, publisher: PushPublisher, mock_redis: AsyncMock
    ) -> None:
        """Should publish to the gateway's per-user channel."""
        await publisher.send(USER_ID, PAYLOAD)

        channel = mock_redis.publish.call_args[0][0]
        assert channel == f"push:user:{USER_ID}"

    @pytest.mark.unit
    async def test_send_event_structure(
        self, publisher: PushPublisher, mock_redis: AsyncMock
    ) -> None:
        """Should wrap the payload in an identifiable event."""
        await publisher.send(USER_ID, PAYLOAD)

        event = json.loads(mock_redis.publish.call_args[0][1])
        assert event["user_id"] == str(USER_ID)
        assert event["payload"] == PAYLOAD
        assert UUID(event["event_id"]).version == 7
        assert "occurred_at" in event

    @pytest.mark.unit
    async def test_send_returns_receiver_count(
        self, publisher: PushPublisher, mock_redis: AsyncMock
    ) -> None:
        """Zero receivers is reported, not raised."""
        mock_redis.publish.return_value = 0

        assert await publisher.send(USER_ID, PAYLOAD) == 0

    @pytest.mark.unit
    async def test_send_raises_on_redis_error(
        self, publisher: PushPublisher, mock_redis: AsyncMock
    ) -> None:
        """Redis failures surface as PushDeliveryError for the dispatcher to count."""
        mock_redis.publish.side_effect = RedisError("Connection refused")

        with pytest.raises(PushDeliveryError):
            await publisher.send(USER_ID, PAYLOAD)

    @pytest.mark.unit
    async def test_close_closes_redis(
        self, publisher: PushPublisher, mock_redis: AsyncMock
    ) -> None:
        await publisher.close()

        mock_redis.aclose.assert_awaited_once()
