"""Integration tests for broker with real Redis.

These tests require Redis to be running at REDIS_URL and test actual
connection and enqueue behavior.
"""

from uuid import uuid4

import pytest
from redis.asyncio import Redis

# Import tasks to ensure registration
from lumina_jobs import tasks  # noqa: F401
from lumina_jobs.broker import broker
from lumina_jobs.core.settings import get_settings
from lumina_jobs.infrastructure.push_publisher import PushPublisher
from lumina_jobs.tasks.rollover import rollover_recurring_class


@pytest.mark.integration
async def test_broker_can_connect_to_redis() -> None:
    """Test that broker can establish Redis connection."""
    await broker.startup()
    await broker.shutdown()


@pytest.mark.integration
async def test_task_can_be_enqueued() -> None:
    """A rollover job can be queued without a worker running."""
    await broker.startup()

    try:
        handle = await rollover_recurring_class.kiq("00000000-0000-0000-0000-000000000000")
        assert handle.task_id
    finally:
        await broker.shutdown()


@pytest.mark.integration
async def test_broker_startup_shutdown_cycle() -> None:
    """Test broker can handle multiple startup/shutdown cycles."""
    await broker.startup()
    await broker.shutdown()

    await broker.startup()
    await broker.shutdown()


@pytest.mark.integration
async def test_push_event_reaches_subscriber() -> None:
    """A gateway subscribed to the user channel receives the push event."""
    redis = Redis.from_url(get_settings().redis_url)
    publisher = PushPublisher(redis)
    user_id = uuid4()
    pubsub = redis.pubsub()
    await pubsub.subscribe(publisher.channel_for(user_id))

    try:
        receivers = await publisher.send(user_id, {"title": "t", "body": "b", "data": {}})
        assert receivers == 1
    finally:
        await pubsub.unsubscribe()
        await pubsub.aclose()
        await publisher.close()
