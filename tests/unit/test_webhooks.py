"""Unit tests for video webhook processing."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from conftest import create_live_class

from lumina_jobs.services.recordings import SyncOutcome
from lumina_jobs.services.webhooks import VideoEventHandler, room_name_of

NOW = datetime(2025, 1, 13, 17, 30, tzinfo=UTC)
MODULE = "lumina_jobs.services.webhooks"


@pytest.fixture
def classes() -> MagicMock:
    repo = MagicMock()
    repo.mark_live = AsyncMock(return_value=[uuid4()])
    repo.mark_ended = AsyncMock(return_value=[uuid4()])
    repo.find_by_room = AsyncMock(return_value=None)
    repo.find_awaiting_rollover = AsyncMock(return_value=repo.mark_ended.return_value)
    return repo


@pytest.fixture
def recordings() -> MagicMock:
    service = MagicMock()
    service.sync_class = AsyncMock(return_value=SyncOutcome.SYNCED)
    return service


@pytest.fixture
def handler(mock_database: MagicMock, recordings: MagicMock) -> VideoEventHandler:
    return VideoEventHandler(mock_database, recordings)


@pytest.mark.unit
def test_room_name_read_from_root_or_payload() -> None:
    assert room_name_of({"room_name": "a"}) == "a"
    assert room_name_of({"payload": {"room_name": "b"}}) == "b"
    assert room_name_of({"payload": {"room": "c"}}) == "c"
    assert room_name_of({}) is None


@pytest.mark.unit
async def test_meeting_started_marks_live(
    handler: VideoEventHandler, classes: MagicMock
) -> None:
    with patch(f"{MODULE}.LiveClassRepository", return_value=classes):
        result = await handler.handle(
            {"type": "meeting.started", "payload": {"room_name": "lumina-1"}}, now=NOW
        )

    classes.mark_live.assert_awaited_once_with("lumina-1", NOW)
    assert result.handled
    assert len(result.started_class_ids) == 1
    assert result.ended_class_ids == []


@pytest.mark.unit
async def test_meeting_ended_reports_ended_classes(
    handler: VideoEventHandler, classes: MagicMock
) -> None:
    """Ended ids are returned so the job can queue rollovers."""
    with patch(f"{MODULE}.LiveClassRepository", return_value=classes):
        result = await handler.handle({"type": "meeting.ended", "room_name": "lumina-1"}, now=NOW)

    classes.mark_ended.assert_awaited_once_with("lumina-1", NOW)
    assert result.ended_class_ids == classes.mark_ended.return_value
    classes.find_awaiting_rollover.assert_awaited_once_with("lumina-1")
    assert result.rollover_class_ids == classes.mark_ended.return_value


@pytest.mark.unit
async def test_meeting_ended_again_still_reports_classes_awaiting_rollover(
    handler: VideoEventHandler, classes: MagicMock
) -> None:
    """A repeated event transitions nothing but keeps rollover candidates."""
    earlier = uuid4()
    classes.mark_ended = AsyncMock(return_value=[])
    classes.find_awaiting_rollover = AsyncMock(return_value=[earlier])

    with patch(f"{MODULE}.LiveClassRepository", return_value=classes):
        result = await handler.handle({"type": "meeting.ended", "room_name": "lumina-1"}, now=NOW)

    assert result.ended_class_ids == []
    assert result.rollover_class_ids == [earlier]
    assert result.as_dict()["rollover"] == [str(earlier)]


@pytest.mark.unit
async def test_recording_ready_syncs_class(
    handler: VideoEventHandler, classes: MagicMock, recordings: MagicMock
) -> None:
    live_class = create_live_class()
    classes.find_by_room = AsyncMock(return_value=live_class)

    with patch(f"{MODULE}.LiveClassRepository", return_value=classes):
        result = await handler.handle(
            {"type": "recording.ready-to-download", "room_name": live_class.daily_room_name}
        )

    recordings.sync_class.assert_awaited_once_with(live_class)
    assert result.recording == SyncOutcome.SYNCED


@pytest.mark.unit
async def test_recording_for_unknown_room_is_not_handled(
    handler: VideoEventHandler, classes: MagicMock, recordings: MagicMock
) -> None:
    with patch(f"{MODULE}.LiveClassRepository", return_value=classes):
        result = await handler.handle(
            {"type": "recording.ready-to-download", "room_name": "unknown"}
        )

    assert not result.handled
    recordings.sync_class.assert_not_called()


@pytest.mark.unit
async def test_other_events_are_ignored(
    handler: VideoEventHandler, classes: MagicMock
) -> None:
    with patch(f"{MODULE}.LiveClassRepository", return_value=classes):
        result = await handler.handle({"type": "participant.joined", "room_name": "x"})

    assert not result.handled
    classes.mark_live.assert_not_called()
    classes.mark_ended.assert_not_called()


@pytest.mark.unit
async def test_event_without_room_is_ignored(
    handler: VideoEventHandler, classes: MagicMock
) -> None:
    with patch(f"{MODULE}.LiveClassRepository", return_value=classes):
        result = await handler.handle({"type": "meeting.ended", "payload": {}})

    assert not result.handled
    classes.mark_ended.assert_not_called()
