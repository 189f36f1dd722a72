"""Post-class content repository: transcripts and AI summaries."""

import json
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession


@dataclass(frozen=True)
class TranscriptSegment:
    """One spoken segment of a class transcript."""

    content: str
    timestamp_ms: int
    speaker_name: str = "Unknown"


@dataclass(frozen=True)
class ClassSummary:
    """Structured AI summary of a class."""

    summary: str
    key_points: list[str] = field(default_factory=list)
    topics_covered: list[str] = field(default_factory=list)


class ClassContentRepository:
    """Writes to ``class_transcripts`` and ``class_ai_summaries``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save_transcript(
        self,
        class_id: UUID,
        segments: list[TranscriptSegment],
    ) -> int:
        """Insert transcript segments; returns the number stored."""
        if not segments:
            return 0

        query = text("""
            INSERT INTO class_transcripts (class_id, content, timestamp_ms, speaker_name)
            VALUES (:class_id, :content, :timestamp_ms, :speaker_name)
        """)
        await self._session.execute(
            query,
            [
                {
                    "class_id": class_id,
                    "content": segment.content,
                    "timestamp_ms": segment.timestamp_ms,
                    "speaker_name": segment.speaker_name,
                }
                for segment in segments
            ],
        )
        return len(segments)

    async def save_summary(self, class_id: UUID, summary: ClassSummary) -> None:
        query = text("""
            INSERT INTO class_ai_summaries (class_id, summary, key_points, topics_covered)
            VALUES (
                :class_id, :summary,
                CAST(:key_points AS jsonb), CAST(:topics_covered AS jsonb)
            )
        """)
        await self._session.execute(
            query,
            {
                "class_id": class_id,
                "summary": summary.summary,
                "key_points": json.dumps(summary.key_points),
                "topics_covered": json.dumps(summary.topics_covered),
            },
        )
