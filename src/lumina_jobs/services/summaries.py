"""AI summaries of class transcripts."""

import json
import re
from typing import Any

from lumina_jobs.infrastructure.llm_client import LLMClient
from lumina_jobs.infrastructure.repositories.class_content import (
    ClassSummary,
    TranscriptSegment,
)

MAX_TRANSCRIPT_CHARS = 15000

SUMMARY_SYSTEM_PROMPT = """You are an AI assistant that summarizes educational class recordings.
Create a concise summary including:
1. Main topics covered
2. Key points and takeaways (as bullet points)
3. Any action items or assignments mentioned

Format the response as JSON with these fields:
- summary: string (2-3 paragraph overview)
- key_points: string[] (list of key points)
- topics_covered: string[] (list of main topics)"""

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def transcript_text(segments: list[TranscriptSegment]) -> str:
    return "\n".join(f"{s.speaker_name or 'Speaker'}: {s.content}" for s in segments)


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item]


def parse_summary(content: str) -> ClassSummary:
    """Parse the model's reply into a ClassSummary.

    Accepts bare JSON or JSON wrapped in prose/code fences. Anything else
    is kept verbatim as the summary with empty lists.
    """
    candidates = [content]
    match = _JSON_OBJECT.search(content)
    if match:
        candidates.append(match.group(0))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(data, dict):
            return ClassSummary(
                summary=str(data.get("summary") or content),
                key_points=_string_list(data.get("key_points")),
                topics_covered=_string_list(data.get("topics_covered")),
            )

    return ClassSummary(summary=content)


async def summarize_class(
    llm: LLMClient,
    title: str,
    segments: list[TranscriptSegment],
) -> ClassSummary | None:
    """Summarize a class transcript; None if the model returned nothing."""
    transcript = transcript_text(segments)[:MAX_TRANSCRIPT_CHARS]
    content = await llm.complete(
        SUMMARY_SYSTEM_PROMPT,
        f'Please summarize this class recording transcript for "{title}":\n\n'
        f"{transcript}",
    )
    if not content.strip():
        return None
    return parse_summary(content)
