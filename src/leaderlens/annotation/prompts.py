"""Prompt templates for the annotation gateway."""

from __future__ import annotations

import json

from leaderlens.annotation.vocabulary import (
    MAX_CUSTOM_THEMES,
    MAX_OFFICIAL_THEMES,
    OFFICIAL_THEMES,
)
from leaderlens.models.leader import QASegment

QA_SYSTEM_PROMPT = """You analyze interview transcripts and locate question \
and answer exchanges. Respond with a single JSON object and nothing else."""

QA_PROMPT = """Find every question/answer exchange in the interview transcript below.

Return a JSON object of the form:
{{"segments": [{{"questionStart": "HH:MM:SS", "questionEnd": "HH:MM:SS",
  "question": "...", "answerStart": "HH:MM:SS", "answerEnd": "HH:MM:SS",
  "answer": "...", "isJeopardyStyle": false}}]}}

Rules:
- Use the transcript's own timestamps.
- When meaningful content has no explicit question, write one and set
  "isJeopardyStyle" to true. Its question timestamps equal the answer start.

TRANSCRIPT:
{transcript}"""

CHAPTER_SYSTEM_PROMPT = """You divide career-exploration interviews into \
chapters that follow the natural flow of the conversation and tag them with \
themes. Respond with a single JSON object and nothing else."""

CHAPTER_PROMPT = """Create 5-7 chapter markers for the interview transcript below.

Return a JSON object of the form:
{{"chapterMarkers": [{{"timestamp": "HH:MM:SS", "title": "...",
  "description": "...", "themes": ["..."], "customThemes": ["..."],
  "isNoiseSegment": false}}]}}

Rules:
- Chapters run 2-8 minutes and start at natural topic breaks.
- "themes": at most {max_official} entries, chosen ONLY from this list:
{vocabulary}
- "customThemes": {max_custom} short (1-3 word) themes not in that list.
- Exactly one chapter is the Noise chapter: the part where the interviewee
  deals with advice, expectations or pressure from other people. Set
  "isNoiseSegment" to true and add "contextCard": at most two standalone
  sentences describing the situation leading up to it, without revealing
  the outcome and without referring to the video or the chapter itself.
{used_themes}{qa_boundaries}
TRANSCRIPT:
{transcript}"""

TOPIC_SYSTEM_PROMPT = """You identify topics shared across a collection of \
interviews. Respond with a single JSON object and nothing else."""

TOPIC_PROMPT = """Identify the topic distribution and key topics across these interviews.

Return a JSON object of the form:
{{"topicDistribution": [{{"topic": "...", "percentage": 25.0, "description": "..."}}],
 "keyTopics": [{{"topic": "...", "description": "...",
   "relatedInterviews": ["interview id"],
   "keyQuotes": [{{"interviewId": "interview id", "quote": "..."}}]}}]}}

Rules:
- 5-7 broad categories in "topicDistribution"; percentages sum to 100.
- 8-12 specific "keyTopics" appearing in several interviews, each with the
  ids of related interviews and 1-2 quotes where available.

INTERVIEW SUMMARIES:
{summaries}"""

ENHANCE_PROMPT = """Refine this topic analysis using the interview excerpts below.

CURRENT ANALYSIS:
{analysis}

EXCERPTS:
{excerpts}

Return the same JSON structure with "topicDistribution" unchanged, each key
topic given an "insights" field and better quotes (each quote may carry a
"context" field), plus a top-level "topicInsights" string describing how the
topics relate to each other."""

CATEGORIZE_SYSTEM_PROMPT = """You assign interview chapters to topics. \
Respond with a single JSON object and nothing else."""

CATEGORIZE_PROMPT = """Assign each chapter to one to three of the topics listed.

TOPICS:
{topics}

CHAPTERS:
{chapters}

Every chapter gets at least one topic and every topic should receive at least
one chapter. Use topic names exactly as listed. Return:
{{"categorizedChapters": [{{"id": "chapter id", "matchedTopics": ["..."]}}]}}"""


def build_chapter_prompt(
    transcript: str,
    qa_segments: list[QASegment],
    used_themes: list[str],
    *,
    excerpt_chars: int = 100,
) -> str:
    used = ""
    if used_themes:
        used = f"- Themes already used for this interview: {json.dumps(used_themes)}\n"

    boundaries = ""
    if qa_segments:
        lines = [
            f'- Q ({qa.question_start} - {qa.question_end}): "{qa.question[:excerpt_chars]}" / '
            f'A ({qa.answer_start} - {qa.answer_end}): "{qa.answer[:excerpt_chars]}"'
            for qa in qa_segments
        ]
        boundaries = (
            "\nQ&A boundaries (prefer chapter breaks on these):\n"
            + "\n".join(lines)
            + "\n"
        )

    return CHAPTER_PROMPT.format(
        max_official=MAX_OFFICIAL_THEMES,
        max_custom=f"1-{MAX_CUSTOM_THEMES}",
        vocabulary=json.dumps(list(OFFICIAL_THEMES)),
        used_themes=used,
        qa_boundaries=boundaries,
        transcript=transcript,
    )
