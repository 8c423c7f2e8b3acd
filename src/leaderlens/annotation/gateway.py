"""LLM annotation gateway — Q&A, chapters, topics and categorization.

Every call sends one prompt to the Claude Messages API and expects a single
JSON object back. Malformed replies raise ``ResponseParseError``; nothing is
salvaged from a partial answer.
"""

from __future__ import annotations

import json
import os
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from leaderlens.annotation.prompts import (
    CATEGORIZE_PROMPT,
    CATEGORIZE_SYSTEM_PROMPT,
    CHAPTER_SYSTEM_PROMPT,
    ENHANCE_PROMPT,
    QA_PROMPT,
    QA_SYSTEM_PROMPT,
    TOPIC_PROMPT,
    TOPIC_SYSTEM_PROMPT,
    build_chapter_prompt,
)
from leaderlens.annotation.vocabulary import MAX_CUSTOM_THEMES, split_official
from leaderlens.models.config import GatewayConfig
from leaderlens.models.leader import ChapterMarker, QASegment
from leaderlens.models.topics import KeyTopic, TopicAnalysis
from leaderlens.utils.progress import log_step, log_warning
from leaderlens.utils.retry import retry_api


class GatewayError(RuntimeError):
    """Raised when a gateway request cannot be made or fails."""


class ResponseParseError(GatewayError):
    """Raised when the model reply is not the expected JSON object."""

    def __init__(self, operation: str, reason: str, text: str = ""):
        self.operation = operation
        self.text = text
        super().__init__(f"{operation}: could not parse model response ({reason})")


def parse_json_response(text: str, operation: str) -> dict:
    """Parse a model reply as a JSON object, tolerating a markdown fence."""
    text = text.strip()
    if text.startswith("```"):
        lines = [line for line in text.split("\n") if not line.strip().startswith("```")]
        text = "\n".join(lines)

    try:
        result = json.loads(text)
    except json.JSONDecodeError as e:
        raise ResponseParseError(operation, str(e), text) from e

    if not isinstance(result, dict):
        raise ResponseParseError(operation, f"expected an object, got {type(result).__name__}", text)
    return result


M = TypeVar("M", bound=BaseModel)


def validate_reply(
    model: type[M],
    data: Any,
    operation: str,
    required: tuple[str, ...] = (),
) -> M:
    """Validate part of a parsed reply; a wrong shape is a parse failure.

    Stored documents read null text as empty, but a reply missing one of the
    ``required`` text fields is rejected.
    """
    missing = [
        key for key in required
        if not isinstance(data, dict) or not isinstance(data.get(key), str)
    ]
    if missing:
        raise ResponseParseError(
            operation,
            f"missing text field(s): {', '.join(missing)}",
            json.dumps(data, default=str),
        )
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ResponseParseError(operation, str(e), json.dumps(data, default=str)) from e


def _list_field(result: dict, key: str) -> list[dict]:
    value = result.get(key) or []
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def normalize_chapters(raw: list[dict]) -> list[ChapterMarker]:
    """Validate chapter markers against the theme vocabulary.

    Official themes outside the vocabulary (or beyond three) are dropped,
    custom themes are capped at two, and only the first chapter flagged as
    Noise keeps the flag and its context card.
    """
    chapters: list[ChapterMarker] = []
    noise_seen = False
    for item in raw:
        marker = validate_reply(
            ChapterMarker, item, "generate_chapter_markers", required=("timestamp", "title")
        )
        themes, rejected = split_official(marker.themes)
        if rejected:
            log_warning(f"Dropped themes outside the vocabulary in '{marker.title}': {rejected}")

        is_noise = marker.is_noise_segment and not noise_seen
        if marker.is_noise_segment and noise_seen:
            log_warning(f"Extra Noise chapter '{marker.title}' unflagged")
        noise_seen = noise_seen or is_noise

        chapters.append(marker.model_copy(update={
            "themes": themes,
            "custom_themes": list(dict.fromkeys(marker.custom_themes))[:MAX_CUSTOM_THEMES],
            "is_noise_segment": is_noise,
            "context_card": marker.context_card if is_noise else None,
            "matched_topics": None,
        }))

    if chapters and not noise_seen:
        log_warning("No chapter was designated as the Noise chapter")
    return chapters


class AnnotationGateway:
    """Thin client over the Anthropic Messages API.

    ``client`` may be any object exposing ``messages.create``; by default an
    ``anthropic.Anthropic`` client is built from ``ANTHROPIC_API_KEY``.
    """

    def __init__(self, config: GatewayConfig | None = None, *, client: Any = None):
        self.config = config or GatewayConfig()
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            api_key = os.environ.get("ANTHROPIC_API_KEY")
            if not api_key:
                raise GatewayError("ANTHROPIC_API_KEY not set")
            try:
                import anthropic
            except ImportError as e:
                raise GatewayError(
                    "anthropic package not installed. Install with: pip install leaderlens[llm]"
                ) from e
            self._client = anthropic.Anthropic(api_key=api_key)
        return self._client

    def _transient_errors(self) -> tuple[type[BaseException], ...]:
        try:
            import anthropic
        except ImportError:
            return ()
        return (
            anthropic.APIConnectionError,
            anthropic.RateLimitError,
            anthropic.InternalServerError,
        )

    def _complete(
        self,
        operation: str,
        system: str,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float,
    ) -> dict:
        client = self.client
        create = retry_api(self.config.max_attempts, extra=self._transient_errors())(
            client.messages.create
        )
        log_step("Gateway", f"{operation} ({self.config.llm_model})")
        try:
            message = create(
                model=self.config.llm_model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise GatewayError(f"{operation}: API request failed: {e}") from e

        text = "".join(
            block.text for block in message.content if getattr(block, "type", "text") == "text"
        )
        return parse_json_response(text, operation)

    def identify_qa(self, transcript: str) -> list[QASegment]:
        if not transcript or not transcript.strip():
            raise GatewayError("Transcript is required")

        result = self._complete(
            "identify_qa",
            QA_SYSTEM_PROMPT,
            QA_PROMPT.format(transcript=transcript),
            max_tokens=self.config.qa_max_tokens,
            temperature=self.config.temperature,
        )
        return [
            validate_reply(QASegment, s, "identify_qa", required=("question", "answer"))
            for s in _list_field(result, "segments")
        ]

    def generate_chapter_markers(
        self,
        transcript: str,
        qa_segments: list[QASegment] | None = None,
        identified_themes: list[str] | None = None,
    ) -> list[ChapterMarker]:
        if not transcript or not transcript.strip():
            raise GatewayError("Transcript is required")

        prompt = build_chapter_prompt(
            transcript,
            qa_segments or [],
            identified_themes or [],
            excerpt_chars=self.config.qa_excerpt_chars,
        )
        result = self._complete(
            "generate_chapter_markers",
            CHAPTER_SYSTEM_PROMPT,
            prompt,
            max_tokens=self.config.chapter_max_tokens,
            temperature=self.config.temperature,
        )
        return normalize_chapters(_list_field(result, "chapterMarkers"))

    def analyze_topic_distribution(self, summaries: list[dict]) -> TopicAnalysis:
        if not summaries:
            raise GatewayError("Transcript summaries are required")

        result = self._complete(
            "analyze_topic_distribution",
            TOPIC_SYSTEM_PROMPT,
            TOPIC_PROMPT.format(summaries=json.dumps(summaries, indent=2)),
            max_tokens=self.config.topic_max_tokens,
            temperature=self.config.temperature,
        )
        return validate_reply(TopicAnalysis, result, "analyze_topic_distribution")

    def enhance_topic_analysis(
        self,
        analysis: TopicAnalysis,
        excerpts: list[dict],
    ) -> TopicAnalysis:
        """Second pass adding insights and better quotes from transcript excerpts."""
        excerpt_text = "\n\n".join(
            f"--- INTERVIEW: {e['id']} ({e['title']}) ---\n"
            f"Relevant topics: {', '.join(e['relevantTopics'])}\n{e['excerpt']}"
            for e in excerpts
        )
        current = analysis.model_dump(
            mode="json",
            by_alias=True,
            include={"topic_distribution", "key_topics"},
        )
        result = self._complete(
            "enhance_topic_analysis",
            TOPIC_SYSTEM_PROMPT,
            ENHANCE_PROMPT.format(analysis=json.dumps(current, indent=2), excerpts=excerpt_text),
            max_tokens=self.config.topic_max_tokens,
            temperature=self.config.temperature,
        )
        return validate_reply(TopicAnalysis, result, "enhance_topic_analysis")

    def categorize_chapters(
        self,
        chapters: list[ChapterMarker],
        topics: list[KeyTopic],
    ) -> list[list[str]]:
        """Return matched topic names per chapter, aligned with ``chapters``."""
        if not topics:
            raise GatewayError("Topics are required")

        chapters_data = [
            {
                "id": str(i),
                "title": c.title,
                "description": c.description,
                "themes": c.themes,
                "customThemes": c.custom_themes,
                "isNoiseSegment": c.is_noise_segment,
            }
            for i, c in enumerate(chapters)
        ]
        topics_data = [{"topic": t.topic, "description": t.description} for t in topics]

        result = self._complete(
            "categorize_chapters",
            CATEGORIZE_SYSTEM_PROMPT,
            CATEGORIZE_PROMPT.format(
                topics=json.dumps(topics_data, indent=2),
                chapters=json.dumps(chapters_data, indent=2),
            ),
            max_tokens=self.config.categorize_max_tokens,
            temperature=self.config.categorize_temperature,
        )

        known = {t.topic for t in topics}
        by_id: dict[str, list[str]] = {}
        for item in _list_field(result, "categorizedChapters"):
            names = item.get("matchedTopics") or []
            if isinstance(names, list):
                by_id[str(item.get("id"))] = [
                    n for n in dict.fromkeys(names) if isinstance(n, str) and n in known
                ]
        return [by_id.get(str(i), []) for i in range(len(chapters))]
