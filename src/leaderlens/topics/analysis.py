"""Corpus topic distribution — summaries, generation and caching."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from leaderlens.annotation.gateway import AnnotationGateway
from leaderlens.catalog.store import LeaderStore
from leaderlens.catalog.transcript import TranscriptFetchError, fetch_transcript
from leaderlens.models.leader import Leader
from leaderlens.models.topics import ChapterRef, TopicAnalysis
from leaderlens.themes.extract import interview_themes
from leaderlens.topics.cache import CacheEntry, StalePredicate, is_stale
from leaderlens.utils.progress import log, log_step, log_success, log_warning, plural

Fetch = Callable[[str], str]


class TopicAnalysisError(RuntimeError):
    """Raised when topic analysis has nothing to work from."""


def analyzable(leaders: list[Leader]) -> list[Leader]:
    """Leaders with a transcript and a designated analysis version."""
    return [
        leader for leader in leaders
        if leader.transcript_url and leader.latest_analysis_version
    ]


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def build_transcript_summaries(
    leaders: list[Leader],
    fetch: Fetch = fetch_transcript,
    *,
    summary_chars: int = 1000,
) -> list[dict]:
    """One summary per analyzable leader; unreadable transcripts are skipped."""
    candidates = analyzable(leaders)
    if not candidates:
        raise TopicAnalysisError("No transcripts available for analysis")

    summaries = []
    for leader in candidates:
        try:
            transcript = fetch(leader.transcript_url)
        except TranscriptFetchError as e:
            log_warning(f"Skipping {leader.name}: {e}")
            continue
        official, custom = interview_themes(leader) or ([], [])
        summaries.append({
            "id": leader.name,
            "title": leader.display_title,
            "transcriptSummary": _truncate(transcript, summary_chars),
            "themes": official,
            "customThemes": custom,
        })

    if not summaries:
        raise TopicAnalysisError("Failed to process any transcripts")
    return summaries


def build_excerpts(
    analysis: TopicAnalysis,
    leaders: list[Leader],
    fetch: Fetch = fetch_transcript,
    *,
    excerpt_chars: int = 1500,
) -> list[dict]:
    """Transcript openings of interviews that key topics point at."""
    excerpts = []
    for leader in analyzable(leaders):
        relevant = [
            topic.topic for topic in analysis.key_topics
            if leader.name in topic.related_interviews
        ]
        if not relevant:
            continue
        try:
            transcript = fetch(leader.transcript_url)
        except TranscriptFetchError as e:
            log_warning(f"No excerpt for {leader.name}: {e}")
            continue
        excerpts.append({
            "id": leader.name,
            "title": leader.display_title,
            "relevantTopics": relevant,
            "excerpt": _truncate(transcript, excerpt_chars),
        })
    return excerpts


def cached_analysis(store: LeaderStore) -> CacheEntry[TopicAnalysis] | None:
    analysis = store.load_topic_analysis()
    if analysis is None:
        return None
    return CacheEntry(value=analysis, generated_at=analysis.generated_at)


def generate_topic_analysis_report(
    store: LeaderStore,
    gateway: AnnotationGateway,
    *,
    fetch: Fetch = fetch_transcript,
    force_refresh: bool = False,
    max_age: timedelta | None = None,
    stale: StalePredicate = is_stale,
    now: datetime | None = None,
    summary_chars: int = 1000,
    excerpt_chars: int = 1500,
) -> TopicAnalysis:
    """Return the cached analysis unless forced or stale; otherwise regenerate.

    Regeneration asks for the distribution from transcript summaries, then
    refines it with excerpts of the interviews the key topics reference.
    """
    now = now or datetime.now(timezone.utc)

    if not force_refresh:
        entry = cached_analysis(store)
        if not stale(entry, now, max_age):
            log(f"Using cached topic analysis from {entry.generated_at}")
            return entry.value

    leaders = store.read_all()
    log_step("Topics", "Summarizing transcripts")
    summaries = build_transcript_summaries(leaders, fetch, summary_chars=summary_chars)

    log_step("Topics", f"Analyzing {plural(len(summaries), 'interview')}")
    analysis = gateway.analyze_topic_distribution(summaries)

    excerpts = build_excerpts(analysis, leaders, fetch, excerpt_chars=excerpt_chars)
    if excerpts:
        log_step("Topics", f"Refining with {plural(len(excerpts), 'excerpt')}")
        analysis = gateway.enhance_topic_analysis(analysis, excerpts)

    analysis = analysis.model_copy(update={"generated_at": now, "categorized_at": None})
    store.save_topic_analysis(analysis)
    log_success(
        f"Topic analysis saved: {len(analysis.topic_distribution)} categories, "
        f"{len(analysis.key_topics)} key topics"
    )
    return analysis


def chapters_by_topic(leaders: list[Leader]) -> dict[str, list[ChapterRef]]:
    """Chapters of each default version, grouped under their matched topics."""
    grouped: dict[str, list[ChapterRef]] = {}
    for leader in leaders:
        version = leader.default_version()
        if version is None:
            continue
        for marker in version.chapter_markers:
            for topic in marker.matched_topics or []:
                grouped.setdefault(topic, []).append(ChapterRef(
                    leader_id=leader.name,
                    leader_title=leader.display_title,
                    chapter_title=marker.title,
                    timestamp=marker.timestamp,
                ))
    return grouped
