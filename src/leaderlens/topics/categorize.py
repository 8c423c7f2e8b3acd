"""Assign corpus key topics to the chapters of each default version."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from leaderlens.annotation.gateway import AnnotationGateway
from leaderlens.catalog.store import LeaderStore
from leaderlens.models.leader import ChapterMarker
from leaderlens.models.topics import KeyTopic
from leaderlens.topics.analysis import TopicAnalysisError
from leaderlens.utils.progress import log, log_step, log_success, plural

TITLE_WEIGHT = 1.0
THEME_WEIGHT = 0.75
DESCRIPTION_WEIGHT = 0.5
KEYWORD_WEIGHT = 0.1
MAX_KEYWORD_SCORE = 0.5

STOPWORDS = frozenset(
    "about after also and are been being between both but can could does each for from "
    "have how into its more most much not other over same should some such than that "
    "the their them then there these they this those through under very was were what "
    "when where which while who will with would your".split()
)


def _contains_either(a: str, b: str) -> bool:
    a, b = a.strip().lower(), b.strip().lower()
    if not a or not b:
        return False
    return a in b or b in a


def keywords(text: str) -> set[str]:
    return {
        word for word in re.findall(r"[a-z][a-z'-]+", text.lower())
        if len(word) > 3 and word not in STOPWORDS
    }


def topic_score(marker: ChapterMarker, topic: KeyTopic) -> float:
    """Weighted overlap between a chapter and a key topic."""
    score = 0.0
    if _contains_either(marker.title, topic.topic):
        score += TITLE_WEIGHT
    if any(_contains_either(theme, topic.topic) for theme in marker.themes):
        score += THEME_WEIGHT
    if any(_contains_either(theme, topic.topic) for theme in marker.custom_themes):
        score += THEME_WEIGHT
    if topic.topic.strip() and topic.topic.lower() in marker.description.lower():
        score += DESCRIPTION_WEIGHT

    chapter_words = keywords(" ".join(
        [marker.title, marker.description, *marker.themes, *marker.custom_themes]
    ))
    topic_words = keywords(f"{topic.topic} {topic.description}")
    shared = len(chapter_words & topic_words)
    score += min(shared * KEYWORD_WEIGHT, MAX_KEYWORD_SCORE)
    return score


def fallback_match(
    marker: ChapterMarker,
    topics: list[KeyTopic],
    *,
    threshold: float = 0.5,
    max_topics: int = 3,
) -> list[str]:
    """Topics scoring at least ``threshold``, best first, ties in topic order.

    A chapter that matches nothing gets an empty list.
    """
    scored = [
        (topic_score(marker, topic), i, topic.topic)
        for i, topic in enumerate(topics)
    ]
    ranked = sorted((s for s in scored if s[0] >= threshold), key=lambda s: (-s[0], s[1]))
    return list(dict.fromkeys(name for _, _, name in ranked))[:max_topics]


@dataclass
class LeaderCategorization:
    leader_id: str
    title: str
    chapters_processed: int


@dataclass
class CategorizationResult:
    total_leaders: int = 0
    total_chapters: int = 0
    leaders: list[LeaderCategorization] = field(default_factory=list)


def categorize_chapters_by_topic(
    store: LeaderStore,
    gateway: AnnotationGateway | None = None,
    *,
    use_ai: bool = True,
    threshold: float = 0.5,
    max_topics: int = 3,
    now: datetime | None = None,
) -> CategorizationResult:
    """Write ``matchedTopics`` onto every chapter of each leader's default version.

    Versions are replaced wholesale. When the AI categorizer fails the error
    propagates and leaders already processed keep their new topics.
    """
    analysis = store.load_topic_analysis()
    if analysis is None or not analysis.key_topics:
        raise TopicAnalysisError("No topic analysis found. Generate the topic analysis first.")
    if use_ai and gateway is None:
        raise ValueError("A gateway is required for AI categorization")

    topics = analysis.key_topics
    leaders = [
        leader for leader in store.read_all()
        if leader.latest_analysis_version and leader.analysis_versions
    ]
    if not leaders:
        raise TopicAnalysisError("No leaders with analysis found")

    result = CategorizationResult(total_leaders=len(leaders))
    method = "AI" if use_ai else "keyword matching"
    log_step("Categorize", f"{plural(len(leaders), 'leader')}, {plural(len(topics), 'topic')} via {method}")

    for leader in leaders:
        version = leader.default_version()
        if version is None or not version.chapter_markers:
            continue

        markers = version.chapter_markers
        if use_ai:
            assigned = gateway.categorize_chapters(markers, topics)
        else:
            assigned = [
                fallback_match(m, topics, threshold=threshold, max_topics=max_topics)
                for m in markers
            ]

        updated = version.model_copy(update={
            "chapter_markers": [
                marker.model_copy(update={"matched_topics": names})
                for marker, names in zip(markers, assigned)
            ],
        })
        store.replace_version(leader.name, updated)

        result.total_chapters += len(markers)
        result.leaders.append(LeaderCategorization(
            leader_id=leader.name,
            title=leader.display_title,
            chapters_processed=len(markers),
        ))
        log(f"{leader.display_title}: {plural(len(markers), 'chapter')}")

    store.save_topic_analysis(
        analysis.model_copy(update={"categorized_at": now or datetime.now(timezone.utc)})
    )
    log_success(f"Categorized {plural(result.total_chapters, 'chapter')}")
    return result
