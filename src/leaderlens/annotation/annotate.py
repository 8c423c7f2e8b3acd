"""Annotate a leader's transcript and store the result as a new version."""

from __future__ import annotations

from typing import Callable

from leaderlens.annotation.gateway import AnnotationGateway
from leaderlens.catalog.store import LeaderStore
from leaderlens.catalog.transcript import fetch_transcript
from leaderlens.models.leader import AnalysisVersion, Leader
from leaderlens.utils.progress import log_step, log_success, plural


def used_themes(leader: Leader) -> list[str]:
    """Official themes already assigned in any version, first-seen order."""
    seen: dict[str, None] = {}
    for version in leader.analysis_versions:
        for marker in version.chapter_markers:
            for theme in marker.themes:
                seen.setdefault(theme, None)
    return list(seen)


def annotate_leader(
    store: LeaderStore,
    gateway: AnnotationGateway,
    name: str,
    *,
    fetch: Callable[[str], str] = fetch_transcript,
) -> AnalysisVersion:
    """Fetch transcript → Q&A → chapters → append a version.

    Any failure propagates before the store is touched.
    """
    leader = store.get(name)

    log_step("Annotate", f"[1/3] Fetching transcript for {leader.display_title}")
    transcript = fetch(leader.transcript_url)

    log_step("Annotate", "[2/3] Identifying Q&A segments")
    qa_segments = gateway.identify_qa(transcript)

    log_step("Annotate", f"[3/3] Generating chapters ({len(qa_segments)} Q&A boundaries)")
    chapters = gateway.generate_chapter_markers(transcript, qa_segments, used_themes(leader))

    version = store.append_version(name, qa_segments, chapters)
    log_success(
        f"{leader.display_title}: {version.version_id} with "
        f"{plural(len(qa_segments), 'Q&A segment')}, {plural(len(chapters), 'chapter')}"
    )
    return version
