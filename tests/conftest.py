"""Shared fixtures: a temporary store, leader builders and a stub LLM client."""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from leaderlens.annotation.gateway import AnnotationGateway
from leaderlens.catalog.store import LeaderStore
from leaderlens.models.leader import AnalysisVersion, ChapterMarker, Leader


def make_marker(title: str = "Chapter", themes=(), custom=(), **kwargs) -> ChapterMarker:
    return ChapterMarker(
        timestamp=kwargs.pop("timestamp", "00:00:00"),
        title=title,
        themes=list(themes),
        custom_themes=list(custom),
        **kwargs,
    )


def make_leader(name: str, *chapters: ChapterMarker, default: bool = True) -> Leader:
    """A leader with one version holding ``chapters``."""
    version = AnalysisVersion(version_id="v1", chapter_markers=list(chapters))
    return Leader(
        name=name,
        video_url=f"https://video.example/{name}",
        transcript_url=f"https://transcripts.example/{name}.txt",
        analysis_versions=[version],
        latest_analysis_version="v1" if default else None,
        version_counter=1,
    )


class StubMessages:
    """Replays canned replies and records every request."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if not isinstance(reply, str):
            reply = json.dumps(reply)
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=reply)])


class StubClient:
    def __init__(self, *replies):
        self.messages = StubMessages(replies)


@pytest.fixture
def store(tmp_path):
    return LeaderStore(tmp_path / "store")


@pytest.fixture
def stub_gateway():
    def build(*replies):
        client = StubClient(*replies)
        return AnnotationGateway(client=client), client.messages
    return build
