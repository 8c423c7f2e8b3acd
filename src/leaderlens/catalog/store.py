"""File-backed document store for leaders and the topic analysis.

Layout under the store root::

    leaders/<slug>-<hash>.json        one document per leader
    analysis/topic_distribution.json  cached corpus topic analysis
"""

from __future__ import annotations

import hashlib
import re
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from leaderlens.models.leader import (
    AnalysisVersion,
    ChapterMarker,
    Leader,
    NoiseSegment,
    QASegment,
)
from leaderlens.models.topics import TopicAnalysis
from leaderlens.utils.io import DocumentReadError, iter_json_documents, read_json, write_json
from leaderlens.utils.progress import log_warning

_VERSION_RE = re.compile(r"^v(\d+)$")


class LeaderNotFoundError(LookupError):
    """Raised when no leader document exists for a name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Leader not found: {name}")


class DuplicateLeaderError(ValueError):
    """Raised when creating a leader whose name is already taken."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Leader already exists: {name}")


class InvalidVersionIndexError(IndexError):
    """Raised for an out-of-range analysis version index."""

    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(
            f"Invalid version index {index}: leader has {count} version(s)"
        )


def _doc_filename(name: str) -> str:
    slug = re.sub(r"[^A-Za-z0-9]+", "-", name).strip("-").lower()[:60] or "leader"
    digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:8]
    return f"{slug}-{digest}.json"


def _highest_version_number(leader: Leader) -> int:
    highest = leader.version_counter
    for version in leader.analysis_versions:
        match = _VERSION_RE.match(version.version_id)
        if match:
            highest = max(highest, int(match.group(1)))
    return highest


class LeaderStore:
    """CRUD over leader documents and the topic analysis document."""

    def __init__(self, root: Path | str):
        self.root = Path(root)
        self.leaders_dir = self.root / "leaders"
        self.analysis_path = self.root / "analysis" / "topic_distribution.json"

    def _path(self, name: str) -> Path:
        return self.leaders_dir / _doc_filename(name)

    def _save(self, leader: Leader) -> None:
        write_json(self._path(leader.name), leader.to_doc())

    def exists(self, name: str) -> bool:
        return self._path(name).exists()

    def create_leader(
        self,
        name: str,
        video_url: str,
        transcript_url: str,
        *,
        thumbnail_url: str | None = None,
        title: str | None = None,
    ) -> Leader:
        """Register a new leader; name, video and transcript are required."""
        name = name.strip()
        missing = [
            label
            for label, value in (
                ("name", name),
                ("video URL", video_url),
                ("transcript URL", transcript_url),
            )
            if not value
        ]
        if missing:
            raise ValueError(f"Missing required field(s): {', '.join(missing)}")
        if self.exists(name):
            raise DuplicateLeaderError(name)

        leader = Leader(
            name=name,
            title=title,
            video_url=video_url,
            transcript_url=transcript_url,
            thumbnail_url=thumbnail_url or None,
        )
        self._save(leader)
        return leader

    def read_all(self) -> list[Leader]:
        """Load every leader document, sorted by name."""
        leaders = []
        for path, data in iter_json_documents(self.leaders_dir):
            if isinstance(data, DocumentReadError):
                log_warning(str(data))
                continue
            if not isinstance(data, dict) or not data.get("name"):
                log_warning(f"Skipping malformed leader document: {path.name}")
                continue
            try:
                leaders.append(Leader.model_validate(data))
            except ValidationError as e:
                log_warning(f"Skipping invalid leader document {path.name}: {e.error_count()} error(s)")
        leaders.sort(key=lambda leader: leader.name)
        return leaders

    def get(self, name: str) -> Leader:
        path = self._path(name)
        if not path.exists():
            raise LeaderNotFoundError(name)
        return Leader.model_validate(read_json(path))

    def append_version(
        self,
        name: str,
        qa_segments: list[QASegment],
        chapter_markers: list[ChapterMarker],
        *,
        noise_segment: NoiseSegment | None = None,
        now: datetime | None = None,
    ) -> AnalysisVersion:
        """Append a new version and designate it as the default."""
        leader = self.get(name)
        number = _highest_version_number(leader) + 1
        version = AnalysisVersion(
            version_id=f"v{number}",
            timestamp=now or datetime.now(timezone.utc),
            qa_segments=qa_segments,
            chapter_markers=chapter_markers,
            noise_segment=noise_segment,
        )
        leader.analysis_versions.append(version)
        leader.latest_analysis_version = version.version_id
        leader.version_counter = number
        self._save(leader)
        return version

    def delete_version(self, name: str, index: int) -> Leader:
        """Remove the version at ``index``.

        If the default version is removed, the last remaining version becomes
        the default; with no versions left the pointer is cleared.
        """
        leader = self.get(name)
        versions = leader.analysis_versions
        if index < 0 or index >= len(versions):
            raise InvalidVersionIndexError(index, len(versions))

        leader.version_counter = _highest_version_number(leader)
        del versions[index]

        if versions:
            if not any(v.version_id == leader.latest_analysis_version for v in versions):
                leader.latest_analysis_version = versions[-1].version_id
        else:
            leader.latest_analysis_version = None

        self._save(leader)
        return leader

    def set_default_version(self, name: str, index: int) -> Leader:
        leader = self.get(name)
        versions = leader.analysis_versions
        if index < 0 or index >= len(versions):
            raise InvalidVersionIndexError(index, len(versions))
        leader.latest_analysis_version = versions[index].version_id
        self._save(leader)
        return leader

    def replace_version(self, name: str, version: AnalysisVersion) -> Leader:
        """Swap in a new snapshot for the version with the same id."""
        leader = self.get(name)
        for i, existing in enumerate(leader.analysis_versions):
            if existing.version_id == version.version_id:
                leader.analysis_versions[i] = version
                self._save(leader)
                return leader
        raise KeyError(f"{name} has no analysis version {version.version_id}")

    def load_topic_analysis(self) -> TopicAnalysis | None:
        data = read_json(self.analysis_path, default=None)
        return TopicAnalysis.model_validate(data) if data is not None else None

    def save_topic_analysis(self, analysis: TopicAnalysis) -> None:
        write_json(self.analysis_path, analysis.to_doc())
