"""Leader documents — interviews and their AI annotation versions."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def as_list(value: object) -> list:
    """Coerce a missing or malformed collection to a list."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def as_str_list(value: object) -> list[str]:
    return [v for v in as_list(value) if isinstance(v, str)]


def as_doc_list(value: object) -> list:
    return [v for v in as_list(value) if isinstance(v, (dict, BaseModel))]


def as_str(value: object) -> str:
    """Missing or non-string text reads as empty."""
    return value if isinstance(value, str) else ""


def as_optional_str(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _has_version_id(value: object) -> bool:
    if isinstance(value, BaseModel):
        return True
    return isinstance(value.get("versionId", value.get("version_id")), str)


class Document(BaseModel):
    """Base for stored documents: camelCase on disk, snake_case in code."""

    model_config = ConfigDict(populate_by_name=True)

    def to_doc(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class QASegment(Document):
    """A question/answer pair located in a transcript."""

    question: str = ""
    question_start: str | None = Field(default=None, alias="questionStart")
    question_end: str | None = Field(default=None, alias="questionEnd")
    answer: str = ""
    answer_start: str | None = Field(default=None, alias="answerStart")
    answer_end: str | None = Field(default=None, alias="answerEnd")
    # True when the question was written by the model for unprompted content
    is_jeopardy_style: bool = Field(default=False, alias="isJeopardyStyle")

    @field_validator("question", "answer", mode="before")
    @classmethod
    def _text(cls, value: object) -> str:
        return as_str(value)

    @field_validator("question_start", "question_end", "answer_start", "answer_end", mode="before")
    @classmethod
    def _times(cls, value: object) -> str | None:
        return as_optional_str(value)

    @field_validator("is_jeopardy_style", mode="before")
    @classmethod
    def _flag(cls, value: object) -> bool:
        return value is True


class ChapterMarker(Document):
    """A titled, timestamped chapter of an interview."""

    timestamp: str = ""
    title: str = ""
    description: str = ""
    themes: list[str] = Field(default_factory=list)
    custom_themes: list[str] = Field(default_factory=list, alias="customThemes")
    is_noise_segment: bool = Field(default=False, alias="isNoiseSegment")
    context_card: str | None = Field(default=None, alias="contextCard")
    matched_topics: list[str] | None = Field(default=None, alias="matchedTopics")

    @field_validator("timestamp", "title", "description", mode="before")
    @classmethod
    def _text(cls, value: object) -> str:
        return as_str(value)

    @field_validator("context_card", mode="before")
    @classmethod
    def _card(cls, value: object) -> str | None:
        return as_optional_str(value)

    @field_validator("is_noise_segment", mode="before")
    @classmethod
    def _flag(cls, value: object) -> bool:
        return value is True

    @field_validator("themes", "custom_themes", mode="before")
    @classmethod
    def _themes(cls, value: object) -> list[str]:
        return as_str_list(value)

    @field_validator("matched_topics", mode="before")
    @classmethod
    def _matched(cls, value: object) -> list[str] | None:
        if value is None:
            return None
        return as_str_list(value)


class NoiseSegment(Document):
    """Noise chapter stored apart from the chapter list (older documents)."""

    timestamp: str = ""
    title: str = ""
    description: str = ""
    themes: list[str] = Field(default_factory=list)
    custom_themes: list[str] = Field(default_factory=list, alias="customThemes")
    context_card: str | None = Field(default=None, alias="contextCard")

    @field_validator("timestamp", "title", "description", mode="before")
    @classmethod
    def _text(cls, value: object) -> str:
        return as_str(value)

    @field_validator("context_card", mode="before")
    @classmethod
    def _card(cls, value: object) -> str | None:
        return as_optional_str(value)

    @field_validator("themes", "custom_themes", mode="before")
    @classmethod
    def _themes(cls, value: object) -> list[str]:
        return as_str_list(value)


class AnalysisVersion(Document):
    """One immutable snapshot of the annotations generated for a transcript."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    version_id: str = Field(alias="versionId")
    timestamp: datetime | None = None
    qa_segments: list[QASegment] = Field(default_factory=list, alias="qaSegments")
    chapter_markers: list[ChapterMarker] = Field(default_factory=list, alias="chapterMarkers")
    noise_segment: NoiseSegment | None = Field(default=None, alias="noiseSegment")

    @field_validator("qa_segments", "chapter_markers", mode="before")
    @classmethod
    def _docs(cls, value: object) -> list:
        return as_doc_list(value)

    @field_validator("noise_segment", mode="before")
    @classmethod
    def _noise(cls, value: object) -> object:
        return value if isinstance(value, (dict, NoiseSegment)) else None

    @property
    def noise_chapter(self) -> ChapterMarker | None:
        for marker in self.chapter_markers:
            if marker.is_noise_segment:
                return marker
        return None


class Leader(Document):
    """A cataloged interview subject. The name is the primary key."""

    name: str
    title: str | None = None
    video_url: str = Field(default="", alias="videoURL")
    transcript_url: str = Field(default="", alias="transcriptURL")
    thumbnail_url: str | None = Field(default=None, alias="thumbnailURL")
    analysis_versions: list[AnalysisVersion] = Field(
        default_factory=list, alias="analysisVersions"
    )
    latest_analysis_version: str | None = Field(default=None, alias="latestAnalysisVersion")
    # Highest version number ever assigned; ids are not reused after deletion
    version_counter: int = Field(default=0, alias="versionCounter")

    @field_validator("video_url", "transcript_url", mode="before")
    @classmethod
    def _urls(cls, value: object) -> str:
        return as_str(value)

    @field_validator("title", "thumbnail_url", "latest_analysis_version", mode="before")
    @classmethod
    def _optional(cls, value: object) -> str | None:
        return as_optional_str(value)

    @field_validator("version_counter", mode="before")
    @classmethod
    def _counter(cls, value: object) -> int:
        return value if isinstance(value, int) and not isinstance(value, bool) else 0

    @field_validator("analysis_versions", mode="before")
    @classmethod
    def _versions(cls, value: object) -> list:
        # a version without an id cannot be addressed or designated
        return [v for v in as_doc_list(value) if _has_version_id(v)]

    @property
    def display_title(self) -> str:
        return self.title or self.name

    def default_version(self) -> AnalysisVersion | None:
        """The version designated for display, if the pointer resolves."""
        if not self.latest_analysis_version:
            return None
        for version in self.analysis_versions:
            if version.version_id == self.latest_analysis_version:
                return version
        return None
