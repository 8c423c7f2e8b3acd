"""Corpus-wide topic analysis documents."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, Field, field_validator

from leaderlens.models.leader import Document, as_doc_list, as_str_list


class TopicShare(Document):
    """One slice of the topic distribution."""

    topic: str = Field(validation_alias=AliasChoices("topic", "name"))
    percentage: float = 0.0
    description: str = ""


class KeyQuote(Document):
    interview_id: str = Field(default="", alias="interviewId")
    quote: str = ""
    context: str | None = None


class KeyTopic(Document):
    """A specific topic recurring across interviews."""

    topic: str = Field(validation_alias=AliasChoices("topic", "name"))
    description: str = ""
    related_interviews: list[str] = Field(default_factory=list, alias="relatedInterviews")
    key_quotes: list[KeyQuote] = Field(default_factory=list, alias="keyQuotes")
    insights: str | None = None

    @field_validator("related_interviews", mode="before")
    @classmethod
    def _related(cls, value: object) -> list[str]:
        return as_str_list(value)

    @field_validator("key_quotes", mode="before")
    @classmethod
    def _quotes(cls, value: object) -> list:
        return as_doc_list(value)


class TopicAnalysis(Document):
    """Topic distribution plus key topics, cached between views.

    Distribution percentages are expected to sum to 100; the model is asked
    to enforce that and nothing here re-checks it.
    """

    topic_distribution: list[TopicShare] = Field(
        default_factory=list, alias="topicDistribution"
    )
    key_topics: list[KeyTopic] = Field(default_factory=list, alias="keyTopics")
    topic_insights: str | None = Field(default=None, alias="topicInsights")
    categorized_at: datetime | None = Field(default=None, alias="categorizedAt")
    generated_at: datetime | None = Field(default=None, alias="timestamp")

    @field_validator("topic_distribution", "key_topics", mode="before")
    @classmethod
    def _docs(cls, value: object) -> list:
        return as_doc_list(value)


class ChapterRef(Document):
    """Pointer from a topic back to one chapter of one interview."""

    leader_id: str = Field(alias="leaderId")
    leader_title: str = Field(alias="leaderTitle")
    chapter_title: str = Field(alias="chapterTitle")
    timestamp: str = ""
