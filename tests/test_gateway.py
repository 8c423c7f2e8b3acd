"""Tests for the LLM gateway using a stub Messages client."""

import pytest

from leaderlens.annotation.gateway import (
    AnnotationGateway,
    GatewayError,
    ResponseParseError,
    normalize_chapters,
    parse_json_response,
)
from leaderlens.annotation.prompts import build_chapter_prompt
from leaderlens.annotation.vocabulary import OFFICIAL_THEME_SET, OFFICIAL_THEMES, split_official
from leaderlens.models.leader import ChapterMarker, QASegment
from leaderlens.models.topics import KeyTopic, TopicAnalysis

CHAPTERS_REPLY = {
    "chapterMarkers": [
        {
            "timestamp": "00:00:00",
            "title": "Early years",
            "description": "Growing up.",
            "themes": ["Family", "Made Up Theme", "Education", "Family"],
            "customThemes": ["Small towns", "Libraries", "Bikes"],
            "isNoiseSegment": False,
            "contextCard": "Should be dropped.",
        },
        {
            "timestamp": "00:10:00",
            "title": "Tuning out critics",
            "themes": ["Doubt", "Values", "Risk", "Success"],
            "customThemes": ["Critics"],
            "isNoiseSegment": True,
            "contextCard": "She ignores outside advice. It keeps her focused.",
        },
        {
            "timestamp": "00:20:00",
            "title": "Second noise",
            "isNoiseSegment": True,
            "contextCard": "Extra.",
        },
    ]
}


class TestParseJsonResponse:
    def test_plain_object(self):
        assert parse_json_response('{"a": 1}', "op") == {"a": 1}

    def test_markdown_fence(self):
        assert parse_json_response('```json\n{"a": [1, 2]}\n```', "op") == {"a": [1, 2]}

    def test_invalid_json(self):
        with pytest.raises(ResponseParseError) as exc:
            parse_json_response("Sure! Here you go", "identify_qa")
        assert exc.value.operation == "identify_qa"
        assert exc.value.text == "Sure! Here you go"

    def test_non_object(self):
        with pytest.raises(ResponseParseError, match="expected an object"):
            parse_json_response("[1, 2]", "op")


class TestVocabulary:
    def test_vocabulary_size(self):
        assert len(OFFICIAL_THEMES) == 37
        assert len(OFFICIAL_THEME_SET) == 37

    def test_split_official(self):
        kept, rejected = split_official(["Risk", "Bogus", "Risk", "Fear", "Money", "Goals"])
        assert kept == ["Risk", "Fear", "Money"]
        assert rejected == ["Bogus", "Goals"]


class TestNormalizeChapters:
    def test_themes_are_a_subset_of_vocabulary(self):
        chapters = normalize_chapters(CHAPTERS_REPLY["chapterMarkers"])

        for chapter in chapters:
            assert set(chapter.themes) <= OFFICIAL_THEME_SET
            assert len(chapter.themes) <= 3
            assert len(chapter.custom_themes) <= 2

    def test_cleans_first_chapter(self):
        first = normalize_chapters(CHAPTERS_REPLY["chapterMarkers"])[0]

        assert first.themes == ["Family", "Education"]
        assert first.custom_themes == ["Small towns", "Libraries"]
        assert first.context_card is None

    def test_single_noise_chapter(self):
        chapters = normalize_chapters(CHAPTERS_REPLY["chapterMarkers"])

        assert [c.is_noise_segment for c in chapters] == [False, True, False]
        assert chapters[1].context_card.startswith("She ignores")
        assert chapters[2].context_card is None

    def test_matched_topics_reset(self):
        chapters = normalize_chapters([{"timestamp": "00:00:00", "title": "x", "matchedTopics": ["Old"]}])
        assert chapters[0].matched_topics is None


class TestAnnotationGateway:
    def test_identify_qa(self, stub_gateway):
        gateway, messages = stub_gateway({
            "segments": [
                {"question": "Why?", "questionStart": "00:01:00", "answer": "Because.",
                 "answerStart": "00:01:05", "isJeopardyStyle": True},
                "garbage",
            ]
        })

        segments = gateway.identify_qa("Q: Why? A: Because.")

        assert len(segments) == 1
        assert segments[0].is_jeopardy_style
        assert segments[0].answer_start == "00:01:05"
        call = messages.calls[0]
        assert call["model"] == gateway.config.llm_model
        assert call["max_tokens"] == 3000
        assert "Because." in call["messages"][0]["content"]

    def test_empty_transcript_is_rejected_without_a_call(self, stub_gateway):
        gateway, messages = stub_gateway()

        with pytest.raises(GatewayError, match="Transcript is required"):
            gateway.identify_qa("   ")
        with pytest.raises(GatewayError):
            gateway.generate_chapter_markers("")
        assert messages.calls == []

    def test_malformed_reply_propagates(self, stub_gateway):
        gateway, _ = stub_gateway("not json at all")

        with pytest.raises(ResponseParseError):
            gateway.identify_qa("transcript")

    def test_null_question_is_a_parse_error(self, stub_gateway):
        gateway, _ = stub_gateway({"segments": [{"question": None, "answer": "x"}]})

        with pytest.raises(ResponseParseError, match="question"):
            gateway.identify_qa("transcript")

    def test_chapter_without_title_is_a_parse_error(self, stub_gateway):
        gateway, _ = stub_gateway({"chapterMarkers": [{"timestamp": "00:00:00", "title": 3}]})

        with pytest.raises(ResponseParseError):
            gateway.generate_chapter_markers("transcript")

    def test_topic_share_without_topic_is_a_parse_error(self, stub_gateway):
        gateway, _ = stub_gateway(
            {"topicDistribution": [{"percentage": 50}]},
            {"topicDistribution": [], "keyTopics": [{"description": "nameless"}]},
        )

        with pytest.raises(ResponseParseError) as info:
            gateway.analyze_topic_distribution([{"id": "ada"}])
        assert info.value.operation == "analyze_topic_distribution"
        with pytest.raises(ResponseParseError):
            gateway.enhance_topic_analysis(TopicAnalysis(), [])

    def test_api_failure_is_wrapped(self, stub_gateway):
        gateway, _ = stub_gateway(ValueError("bad request"))

        with pytest.raises(GatewayError, match="API request failed"):
            gateway.identify_qa("transcript")

    def test_chapter_markers(self, stub_gateway):
        gateway, messages = stub_gateway(CHAPTERS_REPLY)
        qa = [QASegment(question="What drives you?", question_start="00:00:30")]

        chapters = gateway.generate_chapter_markers("transcript text", qa, ["Passion"])

        assert [c.title for c in chapters] == ["Early years", "Tuning out critics", "Second noise"]
        prompt = messages.calls[0]["messages"][0]["content"]
        assert "What drives you?" in prompt
        assert '"Passion"' in prompt

    def test_topic_distribution(self, stub_gateway):
        gateway, _ = stub_gateway({
            "topicDistribution": [
                {"name": "Leadership", "percentage": 60, "description": "Leading teams"},
                {"topic": "Risk", "percentage": 40, "description": "Taking bets"},
            ],
            "keyTopics": [{"topic": "Leadership", "relatedInterviews": ["ada"]}],
        })

        analysis = gateway.analyze_topic_distribution([{"id": "ada"}])

        assert [s.topic for s in analysis.topic_distribution] == ["Leadership", "Risk"]
        assert analysis.key_topics[0].related_interviews == ["ada"]

    def test_topic_distribution_needs_summaries(self, stub_gateway):
        gateway, _ = stub_gateway()
        with pytest.raises(GatewayError):
            gateway.analyze_topic_distribution([])

    def test_enhance_sends_current_analysis(self, stub_gateway):
        gateway, messages = stub_gateway({"topicDistribution": [], "keyTopics": []})
        analysis = TopicAnalysis(key_topics=[KeyTopic(topic="Grit")])

        gateway.enhance_topic_analysis(analysis, [{
            "id": "ada", "title": "Ada", "relevantTopics": ["Grit"], "excerpt": "I kept going.",
        }])

        prompt = messages.calls[0]["messages"][0]["content"]
        assert "Grit" in prompt
        assert "I kept going." in prompt

    def test_categorize_aligns_with_chapters(self, stub_gateway):
        gateway, messages = stub_gateway({
            "categorizedChapters": [
                {"id": "1", "matchedTopics": ["Risk", "Unknown", "Risk"]},
                {"id": "0", "matchedTopics": ["Grit"]},
            ]
        })
        chapters = [ChapterMarker(title="a"), ChapterMarker(title="b"), ChapterMarker(title="c")]
        topics = [KeyTopic(topic="Grit"), KeyTopic(topic="Risk")]

        assigned = gateway.categorize_chapters(chapters, topics)

        assert assigned == [["Grit"], ["Risk"], []]
        assert messages.calls[0]["temperature"] == 0.3

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

        with pytest.raises(GatewayError, match="ANTHROPIC_API_KEY"):
            AnnotationGateway().identify_qa("transcript")


class TestChapterPrompt:
    def test_lists_vocabulary_and_boundaries(self):
        qa = [QASegment(question="x" * 300, question_start="00:01:00", answer="y")]

        prompt = build_chapter_prompt("the transcript", qa, [], excerpt_chars=50)

        for theme in OFFICIAL_THEMES:
            assert theme in prompt
        assert "x" * 50 in prompt
        assert "x" * 51 not in prompt
        assert "the transcript" in prompt
