"""Tests for completion parsers and their Parsed/Fallback branches."""

from __future__ import annotations

import itertools

import pytest

from web_content_analyzer.models.analysis import SentimentLabel
from web_content_analyzer.parsing import (
    Fallback,
    Parsed,
    parse_connection_check,
    parse_content_analysis,
    parse_relevance,
    parse_sentiment,
    parse_topics,
)

FIELD_LINES = {
    "summary": "SUMMARY: A test.",
    "sentiment": "SENTIMENT: POSITIVE",
    "key_topics": "TOPICS: a, b",
    "category": "CATEGORY: Tech",
}
EXPECTED = {"summary": "A test.", "sentiment": "POSITIVE", "key_topics": "a, b", "category": "Tech"}


class TestParseContentAnalysis:
    def test_well_formed_completion(self):
        result = parse_content_analysis("SUMMARY: A test.\nSENTIMENT: POSITIVE\nTOPICS: a, b\nCATEGORY: Tech")

        assert isinstance(result, Parsed)
        assert result.value.model_dump() == EXPECTED

    @pytest.mark.parametrize("order", list(itertools.permutations(FIELD_LINES)))
    def test_order_independent(self, order):
        completion = "\n".join(FIELD_LINES[name] for name in order)
        assert parse_content_analysis(completion).value.model_dump() == EXPECTED

    def test_interleaved_with_unrelated_lines(self):
        completion = (
            "Here is the analysis you asked for:\n\n"
            "  SUMMARY: A test.  \n"
            "Some chatter\n"
            "SENTIMENT: POSITIVE\n"
            "- bullet\n"
            "TOPICS: a, b\n"
            "CATEGORY: Tech\n"
            "Hope this helps!"
        )
        result = parse_content_analysis(completion)
        assert not result.is_fallback
        assert result.value.model_dump() == EXPECTED

    def test_no_prefixes_falls_back_to_defaults(self):
        completion = "The model ignored the format entirely."
        result = parse_content_analysis(completion)

        assert isinstance(result, Fallback)
        assert result.value.summary == completion
        assert result.value.sentiment == "NEUTRAL"
        assert result.value.key_topics == "General"
        assert result.value.category == "General"

    def test_partial_completion_fills_only_missing_fields(self):
        result = parse_content_analysis("SUMMARY: Short.\nCATEGORY: News")

        assert result.is_fallback
        assert "sentiment" in result.reason
        assert "key_topics" in result.reason
        assert result.value.summary == "Short."
        assert result.value.category == "News"
        assert result.value.sentiment == "NEUTRAL"
        assert result.value.key_topics == "General"

    def test_last_match_wins(self):
        result = parse_content_analysis("CATEGORY: First\nCATEGORY: Second")
        assert result.value.category == "Second"

    def test_empty_remainder_counts_as_missing(self):
        result = parse_content_analysis("SENTIMENT:   \nSUMMARY: ok")
        assert result.value.sentiment == "NEUTRAL"

    def test_prefix_is_case_sensitive(self):
        """Lower-case markers are not the requested format."""
        result = parse_content_analysis("summary: nope")
        assert result.value.summary == "summary: nope"

    def test_empty_completion(self):
        result = parse_content_analysis("")
        assert result.is_fallback
        assert result.value.summary == ""
        assert result.value.category == "General"


class TestParseSentiment:
    def test_valid_json_is_rescaled(self):
        result = parse_sentiment('{"label":"POSITIVE","confidence":0.8,"explanation":"x"}')

        assert isinstance(result, Parsed)
        assert result.value.label is SentimentLabel.POSITIVE
        assert result.value.confidence == pytest.approx(80.0)
        assert result.value.explanation == "x"

    def test_code_fenced_json(self):
        completion = '```json\n{"label": "NEGATIVE", "confidence": 0.25, "explanation": "grim"}\n```'
        result = parse_sentiment(completion)

        assert not result.is_fallback
        assert result.value.label is SentimentLabel.NEGATIVE
        assert result.value.confidence == pytest.approx(25.0)

    def test_lower_case_label_is_normalized(self):
        result = parse_sentiment('{"label": "neutral", "confidence": 0.5, "explanation": "meh"}')
        assert result.value.label is SentimentLabel.NEUTRAL

    def test_already_scaled_confidence_is_clamped(self):
        """A model answering 85 instead of 0.85 must not exceed 100%."""
        result = parse_sentiment('{"label": "POSITIVE", "confidence": 85, "explanation": "x"}')
        assert not result.is_fallback
        assert result.value.confidence == 100.0

    def test_negative_confidence_is_clamped(self):
        result = parse_sentiment('{"label": "POSITIVE", "confidence": -0.2, "explanation": "x"}')
        assert result.value.confidence == 0.0

    @pytest.mark.parametrize(
        ("completion", "label"),
        [
            ("The text is overwhelmingly Positive.", SentimentLabel.POSITIVE),
            ("Mostly NEGATIVE in tone.", SentimentLabel.NEGATIVE),
            ("Hard to say.", SentimentLabel.NEUTRAL),
            ("Positive and negative in equal measure.", SentimentLabel.POSITIVE),
        ],
    )
    def test_non_json_falls_back_to_keyword_search(self, completion, label):
        result = parse_sentiment(completion)

        assert isinstance(result, Fallback)
        assert result.value.label is label
        assert result.value.confidence == 50.0
        assert result.value.explanation == completion

    def test_unknown_label_falls_back(self):
        completion = '{"label": "MIXED", "confidence": 0.9, "explanation": "negative overall"}'
        result = parse_sentiment(completion)

        assert result.is_fallback
        assert result.value.label is SentimentLabel.NEGATIVE
        assert result.value.confidence == 50.0

    def test_missing_key_falls_back(self):
        result = parse_sentiment('{"label": "POSITIVE"}')
        assert result.is_fallback
        assert result.value.label is SentimentLabel.POSITIVE

    def test_json_array_falls_back(self):
        result = parse_sentiment("[1, 2, 3]")
        assert result.is_fallback
        assert result.value.label is SentimentLabel.NEUTRAL

    def test_deeply_nested_json_falls_back(self):
        completion = "[" * 200_000 + "]" * 200_000
        result = parse_sentiment(completion)

        assert isinstance(result, Fallback)
        assert result.value.label is SentimentLabel.NEUTRAL
        assert result.value.confidence == 50.0

    def test_nan_confidence_falls_back(self):
        result = parse_sentiment('{"label": "POSITIVE", "confidence": NaN, "explanation": "x"}')
        assert result.is_fallback
        assert result.value.confidence == 50.0
        assert result.value.label is SentimentLabel.POSITIVE


class TestParseTopics:
    def test_blank_lines_dropped_and_trimmed(self):
        result = parse_topics("  AI  \n\n   \nRobotics\n\tEthics\n", max_topics=5)
        assert result.value == ["AI", "Robotics", "Ethics"]

    @pytest.mark.parametrize("k", [1, 2, 3, 10])
    def test_never_more_than_max(self, k):
        completion = "\n".join(f"topic {i}" for i in range(6))
        topics = parse_topics(completion, max_topics=k).value

        assert len(topics) == min(k, 6)
        assert topics == [f"topic {i}" for i in range(min(k, 6))]

    def test_empty_completion(self):
        assert parse_topics("", max_topics=3).value == []


class TestParseRelevance:
    @pytest.mark.parametrize(
        ("completion", "expected"),
        [
            ("42.5", 42.5),
            ("  77\n", 77.0),
            ("0", 0.0),
            ("100", 100.0),
            ("150", 100.0),
            ("-3", 0.0),
            ("1e9", 100.0),
            ("inf", 100.0),
        ],
    )
    def test_numeric_completion_is_clamped(self, completion, expected):
        result = parse_relevance(completion)
        assert isinstance(result, Parsed)
        assert result.value == expected
        assert 0.0 <= result.value <= 100.0

    @pytest.mark.parametrize("completion", ["not a number", "", "Score: 80", "nan"])
    def test_unparseable_is_zero(self, completion):
        result = parse_relevance(completion)
        assert isinstance(result, Fallback)
        assert result.value == 0.0


class TestParseConnectionCheck:
    @pytest.mark.parametrize("completion", ["OK", "ok", "Ok, received.", "Sure - OK!"])
    def test_ok_any_case(self, completion):
        assert parse_connection_check(completion) is True

    def test_missing_ok(self):
        assert parse_connection_check("Hello there") is False
