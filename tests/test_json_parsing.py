"""
Tests for the parse-or-default combinator.
"""
import pytest

from hanbridge.errors import ParseError
from hanbridge.models import AccuracyScore, Alternative
from hanbridge.utils.json_parsing import extract_json, parse_list_or_default, parse_or_default

FALLBACK = AccuracyScore(score=75, explanation="Unable to calculate precise score")


class TestExtractJson:

    def test_fenced_block_preferred(self):
        text = 'Here you go:\n```json\n{"score": 90}\n```\nThanks'
        assert extract_json(text) == {"score": 90}

    def test_bare_object(self):
        assert extract_json('Result: {"score": 40, "explanation": "ok"} done') == {
            "score": 40,
            "explanation": "ok",
        }

    def test_bare_array(self):
        assert extract_json('[{"text": "a"}]', expect_array=True) == [{"text": "a"}]

    def test_no_json_raises(self):
        with pytest.raises(ParseError):
            extract_json("no structured content")

    def test_invalid_json_raises(self):
        with pytest.raises(ParseError):
            extract_json("{score: ninety}")


class TestParseOrDefault:

    def test_valid_payload(self):
        result = parse_or_default('{"score": 88, "explanation": "close"}', AccuracyScore, FALLBACK)
        assert result.score == 88
        assert result.explanation == "close"

    def test_malformed_json_returns_default(self):
        assert parse_or_default("not json", AccuracyScore, FALLBACK) is FALLBACK

    def test_schema_violation_returns_default(self):
        """Out-of-range score fails validation and falls back."""
        assert parse_or_default('{"score": 140}', AccuracyScore, FALLBACK) is FALLBACK

    def test_factory_default_is_called(self):
        result = parse_or_default("", AccuracyScore, lambda: AccuracyScore(score=1, explanation="x"))
        assert result.score == 1


class TestParseListOrDefault:

    def test_array(self):
        text = '```json\n[{"text": "good", "nuance": "neutral"}, {"text": "fine", "nuance": "casual"}]\n```'
        result = parse_list_or_default(text, Alternative, list)
        assert [a.text for a in result] == ["good", "fine"]

    def test_array_under_key(self):
        text = '{"alternatives": [{"text": "good", "nuance": "neutral"}]}'
        result = parse_list_or_default(text, Alternative, list, key="alternatives")
        assert result[0].text == "good"

    def test_empty_array_is_failure(self):
        result = parse_list_or_default("[]", Alternative, lambda: [Alternative(text="nice")])
        assert [a.text for a in result] == ["nice"]

    def test_bad_item_is_failure(self):
        result = parse_list_or_default('[{"nuance": "no text"}]', Alternative, lambda: [])
        assert result == []
