"""Tests for JSON extraction from model output."""
import pytest

from stackscout.errors import JSONParseError
from stackscout.services.json_extract import (
    extract_json_candidate,
    parse_json_strict,
    safe_parse_json,
)


class TestExtractCandidate:
    def test_fenced_block_wins(self):
        text = 'Here you go:\n```json\n[{"a": 1}]\n```\nHope that helps [really]'
        assert extract_json_candidate(text, "array") == '[{"a": 1}]'

    def test_fence_tag_is_case_insensitive(self):
        text = '```JSON\n{"a": 1}\n```'
        assert extract_json_candidate(text) == '{"a": 1}'

    def test_first_opener_to_last_closer(self):
        text = 'Sure! [{"category": "frontend"}] Let me know.'
        assert extract_json_candidate(text, "array") == '[{"category": "frontend"}]'

    def test_no_delimiters_returns_none(self):
        assert extract_json_candidate("no json here", "array") is None
        assert extract_json_candidate("", "object") is None

    def test_without_shape_earliest_container_wins(self):
        text = 'prefix {"options": [1, 2]} suffix'
        assert extract_json_candidate(text) == '{"options": [1, 2]}'


class TestParseJsonStrict:
    def test_parses_array_with_preamble(self):
        text = 'I recommend:\n[{"category": "db", "query": "q", "reasoning": "r"}]'
        assert parse_json_strict(text, shape="array") == [
            {"category": "db", "query": "q", "reasoning": "r"}
        ]

    def test_empty_array(self):
        assert parse_json_strict("[]", shape="array") == []

    def test_missing_json_raises(self):
        with pytest.raises(JSONParseError) as exc_info:
            parse_json_strict("I cannot help with that.", shape="array")
        assert "Could not find valid JSON" in str(exc_info.value)
        assert exc_info.value.preview == "I cannot help with that."

    def test_invalid_json_raises_with_cause(self):
        with pytest.raises(JSONParseError) as exc_info:
            parse_json_strict("[{'single': 'quotes'}]", shape="array")
        assert exc_info.value.cause is not None
        assert "Failed to parse AI response as JSON" in str(exc_info.value)

    def test_size_ceiling_checked_before_parsing(self):
        text = "[" + "1," * 30 + "1]"
        with pytest.raises(JSONParseError) as exc_info:
            parse_json_strict(text, shape="array", max_size=20)
        assert "too large" in str(exc_info.value)

    def test_preview_is_truncated(self):
        text = "x" * 500
        with pytest.raises(JSONParseError) as exc_info:
            parse_json_strict(text, shape="array")
        assert len(exc_info.value.preview) == 100


class TestSafeParseJson:
    def test_returns_none_on_garbage(self):
        assert safe_parse_json("definitely not json") is None
        assert safe_parse_json("") is None

    def test_falls_back_past_broken_fence(self):
        text = '```json\n{broken\n```\n[{"name": "React"}]'
        assert safe_parse_json(text, shape="array") == [{"name": "React"}]

    def test_refuses_oversized_input(self):
        assert safe_parse_json('{"a": "' + "b" * 100 + '"}', max_size=50) is None
