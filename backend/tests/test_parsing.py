import pytest
from utils.parsing import (
    extract_json_block,
    extract_structured,
    keyword_verdict,
    parse_strict,
    strip_code_fences,
)


class TestExtractJsonBlock:
    """Tests for extract_json_block function."""

    def test_valid_json(self):
        """Test extracting valid JSON from text."""
        text = 'Some text before {"key": "value", "num": 123} some text after'
        result = extract_json_block(text)
        assert result == {"key": "value", "num": 123}

    def test_nested_json(self):
        """Test extracting nested JSON."""
        text = 'Text {"outer": {"inner": "value"}} more'
        result = extract_json_block(text)
        assert result == {"outer": {"inner": "value"}}

    def test_braces_inside_strings(self):
        """Braces inside string values do not end the object."""
        text = 'Answer: {"justificativa": "uso de } e { no texto", "classe": "false"} fim {x}'
        result = extract_json_block(text)
        assert result == {"justificativa": "uso de } e { no texto", "classe": "false"}

    def test_first_object_wins(self):
        text = 'A {"classe": "true"} B {"classe": "false"}'
        assert extract_json_block(text) == {"classe": "true"}

    def test_no_json(self):
        """Test with no JSON in text."""
        assert extract_json_block("No JSON here at all") is None

    def test_empty_string(self):
        assert extract_json_block("") is None

    def test_none_input(self):
        assert extract_json_block(None) is None

    def test_invalid_json_fallback(self):
        """Test with malformed JSON."""
        text = 'Text {"key": "value", "bad": } end'
        assert extract_json_block(text) is None

    def test_json_with_control_characters(self):
        """Test JSON with control characters (should clean them)."""
        text = '{"key": "value\x00\x01\x02"}'
        result = extract_json_block(text)
        assert result is not None
        assert "key" in result


class TestParseStrict:

    def test_code_fenced_json(self):
        text = '```json\n{"classe": "true", "confianca": 90}\n```'
        assert parse_strict(text) == {"classe": "true", "confianca": 90}

    def test_leading_and_trailing_prose(self):
        text = 'Here is my analysis: {"classe": "false"} Hope this helps.'
        assert parse_strict(text) == {"classe": "false"}

    def test_two_objects_fail_strict(self):
        assert parse_strict('{"a": 1} and {"b": 2}') is None

    def test_non_object_json(self):
        assert parse_strict("[1, 2, 3]") is None

    def test_strip_code_fences(self):
        assert strip_code_fences("```json\nabc\n```") == "abc"


class TestKeywordVerdict:

    def test_affirming(self):
        result = keyword_verdict("A afirmação é verdadeira segundo os dados oficiais.")
        assert result["status"] == "real"
        assert result["confidence"] == 80

    def test_denying(self):
        result = keyword_verdict("This claim is false and misleading.")
        assert result["status"] == "fake"
        assert result["confidence"] == 80

    def test_mixed_signals_are_uncertain(self):
        result = keyword_verdict("Parte é verdadeira, parte é falsa.")
        assert result["status"] == "uncertain"
        assert result["confidence"] == 50

    def test_no_signal(self):
        result = keyword_verdict("Não há informação suficiente.")
        assert result["status"] == "uncertain"
        assert result["confidence"] == 50

    def test_whole_words_only(self):
        assert keyword_verdict("The reality is complicated.")["status"] == "uncertain"


class TestExtractStructured:

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_default_stage(self, text):
        result = extract_structured(text)
        assert result.stage == "default"
        assert result.data is None

    def test_strict_stage(self):
        result = extract_structured('```json\n{"classe": "true"}\n```')
        assert result.stage == "strict"
        assert result.data == {"classe": "true"}

    def test_salvage_stage(self):
        result = extract_structured('{"classe": "true"} and then {"extra": 1}')
        assert result.stage == "salvage"
        assert result.data == {"classe": "true"}

    def test_keyword_stage(self):
        result = extract_structured("I believe this is fake news.")
        assert result.stage == "keyword"
        assert result.data["status"] == "fake"
