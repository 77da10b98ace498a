"""Tests for the SSE module."""

import json

from heckproxy.core.sse import (
    format_sse_event,
    is_related_question_marker,
    parse_data_line,
)


class TestParseDataLine:
    """Tests for extracting payloads from upstream lines."""

    def test_returns_trimmed_payload(self):
        assert parse_data_line("data: hello \n") == "hello"

    def test_returns_empty_payload_for_bare_prefix(self):
        assert parse_data_line("data: ") == ""

    def test_returns_none_for_non_data_lines(self):
        assert parse_data_line("") is None
        assert parse_data_line("event: update") is None
        assert parse_data_line(": comment") is None

    def test_requires_space_after_colon(self):
        assert parse_data_line("data:hello") is None


class TestRelatedQuestionMarker:
    def test_detects_both_markers_as_prefix(self):
        assert is_related_question_marker("[RELATE_Q_START]")
        assert is_related_question_marker("[RELATE_Q_START][\"q\"]")
        assert is_related_question_marker("[RELATE_Q_DONE]")

    def test_plain_text_is_not_a_marker(self):
        assert not is_related_question_marker("text [RELATE_Q_START]")


class TestFormatSseEvent:
    def test_formats_data_event(self):
        raw = format_sse_event({"a": 1})
        assert raw.startswith(b"data: ")
        assert raw.endswith(b"\n\n")
        assert json.loads(raw[len(b"data: "):].decode("utf-8")) == {"a": 1}

    def test_keeps_non_ascii_text(self):
        assert "你好".encode("utf-8") in format_sse_event({"content": "你好"})
