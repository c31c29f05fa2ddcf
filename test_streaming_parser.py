#!/usr/bin/env python3
"""
Tests for SSE line assembly and frame classification.
"""

import pytest

from ai_translator.llm.exceptions import MalformedFrameError
from ai_translator.llm.streaming import SSEEventType, SSELineBuffer, StreamingParser


class TestSSELineBuffer:
    """Test reassembly of lines across chunk boundaries."""

    def test_complete_lines_in_one_chunk(self):
        buffer = SSELineBuffer()
        assert buffer.feed(b"data: a\ndata: b\n") == ["data: a", "data: b"]
        assert buffer.flush() == []

    def test_partial_line_held_until_newline(self):
        buffer = SSELineBuffer()
        assert buffer.feed(b'data: {"id"') == []
        assert buffer.feed(b':"x1"}\n') == ['data: {"id":"x1"}']

    def test_multibyte_character_split_across_chunks(self):
        buffer = SSELineBuffer()
        encoded = "data: 안녕\n".encode()
        # Split inside the first Hangul syllable
        assert buffer.feed(encoded[:7]) == []
        assert buffer.feed(encoded[7:]) == ["data: 안녕"]

    def test_crlf_terminators_left_for_trimming(self):
        buffer = SSELineBuffer()
        assert buffer.feed(b"data: a\r\n\r\n") == ["data: a\r", "\r"]

    def test_flush_returns_unterminated_tail(self):
        buffer = SSELineBuffer()
        buffer.feed(b"data: [DONE]")
        assert buffer.flush() == ["data: [DONE]"]
        assert buffer.flush() == []


class TestStreamingParser:
    """Test classification of individual SSE lines."""

    def test_data_frame_parsed(self):
        parser = StreamingParser()
        raw = parser.parse_line('  data: {"id":"x1","choices":[{"delta":{"content":"Hi"}}]}  ')

        assert raw.event_type == SSEEventType.CHUNK
        assert raw.data["id"] == "x1"
        assert raw.raw_data == 'data: {"id":"x1","choices":[{"delta":{"content":"Hi"}}]}'
        assert raw.chunk.choices[0].delta.content == "Hi"

    def test_done_sentinel(self):
        parser = StreamingParser()
        raw = parser.parse_line("data: [DONE]")
        assert raw.event_type == SSEEventType.COMPLETION
        assert raw.data is None
        assert parser.get_stats()["completion_markers"] == 1

    def test_blank_line_skipped(self):
        parser = StreamingParser()
        assert parser.parse_line("   ") is None
        assert parser.get_stats()["total_lines"] == 0

    def test_event_line_ignored(self):
        parser = StreamingParser()
        raw = parser.parse_line("event: ping")
        assert raw.event_type == SSEEventType.EVENT
        assert parser.get_stats()["ignored_lines"] == 1

    def test_unknown_line_ignored(self):
        parser = StreamingParser()
        assert parser.parse_line(": keep-alive comment") is None
        assert parser.parse_line("data:{\"id\":\"no-space\"}") is None
        assert parser.get_stats()["ignored_lines"] == 2

    @pytest.mark.parametrize(
        "line",
        [
            "data: {not json",
            "data: {}",
            "data: 0",
            "data: []",
            'data: ["a"]',
            'data: {"choices":[{"delta":{"content":5}}]}',
        ],
    )
    def test_malformed_frames_reported_not_raised(self, line):
        parser = StreamingParser()
        raw = parser.parse_line(line)
        assert raw.event_type == SSEEventType.ERROR
        assert raw.error
        assert parser.get_stats()["malformed_frames"] == 1
        assert parser.get_stats()["data_frames"] == 0

    def test_non_list_choices_treated_as_absent(self):
        parser = StreamingParser()
        raw = parser.parse_line('data: {"id":"a","choices":"oops"}')
        assert raw.event_type == SSEEventType.CHUNK
        assert raw.chunk.id == "a"
        assert raw.chunk.choices is None

    def test_ill_typed_field_reads_as_absent(self):
        parser = StreamingParser()
        raw = parser.parse_line('data: {"id":42,"choices":[null,{"delta":{"content":"ok"}}]}')
        assert raw.event_type == SSEEventType.CHUNK
        assert raw.chunk.id is None
        assert [choice.delta.content for choice in raw.chunk.choices] == ["ok"]

    def test_unknown_keys_ignored(self):
        parser = StreamingParser()
        raw = parser.parse_line(
            'data: {"object":"chat.completion.chunk","system_fingerprint":"fp",'
            '"choices":[{"index":0,"delta":{"content":"x"},"logprobs":null}]}'
        )
        assert raw.event_type == SSEEventType.CHUNK
        assert raw.chunk.choices[0].delta.content == "x"

    def test_decode_payload_raises(self):
        with pytest.raises(MalformedFrameError) as exc_info:
            StreamingParser.decode_payload("{broken")
        assert exc_info.value.raw_data == "{broken"

    def test_reset_stats(self):
        parser = StreamingParser()
        parser.parse_line('data: {"id":"a"}')
        assert parser.get_stats()["data_frames"] == 1
        parser.reset_stats()
        assert parser.get_stats() == {
            "total_lines": 0,
            "data_frames": 0,
            "malformed_frames": 0,
            "completion_markers": 0,
            "ignored_lines": 0,
        }
