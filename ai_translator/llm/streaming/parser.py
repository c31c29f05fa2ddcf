"""
SSE line assembly and classification for chat-completion streams.
"""

from __future__ import annotations

import codecs
import json
from typing import Any

import structlog
from pydantic import ValidationError

from ..exceptions import MalformedFrameError
from .models import ChatCompletionChunk, RawSSEChunk, SSEEventType

DATA_PREFIX = "data: "
EVENT_PREFIX = "event: "
DONE_SENTINEL = "[DONE]"

logger = structlog.get_logger(__name__)


class SSELineBuffer:
    """
    Reassembles newline-terminated lines from arbitrarily split byte chunks.

    Bytes are decoded incrementally, so a multi-byte character split across
    two network buffers is decoded once both halves arrive.
    """

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._pending = ""

    def feed(self, chunk: bytes) -> list[str]:
        """Add a chunk and return every line it completes."""
        self._pending += self._decoder.decode(chunk)
        if "\n" not in self._pending:
            return []

        *lines, self._pending = self._pending.split("\n")
        return lines

    def flush(self) -> list[str]:
        """Return the unterminated tail once the stream has closed."""
        tail = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        return [tail] if tail else []


class StreamingParser:
    """SSE line parser with malformed-frame recovery and statistics."""

    def __init__(self):
        self.stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict[str, int]:
        return {
            'total_lines': 0,
            'data_frames': 0,
            'malformed_frames': 0,
            'completion_markers': 0,
            'ignored_lines': 0,
        }

    def parse_line(self, raw_line: str) -> RawSSEChunk | None:
        """
        Classify one SSE line.

        Returns None for blank lines, ``event:`` lines and anything that is
        not a data frame. Malformed data frames come back as ERROR chunks so
        the caller can drop them and keep reading.
        """
        line = raw_line.strip()
        if not line:
            return None

        self.stats['total_lines'] += 1

        if line.startswith(DATA_PREFIX):
            payload = line[len(DATA_PREFIX):]

            if payload.strip() == DONE_SENTINEL:
                self.stats['completion_markers'] += 1
                return RawSSEChunk(
                    event_type=SSEEventType.COMPLETION,
                    data=None,
                    raw_data=line,
                )

            try:
                data = self.decode_payload(payload)
                chunk = self.to_chunk(data, payload)
            except MalformedFrameError as e:
                self.stats['malformed_frames'] += 1
                logger.debug(
                    "Dropping malformed stream frame",
                    error_message=str(e),
                    raw_data=e.raw_data,
                )
                return RawSSEChunk(
                    event_type=SSEEventType.ERROR,
                    data=None,
                    raw_data=line,
                    error=str(e),
                )

            self.stats['data_frames'] += 1
            return RawSSEChunk(
                event_type=SSEEventType.CHUNK,
                data=data,
                raw_data=line,
                chunk=chunk,
            )

        self.stats['ignored_lines'] += 1
        if line.startswith(EVENT_PREFIX):
            # Named event types are not handled yet
            return RawSSEChunk(
                event_type=SSEEventType.EVENT,
                data=None,
                raw_data=line,
            )
        return None

    @staticmethod
    def decode_payload(payload: str) -> dict[str, Any]:
        """Decode a ``data:`` payload into a JSON object.

        Raises:
            MalformedFrameError: invalid JSON, a falsy value, or a value
                that is not a JSON object.
        """
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise MalformedFrameError(
                f"JSON decode error: {e}", raw_data=payload
            ) from e

        if not data:
            raise MalformedFrameError("Empty stream frame", raw_data=payload)
        if not isinstance(data, dict):
            raise MalformedFrameError(
                f"Expected JSON object, got {type(data).__name__}",
                raw_data=payload,
            )
        return data

    @staticmethod
    def to_chunk(data: dict[str, Any], payload: str = "") -> ChatCompletionChunk:
        """Validate a decoded frame against the completion-chunk schema.

        Raises:
            MalformedFrameError: if known fields carry unexpected types.
        """
        try:
            return ChatCompletionChunk.model_validate(data)
        except ValidationError as e:
            raise MalformedFrameError(
                f"Unexpected chunk structure: {e.error_count()} error(s)",
                raw_data=payload,
            ) from e

    def get_stats(self) -> dict[str, int]:
        """Get streaming statistics for monitoring."""
        return self.stats.copy()

    def reset_stats(self) -> None:
        """Reset statistics counters."""
        self.stats = self._empty_stats()
