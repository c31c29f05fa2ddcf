"""
Chunk accumulation: folds streamed completion chunks into one response.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

from ..models import AggregatedResponse
from .models import ChatCompletionChunk, SSEEventType
from .parser import SSELineBuffer, StreamingParser

EventCallback = Callable[[str, dict[str, Any]], None]

logger = structlog.get_logger(__name__)


def fold_chunk(
    response: AggregatedResponse, chunk: ChatCompletionChunk
) -> AggregatedResponse:
    """
    Fold one streamed chunk into the accumulator and return it.

    - ``id`` is taken from the first chunk that carries one
    - ``model`` and ``finish_reason`` follow the latest chunk
    - every ``delta.content`` is appended in arrival order
    - usage counters are replaced one by one, never summed
    """
    if chunk.id is not None and response.id is None:
        response.id = chunk.id

    if chunk.model is not None:
        response.model = chunk.model

    choice = response.choices[0]
    for delta_choice in chunk.choices or []:
        if delta_choice.delta is not None and delta_choice.delta.content is not None:
            choice.message.content += delta_choice.delta.content
        if delta_choice.finish_reason is not None:
            choice.finish_reason = delta_choice.finish_reason

    if chunk.usage is not None:
        usage = response.usage
        if chunk.usage.prompt_tokens is not None:
            usage.prompt_tokens = chunk.usage.prompt_tokens
        if chunk.usage.completion_tokens is not None:
            usage.completion_tokens = chunk.usage.completion_tokens
        if chunk.usage.total_tokens is not None:
            usage.total_tokens = chunk.usage.total_tokens

    return response


class ChunkAccumulator:
    """
    Drives one aggregation: bytes in, a finished ``AggregatedResponse`` out.

    ``feed`` is shaped to be handed straight to a transport's per-chunk
    callback. The response is only exposed by ``finish`` once the stream has
    closed; ``on_event`` sees each folded frame as it arrives.
    """

    def __init__(
        self,
        model: str | None = None,
        on_event: EventCallback | None = None,
        parser: StreamingParser | None = None,
    ):
        self.response = AggregatedResponse(model=model)
        self.on_event = on_event
        self.parser = parser or StreamingParser()
        self._lines = SSELineBuffer()
        self._finished = False

    def feed(self, chunk: bytes) -> None:
        """Consume one transport buffer."""
        for line in self._lines.feed(chunk):
            self.process_line(line)

    def process_line(self, raw_line: str) -> None:
        raw_chunk = self.parser.parse_line(raw_line)
        if raw_chunk is None or raw_chunk.event_type != SSEEventType.CHUNK:
            return

        fold_chunk(self.response, raw_chunk.chunk)

        if self.on_event is not None:
            self.on_event(raw_chunk.raw_data, raw_chunk.data)

    def finish(self) -> AggregatedResponse:
        """Process any unterminated tail and return the folded response."""
        if not self._finished:
            for line in self._lines.flush():
                self.process_line(line)
            self._finished = True
            logger.debug(
                "Stream aggregation finished",
                response_id=self.response.id,
                content_length=len(self.response.content),
                finish_reason=self.response.finish_reason,
            )
        return self.response
