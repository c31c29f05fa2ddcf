"""
Streaming functionality for the LLM client.

This package contains:
- SSE line assembly across chunk boundaries
- Frame classification and malformed-frame recovery
- Chunk accumulation into a single completion record
"""

from .accumulator import ChunkAccumulator, EventCallback, fold_chunk
from .models import ChatCompletionChunk, RawSSEChunk, SSEEventType
from .parser import SSELineBuffer, StreamingParser

__all__ = [
    "ChatCompletionChunk",
    "ChunkAccumulator",
    "EventCallback",
    "RawSSEChunk",
    "SSEEventType",
    "SSELineBuffer",
    "StreamingParser",
    "fold_chunk",
]
