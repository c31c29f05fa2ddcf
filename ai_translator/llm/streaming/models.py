"""
Streaming-specific models for SSE parsing and chunk folding.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)


class SSEEventType(Enum):
    """Server-Sent Event line kinds."""
    CHUNK = "chunk"
    COMPLETION = "completion"
    EVENT = "event"
    ERROR = "error"


class _ChunkModel(BaseModel):
    """Lenient base: a known field with an unexpected type reads as absent.

    Fields named in ``strict_fields`` still fail validation, which drops the
    whole frame.
    """
    model_config = ConfigDict(extra="ignore")

    strict_fields: ClassVar[frozenset[str]] = frozenset()

    @field_validator("*", mode="wrap")
    @classmethod
    def _absent_when_ill_typed(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        try:
            return handler(value)
        except ValidationError:
            if info.field_name in cls.strict_fields:
                raise
            return None


class ChunkDelta(_ChunkModel):
    # Content is appended verbatim, so a non-string fragment rejects the frame
    strict_fields: ClassVar[frozenset[str]] = frozenset({"content"})

    role: str | None = None
    content: str | None = None


class ChunkChoice(_ChunkModel):
    strict_fields: ClassVar[frozenset[str]] = frozenset({"delta"})

    index: int | None = None
    delta: ChunkDelta | None = None
    finish_reason: str | None = None

    @field_validator("delta", mode="before")
    @classmethod
    def _ignore_non_object_delta(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return None
        return value


class ChunkUsage(_ChunkModel):
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class ChatCompletionChunk(_ChunkModel):
    """Partial schema of one streamed ``chat.completion.chunk`` payload.

    Every field is optional; absent, null and ill-typed fields leave the
    accumulator untouched. Only an ill-typed ``delta.content`` rejects the
    frame.
    """
    strict_fields: ClassVar[frozenset[str]] = frozenset({"choices"})

    id: str | None = None
    model: str | None = None
    choices: list[ChunkChoice] | None = None
    usage: ChunkUsage | None = None

    @field_validator("choices", mode="before")
    @classmethod
    def _keep_object_choices(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return None
        return [choice for choice in value if isinstance(choice, dict)]


@dataclass(frozen=True)
class RawSSEChunk:
    """One classified SSE line."""
    event_type: SSEEventType
    data: dict[str, Any] | None
    raw_data: str
    error: str | None = None
    chunk: ChatCompletionChunk | None = None
