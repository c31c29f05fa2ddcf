"""
Core LLM dataclasses for chat-completion transport.

This module provides the foundational models for provider interactions:
- Provider connection configuration
- The aggregated completion record built from a stream
- Token usage tracking
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_BASE_URL = "http://localhost:11434/v1"
DEFAULT_CONNECT_TIMEOUT = 30.0
DEFAULT_TOTAL_TIMEOUT = 300.0

CHAT_COMPLETIONS_ENDPOINT = "chat/completions"
CHAT_COMPLETION_OBJECT = "chat.completion"


class MessageRole(Enum):
    """OpenAI-compatible message roles."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ProviderConfig:
    """Provider configuration."""
    base_url: str = DEFAULT_BASE_URL
    api_key: str | None = None
    model: str | None = None

    # Connection settings
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    total_timeout: float = DEFAULT_TOTAL_TIMEOUT

    def url_for(self, endpoint: str) -> str:
        """Join the base URL and an endpoint path."""
        return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"


@dataclass
class TokenUsage:
    """Token usage statistics."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class CompletionMessage:
    """Assistant message being assembled from deltas."""
    role: str = MessageRole.ASSISTANT.value
    content: str = ""


@dataclass
class CompletionChoice:
    """The single choice of an aggregated completion."""
    index: int = 0
    message: CompletionMessage = field(default_factory=CompletionMessage)
    finish_reason: str | None = None


@dataclass
class AggregatedResponse:
    """Completion record folded from streamed chunks.

    Shaped like a non-streaming ``chat.completion`` body. ``choices`` always
    holds exactly one element whose content only grows.
    """
    id: str | None = None
    object: str = CHAT_COMPLETION_OBJECT
    created: int = field(default_factory=lambda: int(time.time()))
    model: str | None = None
    choices: list[CompletionChoice] = field(
        default_factory=lambda: [CompletionChoice()]
    )
    usage: TokenUsage = field(default_factory=TokenUsage)

    @property
    def content(self) -> str:
        return self.choices[0].message.content

    @property
    def finish_reason(self) -> str | None:
        return self.choices[0].finish_reason

    def to_dict(self) -> dict[str, Any]:
        """Render the OpenAI-compatible completion body."""
        choice = self.choices[0]
        return {
            "id": self.id,
            "object": self.object,
            "created": self.created,
            "model": self.model,
            "choices": [
                {
                    "index": choice.index,
                    "message": {
                        "role": choice.message.role,
                        "content": choice.message.content,
                    },
                    "finish_reason": choice.finish_reason,
                }
            ],
            "usage": {
                "prompt_tokens": self.usage.prompt_tokens,
                "completion_tokens": self.usage.completion_tokens,
                "total_tokens": self.usage.total_tokens,
            },
        }
