"""
LLM transport for AI-backed string-table translation.

This package provides HTTP integration with OpenAI-compatible endpoints:
- Buffered chat completions
- SSE streaming folded into a single completion record
- Typed transport errors
"""

from __future__ import annotations

from .exceptions import (
    HTTPStatusError,
    LLMError,
    MalformedFrameError,
    TransportConnectionError,
    TransportError,
    TransportTimeoutError,
    UnsupportedProviderError,
)
from .models import (
    AggregatedResponse,
    CompletionChoice,
    CompletionMessage,
    MessageRole,
    ProviderConfig,
    TokenUsage,
)
from .client import OllamaClient

__all__ = [
    # Core models
    "AggregatedResponse",
    "CompletionChoice",
    "CompletionMessage",
    # Exceptions
    "HTTPStatusError",
    "LLMError",
    "MalformedFrameError",
    "MessageRole",
    # Client
    "OllamaClient",
    "ProviderConfig",
    "TokenUsage",
    "TransportConnectionError",
    "TransportError",
    "TransportTimeoutError",
    "UnsupportedProviderError",
]
