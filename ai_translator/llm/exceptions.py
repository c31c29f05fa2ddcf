"""
Error handling for LLM transport operations.

This module provides the error taxonomy used by the client and the
stream aggregator:
- Transport failures (connection, timeout, HTTP status)
- Malformed stream frames (dropped during aggregation)
- Unsupported provider selection
"""

from __future__ import annotations


class LLMError(Exception):
    """Base LLM error with rich context."""

    def __init__(
        self,
        message: str,
        provider: str = "ollama",
        model: str | None = None,
        status_code: int | None = None,
        response_data: dict | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.model = model
        self.status_code = status_code
        self.response_data = response_data or {}


class TransportError(LLMError):
    """Fatal failure of a single HTTP exchange."""
    pass


class TransportConnectionError(TransportError):
    """Connection could not be established or was lost mid-stream."""
    pass


class TransportTimeoutError(TransportConnectionError):
    """Connect, read or total-duration timeout expired."""
    pass


class HTTPStatusError(TransportError):
    """Provider answered with an error status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        body: str = "",
        **kwargs,
    ):
        super().__init__(message, status_code=status_code, **kwargs)
        self.body = body


class MalformedFrameError(LLMError):
    """A streamed line could not be decoded into a completion chunk."""

    def __init__(self, message: str, raw_data: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data


class UnsupportedProviderError(LLMError):
    """Configured provider has no transport."""
    pass
