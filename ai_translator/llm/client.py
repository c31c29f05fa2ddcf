"""
Direct HTTP client for OpenAI-compatible chat-completion endpoints.

Ollama serves this API locally; any endpoint speaking the same schema works.
Buffered calls return the provider's JSON body untouched, streamed calls are
folded into a single ``AggregatedResponse``.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import httpx
import structlog

from ..logging_utils import log_operation
from .exceptions import (
    HTTPStatusError,
    TransportConnectionError,
    TransportError,
    TransportTimeoutError,
)
from .models import CHAT_COMPLETIONS_ENDPOINT, AggregatedResponse, ProviderConfig
from .streaming import ChunkAccumulator, EventCallback, StreamingParser

logger = structlog.get_logger(__name__)


class OllamaClient:
    """HTTP client for Ollama's OpenAI-compatible API."""

    provider = "ollama"

    def __init__(
        self,
        config: ProviderConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config: ProviderConfig = config or ProviderConfig()
        self.streaming_parser = StreamingParser()
        self.client: httpx.Client = httpx.Client(
            timeout=httpx.Timeout(
                self.config.total_timeout, connect=self.config.connect_timeout
            ),
            transport=transport,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        # Ollama runs without a key by default; some deployments sit behind one
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    @staticmethod
    def _body_kwargs(method: str, body: dict[str, Any] | None) -> dict[str, Any]:
        if method.upper() == "GET" or body is None:
            return {}
        return {"json": body}

    def _connection_error(self, error: Exception, streaming: bool) -> TransportError:
        label = "Ollama API streaming error" if streaming else "Ollama API error"
        if isinstance(error, httpx.TimeoutException):
            return TransportTimeoutError(
                f"{label}: timed out: {error}",
                provider=self.provider,
                model=self.config.model,
            )
        if isinstance(error, httpx.RequestError):
            return TransportConnectionError(
                f"{label}: {error}",
                provider=self.provider,
                model=self.config.model,
            )
        return TransportError(
            f"{label}: {error}",
            provider=self.provider,
            model=self.config.model,
        )

    @staticmethod
    def _error_data(response: httpx.Response) -> dict[str, Any] | None:
        """Decoded error body when the provider sent a JSON object."""
        try:
            data = response.json()
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

    @log_operation("llm_request")
    def request(
        self, method: str, endpoint: str, body: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """
        Perform one buffered HTTP request.

        Raises:
            HTTPStatusError: the provider answered with a non-2xx status.
            TransportConnectionError: the connection failed or timed out.
            TransportError: the success body was not JSON.
        """
        url = self.config.url_for(endpoint)
        try:
            response = self.client.request(
                method.upper(),
                url,
                headers=self._headers(),
                **self._body_kwargs(method, body),
            )
        except httpx.HTTPError as e:
            raise self._connection_error(e, streaming=False) from e

        if not response.is_success:
            logger.error(
                "Provider returned error status",
                url=url,
                status_code=response.status_code,
            )
            raise HTTPStatusError(
                f"Ollama API error: {response.text}",
                status_code=response.status_code,
                body=response.text,
                response_data=self._error_data(response),
                provider=self.provider,
                model=self.config.model,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"Ollama API returned invalid JSON: {e}",
                provider=self.provider,
                model=self.config.model,
                status_code=response.status_code,
            ) from e

    def create_chat(self, body: dict[str, Any]) -> dict[str, Any]:
        """Request a completion in non-streaming mode."""
        payload = {**body, "stream": False}
        return self.request("post", CHAT_COMPLETIONS_ENDPOINT, payload)

    @log_operation("llm_request_stream")
    def request_stream(
        self,
        method: str,
        endpoint: str,
        body: dict[str, Any],
        on_chunk: Callable[[bytes], None],
    ) -> None:
        """
        Perform a streaming HTTP request, handing every received buffer to
        ``on_chunk`` in arrival order until the connection closes.

        Raises:
            HTTPStatusError: status >= 400. The error body is read and
                reported; nothing is passed to ``on_chunk``.
            TransportTimeoutError: connect timeout, read timeout, or the
                configured total duration elapsed.
            TransportConnectionError: the connection failed or dropped.

        The total deadline is checked as each buffer arrives. A read that
        stalls is cut off by the read timeout, which is also set to
        ``total_timeout``, so a stream that stops sending can run for up to
        twice ``total_timeout`` before failing.
        """
        url = self.config.url_for(endpoint)
        payload = {**body, "stream": True}
        headers = {**self._headers(), "Accept": "text/event-stream"}
        deadline = time.monotonic() + self.config.total_timeout

        try:
            with self.client.stream(
                method.upper(),
                url,
                headers=headers,
                **self._body_kwargs(method, payload),
            ) as response:
                if response.status_code >= 400:
                    response.read()
                    logger.error(
                        "Provider returned error status",
                        url=url,
                        status_code=response.status_code,
                    )
                    raise HTTPStatusError(
                        f"Ollama API streaming error: HTTP {response.status_code}",
                        status_code=response.status_code,
                        body=response.text,
                        response_data=self._error_data(response),
                        provider=self.provider,
                        model=self.config.model,
                    )

                for chunk in response.iter_bytes():
                    if time.monotonic() > deadline:
                        raise TransportTimeoutError(
                            "Ollama API streaming error: total timeout of "
                            f"{self.config.total_timeout}s exceeded",
                            provider=self.provider,
                            model=self.config.model,
                        )
                    on_chunk(chunk)
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise self._connection_error(e, streaming=True) from e

    def create_chat_stream(
        self,
        body: dict[str, Any],
        on_event: EventCallback | None = None,
    ) -> AggregatedResponse:
        """
        Request a completion in streaming mode and fold it into one response.

        ``on_event(raw_line, payload)`` is called after each frame is folded.
        Malformed frames are dropped; transport errors propagate and the
        partial response is discarded.
        """
        payload = {**body, "stream": True}
        accumulator = ChunkAccumulator(
            model=payload.get("model"),
            on_event=on_event,
            parser=self.streaming_parser,
        )
        self.request_stream("post", CHAT_COMPLETIONS_ENDPOINT, payload, accumulator.feed)
        return accumulator.finish()

    def get_statistics(self) -> dict[str, Any]:
        """Get streaming statistics for this client."""
        return {
            "provider": self.provider,
            "base_url": self.config.base_url,
            "streaming": self.streaming_parser.get_stats(),
        }

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> OllamaClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
