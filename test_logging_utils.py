#!/usr/bin/env python3
"""
Test script for logging utilities.

This validates that the centralized logging and error classification works
correctly.
"""

import logging

import httpx
import pytest
from pydantic import BaseModel, ValidationError

from ai_translator.llm.exceptions import (
    HTTPStatusError,
    TransportConnectionError,
    TransportError,
    TransportTimeoutError,
)
from ai_translator.logging_utils import classify_error, configure_logging, log_operation


class TestClassifyError:
    """Test error classification."""

    def test_classify_http_status_error(self):
        assert classify_error(HTTPStatusError("bad", status_code=500)) == "http_status_error"

    def test_classify_timeout_errors(self):
        assert classify_error(TransportTimeoutError("slow")) == "timeout_error"
        assert classify_error(TimeoutError("slow")) == "timeout_error"

    def test_classify_connection_errors(self):
        assert classify_error(TransportConnectionError("refused")) == "connection_error"
        assert classify_error(ConnectionError("refused")) == "connection_error"
        assert classify_error(OSError("unreachable")) == "connection_error"

    def test_classify_transport_error(self):
        assert classify_error(TransportError("bad json")) == "transport_error"
        request = httpx.Request("GET", "http://ollama.test")
        assert classify_error(httpx.DecodingError("bad gzip", request=request)) == "transport_error"

    def test_classify_validation_error(self):
        class Model(BaseModel):
            value: int

        with pytest.raises(ValidationError) as exc_info:
            Model.model_validate({"value": "nope"})
        assert classify_error(exc_info.value) == "validation_error"

    def test_classify_parameter_and_unknown(self):
        assert classify_error(ValueError("bad")) == "parameter_error"
        assert classify_error(RuntimeError("???")) == "unknown_error"


class TestLogOperation:
    """Test the log_operation decorator."""

    def test_success_returns_result(self):
        @log_operation("test_op", log_args=True, log_result=True)
        def add(a, b):
            return a + b

        assert add(2, 3) == 5

    def test_failure_reraises_original(self):
        @log_operation("test_op")
        def fail():
            raise TransportConnectionError("refused")

        with pytest.raises(TransportConnectionError, match="refused"):
            fail()

    def test_preserves_metadata(self):
        @log_operation("test_op")
        def documented():
            """Docstring survives."""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring survives."


class TestConfigureLogging:
    """Test log level configuration."""

    def test_sets_root_level(self):
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging("debug")
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(previous)

    def test_rejects_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("chatty")
