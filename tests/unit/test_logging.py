"""Tests for structured logging and the request logging middleware."""

import json
import logging
import sys
from datetime import datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from healthchecker.middleware.logging import (
    JsonFormatter,
    LoggingMiddleware,
    TextFormatter,
    configure_logging,
    request_id_var,
)
from healthchecker.middleware.request_id import RequestIdMiddleware


def make_record(msg="Test message", level=logging.INFO, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way it was after configure_logging()."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_basic_log_format(self):
        """Test basic log formatting."""
        data = json.loads(JsonFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["message"] == "Test message"
        assert data["logger"] == "test"
        assert "timestamp" in data

    def test_timestamp_format(self):
        """Test timestamp is ISO 8601 with Z suffix."""
        data = json.loads(JsonFormatter().format(make_record()))

        assert data["timestamp"].endswith("Z")
        datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))

    def test_includes_request_id_from_context(self):
        """Test request ID from context variable."""
        token = request_id_var.set("test-request-id")
        try:
            data = json.loads(JsonFormatter().format(make_record()))
            assert data["request_id"] == "test-request-id"
        finally:
            request_id_var.reset(token)

    def test_request_id_from_record_wins(self):
        """Test an explicit request_id extra takes precedence."""
        record = make_record()
        record.request_id = "from-record"
        token = request_id_var.set("from-context")
        try:
            data = json.loads(JsonFormatter().format(record))
            assert data["request_id"] == "from-record"
        finally:
            request_id_var.reset(token)

    def test_includes_check_fields(self):
        """Test check-related extra fields are included."""
        record = make_record()
        record.check_slug = "database.connection"
        record.error_type = "OperationalError"
        record.overall_status = "critical"

        data = json.loads(JsonFormatter().format(record))

        assert data["check_slug"] == "database.connection"
        assert data["error_type"] == "OperationalError"
        assert data["overall_status"] == "critical"

    def test_includes_request_fields(self):
        """Test request-related extra fields are included."""
        record = make_record()
        record.method = "GET"
        record.path = "/report"
        record.status_code = 200
        record.duration_ms = 15

        data = json.loads(JsonFormatter().format(record))

        assert data["method"] == "GET"
        assert data["path"] == "/report"
        assert data["status_code"] == 200
        assert data["duration_ms"] == 15

    def test_omits_missing_fields(self):
        """Test unset extras are not emitted."""
        data = json.loads(JsonFormatter().format(make_record()))
        assert "check_slug" not in data
        assert "request_id" not in data

    def test_includes_exception_info(self):
        """Test exception info is included."""
        try:
            raise ValueError("Test error")
        except ValueError:
            record = make_record("Error occurred", logging.ERROR, sys.exc_info())

        data = json.loads(JsonFormatter().format(record))

        assert "ValueError" in data["exception"]


class TestTextFormatter:
    """Tests for TextFormatter."""

    def test_basic_format(self):
        """Test basic text formatting."""
        output = TextFormatter().format(make_record())

        assert "INFO" in output
        assert "test" in output
        assert "Test message" in output

    def test_includes_request_id_prefix(self):
        """Test request ID is prefixed to message."""
        token = request_id_var.set("abc12345-1234-1234-1234-123456789012")
        try:
            assert TextFormatter().format(make_record()).startswith("[abc12345]")
        finally:
            request_id_var.reset(token)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_json_format(self, restore_root_logger):
        """Test JSON format configuration."""
        configure_logging(level="INFO", format="json")
        root = logging.getLogger()

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_text_format(self, restore_root_logger):
        """Test text format configuration."""
        configure_logging(level="WARNING", format="text")
        root = logging.getLogger()

        assert isinstance(root.handlers[0].formatter, TextFormatter)
        assert root.level == logging.WARNING

    def test_log_level_setting(self, restore_root_logger):
        """Test log level is set correctly."""
        configure_logging(level="DEBUG", format="json")
        assert logging.getLogger().level == logging.DEBUG


class TestLoggingMiddleware:
    """Tests for LoggingMiddleware."""

    @pytest.fixture
    def client(self):
        """Create app with request ID and logging middleware."""
        app = FastAPI()
        app.add_middleware(LoggingMiddleware)
        app.add_middleware(RequestIdMiddleware)

        @app.get("/test")
        async def test_endpoint():
            return {"status": "ok"}

        @app.get("/error")
        async def error_endpoint():
            raise RuntimeError("Test error")

        return TestClient(app, raise_server_exceptions=False)

    def test_logs_request_completion(self, client, caplog):
        """Test request completion is logged with timing."""
        with caplog.at_level(logging.INFO, logger="healthchecker.access"):
            response = client.get("/test", headers={"X-Request-ID": "req-12345678"})

        assert response.status_code == 200
        record = next(r for r in caplog.records if r.getMessage() == "Request completed")
        assert record.method == "GET"
        assert record.path == "/test"
        assert record.status_code == 200
        assert record.request_id == "req-12345678"
        assert record.duration_ms >= 0

    def test_logs_error_requests(self, client, caplog):
        """Test failed requests are logged."""
        with caplog.at_level(logging.ERROR, logger="healthchecker.access"):
            response = client.get("/error")

        assert response.status_code == 500
        record = next(r for r in caplog.records if r.getMessage() == "Request failed")
        assert record.error_type == "RuntimeError"

    def test_context_reset_after_request(self, client):
        """Test the request ID context does not leak."""
        client.get("/test")
        assert request_id_var.get() is None
