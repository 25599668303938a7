"""
Unit Tests for Structured Logging

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import json
import logging
import sys

import pytest

from sbmanagement.logging_utils import (
    CorrelationContext,
    SensitiveDataFilter,
    StructuredFormatter,
    StructuredLogger,
    TextFormatter,
    setup_logging,
)


def make_record(msg, **extra):
    record = logging.LogRecord("sbmanagement.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    """Restore root handlers and level after setup_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestCorrelationContext:
    """Tests for correlation ID handling."""
    
    def test_set_and_clear(self):
        """Test setting and clearing the correlation ID."""
        CorrelationContext.set_correlation_id("abc-123")
        assert CorrelationContext.get_correlation_id() == "abc-123"
        CorrelationContext.clear_correlation_id()
        generated = CorrelationContext.get_correlation_id()
        assert generated and generated != "abc-123"
        CorrelationContext.clear_correlation_id()


class TestStructuredFormatter:
    """Tests for JSON formatting."""
    
    def test_extra_fields_included(self):
        """Test context fields appear in the JSON output."""
        CorrelationContext.set_correlation_id("corr-1")
        try:
            output = json.loads(StructuredFormatter().format(
                make_record("decoded", operation="decode_entry", entity_name="orders/audit")
            ))
        finally:
            CorrelationContext.clear_correlation_id()
        
        assert output["message"] == "decoded"
        assert output["level"] == "INFO"
        assert output["correlation_id"] == "corr-1"
        assert output["operation"] == "decode_entry"
        assert output["entity_name"] == "orders/audit"
    
    def test_exception_included(self):
        """Test exception details are rendered."""
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record("failed")
            record.exc_info = sys.exc_info()
        output = json.loads(StructuredFormatter().format(record))
        assert output["exception"]["type"] == "ValueError"
        assert output["exception"]["message"] == "boom"


class TestSensitiveDataFilter:
    """Tests for redaction."""
    
    @pytest.mark.parametrize("message,secret", [
        ("Forwarding to https://ns/q?sig=abcdef&se=1", "abcdef"),
        ("Endpoint=sb://ns/;SharedAccessKeyName=root;SharedAccessKey=s3cr3t=", "s3cr3t"),
        ("Authorization: SharedAccessSignature sr=x&sig=zzz", "zzz"),
    ])
    def test_redacts(self, message, secret):
        """Test secrets are removed from messages."""
        record = make_record(message)
        assert SensitiveDataFilter().filter(record) is True
        assert secret not in record.msg
        assert "***REDACTED***" in record.msg


class TestStructuredLogger:
    """Tests for StructuredLogger."""
    
    def test_log_operation(self, caplog):
        """Test operations are logged at debug level with context."""
        caplog.set_level(logging.DEBUG, logger="sbmanagement.test")
        StructuredLogger("sbmanagement.test").log_operation("encode_entry", "subscription", "orders/audit")
        
        record = caplog.records[-1]
        assert record.levelno == logging.DEBUG
        assert record.getMessage() == "encode_entry: subscription/orders/audit"
        assert record.entity_type == "subscription"
    
    def test_none_fields_dropped(self, caplog):
        """Test None context values are not attached."""
        caplog.set_level(logging.DEBUG, logger="sbmanagement.test")
        StructuredLogger("sbmanagement.test").info("hello", topic_name=None, entity_name="x")
        
        record = caplog.records[-1]
        assert not hasattr(record, "topic_name")
        assert record.entity_name == "x"
    
    def test_log_error(self, caplog):
        """Test failures are logged as warnings."""
        caplog.set_level(logging.DEBUG, logger="sbmanagement.test")
        StructuredLogger("sbmanagement.test").log_error("decode_entry", "FieldDecodeError", "bad")
        
        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.error_type == "FieldDecodeError"


class TestSetupLogging:
    """Tests for setup_logging."""
    
    def test_json(self, restore_root_logger):
        """Test JSON configuration."""
        setup_logging("DEBUG", "json")
        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        handler = restore_root_logger.handlers[0]
        assert isinstance(handler.formatter, StructuredFormatter)
        assert any(isinstance(f, SensitiveDataFilter) for f in handler.filters)
    
    def test_text(self, restore_root_logger):
        """Test text configuration."""
        setup_logging("warning")
        assert restore_root_logger.level == logging.WARNING
        assert isinstance(restore_root_logger.handlers[0].formatter, TextFormatter)
