"""
Structured Logging Infrastructure for Service Bus Management

Provides correlation tracking, JSON/text formatting, sensitive data
redaction and context-aware logging.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import contextvars
import json
import logging
import re
import sys
import traceback
import uuid
from datetime import datetime, timezone
from typing import Optional


# Context variable for correlation ID (thread-safe for async)
correlation_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    'correlation_id', default=None
)

# LogRecord attributes that are not extra context
_STANDARD_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname', 'process',
    'processName', 'relativeCreated', 'thread', 'threadName', 'exc_info',
    'exc_text', 'stack_info', 'getMessage', 'taskName'
}


class CorrelationContext:
    """Manages correlation ID context for request tracing."""
    
    @staticmethod
    def get_correlation_id() -> str:
        """Get current correlation ID or generate new one."""
        corr_id = correlation_id_var.get()
        if not corr_id:
            corr_id = str(uuid.uuid4())
            correlation_id_var.set(corr_id)
        return corr_id
    
    @staticmethod
    def set_correlation_id(corr_id: str) -> None:
        """Set correlation ID for current context."""
        correlation_id_var.set(corr_id)
    
    @staticmethod
    def clear_correlation_id() -> None:
        """Clear correlation ID from current context."""
        correlation_id_var.set(None)


class SensitiveDataFilter(logging.Filter):
    """Filter to redact SAS tokens and keys from log messages."""
    
    PATTERNS = [
        (re.compile(r'(SharedAccessSignature[= ])[^;&\s]+', re.IGNORECASE), r'\1***REDACTED***'),
        (re.compile(r'(SharedAccessKey=)[^;&\s]+', re.IGNORECASE), r'\1***REDACTED***'),
        (re.compile(r'(sig=)[^;&\s]+', re.IGNORECASE), r'\1***REDACTED***'),
    ]
    
    def filter(self, record: logging.LogRecord) -> bool:
        """Redact sensitive data from log record."""
        if isinstance(record.msg, str):
            for pattern, replacement in self.PATTERNS:
                record.msg = pattern.sub(replacement, record.msg)
        return True


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""
    
    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'correlation_id': CorrelationContext.get_correlation_id(),
        }
        
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith('_'):
                log_data[key] = value
        
        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': ''.join(traceback.format_exception(*record.exc_info))
            }
        
        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter."""
    
    def __init__(self):
        fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")


class StructuredLogger:
    """Structured logger with keyword context fields."""
    
    def __init__(self, name: str):
        """Initialize structured logger."""
        self.logger = logging.getLogger(name)
    
    def _log(self, level: int, message: str, **kwargs) -> None:
        """Log with extra context fields."""
        extra = {k: v for k, v in kwargs.items() if v is not None}
        self.logger.log(level, message, extra=extra)
    
    def debug(self, message: str, **kwargs) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, message, **kwargs)
    
    def info(self, message: str, **kwargs) -> None:
        """Log info message."""
        self._log(logging.INFO, message, **kwargs)
    
    def warning(self, message: str, **kwargs) -> None:
        """Log warning message."""
        self._log(logging.WARNING, message, **kwargs)
    
    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        """Log error message."""
        if exc_info:
            self.logger.error(message, exc_info=True, extra=kwargs)
        else:
            self._log(logging.ERROR, message, **kwargs)
    
    def log_operation(self, operation: str, entity_type: str, entity_name: str, **kwargs) -> None:
        """Log entity operation at debug level."""
        self.debug(
            f"{operation}: {entity_type}/{entity_name}",
            operation=operation,
            entity_type=entity_type,
            entity_name=entity_name,
            **kwargs
        )
    
    def log_error(
        self,
        operation: str,
        error_type: str,
        error_message: str,
        **kwargs
    ) -> None:
        """Log a failed operation at warning level."""
        self.warning(
            f"{operation} failed: {error_type}: {error_message}",
            operation=operation,
            error_type=error_type,
            error_message=error_message,
            **kwargs
        )


def setup_logging(level: str = "INFO", format_type: str = "text") -> None:
    """
    Configure logging for command-line use.
    
    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Log format ("json" or "text")
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()
    
    if format_type == "json":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = TextFormatter()
    
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    handler.addFilter(SensitiveDataFilter())
    root_logger.addHandler(handler)
