"""LoggerProtocol definition for structured logging.

Backend-agnostic port for structured logs. Every call carries a message plus
key-value context; implementations render it (console in development, JSON
elsewhere).

Context Binding:
    Use bind() to derive a logger that adds fixed context (tenant_id,
    aggregate_id, handler) to every subsequent call.

Usage:
    logger: LoggerProtocol = container.logger
    logger.info("tenant_created", tenant_id=tenant_id, actor=actor)

    dispatch_logger = logger.bind(component="outbox_dispatcher")
    dispatch_logger.warning("dispatch_retry_scheduled", attempts=3)
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    Five levels (DEBUG, INFO, WARNING, ERROR, CRITICAL) plus context binding.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message.

        Args:
            message: Event name or short message (avoid f-strings; use context).
            **context: Structured key-value context fields.
        """
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Event name or short message.
            error: Optional exception; implementations add error_type and
                error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message for failures needing intervention."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a new logger with permanently bound context.

        The original logger is unchanged.
        """
        ...

    def with_context(self, **context: Any) -> LoggerProtocol:
        """Alias for bind()."""
        ...
