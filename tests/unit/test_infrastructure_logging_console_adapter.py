"""Unit tests for ConsoleAdapter (structured console logging).

Tests cover:
- All LoggerProtocol methods (debug, info, warning, error, critical)
- Error details added from an exception
- Context binding returns a new adapter
- Renderer selection (JSON vs console)

Architecture:
- Unit tests with mocked structlog
- NO real logging output
"""

from unittest.mock import MagicMock, patch

import pytest

from iam_admin.infrastructure.logging.console_adapter import ConsoleAdapter

STRUCTLOG = "iam_admin.infrastructure.logging.console_adapter.structlog"


@pytest.mark.unit
class TestConsoleAdapterLogging:
    """Test ConsoleAdapter logging methods."""

    def test_debug_logs_message_with_context(self):
        """Test debug() logs message with structured context."""
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            adapter.debug("outbox_dispatch_pass", fetched=3, dispatched=3)

            mock_logger.debug.assert_called_once_with(
                "outbox_dispatch_pass", fetched=3, dispatched=3
            )

    def test_info_logs_message_with_context(self):
        """Test info() logs message with structured context."""
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            adapter.info("tenant_created", tenant_id="T1", code="ACME")

            mock_logger.info.assert_called_once_with(
                "tenant_created", tenant_id="T1", code="ACME"
            )

    def test_warning_logs_message_with_context(self):
        """Test warning() logs message with structured context."""
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            adapter.warning("aggregate_persist_rejected", aggregate_id="D1")

            mock_logger.warning.assert_called_once_with(
                "aggregate_persist_rejected", aggregate_id="D1"
            )

    def test_error_adds_exception_details(self):
        """Test error() adds error_type and error_message for an exception."""
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            adapter.error("outbox_dispatch_failed", error=ValueError("bad"), sequence=7)

            mock_logger.error.assert_called_once_with(
                "outbox_dispatch_failed",
                sequence=7,
                error_type="ValueError",
                error_message="bad",
            )

    def test_error_without_exception(self):
        """Test error() passes context through when no exception is given."""
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            adapter.error("outbox_event_undecodable", reason="malformed_event")

            mock_logger.error.assert_called_once_with(
                "outbox_event_undecodable", reason="malformed_event"
            )

    def test_critical_adds_exception_details(self):
        """Test critical() adds error details like error()."""
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            adapter.critical("worker_crashed", error=RuntimeError("down"))

            mock_logger.critical.assert_called_once_with(
                "worker_crashed", error_type="RuntimeError", error_message="down"
            )


@pytest.mark.unit
class TestConsoleAdapterBinding:
    """Test context binding."""

    def test_bind_returns_new_adapter_with_bound_logger(self):
        """Test bind() wraps the structlog bound logger."""
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            bound_logger = MagicMock()
            mock_logger.bind.return_value = bound_logger
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            bound = adapter.bind(component="outbox_dispatcher")
            bound.info("outbox_dispatcher_started")

            assert bound is not adapter
            mock_logger.bind.assert_called_once_with(component="outbox_dispatcher")
            bound_logger.info.assert_called_once_with("outbox_dispatcher_started")
            mock_logger.info.assert_not_called()

    def test_with_context_is_bind(self):
        """Test with_context() behaves like bind()."""
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            ConsoleAdapter().with_context(request_id="r-1")

            mock_logger.bind.assert_called_once_with(request_id="r-1")


@pytest.mark.unit
class TestConsoleAdapterConfiguration:
    """Test renderer selection."""

    def test_json_renderer_when_requested(self):
        """Test use_json=True configures the JSON renderer."""
        with patch(STRUCTLOG) as mock_structlog:
            ConsoleAdapter(use_json=True)

            processors = mock_structlog.configure.call_args.kwargs["processors"]
            assert mock_structlog.processors.JSONRenderer.return_value in processors
            mock_structlog.dev.ConsoleRenderer.assert_not_called()

    def test_console_renderer_by_default(self):
        """Test the default configures the colored console renderer."""
        with patch(STRUCTLOG) as mock_structlog:
            ConsoleAdapter()

            processors = mock_structlog.configure.call_args.kwargs["processors"]
            assert mock_structlog.dev.ConsoleRenderer.return_value in processors
            mock_structlog.processors.JSONRenderer.assert_not_called()
