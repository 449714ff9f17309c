"""Pytest configuration and shared fixtures.

This configuration provides:
1. A MagicMock logger whose ``bind`` returns itself, so assertions can be
   made on the logger passed to any component
2. Settings and a Container wired to the in-memory backends with inline
   dispatch (commands project synchronously)
"""

from unittest.mock import MagicMock

import pytest

from iam_admin.core.config import Settings
from iam_admin.core.container import Container
from iam_admin.core.enums import Environment


@pytest.fixture
def mock_logger() -> MagicMock:
    """Logger double; ``bind`` returns the same mock."""
    logger = MagicMock()
    logger.bind.return_value = logger
    return logger


@pytest.fixture
def memory_settings() -> Settings:
    """Settings for the in-memory backends with inline dispatch."""
    return Settings(
        environment=Environment.TESTING,
        write_store="memory",
        read_store="memory",
        dispatch_inline=True,
        projection_backoff_base_seconds=0.01,
        projection_backoff_max_seconds=0.05,
    )


@pytest.fixture
def container(memory_settings: Settings, mock_logger: MagicMock) -> Container:
    """Container on in-memory stores; events project during each command."""
    return Container(memory_settings, logger=mock_logger)

