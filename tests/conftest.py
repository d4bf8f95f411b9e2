"""Shared fixtures."""

from collections.abc import Generator

import pytest
import structlog

from httpget.observability.metrics import TransferMetrics


@pytest.fixture(autouse=True)
def reset_observability() -> Generator[None]:
    """Start every test with fresh metrics and default logging."""
    TransferMetrics.reset()
    yield
    TransferMetrics.reset()
    structlog.reset_defaults()
