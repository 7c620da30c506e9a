"""Pytest configuration and shared fixtures."""

import logfire
import pytest

from taskclock.core.config import settings


def pytest_configure(config: pytest.Config) -> None:
    """Keep spans local during tests."""
    settings.environment = "test"
    logfire.configure(send_to_logfire=False, console=False, service_name="taskclock-tests")
