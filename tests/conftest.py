"""Shared test fixtures and configuration for qbitctl tests."""

import pytest

import qbitctl.logger as logger_module


def pytest_configure(config: pytest.Config) -> None:
    """Initialize logger once for all tests."""
    if getattr(logger_module, "_logger_instance", None) is None:
        logger_module.init_logger("DEBUG")


@pytest.fixture
def anyio_backend() -> str:
    """Run async tests on asyncio only, aiohttp does not support trio."""
    return "asyncio"
