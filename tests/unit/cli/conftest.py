"""Shared fixtures for launcher CLI tests."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from typer.testing import CliRunner

from deployment_launcher.core.deployments import DeploymentManager


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def mock_manager():
    """DeploymentManager double whose coroutines are AsyncMocks."""
    manager = MagicMock(spec=DeploymentManager)
    for name in (
        "replace_if_exists",
        "create_main",
        "create_simulated",
        "wait",
        "finalize_linkage",
        "stop_by_id",
        "list_launched_active",
    ):
        setattr(manager, name, AsyncMock())
    manager.client = MagicMock(name="client")
    manager.replace_if_exists.return_value = None
    return manager


@pytest.fixture
def opened_regions():
    """Regions the command asked a manager for, in order."""
    return []


@pytest.fixture
def fake_open_manager(mock_manager, opened_regions):
    """Stand-in for open_manager that yields the mock manager."""

    @asynccontextmanager
    async def _open(settings, resolver, region):
        opened_regions.append(region)
        yield mock_manager

    return _open


@pytest.fixture
def real_open_manager(mock_platform_client, opened_regions):
    """Stand-in for open_manager that yields a real manager over a mock client."""

    @asynccontextmanager
    async def _open(settings, resolver, region):
        opened_regions.append(region)
        yield DeploymentManager(mock_platform_client, settings)

    return _open
