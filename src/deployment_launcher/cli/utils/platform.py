from contextlib import asynccontextmanager
from typing import AsyncIterator

from ...config import LauncherSettings
from ...core.api.platform import PlatformClient
from ...core.deployments import DeploymentManager
from ...core.regions import RegionResolver


@asynccontextmanager
async def open_manager(
    settings: LauncherSettings, resolver: RegionResolver, region: str
) -> AsyncIterator[DeploymentManager]:
    """Deployment manager talking to the platform endpoint serving `region`.

    Can be mocked in tests: @patch('deployment_launcher.cli.commands.create.open_manager')
    """
    endpoint = resolver.resolve(region)
    async with PlatformClient(settings, endpoint) as client:
        yield DeploymentManager(client, settings)
