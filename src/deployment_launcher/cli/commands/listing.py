"""List command for deployments started by the launcher."""

import asyncio
from typing import List, Optional

import typer

from ...config import LauncherSettings
from ...core.exceptions import LauncherError, PlatformError
from ...core.regions import RegionResolver
from ..utils.errors import report_platform_error
from ..utils.output import emit, print_usage
from ..utils.platform import open_manager

LIST_ARG_COUNT = 3


def list_command(args: Optional[List[str]]):
    """Print one status line per active deployment this tool started."""
    args = args or []
    if len(args) + 1 != LIST_ARG_COUNT:
        print_usage()
        raise typer.Exit(1)

    project_name, region = args
    raise typer.Exit(asyncio.run(run_list(project_name, region)))


async def run_list(project_name: str, region: str) -> int:
    settings = LauncherSettings.from_env()
    resolver = RegionResolver(settings)

    try:
        async with open_manager(settings, resolver, region) as manager:
            for deployment in await manager.list_launched_active(project_name):
                emit(manager.format_status_line(deployment))
            return 0

    except PlatformError as e:
        report_platform_error(e)
        return 1
    except LauncherError as e:
        emit(str(e), err=True)
        return 1
    finally:
        resolver.close()
