"""Stop command for deployments started by the launcher."""

import asyncio
from typing import List, Optional

import typer

from ...config import LauncherSettings
from ...core.exceptions import LauncherError, PlatformError
from ...core.regions import RegionResolver
from ..utils.errors import report_platform_error
from ..utils.output import UNKNOWN_DEPLOYMENT_TOKEN, emit, print_usage
from ..utils.platform import open_manager

STOP_ARG_COUNTS = (3, 4)


def stop_command(args: Optional[List[str]]):
    """Stop one deployment by id, or every active deployment this tool started."""
    args = args or []
    if len(args) + 1 not in STOP_ARG_COUNTS:
        print_usage()
        raise typer.Exit(1)

    project_name, region = args[0], args[1]
    deployment_id = args[2] if len(args) == 3 else None

    raise typer.Exit(asyncio.run(run_stop(project_name, region, deployment_id)))


async def run_stop(
    project_name: str, region: str, deployment_id: Optional[str] = None
) -> int:
    settings = LauncherSettings.from_env()
    resolver = RegionResolver(settings)

    try:
        async with open_manager(settings, resolver, region) as manager:
            if deployment_id is not None:
                emit(f"Stopping deployment with id {deployment_id}")
                if not await manager.stop_by_id(project_name, deployment_id):
                    emit(UNKNOWN_DEPLOYMENT_TOKEN)
                return 0

            async for deployment, stopped in manager.stop_all(project_name):
                if stopped:
                    emit(f"Stopped deployment with id {deployment.id}")
                else:
                    emit(UNKNOWN_DEPLOYMENT_TOKEN)
            return 0

    except PlatformError as e:
        report_platform_error(e)
        return 1
    except LauncherError as e:
        emit(str(e), err=True)
        return 1
    finally:
        resolver.close()
