"""Deployment creation commands."""

import asyncio
import logging
from contextlib import AsyncExitStack
from dataclasses import dataclass
from typing import List, Optional, Sequence

import typer

from ...config import LauncherSettings
from ...core.exceptions import LauncherError, PlatformError
from ...core.regions import RegionResolver
from ..utils.errors import report_launch_error
from ..utils.output import emit, print_usage
from ..utils.platform import open_manager

logger = logging.getLogger(__name__)

# Argument counts include the command word
CREATE_ARG_COUNTS = (8, 12)
CREATESIM_ARG_COUNT = 10


@dataclass
class SimulatedPlayerArgs:
    deployment_name: str
    launch_config_path: str
    region: str
    player_count: int


@dataclass
class CreateArgs:
    project_name: str
    assembly_name: str
    runtime_version: str
    deployment_name: str
    launch_config_path: str
    snapshot_path: str
    region: str
    simulated: Optional[SimulatedPlayerArgs] = None


def parse_player_count(value: str) -> Optional[int]:
    try:
        count = int(value.strip())
    except ValueError:
        return None
    return count if count >= 0 else None


def parse_bool(value: str) -> Optional[bool]:
    normalized = value.strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    return None


def _check_arity(args: Sequence[str], counts: Sequence[int]) -> None:
    if len(args) + 1 not in counts:
        print_usage()
        raise typer.Exit(1)


def create_command(args: Optional[List[str]], tags: Optional[List[str]] = None):
    """Start a deployment, optionally paired with a simulated player deployment."""
    args = args or []
    _check_arity(args, CREATE_ARG_COUNTS)

    create_args = CreateArgs(*args[:7])
    if len(args) == 11:
        player_count = parse_player_count(args[10])
        if player_count is None:
            emit("Cannot parse the number of simulated players to connect.")
            raise typer.Exit(1)
        create_args.simulated = SimulatedPlayerArgs(
            args[7], args[8], args[9], player_count
        )

    exit_code = asyncio.run(run_create(create_args, tags or []))
    raise typer.Exit(exit_code)


def createsim_command(args: Optional[List[str]], tags: Optional[List[str]] = None):
    """Start a simulated player deployment aimed at an existing deployment."""
    args = args or []
    _check_arity(args, (CREATESIM_ARG_COUNT,))

    (
        project_name,
        assembly_name,
        runtime_version,
        target_deployment_name,
        sim_deployment_name,
        sim_launch_config_path,
        sim_region,
        player_count_arg,
        auto_connect_arg,
    ) = args

    player_count = parse_player_count(player_count_arg)
    if player_count is None:
        emit("Cannot parse the number of simulated players to connect.")
        raise typer.Exit(1)

    auto_connect = parse_bool(auto_connect_arg)
    if auto_connect is None:
        emit("Cannot parse the auto-connect flag.")
        raise typer.Exit(1)

    exit_code = asyncio.run(
        run_createsim(
            project_name,
            assembly_name,
            runtime_version,
            target_deployment_name,
            SimulatedPlayerArgs(
                sim_deployment_name, sim_launch_config_path, sim_region, player_count
            ),
            auto_connect,
            tags or [],
        )
    )
    raise typer.Exit(exit_code)


async def run_create(args: CreateArgs, tags: List[str]) -> int:
    settings = LauncherSettings.from_env()
    resolver = RegionResolver(settings)
    sim = args.simulated

    try:
        # Both deployments go through the platform serving the main region
        async with AsyncExitStack() as stack:
            manager = await stack.enter_async_context(
                open_manager(settings, resolver, args.region)
            )
            await manager.replace_if_exists(args.project_name, args.deployment_name)

            main_op = await manager.create_main(
                args.project_name,
                args.assembly_name,
                args.runtime_version,
                args.deployment_name,
                args.launch_config_path,
                args.snapshot_path,
                args.region,
                with_simulated_players=sim is not None,
                extra_tags=tags,
            )

            if sim is None:
                emit("Waiting for deployment to be ready...")
                if await manager.wait(main_op) is None:
                    emit("Failed to create the main deployment")
                    return 1

                emit("Successfully created the main deployment")
                return 0

            await manager.replace_if_exists(args.project_name, sim.deployment_name)

            # The player auth token must come from the sim region's platform
            token_client = None
            if resolver.is_restricted(sim.region) != resolver.is_restricted(args.region):
                token_manager = await stack.enter_async_context(
                    open_manager(settings, resolver, sim.region)
                )
                token_client = token_manager.client

            sim_op = await manager.create_simulated(
                args.project_name,
                args.assembly_name,
                args.runtime_version,
                args.deployment_name,
                sim.deployment_name,
                sim.launch_config_path,
                sim.region,
                sim.player_count,
                extra_tags=tags,
                token_client=token_client,
            )

            # Both creations are in flight; wait for the main one first
            emit("Waiting for deployments to be ready...")
            if await manager.wait(main_op) is None:
                emit("Failed to create the main deployment")
                return 1
            emit("Successfully created the main deployment")

            sim_deployment = await manager.wait(sim_op)
            if sim_deployment is None:
                emit("Failed to create the simulated player deployment")
                return 1
            emit("Successfully created the simulated player deployment")

            await manager.finalize_linkage(sim_deployment, ready=True)
            emit("Done! Simulated players will start to connect to your deployment")
            return 0

    except PlatformError as e:
        logger.debug(f"Platform error during create: {e}")
        report_launch_error(e, args.project_name, args.assembly_name)
        return 1
    except LauncherError as e:
        emit(str(e), err=True)
        return 1
    finally:
        resolver.close()


async def run_createsim(
    project_name: str,
    assembly_name: str,
    runtime_version: str,
    target_deployment_name: str,
    sim: SimulatedPlayerArgs,
    auto_connect: bool,
    tags: List[str],
) -> int:
    settings = LauncherSettings.from_env()
    resolver = RegionResolver(settings)

    try:
        async with open_manager(settings, resolver, sim.region) as manager:
            await manager.replace_if_exists(project_name, sim.deployment_name)

            sim_op = await manager.create_simulated(
                project_name,
                assembly_name,
                runtime_version,
                target_deployment_name,
                sim.deployment_name,
                sim.launch_config_path,
                sim.region,
                sim.player_count,
                extra_tags=tags,
            )

            emit("Waiting for the simulated player deployment to be ready...")
            sim_deployment = await manager.wait(sim_op)
            if sim_deployment is None:
                emit("Failed to create the simulated player deployment")
                return 1
            emit("Successfully created the simulated player deployment")

            await manager.finalize_linkage(sim_deployment, ready=auto_connect)
            emit("Done! Simulated players will start to connect to your deployment")
            return 0

    except PlatformError as e:
        logger.debug(f"Platform error during createsim: {e}")
        report_launch_error(e, project_name, assembly_name)
        return 1
    except LauncherError as e:
        emit(str(e), err=True)
        return 1
    finally:
        resolver.close()
