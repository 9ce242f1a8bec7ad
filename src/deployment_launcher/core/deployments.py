import logging
from pathlib import Path
from typing import AsyncIterator, Iterable, List, Optional, Tuple, Union

from ..config import LauncherSettings
from .api.platform import PlatformClient
from .constants import (
    COORDINATOR_WORKER_NAME,
    DEV_LOGIN_TAG,
    LAUNCHER_TAG,
    SIM_PLAYER_DEPLOYMENT_TAG,
    TARGET_DEPLOYMENT_READY_FLAG,
)
from .exceptions import ErrorKind, LaunchConfigError, PlatformError
from .launch_config import LaunchConfigVariant, patch_launch_config
from .models import Deployment, LaunchConfig, Operation
from .operations import wait_for_operation
from .snapshot import upload_snapshot

log = logging.getLogger(__name__)


def read_launch_config(path: Union[str, Path]) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise LaunchConfigError(
            f"Unable to read launch configuration {path}: {e.strerror or e}"
        ) from e


class DeploymentManager:
    """
    Creates, lists and stops the deployments launched by this tool.

    Deployments without the launcher tag are never listed, replaced or
    stopped. Name collisions are resolved by stopping the existing active
    deployment before creating the new one; the list-then-stop sequence is
    not atomic, which is fine for a single operator running one command at
    a time.
    """

    def __init__(self, client: PlatformClient, settings: LauncherSettings):
        self.client = client
        self.settings = settings

    def overview_url(
        self, project_name: str, deployment_name: str, deployment_id: Optional[str] = None
    ) -> str:
        url = (
            f"{self.settings.console_url}/projects/{project_name}"
            f"/deployments/{deployment_name}/overview"
        )
        return f"{url}/{deployment_id}" if deployment_id else url

    def format_status_line(self, deployment: Deployment) -> str:
        token = (
            "<simulated-player-deployment>"
            if deployment.has_tag(SIM_PLAYER_DEPLOYMENT_TAG)
            else "<deployment>"
        )
        url = self.overview_url(deployment.project_name, deployment.name, deployment.id)
        return (
            f"{token} {deployment.id} {deployment.name} "
            f"{deployment.region_code or '-'} {url} {str(deployment.status)}"
        )

    async def list_launched_active(self, project_name: str) -> List[Deployment]:
        """Starting or running deployments of the project launched by this tool."""
        deployments = await self.client.list_deployments(project_name)
        return [
            deployment
            for deployment in deployments
            if deployment.status.is_active and deployment.has_tag(LAUNCHER_TAG)
        ]

    async def find_active(
        self, project_name: str, deployment_name: str
    ) -> Optional[Deployment]:
        for deployment in await self.list_launched_active(project_name):
            if deployment.name == deployment_name:
                return deployment
        return None

    async def deployment_exists(self, project_name: str, deployment_name: str) -> bool:
        return await self.find_active(project_name, deployment_name) is not None

    async def stop_by_id(self, project_name: str, deployment_id: str) -> bool:
        """Stop a deployment. Returns False when the platform does not know the id."""
        try:
            await self.client.stop_deployment(project_name, deployment_id)
        except PlatformError as e:
            if e.kind != ErrorKind.NOT_FOUND:
                raise
            log.debug(f"Deployment {deployment_id} not found: {e.detail}")
            return False
        return True

    async def stop_by_name(
        self, project_name: str, deployment_name: str, warn_if_missing: bool = True
    ) -> Optional[Deployment]:
        deployment = await self.find_active(project_name, deployment_name)
        if deployment is None:
            if warn_if_missing:
                log.warning(
                    f"Unable to stop the deployment {deployment_name} because it "
                    "can't be found or isn't running."
                )
            return None

        log.info(f"Stopping active deployment by name: {deployment.name}")
        await self.client.stop_deployment(project_name, deployment.id)
        return deployment

    async def stop_all(
        self, project_name: str
    ) -> AsyncIterator[Tuple[Deployment, bool]]:
        """Stop every active deployment launched by this tool.

        Yields each deployment with whether the platform still knew it.
        Unknown ids are skipped; any other platform fault ends the sweep.
        """
        for deployment in await self.list_launched_active(project_name):
            stopped = await self.stop_by_id(project_name, deployment.id)
            yield deployment, stopped

    async def replace_if_exists(
        self, project_name: str, deployment_name: str
    ) -> Optional[Deployment]:
        """Stop the active deployment holding this name, if there is one."""
        return await self.stop_by_name(
            project_name, deployment_name, warn_if_missing=False
        )

    async def create_main(
        self,
        project_name: str,
        assembly_name: str,
        runtime_version: str,
        deployment_name: str,
        launch_config_path: Union[str, Path],
        snapshot_path: Union[str, Path],
        region: str,
        with_simulated_players: bool = False,
        extra_tags: Iterable[str] = (),
    ) -> Operation:
        """Upload the starting snapshot and submit the main deployment."""
        launch_config = read_launch_config(launch_config_path)
        snapshot_id = await upload_snapshot(
            self.client,
            snapshot_path,
            project_name,
            deployment_name,
            encrypted=region == self.settings.restricted.region_code,
        )

        deployment = Deployment(
            name=deployment_name,
            projectName=project_name,
            assemblyId=assembly_name,
            runtimeVersion=runtime_version,
            regionCode=region,
            launchConfig=LaunchConfig(configJson=launch_config),
            startingSnapshotId=snapshot_id,
        )
        for tag in extra_tags:
            deployment.add_tag(tag)
        deployment.add_tag(LAUNCHER_TAG)
        if with_simulated_players:
            deployment.add_tag(DEV_LOGIN_TAG)

        log.info(
            f"Creating the main deployment {deployment_name} in project {project_name} "
            f"with snapshot ID {snapshot_id}. "
            f"Link: {self.overview_url(project_name, deployment_name)}"
        )
        return await self.client.create_deployment(deployment)

    async def create_simulated(
        self,
        project_name: str,
        assembly_name: str,
        runtime_version: str,
        target_deployment_name: str,
        deployment_name: str,
        launch_config_path: Union[str, Path],
        region: str,
        simulated_player_count: int,
        extra_tags: Iterable[str] = (),
        token_client: Optional[PlatformClient] = None,
    ) -> Operation:
        """Submit a simulated player deployment aimed at the target deployment.

        A fresh development auth token is issued for every launch and only
        ever written into the patched launch configuration. No starting
        snapshot is attached. ``token_client`` issues the token when the
        simulated players' region is served by another platform endpoint.
        """
        launch_config = read_launch_config(launch_config_path)
        variant = LaunchConfigVariant.from_path(launch_config_path)

        issuer = token_client or self.client
        token = await issuer.create_development_authentication_token(project_name)

        patched = patch_launch_config(
            launch_config,
            variant,
            COORDINATOR_WORKER_NAME,
            token.token_secret,
            target_deployment_name,
            simulated_player_count,
        )

        deployment = Deployment(
            name=deployment_name,
            projectName=project_name,
            assemblyId=assembly_name,
            runtimeVersion=runtime_version,
            regionCode=region,
            launchConfig=LaunchConfig(configJson=patched.text),
        )
        for tag in extra_tags:
            deployment.add_tag(tag)
        deployment.add_tag(LAUNCHER_TAG)
        deployment.add_tag(SIM_PLAYER_DEPLOYMENT_TAG)

        log.info(
            f"Creating the simulated player deployment {deployment_name} in project "
            f"{project_name} with {simulated_player_count} simulated players. "
            f"Link: {self.overview_url(project_name, deployment_name)}"
        )
        return await self.client.create_deployment(deployment)

    async def wait(self, operation: Operation) -> Optional[Deployment]:
        """Block until a creation operation ends. None means the creation failed."""
        return await wait_for_operation(
            self.client,
            operation,
            base_delay=self.settings.poll_interval,
            max_delay=self.settings.poll_max_interval,
        )

    async def finalize_linkage(self, deployment: Deployment, ready: bool) -> Deployment:
        """Tell the coordinator workers of a running deployment whether their target is up."""
        deployment.add_worker_flag(
            COORDINATOR_WORKER_NAME,
            TARGET_DEPLOYMENT_READY_FLAG,
            "true" if ready else "false",
        )
        return await self.client.update_deployment(deployment)
