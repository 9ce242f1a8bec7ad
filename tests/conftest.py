"""
Test configuration and fixtures for deployment-launcher tests.

Provides shared fixtures for:
- Launcher settings isolated from the developer's machine
- Mock platform API clients
- Deployment records
- Launch configuration documents in both layouts
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from unittest.mock import AsyncMock

import pytest

from deployment_launcher.config import LauncherSettings
from deployment_launcher.core.api.platform import PlatformClient
from deployment_launcher.core.constants import (
    COORDINATOR_WORKER_NAME,
    LAUNCHER_TAG,
    LOADBALANCER_CONFIG_FLAG,
)
from deployment_launcher.core.models import Deployment


@pytest.fixture
def settings(tmp_path: Path) -> LauncherSettings:
    """Provide settings pointing at a temporary OAuth directory.

    Poll delays are zero so operation waits do not sleep.
    """
    oauth_dir = tmp_path / "oauth2"
    oauth_dir.mkdir()
    return LauncherSettings(
        api_url="https://platform.test",
        console_url="https://console.test",
        oauth_dir=oauth_dir,
        poll_interval=0.0,
        poll_max_interval=0.0,
    )


@pytest.fixture
def mock_platform_client() -> AsyncMock:
    """Provide mock platform API client.

    Returns:
        AsyncMock restricted to the PlatformClient interface.
    """
    client = AsyncMock(spec=PlatformClient)
    client.__aenter__.return_value = client
    client.__aexit__.return_value = False
    client.list_deployments.return_value = []
    return client


@pytest.fixture
def make_deployment() -> Callable[..., Deployment]:
    """Provide a factory for deployment records as returned by the platform."""

    def _make(
        name: str = "main",
        deployment_id: str = "dep-1",
        status: str = "RUNNING",
        tags=(LAUNCHER_TAG,),
        project_name: str = "my_project",
        region_code: Optional[str] = "EU",
    ) -> Deployment:
        return Deployment.model_validate(
            {
                "id": deployment_id,
                "name": name,
                "projectName": project_name,
                "regionCode": region_code,
                "status": status,
                "tag": list(tags),
            }
        )

    return _make


@pytest.fixture
def verbose_launch_config() -> Dict[str, Any]:
    """Provide a launch configuration in the verbose layout."""
    return {
        "template": "w2_r0500_e5",
        "world": {
            "chunkEdgeLengthMeters": 50,
            "dimensions": {"xMeters": 2000, "zMeters": 2000},
        },
        "load_balancing": {
            "layer_configurations": [
                {
                    "layer": "UnrealWorker",
                    "rectangle_grid": {"cols": 2, "rows": 2},
                },
                {
                    "layer": COORDINATOR_WORKER_NAME,
                    "rectangle_grid": {"cols": 1, "rows": 1},
                    "options": {"manual_worker_connection_only": False},
                },
            ]
        },
        "workers": [
            {
                "worker_type": "UnrealWorker",
                "flags": [{"name": "unreal_worker_flag", "value": "1"}],
                "permissions": [{"all": {}}],
            },
            {
                "worker_type": COORDINATOR_WORKER_NAME,
                "flags": [
                    {"name": "coordinator_start_delay_millis", "value": "10000"}
                ],
            },
        ],
    }


@pytest.fixture
def compact_lb_config() -> Dict[str, Any]:
    """Provide the load balancer layout embedded in compact launch configurations."""
    return {
        "layerConfigurations": [
            {"layer": "UnrealWorker", "rectangleGrid": {"cols": 1, "rows": 1}},
            {"layer": COORDINATOR_WORKER_NAME, "rectangleGrid": {"cols": 1, "rows": 1}},
        ]
    }


@pytest.fixture
def compact_launch_config(compact_lb_config) -> Dict[str, Any]:
    """Provide a launch configuration in the compact (.pb.json) layout."""
    return {
        "template": "w2_r0500_e5",
        "dimensionsInWorldUnits": {"x": 2000, "z": 2000},
        "flagz": [
            {"name": "interest_queries_limit", "value": "100"},
            {
                "name": LOADBALANCER_CONFIG_FLAG,
                "value": json.dumps(compact_lb_config),
            },
        ],
        "worker_flagz": [
            {
                "worker_type": "UnrealWorker",
                "flagz": [{"name": "unreal_worker_flag", "value": "1"}],
            },
            {
                "worker_type": COORDINATOR_WORKER_NAME,
                "flagz": [
                    {"name": "coordinator_start_delay_millis", "value": "10000"}
                ],
            },
        ],
    }


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Dict[str, str]:
    """Provide patched environment variables for tests.

    Returns:
        Dictionary of environment variables set.
    """
    env_vars = {
        "LAUNCHER_API_URL": "https://platform.test",
        "LAUNCHER_CONSOLE_URL": "https://console.test",
        "LAUNCHER_OAUTH_DIR": str(tmp_path),
        "LAUNCHER_POLL_INTERVAL": "0",
        "LAUNCHER_POLL_MAX_INTERVAL": "0",
        "LOG_LEVEL": "ERROR",  # Suppress logs during tests
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    return env_vars
