"""
Launch configuration patching for simulated player deployments.

Two launch configuration layouts exist. The verbose layout keeps worker flags
under ``workers[].flags`` and the load balancing layers under
``load_balancing.layer_configurations``. The compact layout (``*.pb.json``)
keeps worker flags under ``worker_flagz[].flagz`` and stores the load balancer
layout as a JSON string in the ``loadbalancer_v2_config_json`` entry of the
top-level ``flagz`` list.

Only the coordinator worker's flags and its load balancing layer are touched;
everything else in the document is written back as it was read.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Union

from .constants import (
    COMPACT_LAUNCH_CONFIG_SUFFIX,
    DEV_AUTH_TOKEN_FLAG,
    LOADBALANCER_CONFIG_FLAG,
    NUM_SIMULATED_PLAYERS_FLAG,
    TARGET_DEPLOYMENT_FLAG,
)
from .exceptions import LaunchConfigError

log = logging.getLogger(__name__)


class LaunchConfigVariant(str, Enum):
    COMPACT = "compact"
    VERBOSE = "verbose"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "LaunchConfigVariant":
        if str(path).endswith(COMPACT_LAUNCH_CONFIG_SUFFIX):
            return cls.COMPACT
        return cls.VERBOSE


@dataclass
class PatchResult:
    text: str
    flags_injected: bool
    grid_resized: bool


def _flag(name: str, value: str) -> Dict[str, str]:
    return {"name": name, "value": value}


def _set_grid(layer: Dict[str, Any], grid_key: str, cols: int, rows: int) -> None:
    grid = layer[grid_key]
    grid["cols"] = cols
    grid["rows"] = rows


class LaunchConfigDocument(ABC):
    """Typed view over a parsed launch configuration tree."""

    def __init__(self, tree: Dict[str, Any]):
        if not isinstance(tree, dict):
            raise LaunchConfigError("Launch configuration must be a JSON object")
        self.tree = tree

    @abstractmethod
    def find_worker_flags(self, worker_type: str) -> List[List[Dict[str, Any]]]:
        """Flag lists of the worker entries of the given type."""

    @abstractmethod
    def resize_layer(self, layer_name: str, cols: int, rows: int) -> bool:
        """Overwrite the rectangle grid of a layer. False when no layer matched."""

    def dumps(self) -> str:
        return json.dumps(self.tree, indent=2)


class VerboseLaunchConfig(LaunchConfigDocument):
    def find_worker_flags(self, worker_type: str) -> List[List[Dict[str, Any]]]:
        return [
            worker["flags"]
            for worker in self.tree["workers"]
            if worker.get("worker_type") == worker_type
        ]

    def resize_layer(self, layer_name: str, cols: int, rows: int) -> bool:
        resized = False
        for layer in self.tree["load_balancing"]["layer_configurations"]:
            if layer.get("layer") == layer_name:
                _set_grid(layer, "rectangle_grid", cols, rows)
                resized = True
        return resized


class CompactLaunchConfig(LaunchConfigDocument):
    def find_worker_flags(self, worker_type: str) -> List[List[Dict[str, Any]]]:
        for worker in self.tree["worker_flagz"]:
            if worker.get("worker_type") == worker_type:
                return [worker["flagz"]]
        return []

    def resize_layer(self, layer_name: str, cols: int, rows: int) -> bool:
        for flag in self.tree["flagz"]:
            if flag.get("name") != LOADBALANCER_CONFIG_FLAG:
                continue

            lb_config = json.loads(flag["value"])
            resized = False
            for layer in lb_config["layerConfigurations"]:
                if layer.get("layer") == layer_name:
                    _set_grid(layer, "rectangleGrid", cols, rows)
                    resized = True
                    break

            flag["value"] = json.dumps(lb_config, separators=(",", ":"))
            return resized

        return False


def parse_launch_config(
    document_text: str, variant: LaunchConfigVariant
) -> LaunchConfigDocument:
    try:
        tree = json.loads(document_text)
    except json.JSONDecodeError as e:
        raise LaunchConfigError(f"Invalid launch configuration JSON: {e}") from e

    if variant == LaunchConfigVariant.COMPACT:
        return CompactLaunchConfig(tree)
    return VerboseLaunchConfig(tree)


def patch_launch_config(
    document_text: str,
    variant: LaunchConfigVariant,
    coordinator_worker: str,
    dev_auth_token: str,
    target_deployment: str,
    simulated_player_count: int,
) -> PatchResult:
    """
    Point the coordinator worker at the target deployment and size its layer.

    Appends the dev auth token, target deployment and player count flags to
    the coordinator worker and resizes the coordinator layer to
    ``simulated_player_count`` columns by one row. A missing worker entry or
    layer is logged and reported on the result instead of failing.

    Raises:
        LaunchConfigError: the document is not JSON or lacks the sections
            its layout requires.
    """
    document = parse_launch_config(document_text, variant)
    flags = [
        _flag(DEV_AUTH_TOKEN_FLAG, dev_auth_token),
        _flag(TARGET_DEPLOYMENT_FLAG, target_deployment),
        _flag(NUM_SIMULATED_PLAYERS_FLAG, str(simulated_player_count)),
    ]

    try:
        flag_lists = document.find_worker_flags(coordinator_worker)
        for flag_list in flag_lists:
            flag_list.extend(dict(flag) for flag in flags)

        grid_resized = document.resize_layer(
            coordinator_worker, simulated_player_count, 1
        )
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise LaunchConfigError(
            f"Unexpected {variant.value} launch configuration layout: {e!r}"
        ) from e

    if not flag_lists:
        log.warning(
            f"No '{coordinator_worker}' worker entry in the launch configuration, "
            "simulated player flags were not added"
        )
    if not grid_resized:
        log.warning(
            f"No '{coordinator_worker}' load balancing layer in the launch configuration, "
            "the layer was not resized"
        )

    return PatchResult(
        text=document.dumps(),
        flags_injected=bool(flag_lists),
        grid_resized=grid_resized,
    )
