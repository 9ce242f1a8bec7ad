import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

log = logging.getLogger(__name__)


class PlatformModel(BaseModel):
    """Base class for records exchanged with the platform API."""

    model_config = ConfigDict(
        validate_by_name=True,
        validate_default=True,
        serialize_by_alias=True,
        # Fields this tool does not know about must survive a fetch/update round trip
        extra="allow",
    )

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DeploymentStatus(str, Enum):
    UNKNOWN = "UNKNOWN"
    STARTING = "STARTING"
    RUNNING = "RUNNING"
    STOPPING = "STOPPING"
    STOPPED = "STOPPED"
    ERROR = "ERROR"

    @property
    def is_active(self) -> bool:
        return self in (DeploymentStatus.STARTING, DeploymentStatus.RUNNING)

    def __str__(self) -> str:
        return self.value.title()


class WorkerFlag(PlatformModel):
    worker_type: str = Field(alias="workerType")
    key: str
    value: str


class LaunchConfig(PlatformModel):
    config_json: str = Field(alias="configJson")


class Deployment(PlatformModel):
    """A deployment as known to the platform."""

    id: Optional[str] = None
    name: str
    project_name: str = Field(alias="projectName")
    region_code: Optional[str] = Field(default=None, alias="regionCode")
    assembly_id: Optional[str] = Field(default=None, alias="assemblyId")
    runtime_version: Optional[str] = Field(default=None, alias="runtimeVersion")
    launch_config: Optional[LaunchConfig] = Field(default=None, alias="launchConfig")
    starting_snapshot_id: Optional[str] = Field(
        default=None, alias="startingSnapshotId"
    )
    tags: List[str] = Field(default_factory=list, alias="tag")
    worker_flags: List[WorkerFlag] = Field(default_factory=list, alias="workerFlags")
    status: DeploymentStatus = DeploymentStatus.UNKNOWN

    @field_validator("status", mode="before")
    @classmethod
    def coerce_unknown_status(cls, value):
        if isinstance(value, DeploymentStatus) or value is None:
            return value or DeploymentStatus.UNKNOWN
        try:
            return DeploymentStatus(str(value).upper())
        except ValueError:
            log.debug(f"Treating unrecognized deployment status {value!r} as unknown")
            return DeploymentStatus.UNKNOWN

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def add_tag(self, tag: str) -> None:
        if tag not in self.tags:
            self.tags.append(tag)

    def get_worker_flag(self, worker_type: str, key: str) -> Optional[str]:
        for flag in self.worker_flags:
            if flag.worker_type == worker_type and flag.key == key:
                return flag.value
        return None

    def add_worker_flag(self, worker_type: str, key: str, value: str) -> None:
        self.worker_flags.append(WorkerFlag(workerType=worker_type, key=key, value=value))

    def __str__(self) -> str:
        return f"Deployment:{self.name}" + (f":{self.id}" if self.id else "")


class Snapshot(PlatformModel):
    id: Optional[str] = None
    project_name: str = Field(alias="projectName")
    deployment_name: str = Field(alias="deploymentName")
    checksum: Optional[str] = None
    size: Optional[int] = None


class DevelopmentAuthenticationToken(PlatformModel):
    id: Optional[str] = None
    project_name: Optional[str] = Field(default=None, alias="projectName")
    token_secret: str = Field(alias="tokenSecret")


class OperationError(PlatformModel):
    code: int = 0
    message: str = ""


class Operation(PlatformModel):
    """Handle on an asynchronous deployment creation."""

    name: str
    done: bool = False
    response: Optional[Deployment] = None
    error: Optional[OperationError] = None

    def result_or_none(self) -> Optional[Deployment]:
        if not self.done or self.error is not None:
            return None
        return self.response
