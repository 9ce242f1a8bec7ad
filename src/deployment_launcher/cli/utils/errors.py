"""Operator-facing messages for platform faults."""

from ...core.exceptions import ErrorKind, PlatformError
from .output import emit

UNAUTHENTICATED_MESSAGE = "Error: unauthenticated. Please run `spatial auth login`"


def report_launch_error(
    error: PlatformError, project_name: str, assembly_name: str
) -> None:
    """Report a fault raised while launching deployments."""
    if error.kind == ErrorKind.UNAUTHENTICATED:
        emit(UNAUTHENTICATED_MESSAGE)
    elif error.kind == ErrorKind.NOT_FOUND:
        emit(
            "Unable to launch the deployment(s). This is likely because the project "
            f"'{project_name}' or assembly '{assembly_name}' doesn't exist."
        )
    elif error.kind == ErrorKind.RESOURCE_EXHAUSTED:
        emit(
            "Unable to launch the deployment(s). Cloud cluster resources exhausted, "
            f"Detail: '{error.detail}'"
        )
    elif error.kind == ErrorKind.UNKNOWN:
        emit(f"Unable to launch the deployment(s). Detail: '{error.detail}'")
    else:
        raise ValueError(f"Unhandled platform error kind: {error.kind}")


def report_platform_error(error: PlatformError) -> None:
    """Report a fault raised while stopping or listing deployments."""
    if error.kind == ErrorKind.UNAUTHENTICATED:
        emit(UNAUTHENTICATED_MESSAGE)
    elif error.kind in (
        ErrorKind.NOT_FOUND,
        ErrorKind.RESOURCE_EXHAUSTED,
        ErrorKind.UNKNOWN,
    ):
        emit(
            f"Encountered an unknown platform error ({error.kind.value}). "
            f"Detail: '{error.detail}'",
            err=True,
        )
    else:
        raise ValueError(f"Unhandled platform error kind: {error.kind}")
