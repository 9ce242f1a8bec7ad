import asyncio
import logging
from typing import Optional

from .api.platform import PlatformClient
from .models import Deployment, Operation

log = logging.getLogger(__name__)


def get_poll_delay(attempt: int, base: float, max_seconds: float) -> float:
    """Exponential delay between polls, clamped to max_seconds."""
    return min(base * (2**attempt), max_seconds)


async def wait_for_operation(
    client: PlatformClient,
    operation: Operation,
    base_delay: float = 1.0,
    max_delay: float = 10.0,
) -> Optional[Deployment]:
    """
    Block until a creation operation is done.

    There is no local timeout: the platform decides when the operation ends.
    Returns the created deployment, or None if the operation failed or
    finished without a result.
    """
    attempt = 0
    while not operation.done:
        await asyncio.sleep(get_poll_delay(attempt, base_delay, max_delay))
        operation = await client.get_operation(operation.name)
        attempt += 1

        if not operation.done and attempt % 5 == 0:
            log.info(f"Operation {operation.name} | still running")

    if operation.error is not None:
        log.error(
            f"Operation {operation.name} failed: "
            f"{operation.error.message} (code {operation.error.code})"
        )
        return None

    result = operation.result_or_none()
    if result is None:
        log.error(f"Operation {operation.name} finished without a deployment")
    return result
