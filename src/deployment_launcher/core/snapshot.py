"""Snapshot upload: register, transfer, confirm."""

import asyncio
import base64
import hashlib
import logging
from pathlib import Path
from typing import Dict, Union

import requests

from .api.platform import PlatformClient
from .constants import SERVER_SIDE_ENCRYPTION_HEADER, SERVER_SIDE_ENCRYPTION_VALUE
from .exceptions import SnapshotNotFoundError, SnapshotUploadError
from .models import Snapshot

log = logging.getLogger(__name__)


def compute_checksum(content: bytes) -> str:
    """Base64-encoded MD5 digest, as expected by the Content-MD5 header."""
    return base64.b64encode(hashlib.md5(content).digest()).decode("ascii")


def read_snapshot(path: Union[str, Path]) -> bytes:
    path = Path(path)
    try:
        content = path.read_bytes()
    except OSError as e:
        raise SnapshotNotFoundError(path) from e

    if not content:
        raise SnapshotNotFoundError(path)
    return content


def build_upload_headers(snapshot: Snapshot, encrypted: bool) -> Dict[str, str]:
    headers = {
        "Content-MD5": snapshot.checksum,
        "Content-Length": str(snapshot.size),
    }
    if encrypted:
        headers[SERVER_SIDE_ENCRYPTION_HEADER] = SERVER_SIDE_ENCRYPTION_VALUE
    return headers


async def upload_snapshot(
    client: PlatformClient,
    snapshot_path: Union[str, Path],
    project_name: str,
    deployment_name: str,
    encrypted: bool = False,
) -> str:
    """
    Upload a snapshot file and return the id of the confirmed snapshot.

    The file is read before anything is sent, so a missing or empty snapshot
    never reaches the platform. `encrypted` requests server-side encryption
    from the upload target, which the restricted region requires.
    """
    log.info(f"Uploading {snapshot_path} to project {project_name}")
    content = read_snapshot(snapshot_path)

    pending = Snapshot(
        projectName=project_name,
        deploymentName=deployment_name,
        checksum=compute_checksum(content),
        size=len(content),
    )
    snapshot, upload_url = await client.upload_snapshot(pending)
    snapshot.checksum = snapshot.checksum or pending.checksum
    snapshot.size = snapshot.size or pending.size

    headers = build_upload_headers(snapshot, encrypted)
    try:
        resp = await asyncio.to_thread(
            requests.put, upload_url, data=content, headers=headers
        )
        resp.raise_for_status()
    except requests.RequestException as e:
        raise SnapshotUploadError(f"Snapshot upload failed: {e}") from e

    confirmed = await client.confirm_upload(
        snapshot.project_name, snapshot.deployment_name, snapshot.id
    )
    log.debug(f"Confirmed snapshot {confirmed.id}")
    return confirmed.id
