"""
Direct HTTP/JSON communication with the deployment platform API.
Covers the deployment, snapshot and player auth services.
"""

import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import aiohttp

from ...config import LauncherSettings
from ..constants import (
    DEV_AUTH_TOKEN_DESCRIPTION,
    DEV_AUTH_TOKEN_LIFETIME,
    LIST_PAGE_SIZE,
)
from ..credentials import RefreshTokenCredential, get_refresh_token
from ..exceptions import ErrorKind, PlatformError
from ..models import (
    Deployment,
    DevelopmentAuthenticationToken,
    Operation,
    Snapshot,
)
from ..regions import RegionEndpoint

log = logging.getLogger(__name__)

DEPLOYMENT_API = "/deployment/v1alpha1"
SNAPSHOT_API = "/snapshot/v1alpha1"
PLAYER_AUTH_API = "/playerauth/v2alpha1"


def _segment(value: str) -> str:
    return quote(value, safe="")


def raise_for_error(http_status: int, response_data: Any) -> None:
    """Raise a PlatformError for an error response, classified by RPC status."""
    if http_status < 400:
        return

    error = response_data.get("error") if isinstance(response_data, dict) else None
    if isinstance(error, dict):
        status = error.get("status")
        detail = error.get("message", "")
    else:
        status = None
        detail = str(response_data) if response_data else ""

    raise PlatformError(ErrorKind.from_status(status, http_status), detail)


async def read_body(response: aiohttp.ClientResponse) -> Any:
    """Decoded JSON body, the raw text when it is not JSON, or None when empty.

    Gateways answer some faults with HTML or plain text bodies.
    """
    text = await response.text()
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


class PlatformClient:
    """
    Platform API client.
    One client talks to one endpoint: the default one, or the alternate
    endpoint a region resolves to.
    """

    def __init__(
        self,
        settings: LauncherSettings,
        endpoint: Optional[RegionEndpoint] = None,
    ):
        self.settings = settings
        if endpoint is not None:
            self.base_url = endpoint.url
            self.credential: Optional[RefreshTokenCredential] = endpoint.credential
        else:
            self.base_url = settings.api_url
            refresh_token = get_refresh_token(settings.token_path)
            self.credential = (
                RefreshTokenCredential(refresh_token, settings.token_url)
                if refresh_token
                else None
            )

        self.session: Optional[aiohttp.ClientSession] = None
        self._access_token: Optional[str] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create an aiohttp session."""
        if self.session is None or self.session.closed:
            timeout = aiohttp.ClientTimeout(total=self.settings.request_timeout)
            self.session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"Content-Type": "application/json"},
            )
        return self.session

    async def _get_access_token(self) -> Optional[str]:
        """Exchange the refresh token for an access token, once per client."""
        if self.credential is None:
            # The platform answers UNAUTHENTICATED, which is reported to the operator
            log.debug("No refresh token configured, calling the API anonymously")
            return None

        if self._access_token is None:
            session = await self._get_session()
            data = {
                "grant_type": "refresh_token",
                "refresh_token": self.credential.refresh_token,
            }
            try:
                async with session.post(
                    self.credential.token_url,
                    data=data,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                ) as response:
                    response_data = await read_body(response)
                    exchanged = isinstance(response_data, dict) and (
                        "access_token" in response_data
                    )
                    if response.status >= 400 or not exchanged:
                        raise PlatformError(
                            ErrorKind.UNAUTHENTICATED,
                            f"token exchange failed with status {response.status}",
                        )
            except aiohttp.ClientError as e:
                log.error(f"HTTP client error: {e}")
                raise PlatformError(ErrorKind.UNKNOWN, f"HTTP request failed: {e}")

            self._access_token = response_data["access_token"]
        return self._access_token

    async def _execute(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Execute an API request and return the decoded JSON body."""
        session = await self._get_session()
        url = f"{self.base_url}{path}"

        headers = {}
        access_token = await self._get_access_token()
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        log.debug(f"API Request: {method} {url}")
        log.debug(f"API Data: {json.dumps(data, indent=2) if data else 'None'}")

        try:
            async with session.request(
                method, url, json=data, params=params, headers=headers
            ) as response:
                response_data = await read_body(response)

                log.debug(f"API Response Status: {response.status}")
                log.debug(f"API Response: {response_data!r}")

                raise_for_error(response.status, response_data)
                if response_data is None:
                    return {}
                if not isinstance(response_data, dict):
                    raise PlatformError(
                        ErrorKind.UNKNOWN,
                        f"Unexpected non-JSON response from {url}: {str(response_data)[:200]}",
                    )
                return response_data

        except aiohttp.ClientError as e:
            log.error(f"HTTP client error: {e}")
            raise PlatformError(ErrorKind.UNKNOWN, f"HTTP request failed: {e}")

    # Deployment service

    async def create_deployment(self, deployment: Deployment) -> Operation:
        """Submit a deployment for creation. Returns the long-running operation."""
        log.debug(f"Creating deployment: {deployment.name}")

        result = await self._execute(
            "POST",
            f"{DEPLOYMENT_API}/projects/{_segment(deployment.project_name)}/deployments",
            deployment.to_payload(),
        )
        return Operation.model_validate(result)

    async def get_operation(self, name: str) -> Operation:
        result = await self._execute(
            "GET", f"{DEPLOYMENT_API}/operations/{_segment(name)}"
        )
        return Operation.model_validate(result)

    async def list_deployments(self, project_name: str) -> List[Deployment]:
        """
        List all deployments of a project that are not stopped.
        Follows page tokens until the listing is exhausted.
        """
        log.debug(f"Listing deployments of project {project_name}")

        deployments: List[Deployment] = []
        page_token: Optional[str] = None
        while True:
            params = {
                "view": "BASIC",
                "deploymentStoppedStatusFilter": "NOT_STOPPED_DEPLOYMENTS",
                "pageSize": str(LIST_PAGE_SIZE),
            }
            if page_token:
                params["pageToken"] = page_token

            result = await self._execute(
                "GET",
                f"{DEPLOYMENT_API}/projects/{_segment(project_name)}/deployments",
                params=params,
            )
            deployments.extend(
                Deployment.model_validate(item)
                for item in result.get("deployments", [])
            )

            page_token = result.get("nextPageToken")
            if not page_token:
                break

        log.debug(f"Listed {len(deployments)} deployments")
        return deployments

    async def stop_deployment(self, project_name: str, deployment_id: str) -> None:
        log.debug(f"Stopping deployment: {deployment_id}")
        await self._execute(
            "POST",
            f"{DEPLOYMENT_API}/projects/{_segment(project_name)}"
            f"/deployments/{_segment(deployment_id)}:stop",
            {},
        )

    async def update_deployment(self, deployment: Deployment) -> Deployment:
        """Apply a full deployment record to a running deployment."""
        if not deployment.id:
            raise PlatformError(
                ErrorKind.UNKNOWN, f"Deployment {deployment.name} has no id to update"
            )

        result = await self._execute(
            "PATCH",
            f"{DEPLOYMENT_API}/projects/{_segment(deployment.project_name)}"
            f"/deployments/{_segment(deployment.id)}",
            deployment.to_payload(),
        )
        return Deployment.model_validate(result) if result else deployment

    # Snapshot service

    async def upload_snapshot(self, snapshot: Snapshot) -> tuple[Snapshot, str]:
        """Register a pending snapshot. Returns the stored record and its upload URL."""
        result = await self._execute(
            "POST",
            f"{SNAPSHOT_API}/projects/{_segment(snapshot.project_name)}"
            f"/deployments/{_segment(snapshot.deployment_name)}/snapshots:upload",
            {"snapshot": snapshot.to_payload()},
        )
        if "uploadUrl" not in result or "snapshot" not in result:
            raise PlatformError(
                ErrorKind.UNKNOWN, "Unexpected snapshot upload response structure"
            )
        return Snapshot.model_validate(result.get("snapshot", result)), result["uploadUrl"]

    async def confirm_upload(
        self, project_name: str, deployment_name: str, snapshot_id: str
    ) -> Snapshot:
        result = await self._execute(
            "POST",
            f"{SNAPSHOT_API}/projects/{_segment(project_name)}"
            f"/deployments/{_segment(deployment_name)}"
            f"/snapshots/{_segment(snapshot_id)}:confirmUpload",
            {},
        )
        return Snapshot.model_validate(result.get("snapshot", result))

    # Player auth service

    async def create_development_authentication_token(
        self, project_name: str
    ) -> DevelopmentAuthenticationToken:
        lifetime = int(DEV_AUTH_TOKEN_LIFETIME.total_seconds())
        result = await self._execute(
            "POST",
            f"{PLAYER_AUTH_API}/projects/{_segment(project_name)}"
            "/developmentAuthenticationTokens",
            {
                "description": DEV_AUTH_TOKEN_DESCRIPTION,
                "lifetime": f"{lifetime}s",
                "projectName": project_name,
            },
        )
        return DevelopmentAuthenticationToken.model_validate(
            result.get("developmentAuthenticationToken", result)
        )

    async def close(self):
        """Close the HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
