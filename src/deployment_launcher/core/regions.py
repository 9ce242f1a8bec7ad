"""Region code to platform endpoint resolution."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import LauncherSettings
from .credentials import RefreshTokenCredential, read_refresh_token

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegionEndpoint:
    """Alternate API endpoint and the credential it must be called with."""

    host: str
    port: int
    credential: RefreshTokenCredential

    @property
    def url(self) -> str:
        return f"https://{self.host}:{self.port}"


class RegionResolver:
    """
    Maps region codes to the platform endpoint serving them.

    Only the restricted region is served by a separate platform; every other
    region resolves to None, meaning the default endpoint and ambient
    credential. The restricted refresh token is read from disk on first use
    and kept for the lifetime of the resolver. Reading it never touches the
    network.
    """

    def __init__(self, settings: LauncherSettings):
        self.settings = settings
        self._restricted_credential: Optional[RefreshTokenCredential] = None

    def is_restricted(self, region: str) -> bool:
        return region == self.settings.restricted.region_code

    def resolve(self, region: str) -> Optional[RegionEndpoint]:
        if not self.is_restricted(region):
            return None

        restricted = self.settings.restricted
        return RegionEndpoint(
            host=restricted.api_host,
            port=restricted.api_port,
            credential=self._get_restricted_credential(),
        )

    def _get_restricted_credential(self) -> RefreshTokenCredential:
        if self._restricted_credential is None:
            path = self.settings.restricted_token_path
            log.debug(f"Reading restricted region refresh token from {path}")
            self._restricted_credential = RefreshTokenCredential(
                refresh_token=read_refresh_token(path),
                token_url=self.settings.restricted.token_url,
                auth_code_url=self.settings.restricted.auth_code_url,
            )
        return self._restricted_credential

    def close(self) -> None:
        """Forget the cached restricted credential."""
        self._restricted_credential = None
