"""Centralized configuration for the deployment launcher."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


def _default_oauth_dir() -> Path:
    # The spatial CLI keeps its tokens under %LOCALAPPDATA% on Windows
    base = os.getenv("LOCALAPPDATA")
    base_dir = Path(base).expanduser() if base else Path.home()
    return base_dir / ".improbable" / "oauth2"


@dataclass
class RestrictedRegionConfig:
    """Endpoint and auth settings for the region served by its own platform."""

    region_code: str = "CN"
    api_host: str = "platform.api.spatialoschina.com"
    api_port: int = 443
    token_file: str = "oauth2_refresh_token_cn-production"
    auth_code_url: str = "https://auth.spatialoschina.com/auth/v1/authcode"
    token_url: str = "https://auth.spatialoschina.com/auth/v1/token"


@dataclass
class LauncherSettings:
    """Deployment launcher configuration."""

    api_url: str = "https://platform.api.improbable.io"
    console_url: str = "https://console.improbable.io"
    oauth_dir: Path = field(default_factory=_default_oauth_dir)
    token_file: str = "oauth2_refresh_token"
    token_url: str = "https://auth.improbable.io/auth/v1/token"
    restricted: RestrictedRegionConfig = field(default_factory=RestrictedRegionConfig)
    request_timeout: float = 300.0
    poll_interval: float = 1.0
    poll_max_interval: float = 10.0

    @property
    def token_path(self) -> Path:
        return self.oauth_dir / self.token_file

    @property
    def restricted_token_path(self) -> Path:
        return self.oauth_dir / self.restricted.token_file

    @classmethod
    def from_env(cls) -> "LauncherSettings":
        """Load configuration from environment variables.

        Environment variables:
        - LAUNCHER_API_URL: Default platform API base URL
        - LAUNCHER_CONSOLE_URL: Web console base URL used in printed links
        - LAUNCHER_OAUTH_DIR: Directory holding the refresh token files
        - LAUNCHER_TOKEN_URL: Token exchange URL for the default platform
        - LAUNCHER_RESTRICTED_REGION: Region code served by the restricted platform (default: CN)
        - LAUNCHER_REQUEST_TIMEOUT: Total timeout of one API request in seconds (default: 300)
        - LAUNCHER_POLL_INTERVAL: Initial delay between operation polls (default: 1.0)
        - LAUNCHER_POLL_MAX_INTERVAL: Maximum delay between operation polls (default: 10.0)

        Returns:
            LauncherSettings initialized from environment variables.
        """
        defaults = cls()

        oauth_dir: Optional[str] = os.getenv("LAUNCHER_OAUTH_DIR")

        restricted = RestrictedRegionConfig(
            region_code=os.getenv(
                "LAUNCHER_RESTRICTED_REGION", defaults.restricted.region_code
            ),
        )

        return cls(
            api_url=os.getenv("LAUNCHER_API_URL", defaults.api_url).rstrip("/"),
            console_url=os.getenv("LAUNCHER_CONSOLE_URL", defaults.console_url).rstrip(
                "/"
            ),
            oauth_dir=Path(oauth_dir).expanduser() if oauth_dir else defaults.oauth_dir,
            token_url=os.getenv("LAUNCHER_TOKEN_URL", defaults.token_url),
            restricted=restricted,
            request_timeout=float(
                os.getenv("LAUNCHER_REQUEST_TIMEOUT", str(defaults.request_timeout))
            ),
            poll_interval=float(
                os.getenv("LAUNCHER_POLL_INTERVAL", str(defaults.poll_interval))
            ),
            poll_max_interval=float(
                os.getenv("LAUNCHER_POLL_MAX_INTERVAL", str(defaults.poll_max_interval))
            ),
        )
