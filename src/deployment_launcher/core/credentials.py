from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .exceptions import CredentialError


@dataclass(frozen=True)
class RefreshTokenCredential:
    """OAuth refresh token plus the URLs used to exchange it."""

    refresh_token: str
    token_url: str
    auth_code_url: Optional[str] = None

    def __repr__(self) -> str:
        return f"RefreshTokenCredential(token_url={self.token_url!r})"


def read_refresh_token(path: Path) -> str:
    try:
        token = path.read_text(encoding="utf-8").strip()
    except OSError as e:
        raise CredentialError(path, e.strerror or str(e)) from e

    if not token:
        raise CredentialError(path, "file is empty")
    return token


def get_refresh_token(path: Path) -> Optional[str]:
    """Return the ambient refresh token, or None when none is configured.

    LAUNCHER_REFRESH_TOKEN wins over the token file written by `spatial auth login`.
    """
    token = os.getenv("LAUNCHER_REFRESH_TOKEN")
    if token and token.strip():
        return token.strip()

    try:
        return read_refresh_token(path)
    except CredentialError:
        return None
