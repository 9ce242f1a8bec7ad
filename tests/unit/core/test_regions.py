"""Tests for region resolution and refresh token loading."""

import pytest

from deployment_launcher.core.credentials import (
    RefreshTokenCredential,
    get_refresh_token,
    read_refresh_token,
)
from deployment_launcher.core.exceptions import CredentialError
from deployment_launcher.core.regions import RegionResolver


@pytest.fixture
def restricted_token(settings):
    settings.restricted_token_path.write_text("cn-refresh-token\n")
    return settings.restricted_token_path


class TestRegionResolver:
    @pytest.mark.parametrize("region", ["EU", "US", "AP", "cn", ""])
    def test_unrestricted_regions_use_default_endpoint(self, settings, region):
        resolver = RegionResolver(settings)

        assert resolver.is_restricted(region) is False
        assert resolver.resolve(region) is None

    def test_unrestricted_region_never_reads_token(self, settings):
        # No token file exists; resolving EU must still succeed
        assert RegionResolver(settings).resolve("EU") is None

    def test_restricted_region(self, settings, restricted_token):
        endpoint = RegionResolver(settings).resolve("CN")

        assert endpoint.host == settings.restricted.api_host
        assert endpoint.port == 443
        assert endpoint.url == f"https://{settings.restricted.api_host}:443"
        assert endpoint.credential.refresh_token == "cn-refresh-token"
        assert endpoint.credential.token_url == settings.restricted.token_url
        assert endpoint.credential.auth_code_url == settings.restricted.auth_code_url

    def test_restricted_credential_is_read_once(self, settings, restricted_token):
        resolver = RegionResolver(settings)

        first = resolver.resolve("CN")
        restricted_token.write_text("rotated")
        second = resolver.resolve("CN")

        assert first.credential is second.credential
        assert second.credential.refresh_token == "cn-refresh-token"

    def test_close_forgets_credential(self, settings, restricted_token):
        resolver = RegionResolver(settings)
        resolver.resolve("CN")

        restricted_token.write_text("rotated")
        resolver.close()

        assert resolver.resolve("CN").credential.refresh_token == "rotated"

    def test_missing_restricted_token(self, settings):
        with pytest.raises(CredentialError, match="Unable to read refresh token"):
            RegionResolver(settings).resolve("CN")


class TestCredentials:
    def test_read_strips_whitespace(self, tmp_path):
        path = tmp_path / "token"
        path.write_text("  abc \n")

        assert read_refresh_token(path) == "abc"

    def test_read_empty_file(self, tmp_path):
        path = tmp_path / "token"
        path.write_text("\n")

        with pytest.raises(CredentialError, match="file is empty"):
            read_refresh_token(path)

    def test_env_var_wins(self, tmp_path, monkeypatch):
        path = tmp_path / "token"
        path.write_text("from-file")
        monkeypatch.setenv("LAUNCHER_REFRESH_TOKEN", "from-env")

        assert get_refresh_token(path) == "from-env"

    def test_falls_back_to_file(self, tmp_path, monkeypatch):
        path = tmp_path / "token"
        path.write_text("from-file")
        monkeypatch.delenv("LAUNCHER_REFRESH_TOKEN", raising=False)

        assert get_refresh_token(path) == "from-file"

    def test_none_when_unconfigured(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LAUNCHER_REFRESH_TOKEN", raising=False)

        assert get_refresh_token(tmp_path / "missing") is None

    def test_repr_hides_token(self):
        credential = RefreshTokenCredential("very-secret", "https://auth.test/token")

        assert "very-secret" not in repr(credential)
