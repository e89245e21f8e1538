"""Tests for configuration validation, defaults and loading."""

from pathlib import Path

import pytest

from gini_api.config import (
    DEFAULTS,
    AuthMethod,
    Config,
    Endpoints,
    create_default_config,
    load_config,
)
from gini_api.errors import ConfigValidationError


class TestConfigValidation:
    """Config.validate() / Config.verify()."""

    def test_empty_config_fails(self):
        """Client id and secret are always required."""
        with pytest.raises(ConfigValidationError) as exc_info:
            Config().verify()

        assert "client_id is required" in exc_info.value.errors
        assert "client_secret is required" in exc_info.value.errors

    @pytest.mark.parametrize(
        "client_id,client_secret",
        [("", "secret"), ("client", ""), ("", "")],
    )
    def test_missing_client_credentials_fail_for_every_method(self, client_id, client_secret):
        for method in AuthMethod:
            config = Config(
                client_id=client_id,
                client_secret=client_secret,
                auth_code="12345",
                authentication=method,
            )
            with pytest.raises(ConfigValidationError):
                config.verify()

    def test_oauth2_requires_auth_code_or_credentials(self):
        config = Config(client_id="client", client_secret="secret", authentication=AuthMethod.OAUTH2)
        with pytest.raises(ConfigValidationError):
            config.verify()

    def test_oauth2_username_alone_is_not_enough(self):
        config = Config(
            client_id="client",
            client_secret="secret",
            username="user1",
            authentication=AuthMethod.OAUTH2,
        )
        with pytest.raises(ConfigValidationError):
            config.verify()

    def test_oauth2_with_auth_code(self):
        config = Config(
            client_id="client",
            client_secret="secret",
            username="user1",
            auth_code="12345",
            authentication=AuthMethod.OAUTH2,
        )
        config.verify()

    def test_oauth2_with_username_and_password(self):
        config = Config(
            client_id="client",
            client_secret="secret",
            username="user1",
            password="secret",
            authentication=AuthMethod.OAUTH2,
        )
        assert config.validate() == []

    def test_basic_auth_needs_only_client_credentials(self):
        config = Config(client_id="client", client_secret="secret", authentication=AuthMethod.BASIC_AUTH)
        config.verify()

    def test_defaults_applied(self):
        config = Config(client_id="client", client_secret="secret", auth_code="12345")
        config.verify()

        assert config.api_version == "v1"
        assert config.authentication == AuthMethod.OAUTH2
        assert config.endpoints.api == "https://api.gini.net"
        assert config.endpoints.user_center == "https://user.gini.net"

    def test_explicit_values_not_overwritten(self):
        config = Config(
            client_id="client",
            client_secret="secret",
            api_version="v2",
            authentication=AuthMethod.BASIC_AUTH,
            endpoints=Endpoints(api="http://localhost:9000"),
        )
        config.verify()

        assert config.api_version == "v2"
        assert config.authentication == AuthMethod.BASIC_AUTH
        assert config.endpoints.api == "http://localhost:9000"
        assert config.endpoints.user_center == DEFAULTS.user_center

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_non_positive_timeout_fails(self, timeout):
        config = Config(
            client_id="client",
            client_secret="secret",
            authentication=AuthMethod.BASIC_AUTH,
            timeout=timeout,
        )

        with pytest.raises(ConfigValidationError) as exc_info:
            config.verify()

        assert "timeout must be positive" in exc_info.value.errors

    def test_defaults_record_is_immutable(self):
        with pytest.raises(AttributeError):
            DEFAULTS.api_version = "v9"


class TestLoadConfig:
    """load_config() from YAML and environment."""

    def test_missing_file_gives_empty_config(self, tmp_path: Path, monkeypatch):
        for var in ("GINI_CLIENT_ID", "GINI_CLIENT_SECRET", "GINI_AUTHENTICATION"):
            monkeypatch.delenv(var, raising=False)

        config = load_config(tmp_path / "missing.yaml")

        assert config.client_id == ""
        assert config.authentication is None

    def test_load_yaml(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("GINI_CLIENT_ID", raising=False)
        monkeypatch.delenv("GINI_AUTHENTICATION", raising=False)
        monkeypatch.delenv("GINI_API_URL", raising=False)

        path = tmp_path / "gini.yaml"
        path.write_text(
            "client_id: abc\n"
            "client_secret: xyz\n"
            "authentication: basic_auth\n"
            "scopes: [read, write]\n"
            "endpoints:\n"
            "  api: http://api.local\n"
            "timeout: 5\n"
        )

        config = load_config(path)

        assert config.client_id == "abc"
        assert config.client_secret == "xyz"
        assert config.authentication == AuthMethod.BASIC_AUTH
        assert config.scopes == ["read", "write"]
        assert config.endpoints.api == "http://api.local"
        assert config.endpoints.user_center == ""
        assert config.timeout == 5.0

    def test_environment_overrides_file(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "gini.yaml"
        path.write_text("client_id: from-file\nauthentication: oauth2\n")

        monkeypatch.setenv("GINI_CLIENT_ID", "from-env")
        monkeypatch.setenv("GINI_AUTHENTICATION", "basic_auth")

        config = load_config(path)

        assert config.client_id == "from-env"
        assert config.authentication == AuthMethod.BASIC_AUTH

    def test_default_config_roundtrip(self, tmp_path: Path, monkeypatch):
        for var in ("GINI_CLIENT_ID", "GINI_AUTHENTICATION", "GINI_API_URL", "GINI_API_VERSION"):
            monkeypatch.delenv(var, raising=False)

        path = tmp_path / "conf" / "gini.yaml"
        create_default_config(path)

        config = load_config(path)

        assert config.client_id == "YOUR_CLIENT_ID"
        assert config.authentication == AuthMethod.OAUTH2
        assert config.endpoints.api == "https://api.gini.net"
        assert config.api_version == "v1"

    def test_null_timeout_uses_default(self, tmp_path: Path):
        path = tmp_path / "gini.yaml"
        path.write_text("client_id: abc\ntimeout:\n")

        config = load_config(path)

        assert config.timeout == DEFAULTS.timeout
