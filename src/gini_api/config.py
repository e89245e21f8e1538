"""
Configuration management.

All client configuration lives here. Defaults for endpoints, API version and
authentication method are a frozen record applied by Config.verify(); they
are never mutated at runtime.

Key invariants:
- client_id and client_secret are always required
- OAuth2 needs either an auth_code or username AND password
- Validation happens before any network call
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import yaml

from .errors import ConfigValidationError


class AuthMethod(str, Enum):
    """Supported authentication strategies."""

    # Token exchange against the user center (auth code or password grant)
    OAUTH2 = "oauth2"
    # Client credentials as basic auth on every request
    BASIC_AUTH = "basic_auth"


@dataclass(frozen=True)
class Defaults:
    """Process-wide default values."""

    api_version: str = "v1"
    api: str = "https://api.gini.net"
    user_center: str = "https://user.gini.net"
    authentication: AuthMethod = AuthMethod.OAUTH2
    timeout: float = 30.0


DEFAULTS = Defaults()


@dataclass
class Endpoints:
    """Gini endpoints.

    - api: Resource API (documents, search)
    - user_center: Identity service issuing OAuth2 tokens
    """

    api: str = ""
    user_center: str = ""


@dataclass
class Config:
    """Gini API client configuration."""

    client_id: str = ""
    client_secret: str = ""
    username: str = ""
    password: str = ""
    # Pre-obtained OAuth2 authorization code (single use)
    auth_code: str = ""
    scopes: list[str] = field(default_factory=list)
    endpoints: Endpoints = field(default_factory=Endpoints)
    api_version: str = ""
    authentication: AuthMethod | None = None
    # Socket timeout per request (seconds)
    timeout: float = DEFAULTS.timeout

    def apply_defaults(self, defaults: Defaults = DEFAULTS) -> None:
        """Fill empty fields from the defaults record."""
        if not self.api_version:
            self.api_version = defaults.api_version
        if self.authentication is None:
            self.authentication = defaults.authentication
        if not self.endpoints.api:
            self.endpoints.api = defaults.api
        if not self.endpoints.user_center:
            self.endpoints.user_center = defaults.user_center

    def validate(self) -> list[str]:
        """Validate configuration completeness.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        if not self.client_id:
            errors.append("client_id is required")
        if not self.client_secret:
            errors.append("client_secret is required")

        if self.authentication == AuthMethod.OAUTH2:
            has_credentials = bool(self.username and self.password)
            if not self.auth_code and not has_credentials:
                errors.append(
                    "oauth2 requires auth_code or username and password"
                )

        if self.timeout <= 0:
            errors.append("timeout must be positive")

        return errors

    def verify(self) -> None:
        """Apply defaults and validate.

        Raises:
            ConfigValidationError: If the configuration is unusable
        """
        self.apply_defaults()
        errors = self.validate()
        if errors:
            raise ConfigValidationError(errors)


def load_config(config_path: Path) -> Config:
    """
    Load configuration from YAML file.

    Environment variables override file values:
    - GINI_CLIENT_ID
    - GINI_CLIENT_SECRET
    - GINI_USERNAME
    - GINI_PASSWORD
    - GINI_AUTH_CODE
    - GINI_API_URL
    - GINI_USER_CENTER_URL
    - GINI_API_VERSION
    - GINI_AUTHENTICATION (oauth2/basic_auth)
    """
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    endpoints_data = data.get("endpoints", {}) or {}
    endpoints = Endpoints(
        api=os.environ.get("GINI_API_URL", endpoints_data.get("api") or ""),
        user_center=os.environ.get(
            "GINI_USER_CENTER_URL", endpoints_data.get("user_center") or ""
        ),
    )

    auth_value = os.environ.get("GINI_AUTHENTICATION", data.get("authentication"))
    authentication = AuthMethod(auth_value) if auth_value else None

    timeout = data.get("timeout")
    if timeout is None:
        timeout = DEFAULTS.timeout

    scopes = data.get("scopes") or []
    if isinstance(scopes, str):
        scopes = scopes.split()

    return Config(
        client_id=os.environ.get("GINI_CLIENT_ID", data.get("client_id") or ""),
        client_secret=os.environ.get("GINI_CLIENT_SECRET", data.get("client_secret") or ""),
        username=os.environ.get("GINI_USERNAME", data.get("username") or ""),
        password=os.environ.get("GINI_PASSWORD", data.get("password") or ""),
        auth_code=os.environ.get("GINI_AUTH_CODE", data.get("auth_code") or ""),
        scopes=list(scopes),
        endpoints=endpoints,
        api_version=os.environ.get("GINI_API_VERSION", data.get("api_version") or ""),
        authentication=authentication,
        timeout=float(timeout),
    )


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = """# Gini API client configuration
#
# Environment variables (GINI_CLIENT_ID, GINI_CLIENT_SECRET, ...) override
# the values below.

client_id: "YOUR_CLIENT_ID"
client_secret: "YOUR_CLIENT_SECRET"

# oauth2: exchange auth_code or username/password for a bearer token
# basic_auth: send client credentials on every request (needs --user-identifier)
authentication: "oauth2"

username: ""
password: ""
auth_code: ""
scopes: []

endpoints:
  api: "https://api.gini.net"
  user_center: "https://user.gini.net"

api_version: "v1"
timeout: 30   # Per-request socket timeout (seconds)
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        f.write(default_config)
