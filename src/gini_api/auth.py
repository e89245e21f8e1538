"""
Authentication strategies.

Turns a Config into an AuthenticatedTransport:
- OAUTH2: exchange an auth code or username/password at the user center
  for a bearer token (once, at setup)
- BASIC_AUTH: send client credentials as basic auth on every request
  (no network call at setup)

Dispatch is a table keyed by AuthMethod.
"""

import logging
from typing import Callable

import requests
from requests.auth import AuthBase, HTTPBasicAuth

from .config import AuthMethod, Config
from .errors import (
    ERR_OAUTH_AUTH_CODE_EXCHANGE,
    ERR_OAUTH_CREDENTIALS,
    ERR_OAUTH_PARAMETERS_MISSING,
    ERR_UNKNOWN_AUTHENTICATION,
    AuthenticationError,
)
from .response import APIResponse, api_response

logger = logging.getLogger(__name__)

TOKEN_PATH = "/oauth/token"


class BearerTokenAuth(AuthBase):
    """Attach an OAuth2 access token to every request."""

    def __init__(self, token: str):
        self.token = token

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        r.headers["Authorization"] = f"Bearer {self.token}"
        return r


class AuthenticatedTransport:
    """
    Wraps a requests.Session and injects credentials per request.

    The inner session is owned by the transport; a plain Session is created
    when none is given. Transport failures are passed through unchanged and
    nothing is retried here.
    """

    def __init__(
        self,
        config: Config,
        auth: AuthBase,
        session: requests.Session | None = None,
    ):
        self.config = config
        self.auth = auth
        self.session = session if session is not None else requests.Session()

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        kwargs["auth"] = self.auth
        return self.session.request(method=method, url=url, **kwargs)

    def close(self) -> None:
        self.session.close()


def exchange_token(
    config: Config,
    grant: dict[str, str],
    session: requests.Session,
) -> str:
    """
    POST a grant to the user center's token endpoint.

    Client credentials travel as basic auth, scopes space-separated.

    Returns:
        The access token

    Raises:
        requests.RequestException: Transport failure
        AuthenticationError: Non-200 answer or no access_token in the body
    """
    url = f"{config.endpoints.user_center.rstrip('/')}{TOKEN_PATH}"
    data = dict(grant)
    if config.scopes:
        data["scope"] = " ".join(config.scopes)

    logger.debug(f"Token exchange: POST {url} (grant_type={grant['grant_type']})")

    response = session.post(
        url,
        data=data,
        auth=(config.client_id, config.client_secret),
        headers={"Accept": "application/json"},
        timeout=config.timeout,
    )

    if response.status_code != 200:
        raise AuthenticationError(
            f"token endpoint returned {response.status_code}: {response.text}"
        )

    try:
        token = response.json().get("access_token")
    except ValueError as e:
        raise AuthenticationError(f"invalid token response: {e}") from e

    if not token:
        raise AuthenticationError("token response carries no access_token")

    return token


def authenticate_oauth2(
    config: Config,
    session: requests.Session | None = None,
) -> tuple[AuthenticatedTransport | None, APIResponse]:
    """Exchange auth code or user credentials for a bearer transport."""
    session = session if session is not None else requests.Session()

    if config.auth_code:
        grant = {"grant_type": "authorization_code", "code": config.auth_code}
        failure = ERR_OAUTH_AUTH_CODE_EXCHANGE
        success = "auth code exchange succeeded"
    elif config.username and config.password:
        grant = {
            "grant_type": "password",
            "username": config.username,
            "password": config.password,
        }
        failure = ERR_OAUTH_CREDENTIALS
        success = "username/password auth succeeded"
    else:
        return None, api_response(
            ERR_OAUTH_PARAMETERS_MISSING,
            error=AuthenticationError(ERR_OAUTH_PARAMETERS_MISSING),
        )

    # No retry: an auth code is single-use
    try:
        token = exchange_token(config, grant, session)
    except (requests.RequestException, AuthenticationError) as e:
        logger.error(f"{failure}: {e}")
        return None, api_response(failure, error=AuthenticationError(f"{failure}: {e}"))

    logger.info(success)
    return AuthenticatedTransport(config, BearerTokenAuth(token), session), api_response(success)


def authenticate_basic_auth(
    config: Config,
    session: requests.Session | None = None,
) -> tuple[AuthenticatedTransport | None, APIResponse]:
    """Basic auth transport; credentials are attached lazily per request."""
    auth = HTTPBasicAuth(config.client_id, config.client_secret)
    return AuthenticatedTransport(config, auth, session), api_response("basic auth")


AUTH_STRATEGIES: dict[
    AuthMethod,
    Callable[[Config, requests.Session | None], tuple[AuthenticatedTransport | None, APIResponse]],
] = {
    AuthMethod.OAUTH2: authenticate_oauth2,
    AuthMethod.BASIC_AUTH: authenticate_basic_auth,
}


def authenticate(
    config: Config,
    session: requests.Session | None = None,
) -> tuple[AuthenticatedTransport | None, APIResponse]:
    """
    Build the authenticated transport for config.authentication.

    Returns:
        (transport, response): exactly one of transport or response.error
        is set
    """
    strategy = AUTH_STRATEGIES.get(config.authentication)
    if strategy is None:
        message = f"{ERR_UNKNOWN_AUTHENTICATION}: {config.authentication!r}"
        return None, api_response(
            ERR_UNKNOWN_AUTHENTICATION,
            error=AuthenticationError(message),
        )
    return strategy(config, session)
