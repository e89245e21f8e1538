"""Test fixtures and utilities."""

import pytest
import responses

from gini_api.client import APIClient
from gini_api.config import AuthMethod, Config, Endpoints

from .fixtures import API_URL, TOKEN_URL, USER_CENTER_URL, document_json, token_json


@pytest.fixture
def sample_document() -> dict:
    """Completed document API response."""
    return document_json()


@pytest.fixture
def basic_config() -> Config:
    """Basic auth configuration against the test endpoints."""
    return Config(
        client_id="c",
        client_secret="s",
        authentication=AuthMethod.BASIC_AUTH,
        endpoints=Endpoints(api=API_URL, user_center=USER_CENTER_URL),
    )


@pytest.fixture
def oauth_config() -> Config:
    """OAuth2 password-grant configuration against the test endpoints."""
    return Config(
        client_id="c",
        client_secret="s",
        username="user1",
        password="secret",
        authentication=AuthMethod.OAUTH2,
        endpoints=Endpoints(api=API_URL, user_center=USER_CENTER_URL),
    )


@pytest.fixture
def basic_client(basic_config) -> APIClient:
    """Client using basic auth; no network call at setup."""
    return APIClient(basic_config)


@pytest.fixture
def oauth_client(oauth_config) -> APIClient:
    """Client that went through a mocked password grant."""
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, TOKEN_URL, json=token_json(), status=200)
        client = APIClient(oauth_config)
    return client
