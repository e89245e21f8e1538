"""
Gini API client implementation.
"""

import logging
import time
from dataclasses import dataclass
from typing import IO
from urllib.parse import urlencode

import requests

from . import __version__
from .auth import AuthenticatedTransport, authenticate
from .config import AuthMethod, Config
from .context import Context, ContextError
from .document import DEFAULT_POLL_PAUSE, Document, DocumentSet
from .errors import (
    ERR_DOCUMENT_GET,
    ERR_DOCUMENT_LIST,
    ERR_DOCUMENT_PARSE,
    ERR_DOCUMENT_SEARCH,
    ERR_HTTP_DELETE_FAILED,
    ERR_HTTP_GET_FAILED,
    ERR_HTTP_POST_FAILED,
    ERR_HTTP_PUT_FAILED,
    ERR_UPLOAD_FAILED,
    DecodeError,
    GiniAPIError,
    GiniConnectionError,
    GiniError,
    UserIdentifierRequired,
)
from .response import APIResponse, api_response

logger = logging.getLogger(__name__)

USER_IDENTIFIER_HEADER = "X-User-Identifier"

TRANSPORT_FAILURES = {
    "GET": ERR_HTTP_GET_FAILED,
    "POST": ERR_HTTP_POST_FAILED,
    "PUT": ERR_HTTP_PUT_FAILED,
    "DELETE": ERR_HTTP_DELETE_FAILED,
}


@dataclass
class UploadOptions:
    """Upload parameters."""

    filename: str = ""
    # Document type hint (e.g. "Invoice")
    doctype: str = ""
    # Required with basic auth
    user_identifier: str = ""


@dataclass
class ListOptions:
    """Pagination for document listing."""

    limit: int = 20
    offset: int = 0
    user_identifier: str = ""


@dataclass
class SearchOptions:
    """Full-text search parameters."""

    query: str = ""
    doctype: str = ""
    limit: int = 20
    offset: int = 0
    user_identifier: str = ""


class APIClient:
    """
    Client for the Gini API.

    Features:
    - OAuth2 (auth code / password grant) or basic auth
    - Upload documents and wait for processing
    - Get, list and search documents
    - Every operation takes a Context and returns an APIResponse
    """

    def __init__(self, config: Config, session: requests.Session | None = None):
        """
        Initialize Gini client.

        Args:
            config: Client configuration; defaults are applied in place
            session: Optional requests session to send requests through

        Raises:
            ConfigValidationError: If the configuration is incomplete
            AuthenticationError: If the token exchange failed
        """
        config.verify()
        self.config = config

        transport, resp = authenticate(config, session)
        if resp.error is not None:
            raise resp.error
        self.transport: AuthenticatedTransport = transport

    @property
    def api_url(self) -> str:
        return self.config.endpoints.api.rstrip("/")

    def make_api_request(
        self,
        ctx: Context,
        verb: str,
        url: str,
        body: bytes | IO[bytes] | None = None,
        headers: dict[str, str] | None = None,
        user_identifier: str = "",
    ) -> requests.Response:
        """
        Build and send one request with the standard Gini headers.

        The status code is not checked here.

        Raises:
            ContextError: ctx already cancelled or past its deadline
            UserIdentifierRequired: basic auth without user_identifier
            GiniConnectionError: Transport failure
        """
        ctx.raise_if_done()

        headers = headers or {}
        request_headers: dict[str, str] = {}

        if "Accept" not in headers:
            request_headers["Accept"] = f"application/vnd.gini.{self.config.api_version}+json"
        request_headers["User-Agent"] = f"gini-api-python/{__version__}"

        if self.config.authentication == AuthMethod.BASIC_AUTH:
            if not user_identifier:
                raise UserIdentifierRequired()
            request_headers[USER_IDENTIFIER_HEADER] = user_identifier

        request_headers.update(headers)

        logger.debug(f"API Request: {verb} {url}")

        try:
            response = self.transport.request(
                verb,
                url,
                data=body,
                headers=request_headers,
                timeout=ctx.timeout(self.config.timeout),
            )
        except requests.exceptions.ConnectionError as e:
            raise GiniConnectionError(f"Failed to connect to {url}: {e}") from e
        except requests.exceptions.Timeout as e:
            raise GiniConnectionError(f"Request to {url} timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            raise GiniConnectionError(f"Request failed: {e}") from e

        logger.debug(f"Response status: {response.status_code}")
        return response

    def checked_request(
        self,
        ctx: Context,
        verb: str,
        url: str,
        expected_status: int,
        failure: str,
        document_id: str = "",
        body: bytes | IO[bytes] | None = None,
        headers: dict[str, str] | None = None,
        user_identifier: str = "",
    ) -> tuple[requests.Response | None, APIResponse | None]:
        """
        Send a request and compare the status with the one expected.

        Returns:
            (response, None) on success, (response or None, failure envelope)
            otherwise
        """
        try:
            response = self.make_api_request(ctx, verb, url, body, headers, user_identifier)
        except GiniError as e:
            message = TRANSPORT_FAILURES.get(verb, failure)
            if isinstance(e, (ContextError, UserIdentifierRequired)):
                message = str(e)
            logger.error(f"{verb} {url} failed: {e}")
            return None, api_response(message, document_id, error=e)

        if response.status_code != expected_status:
            error = GiniAPIError.from_response(failure, document_id, response)
            logger.error(str(error))
            return response, api_response(failure, document_id, response, error)

        return response, None

    def upload(
        self,
        ctx: Context,
        body: bytes | IO[bytes],
        options: UploadOptions | None = None,
    ) -> tuple[Document | None, APIResponse]:
        """
        Upload a document and fetch the created resource.

        timing.upload on the returned document covers the POST plus the
        initial GET.

        Args:
            ctx: Request context
            body: Document bytes or a binary file object
            options: Filename, doctype hint and user identifier
        """
        options = options or UploadOptions()
        start = time.monotonic()

        params = {}
        if options.filename:
            params["filename"] = options.filename
        if options.doctype:
            params["doctype"] = options.doctype
        url = f"{self.api_url}/documents"
        if params:
            url = f"{url}?{urlencode(params)}"

        response, failure = self.checked_request(
            ctx, "POST", url, 201, ERR_UPLOAD_FAILED,
            body=body,
            headers={"Content-Type": "application/octet-stream"},
            user_identifier=options.user_identifier,
        )
        if failure:
            return None, failure

        location = response.headers.get("Location")
        if not location:
            error = GiniAPIError.from_response(
                f"{ERR_UPLOAD_FAILED}: no Location header", "", response
            )
            return None, api_response(ERR_UPLOAD_FAILED, "", response, error)

        document, resp = self.get(ctx, location, options.user_identifier)
        if resp.error is not None:
            return None, resp

        document.timing.upload = time.monotonic() - start
        logger.info(f"Uploaded document {document.id} in {document.timing.upload:.2f}s")

        return document, api_response("upload completed", document.id, resp.http_response)

    def get(
        self,
        ctx: Context,
        url: str,
        user_identifier: str = "",
    ) -> tuple[Document | None, APIResponse]:
        """
        Fetch a document by its URL.

        Returns:
            (document, response); document is None when response.error is set
        """
        response, failure = self.checked_request(
            ctx, "GET", url, 200, ERR_DOCUMENT_GET, user_identifier=user_identifier,
        )
        if failure:
            return None, failure

        try:
            document = Document.from_api_response(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Failed to decode document from {url}: {e}")
            return None, api_response(ERR_DOCUMENT_PARSE, "", response, DecodeError(str(e)))

        document.client = self
        document.owner = user_identifier

        return document, api_response("get completed", document.id, response)

    def upload_and_wait(
        self,
        ctx: Context,
        body: bytes | IO[bytes],
        options: UploadOptions | None = None,
        pause: float = DEFAULT_POLL_PAUSE,
    ) -> tuple[Document | None, APIResponse]:
        """Upload, then poll until processing has finished or ctx ends.

        On a polling failure the document is still returned with its last
        known state.
        """
        document, resp = self.upload(ctx, body, options)
        if resp.error is not None:
            return None, resp

        return document, document.poll(ctx, pause)

    def list(
        self,
        ctx: Context,
        options: ListOptions | None = None,
    ) -> tuple[DocumentSet | None, APIResponse]:
        """List documents page by page."""
        options = options or ListOptions()
        url = f"{self.api_url}/documents?" + urlencode(
            {"limit": options.limit, "offset": options.offset}
        )
        return self._document_set(ctx, url, ERR_DOCUMENT_LIST, options.user_identifier)

    def search(
        self,
        ctx: Context,
        options: SearchOptions,
    ) -> tuple[DocumentSet | None, APIResponse]:
        """Full-text search over documents."""
        params: dict[str, str | int] = {"q": options.query}
        if options.doctype:
            params["type"] = options.doctype
        params["limit"] = options.limit
        params["offset"] = options.offset

        url = f"{self.api_url}/search?" + urlencode(params)
        return self._document_set(ctx, url, ERR_DOCUMENT_SEARCH, options.user_identifier)

    def _document_set(
        self,
        ctx: Context,
        url: str,
        failure: str,
        user_identifier: str,
    ) -> tuple[DocumentSet | None, APIResponse]:
        response, resp = self.checked_request(
            ctx, "GET", url, 200, failure, user_identifier=user_identifier,
        )
        if resp:
            return None, resp

        try:
            documents = DocumentSet.from_api_response(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            return None, api_response("decoding failed", "", response, DecodeError(str(e)))

        for document in documents.documents:
            document.client = self
            document.owner = user_identifier

        return documents, api_response("list completed", "", response)

    def close(self) -> None:
        self.transport.close()
