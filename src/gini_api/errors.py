"""
Error types and messages shared by the Gini API client.
"""

# Messages carried by APIResponse.message on failure
ERR_OAUTH_AUTH_CODE_EXCHANGE = "authorization code exchange failed"
ERR_OAUTH_CREDENTIALS = "credential exchange failed"
ERR_OAUTH_PARAMETERS_MISSING = "missing authentication parameters"
ERR_UNKNOWN_AUTHENTICATION = "unknown authentication method"
ERR_USER_IDENTIFIER_REQUIRED = "identifier required for this authentication mode"

ERR_UPLOAD_FAILED = "upload failed"
ERR_DOCUMENT_GET = "failed to GET document object"
ERR_DOCUMENT_PARSE = "failed to parse document json"
ERR_DOCUMENT_LIST = "failed to get document list"
ERR_DOCUMENT_SEARCH = "failed to complete your search"
ERR_DOCUMENT_DELETE = "failed to delete document"
ERR_DOCUMENT_LAYOUT = "failed to get document layout"
ERR_DOCUMENT_EXTRACTIONS = "failed to get document extractions"
ERR_DOCUMENT_PROCESSED = "failed to get processed document"
ERR_DOCUMENT_FEEDBACK = "failed to submit feedback"
ERR_POLLING_ABORTED = "polling aborted"
ERR_POLLING_IN_PROGRESS = "polling already in progress"

ERR_HTTP_POST_FAILED = "failed to complete POST request"
ERR_HTTP_GET_FAILED = "failed to complete GET request"
ERR_HTTP_PUT_FAILED = "failed to complete PUT request"
ERR_HTTP_DELETE_FAILED = "failed to complete DELETE request"


class GiniError(Exception):
    """Base exception for Gini client errors."""

    pass


class ConfigValidationError(GiniError):
    """Raised when configuration validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class AuthenticationError(GiniError):
    """Token exchange failed or could not be attempted."""

    pass


class UserIdentifierRequired(GiniError):
    """Basic auth requests need an acting-user identifier."""

    def __init__(self):
        super().__init__(ERR_USER_IDENTIFIER_REQUIRED)


class GiniConnectionError(GiniError):
    """Failed to reach the Gini API."""

    pass


class DecodeError(GiniError):
    """Response body did not decode into the expected shape."""

    pass


class GiniAPIError(GiniError):
    """API answered with an unexpected status code."""

    def __init__(
        self,
        status_code: int,
        message: str,
        request_id: str = "",
        document_id: str = "",
    ):
        self.status_code = status_code
        self.message = message
        self.request_id = request_id
        self.document_id = document_id
        super().__init__(
            f"{message} (HTTP status: {status_code}, "
            f"RequestID: {request_id}, DocumentID: {document_id})"
        )

    @classmethod
    def from_response(cls, message: str, document_id: str, response) -> "GiniAPIError":
        """Build from a requests.Response, lifting the request id header."""
        return cls(
            status_code=response.status_code,
            message=message,
            request_id=response.headers.get("X-Request-Id", ""),
            document_id=document_id,
        )
