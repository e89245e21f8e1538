"""
Uniform result envelope returned by every API operation.
"""

from dataclasses import dataclass

import requests

REQUEST_ID_HEADER = "X-Request-Id"


@dataclass
class APIResponse:
    """Outcome of one API operation.

    `error` is set exactly when the operation did not complete its success
    contract; callers must check it (or `ok`) explicitly.
    """

    message: str
    document_id: str = ""
    request_id: str = ""
    error: Exception | None = None
    http_response: requests.Response | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        if self.error is not None:
            return f"{self.message}: {self.error}"
        return self.message


def api_response(
    message: str,
    document_id: str = "",
    response: requests.Response | None = None,
    error: Exception | None = None,
) -> APIResponse:
    """Build an APIResponse, lifting the request id from the HTTP response."""
    request_id = ""
    if response is not None:
        request_id = response.headers.get(REQUEST_ID_HEADER, "")

    return APIResponse(
        message=message,
        document_id=document_id,
        request_id=request_id,
        error=error,
        http_response=response,
    )
