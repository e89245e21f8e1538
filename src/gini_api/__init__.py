"""
Gini API client.

Authenticates against the Gini user center (OAuth2 token exchange or
basic auth), uploads documents, waits for server-side processing and
fetches the results (extractions, layout, processed document).
"""

__version__ = "0.1.0"

from .client import APIClient, ListOptions, SearchOptions, UploadOptions
from .config import AuthMethod, Config, Endpoints
from .context import Cancelled, Context, DeadlineExceeded
from .document import Document, DocumentSet, Links, Timing
from .errors import GiniAPIError, GiniError
from .response import APIResponse

__all__ = [
    "APIClient",
    "APIResponse",
    "AuthMethod",
    "Cancelled",
    "Config",
    "Context",
    "DeadlineExceeded",
    "Document",
    "DocumentSet",
    "Endpoints",
    "GiniAPIError",
    "GiniError",
    "Links",
    "ListOptions",
    "SearchOptions",
    "Timing",
    "UploadOptions",
]
