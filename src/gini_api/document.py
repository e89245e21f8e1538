"""
Gini document and its sub-resources.

A Document is returned by APIClient.get/upload/list and stays bound to the
client that fetched it, so document-level calls (poll, delete, extractions,
...) go through the same authenticated transport and acting-user identifier.
"""

import json
import logging
import queue
import threading
import time
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any

from .context import Context, ContextError
from .errors import (
    ERR_DOCUMENT_DELETE,
    ERR_DOCUMENT_EXTRACTIONS,
    ERR_DOCUMENT_FEEDBACK,
    ERR_DOCUMENT_LAYOUT,
    ERR_DOCUMENT_PROCESSED,
    ERR_HTTP_GET_FAILED,
    ERR_POLLING_ABORTED,
    ERR_POLLING_IN_PROGRESS,
    DecodeError,
    GiniError,
)
from .extractions import Extractions, Layout
from .response import APIResponse, api_response

if TYPE_CHECKING:
    from .client import APIClient

logger = logging.getLogger(__name__)

PROGRESS_PENDING = "PENDING"
PROGRESS_COMPLETED = "COMPLETED"
PROGRESS_ERROR = "ERROR"
TERMINAL_PROGRESS = frozenset({PROGRESS_COMPLETED, PROGRESS_ERROR})

DEFAULT_POLL_PAUSE = 0.5

INCUBATOR_ACCEPT = "application/vnd.gini.incubator+json"
OCTET_STREAM = "application/octet-stream"


@dataclass
class Timing:
    """Upload and processing durations in seconds."""

    upload: float = 0.0
    processing: float = 0.0

    def total(self) -> float:
        return self.upload + self.processing


@dataclass
class Links:
    """Links to a document's resources."""

    document: str = ""
    extractions: str = ""
    layout: str = ""
    processed: str = ""

    @classmethod
    def from_api_response(cls, data: dict) -> "Links":
        return cls(
            document=data.get("document", ""),
            extractions=data.get("extractions", ""),
            layout=data.get("layout", ""),
            processed=data.get("processed", ""),
        )


@dataclass
class Page:
    """A document page with its rendered image URLs by size."""

    page_number: int
    images: dict[str, str] = field(default_factory=dict)


@dataclass
class Document:
    """Gini document representation."""

    id: str
    links: Links = field(default_factory=Links)
    progress: str = ""
    name: str = ""
    creation_date: int = 0
    origin: str = ""
    page_count: int = 0
    pages: list[Page] = field(default_factory=list)
    source_classification: str = ""

    # Local state, not part of the API payload
    owner: str = ""
    timing: Timing = field(default_factory=Timing)
    client: "APIClient | None" = field(default=None, repr=False, compare=False)
    _poll_lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    @classmethod
    def from_api_response(cls, data: dict) -> "Document":
        """Create from a Gini document JSON object."""
        if not isinstance(data, dict):
            raise TypeError(f"expected JSON object, got {type(data).__name__}")

        pages = [
            Page(page_number=p.get("pageNumber", 0), images=p.get("images") or {})
            for p in data.get("pages") or []
        ]

        return cls(
            id=data["id"],
            links=Links.from_api_response(data.get("_links") or {}),
            progress=data.get("progress", ""),
            name=data.get("name", ""),
            creation_date=data.get("creationDate", 0),
            origin=data.get("origin", ""),
            page_count=data.get("pageCount", 0),
            pages=pages,
            source_classification=data.get("sourceClassification", ""),
        )

    def __str__(self) -> str:
        return self.id

    def is_ready(self) -> bool:
        """Processing finished, successfully or not."""
        return self.progress in TERMINAL_PROGRESS

    def _replace_with(self, other: "Document") -> None:
        """Take over every field of `other`, keeping our own poll lock."""
        for f in fields(self):
            if f.name != "_poll_lock":
                setattr(self, f.name, getattr(other, f.name))

    def _unbound(self) -> APIResponse | None:
        if self.client is None:
            message = "document is not bound to a client"
            return api_response(message, self.id, error=GiniError(message))
        return None

    def poll(self, ctx: Context, pause: float = DEFAULT_POLL_PAUSE) -> APIResponse:
        """
        Wait until processing has finished (COMPLETED or ERROR).

        A worker thread re-fetches the document every `pause` seconds and
        hands the terminal version back. On success this document is
        replaced in place and timing.processing is set. If `ctx` ends first
        the document keeps its last known state.

        Without a deadline on `ctx` this polls for as long as the server
        reports a non-terminal progress.
        """
        unbound = self._unbound()
        if unbound:
            return unbound

        if not self._poll_lock.acquire(blocking=False):
            return api_response(
                ERR_POLLING_IN_PROGRESS, self.id, error=GiniError(ERR_POLLING_IN_PROGRESS)
            )
        try:
            return self._poll(ctx, pause)
        finally:
            self._poll_lock.release()

    def _poll(self, ctx: Context, pause: float) -> APIResponse:
        # fetched copies carry no upload duration
        upload_duration = self.timing.upload
        start = time.monotonic()

        handoff: queue.Queue = queue.Queue(maxsize=1)
        wake = threading.Event()
        worker = threading.Thread(
            target=self._poll_worker,
            args=(ctx, pause, handoff, wake),
            name=f"gini-poll-{self.id}",
            daemon=True,
        )

        ctx.add_done_callback(wake.set)
        try:
            worker.start()
            while True:
                wake.wait(ctx.remaining())
                try:
                    fresh, resp = handoff.get_nowait()
                    break
                except queue.Empty:
                    pass

                err = ctx.error
                if err is not None:
                    logger.warning(f"Polling of document {self.id} aborted: {err}")
                    return api_response(ERR_POLLING_ABORTED, self.id, error=err)
        finally:
            ctx.remove_done_callback(wake.set)

        if resp.error is not None:
            err = ctx.error
            if err is not None or isinstance(resp.error, ContextError):
                err = err or resp.error
                logger.warning(f"Polling of document {self.id} aborted: {err}")
                return api_response(ERR_POLLING_ABORTED, self.id, error=err)
            logger.error(f"Polling of document {self.id} failed: {resp}")
            return resp

        self._replace_with(fresh)
        self.timing.upload = upload_duration
        self.timing.processing = time.monotonic() - start

        logger.info(
            f"Document {self.id} finished with progress {self.progress} "
            f"after {self.timing.processing:.2f}s"
        )
        return api_response("polling completed", self.id, resp.http_response)

    def _poll_worker(
        self,
        ctx: Context,
        pause: float,
        handoff: queue.Queue,
        wake: threading.Event,
    ) -> None:
        """Fetch until terminal progress, an error, or the context ends."""
        attempt = 0
        while not ctx.done:
            attempt += 1
            try:
                fresh, resp = self.client.get(ctx, self.links.document, self.owner)
            except Exception as e:
                # the caller is blocked on the handoff
                handoff.put_nowait((None, api_response(ERR_HTTP_GET_FAILED, self.id, error=e)))
                wake.set()
                return

            if resp.error is not None or fresh.is_ready():
                handoff.put_nowait((fresh, resp))
                wake.set()
                return

            logger.debug(
                f"Document {self.id} still {fresh.progress} (attempt {attempt}), "
                f"sleeping {pause}s"
            )
            if ctx.wait(pause):
                return

    def update(self, ctx: Context) -> APIResponse:
        """Re-fetch the document and replace this instance in place."""
        unbound = self._unbound()
        if unbound:
            return unbound

        fresh, resp = self.client.get(ctx, self.links.document, self.owner)
        if resp.error is not None:
            return resp

        timing = self.timing
        self._replace_with(fresh)
        self.timing = timing

        return api_response("update completed", self.id, resp.http_response)

    def delete(self, ctx: Context) -> APIResponse:
        """Delete the document (expects 204 No Content)."""
        unbound = self._unbound()
        if unbound:
            return unbound

        response, failure = self.client.checked_request(
            ctx, "DELETE", self.links.document, 204, ERR_DOCUMENT_DELETE,
            document_id=self.id, user_identifier=self.owner,
        )
        if failure:
            return failure

        logger.info(f"Deleted document {self.id}")
        return api_response("delete completed", self.id, response)

    def get_layout(self, ctx: Context) -> tuple[Layout | None, APIResponse]:
        """Fetch the document layout."""
        unbound = self._unbound()
        if unbound:
            return None, unbound

        response, failure = self.client.checked_request(
            ctx, "GET", self.links.layout, 200, ERR_DOCUMENT_LAYOUT,
            document_id=self.id, user_identifier=self.owner,
        )
        if failure:
            return None, failure

        try:
            layout = Layout.from_api_response(response.json())
        except (ValueError, TypeError) as e:
            return None, api_response("decoding failed", self.id, response, DecodeError(str(e)))

        return layout, api_response("layout completed", self.id, response)

    def get_extractions(
        self,
        ctx: Context,
        incubator: bool = False,
    ) -> tuple[Extractions | None, APIResponse]:
        """
        Fetch the document extractions.

        Args:
            ctx: Request context
            incubator: Ask for experimental extractions as well
        """
        unbound = self._unbound()
        if unbound:
            return None, unbound

        headers = {"Accept": INCUBATOR_ACCEPT} if incubator else None
        response, failure = self.client.checked_request(
            ctx, "GET", self.links.extractions, 200, ERR_DOCUMENT_EXTRACTIONS,
            document_id=self.id, headers=headers, user_identifier=self.owner,
        )
        if failure:
            return None, failure

        try:
            extractions = Extractions.from_api_response(response.json())
        except (ValueError, TypeError, AttributeError) as e:
            return None, api_response("decoding failed", self.id, response, DecodeError(str(e)))

        return extractions, api_response("extractions completed", self.id, response)

    def get_processed(self, ctx: Context) -> tuple[bytes | None, APIResponse]:
        """Download the processed (rectified, optimized) document."""
        unbound = self._unbound()
        if unbound:
            return None, unbound

        response, failure = self.client.checked_request(
            ctx, "GET", self.links.processed, 200, ERR_DOCUMENT_PROCESSED,
            document_id=self.id, headers={"Accept": OCTET_STREAM},
            user_identifier=self.owner,
        )
        if failure:
            return None, failure

        return response.content, api_response("processed completed", self.id, response)

    def submit_feedback(
        self,
        ctx: Context,
        feedback: dict[str, dict[str, Any]],
    ) -> APIResponse:
        """
        Send corrected extraction values back to Gini.

        Args:
            ctx: Request context
            feedback: Extraction name -> {"entity": ..., "value": ...}
        """
        unbound = self._unbound()
        if unbound:
            return unbound

        try:
            body = json.dumps({"feedback": feedback})
        except (TypeError, ValueError) as e:
            return api_response("encoding failed", self.id, error=DecodeError(str(e)))

        response, failure = self.client.checked_request(
            ctx, "PUT", self.links.extractions, 204, ERR_DOCUMENT_FEEDBACK,
            document_id=self.id, body=body.encode("utf-8"),
            headers={"Content-Type": "application/json"},
            user_identifier=self.owner,
        )
        if failure:
            return failure

        return api_response("feedback completed", self.id, response)


@dataclass
class DocumentSet:
    """A page of documents plus the total number available."""

    total_count: int = 0
    documents: list[Document] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: dict) -> "DocumentSet":
        if not isinstance(data, dict):
            raise TypeError(f"expected JSON object, got {type(data).__name__}")
        return cls(
            total_count=data.get("totalCount", 0),
            documents=[Document.from_api_response(d) for d in data.get("documents") or []],
        )
