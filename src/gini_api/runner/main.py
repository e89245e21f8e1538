"""
CLI main entry point.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from ..client import APIClient, ListOptions, SearchOptions, UploadOptions
from ..config import Config, create_default_config, load_config
from ..context import Context
from ..document import DEFAULT_POLL_PAUSE, Document, DocumentSet
from ..errors import GiniError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _add_user_identifier(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-u",
        "--user-identifier",
        type=str,
        default="",
        help="Acting user identifier (required with basic auth)",
    )


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="gini-api",
        description="Upload documents to the Gini API and fetch extractions",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("gini.yaml"),
        help="Path to config file (default: gini.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=60.0,
        help="Overall deadline for the command in seconds (default: 60)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # init command
    subparsers.add_parser("init", help="Write a default config file")

    # upload command
    upload_parser = subparsers.add_parser("upload", help="Upload a document")
    upload_parser.add_argument("file", type=Path, help="Document to upload")
    upload_parser.add_argument(
        "--doctype",
        type=str,
        default="",
        help="Document type hint (e.g. Invoice)",
    )
    upload_parser.add_argument(
        "--pause",
        type=float,
        default=DEFAULT_POLL_PAUSE,
        help=f"Seconds between progress checks (default: {DEFAULT_POLL_PAUSE})",
    )
    upload_parser.add_argument(
        "--no-wait",
        dest="wait",
        action="store_false",
        help="Return right after the upload instead of waiting for processing",
    )
    _add_user_identifier(upload_parser)

    # get command
    get_parser = subparsers.add_parser("get", help="Show a document")
    get_parser.add_argument("url", type=str, help="Document URL")
    _add_user_identifier(get_parser)

    # list command
    list_parser = subparsers.add_parser("list", help="List documents")
    list_parser.add_argument("--limit", type=int, default=20, help="Page size (default: 20)")
    list_parser.add_argument("--offset", type=int, default=0, help="Offset (default: 0)")
    _add_user_identifier(list_parser)

    # search command
    search_parser = subparsers.add_parser("search", help="Full-text search")
    search_parser.add_argument("query", type=str, help="Search terms")
    search_parser.add_argument("--type", dest="doctype", type=str, default="", help="Document type")
    search_parser.add_argument("--limit", type=int, default=20, help="Page size (default: 20)")
    search_parser.add_argument("--offset", type=int, default=0, help="Offset (default: 0)")
    _add_user_identifier(search_parser)

    # extractions command
    extractions_parser = subparsers.add_parser(
        "extractions", help="Print the extractions of a document"
    )
    extractions_parser.add_argument("url", type=str, help="Document URL")
    extractions_parser.add_argument(
        "--incubator",
        action="store_true",
        help="Include experimental (incubator) extractions",
    )
    _add_user_identifier(extractions_parser)

    # delete command
    delete_parser = subparsers.add_parser("delete", help="Delete a document")
    delete_parser.add_argument("url", type=str, help="Document URL")
    _add_user_identifier(delete_parser)

    return parser


def _print_document(doc: Document) -> None:
    print(f"  📄 [{doc.id}] {doc.name or '-'}  progress={doc.progress}")


def _print_document_set(documents: DocumentSet) -> None:
    for doc in documents.documents:
        _print_document(doc)
    print(f"\n✓ {len(documents.documents)} of {documents.total_count} document(s)")


def cmd_init(config_path: Path) -> int:
    """Write a default configuration file."""
    if config_path.exists():
        print(f"❌ {config_path} already exists")
        return 1
    create_default_config(config_path)
    print(f"✓ Wrote {config_path}")
    return 0


def cmd_upload(
    client: APIClient,
    ctx: Context,
    file: Path,
    doctype: str,
    user_identifier: str,
    wait: bool,
    pause: float,
) -> int:
    """Upload a document, optionally waiting for processing."""
    print(f"📤 Uploading {file}...")

    options = UploadOptions(filename=file.name, doctype=doctype, user_identifier=user_identifier)
    body = file.read_bytes()
    if wait:
        doc, resp = client.upload_and_wait(ctx, body, options, pause)
    else:
        doc, resp = client.upload(ctx, body, options)

    if resp.error is not None:
        print(f"❌ {resp}")
        return 1

    _print_document(doc)
    print(f"  Upload:     {doc.timing.upload:.2f}s")
    if wait:
        print(f"  Processing: {doc.timing.processing:.2f}s")
        print(f"  Total:      {doc.timing.total():.2f}s")
    print(f"  URL:        {doc.links.document}")
    return 0


def cmd_get(client: APIClient, ctx: Context, url: str, user_identifier: str) -> int:
    """Show a single document."""
    doc, resp = client.get(ctx, url, user_identifier)
    if resp.error is not None:
        print(f"❌ {resp}")
        return 1

    _print_document(doc)
    print(f"  Pages: {doc.page_count}")
    print(f"  Classification: {doc.source_classification or '-'}")
    return 0


def cmd_list(client: APIClient, ctx: Context, options: ListOptions) -> int:
    """List documents."""
    documents, resp = client.list(ctx, options)
    if resp.error is not None:
        print(f"❌ {resp}")
        return 1

    _print_document_set(documents)
    return 0


def cmd_search(client: APIClient, ctx: Context, options: SearchOptions) -> int:
    """Search documents."""
    print(f"🔍 Searching for '{options.query}'...")
    documents, resp = client.search(ctx, options)
    if resp.error is not None:
        print(f"❌ {resp}")
        return 1

    _print_document_set(documents)
    return 0


def cmd_extractions(
    client: APIClient,
    ctx: Context,
    url: str,
    incubator: bool,
    user_identifier: str,
) -> int:
    """Print extractions as JSON."""
    doc, resp = client.get(ctx, url, user_identifier)
    if resp.error is not None:
        print(f"❌ {resp}")
        return 1

    extractions, resp = doc.get_extractions(ctx, incubator)
    if resp.error is not None:
        print(f"❌ {resp}")
        return 1

    print(json.dumps(
        {name: e.value for name, e in extractions.extractions.items()},
        indent=2,
        ensure_ascii=False,
    ))
    return 0


def cmd_delete(client: APIClient, ctx: Context, url: str, user_identifier: str) -> int:
    """Delete a document."""
    doc, resp = client.get(ctx, url, user_identifier)
    if resp.error is not None:
        print(f"❌ {resp}")
        return 1

    resp = doc.delete(ctx)
    if resp.error is not None:
        print(f"❌ {resp}")
        return 1

    print(f"✓ Deleted {doc.id}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    if parsed.command == "init":
        return cmd_init(parsed.config)

    # Load config
    try:
        config: Config = load_config(parsed.config)
    except Exception as e:
        print(f"❌ Failed to load config: {e}")
        return 1

    # Authenticate
    try:
        client = APIClient(config)
    except GiniError as e:
        print(f"❌ Failed to set up Gini client: {e}")
        return 1

    ctx = Context.with_timeout(parsed.timeout)

    try:
        # Route to command
        if parsed.command == "upload":
            return cmd_upload(
                client,
                ctx,
                parsed.file,
                parsed.doctype,
                parsed.user_identifier,
                wait=parsed.wait,
                pause=parsed.pause,
            )
        elif parsed.command == "get":
            return cmd_get(client, ctx, parsed.url, parsed.user_identifier)
        elif parsed.command == "list":
            return cmd_list(
                client,
                ctx,
                ListOptions(
                    limit=parsed.limit,
                    offset=parsed.offset,
                    user_identifier=parsed.user_identifier,
                ),
            )
        elif parsed.command == "search":
            return cmd_search(
                client,
                ctx,
                SearchOptions(
                    query=parsed.query,
                    doctype=parsed.doctype,
                    limit=parsed.limit,
                    offset=parsed.offset,
                    user_identifier=parsed.user_identifier,
                ),
            )
        elif parsed.command == "extractions":
            return cmd_extractions(
                client, ctx, parsed.url, parsed.incubator, parsed.user_identifier
            )
        elif parsed.command == "delete":
            return cmd_delete(client, ctx, parsed.url, parsed.user_identifier)
        else:
            parser.print_help()
            return 1
    finally:
        client.close()


if __name__ == "__main__":
    sys.exit(main())
