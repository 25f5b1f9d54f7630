"""Command-line front end for the attachment pipeline.

Usage:
    attachflow types
    attachflow list 42
    attachflow upload 42 --type 3 invoice.pdf scan.jpg
    attachflow delete 42 17 [--yes]

Environment Variables:
    API_BASE_URL, API_TOKEN, MAX_UPLOAD_SIZE_BYTES, LOG_LEVEL, LOG_JSON
    (see attachflow.config.Settings)

Exit status is 1 when any error notification was raised, 2 on usage errors.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from .config import Settings, get_settings
from .domain.documents.errors import (
    BatchInProgressError,
    ScreenNotReadyError,
    TransportError,
    UnknownDocumentTypeError,
)
from .domain.documents.models import UploadCandidate
from .domain.documents.notifications import Notification
from .domain.documents.ports import AlwaysConfirm, ConfirmPort
from .domain.documents.screen_state import ScreenState
from .domain.documents.validation import format_file_size
from .infrastructure.api import RestDocumentApi
from .observability import configure_logging
from .services import DocumentAttachmentScreen


class TerminalConfirm(ConfirmPort):
    """Asks on stdin; anything but y/yes declines."""

    def confirm(self, message: str) -> bool:
        try:
            answer = input(f"{message} [y/N] ")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")


def _print_notifications(notifications: List[Notification]) -> None:
    for notification in notifications:
        stream = sys.stderr if notification.is_error else sys.stdout
        print(f"[{notification.severity.value}] {notification.message}", file=stream)


def _has_errors(state: ScreenState) -> bool:
    return any(n.is_error for n in state.notifications)


def _print_documents(state: ScreenState) -> None:
    print(f"Uploaded Documents ({len(state.documents)})")
    for document in state.documents:
        type_label = document.type_name or f"type {document.type_id}"
        print(
            f"  {document.document_id:>6}  {document.document_name}  "
            f"[{type_label}]  uploaded {document.uploaded_at.date().isoformat()}"
        )


async def _list_types(api: RestDocumentApi) -> int:
    types = await api.list_document_types()
    for document_type in types:
        print(f"  {document_type.type_id:>4}  {document_type.type_name}  Accepts: {document_type.allowlist_label}")
    return 0


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    async with RestDocumentApi(settings) as api:
        if args.command == "types":
            return await _list_types(api)

        confirm = AlwaysConfirm() if getattr(args, "yes", False) else TerminalConfirm()
        screen = DocumentAttachmentScreen(api, confirm, max_file_size=settings.MAX_UPLOAD_SIZE_BYTES)
        try:
            await screen.activate(args.owner_id)
            if _has_errors(screen.state):
                # Nothing to act on without the list
                return 1

            if args.command == "upload":
                if args.type_id is not None:
                    screen.select_type(args.type_id)
                candidates = [UploadCandidate.from_path(path) for path in args.files]
                for candidate in candidates:
                    print(f"Queued {candidate.file_name} ({format_file_size(candidate.size_bytes)})")
                await screen.submit_files(candidates)
            elif args.command == "delete":
                await screen.delete_document(args.document_id)
        finally:
            _print_notifications(list(screen.state.notifications))

        _print_documents(screen.state)
        return 1 if _has_errors(screen.state) else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="attachflow",
        description="Manage documents attached to a record",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("types", help="List selectable document types")

    list_parser = subparsers.add_parser("list", help="List documents of an owning record")
    list_parser.add_argument("owner_id", type=int, help="Owning record id")

    upload_parser = subparsers.add_parser("upload", help="Upload files as one batch")
    upload_parser.add_argument("owner_id", type=int, help="Owning record id")
    upload_parser.add_argument(
        "--type",
        dest="type_id",
        type=int,
        help="Document type id (default: first type offered by the server)",
    )
    upload_parser.add_argument("files", nargs="+", help="Files to upload, in order")

    delete_parser = subparsers.add_parser("delete", help="Delete one document")
    delete_parser.add_argument("owner_id", type=int, help="Owning record id")
    delete_parser.add_argument("document_id", type=int, help="Document id")
    delete_parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    try:
        return asyncio.run(_run(args, settings))
    except (FileNotFoundError, UnknownDocumentTypeError, KeyError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except (BatchInProgressError, ScreenNotReadyError, TransportError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
