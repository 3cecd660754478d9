"""
Command-line front end for the docs console.

Usage:
    python -m docconsole search "auth flow" --mode keyword
    python -m docconsole releases <library-id>
    python -m docconsole batch-sync <library-id> --all
    python -m docconsole batch-sync <library-id> --tag v1.2.0 --tag v1.3.0
    python -m docconsole sync <library-id> 1.2.0
    python -m docconsole delete <library-id> --yes
"""

import argparse
import asyncio
import html
import logging
import re
import sys
from typing import Optional, TextIO

from docconsole.api.client import ConsoleAPIClient
from docconsole.api.models import SearchMode
from docconsole.config import config
from docconsole.controllers import LibraryFormController, ReleaseSyncModal, SearchController
from docconsole.rendering import format_release_date, render_notification
from docconsole.release_sync import ModalPhase
from docconsole.services.notification_service import Notification, NotificationService
from docconsole.view import IntentDispatcher, View

logger = logging.getLogger(__name__)

_BLOCK_END = re.compile(r"</(div|p|h\d)>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")


def html_to_text(markup: str) -> str:
    """Flatten a rendered fragment to plain text lines."""
    text = _TAG.sub("", _BLOCK_END.sub("\n", markup))
    lines = [line.strip() for line in html.unescape(text).splitlines()]
    return "\n".join(line for line in lines if line)


class TerminalView(View):
    """Writes rendered regions and notifications to a text stream."""

    def __init__(self, out: Optional[TextIO] = None):
        self.out = out or sys.stdout
        self.regions: dict[str, str] = {}

    def render(self, region: str, html: str) -> None:
        self.regions[region] = html
        text = html_to_text(html)
        if text:
            print(text, file=self.out)

    def show_notification(self, notification: Notification) -> None:
        text = html_to_text(render_notification(notification.message, notification.level))
        print(f"[{notification.level}] {text}", file=self.out)

    def navigate(self, url: str) -> None:
        logger.info(f"Navigate to {url}")

    def reload(self) -> None:
        logger.info("Reload requested")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docconsole",
        description="Search documentation and sync library releases",
    )
    parser.add_argument("--base-url", default=None, help="Console API base URL")
    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", help="Search indexed documentation")
    search.add_argument("query")
    search.add_argument(
        "--mode",
        choices=[m.value for m in SearchMode],
        default=config.SEARCH_DEFAULT_MODE,
    )
    search.add_argument("--library", default=None, help="Restrict to a library ID")
    search.add_argument("--limit", type=int, default=config.SEARCH_LIMIT)

    releases = sub.add_parser("releases", help="List GitHub releases available for sync")
    releases.add_argument("library_id")

    batch = sub.add_parser("batch-sync", help="Sync several releases at once")
    batch.add_argument("library_id")
    group = batch.add_mutually_exclusive_group(required=True)
    group.add_argument("--all", action="store_true", help="Select every release not yet indexed")
    group.add_argument("--tag", action="append", dest="tags", help="Release tag to select")

    sync = sub.add_parser("sync", help="Sync a single version")
    sync.add_argument("library_id")
    sync.add_argument("version")

    delete = sub.add_parser("delete", help="Delete a library")
    delete.add_argument("library_id")
    delete.add_argument("--name", default=None)
    delete.add_argument("--yes", action="store_true", help="Skip confirmation")

    return parser


def _print_releases(modal: ReleaseSyncModal, out: TextIO) -> None:
    state = modal.state
    print(f"Default docs path: {state.docs_path}", file=out)
    for r in state.releases:
        mark = "indexed" if r.exists else ("[x]" if r.selected else "[ ]")
        print(
            f"  {mark:8} {r.tag_name:16} {r.version:12} {r.docs_path:24} "
            f"{format_release_date(r.published_at)}",
            file=out,
        )


async def run(args: argparse.Namespace, view: TerminalView) -> int:
    client = ConsoleAPIClient(base_url=args.base_url)
    dispatcher = IntentDispatcher(view, NotificationService(sink=view.show_notification))

    try:
        if args.command == "search":
            controller = SearchController(
                client, dispatcher, mode=args.mode, library_id=args.library, limit=args.limit,
            )
            await controller.on_submit(args.query)
            return 0

        if args.command in ("releases", "batch-sync"):
            modal = ReleaseSyncModal(client, dispatcher, reload_delay=0)
            await modal.open(args.library_id)
            if modal.state.error:
                print(modal.state.error, file=view.out)
                return 1

            if args.command == "releases":
                _print_releases(modal, view.out)
                return 0

            if args.all:
                if not modal.all_selectable_selected:
                    modal.toggle_select_all()
            else:
                # Toggling twice would deselect a repeated tag
                for tag in dict.fromkeys(args.tags):
                    modal.toggle_release(tag)
            _print_releases(modal, view.out)
            await modal.start_sync()
            return 0 if modal.state.phase == ModalPhase.CLOSED else 1

        forms = LibraryFormController(client, dispatcher, navigate_delay=0, reload_delay=0)

        if args.command == "sync":
            ok = await forms.sync_version(args.library_id, args.version)
            return 0 if ok else 1

        if args.command == "delete":
            def confirm(prompt: str) -> bool:
                return args.yes or input(f"{prompt} [y/N] ").strip().lower() == "y"

            ok = await forms.delete_library(args.library_id, args.name, confirm=confirm)
            return 0 if ok else 1
    finally:
        await client.close()

    return 2


def main(argv: Optional[list[str]] = None) -> int:
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    args = build_parser().parse_args(argv)
    try:
        config.validate()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    return asyncio.run(run(args, TerminalView()))
