#!/usr/bin/env python3
"""
Command line interface for the bookmark store.

Works directly on the SQLite database, so no API server is needed.

Usage:
    webworm push -e '{"name": "One Piece", "url": "https://example.com/op/1071", "episode": 1071}'
    webworm print --all --format episode
    webworm advance -g 'One*'
    webworm previous "One Piece"
    webworm remove "One Piece"
    webworm refresh

``print`` without ``--all`` lists only bookmarks with a new episode.
``advance`` moves every matching bookmark whose next episode is online.
"""

import argparse
import logging
import sys
from typing import List, Optional

from webworm_api.app.core.config import settings
from webworm_api.app.core.errors import BookmarkError
from webworm_api.app.core.logging_config import CLI_FORMAT, setup_logging
from webworm_api.app.core.store import BookmarkStore
from webworm_api.app.schemas.bookmark import Bookmark
from webworm_api.app.services.bookmark_service import BookmarkService
from webworm_api.app.services.probe_service import ProbeService

logger = logging.getLogger("webworm_api.cli")


def parse_format(value: Optional[str]) -> str:
    """Map a free form ``--format`` value to ``name``, ``url`` or ``episode``."""
    if not value:
        return "name"
    value = value.lower()
    if "url" in value or "link" in value:
        return "url"
    if "ep" in value:
        return "episode"
    return "name"


def format_bookmark(bookmark: Bookmark, fmt: str) -> str:
    if fmt == "url":
        return bookmark.url
    if fmt == "episode":
        return f"{bookmark.name}, {bookmark.episode}"
    return bookmark.name


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog="webworm", description="Keep track of the episodes you are watching.")
    ap.add_argument("-d", "--debug", action="store_true", help="Print additional debug information")
    ap.add_argument("--db", help=f"Path to the bookmark database (default: {settings.database_url})")
    sub = ap.add_subparsers(dest="command", required=True)

    push = sub.add_parser("push", help="Add new bookmarks")
    push.add_argument(
        "-e", "--entries", action="append", required=True,
        help='Bookmark as JSON, e.g. \'{"name": "x", "url": "https://site/ep12", "episode": 12}\'',
    )

    print_cmd = sub.add_parser("print", help="Print bookmarks")
    print_cmd.add_argument("-a", "--all", action="store_true", help="Include bookmarks without a new episode")
    print_cmd.add_argument("-g", "--glob", action="append", default=[], help="Name pattern (repeatable)")
    print_cmd.add_argument("-f", "--format", help="name, url or episode")

    advance = sub.add_parser("advance", help="Advance bookmarks whose next episode is online")
    advance.add_argument("-g", "--glob", action="append", default=[], help="Name pattern (repeatable)")

    previous = sub.add_parser("previous", help="Go back one episode")
    previous.add_argument("name")

    remove = sub.add_parser("remove", help="Delete a bookmark")
    remove.add_argument("name")

    refresh = sub.add_parser("refresh", help="Look for new episodes")
    refresh.add_argument("-g", "--glob", action="append", default=[], help="Name pattern (repeatable)")

    return ap.parse_args(argv)


def run(args: argparse.Namespace, service: BookmarkService) -> int:
    """Execute one parsed command and return the exit code."""
    if args.command == "push":
        failed = False
        for entry in args.entries:
            try:
                bookmark = service.insert(entry)
            except BookmarkError as exc:
                logger.info("couldn't insert bookmark: %s", exc.message)
                print(f"[!] {exc.message}", file=sys.stderr)
                failed = True
            else:
                logger.info("successfully added bookmark %s", bookmark.name)
        return 1 if failed else 0

    if args.command == "print":
        fmt = parse_format(args.format)
        bookmarks = service.fetch_bookmarks(args.glob, only_new=not args.all)
        print(" ; ".join(format_bookmark(b, fmt) for b in bookmarks))
        return 0

    if args.command == "advance":
        for bookmark in service.advance_available(args.glob):
            print(format_bookmark(bookmark, "episode"))
        return 0

    if args.command == "previous":
        print(format_bookmark(service.previous(args.name), "episode"))
        return 0

    if args.command == "remove":
        service.remove(args.name)
        return 0

    if args.command == "refresh":
        for bookmark in service.refresh(args.glob):
            print(format_bookmark(bookmark, "name"))
        return 0

    raise ValueError(f"unknown command {args.command}")


def main(argv: Optional[List[str]] = None, probe: Optional[ProbeService] = None) -> int:
    args = parse_args(argv)
    # Without --debug only warnings and errors reach stderr.
    if args.debug:
        setup_logging("DEBUG", settings.log_file or None, fmt=CLI_FORMAT)
        logger.info("setup logging")

    store = BookmarkStore(args.db, lock_timeout=settings.lock_timeout)
    service = BookmarkService(store, probe or ProbeService())
    try:
        return run(args, service)
    except BookmarkError as exc:
        print(f"[!] {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
