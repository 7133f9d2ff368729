"""
Command-line front end for Snipster.

Responsibilities:
    - Wire configuration, storage backend, LinkStore and LinkManager together
    - Run startup housekeeping (prune links expired for more than the retention window)
    - Expose create / open / list / stats / delete / prune subcommands

Usage:
    snipster create https://example.com/very/long --alias promo --minutes 60
    snipster open promo --referrer https://news.example
    snipster list
    snipster stats
    snipster delete 1755835287551-promo
    snipster prune
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from typing import List, Optional

from snipster.analytics.analytics import Analytics, time_left
from snipster.clock import Clock, now_ms
from snipster.config import settings
from snipster.errors import CreationError
from snipster.manager.link_manager import LinkManager, ResolveStatus, build_short_url
from snipster.storage.link_store import LinkStore
from snipster.storage.storage_factory import get_storage

log = logging.getLogger("snipster")


def _fmt_ts(ts: Optional[int]) -> str:
    if ts is None:
        return "-"
    try:
        return datetime.fromtimestamp(ts / 1000).strftime("%Y-%m-%d %H:%M:%S")
    except (OverflowError, ValueError, OSError):
        return str(ts)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="snipster", description="Local URL shortener")
    parser.add_argument("--backend", default=None, help="Storage backend: file or memory")
    parser.add_argument("--storage-dir", default=None, help="Directory for the file backend")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_create = sub.add_parser("create", help="Shorten a URL")
    p_create.add_argument("url")
    p_create.add_argument("--alias", default=None, help="Custom code (3-30 chars: letters, digits, _ or -)")
    p_create.add_argument("--minutes", default=None, help=f"Validity in minutes (default {settings.DEFAULT_VALIDITY_MINUTES})")

    p_open = sub.add_parser("open", help="Resolve a short code and record a click")
    p_open.add_argument("code")
    p_open.add_argument("--referrer", default=None)

    sub.add_parser("list", help="List stored links")
    sub.add_parser("stats", help="Print click analytics as JSON")

    p_delete = sub.add_parser("delete", help="Delete a link by id")
    p_delete.add_argument("id")

    sub.add_parser("prune", help="Run housekeeping now")
    return parser


def main(argv: Optional[List[str]] = None, clock: Clock = now_ms) -> int:
    args = build_parser().parse_args(argv)

    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    storage = get_storage(args.backend, directory=args.storage_dir)
    store = LinkStore(storage, clock=clock)
    store.housekeeping()
    manager = LinkManager(store=store, clock=clock)

    if args.command == "create":
        try:
            link = manager.shorten(args.url, alias=args.alias, validity_minutes=args.minutes)
        except CreationError as exc:
            print(f"error ({exc.reason}): {exc}", file=sys.stderr)
            return 1
        print(build_short_url(link.code))
        print(f"code={link.code} id={link.id} expires={_fmt_ts(link.expires_at)}")
        return 0

    if args.command == "open":
        outcome = manager.visit(args.code, referrer=args.referrer)
        if outcome.status is ResolveStatus.REDIRECT:
            print(outcome.url)
            return 0
        if outcome.status is ResolveStatus.EXPIRED:
            print("This link has expired.", file=sys.stderr)
        else:
            print("This short link does not exist.", file=sys.stderr)
        return 1

    if args.command == "list":
        now = clock()
        for link in manager.list_links():
            remaining, _ = time_left(link.expires_at, now)
            last = link.last_click.timestamp if link.last_click else None
            print(
                f"{link.id}\t{build_short_url(link.code)}\t{link.original_url}\t"
                f"{remaining}\tclicks={len(link.clicks)}\tlast={_fmt_ts(last)}"
            )
        return 0

    if args.command == "stats":
        print(json.dumps(Analytics(clock=clock).summary(manager.list_links()), indent=2, sort_keys=True))
        return 0

    if args.command == "delete":
        if manager.delete_link(args.id):
            print(f"Deleted {args.id}")
            return 0
        print(f"No link with id {args.id}", file=sys.stderr)
        return 1

    if args.command == "prune":
        # housekeeping already ran at startup
        print(f"{len(store.load())} link(s) kept")
        return 0

    return 1  # pragma: no cover


if __name__ == "__main__":
    sys.exit(main())
