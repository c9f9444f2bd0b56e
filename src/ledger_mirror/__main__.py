"""
Ledger mirror CLI entry point.

Mirror a ledger into the local cache and query the cache.

Usage::

    python -m ledger_mirror --address 0xabc... --ledger-url http://localhost:8545 sync
    python -m ledger_mirror --address 0xabc... sync --poll --metrics-port 9100
    python -m ledger_mirror --address 0xabc... status
    python -m ledger_mirror --address 0xabc... search "monthly report" --limit 20
    python -m ledger_mirror --address 0xabc... latest --offset 10
    python -m ledger_mirror --address 0xabc... reset

Common options:
    --address     Ledger address; namespaces the cache and the cursor
    --data-dir    Directory holding the SQLite files (default: ~/.ledger_mirror)
    --ledger-url  Base URL of the ledger gateway
    --ipfs-url    IPFS HTTP API URL (default: http://127.0.0.1:5001/api/v0)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from ledger_mirror import metrics
from ledger_mirror.catalog import Catalog
from ledger_mirror.config import DEFAULT_DATA_DIR
from ledger_mirror.content import IpfsHttpStore
from ledger_mirror.content.ipfs import IPFS_API_URL
from ledger_mirror.errors import LedgerMirrorError
from ledger_mirror.ledger import HttpLedger
from ledger_mirror.sync import SyncUpdate
from ledger_mirror.types import Pageable

logger = logging.getLogger(__name__)

DEFAULT_LEDGER_URL = "http://127.0.0.1:8080"
"""Ledger gateway used when --ledger-url is not given."""


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)

        timestamp = f"{self.CYAN}{self.formatTime(record, self.datefmt)}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"

        return f"{timestamp} {levelname} {name}: {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure root logging with optional colors."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)

    if no_color:
        formatter: logging.Formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def log_progress(error: LedgerMirrorError | None, update: SyncUpdate) -> None:
    """Observer that logs each processed entry."""
    if error is not None:
        logger.warning("[%d/%d] %s", update.num_synced, update.total, error)
    elif update.record is not None:
        logger.info("[%d/%d] %s", update.num_synced, update.total, update.record.title)


def format_page(page: Pageable) -> str:
    """Render a result page as JSON with camelCase record fields."""
    return json.dumps(
        {
            "data": [record.model_dump(by_alias=True) for record in page.data],
            "total": page.total,
            "end": page.end,
        },
        indent=2,
    )


def open_catalog(args: argparse.Namespace) -> tuple[Catalog, HttpLedger, IpfsHttpStore]:
    """Build the catalog and its HTTP collaborators from parsed arguments."""
    ledger = HttpLedger(args.ledger_url)
    content_store = IpfsHttpStore(args.ipfs_url)
    catalog = Catalog.open(args.address, ledger, content_store, args.data_dir)
    return catalog, ledger, content_store


async def run_command(args: argparse.Namespace) -> int:
    """Execute one subcommand. Returns the process exit code."""
    catalog, ledger, content_store = open_catalog(args)
    try:
        if args.command == "sync":
            if args.metrics_port is not None:
                metrics.serve_metrics(args.metrics_port)
                logger.info("Serving metrics on port %d", args.metrics_port)
            state = await catalog.start_sync(log_progress, poll=args.poll)
            logger.info("Synced %d of %d entries", state.num_synced, state.total)
        elif args.command == "status":
            state = await catalog.get_sync_state()
            print(json.dumps({"numSynced": state.num_synced, "total": state.total}))
        elif args.command == "search":
            print(format_page(catalog.search(args.query, args.limit, args.offset)))
        elif args.command == "latest":
            print(format_page(catalog.latest(args.limit, args.offset)))
        elif args.command == "reset":
            catalog.clear_data()
            logger.info("Cleared cache and cursor for %s", args.address)
    except LedgerMirrorError as exc:
        logger.error("%s", exc)
        return 1
    finally:
        catalog.close()
        await ledger.close()
        await content_store.close()

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ledger_mirror",
        description="Mirror an append-only metadata ledger into a local cache",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--address",
        required=True,
        help="Ledger address; namespaces the cache and the cursor",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path(DEFAULT_DATA_DIR),
        help=f"Directory holding the SQLite files (default: {DEFAULT_DATA_DIR})",
    )
    parser.add_argument(
        "--ledger-url",
        default=DEFAULT_LEDGER_URL,
        help=f"Base URL of the ledger gateway (default: {DEFAULT_LEDGER_URL})",
    )
    parser.add_argument(
        "--ipfs-url",
        default=IPFS_API_URL,
        help=f"IPFS HTTP API URL (default: {IPFS_API_URL})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--no-color", action="store_true", help="Disable colored logging output")

    commands = parser.add_subparsers(dest="command", required=True)

    sync = commands.add_parser("sync", help="Mirror new ledger entries")
    sync.add_argument("--poll", action="store_true", help="Keep polling for new entries")
    sync.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Serve Prometheus metrics on this port while syncing",
    )

    commands.add_parser("status", help="Show synced/total entry counts")

    search = commands.add_parser("search", help="Search cached titles")
    search.add_argument("query")

    latest = commands.add_parser("latest", help="Browse cached records by ingestion time")

    for sub in (search, latest):
        sub.add_argument("--limit", type=int, default=10)
        sub.add_argument("--offset", type=int, default=0)

    commands.add_parser("reset", help="Drop the cache and rewind the cursor")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    try:
        return asyncio.run(run_command(args))
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        return 130


if __name__ == "__main__":
    sys.exit(main())
