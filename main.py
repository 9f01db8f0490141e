# main.py

"""Entry point for market_watch (price monitor, HTTP API and CLI)."""

import argparse
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("market_watch.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="market_watch",
        description=(
            "Central-market price watcher with Discord webhook alerts."
        ),
        epilog="Run without a command to start the price monitor.",
    )
    parser.add_argument(
        "-r",
        "--region",
        default=None,
        help=f"Market region (default: {Settings.MARKET_REGION}).",
    )
    parser.add_argument(
        "-b",
        "--backend",
        choices=Settings.STORE_BACKENDS,
        default=None,
        help=f"Item store backend (default: {Settings.STORE_BACKEND}).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Show INFO log records on the console.",
    )

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("monitor", help="Run the price monitor (default).")

    serve = sub.add_parser("serve", help="Serve the HTTP API and monitor.")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    sub.add_parser("check", help="Run one price check now.")
    sub.add_parser("list", help="List tracked items.")

    add = sub.add_parser("add", help="Start tracking an item.")
    add.add_argument("item_id", type=int, help="Item ID.")
    add.add_argument(
        "sid", type=int, nargs="?", default=0,
        help="Sub ID / enhancement level (default: 0).",
    )

    remove = sub.add_parser("remove", help="Stop tracking an item.")
    remove.add_argument("item_id", type=int, help="Item ID.")
    remove.add_argument(
        "sid", type=int, nargs="?", default=None,
        help="Sub ID; omit to remove every variant.",
    )

    history = sub.add_parser("history", help="Show recent price history.")
    history.add_argument("item_id", type=int, help="Item ID.")
    history.add_argument("sid", type=int, nargs="?", default=0)

    search = sub.add_parser("search", help="Find item IDs by name.")
    search.add_argument("query", help="Part of the item name.")

    sub.add_parser("test-alert", help="Send a sample webhook alert.")
    sub.add_parser("health", help="Check market API connectivity.")
    return parser


def main() -> None:
    """Parse arguments and dispatch to the selected command."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(verbose=args.verbose)
    logger.info("market_watch starting, log file: %s", log_file)

    from src.cli.runner import run_command

    command = args.command or "monitor"
    try:
        exit_code = run_command(command, args)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        exit_code = 0
    except Exception:
        logger.critical("Fatal error in '%s'", command, exc_info=True)
        raise
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
