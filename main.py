# main.py

"""Entry point for the listing comparison engine CLI."""

import argparse
import asyncio
import logging
import sys

from listing_engine.config.logging_config import setup_logging
from listing_engine.config.settings import Settings

logger = logging.getLogger("listing_engine.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    platform_ids = ", ".join(p["id"] for p in Settings.EXTERNAL_PLATFORMS)

    parser = argparse.ArgumentParser(
        prog="listing_engine",
        description="Compare local marketplace listings with external platforms.",
        epilog=f"External platforms: {platform_ids}",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search query to compare.",
    )
    parser.add_argument(
        "-c",
        "--category",
        default=None,
        help="Optional category recorded with the query and used in matching.",
    )
    parser.add_argument(
        "-l",
        "--listings",
        default=None,
        help="JSON file of local products/services (default: bundled sample).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--no-delay",
        action="store_true",
        default=False,
        dest="no_delay",
        help="Skip the simulated external round trip.",
    )
    parser.add_argument(
        "--history",
        action="store_true",
        default=False,
        help="Print recent searches (filtered by --category if given).",
    )
    parser.add_argument(
        "-n",
        "--limit",
        type=int,
        default=None,
        help="How many recent searches to print with --history.",
    )
    parser.add_argument(
        "--clear-history",
        action="store_true",
        default=False,
        dest="clear_history",
        help="Forget all recorded searches.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Show INFO log messages on stderr.",
    )
    parser.add_argument(
        "--platforms",
        action="store_true",
        default=False,
        help="List the registered external platforms.",
    )
    return parser


def main() -> None:
    """Route to the requested CLI action."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(console_level="INFO" if args.verbose else None)
    logger.info("listing_engine starting, log file: %s", log_file)

    from listing_engine.cli import runner

    if args.clear_history:
        exit_code = runner.run_clear_history()
    elif args.history:
        exit_code = runner.run_show_history(args.limit, args.category)
    elif args.platforms:
        exit_code = runner.run_list_platforms()
    elif args.query is None:
        parser.print_help()
        exit_code = 1
    else:
        exit_code = asyncio.run(
            runner.cli_compare(
                query=args.query,
                category=args.category,
                listings_path=args.listings,
                output_format=args.output_format,
                no_delay=args.no_delay,
            )
        )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
