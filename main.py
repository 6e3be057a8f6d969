# main.py

"""Entry point for the price_aggregator command-line tool."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("price_aggregator.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = ", ".join(s["id"] for s in Settings.AVAILABLE_SOURCES)

    parser = argparse.ArgumentParser(
        prog="price_aggregator",
        description="Compare product prices across Amazon, Flipkart "
        "and Reliance Digital.",
        epilog=f"Available sources: {valid_ids}",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search query.",
    )
    parser.add_argument(
        "-s",
        "--sources",
        default=None,
        help="Comma-separated source IDs (default: all).",
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
        "-o",
        "--output",
        default=None,
        dest="output_dir",
        help="Custom output directory (default: results/).",
    )
    parser.add_argument(
        "--no-save",
        action="store_false",
        default=True,
        dest="save",
        help="Do not write the combined JSON result file.",
    )
    parser.add_argument(
        "--csv",
        action="store_true",
        default=False,
        dest="export_csv",
        help="Also export listings to a price-sorted CSV file.",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a credential and connectivity check on all sources.",
    )
    return parser


def _run_cli(args: argparse.Namespace) -> None:
    """Run a headless search and exit."""
    from src.cli.runner import cli_search

    exit_code = asyncio.run(
        cli_search(
            query=args.query,
            source_csv=args.sources,
            output_format=args.output_format,
            output_dir=args.output_dir,
            save=args.save,
            export_csv=args.export_csv,
        )
    )
    sys.exit(exit_code)


def _run_health_check() -> None:
    """Run provider connectivity health check."""
    from src.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check())
    sys.exit(exit_code)


def main() -> None:
    """Route to the health check or a price search."""
    log_file = setup_logging()
    logger.info("price_aggregator starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.health:
        _run_health_check()
    elif args.query is None:
        parser.error("a search query is required unless --health is given")
    else:
        _run_cli(args)


if __name__ == "__main__":
    main()
