"""Command-line interface for Tickcast.

Runs the weather or stock pipeline once and prints the result.

Usage:
    tickcast weather London
    tickcast stock AAPL --interval weekly
    tickcast stock AAPL --format json --api-key YOUR_KEY
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from tickcast import __version__
from tickcast.config import settings
from tickcast.exceptions import QueryValidationError
from tickcast.formatting import render_stock, render_weather
from tickcast.models import TimeInterval
from tickcast.pipeline import Orchestrator, classify

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Returns:
        Configured ArgumentParser with all commands and arguments.
    """
    parser = argparse.ArgumentParser(
        prog="tickcast",
        description="Tickcast — cached ETL for stock quotes and weather forecasts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tickcast weather London
  tickcast stock AAPL --interval weekly
  tickcast stock MSFT --format json

API keys default to WEATHER_API_KEY / FINANCE_API_KEY (environment or .env).
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # weather command
    weather_parser = subparsers.add_parser(
        "weather",
        help="Current conditions and 5-day outlook for a city",
    )
    weather_parser.add_argument("city", type=str, help="City name (e.g., London, Paris,FR)")
    _add_common_arguments(weather_parser)

    # stock command
    stock_parser = subparsers.add_parser(
        "stock",
        help="Quote, price history and analytics for a symbol",
    )
    stock_parser.add_argument("symbol", type=str, help="Ticker symbol (e.g., AAPL)")
    stock_parser.add_argument(
        "--interval",
        type=str,
        choices=[i.value for i in TimeInterval],
        default=TimeInterval.DAILY.value,
        help="Time-series interval (default: daily)",
    )
    _add_common_arguments(stock_parser)

    # version command
    subparsers.add_parser("version", help="Show version information")

    return parser


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="Provider API key (default: from settings)",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )


def _emit(result, fmt: str, render) -> None:
    if fmt == "json":
        payload = result.model_dump(mode="json")
        payload["metadata"]["processing_ms"] = result.metadata.processing_ms
        print(json.dumps(payload, indent=2))
    else:
        print(render(result))


def _report_failure(error: Exception) -> int:
    classified = classify(error)
    logger.debug("Pipeline failed", exc_info=error)
    print(f"Error [{classified.kind.value}]: {classified.message}", file=sys.stderr)
    return 1


def cmd_weather(args: argparse.Namespace) -> int:
    """Execute the weather command.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        api_key = args.api_key or settings.weather_api_key
        if not api_key:
            raise QueryValidationError(
                "Weather API key required: pass --api-key or set WEATHER_API_KEY"
            )
        result = asyncio.run(Orchestrator().run_weather(args.city, api_key))
        _emit(result, args.format, render_weather)
        return 0
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except Exception as e:
        return _report_failure(e)


def cmd_stock(args: argparse.Namespace) -> int:
    """Execute the stock command.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        api_key = args.api_key or settings.finance_api_key
        if not api_key:
            raise QueryValidationError(
                "Finance API key required: pass --api-key or set FINANCE_API_KEY"
            )
        result = asyncio.run(
            Orchestrator().run_stock(args.symbol, args.interval, api_key)
        )
        _emit(result, args.format, render_stock)
        return 0
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except Exception as e:
        return _report_failure(e)


def cmd_version(args: argparse.Namespace) -> int:
    """Execute the version command."""
    print(f"Tickcast v{__version__}")
    print("Cached ETL for stock quotes and weather forecasts")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = create_parser()
    args = parser.parse_args(argv)

    # Route to command handler
    if args.command == "weather":
        return cmd_weather(args)
    elif args.command == "stock":
        return cmd_stock(args)
    elif args.command == "version":
        return cmd_version(args)
    else:
        # No command specified
        parser.print_help()
        return 0


def cli_entry() -> None:
    """Console script entry point for setuptools."""
    sys.exit(main())


if __name__ == "__main__":
    cli_entry()
