"""Command-line entry point: railboard {departures,arrivals} CRS [-n ROWS]."""

from __future__ import annotations

import argparse
import logging
import re
import signal
from typing import Sequence

from rich.console import Console
from rich.text import Text

from railboard import __version__
from railboard.config import DEFAULT_CONFIG_PATH, MAX_NUM_ROWS, load_config, require_api_key
from railboard.data.darwin_client import DarwinClient
from railboard.data.fetcher import BoardFetcher
from railboard.data.models import ARRIVALS, DEPARTURES, direction_from_name
from railboard.data.refresher import BoardRefresher
from railboard.errors import ConfigError
from railboard.logs import configure_logging
from railboard.rendering import TerminalRenderer

logger = logging.getLogger(__name__)

STATION_CODE_PATTERN = re.compile(r"^[A-Za-z]{3}$")


def station_code(value: str) -> str:
    if not STATION_CODE_PATTERN.match(value):
        raise argparse.ArgumentTypeError(f"'{value}' is not a 3-letter station code (CRS)")
    return value.upper()


def num_rows(value: str) -> int:
    try:
        rows = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{value}' is not a number") from exc
    if not 1 <= rows <= MAX_NUM_ROWS:
        raise argparse.ArgumentTypeError(f"Number of rows must be between 1 and {MAX_NUM_ROWS}")
    return rows


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="railboard",
        description="Live departure and arrival boards for UK railway stations.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-n",
        "--num-rows",
        type=num_rows,
        default=None,
        help="Number of rows (services) to display (default: from config, 10)",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to the YAML config file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Display the board once and exit (no auto-refresh)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    commands = (
        (DEPARTURES, ["d", "dep"], "Show the departure board for a station"),
        (ARRIVALS, ["a", "arr"], "Show the arrival board for a station"),
    )
    for direction, aliases, help_text in commands:
        command = subparsers.add_parser(direction.name, aliases=aliases, help=help_text)
        command.add_argument(
            "station_code",
            type=station_code,
            help=f"The 3-letter station code (CRS) to get {direction.name} for",
        )
        command.add_argument(
            "-n",
            "--num-rows",
            type=num_rows,
            default=argparse.SUPPRESS,
            help="Number of rows (services) to display",
        )
        command.set_defaults(direction_name=direction.name)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    error_console = Console(stderr=True)
    direction = direction_from_name(args.direction_name)

    try:
        config = load_config(args.config, required=args.config != DEFAULT_CONFIG_PATH)
        configure_logging(config.log)
        require_api_key(config, direction)
    except ConfigError as exc:
        error_console.print(Text(f"Configuration error: {exc}", style="bold red"))
        return 1

    row_limit = args.num_rows or config.board.default_num_rows
    interval = config.board.refresh_interval_seconds
    client = DarwinClient(
        config.darwin.departures_url,
        config.darwin.arrivals_url,
        timeout_seconds=config.darwin.request_timeout_seconds,
    )
    fetcher = BoardFetcher(
        client,
        {
            DEPARTURES.name: config.darwin.dep_api_key,
            ARRIVALS.name: config.darwin.arr_api_key,
        },
    )
    logger.info(f"Starting {direction.name} board for {args.station_code} ({row_limit} rows)")

    try:
        with TerminalRenderer(interval) as renderer:
            refresher = BoardRefresher(
                fetcher,
                renderer,
                direction,
                args.station_code,
                row_limit,
                interval_seconds=interval,
            )
            previous_handler = signal.signal(signal.SIGTERM, lambda signum, frame: refresher.stop())
            try:
                refresher.run(max_ticks=1 if args.once else None)
            finally:
                signal.signal(signal.SIGTERM, previous_handler)
    except ConfigError as exc:
        error_console.print(Text(f"Configuration error: {exc}", style="bold red"))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted outside the refresh loop")
    return 0


__all__ = ["build_parser", "main"]
