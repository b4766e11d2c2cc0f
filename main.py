# main.py
"""
CLI entry point for the bit.ly client.

Usage:
    python main.py shorten "http://example.com/some/long/path"
    python main.py expand http://bit.ly/ABCDE
    python main.py info FGHiJ --fields htmlTitle,thumbnail
    python main.py stats DEFjJ
    python main.py --debug errors

Credentials come from BITLY_LOGIN and BITLY_API_KEY (see config.py).
"""

import argparse
import json
import logging
import sys
from typing import Any, Optional

from pydantic import ValidationError

import config
from api_client import Bitly
from schemas import Envelope, Stats, parse_info
from utils import setup_logging

logger = logging.getLogger(__name__)


# Type each command returns on success; anything else is an error envelope
EXPECTED_RESULTS = {
    "shorten": str,
    "expand": str,
    "info": dict,
    "stats": dict,
    "errors": (list, dict),
}


def is_failure(result: Any, expected: type | tuple[type, ...] = object) -> bool:
    """
    Tell an error envelope apart from a successful result.

    A successful call never returns the envelope itself, so any mapping
    carrying errorCode is a failure, whatever the code says.

    Args:
        result: Return value of a Bitly operation.
        expected: Type(s) the operation returns on success.

    Returns:
        True for a result of the wrong type, an empty envelope (transport
        failure), or an envelope carrying errorCode.
    """
    if not isinstance(result, expected):
        return True
    if not isinstance(result, dict):
        return False
    return not result or "errorCode" in result


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per API method."""
    parser = argparse.ArgumentParser(description="Query the bit.ly v2 API.")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    shorten = commands.add_parser("shorten", help="Shorten a long URL")
    shorten.add_argument("long_url", help="URL to shorten")

    expand = commands.add_parser("expand", help="Expand a short URL or hash")
    expand.add_argument("link", help="http://bit.ly/<hash> or a bare hash")

    info = commands.add_parser("info", help="Show metadata for a link")
    info.add_argument("link", help="http://bit.ly/<hash> or a bare hash")
    info.add_argument(
        "--fields",
        default=None,
        help="Comma-separated fields to return (e.g. htmlTitle,thumbnail)",
    )

    stats = commands.add_parser("stats", help="Show click and referrer data")
    stats.add_argument("link", help="http://bit.ly/<hash> or a bare hash")

    commands.add_parser("errors", help="List bit.ly error codes")
    return parser


def run_command(bitly: Bitly, args: argparse.Namespace) -> Any:
    """Dispatch parsed arguments to the matching client operation."""
    if args.command == "shorten":
        return bitly.shorten(args.long_url)
    if args.command == "expand":
        return bitly.expand(args.link)
    if args.command == "info":
        return bitly.info(args.link, args.fields)
    if args.command == "stats":
        return bitly.stats(args.link)
    return bitly.errors()


def log_summary(command: str, result: Any) -> None:
    """Log a one-line summary of a successful info or stats result."""
    try:
        if command == "info":
            if not all(isinstance(value, dict) for value in result.values()):
                logger.warning("Unexpected info results shape, skipping summary")
                return
            for key, link in parse_info(result).items():
                logger.info("%s: %s", key, link.htmlTitle or link.longUrl)
        elif command == "stats":
            logger.info("Total clicks: %d", Stats.model_validate(result).total_clicks)
    except ValidationError as e:
        logger.warning("Could not summarize %s results: %s", command, e)


def describe_failure(result: Any) -> str:
    """Render the errorCode and errorMessage of a failed call, if it has them."""
    if not isinstance(result, dict):
        return f"unexpected {type(result).__name__} result"
    if not result:
        return "no response"
    try:
        envelope = Envelope.model_validate(result)
    except ValidationError:
        return "malformed response"
    if envelope.succeeded:
        return "response is missing the expected result"
    return f"error {envelope.errorCode}: {envelope.errorMessage}"


def main(argv: Optional[list[str]] = None) -> int:
    """Parse arguments, call the API, and print the result as JSON."""
    args = build_parser().parse_args(argv)

    setup_logging(level=logging.DEBUG if args.debug else config.LOG_LEVEL)

    if not config.BITLY_LOGIN or not config.BITLY_API_KEY:
        print(
            "BITLY_LOGIN and BITLY_API_KEY are required. Set them in your .env file.",
            file=sys.stderr,
        )
        return 2

    bitly = Bitly(config.BITLY_LOGIN, config.BITLY_API_KEY)
    logger.info("Command: %s", args.command)

    result = run_command(bitly, args)
    output = json.dumps(result, indent=2)

    if is_failure(result, EXPECTED_RESULTS[args.command]):
        logger.error("bit.ly %s failed: %s", args.command, describe_failure(result))
        print(output, file=sys.stderr)
        return 1

    log_summary(args.command, result)
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
