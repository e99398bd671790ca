"""
Command-line interface for sending a single log to the remote logging API.

Usage:
    send-log <level> <package> <message> [--stack STACK]
"""

import argparse
import sys
from typing import List, Optional

from config import load_config

from .emitter import LogEmitter
from .logging_config import setup_logging
from .records import DISPLAY_LEVELS
from .trace import LoggingTraceSink


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Send one log through the logging middleware",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Informational backend log
  %(prog)s INFO handlers "Request handled" --stack backend

  # Shown as success locally, sent as info
  %(prog)s SUCCESS ShortenerPage "Shortened 2 URLs"
        """
    )

    parser.add_argument("level", help=f"Log level ({', '.join(DISPLAY_LEVELS)})")
    parser.add_argument("package", help="Emitting package or module")
    parser.add_argument("message", help="Log message")

    parser.add_argument(
        "--stack",
        default=None,
        help="backend or frontend (default: LOG_DEFAULT_STACK, usually frontend)"
    )

    parser.add_argument(
        "--url",
        default=None,
        help="Logging endpoint (default: from LOG_API_URL env)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    config = load_config()

    logger = setup_logging(level="DEBUG" if args.verbose else config.log_level)

    emitter = LogEmitter(
        args.url or config.log_api_url,
        trace=LoggingTraceSink(logger.getChild("log_middleware")),
        timeout=config.log_api_timeout,
        headers=config.log_api_headers(),
        default_stack=config.log_default_stack,
        max_workers=1,
    )

    try:
        emitter.emit(args.stack, args.level, args.package, args.message)
    finally:
        # Wait for the background delivery before the process exits
        emitter.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
