"""Command-line helpers for configuring proinfer logging."""

import logging

from proinfer.logging import get_configured_level, get_logger, reset_logger
from proinfer.logging.config import save_log_level
from proinfer.logging.logging import _resolve_log_file


def register_subcommands(subparsers):
    """Register ``set-level``, ``show-path`` and ``show-level``."""

    set_level_parser = subparsers.add_parser("set-level", help="Set the logging level")
    set_level_parser.add_argument(
        "level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level to use",
    )

    subparsers.add_parser("show-path", help="Show the log file location")
    subparsers.add_parser("show-level", help="Show the configured logging level")


def dispatch(args):
    if args.subcommand == "set-level":
        path = save_log_level(args.level)
        reset_logger()
        get_logger(level=getattr(logging, args.level))
        print(f"log level {args.level} saved to {path}")
    elif args.subcommand == "show-path":
        print(_resolve_log_file().resolve())
    elif args.subcommand == "show-level":
        print(get_configured_level())
    else:
        get_logger(__file__).error("No handler for subcommand: %s", args.subcommand)
