"""Shared CLI utilities and argument parsers."""

import argparse


def add_verbosity_args(parser: argparse.ArgumentParser) -> None:
    """Add verbosity-related arguments to a parser."""
    group = parser.add_argument_group("Output options")
    group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="verbose output",
    )
    group.add_argument(
        "-l",
        "--log-file",
        metavar="LOGFILE",
        help="specify log file",
    )


def get_log_file(args: argparse.Namespace, default: str) -> str:
    """Determine the log file from parsed arguments.

    Args:
        args: Parsed command line arguments
        default: Log file from the configuration

    Returns:
        The -l override if given, else the default
    """
    return getattr(args, "log_file", None) or default
