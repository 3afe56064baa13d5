"""CLI entry point: parse arguments and hand over to the run command."""

import argparse
import sys

from .common import add_verbosity_args

USAGE = """\
%(prog)s [options] file
       %(prog)s [options] source destination [type]"""


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="rdiff-batch-backup",
        usage=USAGE,
        description=(
            "Run backups with rdiff-backup. ZFS datasets are backed up from "
            "their mount point, LVM logical volumes through a temporary "
            "snapshot, and plain directories as they are."
        ),
        epilog=(
            "A single argument names a file with one task per line "
            "(blank lines and lines starting with '#' are skipped). "
            "More arguments describe one task."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    add_verbosity_args(parser)

    parser.add_argument(
        "tasks",
        nargs="*",
        metavar="TASK",
        help="task file, or source and destination of a single task",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for rdiff-batch-backup CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    # argparse exits 0 for -h and 2 for unknown options
    args = parser.parse_args(argv)

    from .run import execute_run

    return execute_run(args, parser)
