"""Run command: Execute a batch of backup tasks."""

import argparse
import time

from .. import __util__
from ..__logger__ import Severity, close_logger, create_logger, emit
from ..config import ConfigError, find_config_file, load_config
from ..core import BatchRunner, report_abort
from ..tasks import tasks_from_args
from .common import get_log_file


def execute_run(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Execute the run command.

    Args:
        args: Parsed command line arguments
        parser: Parser used to print usage on bad arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        config = load_config(find_config_file())
    except ConfigError as e:
        print(f"EXIT: Configuration error: {e}")
        return 1

    config.global_config.log_file = get_log_file(args, config.global_config.log_file)
    verbose = bool(getattr(args, "verbose", False) or config.global_config.verbose)

    try:
        create_logger(verbose, config.global_config.log_file)
    except __util__.LogSetupFailed as e:
        print(f"EXIT: {e}")
        return 1

    try:
        emit(Severity.INFO, __util__.log_heading(f"Backup, {time.strftime('%c')}"))

        if not args.tasks:
            parser.print_help()
            return 1

        try:
            tasks = tasks_from_args(args.tasks)
        except __util__.UsageError as e:
            report_abort(e, config.global_config.flush_delay)
            return 1

        return BatchRunner(config).run(tasks)
    finally:
        close_logger()
