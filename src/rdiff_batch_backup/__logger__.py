# pyright: standard

"""rdiff-batch-backup: rdiff_batch_backup/__logger__.py
A common logger writing to a rich console and to a persistent log file.

Every line goes through two independent sinks:

* the console, where a ConsoleFilter lets a record through only in verbose
  mode or when it reports an error or a success;
* the log file, appended to unconditionally except for blank lines, each line
  stamped as ``[YYYY-MM-DD HH:MM:SS] TAG: text``.
"""

import enum
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Initialize basic console and handler
cons = Console()
rich_handler = RichHandler(console=cons, show_path=False)
file_handler: logging.Handler | None = None
# Create a logger directly
logger = logging.Logger("rdiff-batch-backup", logging.INFO)


class Severity(enum.IntEnum):
    """Severity of a reported line, mapped onto logging levels."""

    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    SUCCESS = SUCCESS


SEVERITY_TAGS = {
    logging.DEBUG: "INF",
    logging.INFO: "INF",
    SUCCESS: "INF",
    logging.WARNING: "WAR",
    logging.ERROR: "ERR",
    logging.CRITICAL: "ERR",
}


def tagged_line(levelno: int, text: str) -> str:
    """Prefix text with the short severity tag used in the log file."""
    tag = SEVERITY_TAGS.get(levelno, "INF")
    if levelno == SUCCESS:
        return f"{tag}: SUCCESS - {text}"
    return f"{tag}: {text}"


class ConsoleFilter(logging.Filter):
    """Pass everything when verbose, otherwise only errors and successes."""

    def __init__(self, verbose: bool = False) -> None:
        super().__init__()
        self.verbose = verbose

    def filter(self, record: logging.LogRecord) -> bool:
        if self.verbose:
            return True
        return record.levelno >= logging.ERROR or record.levelno == SUCCESS


class BlankLineFilter(logging.Filter):
    """Drop records whose message is empty or only whitespace."""

    def filter(self, record: logging.LogRecord) -> bool:
        return bool(record.getMessage().strip())


class LogFileFormatter(logging.Formatter):
    """Format records as ``[YYYY-MM-DD HH:MM:SS] TAG: text``."""

    def __init__(self) -> None:
        super().__init__(datefmt=LOG_DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        stamp = self.formatTime(record, self.datefmt)
        return f"[{stamp}] {tagged_line(record.levelno, record.getMessage())}"


def emit(severity: int, text: str) -> None:
    """Report text at the given severity, one record per line."""
    lines = str(text).splitlines() or [""]
    for line in lines:
        logger.log(int(severity), line)


def create_logger(verbose, log_file=None, console=None) -> None:
    """Helper function to setup logging for a run.

    The log file's parent directory is created and the file touched before
    anything is written, so a bad location is detected up front.

    Args:
        verbose: Echo info and warning lines to the console as well.
        log_file: Path of the persistent log, or None for console only.
        console: Console to draw on, a fresh one by default.

    Raises:
        LogSetupFailed: If the log file cannot be prepared.
    """
    # pylint: disable=global-statement
    global cons, rich_handler, file_handler

    from .__util__ import LogSetupFailed

    cons = console or Console()
    rich_handler = RichHandler(
        console=cons, show_time=False, show_path=False, markup=False
    )
    rich_handler.addFilter(ConsoleFilter(verbose))
    rich_handler.setLevel(logging.DEBUG if verbose else logging.INFO)

    if file_handler is not None:
        file_handler.close()
        file_handler = None

    if log_file is not None:
        path = Path(log_file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LogSetupFailed(
                f"Could not create directory for log file: {path.parent} ({e.strerror})"
            ) from e
        try:
            path.touch()
            file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        except OSError as e:
            raise LogSetupFailed(
                f"Could not create log file: {path} ({e.strerror})"
            ) from e
        file_handler.setLevel(logging.INFO)
        file_handler.addFilter(BlankLineFilter())
        file_handler.setFormatter(LogFileFormatter())

    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.addHandler(rich_handler)
    if file_handler is not None:
        logger.addHandler(file_handler)


def close_logger() -> None:
    """Detach and close both sinks."""
    # pylint: disable=global-statement
    global file_handler

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    file_handler = None
