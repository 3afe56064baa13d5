# pyright: standard

"""rdiff-batch-backup: rdiff_batch_backup/__util__.py
Common errors and subprocess helpers among modules.
"""

import os
import subprocess
import threading

from .__logger__ import Severity, emit, logger

# Exit status reported for a program that could not be started at all
TOOL_NOT_FOUND = 127

HEADING_BAR = "#" * 74


class AbortError(Exception):
    """Any failure that aborts the whole batch."""


class UsageError(AbortError):
    """Bad arguments or an unreadable task file."""


class SetupError(AbortError):
    """The run could not be prepared."""


class LogSetupFailed(SetupError):
    """The log file or its directory cannot be created."""


class SourceError(AbortError):
    """The source or destination of a task is not usable."""


class NoValidSource(SourceError):
    """No probe recognized the source identifier."""


class InvalidDestination(SourceError):
    """The destination is missing, not a directory or not writable."""


class DatasetNotMounted(SourceError):
    """A dataset has no mount point that could be backed up."""


class SnapshotError(AbortError):
    """A step of the snapshot lifecycle failed."""


class SnapshotCreateFailed(SnapshotError):
    pass


class MountDirCreateFailed(SnapshotError):
    pass


class MountFailed(SnapshotError):
    pass


class UnmountFailed(SnapshotError):
    pass


class MountDirRemoveFailed(SnapshotError):
    pass


class SnapshotRemoveFailed(SnapshotError):
    pass


class ToolError(AbortError):
    """The external backup tool exited nonzero."""


class BackupFailed(ToolError):
    pass


class RetentionFailed(ToolError):
    pass


def log_heading(caption: str) -> str:
    """Return a boxed section heading for the log."""
    return f"{HEADING_BAR}\n# {caption}\n{HEADING_BAR}"


def privileged(command: list[str]) -> list[str]:
    """Prefix a volume manager command with non-interactive sudo unless root."""
    if os.geteuid() != 0:
        return ["sudo", "-n", *command]
    return list(command)


def query_subprocess(command: list[str]) -> subprocess.CompletedProcess:
    """Run a query command and capture its output.

    A program that cannot be found is reported as a failed query rather than
    an exception, so probes can treat a missing collaborator like a miss.
    """
    logger.debug("Query command: %s", command)
    try:
        return subprocess.run(
            command,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        logger.debug("Could not run %s: %s", command[0], e)
        return subprocess.CompletedProcess(command, TOOL_NOT_FOUND, "", str(e))


def _drain(stream, severity: Severity) -> None:
    with stream:
        for line in stream:
            emit(severity, line.rstrip("\n"))


def exec_subprocess(command: list[str]) -> int:
    """Run a command to completion and return its exit status.

    Standard output is reported line by line at info severity and standard
    error at warning severity, both verbatim. The two streams are drained
    concurrently so neither pipe can fill up and stall the child.
    """
    logger.debug("Executing command: %s", command)
    try:
        proc = subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as e:
        emit(Severity.WARNING, f"{command[0]}: {e.strerror or e}")
        return TOOL_NOT_FOUND

    readers = [
        threading.Thread(target=_drain, args=(proc.stdout, Severity.INFO)),
        threading.Thread(target=_drain, args=(proc.stderr, Severity.WARNING)),
    ]
    for reader in readers:
        reader.start()
    returncode = proc.wait()
    for reader in readers:
        reader.join()

    logger.debug("%s exited with status %d", command[0], returncode)
    return returncode
