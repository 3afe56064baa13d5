"""Core backup operations: run the backup tool, then its retention mode.

The tool is treated as an opaque program. Its exit status is the only success
signal; its output is passed through to the log untouched.
"""

from .. import __util__
from ..__logger__ import logger
from ..config import ToolConfig


class BackupTool:
    """Command lines for one backup program."""

    name = ""
    default_backup_options: tuple[str, ...] = ()
    default_retention_options: tuple[str, ...] = ()

    def __init__(self, config=None) -> None:
        config = config or ToolConfig(backend=self.name)
        self.executable = config.executable or self.name
        self.backup_options = list(
            self.default_backup_options
            if config.backup_options is None
            else config.backup_options
        )
        self.retention_options = list(
            self.default_retention_options
            if config.retention_options is None
            else config.retention_options
        )

    def backup_command(self, source: str, destination: str) -> list[str]:
        raise NotImplementedError

    def retention_command(self, destination: str) -> list[str]:
        raise NotImplementedError


class RdiffBackupTool(BackupTool):
    """rdiff-backup: a mirror plus reverse increments in the destination."""

    name = "rdiff-backup"
    default_backup_options = ("--print-statistics",)
    default_retention_options = ("--remove-older-than", "1M", "--force")

    def backup_command(self, source: str, destination: str) -> list[str]:
        return [self.executable, *self.backup_options, source, destination]

    def retention_command(self, destination: str) -> list[str]:
        return [self.executable, *self.retention_options, destination]


class DuplicityTool(BackupTool):
    """duplicity: full and incremental volumes written to a file:// target."""

    name = "duplicity"
    default_backup_options = (
        "--volsize=100",
        "--no-encryption",
        "--full-if-older-than",
        "1M",
    )
    default_retention_options = ("remove-all-but-n-full", "1", "--force")

    def backup_command(self, source: str, destination: str) -> list[str]:
        return [self.executable, *self.backup_options, source, f"file://{destination}"]

    def retention_command(self, destination: str) -> list[str]:
        return [self.executable, *self.retention_options, f"file://{destination}"]


BACKENDS = {
    RdiffBackupTool.name: RdiffBackupTool,
    DuplicityTool.name: DuplicityTool,
}


def choose_tool(config=None) -> BackupTool:
    """Return the backup tool configured in config (rdiff-backup by default)."""
    config = config or ToolConfig()
    try:
        tool_class = BACKENDS[config.backend]
    except KeyError:
        raise ValueError(f"Unknown backup backend: {config.backend}")
    return tool_class(config)


def run_backup(resolved_path: str, destination: str, tool: BackupTool) -> None:
    """Back up resolved_path into destination, then prune old history.

    Raises:
        BackupFailed: If the backup run exits nonzero; retention is skipped.
        RetentionFailed: If the retention run exits nonzero.
    """
    logger.debug("Backing up %s to %s with %s", resolved_path, destination, tool.name)
    returncode = __util__.exec_subprocess(
        tool.backup_command(resolved_path, destination)
    )
    if returncode != 0:
        raise __util__.BackupFailed(f"{tool.name} backup failed.")

    returncode = __util__.exec_subprocess(tool.retention_command(destination))
    if returncode != 0:
        raise __util__.RetentionFailed(f"{tool.name} remove old files failed.")
