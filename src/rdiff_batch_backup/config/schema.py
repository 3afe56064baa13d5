"""Configuration schema definitions using dataclasses.

Defines the structure for TOML configuration with sensible defaults.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ToolConfig:
    """Backup tool configuration.

    Attributes:
        backend: Backup tool flavour ("rdiff-backup" or "duplicity")
        executable: Program to run (defaults to the backend's own name)
        backup_options: Options for the backup run (None for backend defaults)
        retention_options: Options for the pruning run (None for backend defaults)
    """

    backend: str = "rdiff-backup"
    executable: Optional[str] = None
    backup_options: Optional[list[str]] = None
    retention_options: Optional[list[str]] = None


@dataclass
class SnapshotConfig:
    """Logical volume snapshot configuration.

    Attributes:
        prefix: Prepended to the logical volume name to name its snapshot
        mount_root: Directory under which snapshots are mounted
        device_dir: Directory holding block device nodes
        mount_options: Extra options passed to mount
        keep_failed: Leave a snapshot mounted when its task fails
    """

    prefix: str = "snap_"
    mount_root: str = "/mnt"
    device_dir: str = "/dev"
    mount_options: list[str] = field(default_factory=list)
    keep_failed: bool = False


@dataclass
class GlobalConfig:
    """Global configuration settings.

    Attributes:
        log_file: Path to the persistent log file
        verbose: Echo every line to the console
        flush_delay: Seconds to wait for tool output before section breaks
    """

    log_file: str = "/var/log/backup"
    verbose: bool = False
    flush_delay: float = 2.0


@dataclass
class Config:
    """Root configuration object."""

    global_config: GlobalConfig = field(default_factory=GlobalConfig)
    snapshot: SnapshotConfig = field(default_factory=SnapshotConfig)
    tool: ToolConfig = field(default_factory=ToolConfig)
