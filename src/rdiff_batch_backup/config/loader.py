"""TOML configuration loading and validation.

Handles config file discovery, parsing, and validation with helpful error messages.
"""

import tomllib
from pathlib import Path
from typing import Any

from .schema import (
    Config,
    GlobalConfig,
    SnapshotConfig,
    ToolConfig,
)


class ConfigError(Exception):
    """Configuration loading or validation error."""

    pass


# Config file search paths in priority order
CONFIG_PATHS = [
    Path.home() / ".config" / "rdiff-batch-backup" / "config.toml",
    Path("/etc/rdiff-batch-backup/config.toml"),
]

BACKENDS = frozenset({"rdiff-backup", "duplicity"})


def find_config_file() -> Path | None:
    """Find configuration file.

    Returns:
        Path to the first existing file in CONFIG_PATHS, or None if not found
    """
    for path in CONFIG_PATHS:
        if path.exists():
            return path

    return None


def _string_list(data: dict[str, Any], key: str) -> list[str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return list(value)


def _parse_global(data: dict[str, Any]) -> GlobalConfig:
    """Parse global configuration from dict."""
    return GlobalConfig(
        log_file=data.get("log_file", "/var/log/backup"),
        verbose=data.get("verbose", False),
        flush_delay=data.get("flush_delay", 2.0),
    )


def _parse_snapshot(data: dict[str, Any]) -> SnapshotConfig:
    """Parse snapshot configuration from dict."""
    return SnapshotConfig(
        prefix=data.get("prefix", "snap_"),
        mount_root=data.get("mount_root", "/mnt"),
        device_dir=data.get("device_dir", "/dev"),
        mount_options=_string_list(data, "mount_options") or [],
        keep_failed=data.get("keep_failed", False),
    )


def _parse_tool(data: dict[str, Any]) -> ToolConfig:
    """Parse backup tool configuration from dict."""
    return ToolConfig(
        backend=data.get("backend", "rdiff-backup"),
        executable=data.get("executable"),
        backup_options=_string_list(data, "backup_options"),
        retention_options=_string_list(data, "retention_options"),
    )


def validate_config(config: Config) -> None:
    """Reject values the run cannot work with.

    Raises:
        ConfigError: On the first invalid value found
    """
    if config.tool.backend not in BACKENDS:
        raise ConfigError(
            f"Unknown backup backend '{config.tool.backend}' "
            f"(expected one of: {', '.join(sorted(BACKENDS))})"
        )

    if not isinstance(config.global_config.verbose, bool):
        raise ConfigError("'verbose' must be true or false")

    if not isinstance(config.snapshot.keep_failed, bool):
        raise ConfigError("Snapshot 'keep_failed' must be true or false")

    # bool is a subclass of int
    delay = config.global_config.flush_delay
    if isinstance(delay, bool) or not isinstance(delay, (int, float)) or delay < 0:
        raise ConfigError("'flush_delay' must be a non-negative number")

    if not config.snapshot.prefix:
        raise ConfigError("Snapshot 'prefix' must not be empty")

    if "/" in config.snapshot.prefix:
        raise ConfigError("Snapshot 'prefix' must not contain '/'")


def load_config(path: Path | str | None) -> Config:
    """Load and validate configuration from TOML file.

    Args:
        path: Path to configuration file, or None for the defaults

    Returns:
        Config object

    Raises:
        ConfigError: If config is invalid or cannot be parsed
    """
    if path is None:
        return Config()

    path = Path(path)

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML syntax: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}")

    config = Config(
        global_config=_parse_global(data.get("global", {})),
        snapshot=_parse_snapshot(data.get("snapshot", {})),
        tool=_parse_tool(data.get("tool", {})),
    )

    validate_config(config)

    return config

