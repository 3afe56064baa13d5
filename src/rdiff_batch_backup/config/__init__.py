"""Configuration system for rdiff-batch-backup.

This module provides TOML-based configuration loading, validation,
and schema definitions for the fixed tool and snapshot settings.
"""

from .loader import (
    ConfigError,
    find_config_file,
    load_config,
)
from .schema import (
    Config,
    GlobalConfig,
    SnapshotConfig,
    ToolConfig,
)

__all__ = [
    "GlobalConfig",
    "SnapshotConfig",
    "ToolConfig",
    "Config",
    "load_config",
    "find_config_file",
    "ConfigError",
]
