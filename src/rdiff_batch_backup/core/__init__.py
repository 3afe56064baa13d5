"""Core backup operations for rdiff-batch-backup."""

from .backup import BackupTool, choose_tool, run_backup
from .runner import BatchRunner, BatchState, report_abort

__all__ = [
    "BackupTool",
    "BatchRunner",
    "BatchState",
    "choose_tool",
    "report_abort",
    "run_backup",
]
