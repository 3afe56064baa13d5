"""Command line interface for rdiff-batch-backup."""

from .dispatcher import main

__all__ = ["main"]
