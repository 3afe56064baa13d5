"""Data models for source detection."""

from __future__ import annotations

from enum import Enum


class SourceKind(Enum):
    """Storage kind behind a source identifier."""

    DATASET = "zfs"
    LOGICAL_VOLUME = "lvm"
    DIRECTORY = "dir"
