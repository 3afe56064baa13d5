"""Resolve task sources and destinations.

The storage kind of a source is found by running a fixed, ordered list of
probes. Each probe only queries the system and returns the kind it recognized
or None; the first hit decides, so an identifier that would satisfy several
probes is a dataset before a logical volume, and a logical volume before a
directory.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Optional

from .. import __util__
from ..__logger__ import logger
from .models import SourceKind

Probe = Callable[[str, str], Optional[SourceKind]]


def probe_dataset(identifier: str, device_dir: str) -> Optional[SourceKind]:
    """Recognize a ZFS dataset by asking ``zfs list`` about it."""
    result = __util__.query_subprocess(["zfs", "list", "-H", identifier])
    if result.returncode == 0:
        return SourceKind.DATASET
    return None


def block_device_path(identifier: str, device_dir: str) -> Optional[Path]:
    """Return the block device node the identifier names, if any.

    The identifier may be a device path itself or relative to device_dir,
    as in ``vg0/data`` for ``/dev/vg0/data``.
    """
    for candidate in (Path(identifier), Path(device_dir) / identifier):
        try:
            if candidate.is_block_device():
                return candidate
        except OSError:
            continue
    return None


def probe_logical_volume(identifier: str, device_dir: str) -> Optional[SourceKind]:
    """Recognize an LVM logical volume: a block device ``lvs`` knows about."""
    device = block_device_path(identifier, device_dir)
    if device is None:
        return None
    logger.debug("%s is a block device: %s", identifier, device)
    result = __util__.query_subprocess(__util__.privileged(["lvs", identifier]))
    if result.returncode == 0:
        return SourceKind.LOGICAL_VOLUME
    return None


def probe_directory(identifier: str, device_dir: str) -> Optional[SourceKind]:
    """Recognize a plain, readable directory."""
    if os.path.isdir(identifier) and os.access(identifier, os.R_OK):
        return SourceKind.DIRECTORY
    return None


PROBES: tuple[Probe, ...] = (
    probe_dataset,
    probe_logical_volume,
    probe_directory,
)


def resolve_source(identifier: str, device_dir: str = "/dev") -> SourceKind:
    """Determine the storage kind of a source identifier.

    Args:
        identifier: Dataset name, logical volume or directory path.
        device_dir: Where block device nodes live.

    Returns:
        The kind reported by the first matching probe.

    Raises:
        NoValidSource: If no probe recognizes the identifier.
    """
    for probe in PROBES:
        kind = probe(identifier, device_dir)
        if kind is not None:
            logger.debug("%s resolved as %s by %s", identifier, kind.value, probe.__name__)
            return kind
    raise __util__.NoValidSource(f"{identifier} is not a valid source.")


def validate_destination(destination: str) -> Path:
    """Check that the destination is an existing, writable directory.

    Raises:
        InvalidDestination: If it is missing, not a directory or read-only.
    """
    path = Path(destination)
    try:
        is_dir = path.is_dir()
    except OSError as e:
        # e.g. EACCES on a parent directory
        raise __util__.InvalidDestination(
            f"{destination} is not a valid path for the backup."
        ) from e
    if not is_dir:
        raise __util__.InvalidDestination(
            f"{destination} is not a valid path for the backup."
        )
    if not os.access(path, os.W_OK):
        raise __util__.InvalidDestination(f"{destination} is not writable.")
    return path
