# pyright: standard

"""rdiff-batch-backup: rdiff_batch_backup/endpoint/dataset.py
Back up ZFS datasets straight from their mount point.
"""

from rdiff_batch_backup import __util__

from .common import Endpoint

UNUSABLE_MOUNTPOINTS = frozenset({"", "-", "none", "legacy"})


class DatasetEndpoint(Endpoint):
    """Resolve a dataset to where it is mounted; nothing to release."""

    def _acquire(self) -> str:
        result = __util__.query_subprocess(
            ["zfs", "list", "-H", "-o", "mounted,mountpoint", self.source]
        )
        fields = result.stdout.strip().split("\t") if result.returncode == 0 else []
        if len(fields) != 2:
            raise __util__.DatasetNotMounted(
                f"Could not determine mount point of {self.source}."
            )
        mounted, mountpoint = fields
        if mounted != "yes" or mountpoint in UNUSABLE_MOUNTPOINTS:
            raise __util__.DatasetNotMounted(
                f"{self.source} is not mounted (mountpoint: {mountpoint or '-'})."
            )
        return mountpoint
