# pyright: standard

"""rdiff-batch-backup: rdiff_batch_backup/endpoint/local.py
Plain directories are backed up in place.
"""

from .common import Endpoint


class LocalEndpoint(Endpoint):
    """A directory source: the path is handed through untouched."""

    def _acquire(self) -> str:
        return self.source
