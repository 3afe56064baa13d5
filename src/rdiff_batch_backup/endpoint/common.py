# pyright: standard

"""rdiff-batch-backup: rdiff_batch_backup/endpoint/common.py
Common functionality among source endpoints.
"""

import contextlib
import subprocess

from rdiff_batch_backup import __util__
from rdiff_batch_backup.__logger__ import logger
from rdiff_batch_backup.config import SnapshotConfig


class Endpoint:
    """Generic structure of a source endpoint.

    An endpoint turns a task source into a filesystem path that can be backed
    up (``acquire``) and undoes whatever that took (``release``). Endpoints
    whose sources are already plain paths keep the no-op defaults.
    """

    def __init__(self, source, config=None) -> None:
        """
        Initialize the Endpoint for one task source.

        Args:
            source (str): The source identifier from the task.
            config (SnapshotConfig): Snapshot settings, defaults if omitted.
        """
        self.source = source
        self.config = config or SnapshotConfig()
        self.resolved_path = None

    def acquire(self) -> str:
        """Make the source available as a path and return that path."""
        logger.debug("Acquiring %r ...", self)
        self.resolved_path = self._acquire()
        logger.debug("%r resolved to %s", self, self.resolved_path)
        return self.resolved_path

    def release(self) -> None:
        """Undo acquire. Failures are raised, never downgraded."""
        logger.debug("Releasing %r ...", self)
        self._release()
        self.resolved_path = None

    def abandon(self) -> None:
        """Best-effort undo after a failure; problems are only warned about."""
        self._abandon()
        self.resolved_path = None

    def leftovers(self) -> list[str]:
        """Describe resources acquire left behind, for a kept failed task."""
        return []

    # The following methods may be implemented by endpoints unless the
    # default behaviour is wanted.

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source})"

    def _acquire(self) -> str:
        raise NotImplementedError

    def _release(self) -> None:
        pass

    def _abandon(self) -> None:
        pass

    def _query_command(self, command) -> subprocess.CompletedProcess:
        return __util__.query_subprocess(__util__.privileged(command))

    def _exec_command(self, command, error_cls, message) -> None:
        """Run a privileged command, raising error_cls on nonzero exit."""
        returncode = __util__.exec_subprocess(__util__.privileged(command))
        if returncode != 0:
            raise error_cls(message)


@contextlib.contextmanager
def acquired(endpoint, keep_failed=False):
    """Scope an endpoint's acquisition around a block.

    On success the endpoint is released and release errors propagate. On any
    failure, including a failure inside acquire itself, whatever was acquired
    is abandoned best-effort before the original error is re-raised, unless
    keep_failed asks to leave it in place for inspection.
    """
    try:
        yield endpoint.acquire()
    except Exception:
        if keep_failed:
            for item in endpoint.leftovers():
                logger.warning("Left in place for inspection: %s", item)
        else:
            endpoint.abandon()
        raise
    endpoint.release()
