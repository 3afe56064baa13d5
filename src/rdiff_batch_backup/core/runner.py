"""Run a batch of backup tasks one after another.

Each task goes through resolve, acquire, backup, retention and release. The
first failure anywhere aborts the whole batch: it is reported, and no later
task is started.
"""

import time
from enum import Enum

from .. import __util__
from ..__logger__ import Severity, emit, logger
from ..config import Config
from ..detection import resolve_source, validate_destination
from ..endpoint import acquired, choose_endpoint
from .backup import choose_tool, run_backup


class BatchState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


def report_abort(error: __util__.AbortError, delay: float, sleep=time.sleep) -> None:
    """Report a fatal error after letting pending tool output settle."""
    if delay:
        sleep(delay)
    emit(Severity.ERROR, str(error))
    emit(Severity.INFO, "")


class BatchRunner:
    """Drive a task batch through its states: idle, running, then completed or aborted."""

    def __init__(self, config=None, tool=None, sleep=time.sleep) -> None:
        self.config = config or Config()
        self.tool = tool or choose_tool(self.config.tool)
        self.state = BatchState.IDLE
        self.completed = []
        self._sleep = sleep

    def run(self, tasks) -> int:
        """Run every task in order and return the process exit status."""
        if self.state is not BatchState.IDLE:
            raise RuntimeError(f"Batch already {self.state.value}")

        self.state = BatchState.RUNNING
        emit(Severity.INFO, "")
        try:
            for task in tasks:
                self.run_task(task)
        except __util__.AbortError as e:
            self.state = BatchState.ABORTED
            logger.debug("Aborting batch after %d task(s): %r", len(self.completed), e)
            report_abort(e, self.config.global_config.flush_delay, self._sleep)
            return 1

        self.state = BatchState.COMPLETED
        return 0

    def run_task(self, task) -> None:
        """Back up a single task, raising AbortError on any failure."""
        emit(Severity.INFO, f"## Backup {task.source}")
        emit(Severity.INFO, "")

        kind = resolve_source(task.source, self.config.snapshot.device_dir)
        logger.info("Source %s detected as %s", task.source, kind.value)
        if task.kind_hint and task.kind_hint != kind.value:
            logger.debug("Ignoring type %r given for %s", task.kind_hint, task.source)
        validate_destination(task.destination)

        endpoint = choose_endpoint(kind, task.source, self.config.snapshot)
        with acquired(endpoint, keep_failed=self.config.snapshot.keep_failed) as path:
            run_backup(path, task.destination, self.tool)

        self._pause()
        emit(Severity.INFO, "")
        emit(Severity.SUCCESS, f"Backup {task.source}.")
        emit(Severity.INFO, "")
        self.completed.append(task)

    def _pause(self) -> None:
        if self.config.global_config.flush_delay:
            self._sleep(self.config.global_config.flush_delay)
