"""Pytest configuration and shared fixtures."""

import io
import os
import re
import shutil
import subprocess
from pathlib import Path

import pytest
from rich.console import Console

from rdiff_batch_backup import __logger__, __util__
from rdiff_batch_backup.config import Config

LOG_LINE = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] (INF|WAR|ERR): (.*)$")


class Reporter:
    """Handle on a configured logger: its log file and captured console."""

    def __init__(self, log_file: Path, console_buffer: io.StringIO) -> None:
        self.log_file = log_file
        self.console_buffer = console_buffer

    def log_lines(self) -> list[str]:
        if not self.log_file.exists():
            return []
        return self.log_file.read_text().splitlines()

    def log_entries(self) -> list[tuple[str, str]]:
        """Return (tag, text) for every log line, checking the line format."""
        entries = []
        for line in self.log_lines():
            match = LOG_LINE.match(line)
            assert match, f"malformed log line: {line!r}"
            entries.append((match.group(1), match.group(2)))
        return entries

    def successes(self) -> list[str]:
        return [
            text[len("SUCCESS - ") :]
            for tag, text in self.log_entries()
            if tag == "INF" and text.startswith("SUCCESS - ")
        ]

    def console(self) -> str:
        return self.console_buffer.getvalue()


def make_reporter(tmp_path: Path, verbose: bool) -> Reporter:
    buffer = io.StringIO()
    log_file = tmp_path / "log" / "backup.log"
    __logger__.create_logger(
        verbose, log_file, console=Console(file=buffer, width=200)
    )
    return Reporter(log_file, buffer)


@pytest.fixture
def reporter(tmp_path):
    """A quiet logger writing to a temporary log file."""
    yield make_reporter(tmp_path, verbose=False)
    __logger__.close_logger()


@pytest.fixture
def verbose_reporter(tmp_path):
    """A verbose logger writing to a temporary log file."""
    yield make_reporter(tmp_path, verbose=True)
    __logger__.close_logger()


@pytest.fixture
def as_root(monkeypatch):
    """Pretend to run as root so commands are not prefixed with sudo."""
    monkeypatch.setattr(__util__.os, "geteuid", lambda: 0)


class FakeCommands:
    """Record commands instead of running them.

    Queries answer from registered prefixes (unknown queries fail); executed
    commands succeed unless an exit status was registered for them. Plain
    mkdir and rm calls act on the real filesystem, so mount folders appear
    and vanish as they would on a host.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self._queries: list[tuple[list[str], int, str]] = []
        self._exits: list[tuple[str, str | None, int]] = []

    def on_query(self, prefix: list[str], stdout: str = "", returncode: int = 0):
        self._queries.append((list(prefix), returncode, stdout))

    def on_exec(self, program: str, returncode: int, containing: str | None = None):
        self._exits.append((program, containing, returncode))

    def query_subprocess(self, command):
        self.calls.append(list(command))
        for prefix, returncode, stdout in self._queries:
            if list(command[: len(prefix)]) == prefix:
                return subprocess.CompletedProcess(command, returncode, stdout, "")
        return subprocess.CompletedProcess(command, 1, "", "not found")

    def exec_subprocess(self, command):
        self.calls.append(list(command))
        for program, containing, returncode in self._exits:
            if command[0] == program and (containing is None or containing in command):
                return returncode
        return self._filesystem(command)

    @staticmethod
    def _filesystem(command) -> int:
        target = Path(command[-1])
        try:
            if command[0] == "mkdir":
                target.mkdir(mode=0o700)
            elif command[0] == "rm":
                shutil.rmtree(target)
        except OSError:
            return 1
        return 0

    def programs(self) -> list[str]:
        return [call[0] for call in self.calls]

    def executed(self, program: str) -> list[list[str]]:
        return [call for call in self.calls if call[0] == program]


@pytest.fixture
def fake_commands(monkeypatch, as_root):
    """Replace every external command with a FakeCommands recorder."""
    fake = FakeCommands()
    monkeypatch.setattr(__util__, "query_subprocess", fake.query_subprocess)
    monkeypatch.setattr(__util__, "exec_subprocess", fake.exec_subprocess)
    return fake


@pytest.fixture
def no_volume_managers(monkeypatch):
    """Make zfs and lvs queries fail, as on a host without either."""

    def query(command):
        return subprocess.CompletedProcess(command, 1, "", "")

    monkeypatch.setattr(__util__, "query_subprocess", query)


@pytest.fixture
def locked_dir(tmp_path, monkeypatch):
    """A directory whose contents cannot be looked up (EACCES on stat)."""
    locked = tmp_path / "locked"
    real_stat = os.stat

    def stat(path, *args, **kwargs):
        if isinstance(path, (str, os.PathLike)) and str(path).startswith(
            str(locked) + os.sep
        ):
            raise PermissionError(13, "Permission denied", str(path))
        return real_stat(path, *args, **kwargs)

    monkeypatch.setattr(os, "stat", stat)
    return locked


@pytest.fixture
def stub_tool(tmp_path):
    """An executable standing in for rdiff-backup.

    It appends its arguments to calls.txt next to itself, prints a line on
    each stream and exits with the status stored in status.txt (0 if absent).
    """
    tool_dir = tmp_path / "tool"
    tool_dir.mkdir()
    script = tool_dir / "fake-rdiff-backup"
    script.write_text(
        "#!/bin/sh\n"
        'here="$(dirname "$0")"\n'
        'echo "$@" >> "$here/calls.txt"\n'
        'echo "Elapsed time: 0.01 seconds"\n'
        'echo "warning: special file skipped" >&2\n'
        'if [ -f "$here/status.txt" ]; then exit "$(cat "$here/status.txt")"; fi\n'
        "exit 0\n"
    )
    script.chmod(0o755)
    return script


@pytest.fixture
def stub_calls(stub_tool):
    """Return a function listing the argument lines the stub tool received."""

    def read() -> list[str]:
        calls = stub_tool.parent / "calls.txt"
        if not calls.exists():
            return []
        return calls.read_text().splitlines()

    return read


@pytest.fixture
def stub_exit(stub_tool):
    """Return a function setting the stub tool's exit status."""

    def set_status(status: int) -> None:
        (stub_tool.parent / "status.txt").write_text(f"{status}\n")

    return set_status


@pytest.fixture
def fast_config(stub_tool):
    """Default configuration without flush delays, using the stub tool."""
    config = Config()
    config.global_config.flush_delay = 0
    config.tool.executable = str(stub_tool)
    return config
