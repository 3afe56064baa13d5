"""Tests for subprocess helpers and the error hierarchy."""

import pytest

from rdiff_batch_backup import __util__
from rdiff_batch_backup.__util__ import (
    AbortError,
    exec_subprocess,
    log_heading,
    privileged,
    query_subprocess,
)


class TestErrorHierarchy:
    """Every failure aborts the run, grouped by where it happens."""

    @pytest.mark.parametrize(
        "error_cls, group",
        [
            (__util__.LogSetupFailed, __util__.SetupError),
            (__util__.NoValidSource, __util__.SourceError),
            (__util__.InvalidDestination, __util__.SourceError),
            (__util__.DatasetNotMounted, __util__.SourceError),
            (__util__.SnapshotCreateFailed, __util__.SnapshotError),
            (__util__.MountDirCreateFailed, __util__.SnapshotError),
            (__util__.MountFailed, __util__.SnapshotError),
            (__util__.UnmountFailed, __util__.SnapshotError),
            (__util__.MountDirRemoveFailed, __util__.SnapshotError),
            (__util__.SnapshotRemoveFailed, __util__.SnapshotError),
            (__util__.BackupFailed, __util__.ToolError),
            (__util__.RetentionFailed, __util__.ToolError),
        ],
    )
    def test_groups(self, error_cls, group):
        assert issubclass(error_cls, group)
        assert issubclass(error_cls, AbortError)


class TestPrivileged:
    """Tests for privileged."""

    def test_root_runs_directly(self, monkeypatch):
        monkeypatch.setattr(__util__.os, "geteuid", lambda: 0)
        assert privileged(["lvs", "vg0/data"]) == ["lvs", "vg0/data"]

    def test_user_goes_through_sudo(self, monkeypatch):
        monkeypatch.setattr(__util__.os, "geteuid", lambda: 1000)
        assert privileged(["lvs", "vg0/data"]) == ["sudo", "-n", "lvs", "vg0/data"]


class TestQuerySubprocess:
    """Tests for query_subprocess."""

    def test_captures_output(self):
        result = query_subprocess(["sh", "-c", "echo hello; exit 3"])
        assert result.returncode == 3
        assert result.stdout == "hello\n"

    def test_missing_program_is_a_failed_query(self):
        result = query_subprocess(["definitely-not-a-real-program-xyz"])
        assert result.returncode == __util__.TOOL_NOT_FOUND
        assert result.stdout == ""


class TestExecSubprocess:
    """Tests for exec_subprocess and its output routing."""

    def test_returns_exit_status(self, reporter):
        assert exec_subprocess(["sh", "-c", "exit 0"]) == 0
        assert exec_subprocess(["sh", "-c", "exit 4"]) == 4

    def test_routes_streams_by_severity(self, reporter):
        exec_subprocess(["sh", "-c", "echo to-stdout; echo to-stderr >&2"])
        entries = reporter.log_entries()
        assert ("INF", "to-stdout") in entries
        assert ("WAR", "to-stderr") in entries

    def test_keeps_tool_text_verbatim(self, reporter):
        exec_subprocess(["sh", "-c", "printf '  indented: [x] 100%%\\n'"])
        assert ("INF", "  indented: [x] 100%") in reporter.log_entries()

    def test_stderr_never_changes_status(self, reporter):
        assert exec_subprocess(["sh", "-c", "echo ERROR: fatal >&2; exit 0"]) == 0

    def test_missing_program(self, reporter):
        assert (
            exec_subprocess(["definitely-not-a-real-program-xyz"])
            == __util__.TOOL_NOT_FOUND
        )
        tags = [tag for tag, _ in reporter.log_entries()]
        assert tags == ["WAR"]


def test_log_heading():
    lines = log_heading("Backup, today").splitlines()
    assert lines[1] == "# Backup, today"
    assert lines[0] == lines[2] == "#" * 74
