"""Task batch parsing.

A task line reads ``<source> <destination> [type] [ignored...]``. The type
token is accepted for compatibility with older task files but the storage
kind is always detected from the source itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .__util__ import UsageError


@dataclass(frozen=True)
class Task:
    """One source to back up into one destination."""

    source: str
    destination: str
    kind_hint: Optional[str] = None


def is_task_line(line: str) -> bool:
    """Return False for blank lines and comments."""
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith("#")


def parse_task_line(line: str) -> Task:
    """Split a task line on whitespace into a Task.

    Raises:
        UsageError: If the line has fewer than two fields.
    """
    fields = line.split()
    if len(fields) < 2:
        raise UsageError(f"'{line.strip()}' is not a valid task.")
    kind_hint = fields[2] if len(fields) > 2 else None
    return Task(source=fields[0], destination=fields[1], kind_hint=kind_hint)


def parse_task_lines(lines: Iterable[str]) -> list[Task]:
    return [parse_task_line(line) for line in lines if is_task_line(line)]


def read_task_file(path: Path | str) -> list[Task]:
    """Read every task of a batch file, in file order.

    Raises:
        UsageError: If the file cannot be read or holds a malformed task.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise UsageError(f"file '{path}' cannot be read.") from e
    return parse_task_lines(text.splitlines())


def tasks_from_args(args: list[str]) -> list[Task]:
    """Interpret positional arguments as a task batch.

    A single argument names a task file; two or more form one inline task.

    Raises:
        UsageError: If no arguments are given.
    """
    if not args:
        raise UsageError("No task file or task given.")
    if len(args) == 1:
        return read_task_file(args[0])
    kind_hint = args[2] if len(args) > 2 else None
    return [Task(source=args[0], destination=args[1], kind_hint=kind_hint)]
