"""Task, document and project data models shared by parser, scanner and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @property
    def marker(self) -> str:
        return _MARKERS[self]

    @property
    def icon(self) -> str:
        return _ICONS[self]

    @classmethod
    def from_marker_char(cls, char: str) -> TaskStatus:
        """Map the character between the checkbox brackets to a status."""
        return _CHAR_STATUS.get(char, cls.PENDING)


_MARKERS = {
    TaskStatus.PENDING: "[ ]",
    TaskStatus.IN_PROGRESS: "[~]",
    TaskStatus.COMPLETED: "[x]",
}

_ICONS = {
    TaskStatus.PENDING: "○",
    TaskStatus.IN_PROGRESS: "→",
    TaskStatus.COMPLETED: "✓",
}

_CHAR_STATUS = {
    "": TaskStatus.PENDING,
    " ": TaskStatus.PENDING,
    "~": TaskStatus.IN_PROGRESS,
    "x": TaskStatus.COMPLETED,
    "X": TaskStatus.COMPLETED,
}


@dataclass
class Task:
    line: int
    status: TaskStatus = TaskStatus.PENDING
    description: str = ""
    section: str | None = None
    id: str | None = None
    goal: str | None = None

    @property
    def is_open(self) -> bool:
        return self.status is not TaskStatus.COMPLETED


@dataclass
class ParsedDocument:
    """One parsed ``TASKS.md``.

    ``goals`` holds the same ``Task`` objects as ``tasks`` (those found under
    ``## Goals``); ``lines`` is the file split on ``\\n``, kept verbatim so a
    status change can be written back without touching anything else.
    """

    name: str = ""
    description: str = ""
    notes: str = ""
    goals: list[Task] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)

    def text(self) -> str:
        return "\n".join(self.lines)

    def open_tasks(self) -> list[Task]:
        return [t for t in self.tasks if t.is_open]


@dataclass
class ContextDirective:
    files: list[str] = field(default_factory=list)
    repos: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.files and not self.repos


@dataclass
class ProjectResult:
    path: Path
    project_name: str
    rel_path: str
    parsed: ParsedDocument
    tasks: list[Task] = field(default_factory=list)
    repo_id: str = ""

    @property
    def project_dir(self) -> Path:
        return self.path.parent

    def with_ids(self, repo_id: str) -> ProjectResult:
        """Return a copy whose tasks are independent copies tagged ``{repo_id}{n}``."""
        tasks = [
            replace(t, id=f"{repo_id}{i + 1}") for i, t in enumerate(self.parsed.tasks)
        ]
        return replace(self, tasks=tasks, repo_id=repo_id)


def group_by_status(tasks: list[Task]) -> tuple[list[Task], list[Task], list[Task]]:
    """Split *tasks* into ``(pending, in_progress, completed)`` keeping order."""
    pending = [t for t in tasks if t.status is TaskStatus.PENDING]
    in_progress = [t for t in tasks if t.status is TaskStatus.IN_PROGRESS]
    completed = [t for t in tasks if t.status is TaskStatus.COMPLETED]
    return pending, in_progress, completed
