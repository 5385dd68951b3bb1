"""Resolve a user-supplied identifier to a task."""

from __future__ import annotations

from dataclasses import dataclass

from tasq.tasks.ids import split_compact_id
from tasq.tasks.model import ParsedDocument, ProjectResult, Task


@dataclass
class Match:
    project: ProjectResult
    task: Task


def _find_substring(tasks: list[Task], needle: str) -> Task | None:
    folded = needle.casefold()
    for task in tasks:
        if folded in task.description.casefold():
            return task
    return None


def find_by_compact_id(identifier: str, results: list[ProjectResult]) -> Match | None:
    """``p2`` selects the second task of the project whose repo id is ``p``."""
    compact = split_compact_id(identifier)
    if compact is None:
        return None
    repo_id, number = compact
    for project in results:
        if project.repo_id == repo_id and 1 <= number <= len(project.tasks):
            return Match(project, project.tasks[number - 1])
    return None


def find_by_substring(identifier: str, results: list[ProjectResult]) -> Match | None:
    """First task, in scan order, whose description contains *identifier* (any case)."""
    for project in results:
        task = _find_substring(project.tasks, identifier)
        if task is not None:
            return Match(project, task)
    return None


def locate(identifier: str, results: list[ProjectResult]) -> Match | None:
    """Find a task across scanned projects: compact id first, then substring."""
    return find_by_compact_id(identifier, results) or find_by_substring(identifier, results)


def resolve_local(identifier: str, parsed: ParsedDocument) -> Task | None:
    """Find a task in one document: ``N`` is the Nth open task, else substring."""
    if identifier.isdecimal():
        number = int(identifier)
        open_tasks = parsed.open_tasks()
        if 1 <= number <= len(open_tasks):
            return open_tasks[number - 1]
    return _find_substring(parsed.tasks, identifier)
