"""Parse ``TASKS.md`` markdown into a :class:`ParsedDocument`.

Format::

    # Project name
    Free text description.

    ## Context
    files: src/**/*.py, docs/*.md
    repos: ../shared-lib

    ## Goals
    - [ ] A goal

    ## Tasks
    Notes written before the first checkbox.
    - [ ] pending
    - [~] in progress
    - [x] completed

Every checkbox counts as a task whatever section it sits in; ``## Goals``
checkboxes are also collected into ``goals``. Unrecognized lines are plain
text, so parsing never fails.
"""

from __future__ import annotations

import re

from tasq.tasks.model import ContextDirective, ParsedDocument, Task, TaskStatus

CHECKBOX_RE = re.compile(r"^(?:-\s*)?\[([ xX~]?)\]\s*(.*)$")
FENCE_RE = re.compile(r"^```[\w+#.-]*$")

HEADER_SECTION = object()
GOALS_SECTION = "goals"
TASKS_SECTION = "tasks"
CONTEXT_SECTION = "context"


def match_checkbox(line: str) -> tuple[TaskStatus, str] | None:
    """Return ``(status, description)`` when *line* is a checkbox item."""
    m = CHECKBOX_RE.match(line.strip())
    if not m:
        return None
    return TaskStatus.from_marker_char(m.group(1)), m.group(2).strip()


def _heading(stripped: str, level: int) -> str | None:
    prefix = "#" * level + " "
    if stripped.startswith(prefix):
        return stripped[len(prefix):].strip()
    return None


def section_name(line: str) -> str | None:
    """Case-folded name of a ``## `` heading line, else ``None``."""
    heading = _heading(line.strip(), 2)
    return heading.casefold() if heading is not None else None


def _append(existing: str, line: str) -> str:
    return f"{existing}\n{line}" if existing else line


def parse(text: str, default_name: str = "") -> ParsedDocument:
    """Parse markdown *text*; ``default_name`` is used when there is no ``# title``."""
    lines = text.split("\n")
    doc = ParsedDocument(lines=list(lines))

    section: object = None
    in_tasks = False
    seen_checkbox = False
    in_fence = False
    has_title = False

    for i, line in enumerate(lines):
        stripped = line.strip()

        if FENCE_RE.match(stripped):
            in_fence = not in_fence
        elif not in_fence:
            title = _heading(stripped, 1)
            if title is not None:
                if not has_title:
                    doc.name = title
                    has_title = True
                    section = HEADER_SECTION
                    in_tasks = False
                continue

            heading = _heading(stripped, 2)
            if heading is not None:
                section = heading.casefold()
                in_tasks = section == TASKS_SECTION
                seen_checkbox = False
                continue

            checkbox = match_checkbox(stripped)
            if checkbox is not None:
                status, description = checkbox
                tagged = section if isinstance(section, str) else None
                task = Task(line=i, status=status, description=description, section=tagged)
                seen_checkbox = True
                if tagged == GOALS_SECTION:
                    doc.goals.append(task)
                doc.tasks.append(task)
                continue

        if not stripped or (stripped.startswith("#") and not in_fence):
            continue
        if section is HEADER_SECTION:
            doc.description = _append(doc.description, line.rstrip("\r"))
        elif in_tasks and not seen_checkbox:
            doc.notes = _append(doc.notes, line.rstrip("\r"))

    if not has_title:
        doc.name = default_name
    return doc


def _split_tokens(value: str) -> list[str]:
    return [token.strip() for token in value.split(",") if token.strip()]


def parse_context(text: str) -> ContextDirective:
    """Collect ``files:`` and ``repos:`` entries from the ``## Context`` section."""
    directive = ContextDirective()
    active = False

    for line in text.split("\n"):
        stripped = line.strip()
        heading = _heading(stripped, 2)
        if heading is not None:
            active = heading.casefold() == CONTEXT_SECTION
            continue
        if not active:
            continue

        lower = stripped.lower()
        if lower.startswith("files:"):
            directive.files.extend(_split_tokens(stripped[len("files:"):]))
        elif lower.startswith("repos:"):
            directive.repos.extend(_split_tokens(stripped[len("repos:"):]))

    return directive
