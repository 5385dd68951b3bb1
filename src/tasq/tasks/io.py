"""Read, create and edit ``TASKS.md`` files on disk."""

from __future__ import annotations

import re
from pathlib import Path

from tasq.errors import TaskFileError
from tasq.io_utils import read_text_exact, write_text, write_text_atomic
from tasq.tasks.model import ParsedDocument, TaskStatus
from tasq.tasks.parser import FENCE_RE, match_checkbox, parse, section_name

TASKS_FILE = "TASKS.md"

_MARKER_RE = re.compile(r"^(\s*(?:-\s*)?)\[[ xX~]?\]")

_TEMPLATE = """# {name}

{description}

## Goals
- [ ] Goal 1
- [ ] Goal 2

## Tasks
- [ ] Task 1
- [ ] Task 2
"""


def tasks_path(base: Path) -> Path:
    return base / TASKS_FILE


def load_tasks(path: Path) -> ParsedDocument:
    """Read and parse *path*; raise :class:`TaskFileError` when it cannot be read."""
    try:
        content = read_text_exact(path)
    except FileNotFoundError:
        raise TaskFileError(f"No {TASKS_FILE} found at {path}") from None
    except (OSError, UnicodeDecodeError) as exc:
        raise TaskFileError(f"Cannot read {path}: {exc}") from exc
    return parse(content, default_name=path.resolve().parent.name)


def read_tasks(path: Path) -> ParsedDocument | None:
    """Like :func:`load_tasks` but return ``None`` when the file does not exist."""
    if not path.is_file():
        return None
    return load_tasks(path)


def write_tasks(path: Path, parsed: ParsedDocument) -> None:
    try:
        write_text_atomic(path, parsed.text())
    except OSError as exc:
        raise TaskFileError(f"Cannot write {path}: {exc}") from exc


def set_status(path: Path, line_index: int, status: TaskStatus) -> ParsedDocument:
    """Rewrite the checkbox marker on *line_index* and return the re-parsed file.

    Only the ``[ ]``/``[~]``/``[x]`` token changes; indentation, the bullet,
    the description and every other line are written back unchanged.
    """
    parsed = load_tasks(path)
    if not 0 <= line_index < len(parsed.lines):
        raise TaskFileError(f"Line {line_index + 1} is out of range in {path}")

    line = parsed.lines[line_index]
    new_line, count = _MARKER_RE.subn(lambda m: f"{m.group(1)}{status.marker}", line, count=1)
    if not count:
        raise TaskFileError(f"Line {line_index + 1} of {path} is not a task: {line.strip()!r}")

    parsed.lines[line_index] = new_line
    write_tasks(path, parsed)
    return parse(parsed.text(), default_name=parsed.name)


def describe_line(parsed: ParsedDocument, line_index: int) -> str:
    """Return the task description on *line_index*, or ``""``."""
    if not 0 <= line_index < len(parsed.lines):
        return ""
    checkbox = match_checkbox(parsed.lines[line_index])
    return checkbox[1] if checkbox else ""


def init_tasks(base: Path, name: str = "", description: str = "", force: bool = False) -> Path:
    """Create a starter ``TASKS.md`` in *base* and return its path."""
    path = tasks_path(base)
    if path.exists() and not force:
        raise TaskFileError(f"{TASKS_FILE} already exists. Use --force to overwrite.")

    content = _TEMPLATE.format(name=name or base.resolve().name, description=description)
    try:
        write_text(path, content)
    except OSError as exc:
        raise TaskFileError(f"Cannot write {path}: {exc}") from exc
    return path


def _insert_index(lines: list[str]) -> int | None:
    """Index just after the last checkbox (or text) of the ``## Tasks`` section."""
    in_fence = False
    start = None
    for i, line in enumerate(lines):
        if FENCE_RE.match(line.strip()):
            in_fence = not in_fence
        elif not in_fence and section_name(line) == "tasks":
            start = i
            break
    if start is None:
        return None

    last_checkbox = None
    last_text = start
    in_fence = False
    for j in range(start + 1, len(lines)):
        stripped = lines[j].strip()
        if FENCE_RE.match(stripped):
            in_fence = not in_fence
        elif not in_fence and section_name(stripped) is not None:
            break
        elif not in_fence and match_checkbox(stripped) is not None:
            last_checkbox = j
            continue
        if stripped:
            last_text = j
    return (last_checkbox if last_checkbox is not None else last_text) + 1


def add_task(base: Path, description: str) -> ParsedDocument:
    """Append a pending task to the ``## Tasks`` section of ``base/TASKS.md``."""
    path = tasks_path(base)
    parsed = read_tasks(path)
    if parsed is None:
        raise TaskFileError(f'No {TASKS_FILE} found. Run "tasq init" first.')

    new_line = f"- {TaskStatus.PENDING.marker} {description}"
    lines = parsed.lines
    idx = _insert_index(lines)
    if idx is None:
        # Keep a trailing newline at the end of the file.
        trailing = bool(lines) and lines[-1] == ""
        if trailing:
            lines.pop()
        if lines and lines[-1].strip():
            lines.append("")
        lines.extend(["## Tasks", new_line])
        if trailing:
            lines.append("")
    else:
        lines.insert(idx, new_line)

    write_tasks(path, parsed)
    return parse(parsed.text(), default_name=parsed.name)
