"""Find ``TASKS.md`` files under the scan roots and assign compact task ids."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from tasq import log
from tasq.errors import RepoIdError, TaskFileError
from tasq.tasks.ids import next_repo_id
from tasq.tasks.io import TASKS_FILE, load_tasks
from tasq.tasks.model import ProjectResult

MAX_DEPTH = 3
IGNORED_DIRS = frozenset({
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "target",
    "dist",
    "build",
    ".venv",
    "venv",
    "__pycache__",
})
_MAX_WORKERS = 8


def expand_root(path: str) -> Path:
    """Expand a leading ``~`` to the home directory."""
    return Path(path).expanduser()


def shorten_home(path: Path) -> str:
    """Render *path* with the home directory replaced by ``~``."""
    home = str(Path.home())
    text = str(path)
    if text == home or text.startswith(home + os.sep):
        return "~" + text[len(home):]
    return text


def find_task_files(roots: Iterable[str], max_depth: int = MAX_DEPTH) -> Iterator[Path]:
    """Yield every ``TASKS.md`` at most *max_depth* directories below each root."""
    seen: set[Path] = set()
    for root in roots:
        base = expand_root(root)
        if not base.is_dir():
            log.debug(f"Scan path not found: {root}")
            continue
        base_depth = len(base.parts)
        for dirpath, dirnames, filenames in os.walk(base):
            current = Path(dirpath)
            depth = len(current.parts) - base_depth
            if depth >= max_depth - 1:
                dirnames[:] = []
            else:
                dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRS)
            if TASKS_FILE in filenames:
                found = current / TASKS_FILE
                key = found.resolve()
                if key not in seen:
                    seen.add(key)
                    yield found


def _load_project(path: Path) -> ProjectResult | None:
    try:
        parsed = load_tasks(path)
    except TaskFileError as exc:
        log.debug(f"Skipping {path}: {exc}")
        return None
    project_dir = path.resolve().parent
    return ProjectResult(
        path=path,
        project_name=project_dir.name,
        rel_path=shorten_home(project_dir),
        parsed=parsed,
        tasks=list(parsed.tasks),
    )


def scan(roots: Iterable[str], max_depth: int = MAX_DEPTH) -> list[ProjectResult]:
    """Parse every task file found under *roots*; unreadable files are skipped."""
    files = list(find_task_files(roots, max_depth=max_depth))
    if not files:
        return []
    with ThreadPoolExecutor(max_workers=min(_MAX_WORKERS, len(files))) as pool:
        loaded = list(pool.map(_load_project, files))
    return [r for r in loaded if r is not None]


def assign_ids(results: list[ProjectResult]) -> list[ProjectResult]:
    """Give each project a repo id (in list order) and tag its tasks ``{id}{n}``."""
    tagged: list[ProjectResult] = []
    used: set[str] = set()
    for result in results:
        try:
            repo_id = next_repo_id(result.project_name, used)
        except RepoIdError as exc:
            log.warn(f"{exc}; skipping {result.rel_path}")
            continue
        used.add(repo_id)
        tagged.append(result.with_ids(repo_id))
    return tagged


def scan_with_ids(roots: Iterable[str], max_depth: int = MAX_DEPTH) -> list[ProjectResult]:
    return assign_ids(scan(roots, max_depth=max_depth))
