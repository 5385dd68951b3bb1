"""Gather local project context (git, README, manifests, files, TODOs) for prompts.

Everything here is best-effort: unreadable files are skipped and the result
is plain markdown text, possibly empty.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from tasq import log
from tasq.git_ops import git_summary
from tasq.io_utils import read_text
from tasq.scanner import IGNORED_DIRS
from tasq.tasks.model import ContextDirective

README_NAMES = ("README.md", "README.rst", "README.txt", "README")
MANIFEST_NAMES = (
    "pyproject.toml",
    "setup.cfg",
    "requirements.txt",
    "package.json",
    "Cargo.toml",
    "go.mod",
    "Gemfile",
    "pom.xml",
)
SOURCE_SUFFIXES = frozenset({
    ".py", ".js", ".jsx", ".ts", ".tsx", ".go", ".rs", ".rb", ".java",
    ".kt", ".swift", ".c", ".h", ".cpp", ".hpp", ".cs", ".php", ".sh",
})

MAX_FILE_CHARS = 4000
MAX_README_LINES = 60
MAX_TODOS = 30
MAX_TODO_FILES = 500

_TODO_RE = re.compile(r"\b(TODO|FIXME|XXX|HACK)\b[:\s]*(.*)")


def _read(path: Path, limit: int = MAX_FILE_CHARS) -> str | None:
    try:
        text = read_text(path, errors="replace")
    except OSError as exc:
        log.debug(f"Cannot read {path}: {exc}")
        return None
    if len(text) > limit:
        text = text[:limit].rstrip() + "\n… (truncated)"
    return text


def _fence(path: str, body: str) -> str:
    return f"#### {path}\n```\n{body.rstrip()}\n```"


def readme_excerpt(project_dir: Path) -> str | None:
    for name in README_NAMES:
        path = project_dir / name
        if path.is_file():
            text = _read(path)
            if text is None:
                continue
            return "\n".join(text.splitlines()[:MAX_README_LINES]).strip() or None
    return None


def manifests(project_dir: Path) -> list[tuple[str, str]]:
    found: list[tuple[str, str]] = []
    for name in MANIFEST_NAMES:
        path = project_dir / name
        if path.is_file():
            text = _read(path)
            if text is not None:
                found.append((name, text))
    return found


def _is_ignored(rel: Path) -> bool:
    return any(part in IGNORED_DIRS for part in rel.parts)


def matched_files(project_dir: Path, patterns: list[str], max_files: int) -> list[Path]:
    """Files under *project_dir* matching the ``files:`` globs, in pattern order."""
    matched: list[Path] = []
    seen: set[Path] = set()
    root = project_dir.resolve()
    for pattern in patterns:
        try:
            candidates = sorted(project_dir.glob(pattern))
        except (ValueError, NotImplementedError) as exc:
            log.debug(f"Bad context pattern {pattern!r}: {exc}")
            continue
        for path in candidates:
            if len(matched) >= max_files:
                return matched
            if path in seen or not path.is_file():
                continue
            try:
                rel = path.resolve().relative_to(root)
            except ValueError:
                continue
            if _is_ignored(rel):
                continue
            seen.add(path)
            matched.append(path)
    return matched


def todo_comments(project_dir: Path, limit: int = MAX_TODOS) -> list[str]:
    """Return ``path:line: text`` for TODO-style comments in source files."""
    todos: list[str] = []
    scanned = 0
    for dirpath, dirnames, filenames in os.walk(project_dir):
        dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRS and not d.startswith("."))
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if path.suffix not in SOURCE_SUFFIXES:
                continue
            scanned += 1
            if scanned > MAX_TODO_FILES:
                return todos
            try:
                text = read_text(path, errors="replace")
            except OSError:
                continue
            rel = path.relative_to(project_dir).as_posix()
            for lineno, line in enumerate(text.splitlines(), start=1):
                m = _TODO_RE.search(line)
                if m:
                    todos.append(f"{rel}:{lineno}: {m.group(1)} {m.group(2).strip()}".rstrip())
                    if len(todos) >= limit:
                        return todos
    return todos


def gather_context(project_dir: Path, directive: ContextDirective, max_files: int = 15) -> str:
    """Assemble the local context block handed to the assistant."""
    sections: list[str] = []

    git = git_summary(project_dir)
    if git:
        sections.append(f"### Git\n{git}")

    readme = readme_excerpt(project_dir)
    if readme:
        sections.append(f"### README\n{readme}")

    found = manifests(project_dir)
    if found:
        body = "\n\n".join(_fence(name, text) for name, text in found)
        sections.append(f"### Dependencies\n{body}")

    if directive.files:
        blocks: list[str] = []
        for path in matched_files(project_dir, directive.files, max_files):
            text = _read(path)
            if text is not None:
                blocks.append(_fence(path.relative_to(project_dir).as_posix(), text))
        if blocks:
            sections.append("### Context Files\n" + "\n\n".join(blocks))

    todos = todo_comments(project_dir)
    if todos:
        sections.append("### TODO Comments\n" + "\n".join(f"- {t}" for t in todos))

    return "\n\n".join(sections)
