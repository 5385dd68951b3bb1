"""Read-only git queries used to describe a project to the assistant."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path


def _git(*args: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """Run a git command, suppressing stderr noise."""
    try:
        return subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            cwd=cwd,
        )
    except (FileNotFoundError, NotADirectoryError):
        return subprocess.CompletedProcess(["git", *args], returncode=127, stdout="", stderr="")


def is_git_repo(cwd: Path | None = None) -> bool:
    r = _git("rev-parse", "--is-inside-work-tree", cwd=cwd)
    return r.returncode == 0 and r.stdout.strip() == "true"


def current_branch(cwd: Path | None = None) -> str:
    r = _git("rev-parse", "--abbrev-ref", "HEAD", cwd=cwd)
    return r.stdout.strip() if r.returncode == 0 else ""


def last_commit(cwd: Path | None = None) -> str:
    r = _git("log", "-1", "--format=%h %s", cwd=cwd)
    return r.stdout.strip() if r.returncode == 0 else ""


@dataclass
class ChangeCounts:
    staged: int = 0
    unstaged: int = 0
    untracked: int = 0


def change_counts(cwd: Path | None = None) -> ChangeCounts:
    """Count entries of ``git status --porcelain`` by kind."""
    counts = ChangeCounts()
    r = _git("status", "--porcelain", cwd=cwd)
    if r.returncode != 0:
        return counts
    for line in r.stdout.splitlines():
        if len(line) < 2:
            continue
        index, worktree = line[0], line[1]
        if index == "?" and worktree == "?":
            counts.untracked += 1
            continue
        if index not in (" ", "?"):
            counts.staged += 1
        if worktree not in (" ", "?"):
            counts.unstaged += 1
    return counts


def git_summary(project_dir: Path) -> str | None:
    """Return branch, pending changes and last commit as text, or ``None``."""
    if not is_git_repo(project_dir):
        return None

    parts: list[str] = []
    branch = current_branch(project_dir)
    if branch:
        parts.append(f"Branch: {branch}")

    counts = change_counts(project_dir)
    if counts.staged or counts.unstaged:
        parts.append(f"Changes: {counts.staged} staged, {counts.unstaged} unstaged")
    if counts.untracked:
        parts.append(f"Untracked: {counts.untracked}")

    commit = last_commit(project_dir)
    if commit:
        parts.append(f"Last commit: {commit}")

    return "\n".join(parts) if parts else None
