"""Unit tests for tasq.git_ops against real temporary git repos."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from tasq import git_ops

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


# ── helpers ──────────────────────────────────────────────────────────


def _commit_file(repo: Path, name: str, content: str, msg: str) -> None:
    (repo / name).write_text(content)
    subprocess.run(["git", "add", name], cwd=repo, capture_output=True, check=True)
    subprocess.run(["git", "commit", "-m", msg], cwd=repo, capture_output=True, check=True)


# ── Queries ──────────────────────────────────────────────────────────


class TestQueries:
    def test_is_git_repo(self, git_repo: Path, tmp_path: Path) -> None:
        plain = tmp_path / "plain"
        plain.mkdir()
        assert git_ops.is_git_repo(git_repo)
        assert not git_ops.is_git_repo(plain)

    def test_current_branch(self, git_repo: Path) -> None:
        # Default branch name depends on the local git config.
        assert git_ops.current_branch(cwd=git_repo)

    def test_last_commit(self, git_repo: Path) -> None:
        _commit_file(git_repo, "a.txt", "a", "Add a")
        commit = git_ops.last_commit(cwd=git_repo)
        sha, _, subject = commit.partition(" ")
        assert sha
        assert subject == "Add a"

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert not git_ops.is_git_repo(tmp_path / "nope")
        assert git_ops.current_branch(cwd=tmp_path / "nope") == ""


class TestChangeCounts:
    def test_clean_repo(self, git_repo: Path) -> None:
        assert git_ops.change_counts(git_repo) == git_ops.ChangeCounts()

    def test_staged_unstaged_untracked(self, git_repo: Path) -> None:
        _commit_file(git_repo, "tracked.txt", "v1", "Add tracked")
        (git_repo / "README.md").write_text("# Changed")
        (git_repo / "tracked.txt").write_text("v2")
        subprocess.run(["git", "add", "tracked.txt"], cwd=git_repo, capture_output=True, check=True)
        (git_repo / "new.txt").write_text("new")

        counts = git_ops.change_counts(git_repo)
        assert counts == git_ops.ChangeCounts(staged=1, unstaged=1, untracked=1)


class TestGitSummary:
    def test_not_a_repo(self, tmp_path: Path) -> None:
        plain = tmp_path / "plain"
        plain.mkdir()
        assert git_ops.git_summary(plain) is None

    def test_clean_repo(self, git_repo: Path) -> None:
        branch = git_ops.current_branch(cwd=git_repo)
        summary = git_ops.git_summary(git_repo)

        assert summary is not None
        assert summary.splitlines()[0] == f"Branch: {branch}"
        assert "Changes:" not in summary
        assert summary.splitlines()[-1].endswith(" Initial")

    def test_with_changes(self, git_repo: Path) -> None:
        (git_repo / "README.md").write_text("# Edited")
        (git_repo / "scratch.txt").write_text("x")

        summary = git_ops.git_summary(git_repo)
        assert summary is not None
        assert "Changes: 0 staged, 1 unstaged" in summary
        assert "Untracked: 1" in summary
