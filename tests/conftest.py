"""Shared fixtures for tasq tests.

File handling in tests:
- Use tmp_path for any directory or file creation so tests are isolated and cleaned up.
- Use tasq.io_utils read_text/write_text for consistent UTF-8 I/O.
- The settings file is always redirected into tmp_path (see ``isolated_config``).
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from tasq import log
from tasq.io_utils import write_text
from tasq.tasks.model import ParsedDocument, ProjectResult, Task, TaskStatus

PROJECT_ALPHA = """# Project Alpha

Alpha project description

## Goals
- [ ] Goal A1
- [x] Goal A2

## Tasks
- [ ] Task A1
- [ ] Task A2
- [~] Task A3"""

PROJECT_BETA = """# Beta

Beta project

## Tasks
- [ ] Task B1
- [ ] Task B2
- [x] Task B3"""

PROJECT_CHARLIE = """# Charlie

Charlie project

## Tasks
- [ ] Task C1
- [ ] Task C2"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the settings store at a throwaway directory for every test."""
    config_dir = tmp_path / "_config"
    monkeypatch.setenv("TASQ_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("TASQ_ENGINE", raising=False)
    log.set_verbose(False)
    return config_dir


@pytest.fixture
def make_project(tmp_path: Path):
    """Factory fixture: create ``<root>/<name>/TASKS.md`` and return the project dir."""

    def _make(name: str, content: str, root: Path | None = None) -> Path:
        project_dir = (root or tmp_path / "src") / name
        project_dir.mkdir(parents=True, exist_ok=True)
        write_text(project_dir / "TASKS.md", content)
        return project_dir

    return _make


@pytest.fixture
def scan_root(make_project, tmp_path: Path) -> Path:
    """A scan root holding project-alpha, project-beta and charlie."""
    root = tmp_path / "src"
    make_project("project-alpha", PROJECT_ALPHA, root)
    make_project("project-beta", PROJECT_BETA, root)
    make_project("charlie", PROJECT_CHARLIE, root)
    return root


def _make_task(
    line: int,
    description: str = "",
    status: TaskStatus = TaskStatus.PENDING,
    section: str | None = "tasks",
    id: str | None = None,
) -> Task:
    return Task(
        line=line,
        status=status,
        description=description or f"Task {line}",
        section=section,
        id=id,
    )


def _make_project_result(
    name: str,
    tasks: list[Task],
    repo_id: str = "",
    goals: list[Task] | None = None,
) -> ProjectResult:
    parsed = ParsedDocument(name=name, tasks=list(tasks), goals=goals or [])
    result = ProjectResult(
        path=Path("/projects") / name / "TASKS.md",
        project_name=name,
        rel_path=f"~/src/{name}",
        parsed=parsed,
        tasks=list(tasks),
    )
    return result.with_ids(repo_id) if repo_id else result


@pytest.fixture
def make_task():
    """Factory fixture that creates Task instances."""
    return _make_task


@pytest.fixture
def make_project_result():
    """Factory fixture that creates ProjectResult instances (ids assigned when repo_id given)."""
    return _make_project_result


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a minimal git repo for testing."""
    repo = tmp_path / "repo"
    repo.mkdir()
    subprocess.run(["git", "init"], cwd=repo, capture_output=True, check=True)
    subprocess.run(["git", "config", "user.name", "Test"], cwd=repo, capture_output=True)
    subprocess.run(["git", "config", "user.email", "test@test"], cwd=repo, capture_output=True)
    write_text(repo / "README.md", "# Test")
    subprocess.run(["git", "add", "README.md"], cwd=repo, capture_output=True)
    subprocess.run(["git", "commit", "-m", "Initial"], cwd=repo, capture_output=True)
    return repo
