"""Build the instruction document handed to the AI assistant for ``tasq do``."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from tasq import log
from tasq.errors import TaskFileError
from tasq.locator import Match
from tasq.tasks.io import TASKS_FILE, read_tasks
from tasq.tasks.model import ContextDirective, Task

NO_CONTEXT_HINT = f"(no context files specified - add ## Context section to {TASKS_FILE})"

_INSTRUCTIONS = """\
## Instructions

1. **Use subagents for everything** - Use the Task tool to spawn specialized subagents for:
   - Code exploration (use Explore agent)
   - Code implementation (use general-purpose agent)
   - Testing (use test-runner agent if available)
   - Any actual work

2. **Keep your context minimal** - Don't read files directly. Ask subagents to explore and report back.

3. **Track progress** - After each subagent completes, update the task status:
   - Report what was done
   - Ask for next steps if needed

4. **When complete**, provide a summary of:
   - What was implemented
   - Files modified
   - Any remaining work

Start by exploring the codebase to understand the current state, then delegate implementation to subagents."""


@dataclass
class RelatedRepo:
    name: str
    goals: list[str] = field(default_factory=list)
    open_tasks: list[str] = field(default_factory=list)


def related_repo_summaries(project_dir: Path, directive: ContextDirective) -> list[RelatedRepo]:
    """Summarize the ``repos:`` entries; missing or unreadable repos are skipped."""
    summaries: list[RelatedRepo] = []
    for entry in directive.repos:
        repo_dir = (project_dir / Path(entry).expanduser()).resolve()
        try:
            parsed = read_tasks(repo_dir / TASKS_FILE)
        except TaskFileError as exc:
            log.debug(f"Skipping related repo {entry}: {exc}")
            continue
        if parsed is None:
            log.debug(f"Skipping related repo {entry}: no {TASKS_FILE}")
            continue
        summaries.append(
            RelatedRepo(
                name=repo_dir.name,
                goals=[g.description for g in parsed.goals],
                open_tasks=[t.description for t in parsed.open_tasks()],
            )
        )
    return summaries


def render_related(summaries: list[RelatedRepo]) -> str:
    blocks: list[str] = []
    for repo in summaries:
        blocks.append(
            f"// Related repo: {repo.name}\n"
            f"// Goals: {', '.join(repo.goals)}\n"
            f"// Pending tasks: {', '.join(repo.open_tasks)}"
        )
    return "\n\n".join(blocks)


def _goal_lines(goals: list[Task]) -> str:
    return "\n".join(f"  {g.status.icon} {g.description}" for g in goals) or "(no goals defined)"


def _task_lines(tasks: list[Task], current: Task) -> str:
    lines = []
    for t in tasks:
        is_current = t is current or (t.id is not None and t.id == current.id)
        marker = " ← CURRENT" if is_current else ""
        lines.append(f"  {t.status.icon} [{t.id}] {t.description}{marker}")
    return "\n".join(lines) or "(no tasks defined)"


def build_prompt(
    match: Match,
    *,
    context_text: str = "",
    related: list[RelatedRepo] | None = None,
) -> str:
    """Return the orchestrator prompt for ``match.task``. Pure: no I/O."""
    project, task = match.project, match.task
    parsed = project.parsed

    parts: list[str] = [
        "# Task Orchestrator",
        "You are an orchestrator agent. Your job is to complete the following task "
        "by delegating to subagents.",
        f"## Task to Complete\n[{task.id}] {task.description}",
        f"## Project Context\nName: {project.project_name} ({project.repo_id})\n"
        f"Path: {project.rel_path}",
    ]
    if parsed.description:
        parts.append(f"### Project Description\n{parsed.description}")
    if parsed.notes:
        parts.append(f"### Project Notes\n{parsed.notes}")
    parts.append(f"### Project Goals\n{_goal_lines(parsed.goals)}")
    parts.append(f"### All Project Tasks\n{_task_lines(project.tasks, task)}")
    if related:
        parts.append(f"## Related Repos\n{render_related(related)}")
    parts.append(_INSTRUCTIONS)
    parts.append(f"## Local Context Files\n{context_text.strip() or NO_CONTEXT_HINT}")

    return "\n\n".join(parts) + "\n"
