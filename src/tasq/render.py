"""Render task listings as Rich markup lines.

Renderers return lists of lines and take an explicit ``indent``; printing is
left to the caller (``log.lines``).
"""

from __future__ import annotations

from rich.markup import escape

from tasq.tasks.model import ParsedDocument, ProjectResult, Task, TaskStatus, group_by_status

ACTIVE_LIMIT = 5

_STATUS_STYLE = {
    TaskStatus.PENDING: "white",
    TaskStatus.IN_PROGRESS: "yellow",
    TaskStatus.COMPLETED: "green",
}


def _pad(indent: int) -> str:
    return " " * indent


def task_line(task: Task, *, indent: int = 2, show_id: bool = False) -> str:
    style = _STATUS_STYLE[task.status]
    ident = f"[cyan]\\[{escape(task.id)}][/cyan] " if show_id and task.id else ""
    return f"{_pad(indent)}[{style}]{task.status.icon}[/{style}] {ident}{escape(task.description)}"


def counts_line(tasks: list[Task], *, indent: int = 2) -> str:
    pending, in_progress, completed = group_by_status(tasks)
    return (
        f"{_pad(indent)}[dim]{len(pending)} pending, {len(in_progress)} in progress, "
        f"{len(completed)} completed[/dim]"
    )


def _block(title: str, tasks: list[Task], indent: int) -> list[str]:
    if not tasks:
        return []
    return [f"{_pad(indent)}[bold]## {title}[/bold]", *(task_line(t, indent=indent + 2) for t in tasks), ""]


def render_local(parsed: ParsedDocument, *, pending_only: bool = False, indent: int = 0) -> list[str]:
    """Lines for ``tasq list --local``: goals, then tasks grouped by status."""
    out = ["", f"{_pad(indent)}[bold]# {escape(parsed.name)}[/bold]"]
    if parsed.description:
        out.extend(f"{_pad(indent)}{escape(line)}" for line in parsed.description.split("\n"))
        out.append("")

    goals_pending, goals_active, _ = group_by_status(parsed.goals)
    out += _block("Goals", goals_pending, indent)
    out += _block("Goals (In Progress)", goals_active, indent)

    pending, in_progress, completed = group_by_status(parsed.tasks)
    out += _block("Pending", pending, indent)
    out += _block("In Progress", in_progress, indent)
    if not pending_only:
        out += _block("Completed", completed, indent)

    out.append(counts_line(parsed.tasks, indent=indent + 2))
    out.append("")
    return out


def render_project(result: ProjectResult, *, show_all: bool = False, indent: int = 0) -> list[str]:
    """Header, active tasks (capped unless *show_all*) and counts for one project."""
    out = [
        "",
        f"{_pad(indent)}[bold]## {escape(result.project_name)}[/bold] "
        f"([cyan]{escape(result.repo_id)}[/cyan]) [dim]{escape(result.rel_path)}[/dim]",
    ]
    active = [t for t in result.tasks if t.is_open]
    shown = active if show_all else active[:ACTIVE_LIMIT]
    out.extend(task_line(t, indent=indent + 4, show_id=True) for t in shown)
    if len(active) > len(shown):
        out.append(f"{_pad(indent + 4)}[dim]... and {len(active) - len(shown)} more[/dim]")
    out.append(counts_line(result.tasks, indent=indent + 2))
    return out


def render_projects(results: list[ProjectResult], *, show_all: bool = False, indent: int = 0) -> list[str]:
    """Lines for the global listing plus a totals footer."""
    out: list[str] = []
    totals = [0, 0, 0]
    for result in results:
        groups = group_by_status(result.tasks)
        for i, group in enumerate(groups):
            totals[i] += len(group)
        if groups[0] or groups[1] or show_all:
            out += render_project(result, show_all=show_all, indent=indent)

    out.append("")
    out.append(
        f"{_pad(indent)}{len(results)} project(s) • {totals[0]} pending • "
        f"{totals[1]} in progress • {totals[2]} completed"
    )
    out.append("")
    return out
