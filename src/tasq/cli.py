"""tasq CLI: list, edit and delegate markdown tasks across projects.

Installed as ``tasq`` console_script via pipx / pip.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.markup import escape

from tasq import __version__
from tasq.config import Config
from tasq.errors import TasqError
from tasq.tasks.model import TaskStatus


# ── Custom Click group that handles command aliases ─────────────────


class TasqGroup(click.Group):
    """Resolve short aliases (``ls``, ``start``, ``complete`` …) to commands."""

    _ALIASES: dict[str, str] = {
        "ls": "list",
        "start": "wip",
        "progress": "wip",
        "complete": "done",
        "finish": "done",
        "run": "do",
    }

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return super().get_command(ctx, self._ALIASES.get(cmd_name, cmd_name))

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        # Report the canonical name so ctx.invoked_subcommand is stable.
        _, cmd, rest = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, rest


CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


def _fail(msg: str) -> None:
    from tasq import log as tlog

    tlog.error(escape(msg))
    sys.exit(1)


def _require_identifier(identifier: str, usage: str) -> str:
    identifier = identifier.strip()
    if not identifier:
        _fail(f"Usage: {usage}\n  id: task number, compact id (e.g. p1) or description substring")
    return identifier


def _normalize_scan_path(path: str) -> str:
    """Keep ``~`` shorthand as typed; make other paths absolute."""
    if path.startswith("~"):
        return path.rstrip("/") or path
    return str(Path(path).expanduser().resolve())


@click.group(
    cls=TasqGroup,
    invoke_without_command=True,
    context_settings=CONTEXT_SETTINGS,
)
@click.option("--local", is_flag=True, help="Show only the current directory")
@click.option("--pending", is_flag=True, help="Hide completed tasks")
@click.option("--all", "show_all", is_flag=True, help="Show every project and every open task")
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(__version__, prog_name="tasq")
@click.pass_context
def main(ctx: click.Context, local: bool, pending: bool, show_all: bool, verbose: bool) -> None:
    """tasq: markdown task lists across all your projects.

    Tasks live in a TASKS.md file per project as checkboxes
    (``- [ ]`` pending, ``- [~]`` in progress, ``- [x]`` done).

    \b
    EXAMPLES:
      tasq                      # List open tasks across all watched projects
      tasq list --local         # List tasks in ./TASKS.md
      tasq add "Write docs"     # Append a pending task
      tasq wip 1                # Mark the first open task in progress
      tasq done p2              # Mark task p2 (project p, task 2) done
      tasq do p2 --dry          # Print the assistant prompt for p2
      tasq watch ~/work         # Add a scan root
    """
    from tasq import log as tlog

    tlog.set_verbose(verbose)
    ctx.obj = Config(verbose=verbose)

    if ctx.invoked_subcommand is None:
        ctx.invoke(list_cmd, local=local, pending=pending, show_all=show_all)


# ── Listing ──────────────────────────────────────────────────────


@main.command("list")
@click.option("--local", is_flag=True, help="Show only the current directory")
@click.option("--pending", is_flag=True, help="Hide completed tasks")
@click.option("--all", "show_all", is_flag=True, help="Show every project and every open task")
def list_cmd(local: bool, pending: bool, show_all: bool) -> None:
    """List tasks (scans all watched projects by default)."""
    if local:
        _list_local(pending)
    else:
        _list_global(show_all)


@main.command("local")
@click.option("--pending", is_flag=True, help="Hide completed tasks")
def local_cmd(pending: bool) -> None:
    """List tasks from the current directory only."""
    _list_local(pending)


def _list_local(pending_only: bool) -> None:
    from tasq import log as tlog
    from tasq.render import render_local
    from tasq.tasks.io import read_tasks, tasks_path

    try:
        parsed = read_tasks(tasks_path(Path.cwd()))
    except TasqError as exc:
        _fail(str(exc))
        return
    if parsed is None:
        tlog.console.print('No TASKS.md found. Run "tasq init" to create one.')
        return
    tlog.lines(render_local(parsed, pending_only=pending_only))


def _list_global(show_all: bool) -> None:
    from tasq import log as tlog
    from tasq.config import scan_paths
    from tasq.render import render_projects
    from tasq.scanner import scan_with_ids

    try:
        results = scan_with_ids(scan_paths())
    except TasqError as exc:
        _fail(str(exc))
        return

    if not results:
        tlog.console.print("No TASKS.md files found.")
        tlog.console.print('Run "tasq watch <path>" or "tasq config add-path <path>" to add scan paths.')
        return
    tlog.lines(render_projects(results, show_all=show_all))


# ── Editing ──────────────────────────────────────────────────────


@main.command()
@click.option("--name", default="", help="Project name (default: directory name)")
@click.option("--description", default="", help="Project description")
@click.option("--force", is_flag=True, help="Overwrite an existing TASKS.md")
def init(name: str, description: str, force: bool) -> None:
    """Create a TASKS.md in the current directory."""
    from tasq import log as tlog
    from tasq.tasks.io import init_tasks

    try:
        path = init_tasks(Path.cwd(), name=name, description=description, force=force)
    except TasqError as exc:
        _fail(str(exc))
        return
    tlog.success(f"Created {path.name}")


@main.command()
@click.argument("description", nargs=-1)
def add(description: tuple[str, ...]) -> None:
    """Append a pending task to ./TASKS.md."""
    from tasq import log as tlog
    from tasq.tasks.io import add_task

    text = " ".join(description).strip()
    if not text:
        _fail("Description is required.")

    try:
        add_task(Path.cwd(), text)
    except TasqError as exc:
        _fail(str(exc))
        return
    tlog.success(f"Added: {escape(text)}")


@main.command()
@click.argument("identifier", default="")
def wip(identifier: str) -> None:
    """Mark a task as in progress (number, compact id or substring)."""
    _change_status(_require_identifier(identifier, "tasq wip <id>"), TaskStatus.IN_PROGRESS)


@main.command()
@click.argument("identifier", default="")
def done(identifier: str) -> None:
    """Mark a task as done (number, compact id or substring)."""
    _change_status(_require_identifier(identifier, "tasq done <id>"), TaskStatus.COMPLETED)


def _change_status(identifier: str, status: TaskStatus) -> None:
    """Resolve in ./TASKS.md first, then across watched projects.

    The project scan runs only when there is no local task file or when a
    compact id (``p2``) did not match locally.
    """
    from tasq import log as tlog
    from tasq.config import scan_paths
    from tasq.locator import locate, resolve_local
    from tasq.scanner import scan_with_ids
    from tasq.tasks.ids import split_compact_id
    from tasq.tasks.io import describe_line, read_tasks, set_status, tasks_path

    try:
        local_path = tasks_path(Path.cwd())
        parsed = read_tasks(local_path)

        target: tuple[Path, int] | None = None
        if parsed is not None:
            task = resolve_local(identifier, parsed)
            if task is not None:
                target = (local_path, task.line)
        if target is None and (parsed is None or split_compact_id(identifier) is not None):
            match = locate(identifier, scan_with_ids(scan_paths()))
            if match is not None:
                target = (match.project.path, match.task.line)

        if target is None:
            _fail(f'Task "{identifier}" not found.')
            return

        path, line = target
        updated = set_status(path, line, status)
    except TasqError as exc:
        _fail(str(exc))
        return

    tlog.success(f"{escape(describe_line(updated, line))}: {status.value}")
    tlog.debug(f"Updated {path}:{line + 1}")


# ── Delegation ───────────────────────────────────────────────────


@main.command("do")
@click.argument("identifier", default="")
@click.option("--dry", is_flag=True, help="Print the prompt instead of invoking the assistant")
@click.option("--claude", "engine_flags", flag_value="claude", multiple=True, help="Use Claude Code (default)")
@click.option("--opencode", "engine_flags", flag_value="opencode", multiple=True, help="Use OpenCode")
@click.option("--yolo", is_flag=True, help="Auto-accept every assistant permission prompt")
@click.pass_obj
def do_cmd(cfg: Config | None, identifier: str, dry: bool, engine_flags: tuple[str, ...], yolo: bool) -> None:
    """Hand a task to an AI assistant together with project context."""
    from tasq import log as tlog
    from tasq.config import scan_paths
    from tasq.context import gather_context
    from tasq.engines.registry import ENGINE_NAMES, get_engine
    from tasq.locator import locate
    from tasq.prompt import build_prompt, related_repo_summaries
    from tasq.scanner import scan_with_ids
    from tasq.tasks.parser import parse_context

    identifier = _require_identifier(identifier, "tasq do <id>")
    engines = list(dict.fromkeys(engine_flags))
    if len(engines) > 1:
        raise click.UsageError("Conflicting engine flags selected. Use only one of --claude/--opencode.")

    cfg = cfg or Config()
    if engines:
        cfg.ai_engine = engines[0]
    cfg.auto_accept = yolo
    cfg.dry_run = dry

    try:
        match = locate(identifier, scan_with_ids(scan_paths()))
    except TasqError as exc:
        _fail(str(exc))
        return
    if match is None:
        _fail(f'Task "{identifier}" not found.')
        return

    project_dir = match.project.project_dir
    directive = parse_context(match.project.parsed.text())
    prompt = build_prompt(
        match,
        context_text=gather_context(project_dir, directive),
        related=related_repo_summaries(project_dir, directive),
    )

    if cfg.dry_run:
        tlog.raw(prompt)
        return

    try:
        engine = get_engine(cfg.ai_engine)
    except ValueError as exc:
        _fail(f"{exc}. Choose one of: {', '.join(ENGINE_NAMES)}")
        return
    err = engine.check_available()
    if err:
        _fail(err)

    tlog.info(f"Delegating {escape(f'[{match.task.id}] {match.task.description}')} to {engine.name}…")
    try:
        result = engine.run_interactive(prompt, cwd=project_dir, auto_accept=cfg.auto_accept)
    except KeyboardInterrupt:
        tlog.warn("Interrupted by user.")
        raise click.Abort() from None

    if not result.ok:
        tlog.warn(result.error or f"{engine.name} exited with code {result.return_code}")


# ── Configuration ────────────────────────────────────────────────


@main.command("config")
@click.argument("action", type=click.Choice(["show", "add-path"]), default="show")
@click.argument("path", default="")
def config_cmd(action: str, path: str) -> None:
    """Show settings or add a scan path."""
    from tasq import log as tlog
    from tasq.config import add_scan_path, config_path, scan_paths

    try:
        if action == "add-path":
            if not path:
                _fail("Usage: tasq config add-path <path>")
            normalized = _normalize_scan_path(path)
            if add_scan_path(normalized):
                tlog.success(f"Added scan path: {normalized}")
            else:
                tlog.info(f"Already scanning: {normalized}")
            return

        paths = scan_paths()
    except TasqError as exc:
        _fail(str(exc))
        return

    tlog.console.print("\n[bold]# Tasks Config[/bold]\n")
    tlog.console.print(f"[dim]File: {config_path()}[/dim]")
    tlog.console.print("Scan paths:")
    for p in paths:
        tlog.console.print(f"  - {p}")
    tlog.console.print()


@main.command()
@click.argument("directory")
def watch(directory: str) -> None:
    """Add DIRECTORY to the scan list."""
    from tasq import log as tlog
    from tasq.config import add_scan_path
    from tasq.scanner import expand_root

    normalized = _normalize_scan_path(directory)
    if not expand_root(normalized).is_dir():
        tlog.warn(f"{normalized} does not exist (yet); adding anyway.")
    try:
        added = add_scan_path(normalized)
    except TasqError as exc:
        _fail(str(exc))
        return
    if added:
        tlog.success(f"Watching {normalized}")
    else:
        tlog.info(f"Already watching {normalized}")


@main.command()
@click.argument("directory")
def unwatch(directory: str) -> None:
    """Remove DIRECTORY from the scan list."""
    from tasq import log as tlog
    from tasq.config import remove_scan_path

    try:
        removed = remove_scan_path(directory) or remove_scan_path(_normalize_scan_path(directory))
    except TasqError as exc:
        _fail(str(exc))
        return
    if not removed:
        _fail(f"{directory} is not in the scan list.")
    tlog.success(f"Stopped watching {directory}")
