"""Logging utilities with colored output via Rich."""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console

console = Console(highlight=False)
_err_console = Console(highlight=False, stderr=True)

_verbose = False


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def info(msg: str) -> None:
    console.print(f"[blue]\\[INFO][/blue] {msg}")


def success(msg: str) -> None:
    console.print(f"[green]\\[OK][/green] {msg}")


def warn(msg: str) -> None:
    _err_console.print(f"[yellow]\\[WARN][/yellow] {msg}")


def error(msg: str) -> None:
    _err_console.print(f"[red]\\[ERROR][/red] {msg}")


def debug(msg: str) -> None:
    if _verbose:
        _err_console.print(f"[dim]\\[DEBUG] {msg}[/dim]")


def lines(rendered: Iterable[str]) -> None:
    """Print pre-rendered markup lines (see :mod:`tasq.render`)."""
    for line in rendered:
        console.print(line)


def raw(text: str) -> None:
    """Print *text* untouched: no markup, no wrapping."""
    console.print(text, markup=False, emoji=False, soft_wrap=True)
