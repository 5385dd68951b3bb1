"""Claude Code engine adapter."""

from __future__ import annotations

import shutil

from tasq.engines.base import EngineBase


class ClaudeEngine(EngineBase):
    name = "claude"
    binary = "claude"
    prompt_via_stdin = True

    def build_cmd(self, prompt: str, *, auto_accept: bool = False) -> list[str]:
        # Use resolved path so subprocess gets an absolute path; on some platforms
        # (e.g. Windows with pipx) the child process resolves PATH differently.
        claude = shutil.which("claude") or "claude"
        cmd = [claude]
        if auto_accept:
            cmd.append("--dangerously-skip-permissions")
        return cmd

    def check_available(self) -> str | None:
        if not shutil.which("claude"):
            return "Claude Code CLI not found. Install from https://github.com/anthropics/claude-code"
        return None
