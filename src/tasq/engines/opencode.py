"""OpenCode engine adapter."""

from __future__ import annotations

import os
import shutil

from tasq.engines.base import EngineBase


class OpenCodeEngine(EngineBase):
    name = "opencode"
    binary = "opencode"

    def __init__(self, model: str = "") -> None:
        self.model = model or os.environ.get("TASQ_OPENCODE_MODEL", "")

    def build_cmd(self, prompt: str, *, auto_accept: bool = False) -> list[str]:
        opencode = shutil.which("opencode") or "opencode"
        cmd = [opencode, "run"]
        if self.model:
            cmd += ["--model", self.model]
        cmd.append(prompt)
        return cmd

    def build_env(self, *, auto_accept: bool = False) -> dict[str, str] | None:
        if not auto_accept:
            return None
        env = os.environ.copy()
        env["OPENCODE_PERMISSION"] = '{"*":"allow"}'
        return env

    def check_available(self) -> str | None:
        if not shutil.which("opencode"):
            return "OpenCode CLI not found. Install from https://opencode.ai"
        return None
