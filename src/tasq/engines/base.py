"""Base class for AI assistant adapters."""

from __future__ import annotations

import shutil
import subprocess
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass
class EngineResult:
    """Outcome of one assistant session."""

    return_code: int = 0
    duration_ms: int = 0
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.return_code == 0 and not self.error


class EngineBase(ABC):
    """Abstract assistant adapter.  Subclasses implement ``build_cmd``.

    The session is interactive: the assistant's stdout and stderr go straight
    to the terminal, tasq only supplies the prompt and waits for the exit code.
    """

    name: str = "base"
    binary: str = ""
    # Send the prompt on stdin instead of as the last argument.
    prompt_via_stdin: bool = False

    @abstractmethod
    def build_cmd(self, prompt: str, *, auto_accept: bool = False) -> list[str]:
        """Return the CLI command list for the given prompt."""
        ...

    def build_env(self, *, auto_accept: bool = False) -> dict[str, str] | None:
        """Environment for the child process; ``None`` inherits ours."""
        return None

    def check_available(self) -> str | None:
        """Return an error message if the engine CLI is not available, else None."""
        if not shutil.which(self.binary):
            return f"{self.binary} not found in PATH"
        return None

    def run_interactive(
        self,
        prompt: str,
        *,
        cwd: Path | None = None,
        auto_accept: bool = False,
    ) -> EngineResult:
        """Run the assistant with *prompt* and wait for it to exit."""
        cmd = self.build_cmd(prompt, auto_accept=auto_accept)
        start = time.monotonic()

        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.PIPE if self.prompt_via_stdin else None,
                text=True,
                encoding="utf-8",
                errors="replace",
                cwd=cwd,
                env=self.build_env(auto_accept=auto_accept),
            )
        except FileNotFoundError:
            return EngineResult(return_code=-1, error=f"{cmd[0]} not found")

        try:
            proc.communicate(input=prompt if self.prompt_via_stdin else None)
        except KeyboardInterrupt:
            self._terminate_process(proc)
            raise

        result = EngineResult(
            return_code=proc.returncode,
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        if proc.returncode != 0:
            result.error = f"{self.name} exited with code {proc.returncode}"
        return result

    @staticmethod
    def _terminate_process(proc: subprocess.Popen[str]) -> None:
        """Terminate a subprocess promptly (best effort)."""
        try:
            if proc.poll() is None:
                proc.terminate()
            proc.wait(timeout=2)
            return
        except (OSError, subprocess.TimeoutExpired):
            pass

        try:
            if proc.poll() is None:
                proc.kill()
            proc.wait(timeout=2)
        except (OSError, subprocess.TimeoutExpired):
            pass
