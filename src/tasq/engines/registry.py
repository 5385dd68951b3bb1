"""Engine registry: look up an adapter by name."""

from __future__ import annotations

from tasq.engines.base import EngineBase
from tasq.engines.claude import ClaudeEngine
from tasq.engines.opencode import OpenCodeEngine


def get_engine(name: str, *, opencode_model: str = "") -> EngineBase:
    """Return an engine adapter for *name*."""
    match name:
        case "claude":
            return ClaudeEngine()
        case "opencode":
            return OpenCodeEngine(model=opencode_model)
        case _:
            raise ValueError(f"Unknown engine: {name}")


ENGINE_NAMES = ("claude", "opencode")
