"""Configuration: persisted scan paths, env vars, and runtime options for tasq."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path

import click

from tasq.errors import ConfigError
from tasq.io_utils import read_text, write_text_atomic


VERSION = "2.0.0"

APP_NAME = "tasq"
CONFIG_FILE = "config.json"
DEFAULT_SCAN_PATHS = ("~/src",)
DEFAULT_ENGINE = "claude"


@dataclass
class Config:
    """Runtime options for one invocation (mirrors the CLI flags)."""

    ai_engine: str = ""
    auto_accept: bool = False
    dry_run: bool = False
    verbose: bool = False

    def __post_init__(self) -> None:
        if not self.ai_engine:
            self.ai_engine = os.environ.get("TASQ_ENGINE") or DEFAULT_ENGINE


@dataclass
class Settings:
    """Persisted user settings."""

    scan_paths: list[str] = field(default_factory=lambda: list(DEFAULT_SCAN_PATHS))


def config_dir() -> Path:
    """Return the per-user config directory (``TASQ_CONFIG_DIR`` overrides)."""
    override = os.environ.get("TASQ_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path(click.get_app_dir(APP_NAME))


def config_path() -> Path:
    return config_dir() / CONFIG_FILE


def save_settings(settings: Settings) -> None:
    path = config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        write_text_atomic(path, json.dumps(asdict(settings), indent=2) + "\n")
    except OSError as exc:
        raise ConfigError(f"Cannot write {path}: {exc}") from exc


def load_settings() -> Settings:
    """Load settings, writing the defaults on first use."""
    path = config_path()
    if not path.is_file():
        settings = Settings()
        save_settings(settings)
        return settings

    try:
        data = json.loads(read_text(path))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    paths = data.get("scan_paths", list(DEFAULT_SCAN_PATHS))
    if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
        raise ConfigError(f"'scan_paths' in {path} must be a list of strings")
    return Settings(scan_paths=paths)


def scan_paths() -> list[str]:
    return load_settings().scan_paths


def add_scan_path(path: str) -> bool:
    """Append *path* to the scan list. Return ``False`` if it was already there."""
    settings = load_settings()
    if path in settings.scan_paths:
        return False
    settings.scan_paths.append(path)
    save_settings(settings)
    return True


def remove_scan_path(path: str) -> bool:
    """Remove *path* from the scan list. Return ``False`` if it was not present."""
    settings = load_settings()
    if path not in settings.scan_paths:
        return False
    settings.scan_paths.remove(path)
    save_settings(settings)
    return True
