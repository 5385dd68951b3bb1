"""Exceptions raised by tasq operations; the CLI turns them into exit codes."""

from __future__ import annotations


class TasqError(Exception):
    """Base class for failures reported to the user."""


class TaskFileError(TasqError):
    """A task file is missing, unreadable, unwritable or cannot be edited."""


class ConfigError(TasqError):
    """The persisted settings file cannot be read or parsed."""


class RepoIdError(TasqError):
    """A project name is too short to receive a unique repo id."""
