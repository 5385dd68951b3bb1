"""tasq: markdown task lists across projects, delegated to AI assistants."""

from tasq.config import VERSION as __version__

__all__ = ["__version__"]
