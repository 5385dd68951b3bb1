"""Allow ``python -m tasq``."""

from tasq.cli import main

main()
