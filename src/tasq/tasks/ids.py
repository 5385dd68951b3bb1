"""Short, deterministic repo ids used as compact task-id namespaces.

The first project keeps the shortest prefix; later projects sharing that
prefix extend theirs one character at a time::

    >>> allocate_repo_ids(["alpha", "apple", "apricot"])
    {'alpha': 'a', 'apple': 'ap', 'apricot': 'apr'}
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from tasq.errors import RepoIdError

COMPACT_ID_RE = re.compile(r"^([a-z]+)(\d+)$")


def next_repo_id(name: str, used: set[str]) -> str:
    """Return the shortest case-folded prefix of *name* not in *used*."""
    folded = name.casefold()
    for length in range(1, len(folded) + 1):
        candidate = folded[:length]
        if candidate not in used:
            return candidate
    raise RepoIdError(f"Cannot disambiguate repo id for project {name!r}")


def allocate_sequence(names: Iterable[str]) -> list[str]:
    """Return one id per entry of *names*, in order. Repeated names are allowed."""
    used: set[str] = set()
    ids: list[str] = []
    for name in names:
        repo_id = next_repo_id(name, used)
        used.add(repo_id)
        ids.append(repo_id)
    return ids


def allocate_repo_ids(names: Iterable[str]) -> dict[str, str]:
    """Map each (unique) project name to its repo id, processing names in order."""
    names = list(names)
    return dict(zip(names, allocate_sequence(names)))


def split_compact_id(identifier: str) -> tuple[str, int] | None:
    """Split ``pr12`` into ``("pr", 12)``; ``None`` when not a compact id."""
    m = COMPACT_ID_RE.match(identifier)
    if not m:
        return None
    return m.group(1), int(m.group(2))
