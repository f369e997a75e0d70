"""Key uniqueness policy for user-created and renamed preferences."""

from __future__ import annotations

import re
from typing import AbstractSet, Iterable, Optional

from .records import ValueType

_NUMERIC_SUFFIX_RE = re.compile(r"\d+$")


def default_key(value_type: ValueType) -> str:
    return f"My{value_type.display_name}"


def split_numeric_suffix(key: str) -> tuple[str, int]:
    """Split ``"Score12"`` into ``("Score", 12)``; keys without digits get suffix 0."""
    m = _NUMERIC_SUFFIX_RE.search(key)
    if m is None:
        return key, 0
    return key[: m.start()], int(m.group())


def uniqify(candidate: Optional[str], value_type: ValueType, used_keys: Iterable[str]) -> str:
    """Return a non-empty key that is not in *used_keys*.

    An empty candidate becomes ``My<TypeName>``. A used candidate has its
    trailing number incremented (``Score5`` -> ``Score6`` -> ...) until the
    result is free, so the lowest free suffix above the candidate's own wins.
    """

    used: AbstractSet[str] = used_keys if isinstance(used_keys, (set, frozenset)) else set(used_keys)
    key = candidate or default_key(value_type)
    if key not in used:
        return key

    base, suffix = split_numeric_suffix(key)
    out = key
    while out in used:
        suffix += 1
        out = f"{base}{suffix}"
    return out


__all__ = ["default_key", "split_numeric_suffix", "uniqify"]
