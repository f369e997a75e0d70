"""Reader contract and the reserved-key filter shared by all store readers."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol

from ..records import PlayerPref

logger = logging.getLogger(__name__)

# Bookkeeping entries the engine writes on its own; never shown to the user.
RESERVED_KEYS = frozenset(
    {
        "unity.cloud_userid",
        "unity.player_sessionid",
        "unity.player_session_count",
        "UnityGraphicsQuality",
    }
)


def is_reserved(key: str) -> bool:
    return key in RESERVED_KEYS


class PrefsReader(Protocol):
    """Reader contract.

    A reader owns one platform-native store layout:
    - ``location`` describes where it looks (registry key or file path)
    - ``list_preferences`` decodes the whole store in one call

    Readers raise StoreUnavailable when the store cannot be opened and
    UnrecognizedEncoding for entries outside the supported value types.
    """

    name: str

    @property
    def location(self) -> str: ...

    def list_preferences(self) -> List[PlayerPref]: ...


def collect(records: Iterable[Optional[PlayerPref]], *, source: str) -> List[PlayerPref]:
    """Keep one record per key (last one wins, first position kept)."""

    by_key: dict[str, PlayerPref] = {}
    for rec in records:
        if rec is None:
            continue
        if rec.key in by_key:
            logger.warning("Duplicate preference key %r in %s; keeping the last entry", rec.key, source)
        by_key[rec.key] = rec
    out = list(by_key.values())
    logger.info("Decoded %d preference(s) from %s", len(out), source)
    return out
