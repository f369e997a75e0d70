"""Sidecar registry of user-created preferences.

Entries the developer adds or copies in are never written back into the
platform-native store; they live in a separate JSON document::

    {"schema_version": 1, "saved_at": "...", "prefs": [{"key": ..., "type": ..., "value": ...}]}

``RegisteredPrefs`` is an ordinary object: construct one, hand it to whoever
needs it, call ``save()`` after edits.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional

from .errors import PrefsInspectorError
from .records import PlayerPref, ValueType
from .settings import atomic_write_json, backup_corrupt_file
from .uniqify import uniqify

logger = logging.getLogger(__name__)

SIDECAR_SCHEMA_VERSION = 1


@dataclass
class SidecarStore:
    """JSON file backing a RegisteredPrefs collection."""

    path: Path

    def load(self) -> List[PlayerPref]:
        path = Path(self.path)
        if not path.exists():
            return []

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict) or not isinstance(data.get("prefs", []), list):
                raise ValueError("sidecar root is not an object with a 'prefs' list")
        except (OSError, ValueError) as e:
            logger.warning("Sidecar registry %s is unreadable (%s); starting empty", path, e)
            backup_corrupt_file(path)
            return []

        prefs: List[PlayerPref] = []
        for i, item in enumerate(data.get("prefs", [])):
            try:
                if not isinstance(item, dict):
                    raise ValueError("entry is not an object")
                prefs.append(PlayerPref.from_dict(item))
            except (TypeError, ValueError) as e:
                logger.warning("Skipping sidecar entry #%d in %s: %s", i, path, e)
        return prefs

    def save(self, prefs: Iterable[PlayerPref]) -> None:
        payload = {
            "schema_version": SIDECAR_SCHEMA_VERSION,
            "saved_at": time.strftime("%Y-%m-%dT%H:%M:%S"),
            "prefs": [p.to_dict() for p in prefs],
        }
        atomic_write_json(Path(self.path), payload)


class RegisteredPrefs:
    """Ordered, key-unique collection of user-created preferences."""

    def __init__(self, store: SidecarStore, prefs: Optional[Iterable[PlayerPref]] = None) -> None:
        self.store = store
        self._prefs: List[PlayerPref] = []
        for p in prefs or ():
            self._append_unique(p)

    @classmethod
    def load(cls, path: Path) -> "RegisteredPrefs":
        store = SidecarStore(Path(path))
        return cls(store, store.load())

    def save(self) -> None:
        self.store.save(self._prefs)
        logger.info("Saved %d registered preference(s) to %s", len(self._prefs), self.store.path)

    # Queries -------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._prefs)

    def __iter__(self) -> Iterator[PlayerPref]:
        return iter(list(self._prefs))

    def __contains__(self, key: object) -> bool:
        return any(p.key == key for p in self._prefs)

    def keys(self) -> List[str]:
        return [p.key for p in self._prefs]

    def get(self, key: str) -> PlayerPref:
        return self._prefs[self._index(key)]

    def _index(self, key: str) -> int:
        for i, p in enumerate(self._prefs):
            if p.key == key:
                return i
        raise KeyError(key)

    def _append_unique(self, pref: PlayerPref) -> PlayerPref:
        key = uniqify(pref.key, pref.value_type, set(self.keys()))
        if key != pref.key:
            logger.info("Registered %r as %r to keep keys unique", pref.key, key)
            pref = dataclasses.replace(pref, key=key)
        self._prefs.append(pref)
        return pref

    # Edits ---------------------------------------------------------------
    def add(self, value_type: ValueType, key: Optional[str] = None, value: Any = None) -> PlayerPref:
        """Append a new preference; the key is made unique, the value defaults to zero."""
        pref = PlayerPref.default(value_type, uniqify(key, value_type, set(self.keys())))
        if value is not None:
            pref = dataclasses.replace(pref, value=value)
        self._prefs.append(pref)
        return pref

    def rename(self, old_key: str, new_key: Optional[str]) -> str:
        """Rename *old_key*; the record's own key does not count as taken."""
        i = self._index(old_key)
        pref = self._prefs[i]
        used = {p.key for j, p in enumerate(self._prefs) if j != i}
        final = uniqify(new_key, pref.value_type, used)
        if final != pref.key:
            self._prefs[i] = dataclasses.replace(pref, key=final)
        return final

    def set_value(self, key: str, value: Any) -> PlayerPref:
        i = self._index(key)
        self._prefs[i] = dataclasses.replace(self._prefs[i], value=value)
        return self._prefs[i]

    def remove(self, key: str) -> PlayerPref:
        return self._prefs.pop(self._index(key))

    def pop_last(self) -> PlayerPref:
        if not self._prefs:
            raise PrefsInspectorError("No registered preferences to remove")
        return self._prefs.pop()

    def import_records(self, records: Iterable[PlayerPref]) -> List[PlayerPref]:
        """Copy decoded store records in; clashing keys get a numeric suffix."""
        return [self._append_unique(r) for r in records]


__all__ = ["RegisteredPrefs", "SidecarStore"]
