"""Platform-native preference store readers.

This package defines:
- the reader contract (``PrefsReader``) and the reserved-key filter
- one reader per store layout (registry, property list, flat binary)
- ``select_reader`` picking the reader for the running platform

Readers only translate; they never write to the native store.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, List, Optional

from ..locations import AppIdentity
from ..records import PlayerPref
from .base import RESERVED_KEYS, PrefsReader, is_reserved
from .binary_reader import BinaryPrefsReader, decode_prefs, encode_records, write_prefs_file
from .plist_reader import PlistReader
from .registry_reader import RegistryReader, strip_hash_suffix

BACKENDS = ("registry", "plist", "binary")


def backend_for_platform(platform: Optional[str] = None) -> str:
    plat = platform if platform is not None else sys.platform
    if plat.startswith("win"):
        return "registry"
    if plat == "darwin":
        return "plist"
    return "binary"


def select_reader(
    app: AppIdentity,
    *,
    backend: str = "auto",
    store_path: Optional[Path] = None,
    player: bool = False,
    platform: Optional[str] = None,
    registry: Optional[Any] = None,
) -> PrefsReader:
    """Build the reader for *backend* (``auto`` picks by platform).

    ``store_path`` overrides the file location of the plist/binary readers.
    """

    name = (backend or "auto").strip().lower()
    if name == "auto":
        name = backend_for_platform(platform)

    if name == "registry":
        if store_path is not None:
            raise ValueError("The registry backend does not read from a file path")
        return RegistryReader(app, player=player, registry=registry)
    if name == "plist":
        return PlistReader(app, path=store_path)
    if name == "binary":
        return BinaryPrefsReader(app, path=store_path)
    raise ValueError(f"Unknown backend {backend!r}; expected one of: auto, {', '.join(BACKENDS)}")


def list_preferences(company: str, product: str, **kwargs: Any) -> List[PlayerPref]:
    """Decode every non-reserved preference of *company*/*product* on this platform."""
    return select_reader(AppIdentity(company, product), **kwargs).list_preferences()


__all__ = [
    "BACKENDS",
    "RESERVED_KEYS",
    "BinaryPrefsReader",
    "PlistReader",
    "PrefsReader",
    "RegistryReader",
    "backend_for_platform",
    "decode_prefs",
    "encode_records",
    "is_reserved",
    "list_preferences",
    "select_reader",
    "strip_hash_suffix",
    "write_prefs_file",
]
