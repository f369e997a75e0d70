"""Public API surface.

This module re-exports the most commonly used functions/classes so external
scripts can simply import a single module.
"""

from __future__ import annotations

from . import __version__

# Errors
from .errors import PrefsInspectorError, StoreUnavailable, UnrecognizedEncoding, ValueTypeMismatch

# Data model
from .records import PlayerPref, ValueType

# Store locations
from .locations import AppIdentity, binary_prefs_path, inspector_home, plist_path, registry_key_path

# Readers
from .readers import (
    RESERVED_KEYS,
    BinaryPrefsReader,
    PlistReader,
    PrefsReader,
    RegistryReader,
    backend_for_platform,
    decode_prefs,
    encode_records,
    list_preferences,
    select_reader,
)

# Key policy + sidecar registry
from .uniqify import uniqify
from .sidecar import RegisteredPrefs, SidecarStore
from .settings import SettingsStore

__all__ = [
    "__version__",
    # errors
    "PrefsInspectorError",
    "StoreUnavailable",
    "UnrecognizedEncoding",
    "ValueTypeMismatch",
    # data model
    "PlayerPref",
    "ValueType",
    # locations
    "AppIdentity",
    "binary_prefs_path",
    "inspector_home",
    "plist_path",
    "registry_key_path",
    # readers
    "RESERVED_KEYS",
    "PrefsReader",
    "RegistryReader",
    "PlistReader",
    "BinaryPrefsReader",
    "backend_for_platform",
    "select_reader",
    "list_preferences",
    "decode_prefs",
    "encode_records",
    # keys / registry
    "uniqify",
    "RegisteredPrefs",
    "SidecarStore",
    "SettingsStore",
]
